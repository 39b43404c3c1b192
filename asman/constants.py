"""Fixed catalog tables: classes, subjects, teaching styles and demo sessions."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from asman.enums import Subject, TeachingStyle

# ---------------------------------------------------------------------------
# Classes
# ---------------------------------------------------------------------------

MIN_CLASS_LEVEL = 1
MAX_CLASS_LEVEL = 10

AGE_RANGES: dict[int, str] = {
    1: "6-7",
    2: "7-8",
    3: "8-9",
    4: "9-10",
    5: "10-11",
    6: "11-12",
    7: "12-13",
    8: "13-14",
    9: "14-15",
    10: "15-16",
}

DEFAULT_AGE_RANGE = "6-16"

CLASS_DESCRIPTIONS: dict[int, str] = {
    1: "Foundation learning with play",
    2: "Basic concepts and skills",
    3: "Building core knowledge",
    4: "Developing understanding",
    5: "Expanding horizons",
    6: "Middle school foundation",
    7: "Advanced concepts",
    8: "Critical thinking",
    9: "Board exam preparation",
    10: "Comprehensive mastery",
}

# ---------------------------------------------------------------------------
# Subjects
# ---------------------------------------------------------------------------

SUBJECTS: dict[Subject, dict[str, str]] = {
    Subject.MATHEMATICS: {
        "name": "Mathematics",
        "description": "Numbers, patterns, and problem-solving",
    },
    Subject.SCIENCE: {
        "name": "Science",
        "description": "Experiments, nature, and discovery",
    },
    Subject.ENGLISH: {
        "name": "English",
        "description": "Reading, writing, and communication",
    },
    Subject.HINDI: {
        "name": "Hindi",
        "description": "भाषा, साहित्य और संस्कृति",
    },
    Subject.SOCIAL_STUDIES: {
        "name": "Social Studies",
        "description": "History, geography, and civics",
    },
    Subject.ART: {
        "name": "Art",
        "description": "Creativity, colors, and expression",
    },
}

# ---------------------------------------------------------------------------
# Teaching styles
# ---------------------------------------------------------------------------

TEACHING_STYLES: dict[TeachingStyle, dict[str, str]] = {
    TeachingStyle.CHINESE: {
        "name": "Chinese Style",
        "description": "Drills & Practice",
        "approach": "Repetitive practice and mastery through structured drills",
    },
    TeachingStyle.JAPANESE: {
        "name": "Japanese Style",
        "description": "Discipline & Structure",
        "approach": "Step-by-step progression with disciplined methodology",
    },
    TeachingStyle.AMERICAN: {
        "name": "American Style",
        "description": "Curiosity-driven Learning",
        "approach": "Question-based exploration and discovery learning",
    },
    TeachingStyle.EUROPEAN: {
        "name": "European Style",
        "description": "Creativity & Exploration",
        "approach": "Creative expression and collaborative activities",
    },
}

STYLE_DESCRIPTIONS: dict[TeachingStyle, str] = {
    TeachingStyle.CHINESE: "Step-by-step practice with repetition for mastery",
    TeachingStyle.JAPANESE: "Structured approach with respect for process and discipline",
    TeachingStyle.AMERICAN: "Encourage questions and exploration-based discovery",
    TeachingStyle.EUROPEAN: "Creative expression through collaborative group activities",
}

STYLE_BENEFITS: dict[TeachingStyle, str] = {
    TeachingStyle.CHINESE: "builds accuracy and confidence through regular practice",
    TeachingStyle.JAPANESE: "develops patience, focus and careful reasoning",
    TeachingStyle.AMERICAN: "grows curiosity and independent thinking",
    TeachingStyle.EUROPEAN: "nurtures creativity and teamwork",
}

STYLE_REGIONS: dict[TeachingStyle, str] = {
    TeachingStyle.CHINESE: "China",
    TeachingStyle.JAPANESE: "Japan",
    TeachingStyle.AMERICAN: "USA",
    TeachingStyle.EUROPEAN: "Europe",
}

GLOBAL_REGIONS: tuple[str, ...] = (
    "China",
    "Japan",
    "USA",
    "Europe",
    "Singapore",
    "Finland",
)

# ---------------------------------------------------------------------------
# Uploads (descriptive only; capture and validation happen upstream)
# ---------------------------------------------------------------------------

MAX_UPLOAD_BYTES = 10 * 1024 * 1024

ALLOWED_UPLOAD_TYPES: frozenset[str] = frozenset(
    {
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "text/plain",
        "audio/mpeg",
        "audio/wav",
        "audio/webm",
    }
)

# ---------------------------------------------------------------------------
# Demo sessions seeded into the history at startup
# ---------------------------------------------------------------------------

DEMO_LESSONS: list[dict[str, Any]] = [
    {
        "id": "demo-1",
        "title": "Addition with Fun - Class 2 Math",
        "class_level": 2,
        "subject": Subject.MATHEMATICS,
        "topic": "Addition",
        "teaching_style": TeachingStyle.CHINESE,
        "age": timedelta(minutes=30),
    },
    {
        "id": "demo-2",
        "title": "How Plants Grow - Class 5 Science",
        "class_level": 5,
        "subject": Subject.SCIENCE,
        "topic": "Plant Growth",
        "teaching_style": TeachingStyle.EUROPEAN,
        "age": timedelta(hours=2),
    },
    {
        "id": "demo-3",
        "title": "Animal Sounds - Class 3 English",
        "class_level": 3,
        "subject": Subject.ENGLISH,
        "topic": "Animals",
        "teaching_style": TeachingStyle.AMERICAN,
        "age": timedelta(days=1),
    },
]


def subject_name(subject: Subject | str) -> str:
    """Return the display name for *subject*, tolerating raw string ids."""
    try:
        return SUBJECTS[Subject(subject)]["name"]
    except ValueError:
        return str(subject).replace("-", " ").title()


def style_name(style: TeachingStyle | str) -> str:
    """Return the display name for *style*, e.g. ``"Chinese Style"``."""
    try:
        return TEACHING_STYLES[TeachingStyle(style)]["name"]
    except ValueError:
        return f"{str(style).title()} Style"
