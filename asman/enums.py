"""Fixed enumerations shared by the catalog, schemas and services."""

from enum import Enum


class Subject(str, Enum):
    """The six subjects a lesson can be generated for."""

    MATHEMATICS = "mathematics"
    SCIENCE = "science"
    ENGLISH = "english"
    HINDI = "hindi"
    SOCIAL_STUDIES = "social-studies"
    ART = "art"


class TeachingStyle(str, Enum):
    """Pedagogical framings a lesson can be written in."""

    CHINESE = "chinese"
    JAPANESE = "japanese"
    AMERICAN = "american"
    EUROPEAN = "european"


class Variant(str, Enum):
    """Lesson depth/scope selection."""

    STANDARD = "standard"
    GLOBAL_ENHANCED = "global-enhanced"


class Language(str, Enum):
    """Render-time language flag for the glossary overlay."""

    ENGLISH = "en"
    HINDI = "hi"
