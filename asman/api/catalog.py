"""Catalog endpoint: GET /catalog lists classes, subjects and teaching styles."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from asman.constants import (
    AGE_RANGES,
    CLASS_DESCRIPTIONS,
    SUBJECTS,
    TEACHING_STYLES,
)

router = APIRouter(tags=["catalog"])


@router.get("/catalog", summary="Classes, subjects and teaching styles")
async def get_catalog() -> dict[str, Any]:
    """Return the fixed selection tables the wizard steps choose from."""
    return {
        "classes": [
            {
                "id": level,
                "name": f"Class {level}",
                "ageRange": age_range,
                "description": CLASS_DESCRIPTIONS.get(level, ""),
            }
            for level, age_range in AGE_RANGES.items()
        ],
        "subjects": [
            {"id": subject.value, **info} for subject, info in SUBJECTS.items()
        ],
        "teachingStyles": [
            {"id": style.value, **info} for style, info in TEACHING_STYLES.items()
        ],
    }
