"""Shared camelCase model base and re-exported enumerations."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from asman.enums import Language, Subject, TeachingStyle, Variant

__all__ = ["CamelModel", "Language", "Subject", "TeachingStyle", "Variant"]


class CamelModel(BaseModel):
    """Base model exposing camelCase aliases while keeping snake_case attributes."""

    model_config = ConfigDict(
        strict=False,
        populate_by_name=True,
        alias_generator=to_camel,
    )
