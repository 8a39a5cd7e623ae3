"""Models for slide images produced by the PDF/PPTX extractors."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SlideKind(str, Enum):
    TITLE = "title"
    FRONT = "front"
    BACK = "back"


def classify_slide(index: int) -> SlideKind:
    """Slide 0 is the title; afterwards odd indexes are fronts, even are backs."""
    if index == 0:
        return SlideKind.TITLE
    return SlideKind.FRONT if index % 2 == 1 else SlideKind.BACK


class ExtractedImage(BaseModel):
    """A rendered slide before upload, carried as a data URL."""

    model_config = ConfigDict(populate_by_name=True)

    slide_number: int = Field(alias="slideNumber")
    data_url: str = Field(alias="dataUrl")
    kind: SlideKind = Field(alias="type")


class ExtractionResult(BaseModel):
    images: list[ExtractedImage] = Field(default_factory=list)
