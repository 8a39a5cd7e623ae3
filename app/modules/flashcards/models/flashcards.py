"""Pydantic models for image flashcards assembled from extracted slides.

Field aliases keep the camelCase shape the browser client stores and reads
(``frontImageId``, ``cardNumber`` and so on).
"""

from pydantic import BaseModel, ConfigDict, Field

from app.modules.extraction.models import SlideKind


class ExtractedSlide(BaseModel):
    """A slide after its image was uploaded to storage."""

    model_config = ConfigDict(populate_by_name=True)

    slide_number: int = Field(alias="slideNumber")
    image_id: str = Field(alias="imageId")
    kind: SlideKind = Field(alias="type")


class Flashcard(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    front_image_id: str = Field(alias="frontImageId")
    back_image_id: str = Field(default="", alias="backImageId")
    card_number: int = Field(alias="cardNumber")


class FlashcardData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title_image_id: str = Field(default="", alias="titleImageId")
    flashcards: list[Flashcard] = Field(default_factory=list)


class TextFlashcard(BaseModel):
    """Plain text card used for presentation export."""

    front: str
    back: str
