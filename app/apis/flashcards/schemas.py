from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from app.modules.flashcards.models.flashcards import ExtractedSlide, TextFlashcard


class SlideRead(ExtractedSlide):
    image_url: Optional[str] = Field(default=None, alias="imageUrl")


class SlidesResponse(BaseModel):
    slides: list[SlideRead] = Field(default_factory=list)
    message: str


class CreateSetRequest(BaseModel):
    title: str = ""
    description: str = ""
    standard: str = ""
    subject: str = ""
    thumbnail_id: Optional[str] = None
    slides: list[ExtractedSlide] = Field(default_factory=list)
    publish: bool = False


class FlashcardRead(BaseModel):
    id: int
    card_number: int
    front_image_id: str
    back_image_id: str
    front_image_url: Optional[str] = None
    back_image_url: Optional[str] = None


class FlashcardSetRow(BaseModel):
    id: int
    title: str
    standard: str
    subject: str
    created_by_name: str
    flashcard_count: int
    published: bool
    created_at: Optional[str] = None


class FlashcardSetSummary(FlashcardSetRow):
    description: str
    standard_label: Optional[str] = None
    subject_label: Optional[str] = None
    thumbnail_id: Optional[str] = None
    thumbnail_url: Optional[str] = None


class FlashcardSetRead(FlashcardSetSummary):
    title_image_id: str = ""
    title_image_url: Optional[str] = None
    flashcards: list[FlashcardRead] = Field(default_factory=list)


class CreateSetResponse(BaseModel):
    set: FlashcardSetSummary
    message: str


class FlashcardSetList(BaseModel):
    view: Literal["grid", "list"]
    total: int
    items: Union[list[FlashcardSetSummary], list[FlashcardSetRow]]


class SubjectGroupRead(BaseModel):
    subject: str
    label: str
    sets: list[FlashcardSetSummary]


class StandardGroupRead(BaseModel):
    standard: str
    label: str
    subjects: list[SubjectGroupRead]


class CatalogResponse(BaseModel):
    total: int
    standards: list[StandardGroupRead] = Field(default_factory=list)


class ExportMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = "Flashcard Set"
    total_count: Optional[int] = Field(default=None, alias="totalCount")
    generated_date: str = Field(default="", alias="generatedDate")
    username: str = ""


class ExportRequest(BaseModel):
    flashcards: list[TextFlashcard] = Field(default_factory=list)
    metadata: ExportMetadata = Field(default_factory=ExportMetadata)


class ExportFromJsonRequest(BaseModel):
    json_data: str = Field(..., description="JSON array of {front, back} objects")
    title: str = "Flashcard Set"
