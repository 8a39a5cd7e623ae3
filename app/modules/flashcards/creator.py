"""Flashcard-set creation flow.

Turns an uploaded deck into stored slide images, then pairs the slides and
persists the assembled set as a draft or a published set. Mirrors the two
steps of the authoring screen: process the file first, save the set after the
author has filled in its details.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.db.schemas.auth import User
from app.core.db.schemas.flashcards import FlashcardSet
from app.core.db_services import FlashcardSetService, StoredFileService
from app.core.logging import get_logger
from app.core.storage import decode_data_url
from app.modules.extraction import ExtractedImage, extract_pdf_slides
from app.modules.flashcards.builder import build_flashcard_data
from app.modules.flashcards.catalog import (
    is_known_standard,
    is_valid_subject,
)
from app.modules.flashcards.models.flashcards import ExtractedSlide


logger = get_logger(__name__)

PUBLISHED_MESSAGE = "Flashcard set published successfully!"
DRAFT_MESSAGE = "Flashcard set saved as draft!"


class FlashcardSetValidationError(ValueError):
    """The set cannot be saved as submitted; the message is user-facing."""


class NoSlidesError(FlashcardSetValidationError):
    pass


@dataclass
class SetDraft:
    title: str
    description: str = ""
    standard: str = ""
    subject: str = ""
    slides: list[ExtractedSlide] = field(default_factory=list)
    thumbnail_id: Optional[str] = None


def validate_draft(draft: SetDraft) -> None:
    """Check the draft in the order the author fills in the form."""
    if not (draft.title or "").strip():
        raise FlashcardSetValidationError("Please enter a title")
    if not draft.standard or not is_known_standard(draft.standard):
        raise FlashcardSetValidationError("Please select a standard")
    if not draft.subject or not is_valid_subject(draft.standard, draft.subject):
        raise FlashcardSetValidationError("Please select a subject")
    if not draft.slides:
        raise FlashcardSetValidationError(
            "Please upload and process a presentation file"
        )


class FlashcardSetCreator:
    """Orchestrates extraction, image upload, pairing and persistence."""

    def __init__(self, session: AsyncSession, *, bucket: str | None = None) -> None:
        self.session = session
        self.bucket = bucket or settings.storage.bucket
        self.files = StoredFileService(session)
        self.sets = FlashcardSetService(session)

    async def upload_images(
        self, images: Sequence[ExtractedImage], *, user_id: int
    ) -> list[ExtractedSlide]:
        """Upload rendered slides in order; any failure aborts the batch."""
        slides: list[ExtractedSlide] = []
        total = len(images)
        for i, image in enumerate(images):
            decoded = decode_data_url(image.data_url)
            record = await self.files.create_file(
                bucket=self.bucket,
                data=decoded.data,
                filename=f"slide-{i}.png",
                content_type=decoded.content_type,
                user_id=user_id,
            )
            slides.append(
                ExtractedSlide(slide_number=i, image_id=record.id, kind=image.kind)
            )
            logger.debug(f"Uploading images... {i + 1}/{total}")
        return slides

    async def process_pdf(self, data: bytes, *, user: User) -> list[ExtractedSlide]:
        images = await asyncio.to_thread(extract_pdf_slides, data)
        if not images:
            raise NoSlidesError("No images found in PDF")
        try:
            slides = await self.upload_images(images, user_id=user.id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            self.files.discard_written()
            raise
        self.files.written = []
        logger.info(
            f"Extracted {len(slides)} slides as images", extra={"user_id": user.id}
        )
        return slides

    async def save(
        self, draft: SetDraft, *, user: User, publish: bool = False
    ) -> FlashcardSet:
        validate_draft(draft)

        referenced = [s.image_id for s in draft.slides]
        if draft.thumbnail_id:
            referenced.append(draft.thumbnail_id)
        missing = await self.files.missing_ids(referenced)
        if missing:
            raise FlashcardSetValidationError(
                f"Unknown file id(s): {', '.join(sorted(missing))}"
            )

        data = build_flashcard_data(draft.slides)
        return await self.sets.create_set(
            user_id=user.id,
            created_by_name=user.name or str(user.email),
            title=draft.title.strip(),
            description=(draft.description or "").strip(),
            standard=draft.standard,
            subject=draft.subject,
            data=data,
            thumbnail_id=draft.thumbnail_id,
            published=publish,
        )


def save_message(published: bool) -> str:
    return PUBLISHED_MESSAGE if published else DRAFT_MESSAGE
