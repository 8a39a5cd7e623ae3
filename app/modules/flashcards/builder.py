"""Pair uploaded slides into front/back flashcards."""

from __future__ import annotations

from typing import Iterable

from app.core.logging import get_logger
from app.modules.extraction.models import SlideKind
from app.modules.flashcards.models.flashcards import (
    ExtractedSlide,
    Flashcard,
    FlashcardData,
)


logger = get_logger(__name__)


def card_key(card_number: int) -> str:
    return f"card-{card_number}"


def build_flashcard_data(slides: Iterable[ExtractedSlide]) -> FlashcardData:
    """Zip front and back slides by position.

    The first title slide becomes the set cover. Each front slide yields one
    card; a front without a matching back keeps an empty back image id, and
    surplus backs are dropped.
    """
    slides = list(slides)
    title = next((s for s in slides if s.kind == SlideKind.TITLE), None)
    fronts = [s for s in slides if s.kind == SlideKind.FRONT]
    backs = [s for s in slides if s.kind == SlideKind.BACK]

    if len(fronts) != len(backs):
        logger.warning(
            f"Unbalanced deck: {len(fronts)} front slides, {len(backs)} back slides"
        )

    flashcards = []
    for index, front in enumerate(fronts):
        back = backs[index] if index < len(backs) else None
        flashcards.append(
            Flashcard(
                id=card_key(index + 1),
                front_image_id=front.image_id,
                back_image_id=back.image_id if back else "",
                card_number=index + 1,
            )
        )

    return FlashcardData(
        title_image_id=title.image_id if title else "",
        flashcards=flashcards,
    )
