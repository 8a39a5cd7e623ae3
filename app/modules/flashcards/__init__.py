"""Flashcards module exports."""

from .models.flashcards import ExtractedSlide, Flashcard, FlashcardData, TextFlashcard
from .builder import build_flashcard_data

__all__ = [
    "ExtractedSlide",
    "Flashcard",
    "FlashcardData",
    "TextFlashcard",
    "build_flashcard_data",
]
