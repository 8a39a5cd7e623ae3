from .flashcards import ExtractedSlide, Flashcard, FlashcardData, TextFlashcard

__all__ = [
    "ExtractedSlide",
    "Flashcard",
    "FlashcardData",
    "TextFlashcard",
]
