from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional
from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.db.base import Base

if TYPE_CHECKING:
    from .auth import User


class FlashcardSet(Base):
    __tablename__ = "flashcard_sets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    standard: Mapped[str] = mapped_column(String, nullable=False, index=True)
    subject: Mapped[str] = mapped_column(String, nullable=False, index=True)
    # Stored file ids; empty string when the deck had no title slide
    title_image_id: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    thumbnail_id: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    created_by_name: Mapped[str] = mapped_column(String, nullable=False, default="")
    published: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, index=True
    )
    flashcard_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
        index=True,
    )

    user: Mapped["User"] = relationship("User", back_populates="flashcard_sets")
    flashcards: Mapped[list["Flashcard"]] = relationship(
        "Flashcard",
        back_populates="flashcard_set",
        cascade="all, delete-orphan",
        order_by="Flashcard.card_number",
    )


class Flashcard(Base):
    __tablename__ = "flashcards"
    __table_args__ = (
        UniqueConstraint(
            "flashcard_set_id",
            "card_number",
            name="uq_flashcard_set_card_number",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    flashcard_set_id: Mapped[int] = mapped_column(
        ForeignKey("flashcard_sets.id"), nullable=False, index=True
    )
    front_image_id: Mapped[str] = mapped_column(String(32), nullable=False)
    back_image_id: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    card_number: Mapped[int] = mapped_column(Integer, nullable=False)

    flashcard_set: Mapped["FlashcardSet"] = relationship(
        "FlashcardSet", back_populates="flashcards"
    )


__all__ = [
    "FlashcardSet",
    "Flashcard",
]
