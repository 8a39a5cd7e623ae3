"""Quick DB inspector for flashcards data.

Summarizes flashcard sets, stored files and a sample set's card pairing, and
flags cards whose image ids point at no stored file.

Usage:
  uv run scripts/inspect_flashcards.py
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Ensure project root is on sys.path so `app` package imports resolve
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from sqlalchemy import select, func
from sqlalchemy.orm import selectinload

from app.core.db.base import session_scope
from app.core.db.schemas.files import StoredFile
from app.core.db.schemas.flashcards import FlashcardSet, Flashcard
from app.core.db_services import StoredFileService


async def main() -> int:
    async with session_scope() as session:
        total_sets = (
            await session.execute(select(func.count(FlashcardSet.id)))
        ).scalar() or 0
        published = (
            await session.execute(
                select(func.count(FlashcardSet.id)).where(
                    FlashcardSet.published.is_(True)
                )
            )
        ).scalar() or 0
        total_cards = (
            await session.execute(select(func.count(Flashcard.id)))
        ).scalar() or 0
        total_files, total_bytes = (
            await session.execute(
                select(func.count(StoredFile.id), func.coalesce(func.sum(StoredFile.size), 0))
            )
        ).one()

        print("Flashcards DB summary:")
        print(f"- Flashcard sets: {total_sets} ({published} published)")
        print(f"- Flashcards: {total_cards}")
        print(f"- Stored files: {total_files} ({total_bytes} bytes)")

        recent_q = (
            select(FlashcardSet)
            .options(selectinload(FlashcardSet.flashcards))
            .order_by(FlashcardSet.created_at.desc())
            .limit(5)
        )
        recent_sets = (await session.execute(recent_q)).scalars().all()

        if not recent_sets:
            print("- No flashcard sets found.")
            return 0

        print("\nRecent sets:")
        for s in recent_sets:
            state = "published" if s.published else "draft"
            print(
                f"  • ID {s.id} | title={s.title!r} | {s.standard}/{s.subject} | "
                f"cards={len(s.flashcards)} (recorded {s.flashcard_count}) | {state}"
            )

        print("\nSample cards (first recent set):")
        first = recent_sets[0]
        for c in first.flashcards[:3]:
            print(
                f"  - #{c.card_number} front={c.front_image_id} "
                f"back={c.back_image_id or '-'}"
            )

        referenced = [first.title_image_id]
        for c in first.flashcards:
            referenced.extend([c.front_image_id, c.back_image_id])
        missing = await StoredFileService(session).missing_ids(referenced)
        if missing:
            print(f"\nMissing stored files for set {first.id}: {sorted(missing)}")
        else:
            print(f"\nAll images for set {first.id} are present.")

        return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
