"""Database service classes for stored files and flashcard sets."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import or_, select
from sqlalchemy.orm import selectinload

from app.core.db.schemas.files import StoredFile
from app.core.db.schemas.flashcards import Flashcard, FlashcardSet
from app.core.logging import get_logger
from app.core.storage import FileStorage, new_file_id, storage as default_storage
from app.modules.flashcards.catalog import ALL_STANDARDS
from app.modules.flashcards.models.flashcards import FlashcardData


logger = get_logger(__name__)

LIST_LIMIT = 100


class StoredFileService:
    """Writes objects to storage and keeps their metadata rows."""

    def __init__(self, session: AsyncSession, storage: FileStorage | None = None):
        self.session = session
        self.storage = storage or default_storage
        # Paths saved by this service and not yet committed
        self.written: list[str] = []

    async def create_file(
        self,
        *,
        bucket: str,
        data: bytes,
        filename: str,
        content_type: str,
        user_id: Optional[int] = None,
    ) -> StoredFile:
        """Store bytes under a fresh id and record them."""
        file_id = new_file_id()
        rel_path = self.storage.save(
            data,
            bucket=bucket,
            file_id=file_id,
            filename=filename,
            content_type=content_type,
        )
        self.written.append(str(rel_path))
        record = StoredFile(
            id=file_id,
            bucket=bucket,
            user_id=user_id,
            filename=filename,
            content_type=content_type,
            size=len(data),
            path=str(rel_path),
        )
        self.session.add(record)
        await self.session.flush()
        return record

    def discard_written(self) -> int:
        """Delete files saved by this service, for a batch that did not commit."""
        removed = sum(1 for path in self.written if self.storage.delete(path))
        if self.written:
            logger.warning(f"Removed {removed} uploaded files after a failed batch")
        self.written = []
        return removed

    async def get_file(self, file_id: str) -> Optional[StoredFile]:
        return await self.session.get(StoredFile, file_id)

    async def missing_ids(self, file_ids: Iterable[str]) -> set[str]:
        """Return the subset of ``file_ids`` with no stored file."""
        wanted = {f for f in file_ids if f}
        if not wanted:
            return set()
        rows = await self.session.execute(
            select(StoredFile.id).where(StoredFile.id.in_(wanted))
        )
        return wanted - set(rows.scalars().all())


class FlashcardSetService:
    """Persists and queries flashcard sets."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_set(
        self,
        *,
        user_id: int,
        created_by_name: str,
        title: str,
        description: str,
        standard: str,
        subject: str,
        data: FlashcardData,
        thumbnail_id: Optional[str] = None,
        published: bool = False,
    ) -> FlashcardSet:
        db_set = FlashcardSet(
            user_id=user_id,
            created_by_name=created_by_name,
            title=title,
            description=description,
            standard=standard,
            subject=subject,
            title_image_id=data.title_image_id,
            thumbnail_id=thumbnail_id,
            published=published,
            flashcard_count=len(data.flashcards),
        )
        db_set.flashcards = [
            Flashcard(
                front_image_id=card.front_image_id,
                back_image_id=card.back_image_id,
                card_number=card.card_number,
            )
            for card in data.flashcards
        ]
        self.session.add(db_set)
        await self.session.commit()
        await self.session.refresh(db_set)
        logger.info(
            f"Saved flashcard set {db_set.id} with {db_set.flashcard_count} cards",
            extra={"user_id": user_id, "set_id": db_set.id},
        )
        return db_set

    async def list_published(
        self,
        *,
        search: str = "",
        standard: str = ALL_STANDARDS,
        limit: int = LIST_LIMIT,
    ) -> Sequence[FlashcardSet]:
        stmt = select(FlashcardSet).where(FlashcardSet.published.is_(True))
        if standard and standard != ALL_STANDARDS:
            stmt = stmt.where(FlashcardSet.standard == standard)
        if search:
            # Plain substring match; % and _ in the query are literal
            stmt = stmt.where(
                or_(
                    FlashcardSet.title.icontains(search, autoescape=True),
                    FlashcardSet.description.icontains(search, autoescape=True),
                    FlashcardSet.created_by_name.icontains(search, autoescape=True),
                )
            )
        stmt = stmt.order_by(FlashcardSet.created_at.desc(), FlashcardSet.id.desc()).limit(
            min(max(1, limit), LIST_LIMIT)
        )
        rows = await self.session.execute(stmt)
        return rows.scalars().all()

    async def list_for_user(self, user_id: int) -> Sequence[FlashcardSet]:
        rows = await self.session.execute(
            select(FlashcardSet)
            .where(FlashcardSet.user_id == user_id)
            .order_by(FlashcardSet.created_at.desc(), FlashcardSet.id.desc())
        )
        return rows.scalars().all()

    async def get_visible_set(
        self, set_id: int, *, user_id: Optional[int]
    ) -> Optional[FlashcardSet]:
        """Load a set with its cards if it is published or owned by ``user_id``."""
        visibility = FlashcardSet.published.is_(True)
        if user_id is not None:
            visibility = or_(visibility, FlashcardSet.user_id == user_id)
        result = await self.session.execute(
            select(FlashcardSet)
            .options(selectinload(FlashcardSet.flashcards))
            .where(FlashcardSet.id == set_id, visibility)
        )
        return result.scalar_one_or_none()
