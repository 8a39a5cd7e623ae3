from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.apis.deps import CurrentUser
from app.core.config import settings
from app.core.db.base import get_session
from app.core.db.schemas.files import StoredFile
from app.core.db_services import StoredFileService
from app.core.storage import StorageError, file_view_url, storage
from .schemas import StoredFileRead


router = APIRouter()


def _to_read(record: StoredFile) -> StoredFileRead:
    return StoredFileRead(
        id=record.id,
        bucket=record.bucket,
        filename=record.filename,
        content_type=record.content_type,
        size=record.size,
        created_at=record.created_at.isoformat() if record.created_at else None,
        view_url=file_view_url(record.id),
    )


@router.post(
    f"/{settings.app.version}/files",
    response_model=StoredFileRead,
    status_code=status.HTTP_201_CREATED,
    tags=["files"],
)
async def upload_file(
    user: CurrentUser,
    file: UploadFile = File(...),
    bucket: Optional[str] = Form(None),
    session: AsyncSession = Depends(get_session),
) -> StoredFileRead:
    content_type = file.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Please upload an image file")

    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="No file provided")

    files = StoredFileService(session)
    try:
        record = await files.create_file(
            bucket=bucket or settings.storage.bucket,
            data=data,
            filename=file.filename or "upload",
            content_type=content_type,
            user_id=user.id,
        )
        await session.commit()
    except StorageError as e:
        raise HTTPException(status_code=413, detail=str(e))
    except Exception:
        await session.rollback()
        files.discard_written()
        raise
    return _to_read(record)


@router.get(
    f"/{settings.app.version}/files/{{file_id}}",
    response_model=StoredFileRead,
    tags=["files"],
)
async def get_file(
    file_id: str, session: AsyncSession = Depends(get_session)
) -> StoredFileRead:
    record = await StoredFileService(session).get_file(file_id)
    if not record:
        raise HTTPException(status_code=404, detail="File not found")
    return _to_read(record)


@router.get(f"/{settings.app.version}/files/{{file_id}}/view", tags=["files"])
async def view_file(file_id: str, session: AsyncSession = Depends(get_session)):
    record = await StoredFileService(session).get_file(file_id)
    if not record:
        raise HTTPException(status_code=404, detail="File not found")
    try:
        path = storage.resolve(record.path)
    except StorageError:
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(path, media_type=record.content_type)
