from __future__ import annotations

import json
from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import Response
from pydantic import TypeAdapter, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.apis.deps import CurrentUser, OptionalUser
from app.core.config import settings
from app.core.db.base import get_session
from app.core.db.schemas.flashcards import FlashcardSet as DBSet
from app.core.db_services import LIST_LIMIT, FlashcardSetService
from app.core.storage import StorageError, file_view_url
from app.modules.extraction import ExtractionError
from app.modules.flashcards.catalog import (
    ALL_STANDARDS,
    group_sets,
    standard_label,
    subject_label,
)
from app.modules.flashcards.creator import (
    FlashcardSetCreator,
    FlashcardSetValidationError,
    NoSlidesError,
    SetDraft,
    save_message,
)
from app.modules.flashcards.models.flashcards import TextFlashcard
from app.modules.flashcards.presentation import (
    PPTX_MEDIA_TYPE,
    DeckMetadata,
    build_flashcard_presentation,
    export_filename,
)
from .schemas import (
    CatalogResponse,
    CreateSetRequest,
    CreateSetResponse,
    ExportFromJsonRequest,
    ExportRequest,
    FlashcardRead,
    FlashcardSetList,
    FlashcardSetRead,
    FlashcardSetRow,
    FlashcardSetSummary,
    SlideRead,
    SlidesResponse,
    StandardGroupRead,
    SubjectGroupRead,
)


router = APIRouter()


def _row(s: DBSet) -> FlashcardSetRow:
    return FlashcardSetRow(
        id=s.id,
        title=s.title,
        standard=s.standard,
        subject=s.subject,
        created_by_name=s.created_by_name,
        flashcard_count=s.flashcard_count,
        published=s.published,
        created_at=s.created_at.isoformat() if s.created_at else None,
    )


def _summary(s: DBSet) -> FlashcardSetSummary:
    return FlashcardSetSummary(
        **_row(s).model_dump(),
        description=s.description,
        standard_label=standard_label(s.standard),
        subject_label=subject_label(s.standard, s.subject),
        thumbnail_id=s.thumbnail_id,
        thumbnail_url=file_view_url(s.thumbnail_id),
    )


def _pptx_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type=PPTX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    f"/{settings.app.version}/flashcards/slides",
    response_model=SlidesResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["flashcards"],
)
async def process_slides(
    user: CurrentUser,
    file: UploadFile = File(...),
    session: AsyncSession = Depends(get_session),
) -> SlidesResponse:
    filename = (file.filename or "").lower()
    if not filename.endswith(".pdf") and file.content_type != "application/pdf":
        raise HTTPException(status_code=400, detail="Please upload a PDF file only")

    data = await file.read()
    try:
        slides = await FlashcardSetCreator(session).process_pdf(data, user=user)
    except NoSlidesError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ExtractionError as e:
        raise HTTPException(
            status_code=500,
            detail={"error": "Failed to extract PDF", "details": e.to_details()},
        )
    except StorageError as e:
        raise HTTPException(status_code=413, detail=str(e))

    return SlidesResponse(
        slides=[
            SlideRead(**s.model_dump(), image_url=file_view_url(s.image_id))
            for s in slides
        ],
        message=f"Extracted {len(slides)} slides as images",
    )


@router.post(
    f"/{settings.app.version}/flashcards/sets",
    response_model=CreateSetResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["flashcards"],
)
async def create_flashcard_set(
    req: CreateSetRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> CreateSetResponse:
    draft = SetDraft(
        title=req.title,
        description=req.description,
        standard=req.standard,
        subject=req.subject,
        slides=req.slides,
        thumbnail_id=req.thumbnail_id,
    )
    try:
        db_set = await FlashcardSetCreator(session).save(
            draft, user=user, publish=req.publish
        )
    except FlashcardSetValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return CreateSetResponse(set=_summary(db_set), message=save_message(req.publish))


@router.get(
    f"/{settings.app.version}/flashcards/sets",
    response_model=FlashcardSetList,
    tags=["flashcards"],
)
async def list_flashcard_sets(
    search: str = "",
    standard: str = ALL_STANDARDS,
    view: Literal["grid", "list"] = "grid",
    limit: int = LIST_LIMIT,
    session: AsyncSession = Depends(get_session),
) -> FlashcardSetList:
    sets = await FlashcardSetService(session).list_published(
        search=search.strip(), standard=standard, limit=limit
    )
    items = [_summary(s) for s in sets] if view == "grid" else [_row(s) for s in sets]
    return FlashcardSetList(view=view, total=len(items), items=items)


@router.get(
    f"/{settings.app.version}/flashcards/catalog",
    response_model=CatalogResponse,
    tags=["flashcards"],
)
async def flashcard_catalog(
    search: str = "",
    standard: str = ALL_STANDARDS,
    session: AsyncSession = Depends(get_session),
) -> CatalogResponse:
    sets = await FlashcardSetService(session).list_published(
        search=search.strip(), standard=standard
    )
    groups = group_sets(sets)
    return CatalogResponse(
        total=len(sets),
        standards=[
            StandardGroupRead(
                standard=g.standard,
                label=g.label,
                subjects=[
                    SubjectGroupRead(
                        subject=sg.subject,
                        label=sg.label,
                        sets=[_summary(s) for s in sg.sets],
                    )
                    for sg in g.subjects
                ],
            )
            for g in groups
        ],
    )


@router.get(
    f"/{settings.app.version}/flashcards/sets/mine",
    response_model=list[FlashcardSetSummary],
    tags=["flashcards"],
)
async def list_my_flashcard_sets(
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> list[FlashcardSetSummary]:
    sets = await FlashcardSetService(session).list_for_user(user.id)
    return [_summary(s) for s in sets]


@router.get(
    f"/{settings.app.version}/flashcards/sets/{{set_id}}",
    response_model=FlashcardSetRead,
    tags=["flashcards"],
)
async def get_flashcard_set(
    set_id: int,
    user: OptionalUser,
    session: AsyncSession = Depends(get_session),
) -> FlashcardSetRead:
    s = await FlashcardSetService(session).get_visible_set(
        set_id, user_id=user.id if user else None
    )
    if not s:
        raise HTTPException(status_code=404, detail="Flashcard set not found")

    return FlashcardSetRead(
        **_summary(s).model_dump(),
        title_image_id=s.title_image_id,
        title_image_url=file_view_url(s.title_image_id),
        flashcards=[
            FlashcardRead(
                id=c.id,
                card_number=c.card_number,
                front_image_id=c.front_image_id,
                back_image_id=c.back_image_id,
                front_image_url=file_view_url(c.front_image_id),
                back_image_url=file_view_url(c.back_image_id),
            )
            for c in s.flashcards
        ],
    )


@router.post(f"/{settings.app.version}/flashcards/export/pptx", tags=["flashcards"])
async def export_pptx(req: ExportRequest) -> Response:
    if not req.flashcards:
        raise HTTPException(status_code=400, detail="No flashcards provided")

    meta = req.metadata
    metadata = DeckMetadata(
        title=meta.title,
        total_count=meta.total_count if meta.total_count is not None else len(req.flashcards),
        generated_date=meta.generated_date or date.today().isoformat(),
        username=meta.username,
    )
    content = build_flashcard_presentation(req.flashcards, metadata)
    return _pptx_response(content, export_filename(metadata))


@router.post(
    f"/{settings.app.version}/flashcards/export/pptx/from-json", tags=["flashcards"]
)
async def export_pptx_from_json(req: ExportFromJsonRequest, user: OptionalUser) -> Response:
    try:
        cards = TypeAdapter(list[TextFlashcard]).validate_python(json.loads(req.json_data))
    except (json.JSONDecodeError, ValidationError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid flashcard JSON: {e}")
    if not cards:
        raise HTTPException(status_code=400, detail="No flashcards provided")

    metadata = DeckMetadata(
        title=req.title,
        total_count=len(cards),
        generated_date=date.today().isoformat(),
        username=(user.name or str(user.email)) if user else "",
    )
    content = build_flashcard_presentation(cards, metadata)
    return _pptx_response(content, export_filename(metadata))
