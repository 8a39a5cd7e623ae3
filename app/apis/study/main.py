from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.apis.deps import CurrentUser
from app.core.config import settings
from app.core.db.base import get_session
from app.core.db_services import FlashcardSetService
from app.core.storage import file_view_url
from app.modules.flashcards.builder import card_key
from app.modules.study.models import SessionStats, StudyCard, StudyState
from app.modules.study.session import (
    StudySession,
    StudySessionNotFound,
    study_manager,
)
from .schemas import (
    ActionRequest,
    KeyRequest,
    SettingsUpdate,
    StartSessionRequest,
    SwipeRequest,
)


router = APIRouter()

BASE = f"/{settings.app.version}/study/sessions"


def _load(session_id: str, user_id: int) -> StudySession:
    try:
        return study_manager.get(session_id, user_id=user_id)
    except StudySessionNotFound:
        raise HTTPException(status_code=404, detail="Study session not found")


@router.post(
    BASE,
    response_model=StudyState,
    status_code=status.HTTP_201_CREATED,
    tags=["study"],
)
async def start_session(
    req: StartSessionRequest,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> StudyState:
    s = await FlashcardSetService(session).get_visible_set(req.set_id, user_id=user.id)
    if not s:
        raise HTTPException(status_code=404, detail="Flashcard set not found")
    if not s.flashcards:
        raise HTTPException(status_code=400, detail="Flashcard set has no cards")

    cards = [
        StudyCard(
            id=card_key(c.card_number),
            card_number=c.card_number,
            front_image_url=file_view_url(c.front_image_id),
            back_image_url=file_view_url(c.back_image_id),
        )
        for c in s.flashcards
    ]
    study = study_manager.create(
        user_id=user.id,
        set_id=s.id,
        title=s.title,
        cards=cards,
        settings=req.settings,
    )
    return study.to_state()


@router.get(f"{BASE}/{{session_id}}", response_model=StudyState, tags=["study"])
async def get_session_state(session_id: str, user: CurrentUser) -> StudyState:
    return _load(session_id, user.id).to_state()


@router.post(f"{BASE}/{{session_id}}/actions", response_model=StudyState, tags=["study"])
async def apply_action(
    session_id: str, req: ActionRequest, user: CurrentUser
) -> StudyState:
    study = _load(session_id, user.id)
    study.apply(req.action, req.value)
    return study.to_state()


@router.post(f"{BASE}/{{session_id}}/keys", response_model=StudyState, tags=["study"])
async def press_key(session_id: str, req: KeyRequest, user: CurrentUser) -> StudyState:
    study = _load(session_id, user.id)
    study.handle_key(req.key)
    return study.to_state()


@router.post(f"{BASE}/{{session_id}}/swipe", response_model=StudyState, tags=["study"])
async def swipe(session_id: str, req: SwipeRequest, user: CurrentUser) -> StudyState:
    study = _load(session_id, user.id)
    study.handle_swipe(req.offset_x, req.offset_y, req.velocity_x, req.velocity_y)
    return study.to_state()


@router.patch(
    f"{BASE}/{{session_id}}/settings", response_model=StudyState, tags=["study"]
)
async def update_settings(
    session_id: str, req: SettingsUpdate, user: CurrentUser
) -> StudyState:
    study = _load(session_id, user.id)
    study.update_settings(**req.model_dump(exclude_none=True))
    return study.to_state()


@router.get(
    f"{BASE}/{{session_id}}/summary", response_model=SessionStats, tags=["study"]
)
async def session_summary(session_id: str, user: CurrentUser) -> SessionStats:
    return _load(session_id, user.id).stats()


@router.delete(f"{BASE}/{{session_id}}", response_model=SessionStats, tags=["study"])
async def end_session(session_id: str, user: CurrentUser) -> SessionStats:
    try:
        study = study_manager.end(session_id, user_id=user.id)
    except StudySessionNotFound:
        raise HTTPException(status_code=404, detail="Study session not found")
    return study.stats()
