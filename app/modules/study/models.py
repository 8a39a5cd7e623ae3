"""Pydantic models for study sessions.

Sessions are ephemeral; nothing here is persisted.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class CardStatus(str, Enum):
    UNKNOWN = "unknown"
    KNOWN = "known"
    DIFFICULT = "difficult"


class StudyAction(str, Enum):
    FLIP = "flip"
    NEXT = "next"
    PREV = "prev"
    GO_TO = "go_to"
    MARK_KNOWN = "mark_known"
    MARK_DIFFICULT = "mark_difficult"
    TOGGLE_BOOKMARK = "toggle_bookmark"
    ZOOM_IN = "zoom_in"
    ZOOM_OUT = "zoom_out"
    RESET_ZOOM = "reset_zoom"
    SHUFFLE = "shuffle"
    TOGGLE_TIMER = "toggle_timer"
    RESTART = "restart"


class ViewerSettings(BaseModel):
    is_vertical: bool = True
    is_randomized: bool = False
    auto_play: bool = False
    auto_play_speed: int = Field(default=5, ge=1, le=60, description="Seconds per card")


class StudyCard(BaseModel):
    id: str
    card_number: int
    front_image_url: Optional[str] = None
    back_image_url: Optional[str] = None


class SessionStats(BaseModel):
    total: int
    known: int
    difficult: int
    unknown: int
    bookmarked: int
    study_time_seconds: int
    study_time: str
    progress_percent: float


class StudyState(BaseModel):
    id: str
    set_id: int
    title: str
    settings: ViewerSettings
    current_index: int
    current_card: Optional[StudyCard] = None
    is_flipped: bool
    zoom_level: float
    timer_active: bool
    show_summary: bool
    order: list[str] = Field(default_factory=list)
    bookmarks: list[str] = Field(default_factory=list)
    card_status: dict[str, CardStatus] = Field(default_factory=dict)
    stats: SessionStats
