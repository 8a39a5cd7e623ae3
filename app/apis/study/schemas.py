from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from app.modules.study.models import StudyAction, ViewerSettings


class StartSessionRequest(BaseModel):
    set_id: int
    settings: ViewerSettings = Field(default_factory=ViewerSettings)


class ActionRequest(BaseModel):
    action: StudyAction
    value: Optional[int] = Field(default=None, description="Card index for go_to")


class KeyRequest(BaseModel):
    key: str


class SwipeRequest(BaseModel):
    offset_x: float = 0.0
    offset_y: float = 0.0
    velocity_x: float = 0.0
    velocity_y: float = 0.0


class SettingsUpdate(BaseModel):
    is_vertical: Optional[bool] = None
    is_randomized: Optional[bool] = None
    auto_play: Optional[bool] = None
    auto_play_speed: Optional[int] = Field(default=None, ge=1, le=60)
