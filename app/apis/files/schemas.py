from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class StoredFileRead(BaseModel):
    id: str
    bucket: str
    filename: str
    content_type: str
    size: int
    created_at: Optional[str] = None
    view_url: str
