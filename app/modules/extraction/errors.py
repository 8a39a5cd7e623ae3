from __future__ import annotations

from typing import Optional


class ExtractionError(Exception):
    """The uploaded deck could not be opened or read at all."""

    def __init__(self, message: str, *, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    def to_details(self) -> dict:
        return {"message": self.message, "code": self.code}
