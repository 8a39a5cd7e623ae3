from __future__ import annotations

from typing import Annotated, Optional

from fastapi import Depends

from app.core.db.schemas.auth import User
from app.core.logging import bind_user
from app.modules.auth import current_active_user, optional_active_user


async def _active_user(user: User = Depends(current_active_user)) -> User:
    bind_user(user.id)
    return user


async def _optional_user(
    user: Optional[User] = Depends(optional_active_user),
) -> Optional[User]:
    bind_user(user.id if user else None)
    return user


CurrentUser = Annotated[User, Depends(_active_user)]
OptionalUser = Annotated[Optional[User], Depends(_optional_user)]
