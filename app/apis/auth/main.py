from fastapi import APIRouter, HTTPException, Request, status, Depends
from fastapi.responses import JSONResponse
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel
import jwt

from app.core.config import settings
from app.modules.auth import (
    fastapi_users,
    auth_backend,
    get_jwt_strategy,
    get_user_manager,
    UserRead,
    UserCreate,
    UserUpdate,
    UserManager,
)


router = APIRouter()


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    idToken: str


@router.post("/login", response_model=LoginResponse, tags=["auth"])
async def login(
    body: LoginRequest,
    request: Request,
    user_manager: UserManager = Depends(get_user_manager),
) -> LoginResponse:
    """JSON login for browser clients; returns the same RS256 token as /auth/login."""
    credentials = OAuth2PasswordRequestForm(
        username=body.username, password=body.password
    )
    user = await user_manager.authenticate(credentials)
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials"
        )

    token = await get_jwt_strategy().write_token(user)
    await user_manager.on_after_login(user, request)
    return LoginResponse(idToken=token)


@router.get("/.well-known/jwks.json", tags=["auth"])
async def jwks():
    """JWKS endpoint for public key distribution"""
    return JSONResponse(content=get_jwt_strategy().get_jwks())


@router.post("/introspect", tags=["auth"])
async def introspect(token: str):
    """Decode a token issued by this service; 401 when invalid or expired."""
    try:
        return get_jwt_strategy().decode(token)
    except jwt.PyJWTError as e:
        raise HTTPException(status_code=401, detail=f"Invalid token: {e}")


router.include_router(
    fastapi_users.get_auth_router(auth_backend),
    prefix=f"/{settings.app.version}/auth",
    tags=["auth"],
)

router.include_router(
    fastapi_users.get_register_router(UserRead, UserCreate),
    prefix=f"/{settings.app.version}/auth",
    tags=["auth"],
)

router.include_router(
    fastapi_users.get_users_router(UserRead, UserUpdate),
    prefix=f"/{settings.app.version}/users",
    tags=["users"],
)
