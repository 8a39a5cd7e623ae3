import asyncio
import io
import os
import tempfile
import zipfile
from pathlib import Path

_TMP = Path(tempfile.mkdtemp(prefix="slidecards-tests-"))

os.environ.update(
    {
        "POSTGRES_HOST": "localhost",
        "POSTGRES_DB_PORT": "5432",
        "POSTGRES_DB_NAME": "slidecards_test",
        "POSTGRES_DB_USER": "test",
        "POSTGRES_DB_PASSWORD": "test",
        "JWT_SECRET": "test-secret",
        "JWT_KEY_FILE": str(_TMP / "jwt_rsa_key.pem"),
        "STORAGE_DIR": str(_TMP / "storage"),
        "MODE": "test",
    }
)

import fitz  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from PIL import Image  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from app.core.config import settings  # noqa: E402
from app.core.db.base import Base, get_session  # noqa: E402
from app.core.db.schemas import User  # noqa: E402
from app.modules.auth import current_active_user, optional_active_user  # noqa: E402
from main import app as fastapi_app  # noqa: E402


def make_pdf(pages: int) -> bytes:
    doc = fitz.open()
    for i in range(pages):
        page = doc.new_page(width=200, height=120)
        page.insert_text((20, 60), f"Page {i + 1}")
    data = doc.tobytes()
    doc.close()
    return data


def make_png(color: str = "red", size: tuple[int, int] = (8, 8)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


def make_pptx_zip(media: dict[str, bytes] | None = None, slides: int = 0) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr("[Content_Types].xml", "<Types/>")
        zf.writestr("ppt/presentation.xml", "<p:presentation/>")
        for i in range(1, slides + 1):
            zf.writestr(f"ppt/slides/slide{i}.xml", "<p:sld/>")
        for name, data in (media or {}).items():
            zf.writestr(name, data)
    return buf.getvalue()


@pytest.fixture
def small_render(monkeypatch):
    monkeypatch.setattr(settings.extraction, "render_scale", 0.5)


@pytest.fixture
def session_maker(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool
    )

    async def _create():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(_create())
    yield async_sessionmaker(engine, expire_on_commit=False)
    asyncio.run(engine.dispose())


def _add_user(session_maker, email: str, name: str) -> User:
    async def _create() -> User:
        async with session_maker() as session:
            user = User(
                email=email,
                hashed_password="not-a-real-hash",
                name=name,
                is_active=True,
                is_superuser=False,
                is_verified=True,
            )
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    return asyncio.run(_create())


@pytest.fixture
def user(session_maker) -> User:
    return _add_user(session_maker, "asha@example.com", "Asha")


@pytest.fixture
def other_user(session_maker) -> User:
    return _add_user(session_maker, "ravi@example.com", "Ravi")


@pytest.fixture
def app(session_maker):
    async def _get_session():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_session] = _get_session
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def login_as(app):
    """Authenticate requests as the given user (or anonymously with None)."""

    def _login(u):
        if u is None:
            app.dependency_overrides.pop(current_active_user, None)
            app.dependency_overrides[optional_active_user] = lambda: None
        else:
            app.dependency_overrides[current_active_user] = lambda: u
            app.dependency_overrides[optional_active_user] = lambda: u

    return _login


@pytest.fixture
def client(app, login_as, user):
    login_as(user)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def anon_client(app):
    with TestClient(app) as c:
        yield c


CORRUPTIBLE_PAYLOAD = b"SLIDE-IMAGE-PAYLOAD-0123456789"


def make_corrupt_pptx_zip() -> bytes:
    """A deck whose only media entry fails its CRC check when read."""
    deck = make_pptx_zip({"ppt/media/image1.png": CORRUPTIBLE_PAYLOAD}, slides=1)
    damaged = b"X" + CORRUPTIBLE_PAYLOAD[1:]
    return deck.replace(CORRUPTIBLE_PAYLOAD, damaged, 1)
