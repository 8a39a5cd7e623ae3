from fastapi import FastAPI
from contextlib import asynccontextmanager
from app.core.config import settings
from app.core.logging import setup_logging
from app.apis.auth import router as auth_router
from app.apis.extraction.main import router as extraction_router
from app.apis.files.main import router as files_router
from app.apis.flashcards.main import router as flashcards_router
from app.apis.study.main import router as study_router

import uvicorn
from fastapi.middleware.cors import CORSMiddleware
from app.modules.study.session import study_manager


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    study_manager.start(
        idle_seconds=settings.study.idle_seconds,
        sweep_interval=settings.study.sweep_interval_seconds,
    )
    try:
        yield
    finally:
        await study_manager.stop()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app.name, version=settings.app.version, lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(extraction_router)
    app.include_router(files_router)
    app.include_router(flashcards_router)
    app.include_router(study_router)

    @app.get("/")
    async def root():
        return {
            "status": "ok",
            "app": settings.app.name,
            "version": settings.app.version,
        }

    return app


app = create_app()


if __name__ == "__main__":
    try:
        uvicorn.run(
            "main:app",
            host="0.0.0.0",
            port=settings.app.port,
            reload=not settings.app.is_production,
        )
    except Exception as e:
        print(f"An error occurred when starting the server: {e}.")
