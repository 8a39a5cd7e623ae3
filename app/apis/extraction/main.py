from __future__ import annotations

import asyncio
from typing import Optional

from fastapi import APIRouter, File, UploadFile, status
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.logging import get_logger
from app.modules.extraction import (
    ExtractionError,
    ExtractionResult,
    extract_pdf_slides,
    extract_pptx_slides,
)


router = APIRouter()
logger = get_logger(__name__)


def _error(status_code: int, error: str, details: Optional[dict] = None) -> JSONResponse:
    body: dict = {"error": error}
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=body)


@router.post(
    f"/{settings.app.version}/extract/pdf",
    response_model=ExtractionResult,
    response_model_by_alias=True,
    tags=["extraction"],
)
async def extract_pdf(file: Optional[UploadFile] = File(None)):
    data = await file.read() if file is not None else b""
    if not data:
        return _error(status.HTTP_400_BAD_REQUEST, "No file provided")

    logger.info(f"Processing PDF: {file.filename} size: {len(data)}")
    try:
        images = await asyncio.to_thread(extract_pdf_slides, data)
    except ExtractionError as e:
        logger.error(f"PDF extraction error: {e}")
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Failed to extract PDF",
            e.to_details(),
        )
    return ExtractionResult(images=images)


@router.post(
    f"/{settings.app.version}/extract/pptx",
    response_model=ExtractionResult,
    response_model_by_alias=True,
    tags=["extraction"],
)
async def extract_pptx(file: Optional[UploadFile] = File(None)):
    data = await file.read() if file is not None else b""
    if not data:
        return _error(status.HTTP_400_BAD_REQUEST, "No file provided")

    try:
        images = await asyncio.to_thread(extract_pptx_slides, data)
    except ExtractionError as e:
        logger.error(f"PPT extraction error: {e}")
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            f"Failed to extract PPT: {e.message}",
        )
    return ExtractionResult(images=images)
