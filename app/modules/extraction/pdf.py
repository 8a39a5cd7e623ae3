"""Rasterize the leading pages of a PDF into PNG slide images."""

from __future__ import annotations

import fitz  # PyMuPDF

from app.core.config import settings
from app.core.logging import get_logger
from app.core.storage import encode_data_url
from app.modules.extraction.errors import ExtractionError
from app.modules.extraction.models import ExtractedImage, classify_slide


logger = get_logger(__name__)


def render_page_png(page: "fitz.Page", scale: float) -> bytes:
    matrix = fitz.Matrix(scale, scale)
    pix = page.get_pixmap(matrix=matrix, alpha=False)
    return pix.tobytes("png")


def extract_pdf_slides(
    data: bytes,
    *,
    max_pages: int | None = None,
    scale: float | None = None,
) -> list[ExtractedImage]:
    """Render up to ``max_pages`` pages in order.

    Pages that fail to render are logged and skipped; the remaining pages keep
    their original index, so classification follows page position rather than
    output position. Raises ``ExtractionError`` when the document itself
    cannot be opened.
    """
    max_pages = settings.extraction.max_pages if max_pages is None else max_pages
    scale = settings.extraction.render_scale if scale is None else scale

    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        raise ExtractionError(str(e) or "Unreadable PDF", code=type(e).__name__) from e

    images: list[ExtractedImage] = []
    limit = 0
    try:
        page_count = doc.page_count
        logger.info(f"Document loaded with {page_count} pages")
        limit = min(page_count, max(0, max_pages))

        for i in range(limit):
            try:
                logger.debug(f"Processing page {i + 1}/{limit}...")
                png = render_page_png(doc.load_page(i), scale)
            except Exception as e:
                logger.error(f"Error processing page {i}: {e}")
                continue

            images.append(
                ExtractedImage(
                    slide_number=i,
                    data_url=encode_data_url(png, "image/png"),
                    kind=classify_slide(i),
                )
            )
    finally:
        doc.close()

    logger.info(f"Extracted {len(images)} of {limit} pages")
    return images
