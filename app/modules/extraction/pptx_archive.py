"""Pull slide images straight out of a .pptx archive.

A presentation is a zip file; embedded pictures live under ``ppt/media/``.
When a deck has no media at all, plain placeholder slides are synthesized so
the caller still gets something to pair.
"""

from __future__ import annotations

import re
import zipfile
import zlib
from io import BytesIO

from app.core.config import settings
from app.core.logging import get_logger
from app.core.storage import encode_data_url
from app.modules.extraction.errors import ExtractionError
from app.modules.extraction.models import ExtractedImage, classify_slide


logger = get_logger(__name__)

MEDIA_PREFIX = "ppt/media/"
SLIDE_PREFIX = "ppt/slides/slide"
IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".gif", ".bmp")

_MIME_BY_EXTENSION = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "bmp": "image/bmp",
}

PLACEHOLDER_SVG = """<svg width="280" height="600" xmlns="http://www.w3.org/2000/svg">
  <rect width="280" height="600" fill="#ffffff" stroke="#cccccc" stroke-width="1"/>
  <text x="140" y="300" text-anchor="middle" font-family="Arial" font-size="16" fill="#333333">
    Slide {number}
  </text>
</svg>"""


def _is_media_image(name: str) -> bool:
    if not name.startswith(MEDIA_PREFIX):
        return False
    return "image" in name or name.endswith(IMAGE_SUFFIXES)


def _first_number(name: str) -> int:
    m = re.search(r"\d+", name)
    return int(m.group(0)) if m else 0


def mime_for(name: str) -> str:
    extension = name.rsplit(".", 1)[-1].lower() if "." in name else "png"
    return _MIME_BY_EXTENSION.get(extension, "image/png")


def placeholder_svg(number: int) -> bytes:
    return PLACEHOLDER_SVG.format(number=number).encode("utf-8")


def extract_pptx_slides(
    data: bytes, *, placeholder_limit: int | None = None
) -> list[ExtractedImage]:
    placeholder_limit = (
        settings.extraction.placeholder_slides
        if placeholder_limit is None
        else placeholder_limit
    )
    try:
        archive = zipfile.ZipFile(BytesIO(data))
    except (zipfile.BadZipFile, ValueError) as e:
        raise ExtractionError(str(e), code=type(e).__name__) from e

    try:
        with archive:
            return _read_slides(archive, placeholder_limit)
    except (zipfile.BadZipFile, zlib.error, OSError) as e:
        raise ExtractionError(str(e), code=type(e).__name__) from e


def _read_slides(
    archive: zipfile.ZipFile, placeholder_limit: int
) -> list[ExtractedImage]:
    names = archive.namelist()
    media = sorted((n for n in names if _is_media_image(n)), key=_first_number)

    if media:
        images = [
            ExtractedImage(
                slide_number=i,
                data_url=encode_data_url(archive.read(name), mime_for(name)),
                kind=classify_slide(i),
            )
            for i, name in enumerate(media)
        ]
        logger.info(f"Extracted {len(images)} embedded images from presentation")
        return images

    slides = sorted(
        n for n in names if n.startswith(SLIDE_PREFIX) and n.endswith(".xml")
    )
    images = [
        ExtractedImage(
            slide_number=i,
            data_url=encode_data_url(placeholder_svg(i + 1), "image/svg+xml"),
            kind=classify_slide(i),
        )
        for i in range(min(len(slides), placeholder_limit))
    ]
    logger.info(f"No embedded media; synthesized {len(images)} placeholder slides")
    return images
