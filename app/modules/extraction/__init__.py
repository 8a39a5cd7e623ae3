"""Slide extraction exports."""

from .errors import ExtractionError
from .models import ExtractedImage, ExtractionResult, SlideKind, classify_slide
from .pdf import extract_pdf_slides
from .pptx_archive import extract_pptx_slides

__all__ = [
    "ExtractionError",
    "ExtractedImage",
    "ExtractionResult",
    "SlideKind",
    "classify_slide",
    "extract_pdf_slides",
    "extract_pptx_slides",
]
