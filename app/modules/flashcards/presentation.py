"""Render text flashcards into a portrait .pptx deck, one slide per side."""

from __future__ import annotations

import re
from dataclasses import dataclass
from io import BytesIO
from typing import Sequence

from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.shapes import MSO_SHAPE
from pptx.enum.text import MSO_ANCHOR, PP_ALIGN
from pptx.util import Inches, Pt

from app.modules.flashcards.models.flashcards import TextFlashcard


PPTX_MEDIA_TYPE = (
    "application/vnd.openxmlformats-officedocument.presentationml.presentation"
)

SLIDE_WIDTH_IN = 2.8
SLIDE_HEIGHT_IN = 6.0
BLANK_LAYOUT = 6

ACCENT = "2563EB"
TITLE_COLOR = "1E40AF"
MUTED = "6B7280"
BODY = "1F2937"
TITLE_BACKGROUND = "F8F9FA"
CARD_BACKGROUND = "FFFFFF"

WRAP_WIDTH = 35
LONG_TEXT = 100


@dataclass
class DeckMetadata:
    title: str
    total_count: int
    generated_date: str = ""
    username: str = ""


def wrap_text(text: str, width: int = WRAP_WIDTH) -> str:
    """Break text into chunks of at most ``width`` chars ending at whitespace."""
    lines = re.findall(rf".{{1,{width}}}(?:\s|$)", text)
    return "\n".join(lines) if lines else text


def export_filename(metadata: DeckMetadata) -> str:
    safe_title = re.sub(r"[^a-zA-Z0-9]", "_", metadata.title)
    return f"Flashcards_{safe_title}_{metadata.total_count}Cards.pptx"


def _fill(slide, color: str) -> None:
    fill = slide.background.fill
    fill.solid()
    fill.fore_color.rgb = RGBColor.from_string(color)


def _add_text(
    slide,
    text: str,
    *,
    x: float,
    y: float,
    w: float,
    h: float,
    size: int,
    color: str,
    bold: bool = False,
    middle: bool = False,
) -> None:
    box = slide.shapes.add_textbox(Inches(x), Inches(y), Inches(w), Inches(h))
    tf = box.text_frame
    tf.word_wrap = True
    if middle:
        tf.vertical_anchor = MSO_ANCHOR.MIDDLE
    for i, line in enumerate(text.split("\n")):
        p = tf.paragraphs[0] if i == 0 else tf.add_paragraph()
        p.alignment = PP_ALIGN.CENTER
        r = p.add_run()
        r.text = line
        r.font.size = Pt(size)
        r.font.bold = bold
        r.font.color.rgb = RGBColor.from_string(color)


def _add_card_side(prs, label: str, text: str, index: int, total: int) -> None:
    slide = prs.slides.add_slide(prs.slide_layouts[BLANK_LAYOUT])
    _fill(slide, CARD_BACKGROUND)

    border = slide.shapes.add_shape(
        MSO_SHAPE.RECTANGLE, Inches(0.1), Inches(0.1), Inches(2.6), Inches(5.8)
    )
    border.fill.solid()
    border.fill.fore_color.rgb = RGBColor.from_string(CARD_BACKGROUND)
    border.line.color.rgb = RGBColor.from_string(ACCENT)
    border.line.width = Pt(3)

    _add_text(slide, label, x=0.2, y=0.3, w=2.4, h=0.4, size=12, color=ACCENT, bold=True)
    _add_text(
        slide,
        f"Card {index + 1} of {total}",
        x=0.2,
        y=0.7,
        w=2.4,
        h=0.3,
        size=10,
        color=MUTED,
    )

    wrapped = wrap_text(text)
    _add_text(
        slide,
        wrapped,
        x=0.3,
        y=1.5,
        w=2.2,
        h=3.5,
        size=14 if len(wrapped) > LONG_TEXT else 16,
        color=BODY,
        middle=True,
    )


def build_flashcard_presentation(
    flashcards: Sequence[TextFlashcard], metadata: DeckMetadata
) -> bytes:
    if not flashcards:
        raise ValueError("No flashcards provided")

    prs = Presentation()
    prs.slide_width = Inches(SLIDE_WIDTH_IN)
    prs.slide_height = Inches(SLIDE_HEIGHT_IN)

    props = prs.core_properties
    props.title = f"Flashcards: {metadata.title}"
    props.author = metadata.username
    props.subject = "Educational Flashcards"
    props.category = "Flashcard Generator"

    title_slide = prs.slides.add_slide(prs.slide_layouts[BLANK_LAYOUT])
    _fill(title_slide, TITLE_BACKGROUND)
    _add_text(
        title_slide,
        metadata.title,
        x=0.2,
        y=1.5,
        w=2.4,
        h=1.0,
        size=24,
        color=TITLE_COLOR,
        bold=True,
        middle=True,
    )
    _add_text(
        title_slide,
        f"{metadata.total_count} Flashcards",
        x=0.2,
        y=2.8,
        w=2.4,
        h=0.6,
        size=16,
        color=MUTED,
        middle=True,
    )

    total = len(flashcards)
    for index, card in enumerate(flashcards):
        _add_card_side(prs, "FRONT", card.front, index, total)
        _add_card_side(prs, "BACK", card.back, index, total)

    buf = BytesIO()
    prs.save(buf)
    return buf.getvalue()
