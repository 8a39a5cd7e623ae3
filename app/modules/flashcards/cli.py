from __future__ import annotations

import argparse
import json
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from app.core.storage import decode_data_url
from app.modules.extraction import (
    ExtractionError,
    extract_pdf_slides,
    extract_pptx_slides,
)
from app.modules.flashcards.presentation import (
    DeckMetadata,
    build_flashcard_presentation,
    export_filename,
)
from app.modules.flashcards.models.flashcards import TextFlashcard


_EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/gif": ".gif",
    "image/bmp": ".bmp",
    "image/svg+xml": ".svg",
}


def _detect_type(path: Path, explicit: str | None) -> str:
    if explicit:
        return explicit
    suffix = path.suffix.lower()
    if suffix == ".pdf":
        return "pdf"
    if suffix == ".pptx":
        return "pptx"
    raise SystemExit(f"Cannot infer input type from {path.name}; pass --type")


def cmd_extract(args: argparse.Namespace) -> int:
    src = Path(args.input)
    kind = _detect_type(src, args.type)
    data = src.read_bytes()
    try:
        if kind == "pdf":
            images = extract_pdf_slides(data, max_pages=args.max_pages, scale=args.scale)
        else:
            images = extract_pptx_slides(data)
    except ExtractionError as e:
        print(json.dumps({"error": f"Failed to extract {kind.upper()}", "details": e.to_details()}))
        return 1

    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)
    manifest = []
    for image in images:
        decoded = decode_data_url(image.data_url)
        ext = _EXTENSIONS.get(decoded.content_type, ".bin")
        name = f"slide-{image.slide_number:03d}{ext}"
        (out_dir / name).write_bytes(decoded.data)
        manifest.append(
            {"slideNumber": image.slide_number, "file": name, "type": image.kind.value}
        )
    (out_dir / "slides.json").write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    print(json.dumps({"slides": len(manifest), "out": str(out_dir)}, indent=2))
    return 0


def cmd_export_pptx(args: argparse.Namespace) -> int:
    raw = Path(args.json_file).read_text(encoding="utf-8")
    try:
        cards = TypeAdapter(list[TextFlashcard]).validate_json(raw)
    except ValidationError as e:
        raise SystemExit(f"Invalid flashcard JSON: {e.error_count()} error(s)")
    if not cards:
        raise SystemExit("No flashcards provided")

    metadata = DeckMetadata(title=args.title, total_count=len(cards), username=args.author)
    out = Path(args.out) if args.out else Path(export_filename(metadata))
    out.write_bytes(build_flashcard_presentation(cards, metadata))
    print(str(out))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="slidecards", description="Slide deck flashcards CLI"
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    ex = sub.add_parser("extract", help="Extract slide images from a PDF or PPTX")
    ex.add_argument("--input", "-i", required=True, help="Path to a .pdf or .pptx file")
    ex.add_argument("--type", choices=["pdf", "pptx"], help="Override input type")
    ex.add_argument("--out", "-o", required=True, help="Output directory for images")
    ex.add_argument("--max-pages", type=int, default=None, help="PDF page cap")
    ex.add_argument("--scale", type=float, default=None, help="PDF render scale")

    exp = sub.add_parser("export-pptx", help="Build a .pptx deck from flashcard JSON")
    exp.add_argument("--json-file", required=True, help='JSON array of {"front", "back"}')
    exp.add_argument("--title", default="Flashcard Set")
    exp.add_argument("--author", default="")
    exp.add_argument("--out", "-o", help="Output .pptx path")

    args = parser.parse_args(argv)
    if args.cmd == "extract":
        return cmd_extract(args)
    if args.cmd == "export-pptx":
        return cmd_export_pptx(args)

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
