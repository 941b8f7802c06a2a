"""End-to-end transformation of documentation text."""

import re
from pathlib import Path

from loguru import logger

from docext.assembler import assemble
from docext.config import Settings, get_settings
from docext.escaper import escape_segments
from docext.images import inline_images
from docext.markdown import classify
from docext.models import MathSegment
from docext.reconciler import reconcile
from docext.scanner import scan

_NEWLINES = re.compile(r"\r\n?")


def normalize_newlines(text: str) -> str:
    """Convert CRLF and lone CR to LF, as markdown-it does before parsing."""
    return _NEWLINES.sub("\n", text)


def render_doc(text: str, base_dir: Path, settings: Settings | None = None) -> str:
    """Transform documentation text into its self-contained rendering form.

    Math is escaped for display and bootstrapped for KaTeX, local images are
    inlined as base64. Any failure aborts the whole document.

    Args:
        text: Markdown documentation text.
        base_dir: Directory local image paths are resolved against.
        settings: Overrides for the environment settings.

    Raises:
        DocextError: On invalid math or an image that cannot be inlined.
    """
    settings = settings or get_settings()
    text = normalize_newlines(text)

    segments = scan(text)
    structure = classify(text)
    reconciled = reconcile(segments, structure.code_ranges, structure.image_refs)
    escaped = escape_segments(reconciled.segments)
    images = inline_images(
        reconciled.images,
        base_dir,
        max_size=settings.max_image_size,
        max_workers=settings.image_workers,
    )

    math_count = sum(isinstance(segment, MathSegment) for segment in escaped)
    logger.debug(
        f"Transformed {len(text)} chars: {math_count} math segments, "
        f"{len(structure.code_ranges)} code ranges, {len(images)} inlined images"
    )
    return assemble(escaped, images)


def render_file(path: Path, base_dir: Path | None = None, settings: Settings | None = None) -> str:
    """Render a UTF-8 Markdown file; images resolve next to the file unless ``base_dir`` is given."""
    text = path.read_text(encoding="utf-8")
    return render_doc(text, base_dir if base_dir is not None else path.parent, settings)
