"""Math typesetting and image inlining for Markdown documentation."""

from loguru import logger

from docext.docstrings import Documentable, DocumentableKind, apply, docext
from docext.escaper import escape_for_display
from docext.exceptions import (
    DocextError,
    ImageNotFoundError,
    ImageTooLargeError,
    InvalidMathBlockError,
    MissingDocumentationError,
    UnsupportedImageFormatError,
)
from docext.images import inline_image
from docext.markdown import classify
from docext.models import (
    DelimiterKind,
    DocumentStructure,
    EncodedImage,
    ImageRef,
    MathSegment,
    Range,
    Segment,
    TextSegment,
)
from docext.pipeline import render_doc, render_file
from docext.reconciler import reconcile
from docext.scanner import scan

# Library default: silent until configure_logging() opts in
logger.disable("docext")

__all__ = [
    # Pipeline
    "render_doc",
    "render_file",
    "scan",
    "classify",
    "reconcile",
    "escape_for_display",
    "inline_image",
    # Docstrings
    "docext",
    "apply",
    "Documentable",
    "DocumentableKind",
    # Models
    "Range",
    "Segment",
    "TextSegment",
    "MathSegment",
    "DelimiterKind",
    "ImageRef",
    "EncodedImage",
    "DocumentStructure",
    # Errors
    "DocextError",
    "InvalidMathBlockError",
    "ImageNotFoundError",
    "ImageTooLargeError",
    "UnsupportedImageFormatError",
    "MissingDocumentationError",
]
