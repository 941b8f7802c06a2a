"""Backslash-escape math for display so Markdown leaves it alone.

A backslash before ASCII punctuation removes the character's Markdown meaning
without changing the rendered glyph. List markers, emphasis and link syntax
inside math are neutralized while the rendered text still reads as the original
TeX, which the typesetter picks up from the page.
"""

import string
from collections.abc import Iterable

from docext.models import MathSegment, Segment

# Identical to the CommonMark definition of ASCII punctuation
ASCII_PUNCTUATION = frozenset(string.punctuation)


def escape_for_display(payload: str) -> str:
    return "".join(f"\\{c}" if c in ASCII_PUNCTUATION else c for c in payload)


def escape_segments(segments: Iterable[Segment]) -> list[Segment]:
    """Attach display text to every math segment; the raw payload is kept as is."""
    return [
        segment.model_copy(update={"display": escape_for_display(segment.payload)})
        if isinstance(segment, MathSegment)
        else segment
        for segment in segments
    ]
