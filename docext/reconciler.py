"""Merge the math segmentation with the Markdown structure of the same text."""

import bisect
from collections.abc import Sequence
from urllib.parse import urlparse

from docext.exceptions import InvalidMathBlockError
from docext.models import CodeRange, ImageRef, MathSegment, Range, Reconciled, Segment, TextSegment


def is_remote(target: str) -> bool:
    """True if ``target`` is an absolute locator rather than a local path."""
    parsed = urlparse(target)
    return bool(parsed.scheme or parsed.netloc)


def _enclosing(ranges: Sequence[Range], starts: Sequence[int], inner: Range) -> bool:
    """Whether any range in the sorted, non-overlapping ``ranges`` fully contains ``inner``."""
    idx = bisect.bisect_right(starts, inner.start) - 1
    return idx >= 0 and ranges[idx].contains(inner)


def _has_blank_line(payload: str) -> bool:
    # Only "\n" breaks a Markdown line; splitlines() would also split on \x0c, \u2028 and friends
    return any(not line.strip() for line in payload.split("\n"))


def reconcile(
    segments: Sequence[Segment],
    code_ranges: Sequence[CodeRange],
    image_refs: Sequence[ImageRef],
) -> Reconciled:
    """Decide which math gets rendered and which images get inlined.

    Math inside a code span or block is demoted to verbatim text. Any other math
    must not contain a blank line. An image is inlined only if it points at a
    local path and does not sit inside rendered math, where it is an artifact of
    the Markdown parser reading math as image syntax.

    Raises:
        InvalidMathBlockError: If a rendered math segment contains a blank line.
    """
    code_starts = [r.start for r in code_ranges]
    final: list[Segment] = []
    math_ranges: list[Range] = []

    for segment in segments:
        if not isinstance(segment, MathSegment):
            final.append(segment)
            continue
        if _enclosing(code_ranges, code_starts, segment.range):
            final.append(TextSegment(text=segment.payload, range=segment.range))
            continue
        if _has_blank_line(segment.payload):
            raise InvalidMathBlockError(segment.range, segment.payload)
        final.append(segment)
        math_ranges.append(segment.range)

    math_starts = [r.start for r in math_ranges]
    images = [
        ref
        for ref in image_refs
        if not is_remote(ref.target) and not _enclosing(math_ranges, math_starts, ref.range)
    ]
    return Reconciled(segments=final, images=images)
