"""Split raw text into literal text and ``$``/``$$`` delimited math.

Follows the delimiter matching of KaTeX's auto-render ``splitAtDelimiters``:
braces nest, a backslash skips the next character, and a candidate without a
closing delimiter is plain text.
"""

from docext.models import DelimiterKind, MathSegment, Range, Segment, TextSegment


def scan(text: str) -> list[Segment]:
    """Segment ``text`` into text and math.

    Never fails. The returned segments are contiguous, non-overlapping and
    cover the whole input, so joining their source slices reproduces ``text``.
    """
    segments: list[Segment] = []
    pos = 0
    while pos < len(text):
        start = text.find("$", pos)
        if start < 0:
            break

        kind = DelimiterKind.DOUBLE if text.startswith("$$", start) else DelimiterKind.SINGLE
        end = _find_math_end(text, kind, start)
        if end is None:
            # No closing delimiter, so the rest is not math.
            break

        if start > pos:
            segments.append(TextSegment(text=text[pos:start], range=Range(start=pos, end=start)))
        segments.append(MathSegment(payload=text[start:end], range=Range(start=start, end=end), kind=kind))
        pos = end

    if pos < len(text):
        segments.append(TextSegment(text=text[pos:], range=Range(start=pos, end=len(text))))
    return segments


def _find_math_end(text: str, kind: DelimiterKind, start: int) -> int | None:
    """Return the index just past the closing delimiter, or None if unclosed."""
    i = start + len(kind.delimiter)
    depth = 0
    while i < len(text):
        c = text[i]
        if c == "{":
            depth += 1
        elif c == "}":
            # May go negative; an unmatched brace does not end the scan.
            depth -= 1
        elif c == "\\":
            i += 1
        elif c == "$" and depth <= 0:
            if kind is DelimiterKind.SINGLE:
                return i + 1
            if text.startswith("$", i + 1):
                return i + 2
        i += 1
    return None
