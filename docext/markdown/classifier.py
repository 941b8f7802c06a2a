"""Locate code and image constructs in Markdown source.

Walks the markdown-it token stream and turns it into ranges over the input
text: code blocks come from block line maps, code spans and images from the
spans recorded by the inline rules in ``parser``. Inline spans are relative to
the inline source markdown-it built for the block (indentation and container
markers stripped), so each inline line is aligned with the source line it was
cut from before offsets are translated.
"""

import re
from collections.abc import Sequence

from loguru import logger
from markdown_it.token import Token

from docext.markdown.parser import SOURCE_META, SPAN_META, parse_tokens
from docext.models import CodeRange, DocumentStructure, ImageRef, Range

_CODE_BLOCK_TYPES = frozenset({"fence", "code_block"})
_TABLE_CELL_OPENERS = frozenset({"th_open", "td_open"})


class SourceLines:
    """Line start offsets of a text, for translating line maps into offsets."""

    def __init__(self, text: str):
        self.text = text
        self.starts = [0] + [m.end() for m in re.finditer("\n", text)]

    def start(self, line: int) -> int:
        return self.starts[line] if line < len(self.starts) else len(self.text)

    def line(self, line: int) -> str:
        """Text of ``line`` without its newline."""
        start = self.start(line)
        end = self.text.find("\n", start)
        return self.text[start:] if end < 0 else self.text[start:end]


class _InlineAligner:
    """Translates offsets in one inline source back to the original text."""

    def __init__(
        self,
        src: str,
        line_map: Sequence[int],
        lines: SourceLines,
        cursors: dict[int, int],
        table_cell: bool,
    ):
        self.src = src
        self.first_line, self.end_line = line_map[0], line_map[1]
        self.lines = lines
        self.cursors = cursors
        self.table_cell = table_cell
        self.src_lines = src.split("\n")
        self._columns: dict[int, tuple[int, int] | None] = {}

    def _align(self, idx: int) -> tuple[int, int] | None:
        """Return (column in source line, leading chars of inline line not in source)."""
        if idx in self._columns:
            return self._columns[idx]

        result = None
        line_no = self.first_line + idx
        if line_no < self.end_line and idx < len(self.src_lines):
            source = self.lines.line(line_no)
            content = self.src_lines[idx]
            stripped = content.lstrip(" ")
            lead = len(content) - len(stripped)
            if not self.table_cell and source.endswith(stripped):
                result = (len(source) - len(stripped), lead)
            elif not self.table_cell and source.rstrip().endswith(stripped):
                result = (len(source.rstrip()) - len(stripped), lead)
            else:
                # Headings lose their closing sequence, table cells share a row
                # and lose the backslash of every escaped pipe
                needle = stripped.replace("|", "\\|") if self.table_cell else stripped
                col = source.find(needle, self.cursors.get(line_no, 0))
                if col >= 0:
                    result = (col, lead)
                    if self.table_cell:
                        self.cursors[line_no] = col + len(needle)

        self._columns[idx] = result
        return result

    def offset(self, pos: int) -> int | None:
        idx = self.src.count("\n", 0, pos)
        column = pos - (self.src.rfind("\n", 0, pos) + 1)
        aligned = self._align(idx)
        if aligned is None:
            return None
        col, lead = aligned
        column = max(column - lead, 0)
        if self.table_cell:
            # Each pipe left in a cell stands for "\|" in the source
            column += self.src_lines[idx][lead : lead + column].count("|")
        return self.lines.start(self.first_line + idx) + col + column

    def range(self, span: tuple[int, int]) -> Range | None:
        start, end = self.offset(span[0]), self.offset(span[1])
        if start is None or end is None or start > end:
            return None
        return Range(start=start, end=end)


def _block_range(token: Token, lines: SourceLines) -> Range:
    first, last = token.map
    return Range(start=lines.start(first), end=lines.start(last))


def classify(text: str) -> DocumentStructure:
    """Find code spans, code blocks and images in ``text``.

    Args:
        text: Newline-normalized Markdown source.

    Returns:
        DocumentStructure with code ranges and image references, each sorted by start offset.
    """
    tokens = parse_tokens(text)
    lines = SourceLines(text)
    cursors: dict[int, int] = {}
    code_ranges: list[CodeRange] = []
    image_refs: list[ImageRef] = []

    for i, token in enumerate(tokens):
        if token.type in _CODE_BLOCK_TYPES and token.map:
            code_ranges.append(_block_range(token, lines))
            continue
        # Inline tokens without a map are footnote bodies re-emitted at the end
        if token.type != "inline" or not token.map or not token.children:
            continue

        table_cell = i > 0 and tokens[i - 1].type in _TABLE_CELL_OPENERS
        aligners: dict[str, _InlineAligner] = {}
        if table_cell:
            # Claim the cell's position on its row even if it holds no spans
            aligners[token.content] = _InlineAligner(token.content, token.map, lines, cursors, table_cell)
            aligners[token.content].offset(0)
        # Image children are a nested parse of the alt text, so only direct children are read
        for child in token.children:
            if child.type not in ("code_inline", "image") or SPAN_META not in child.meta:
                continue
            src = child.meta[SOURCE_META]
            aligner = aligners.get(src)
            if aligner is None:
                aligner = aligners[src] = _InlineAligner(src, token.map, lines, cursors, table_cell)

            span = aligner.range(child.meta[SPAN_META])
            if span is None:
                logger.debug(f"Could not locate {child.type} at line {token.map[0] + 1}, ignoring it")
                continue

            if child.type == "code_inline":
                code_ranges.append(span)
            else:
                image_refs.append(ImageRef(target=str(child.attrs.get("src", "")), range=span))

    code_ranges.sort(key=lambda r: r.start)
    image_refs.sort(key=lambda ref: ref.range.start)
    return DocumentStructure(code_ranges=code_ranges, image_refs=image_refs)
