"""Data models shared by the transformation stages.

Every model is immutable: each stage derives new values from the previous
stage's output and never edits it in place. Offsets are ``str`` indices into
the newline-normalized input text.
"""

from enum import StrEnum
from typing import Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, model_validator


class Range(BaseModel):
    """Half-open interval ``[start, end)`` over the input text."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int

    @model_validator(mode="after")
    def _check_order(self) -> "Range":
        if self.start < 0 or self.start > self.end:
            raise ValueError(f"invalid range {self.start}..{self.end}")
        return self

    def contains(self, other: "Range") -> bool:
        """True if ``other`` lies fully inside this range."""
        return self.start <= other.start and other.end <= self.end

    def slice(self, text: str) -> str:
        return text[self.start : self.end]


# Markdown code spans and code blocks never overlap or nest.
CodeRange = Range


class DelimiterKind(StrEnum):
    SINGLE = "single"  # $...$
    DOUBLE = "double"  # $$...$$

    @property
    def delimiter(self) -> str:
        return "$$" if self is DelimiterKind.DOUBLE else "$"


class TextSegment(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str
    range: Range


class MathSegment(BaseModel):
    """A delimited math expression.

    ``payload`` is the raw source including its delimiters and is what the
    typesetter eventually receives. ``display`` is the punctuation-escaped copy
    shown to the Markdown renderer; it stays ``None`` until the escaper runs.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["math"] = "math"
    payload: str
    range: Range
    kind: DelimiterKind
    display: str | None = None


Segment = TextSegment | MathSegment


class ImageRef(BaseModel):
    """A Markdown image construct and its link target."""

    model_config = ConfigDict(frozen=True)

    target: str
    range: Range


class EncodedImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    target: str
    mime: str
    data_base64: str

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime};base64,{self.data_base64}"


class DocumentStructure(BaseModel):
    """Code and image ranges found by the Markdown pass, each sorted by start."""

    model_config = ConfigDict(frozen=True)

    code_ranges: list[CodeRange]
    image_refs: list[ImageRef]


class Reconciled(NamedTuple):
    segments: list[Segment]
    images: list[ImageRef]
