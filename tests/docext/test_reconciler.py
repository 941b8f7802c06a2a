"""Tests for merging math segments with code and image ranges."""

import pytest

from docext.exceptions import InvalidMathBlockError
from docext.markdown import classify
from docext.models import ImageRef, MathSegment, Range, TextSegment
from docext.reconciler import is_remote, reconcile
from docext.scanner import scan


def run(text: str):
    structure = classify(text)
    return reconcile(scan(text), structure.code_ranges, structure.image_refs)


class TestCodeExclusion:
    def test_math_in_code_span_becomes_text(self):
        segments, _ = run("Use `$a$` here")
        assert all(isinstance(s, TextSegment) for s in segments)
        assert "".join(s.text for s in segments) == "Use `$a$` here"

    def test_math_in_fence_becomes_text(self):
        text = "```\n$$\n\nx\n$$\n```\n"
        segments, _ = run(text)
        # A blank line inside code is fine: the math is never rendered
        assert not any(isinstance(s, MathSegment) for s in segments)

    def test_math_partially_in_code_is_rendered(self):
        text = "$a `b$` c"
        segments, _ = run(text)
        assert isinstance(segments[0], MathSegment)
        assert segments[0].payload == "$a `b$"

    def test_math_outside_code_kept(self):
        segments, _ = run("`code` and $x$")
        assert [type(s) for s in segments] == [TextSegment, MathSegment]


class TestBlankLines:
    def test_blank_line_rejected(self):
        with pytest.raises(InvalidMathBlockError) as exc_info:
            run("$$\na\n\nb\n$$")
        assert exc_info.value.span == Range(start=0, end=10)

    def test_whitespace_only_line_rejected(self):
        with pytest.raises(InvalidMathBlockError):
            run("$$\na\n   \nb\n$$")

    @pytest.mark.parametrize("separator", ["\x0b", "\x0c", "\x1c", "\x85", "\u2028", "\u2029"])
    def test_non_newline_separators_are_not_line_breaks(self, separator):
        segments, _ = run(f"$a{separator}{separator}b$")
        assert isinstance(segments[0], MathSegment)

    def test_multiline_without_blank_accepted(self):
        segments, _ = run("$$\n1\n-\n2\n$$")
        assert isinstance(segments[0], MathSegment)

    def test_error_names_range(self):
        with pytest.raises(InvalidMathBlockError, match=r"0\.\.10"):
            run("$$\na\n\nb\n$$")


class TestImageEligibility:
    @pytest.mark.parametrize(
        "target,remote",
        [
            ("https://example.com/a.png", True),
            ("http://example.com/a.png", True),
            ("data:image/png;base64,AAAA", True),
            ("//cdn.example.com/a.png", True),
            ("img/a.png", False),
            ("../a.png", False),
            ("a%20b.png", False),
        ],
    )
    def test_is_remote(self, target, remote):
        assert is_remote(target) is remote

    def test_remote_never_inlined(self):
        _, images = run("![r](https://x.org/b.png)")
        assert images == []

    def test_local_inlined(self):
        _, images = run("![a](img/a.png)")
        assert [ref.target for ref in images] == ["img/a.png"]

    def test_image_inside_rendered_math_excluded(self):
        _, images = run("$![x](y.png)$ and ![a](a.png)")
        assert [ref.target for ref in images] == ["a.png"]

    def test_image_inside_code_math_not_excluded_by_math(self):
        # Math in code is not rendered, so only rendered math shields images
        segments = [TextSegment(text="x", range=Range(start=0, end=1))]
        refs = [ImageRef(target="a.png", range=Range(start=0, end=1))]
        _, images = reconcile(segments, [], refs)
        assert images == refs

    def test_image_overlapping_math_boundary_kept(self):
        segments = [
            TextSegment(text="ab", range=Range(start=0, end=2)),
            MathSegment(payload="$c$", range=Range(start=2, end=5), kind="single"),
        ]
        refs = [ImageRef(target="a.png", range=Range(start=1, end=4))]
        _, images = reconcile(segments, [], refs)
        assert images == refs


class TestPurity:
    def test_inputs_untouched(self):
        text = "`$a$` $b$"
        segments = scan(text)
        before = list(segments)
        structure = classify(text)
        reconcile(segments, structure.code_ranges, structure.image_refs)
        assert segments == before
