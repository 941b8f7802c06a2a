"""Tests for building the final documentation text."""

import pytest

from docext.assembler import KATEX_VERSION, MATH_DELIMITERS, assemble, image_marker, render_bootstrap
from docext.models import EncodedImage, MathSegment, Range, TextSegment


def text(value: str, start: int = 0) -> TextSegment:
    return TextSegment(text=value, range=Range(start=start, end=start + len(value)))


def math(payload: str, display: str | None, start: int = 0) -> MathSegment:
    return MathSegment(
        payload=payload,
        range=Range(start=start, end=start + len(payload)),
        kind="double" if payload.startswith("$$") else "single",
        display=display,
    )


class TestBootstrap:
    def test_pinned_katex(self):
        bootstrap = render_bootstrap()
        assert f"katex@{KATEX_VERSION}/dist/katex.min.css" in bootstrap
        assert f"katex@{KATEX_VERSION}/dist/katex.min.js" in bootstrap
        assert f"katex@{KATEX_VERSION}/dist/contrib/auto-render.min.js" in bootstrap
        assert bootstrap.count('integrity="sha384-') == 3

    def test_delimiters(self):
        bootstrap = render_bootstrap()
        assert '[{"left": "$$", "right": "$$", "display": true}, {"left": "$", "right": "$", "display": false}]' in bootstrap
        assert MATH_DELIMITERS[0] == ("$$", "$$", True)

    def test_custom_delimiters(self):
        bootstrap = render_bootstrap([("\\(", "\\)", False)])
        assert '"left": "\\\\("' in bootstrap

    def test_scoped_to_parent_element(self):
        bootstrap = render_bootstrap()
        assert "document.currentScript.parentElement" in bootstrap
        assert "(function(){" in bootstrap

    def test_stateless(self):
        assert render_bootstrap() == render_bootstrap()


class TestAssemble:
    def test_segments_in_order(self):
        result = assemble([text("a "), math("$x$", "\\$x\\$", 2), text(" b", 5)], [])
        assert result.startswith("a \\$x\\$ b\n\n<link")

    def test_no_image_section_without_images(self):
        result = assemble([text("plain")], [])
        assert "docext-img" not in result
        assert result.count("<script>") == 1

    def test_unescaped_math_rejected(self):
        with pytest.raises(ValueError, match="never escaped"):
            assemble([math("$x$", None)], [])

    def test_image_markers_and_substitution(self):
        images = [
            EncodedImage(target="a.png", mime="image/png", data_base64="AAAA"),
            EncodedImage(target="b c.svg", mime="image/svg+xml", data_base64="BBBB"),
        ]
        result = assemble([text("doc")], images)
        bootstrap_at = result.index("<link")
        first = result.index('data-src="a.png"')
        second = result.index('data-src="b c.svg"')
        substitution = result.rindex("<script>")
        assert bootstrap_at < first < second < substitution
        assert 'data-img="data:image/png;base64,AAAA"' in result
        assert 'getAttribute("data-src")' in result[substitution:]

    def test_marker_attributes_escaped(self):
        marker = image_marker(EncodedImage(target='x"><script>.png', mime="image/png", data_base64="AA=="))
        assert "<script>" not in marker
        assert 'data-src="x&quot;&gt;&lt;script&gt;.png"' in marker
