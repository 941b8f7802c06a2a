"""Concatenate transformed text with the KaTeX and image bootstrap fragments."""

import json
from collections.abc import Sequence
from html import escape

from docext.models import EncodedImage, MathSegment, Segment

# Pinned together with the SRI hashes below; bump all of them at once.
KATEX_VERSION = "0.16.8"
KATEX_CDN = f"https://cdn.jsdelivr.net/npm/katex@{KATEX_VERSION}/dist"
KATEX_CSS_INTEGRITY = "sha384-GvrOXuhMATgEsSwCs4smul74iXGOixntILdUW9XmUC6+HX0sLNAK3q71HotJqlAn"
KATEX_JS_INTEGRITY = "sha384-cpW21h6RZv/phavutF+AuVYrr+dA8xD9zs6FwLpaCct6O9ctzYFfFr4dgmgccOTx"
AUTO_RENDER_INTEGRITY = "sha384-+VBxd3r6XgURycqtZ117nYw44OOcIax56Z4dCRWbxyPt0Koah1uHoK0o4+/RRE05"

# (left, right, display); longer delimiters first so $$ is not read as two $
MATH_DELIMITERS: tuple[tuple[str, str, bool], ...] = (
    ("$$", "$$", True),
    ("$", "$", False),
)

IMAGE_MARKER_CLASS = "docext-img"

_RENDER_TEMPLATE = """<link rel="stylesheet" href="{cdn}/katex.min.css" integrity="{css_sri}" crossorigin="anonymous">
<script src="{cdn}/katex.min.js" integrity="{js_sri}" crossorigin="anonymous"></script>
<script src="{cdn}/contrib/auto-render.min.js" integrity="{auto_sri}" crossorigin="anonymous"></script>
<script>
(function(){{
    var c=document.currentScript.parentElement;
    document.addEventListener("DOMContentLoaded",function(){{
        renderMathInElement(c,{{delimiters:{delimiters}}})
    }});
}})();
</script>
"""

# Swaps the src of every <img> in the same element whose src matches a marker.
_SUBSTITUTION_SCRIPT = """<script>
(function(){
    var e=document.currentScript.parentElement;
    document.addEventListener("DOMContentLoaded",function(){
        var m=e.getElementsByClassName("%s");
        for(var i=0;i<m.length;i+=1){
            var s=m[i].getAttribute("data-src"),d=m[i].getAttribute("data-img");
            e.querySelectorAll("img").forEach(function(img){if(img.getAttribute("src")===s){img.src=d}});
        }
    });
})();
</script>
""" % IMAGE_MARKER_CLASS


def render_bootstrap(delimiters: Sequence[tuple[str, str, bool]] = MATH_DELIMITERS) -> str:
    """KaTeX stylesheet, scripts and the auto-render call for the enclosing element."""
    config = json.dumps([{"left": left, "right": right, "display": display} for left, right, display in delimiters])
    return _RENDER_TEMPLATE.format(
        cdn=KATEX_CDN,
        css_sri=KATEX_CSS_INTEGRITY,
        js_sri=KATEX_JS_INTEGRITY,
        auto_sri=AUTO_RENDER_INTEGRITY,
        delimiters=config,
    )


def image_marker(image: EncodedImage) -> str:
    return (
        f'<span class="{IMAGE_MARKER_CLASS}" data-src="{escape(image.target)}" '
        f'data-img="{escape(image.data_uri)}"></span>'
    )


def assemble(segments: Sequence[Segment], images: Sequence[EncodedImage]) -> str:
    """Build the final documentation text.

    Math segments must already carry their display text; nothing is escaped here.
    """
    parts: list[str] = []
    for segment in segments:
        if isinstance(segment, MathSegment):
            if segment.display is None:
                raise ValueError(f"Math segment at {segment.range.start}..{segment.range.end} was never escaped")
            parts.append(segment.display)
        else:
            parts.append(segment.text)

    # Blank line so the bootstrap starts its own HTML block
    parts.append("\n\n")
    parts.append(render_bootstrap())

    if images:
        parts.append("\n")
        parts.extend(f"{image_marker(image)}\n" for image in images)
        parts.append("\n")
        parts.append(_SUBSTITUTION_SCRIPT)
    return "".join(parts)
