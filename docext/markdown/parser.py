"""Markdown parsing using markdown-it-py.

Configures markdown-it with the same extensions the downstream renderer uses:
- CommonMark base
- GFM tables and strikethrough
- Footnotes (reference form only, no inline ^[...] notes)
- Task lists
- Smart punctuation (typographer replacements and smart quotes)

Math is deliberately not enabled: the renderer that consumes our output does
not understand it either, which is exactly why math content can be misread as
image syntax.
"""

from collections.abc import Callable

from markdown_it import MarkdownIt
from markdown_it.rules_inline import StateInline, backtick, image
from markdown_it.token import Token
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

# Token.meta keys written by the span-recording inline rules
SPAN_META = "docext_span"
SOURCE_META = "docext_src"

InlineRule = Callable[[StateInline, bool], bool]


def _record_span(rule: InlineRule, token_type: str) -> InlineRule:
    """Wrap an inline rule so the token it produces remembers its source span.

    markdown-it only tracks line maps for block tokens. The wrapped rule stores
    ``(start, end)`` offsets into the inline source, together with that source
    string, on the ``token_type`` token it pushes.
    """

    def rule_with_span(state: StateInline, silent: bool) -> bool:
        start = state.pos
        first_new = len(state.tokens)
        if not rule(state, silent):
            return False
        if not silent:
            for token in state.tokens[first_new:]:
                if token.type == token_type:
                    token.meta = {**token.meta, SPAN_META: (start, state.pos), SOURCE_META: state.src}
                    break
        return True

    return rule_with_span


def create_parser() -> MarkdownIt:
    """Create configured markdown-it parser."""
    md = MarkdownIt("commonmark", {"typographer": True})
    md.enable(["table", "strikethrough", "replacements", "smartquotes"])
    footnote_plugin(md, inline=False)
    tasklists_plugin(md)
    md.inline.ruler.at("backticks", _record_span(backtick, "code_inline"))
    md.inline.ruler.at("image", _record_span(image, "image"))
    return md


# Singleton parser instance
_parser: MarkdownIt | None = None


def get_parser() -> MarkdownIt:
    """Get or create the singleton parser instance."""
    global _parser
    if _parser is None:
        _parser = create_parser()
    return _parser


def parse_tokens(text: str) -> list[Token]:
    """Parse markdown text into markdown-it's flat block token stream."""
    return get_parser().parse(text)
