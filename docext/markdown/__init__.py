"""Markdown structure detection: code and image ranges in documentation text."""

from docext.markdown.classifier import SourceLines, classify
from docext.markdown.parser import create_parser, get_parser, parse_tokens

__all__ = [
    # Parser
    "create_parser",
    "get_parser",
    "parse_tokens",
    # Classifier
    "classify",
    "SourceLines",
]
