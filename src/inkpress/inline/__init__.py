"""Inline formatting: emphasis, code spans, links, images and friends.

Entry points:
    InlineFormatter: reusable per-theme formatter
    format_inline: one-shot helper
    sanitize_url: scheme allow-list check used for every href/src
"""

from inkpress.inline.links import ALLOWED_SCHEMES, sanitize_url
from inkpress.inline.pipeline import InlineFormatter, format_inline

__all__ = ["ALLOWED_SCHEMES", "InlineFormatter", "format_inline", "sanitize_url"]
