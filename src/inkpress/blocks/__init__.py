"""Block formatters: headings, rules, fenced code and blockquotes."""

from inkpress.blocks.blockquote import BlockquoteFormatter, split_quote_line
from inkpress.blocks.code import (
    ClaimedRanges,
    CodeBlockFormatter,
    highlight_code,
    normalize_language,
)
from inkpress.blocks.heading import HeadingFormatter, match_heading
from inkpress.blocks.rule import format_rule, is_rule

__all__ = [
    "BlockquoteFormatter",
    "ClaimedRanges",
    "CodeBlockFormatter",
    "HeadingFormatter",
    "format_rule",
    "highlight_code",
    "is_rule",
    "match_heading",
    "normalize_language",
    "split_quote_line",
]
