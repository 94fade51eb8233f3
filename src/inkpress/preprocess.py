"""Source normalization applied before line dispatch."""

from __future__ import annotations

import re

from inkpress.inline.placeholders import strip_sentinels

# [id]: url "title" and ![id]: url "title"; the line itself is kept (emptied)
# so line numbers in errors still match the source
_REFERENCE_DEF_RE = re.compile(r'^[ \t]*!?\[([^\]]*)\]:[ \t]*(\S+)([ \t]+"[^"]*")?[ \t]*$', re.MULTILINE)


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def strip_reference_definitions(text: str) -> str:
    """Empty every reference-style link or image definition line.

    Example:
        >>> strip_reference_definitions('a\\n[1]: https://x.io "X"\\nb')
        'a\\n\\nb'
    """
    return _REFERENCE_DEF_RE.sub("", text)


def preprocess(text: str) -> list[str]:
    """Normalize ``text`` and split it into lines.

    Sentinel delimiters are removed here so no block (fenced code included)
    can carry a forged placeholder token.
    """
    text = strip_sentinels(normalize_newlines(text))
    return strip_reference_definitions(text).split("\n")
