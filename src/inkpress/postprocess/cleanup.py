"""Attribute clean-up for targets that reject ``class`` and ``data-*``."""

from __future__ import annotations

import re

_STRIPPED_ATTR_RE = re.compile(
    r"""\s(?:class|data-[\w-]+)(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s>]+))?(?=[\s/>])""",
    re.IGNORECASE,
)
_TAG_RE = re.compile(r"<[a-zA-Z][^>]*>")


def clean_html(html: str) -> str:
    """Remove ``class`` and ``data-*`` attributes from every opening tag.

    Example:
        >>> clean_html('<img src="a.png" data-md-caption="true" class="x">')
        '<img src="a.png">'
    """
    return _TAG_RE.sub(lambda m: _STRIPPED_ATTR_RE.sub("", m.group(0)), html)
