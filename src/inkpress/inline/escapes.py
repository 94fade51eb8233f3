"""Backslash escapes.

``\\*`` and friends are swapped for tokens before any other pass and turned
back into the bare character at the very end, so an escaped marker is never
read as syntax.
"""

from __future__ import annotations

import re

from inkpress.inline.placeholders import Placeholders

ESCAPABLE = "\\*_`~[]()#+-.!"

_ESCAPE_RE = re.compile(r"\\([" + re.escape(ESCAPABLE) + r"])")


def protect_escapes(text: str, table: Placeholders) -> str:
    """Replace each escape sequence with a token holding the literal char."""
    if "\\" not in text:
        return text
    return _ESCAPE_RE.sub(lambda m: table.add(m.group(1)), text)


def restore_escapes(text: str, table: Placeholders) -> str:
    """Put the literal characters back."""
    return table.restore(text)
