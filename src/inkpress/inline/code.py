"""Inline code spans and link-target protection.

Both run right after HTML escaping. Code spans are rendered immediately and
parked behind tokens; link/image destinations are parked raw so emphasis
passes cannot rewrite ``_`` or ``*`` inside a URL.
"""

from __future__ import annotations

import re

from inkpress.inline.placeholders import Placeholders
from inkpress.themes import ColorTheme

INLINE_CODE_FONT_SIZE = 14

_CODE_RE = re.compile(r"`([^`]+)`")
_TARGET_RE = re.compile(r"\]\(([^)]+)\)")


def code_span_html(content: str, theme: ColorTheme) -> str:
    """Render already-escaped code text as a styled ``<code>``."""
    return (
        f'<code style="background-color: {theme.inline_code_bg}; '
        f"color: {theme.inline_code_text}; padding: 2px 4px; border-radius: 3px; "
        f"font-family: Consolas, monospace; font-size: {INLINE_CODE_FONT_SIZE}px; "
        f'border: 1px solid {theme.inline_code_border};">{content}</code>'
    )


def extract_inline_code(text: str, theme: ColorTheme, table: Placeholders) -> str:
    """Render code spans and replace them with tokens."""
    if "`" not in text:
        return text
    return _CODE_RE.sub(lambda m: table.add(code_span_html(m.group(1), theme)), text)


def protect_link_targets(text: str, table: Placeholders) -> str:
    """Park every ``](target)`` destination behind a token."""
    if "](" not in text:
        return text
    return _TARGET_RE.sub(lambda m: f"]({table.add(m.group(1))})", text)
