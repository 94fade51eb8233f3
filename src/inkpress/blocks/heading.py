"""ATX headings.

Levels 1 and 2 carry their decoration inline (gradient title with an
underline accent, left accent bar) because paste targets drop stylesheets.
Preview renders them bare and leaves styling to the host page.
"""

from __future__ import annotations

import re

from inkpress.inline import InlineFormatter
from inkpress.utils.color import round_half_up, with_alpha

HEADING_RE = re.compile(r"^(#{1,6})\s+(.+)$")

H1_SCALE = 2.2
H2_SCALE = 1.5
# Font-size multipliers for the plain heading levels
LEVEL_SCALES = {3: 1.3, 4: 1.1, 5: 1.0, 6: 0.9}


def match_heading(trimmed: str) -> tuple[int, str] | None:
    """Return (level, text) for a heading line."""
    match = HEADING_RE.match(trimmed)
    if match is None:
        return None
    return len(match.group(1)), match.group(2).strip()


class HeadingFormatter:
    """Render a heading line for one theme and base font size."""

    __slots__ = ("_inline", "_base", "_preview")

    def __init__(self, inline: InlineFormatter, base_font_size: int, is_preview: bool) -> None:
        self._inline = inline
        self._base = base_font_size
        self._preview = is_preview

    def format(self, level: int, text: str) -> str:
        content = self._inline.format(text)
        if level == 1:
            return self._h1(content)
        if level == 2:
            return self._h2(content)
        return self._plain(level, content)

    def _h1(self, content: str) -> str:
        if self._preview:
            return f"<h1>{content}</h1>"
        theme = self._inline.theme
        primary = theme.primary
        size = round_half_up(self._base * H1_SCALE)
        style = (
            f"margin: 1.8em 0 1.5em 0; font-weight: 700; font-size: {size}px; "
            "line-height: 1.3; text-align: center; "
            f"background: linear-gradient(135deg, {primary} 0%, "
            f"{theme.primary_dark or primary} 100%); "
            "-webkit-background-clip: text; -webkit-text-fill-color: transparent; "
            f"background-clip: text; color: {theme.text_primary}; display: flex; "
            "flex-direction: column; align-items: center; gap: 0.8rem;"
        )
        underline = (
            "width: 60px; height: 3px; "
            f"background: linear-gradient(90deg, transparent 0%, {primary} 20%, "
            f"{primary} 80%, transparent 100%); border-radius: 2px; "
            f"box-shadow: 0 2px 8px {with_alpha(primary, '40')}; "
            "display: block; margin: 0 auto;"
        )
        return f'<h1 style="{style}"><span>{content}</span><span style="{underline}"></span></h1>'

    def _h2(self, content: str) -> str:
        if self._preview:
            return f"<h2>{content}</h2>"
        theme = self._inline.theme
        primary = theme.primary
        size = round_half_up(self._base * H2_SCALE)
        style = (
            f"margin-top: 2rem; margin-bottom: 1.5rem; font-weight: 600; "
            f"font-size: {size}px; line-height: 1.4; color: {theme.text_primary}; "
            "display: flex; align-items: center; gap: 0.5em;"
        )
        faint, mid = with_alpha(primary, "20"), with_alpha(primary, "60")
        bar = (
            "width: 5px; height: 1.1em; "
            f"background: linear-gradient(180deg, {faint} 0%, {mid} 15%, {primary} 35%, "
            f"{primary} 65%, {mid} 85%, {faint} 100%); border-radius: 3px; "
            f"box-shadow: 0 0 6px {with_alpha(primary, '25')}; "
            "display: inline-block; flex-shrink: 0;"
        )
        return f'<h2 style="{style}"><span style="{bar}"></span><span>{content}</span></h2>'

    def _plain(self, level: int, content: str) -> str:
        size = round_half_up(self._base * LEVEL_SCALES.get(level, 1.0))
        style = (
            f"font-size: {size}px; color: {self._inline.theme.text_primary}; "
            "font-weight: 600; margin-top: 1.5rem; margin-bottom: 1rem; line-height: 1.25;"
        )
        return f'<h{level} style="{style}">{content}</h{level}>'
