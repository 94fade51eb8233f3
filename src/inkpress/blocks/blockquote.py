"""Blockquotes, including nested quotes.

The parser hands over the raw quote lines (``> a``, ``> > b``, "" for a
blank quote line). They are partitioned recursively: lines at the current
depth become paragraphs, deeper lines are collected into a child quote
rendered one level down. Each level has its own spacing, size and shadow.
"""

from __future__ import annotations

from dataclasses import dataclass

from inkpress.inline import InlineFormatter
from inkpress.stringbuilder import StringBuilder
from inkpress.themes import line_height_for
from inkpress.utils.color import round_half_up, with_alpha


@dataclass(frozen=True, slots=True)
class QuoteLevelStyle:
    margin: str
    padding: str
    font_scale: float
    shadow: str
    shadow_alpha: str


QUOTE_LEVEL_STYLES = {
    1: QuoteLevelStyle("24px 0", "18px 24px", 1.0, "0 4px 16px", "1A"),
    2: QuoteLevelStyle("12px 0 12px 0px", "12px 18px", 0.94, "0 2px 8px", "14"),
    3: QuoteLevelStyle("8px 0 8px 0px", "8px 12px", 0.88, "0 1px 4px", "0F"),
}
DEFAULT_QUOTE_STYLE = QuoteLevelStyle("6px 0 6px 0px", "6px 10px", 0.81, "0 1px 2px", "0A")


def split_quote_line(line: str) -> tuple[int, str]:
    """Return (depth, content); depth 0 means the line is not quoted.

    Examples:
        >>> split_quote_line("> > nested")
        (2, 'nested')
        >>> split_quote_line("plain")
        (0, 'plain')
    """
    content = line.strip()
    depth = 0
    while content.startswith(">"):
        depth += 1
        content = content[1:].strip()
    if depth == 0:
        return 0, line
    return depth, content


class BlockquoteFormatter:
    """Render accumulated quote lines for one theme and base font size."""

    __slots__ = ("_inline", "_base")

    def __init__(self, inline: InlineFormatter, base_font_size: int) -> None:
        self._inline = inline
        self._base = base_font_size

    def format(self, lines: list[str]) -> str:
        if not lines:
            return ""
        return self._build(lines, 1)

    def level_style(self, level: int) -> str:
        """Inline style of the ``<blockquote>`` at ``level`` (1-based)."""
        config = QUOTE_LEVEL_STYLES.get(level, DEFAULT_QUOTE_STYLE)
        theme = self._inline.theme
        primary = theme.primary
        tint, fade = with_alpha(primary, "14"), with_alpha(primary, "0A")
        return (
            f"border-left: 4px solid {primary}; "
            f"background: linear-gradient(135deg, {tint} 0%, {fade} 50%, {tint} 100%); "
            f"margin: {config.margin}; padding: {config.padding}; border-radius: 6px; "
            f"position: relative; "
            f"box-shadow: {config.shadow} {with_alpha(primary, config.shadow_alpha)}; "
            f"color: {theme.text_primary}; font-style: italic; line-height: 1.6; "
            f"font-size: {self._font_size(level)}px;"
        )

    def _font_size(self, level: int) -> int:
        config = QUOTE_LEVEL_STYLES.get(level, DEFAULT_QUOTE_STYLE)
        return round_half_up(self._base * config.font_scale)

    def _build(self, lines: list[str], level: int) -> str:
        sb = StringBuilder()
        current: list[str] = []
        children: list[str] = []

        for line in lines:
            depth, content = split_quote_line(line)
            if depth > 1:
                if current:
                    sb.append(self._paragraphs(current, level))
                    current = []
                children.append(">" * (depth - 1) + " " + content)
            else:
                if children:
                    sb.append(self._build(children, level + 1))
                    children = []
                current.append(content)

        if current:
            sb.append(self._paragraphs(current, level))
        if children:
            sb.append(self._build(children, level + 1))
        return f'<blockquote style="{self.level_style(level)}">{sb.build()}</blockquote>'

    def _paragraphs(self, lines: list[str], level: int) -> str:
        size = self._font_size(level)
        line_height = line_height_for(self._base)
        sb = StringBuilder()
        paragraph: list[str] = []
        for line in [*lines, ""]:
            if line.strip():
                paragraph.append(self._inline.format(line.strip()))
                continue
            if paragraph:
                sb.append(
                    f'<p style="margin: 8px 0; line-height: {line_height}; '
                    f'font-size: {size}px;">{"<br>".join(paragraph)}</p>'
                )
                paragraph = []
        return sb.build()
