"""Theme normalization.

Re-applies the theme-derived declarations (quote accent and gradient,
table borders, heading gradient) after parsing, so markup produced by any
formatter agrees with the active color theme. Running it twice yields the
same markup.

Thread Safety:
Stateless apart from immutable theme data. Safe to share.
"""

from __future__ import annotations

from inkpress.processors.table import CELL_TEXT_COLOR
from inkpress.themes import ColorTheme
from inkpress.utils.color import with_alpha
from inkpress.utils.style import ensure_declaration, restyle_tags, update_declarations


class ThemeProcessor:
    """Normalize theme colors on quotes, tables and (copy mode) h1."""

    __slots__ = ("_theme", "_is_preview")

    def __init__(self, theme: ColorTheme, is_preview: bool = False) -> None:
        self._theme = theme
        self._is_preview = is_preview

    def process(self, html: str) -> str:
        if not html:
            return ""
        primary = self._theme.primary
        tint, fade = with_alpha(primary, "14"), with_alpha(primary, "0A")
        border = self._theme.table_border

        out = restyle_tags(
            html,
            "blockquote",
            lambda style: update_declarations(
                style,
                {
                    "border-left": f"4px solid {primary}",
                    "background": (
                        f"linear-gradient(135deg, {tint} 0%, {fade} 50%, {tint} 100%)"
                    ),
                },
            ),
        )
        out = restyle_tags(
            out,
            "table",
            lambda style: ensure_declaration(
                update_declarations(style, {"border-collapse": "collapse", "width": "100%"}),
                "margin",
                "16px 0",
            ),
        )
        out = restyle_tags(
            out,
            ("th", "td"),
            lambda style: update_declarations(
                style,
                {
                    "border": f"1px solid {border}",
                    "padding": "8px 12px",
                    "color": CELL_TEXT_COLOR,
                },
            ),
        )
        if not self._is_preview:
            gradient = (
                f"linear-gradient(135deg, {primary} 0%, {self._theme.primary_dark or primary} 100%)"
            )
            out = restyle_tags(
                out, "h1", lambda style: update_declarations(style, {"background": gradient})
            )
        return out
