"""Typography normalization for copy mode.

Every block tag ends up with an explicit font size, line height and letter
spacing. Bare tags get a complete style; styled tags have line height and
letter spacing normalized while their own font size is kept. Running the
processor twice yields the same markup. Preview output is left alone: the
host page styles it.

Thread Safety:
Stateless apart from immutable settings. Safe to share.
"""

from __future__ import annotations

from collections.abc import Callable

from inkpress.themes import FontSettings, line_height_for
from inkpress.utils.color import round_half_up
from inkpress.utils.style import restyle_tags, update_declarations

H1_SCALE = 2.2
# Heading size multipliers used when a heading arrives without a font size
HEADING_SCALES = {"h2": 1.5, "h3": 1.3, "h4": 1.1}


def format_letter_spacing(value: float | None) -> str:
    return f"{value or 0:g}px"


class FontProcessor:
    """Fill in font size, line height and letter spacing on block tags."""

    __slots__ = ("_settings", "_is_preview")

    def __init__(self, settings: FontSettings, is_preview: bool = False) -> None:
        self._settings = settings
        self._is_preview = is_preview

    def process(self, html: str) -> str:
        if not html:
            return ""
        if self._is_preview:
            return html
        size = self._settings.font_size
        line_height = line_height_for(size, self._settings.line_height)
        spacing = format_letter_spacing(self._settings.letter_spacing)

        out = html
        for tag in ("p", "li", "ul", "ol", "blockquote"):
            out = restyle_tags(out, tag, self._block_rule(tag, size, line_height, spacing))
        out = restyle_tags(out, "h1", self._h1_rule(size, spacing))
        for tag, scale in HEADING_SCALES.items():
            heading_lh = "1.4em" if tag == "h2" else line_height
            out = restyle_tags(
                out, tag, self._block_rule(tag, round_half_up(size * scale), heading_lh, spacing)
            )
        return out

    @staticmethod
    def _block_rule(
        tag: str, size: int, line_height: str, spacing: str
    ) -> Callable[[str], str]:
        weight = "600" if tag.startswith("h") else "400"
        missing = {"font-size": f"{size}px", "font-weight": weight}
        forced = {"line-height": f"{line_height} !important", "letter-spacing": spacing}

        def rule(style: str) -> str:
            if not style:
                return update_declarations("", {"letter-spacing": spacing, **missing, **forced})
            return update_declarations(
                update_declarations(style, missing, overwrite=False), forced
            )

        return rule

    @staticmethod
    def _h1_rule(size: int, spacing: str) -> Callable[[str], str]:
        missing = {
            "font-size": f"{round_half_up(size * H1_SCALE)}px",
            "line-height": "1.3em !important",
            "font-weight": "700",
            "text-align": "center",
        }

        def rule(style: str) -> str:
            return update_declarations(
                update_declarations(style, {"letter-spacing": spacing}), missing, overwrite=False
            )

        return rule
