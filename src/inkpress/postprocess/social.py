"""Copy-mode styling for rich-text paste targets.

Paste targets ignore stylesheets and inherit nothing from the page, so the
copy output is wrapped in two ``<section>`` containers that carry the
typography, bare inline tags get explicit styles, and captioned images are
wrapped in ``<figure>``. The theme system's copy adapter then applies its
own decoration.

In preview mode only the captions are added; everything else is left to
the host page.

Thread Safety:
SocialStyler holds an immutable adapter registry. Safe to share.
"""

from __future__ import annotations

import re

from inkpress.postprocess.adapters import DEFAULT_REGISTRY, CopyAdapterRegistry, CopyContext
from inkpress.postprocess.font import format_letter_spacing
from inkpress.themes import (
    ColorTheme,
    FontSettings,
    ThemeSystem,
    line_height_for,
    resolve_font_family,
)
from inkpress.utils.color import rgb_triplet, round_half_up
from inkpress.utils.logger import get_logger
from inkpress.utils.style import restyle_tags, update_declarations

logger = get_logger(__name__)

TEXT_COLOR = "#333"
CAPTION_COLOR = "#666"

_CAPTIONED_IMG_RE = re.compile(r'<img\b[^>]*\bdata-md-caption="true"[^>]*>', re.IGNORECASE)
_ALT_RE = re.compile(r'\balt="([^"]*)"', re.IGNORECASE)

# Tags whose line height is forced to the body value
_LINE_HEIGHT_TAGS = ("section", "p", "h1", "h2", "h3", "ul", "ol", "li", "blockquote")


def _base_style(family: str, spacing: str) -> str:
    return f"font-family: {family}; color: {TEXT_COLOR}; letter-spacing: {spacing};"


def wrap_captions(html: str, base_style: str, font_size: int) -> str:
    """Wrap every captioned image in a figure whose caption is its alt text."""
    figure_style = f"{base_style} text-align: center; margin: 1em 0;"
    caption_style = (
        f"{base_style} display: block; "
        f"font-size: {max(12, round_half_up(font_size * 0.875))}px; "
        f"color: {CAPTION_COLOR}; margin-top: 6px;"
    )

    def repl(match: re.Match[str]) -> str:
        img = match.group(0)
        alt = _ALT_RE.search(img)
        caption = alt.group(1) if alt else ""
        return (
            f'<figure style="{figure_style}">{img}'
            f'<figcaption style="{caption_style}">{caption}</figcaption></figure>'
        )

    return _CAPTIONED_IMG_RE.sub(repl, html)


class SocialStyler:
    """Wrap, style and adapt markup for pasting into rich-text editors."""

    __slots__ = ("_adapters",)

    def __init__(self, adapters: CopyAdapterRegistry | None = None) -> None:
        self._adapters = adapters if adapters is not None else DEFAULT_REGISTRY

    def process(
        self,
        html: str,
        *,
        font_settings: FontSettings,
        color_theme: ColorTheme,
        theme_system: ThemeSystem,
        is_preview: bool = False,
    ) -> str:
        if not html:
            return ""
        family = resolve_font_family(font_settings.font_family)
        spacing = format_letter_spacing(font_settings.letter_spacing)

        if is_preview:
            return wrap_captions(html, _base_style(family, spacing), font_settings.font_size)

        out = self.wrap_with_font_styles(html, font_settings)
        adapter = self._adapters.get(theme_system)
        if adapter is None:
            return out
        logger.debug("Applying %s copy adapter", type(adapter).__name__)
        context = CopyContext(
            primary_color=color_theme.primary,
            base_font_size=font_settings.font_size,
            primary_rgb=rgb_triplet(color_theme.primary),
            theme_system=theme_system,
        )
        return adapter.transform(out, context)

    @classmethod
    def wrap_with_font_styles(cls, html: str, font_settings: FontSettings) -> str:
        """Style ``html`` and wrap it in the outer and inner containers."""
        family = resolve_font_family(font_settings.font_family)
        size = font_settings.font_size
        line_height = line_height_for(size, font_settings.line_height)
        spacing = format_letter_spacing(font_settings.letter_spacing)
        container = (
            f"font-family: {family}; font-size: {size}px; "
            f"line-height: {line_height} !important; letter-spacing: {spacing}; "
            f"font-weight: 400; color: {TEXT_COLOR};"
        )
        return (
            f'<section data-role="outer" style="{container} margin: 0; padding: 0;">\n'
            f'<section data-role="inner" style="{container}">\n'
            f"{cls.apply_inline_styles(html, font_settings)}\n"
            "</section>\n</section>"
        )

    @staticmethod
    def apply_inline_styles(html: str, font_settings: FontSettings | None) -> str:
        """Give bare tags explicit typography and add image captions.

        Tags that already carry a style keep it, except that the listed
        block tags all get the body line height.
        """
        if not html or font_settings is None:
            return html
        family = resolve_font_family(font_settings.font_family)
        size = font_settings.font_size
        line_height = line_height_for(size, font_settings.line_height)
        lh = f"{line_height} !important"
        base = _base_style(family, format_letter_spacing(font_settings.letter_spacing))

        bare_styles = {
            "section": f"{base} line-height: {lh};",
            "p": f"{base} font-size: {size}px; line-height: {lh}; margin: 1.5em 8px; font-weight: 400;",
            "h1": (
                f"{base} font-size: {size}px; line-height: 1.3em !important; "
                "font-weight: 700; margin: 1.8em 0 1.5em; text-align: center;"
            ),
            "h2": (
                f"{base} font-size: {round_half_up(size * 1.5)}px; line-height: 1.4em !important; "
                "font-weight: 600; margin: 2em 0 1.5em;"
            ),
            "h3": (
                f"{base} font-size: {round_half_up(size * 1.3)}px; line-height: {lh}; "
                "font-weight: 600; margin: 1.5em 0 1em;"
            ),
            "h4": (
                f"{base} font-size: {round_half_up(size * 1.1)}px; line-height: {lh}; "
                "font-weight: 600; margin: 1em 0 0.6em;"
            ),
            "li": f"{base} font-size: {size}px; line-height: {lh}; font-weight: 400; margin: 0.5em 0;",
            "blockquote": (
                f"{base} font-size: {size}px; line-height: {lh}; margin: 1.5em 8px; "
                "padding: 1em 1em 1em 2em; border-left: 3px solid #dbdbdb; "
                "background-color: #f8f8f8; font-weight: 400;"
            ),
            "ul": (
                f"{base} font-size: {size}px; line-height: {lh}; margin: 1.5em 8px; "
                "padding-left: 25px; font-weight: 400;"
            ),
            "ol": (
                f"{base} font-size: {size}px; line-height: {lh}; margin: 1.5em 8px; "
                "padding-left: 25px; font-weight: 400;"
            ),
            "strong": f"{base} font-weight: 700;",
            "b": f"{base} font-weight: 700;",
            "em": f"{base} font-weight: 400; font-style: italic;",
            "i": f"{base} font-weight: 400; font-style: italic;",
        }

        out = html
        for tag, bare in bare_styles.items():
            out = restyle_tags(out, tag, lambda style, bare=bare: style or bare)
        out = wrap_captions(out, base, size)
        return restyle_tags(
            out, _LINE_HEIGHT_TAGS, lambda style: update_declarations(style, {"line-height": lh})
        )
