"""Copy adapter for the breeze theme system.

Breeze turns the h1 into a centered pill, gives h2-h4 a colored bar laid
out as a two-cell table (so wrapped lines stay indented in editors that
drop flexbox), tints the inner card, and restyles links and tables. Bar
geometry and heading sizes come from the theme system's ``copy`` config.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

from inkpress.postprocess.adapters.protocol import CopyContext
from inkpress.themes import merge_record
from inkpress.utils.color import blend_with_white, mix_with_black, round_half_up
from inkpress.utils.style import (
    get_declaration,
    remove_declarations,
    restyle_tags,
    update_declarations,
)

# Empty spans sized in pixels are decoration (accent bars, underlines)
_DECORATIVE_SPAN_RE = re.compile(r'\s*<span\b[^>]*style="[^"]*\bwidth:\s*\d+px[^"]*"[^>]*></span>\s*')
_PILL_MARKER = "data-h1-pill"

_HEADING_DECORATION_PROPS = (
    "background", "background-clip", "-webkit-background-clip", "-webkit-text-fill-color",
    "text-shadow", "filter", "padding", "padding-left", "gap", "display",
    "align-items", "flex-direction", "border-left",
)
_H1_DECORATION_PROPS = (
    "background", "background-clip", "-webkit-background-clip", "-webkit-text-fill-color",
    "padding", "border-radius", "display", "margin", "font-size", "text-align",
    "flex-direction", "align-items", "gap",
)


@dataclass(frozen=True, slots=True)
class HeadingBar:
    """Geometry of one heading level's accent bar."""

    width_px: int
    height_em: float
    radius_px: int
    padding_left_px: int
    margin_top: str
    margin_bottom: str
    font_scale: float | None = None
    line_height: str | None = None


DEFAULT_BARS = {
    "h2": HeadingBar(6, 1.2, 3, 16, "1.8em", "1.1em", 1.5, "1.35em"),
    "h3": HeadingBar(4, 1.1, 2, 12, "1.2em", "0.8em", 1.22),
    "h4": HeadingBar(3, 1.05, 2, 10, "1em", "0.6em", 1.08),
}


def heading_bars(copy_config: Mapping[str, Any]) -> dict[str, HeadingBar]:
    """Merge ``copy.headings`` overrides (flat or under ``deco``) onto the defaults."""
    headings = copy_config.get("headings") or {}
    bars = {}
    for tag, default in DEFAULT_BARS.items():
        override = headings.get(tag) or {}
        merged = {**(override.get("deco") or {}), **override}
        bars[tag] = merge_record(default, merged) if merged else default
    return bars


class BreezeCopyAdapter:
    """Decorate copy-mode markup for the breeze theme system."""

    theme_ids: ClassVar[tuple[str, ...]] = ("breeze",)

    def transform(self, html: str, context: CopyContext) -> str:
        primary = context.primary_color
        rgb = context.primary_rgb
        copy_config = context.theme_system.copy
        bars = heading_bars(copy_config)

        out = self._h1(html, primary, rgb, context.base_font_size)
        colors = {
            "h2": primary,
            "h3": mix_with_black(primary, 0.6),
            "h4": mix_with_black(primary, 0.35),
        }
        for tag, color in colors.items():
            out = self._heading_bar(out, tag, bars[tag], color)

        out = restyle_tags(
            out,
            "a",
            lambda style: update_declarations(
                style,
                {
                    "color": primary,
                    "text-decoration": "none",
                    "border-bottom": "1px solid rgba(0,0,0,0)",
                },
            ),
        )
        inner_card = copy_config.get("innerCard") or {}
        shade = inner_card.get("shade")
        out = self._inner_card(
            out, blend_with_white(primary, shade if isinstance(shade, (int, float)) else 0.04), rgb
        )
        out = self._tables(out, primary, rgb)

        for tag, bar in bars.items():
            if bar.font_scale is None:
                continue
            updates = {"font-size": f"{round_half_up(context.base_font_size * bar.font_scale)}px"}
            if bar.line_height:
                updates["line-height"] = f"{bar.line_height} !important"
            out = restyle_tags(
                out, tag, lambda style, u=updates: update_declarations(style, u) if style else ""
            )
        return out

    def _h1(self, html: str, primary: str, rgb: str, base_font_size: int) -> str:
        pill = (
            "display: inline-block; padding: 8px 16px; border-radius: 12px; "
            f"background: {primary}; color: #fff; font-size: {base_font_size}px; "
            f"margin: 0 auto; box-shadow: 0 8px 20px rgba({rgb}, 0.22); letter-spacing: .5px;"
        )

        def repl(match: re.Match[str]) -> str:
            attrs, inner = match.group(1), match.group(2)
            if _PILL_MARKER in inner:
                return match.group(0)
            style = re.search(r'style="([^"]*)"', attrs)
            cleaned = remove_declarations(style.group(1) if style else "", *_H1_DECORATION_PROPS)
            new_style = update_declarations(
                cleaned, {"text-align": "center", "margin": "2.2em 0 1.6em"}
            )
            attrs = re.sub(r'\s*style="[^"]*"', "", attrs)
            text = _DECORATIVE_SPAN_RE.sub("", inner).strip()
            content = (
                '<span style="display:block; text-align:center;">'
                f'<span {_PILL_MARKER} style="{pill}">{text}</span></span>'
            )
            return f'<h1{attrs} style="{new_style}">{content}</h1>'

        return re.sub(r"<h1\b([^>]*)>([\s\S]*?)</h1>", repl, html)

    def _heading_bar(self, html: str, tag: str, bar: HeadingBar, color: str) -> str:
        deco = (
            f"display: block; width: {bar.width_px}px; height: {bar.height_em:g}em; "
            f"border-radius: {bar.radius_px}px; background: {color}; "
            "box-shadow: 0 0 6px rgba(0,0,0,0.08);"
        )
        left_cell = "display: table-cell; vertical-align: middle; width: 1px;"
        right_cell = "display: table-cell; vertical-align: middle; padding-left: 0.5em;"

        def repl(match: re.Match[str]) -> str:
            attrs, inner = match.group(1), match.group(2)
            style_match = re.search(r'style="([^"]*)"', attrs)
            if style_match is None or get_declaration(style_match.group(1), "display") == "table":
                return match.group(0)
            cleaned = remove_declarations(style_match.group(1), *_HEADING_DECORATION_PROPS)
            new_style = update_declarations(
                cleaned,
                {
                    "margin-top": bar.margin_top,
                    "margin-bottom": bar.margin_bottom,
                    "display": "table",
                    "width": "100%",
                },
            )
            attrs = attrs[: style_match.start()] + f'style="{new_style}"' + attrs[style_match.end() :]
            content = _DECORATIVE_SPAN_RE.sub("", inner, count=1)
            return (
                f'<{tag}{attrs}><span style="{left_cell}"><span style="{deco}">&#8203;</span></span>'
                f'<span style="{right_cell}">{content}</span></{tag}>'
            )

        return re.sub(rf"<{tag}\b([^>]*)>([\s\S]*?)</{tag}>", repl, html)

    def _inner_card(self, html: str, card_bg: str, rgb: str) -> str:
        def restyle(style: str) -> str:
            cleaned = remove_declarations(
                style, "background", "background-color", "border-radius", "border", "padding"
            )
            return update_declarations(
                cleaned,
                {
                    "background-color": card_bg,
                    "border-radius": "12px",
                    "padding": "24px 20px",
                    "border": f"1px solid rgba({rgb}, 0.12)",
                },
            )

        return restyle_tags(html, "section", restyle, where=lambda attrs: 'data-role="inner"' in attrs)

    def _tables(self, html: str, primary: str, rgb: str) -> str:
        border = f"rgba({rgb}, 0.18)"
        header_bg = blend_with_white(primary, 0.06)

        out = restyle_tags(
            html,
            "table",
            lambda style: update_declarations(
                remove_declarations(style, "border-collapse", "border", "border-radius",
                                    "background", "margin"),
                {
                    "border-collapse": "collapse",
                    "width": "100%",
                    "border": f"1px solid {border}",
                    "border-radius": "12px",
                    "background": "#fff",
                    "margin": "1.2em 0",
                },
            ),
        )
        out = restyle_tags(
            out,
            "th",
            lambda style: update_declarations(
                remove_declarations(
                    style, "background", "color", "font-weight", "border", "border-top", "padding"
                ),
                {
                    "background": header_bg,
                    "color": "#1f2328",
                    "font-weight": "600",
                    "border-top": f"1px solid {border}",
                    "padding": "10px 12px",
                },
            ),
        )
        out = restyle_tags(
            out,
            "td",
            lambda style: update_declarations(
                remove_declarations(style, "border", "border-top", "padding"),
                {"border-top": f"1px solid {border}", "padding": "10px 12px"},
            ),
        )
        return re.sub(r"<table\b([^>]*)>([\s\S]*?)</table>", _merge_header_into_body, out)


def _merge_header_into_body(match: re.Match[str]) -> str:
    """Move the header row into the body; some editors drop ``<thead>``."""
    attrs, inner = match.group(1), match.group(2)
    thead = re.search(r"<thead>([\s\S]*?)</thead>", inner)
    if thead is None:
        return match.group(0)
    rest = inner[: thead.start()] + inner[thead.end() :]
    if "<tbody>" in rest:
        rest = rest.replace("<tbody>", f"<tbody>{thead.group(1)}", 1)
    else:
        rest = f"<tbody>{thead.group(1)}{rest}</tbody>"
    return f"<table{attrs}>{rest}</table>"
