"""Keyboard keys, highlight, strikethrough, superscript and subscript."""

from __future__ import annotations

import re

from inkpress.inline.emphasis import map_text_segments
from inkpress.themes import ColorTheme

# Raw HTML is escaped before this pass, so <kbd> arrives as entities
_KBD_RE = re.compile(r"&lt;kbd&gt;(.*?)&lt;/kbd&gt;", re.IGNORECASE)
_HIGHLIGHT_RE = re.compile(r"==(?!=)(.+?)==")
_STRIKE_RE = re.compile(r"~~(?!~)(.+?)~~")
_SUPERSCRIPT_RE = re.compile(r"\^([^\^\s]+)\^")
_SUBSCRIPT_RE = re.compile(r"(?<!~)~([^~\s]+)~(?!~)")


class SpecialFormatter:
    """The small inline constructs, each styled from the color theme."""

    __slots__ = ("_kbd", "_mark", "_del", "_sup", "_sub")

    def __init__(self, theme: ColorTheme) -> None:
        self._kbd = (
            f'<kbd style="background-color: {theme.border_light}; color: {theme.text_primary}; '
            f"padding: 2px 6px; border-radius: 3px; border: 1px solid {theme.border_medium}; "
            "font-family: monospace; font-size: 0.9em; "
            f'box-shadow: 0 1px 2px {theme.shadow_color};">'
        )
        self._mark = (
            f'<mark style="background-color: {theme.highlight}; color: {theme.text_primary}; '
            'padding: 1px 2px; border-radius: 2px;">'
        )
        self._del = f'<del style="color: {theme.text_muted}; text-decoration: line-through;">'
        self._sup = f'<sup style="color: {theme.text_secondary}; font-size: 0.8em;">'
        self._sub = f'<sub style="color: {theme.text_secondary}; font-size: 0.8em;">'

    def keyboard(self, html: str) -> str:
        if "kbd" not in html:
            return html
        return _KBD_RE.sub(lambda m: f"{self._kbd}{m.group(1)}</kbd>", html)

    def highlight(self, html: str) -> str:
        if "==" not in html:
            return html
        return map_text_segments(
            html, lambda t: _HIGHLIGHT_RE.sub(lambda m: f"{self._mark}{m.group(1)}</mark>", t)
        )

    def strikethrough(self, html: str) -> str:
        if "~~" not in html:
            return html
        return map_text_segments(
            html, lambda t: _STRIKE_RE.sub(lambda m: f"{self._del}{m.group(1)}</del>", t)
        )

    def superscript(self, html: str) -> str:
        if "^" not in html:
            return html
        return map_text_segments(
            html, lambda t: _SUPERSCRIPT_RE.sub(lambda m: f"{self._sup}{m.group(1)}</sup>", t)
        )

    def subscript(self, html: str) -> str:
        if "~" not in html:
            return html
        return map_text_segments(
            html, lambda t: _SUBSCRIPT_RE.sub(lambda m: f"{self._sub}{m.group(1)}</sub>", t)
        )
