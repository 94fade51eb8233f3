"""Bold and italic.

Resolution order: triple-marker bold-italic, bold spans with italic nested
inside, remaining bold, remaining italic. Every pass only sees text between
tags, so markers inside attribute values are never touched.

Underscore markers must not touch word characters on the outside, which
keeps ``snake_case_names`` literal. Asterisks may appear mid-word.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from inkpress.themes import ColorTheme

_TAG_SPLIT_RE = re.compile(r"(<[^>]+>)")

_BOLD_ITALIC_STAR_RE = re.compile(r"\*\*\*(?!\s)(.+?)(?<!\s)\*\*\*")
_BOLD_ITALIC_UNDER_RE = re.compile(r"(?<!\w)___(?!\s)(.+?)(?<!\s)___(?!\w)")
_NESTED_BOLD_STAR_RE = re.compile(r"\*\*([^*]*(?:\*[^*]+\*[^*]*)*)\*\*")
_NESTED_BOLD_UNDER_RE = re.compile(r"(?<!\w)__([^_]*(?:_[^_]+_[^_]*)*)__(?!\w)")
_INNER_ITALIC_STAR_RE = re.compile(r"\*([^*]+)\*")
_INNER_ITALIC_UNDER_RE = re.compile(r"(?<![^\W_])_([^_]+)_(?![^\W_])")
_BOLD_STAR_RE = re.compile(r"\*\*([^*]+)\*\*")
_BOLD_UNDER_RE = re.compile(r"(?<!\w)__([^_]+)__(?!\w)")
_ITALIC_STAR_RE = re.compile(r"(?<!\*)\*(?!\s)([^*]+?)(?<!\s)\*(?!\*)")
_ITALIC_UNDER_RE = re.compile(r"(?<!\w)_(?!\s)([^_]+?)(?<!\s)_(?!\w)")


def map_text_segments(html: str, transform: Callable[[str], str]) -> str:
    """Apply ``transform`` to every run of text outside tags."""
    if "<" not in html:
        return transform(html)
    parts = _TAG_SPLIT_RE.split(html)
    return "".join(part if i % 2 else transform(part) for i, part in enumerate(parts))


class EmphasisFormatter:
    """Bold/italic rendering for one color theme."""

    __slots__ = ("_bold_open", "_bold_italic_open", "_italic_open")

    def __init__(self, theme: ColorTheme) -> None:
        self._bold_open = f'<strong style="color: {theme.primary}; font-weight: 900;">'
        self._bold_italic_open = (
            f'<strong><em style="color: {theme.primary}; font-style: italic; '
            'font-weight: 900;">'
        )
        self._italic_open = f'<em style="color: {theme.text_secondary}; font-style: italic;">'

    def format(self, html: str) -> str:
        """Render emphasis in every text segment of ``html``."""
        if "*" not in html and "_" not in html:
            return html
        html = map_text_segments(html, self._bold_italic)
        html = map_text_segments(html, self._nested_bold)
        html = map_text_segments(html, self._bold)
        return map_text_segments(html, self._italic)

    def _bold_italic(self, text: str) -> str:
        wrap = lambda m: f"{self._bold_italic_open}{m.group(1)}</em></strong>"  # noqa: E731
        text = _BOLD_ITALIC_STAR_RE.sub(wrap, text)
        return _BOLD_ITALIC_UNDER_RE.sub(wrap, text)

    def _nested_bold(self, text: str) -> str:
        def star(match: re.Match[str]) -> str:
            inner = _INNER_ITALIC_STAR_RE.sub(self._italic_sub, match.group(1))
            return f"{self._bold_open}{inner}</strong>"

        def under(match: re.Match[str]) -> str:
            inner = _INNER_ITALIC_UNDER_RE.sub(self._italic_sub, match.group(1))
            return f"{self._bold_open}{inner}</strong>"

        text = _NESTED_BOLD_STAR_RE.sub(star, text)
        return _NESTED_BOLD_UNDER_RE.sub(under, text)

    def _bold(self, text: str) -> str:
        wrap = lambda m: f"{self._bold_open}{m.group(1)}</strong>"  # noqa: E731
        text = _BOLD_STAR_RE.sub(wrap, text)
        return _BOLD_UNDER_RE.sub(wrap, text)

    def _italic(self, text: str) -> str:
        text = _ITALIC_STAR_RE.sub(self._italic_sub, text)
        return _ITALIC_UNDER_RE.sub(self._italic_sub, text)

    def _italic_sub(self, match: re.Match[str]) -> str:
        return f"{self._italic_open}{match.group(1)}</em>"
