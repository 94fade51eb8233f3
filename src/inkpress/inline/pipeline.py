"""Inline formatting pipeline.

Fixed pass order::

    escape-protect -> html-escape -> link-target protection -> code extraction
    -> kbd -> highlight -> bold/italic -> strikethrough -> superscript
    -> subscript -> link -> image -> code restore -> escape restore

Placeholder tables live only for the duration of one ``format`` call, so a
formatter can be reused (and shared between threads) freely.

Usage:
    >>> from inkpress.themes import DEFAULT_COLOR_THEME
    >>> formatter = InlineFormatter(DEFAULT_COLOR_THEME)
    >>> formatter.format("**hi**")
    '<strong style="color: #00A86B; font-weight: 900;">hi</strong>'
"""

from __future__ import annotations

from inkpress.inline.code import extract_inline_code, protect_link_targets
from inkpress.inline.emphasis import EmphasisFormatter
from inkpress.inline.escapes import protect_escapes, restore_escapes
from inkpress.inline.links import LinkFormatter
from inkpress.inline.placeholders import Placeholders, strip_sentinels
from inkpress.inline.special import SpecialFormatter
from inkpress.themes import ColorTheme
from inkpress.utils.text import escape_html


class InlineFormatter:
    """Character-level formatting for one color theme.

    Thread Safety:
        Holds only immutable, theme-derived markup prefixes. All per-call
        state is local to ``format``.
    """

    __slots__ = ("_theme", "_emphasis", "_special", "_links")

    def __init__(self, theme: ColorTheme) -> None:
        self._theme = theme
        self._emphasis = EmphasisFormatter(theme)
        self._special = SpecialFormatter(theme)
        self._links = LinkFormatter(theme)

    @property
    def theme(self) -> ColorTheme:
        return self._theme

    def format(self, text: str, handle_escapes: bool = True) -> str:
        """Format one line (or table cell, or quote line) of Markdown text.

        Args:
            text: Raw Markdown text; raw HTML in it is escaped
            handle_escapes: Honor backslash escapes. When False, backslashes
                are ordinary characters.

        Returns:
            Inline HTML
        """
        if not text:
            return ""
        escapes = Placeholders("E")
        code = Placeholders("C")
        targets = Placeholders("U")

        html = strip_sentinels(text)
        if handle_escapes:
            html = protect_escapes(html, escapes)
        html = escape_html(html)
        html = protect_link_targets(html, targets)
        html = extract_inline_code(html, self._theme, code)

        html = self._special.keyboard(html)
        html = self._special.highlight(html)
        html = self._emphasis.format(html)
        html = self._special.strikethrough(html)
        html = self._special.superscript(html)
        html = self._special.subscript(html)
        html = self._links.links(html, targets)
        html = self._links.images(html, targets, escapes, code)

        html = code.restore(html)
        html = targets.restore(html)
        return restore_escapes(html, escapes)


def format_inline(
    text: str,
    theme: ColorTheme,
    handle_escapes: bool = True,
) -> str:
    """One-shot convenience wrapper around :class:`InlineFormatter`."""
    return InlineFormatter(theme).format(text, handle_escapes=handle_escapes)
