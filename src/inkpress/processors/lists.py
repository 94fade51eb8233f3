"""List items.

Every list line is rendered on its own as an indented ``<p>`` with a styled
marker span, so nesting survives paste targets that flatten ``<ul>``/``<ol>``.
Depth comes from the indentation: two columns per level, tabs expanding to
the next multiple of four.

Usage:
    >>> from inkpress.inline import InlineFormatter
    >>> from inkpress.themes import DEFAULT_COLOR_THEME
    >>> processor = ListProcessor(InlineFormatter(DEFAULT_COLOR_THEME), 16)
    >>> item = processor.parse_item("  - [x] done")
    >>> item.type, item.depth, item.is_checked
    ('task', 1, True)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from inkpress.inline import InlineFormatter
from inkpress.themes import line_height_for
from inkpress.utils.color import round_half_up, scale_color

LIST_ITEM_RE = re.compile(r"^(\s*)([*+-]|\d{1,9}\.)\s+(.+)$")
TASK_RE = re.compile(r"^\[([ x])\]\s+(.+)$")

SPACES_PER_LEVEL = 2
TAB_WIDTH = 4
BASE_INDENT = 16
NESTED_INDENT = 20
ITEM_MARGIN = 8

UNORDERED_SYMBOLS = ("●", "○", "▪", "▫", "‣", "⁃")
# Glyphs differ in visual weight at the same font size
SYMBOL_SCALES = {"●": 1.0, "○": 0.5, "▪": 1.2, "▫": 0.8, "‣": 1.0, "⁃": 1.0}
DEPTH_COLOR_FACTORS = (1.0, 0.7, 0.5, 0.3)
TASK_CHECKED = "✓"

_ROMAN = (
    (1000, "m"), (900, "cm"), (500, "d"), (400, "cd"), (100, "c"), (90, "xc"),
    (50, "l"), (40, "xl"), (10, "x"), (9, "ix"), (5, "v"), (4, "iv"), (1, "i"),
)


class ListType(StrEnum):
    UNORDERED = "unordered"
    ORDERED = "ordered"
    TASK = "task"
    NONE = "none"


@dataclass(frozen=True, slots=True)
class ListItem:
    """One classified list line."""

    type: ListType
    depth: int
    marker: str
    content: str
    is_checked: bool = False
    indent: int = 0


def indent_width(indent: str) -> int:
    """Column width of leading whitespace (tabs to the next multiple of 4)."""
    width = 0
    for ch in indent:
        if ch == "\t":
            width += TAB_WIDTH - (width % TAB_WIDTH)
        else:
            width += 1
    return width


def to_lower_alpha(number: int) -> str:
    """1 -> a, 26 -> z, 27 -> aa."""
    result = ""
    while number > 0:
        number -= 1
        result = chr(97 + number % 26) + result
        number //= 26
    return result or "a"


def to_lower_roman(number: int) -> str:
    """Lowercase roman numeral; numbers outside 1..3999 stay arabic."""
    if not 0 < number < 4000:
        return str(number)
    result = []
    for value, literal in _ROMAN:
        while number >= value:
            result.append(literal)
            number -= value
    return "".join(result)


def ordered_marker(number: int, depth: int) -> str:
    """Marker style cycles every four levels: ``1.``, ``a.``, ``i.``, ``(1)``."""
    style = depth % 4
    if style == 1:
        return f"{to_lower_alpha(number)}."
    if style == 2:
        return f"{to_lower_roman(number)}."
    if style == 3:
        return f"({number})"
    return f"{number}."


def depth_colors(primary: str) -> tuple[str, ...]:
    """The primary color darkened per nesting level."""
    return tuple(scale_color(primary, factor) for factor in DEPTH_COLOR_FACTORS)


class ListProcessor:
    """Classify and render list lines; remembers the last item it saw.

    Thread Safety:
        Instances carry per-parse state (``current_depth``,
        ``last_list_type``). Create one per parse call.
    """

    __slots__ = ("_inline", "_font_size", "_line_height", "_colors",
                 "current_depth", "last_list_type")

    def __init__(self, inline: InlineFormatter, font_size: int, line_height: str | None = None) -> None:
        self._inline = inline
        self._font_size = font_size
        self._line_height = line_height or line_height_for(font_size)
        self._colors = depth_colors(inline.theme.primary)
        self.current_depth = 0
        self.last_list_type = ListType.NONE

    def reset(self) -> None:
        self.current_depth = 0
        self.last_list_type = ListType.NONE

    @staticmethod
    def parse_item(line: str) -> ListItem | None:
        """Classify ``line``; None if it is not a list item."""
        match = LIST_ITEM_RE.match(line)
        if match is None:
            return None
        indent, marker, content = match.groups()
        width = indent_width(indent)
        depth = width // SPACES_PER_LEVEL
        task = TASK_RE.match(content)
        if task is not None:
            return ListItem(
                type=ListType.TASK,
                depth=depth,
                marker=marker,
                content=task.group(2),
                is_checked=task.group(1) == "x",
                indent=width,
            )
        kind = ListType.ORDERED if marker[0].isdigit() else ListType.UNORDERED
        return ListItem(type=kind, depth=depth, marker=marker, content=content, indent=width)

    def process_line(self, line: str) -> str | None:
        """Render ``line`` if it is a list item, updating the tracked state."""
        item = self.parse_item(line)
        if item is None:
            return None
        self.current_depth = item.depth
        self.last_list_type = item.type
        return self.format_item(item)

    def format_item(self, item: ListItem) -> str:
        if item.type is ListType.TASK:
            return self._task(item)
        if item.type is ListType.ORDERED:
            return self._ordered(item)
        return self._unordered(item)

    def color_for_depth(self, depth: int) -> str:
        return self._colors[min(depth, len(self._colors) - 1)]

    def _item_style(self, depth: int, extra: str = "") -> str:
        margin_left = BASE_INDENT + depth * NESTED_INDENT
        return (
            f"margin-left: {margin_left}px; margin-top: {ITEM_MARGIN}px; "
            f"margin-bottom: {ITEM_MARGIN}px; font-size: {self._font_size}px; "
            f"line-height: {self._line_height};{extra}"
        )

    def _unordered(self, item: ListItem) -> str:
        symbol = UNORDERED_SYMBOLS[min(item.depth, len(UNORDERED_SYMBOLS) - 1)]
        size = self._font_size
        symbol_size = max(max(12, round_half_up(size * 0.75)), round_half_up(size * 0.88))
        weight = "600" if item.depth == 0 else "500"
        marker = (
            f'<span style="color: {self.color_for_depth(item.depth)}; font-weight: {weight}; '
            f"font-size: {symbol_size}px; display: inline-block; "
            f"transform: scale({SYMBOL_SCALES.get(symbol, 1.0)}); transform-origin: center; "
            f'margin-right: 8px;">{symbol}</span>'
        )
        content = self._inline.format(item.content)
        return f'<p style="{self._item_style(item.depth)}">{marker}{content}</p>'

    def _ordered(self, item: ListItem) -> str:
        label = ordered_marker(int(item.marker.rstrip(".")), item.depth)
        marker = (
            f'<span style="color: {self.color_for_depth(item.depth)}; font-weight: 600; '
            f'font-size: {self._font_size}px; margin-right: 8px; display: inline-block;">'
            f"{label}</span>"
        )
        content = self._inline.format(item.content)
        return f'<p style="{self._item_style(item.depth)}">{marker}{content}</p>'

    def _task(self, item: ListItem) -> str:
        theme = self._inline.theme
        box = max(14, round_half_up(self._font_size * 0.9))
        glyph = max(10, round_half_up(box * 0.7))
        if item.is_checked:
            checkbox = (
                "<span style=\"display: inline-flex; align-items: center; "
                f"justify-content: center; width: {box}px; height: {box}px; "
                f"background-color: {theme.primary}; border-radius: 3px; margin-right: 8px; "
                f"color: white; font-size: {glyph}px; font-weight: bold; "
                f'vertical-align: middle; flex-shrink: 0;">{TASK_CHECKED}</span>'
            )
            text_style = (
                f"text-decoration: line-through; color: {theme.text_secondary}; opacity: 0.8;"
            )
        else:
            checkbox = (
                f'<span style="display: inline-block; width: {box}px; height: {box}px; '
                f"background-color: {theme.bg_primary}; border: 2px solid {theme.border_medium}; "
                'border-radius: 3px; margin-right: 8px; vertical-align: middle; '
                'flex-shrink: 0;"></span>'
            )
            text_style = f"color: {theme.text_primary};"
        content = self._inline.format(item.content)
        style = self._item_style(item.depth, " display: flex; align-items: center;")
        return f'<p style="{style}">{checkbox}<span style="{text_style}">{content}</span></p>'
