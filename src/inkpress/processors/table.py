"""Pipe tables.

A table is recognized one line at a time::

    NONE --(candidate row, alignment row ahead)--> DETECTING
    DETECTING --(alignment row)--> PROCESSING
    PROCESSING --(non-data line / end of input)--> emit, NONE

A candidate only enters DETECTING when the next non-blank line is an
alignment row, so a lone line containing ``|`` stays a paragraph. If a
DETECTING table loses its alignment row anyway, the stored rows are
released back to the caller and no table markup is produced.

Thread Safety:
TableProcessor instances carry per-parse state. Create one per parse call.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto

from inkpress.inline import InlineFormatter
from inkpress.stringbuilder import StringBuilder
from inkpress.utils.logger import get_logger

logger = get_logger(__name__)

_ALIGN_CELL_RE = re.compile(r"^:?-+:?$")

CELL_TEXT_COLOR = "#24292e"


class TableState(Enum):
    NONE = auto()
    DETECTING = auto()
    PROCESSING = auto()


@dataclass(frozen=True, slots=True)
class TableStep:
    """Outcome of feeding one line to the table processor.

    Attributes:
        consumed: The line became part of the table
        html: Finished table markup, when this step closed a table
        reprocess: The caller must dispatch the same line again
        released: Rows given back because the table never materialized
    """

    consumed: bool
    html: str = ""
    reprocess: bool = False
    released: tuple[str, ...] = ()


def split_row(line: str) -> list[str]:
    """Split a row on unescaped pipes; outer pipes are optional.

    Examples:
        >>> split_row("| a | b \\\\| c |")
        ['a', 'b | c']
    """
    row = line.strip()
    if row.startswith("|"):
        row = row[1:]
    if row.endswith("|") and not row.endswith("\\|"):
        row = row[:-1]

    cells: list[str] = []
    current: list[str] = []
    i = 0
    while i < len(row):
        ch = row[i]
        if ch == "\\" and i + 1 < len(row) and row[i + 1] == "|":
            current.append("|")
            i += 2
            continue
        if ch == "|":
            cells.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
        i += 1
    cells.append("".join(current).strip())
    return cells


def parse_alignment_row(line: str) -> tuple[str, ...] | None:
    """Return per-column alignments, or None if ``line`` is not an alignment row.

    ``:---`` -> left, ``:---:`` -> center, ``---:`` -> right, ``---`` -> left.
    """
    if "|" not in line or "-" not in line:
        return None
    alignments: list[str] = []
    for cell in split_row(line):
        cell = cell.replace(" ", "")
        if not _ALIGN_CELL_RE.match(cell):
            return None
        if cell.startswith(":") and cell.endswith(":"):
            alignments.append("center")
        elif cell.endswith(":"):
            alignments.append("right")
        else:
            alignments.append("left")
    return tuple(alignments)


def is_candidate_row(trimmed: str) -> bool:
    """A line that could be a header or data row."""
    return "|" in trimmed and parse_alignment_row(trimmed) is None


class TableProcessor:
    """Line-by-line table state machine and renderer."""

    __slots__ = ("_inline", "_font_size", "_border", "_header_bg", "state", "rows")

    def __init__(self, inline: InlineFormatter, font_size: int = 16) -> None:
        self._inline = inline
        self._font_size = font_size
        self._border = inline.theme.table_border
        self._header_bg = inline.theme.table_header_bg
        self.state = TableState.NONE
        self.rows: list[str] = []

    @property
    def is_active(self) -> bool:
        return self.state is not TableState.NONE

    @property
    def is_processing(self) -> bool:
        return self.state is TableState.PROCESSING

    def reset(self) -> None:
        self.state = TableState.NONE
        self.rows = []

    @staticmethod
    def should_start(lines: list[str], index: int) -> bool:
        """True if ``lines[index]`` is a header whose alignment row follows.

        Blank lines between the two are skipped.
        """
        if not is_candidate_row(lines[index].strip()):
            return False
        for following in lines[index + 1 :]:
            if following.strip():
                return parse_alignment_row(following.strip()) is not None
        return False

    def process_row(self, line: str, lines: list[str], index: int) -> TableStep | None:
        """Feed one line; None means the line has nothing to do with tables."""
        trimmed = line.strip()

        if self.state is TableState.NONE:
            if not self.should_start(lines, index):
                return None
            self.rows = [trimmed]
            self.state = TableState.DETECTING
            return TableStep(consumed=True)

        if self.state is TableState.DETECTING:
            if parse_alignment_row(trimmed) is not None:
                self.rows.append(trimmed)
                self.state = TableState.PROCESSING
                return TableStep(consumed=True)
            released = tuple(self.rows)
            logger.debug("Table header without alignment row at line %d", index + 1)
            self.reset()
            return TableStep(consumed=False, reprocess=True, released=released)

        if is_candidate_row(trimmed):
            self.rows.append(trimmed)
            return TableStep(consumed=True)
        return TableStep(consumed=False, html=self.flush().html, reprocess=True)

    def flush(self) -> TableStep:
        """Close whatever is open: emit a PROCESSING table, release a DETECTING one."""
        if self.state is TableState.PROCESSING:
            html = self.render(self.rows)
            self.reset()
            return TableStep(consumed=False, html=html)
        if self.state is TableState.DETECTING:
            released = tuple(self.rows)
            self.reset()
            return TableStep(consumed=False, released=released)
        return TableStep(consumed=False)

    def render(self, rows: list[str]) -> str:
        """Render header, alignment and body rows as an inline-styled table."""
        header = split_row(rows[0])
        alignments = parse_alignment_row(rows[1]) or ()
        columns = len(header)

        sb = StringBuilder()
        sb.append(
            '<table style="border-collapse: collapse; width: 100%; margin: 16px 0; '
            f'font-size: {self._font_size}px;">'
        )
        sb.append(f'<thead><tr style="background-color: {self._header_bg};">')
        for col, cell in enumerate(header):
            sb.append(
                f'<th style="border: 1px solid {self._border}; padding: 8px 12px; '
                f"text-align: {self._align(alignments, col)}; font-weight: 600; "
                f'color: {CELL_TEXT_COLOR};">{self._inline.format(cell)}</th>'
            )
        sb.append("</tr></thead><tbody>")
        for row in rows[2:]:
            cells = split_row(row)[:columns]
            cells += [""] * (columns - len(cells))
            sb.append("<tr>")
            for col, cell in enumerate(cells):
                sb.append(
                    f'<td style="border: 1px solid {self._border}; padding: 8px 12px; '
                    f"text-align: {self._align(alignments, col)}; "
                    f'color: {CELL_TEXT_COLOR};">{self._inline.format(cell)}</td>'
                )
            sb.append("</tr>")
        sb.append("</tbody></table>")
        return sb.build()

    @staticmethod
    def _align(alignments: tuple[str, ...], col: int) -> str:
        return alignments[col] if col < len(alignments) else "left"
