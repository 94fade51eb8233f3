"""Tests for pipe-table detection and rendering."""

import pytest

from inkpress.inline import InlineFormatter
from inkpress.processors import TableProcessor, TableState, parse_alignment_row, split_row
from inkpress.processors.table import CELL_TEXT_COLOR, is_candidate_row
from inkpress.themes import DEFAULT_COLOR_THEME


@pytest.fixture
def processor() -> TableProcessor:
    return TableProcessor(InlineFormatter(DEFAULT_COLOR_THEME), font_size=16)


def feed(processor: TableProcessor, lines: list[str]) -> str:
    """Drive the processor the way the parser does and collect its html."""
    html = []
    for index, line in enumerate(lines):
        step = processor.process_row(line, lines, index)
        if step is not None:
            html.append(step.html)
    html.append(processor.flush().html)
    return "".join(html)


class TestSplitRow:
    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            ("| a | b |", ["a", "b"]),
            ("a | b", ["a", "b"]),
            ("| a | | c |", ["a", "", "c"]),
            (r"| a \| b | c |", ["a | b", "c"]),
            (r"| a | b \|", ["a", "b |"]),
        ],
    )
    def test_split(self, line: str, expected: list[str]) -> None:
        assert split_row(line) == expected


class TestAlignmentRow:
    def test_alignments(self) -> None:
        assert parse_alignment_row("| :--- | :---: | ---: | --- |") == (
            "left",
            "center",
            "right",
            "left",
        )

    def test_without_outer_pipes(self) -> None:
        assert parse_alignment_row("--- | :-:") == ("left", "center")

    @pytest.mark.parametrize("line", ["| a | b |", "---", "| --- | x |", "| :: |"])
    def test_not_alignment(self, line: str) -> None:
        assert parse_alignment_row(line) is None

    def test_candidate_row(self) -> None:
        assert is_candidate_row("| a | b |")
        assert not is_candidate_row("| --- | --- |")
        assert not is_candidate_row("no pipes")


class TestDetection:
    def test_should_start_needs_alignment_row(self) -> None:
        lines = ["| a | b |", "| - | - |"]
        assert TableProcessor.should_start(lines, 0)
        assert not TableProcessor.should_start(["| a | b |", "text"], 0)
        assert not TableProcessor.should_start(["| a | b |"], 0)

    def test_should_start_skips_blank_lines(self) -> None:
        assert TableProcessor.should_start(["| a |", "", "  ", "| --- |"], 0)

    def test_unrelated_line_is_declined(self, processor: TableProcessor) -> None:
        assert processor.process_row("hello", ["hello"], 0) is None
        assert processor.state is TableState.NONE

    def test_state_transitions(self, processor: TableProcessor) -> None:
        lines = ["| a |", "| --- |", "| 1 |", "after"]
        processor.process_row(lines[0], lines, 0)
        assert processor.state is TableState.DETECTING
        processor.process_row(lines[1], lines, 1)
        assert processor.state is TableState.PROCESSING
        assert processor.process_row(lines[2], lines, 2).consumed
        step = processor.process_row(lines[3], lines, 3)
        assert not step.consumed
        assert step.reprocess
        assert step.html.startswith("<table ")
        assert processor.state is TableState.NONE

    def test_detecting_table_releases_rows(self, processor: TableProcessor) -> None:
        lines = ["| a |", "", "| --- |"]
        processor.process_row(lines[0], lines, 0)
        assert processor.state is TableState.DETECTING
        step = processor.process_row("oops", lines, 1)
        assert step.released == ("| a |",)
        assert step.reprocess
        assert step.html == ""
        assert not processor.is_active

    def test_flush_releases_detecting_table(self, processor: TableProcessor) -> None:
        lines = ["| a |", "| --- |"]
        processor.process_row(lines[0], lines, 0)
        step = processor.flush()
        assert step.released == ("| a |",)
        assert step.html == ""


class TestRender:
    def test_alignment_applied_per_column(self, processor: TableProcessor) -> None:
        html = feed(processor, ["| L | C | R |", "| :-- | :-: | --: |", "| 1 | 2 | 3 |"])
        assert html.count("text-align: left") == 2
        assert html.count("text-align: center") == 2
        assert html.count("text-align: right") == 2

    def test_header_and_body(self, processor: TableProcessor) -> None:
        html = feed(processor, ["| h1 | h2 |", "| --- | --- |", "| a | b |", "| c | d |"])
        assert html.count("<th ") == 2
        assert html.count("<td ") == 4
        assert f"background-color: {DEFAULT_COLOR_THEME.table_header_bg}" in html
        assert f"1px solid {DEFAULT_COLOR_THEME.table_border}" in html
        assert f"color: {CELL_TEXT_COLOR}" in html
        assert "font-size: 16px" in html

    def test_short_rows_padded(self, processor: TableProcessor) -> None:
        html = feed(processor, ["| a | b | c |", "| - | - | - |", "| 1 |"])
        assert html.count("<td ") == 3

    def test_long_rows_truncated(self, processor: TableProcessor) -> None:
        html = feed(processor, ["| a |", "| - |", "| 1 | 2 | 3 |"])
        assert html.count("<td ") == 1
        assert ">2</td>" not in html

    def test_escaped_pipe_is_literal(self, processor: TableProcessor) -> None:
        html = feed(processor, ["| expr |", "| --- |", r"| a \| b |"])
        assert ">a | b</td>" in html

    def test_cells_get_inline_formatting(self, processor: TableProcessor) -> None:
        html = feed(processor, ["| **h** |", "| --- |", "| `c` |"])
        assert "<strong" in html
        assert "<code" in html

    def test_header_only_table(self, processor: TableProcessor) -> None:
        html = feed(processor, ["| a | b |", "| --- | --- |"])
        assert "<tbody></tbody>" in html
