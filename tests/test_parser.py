"""Tests for preprocessing, the parse context, and line dispatch."""

import dataclasses

import pytest

from inkpress.config import ParseOptions
from inkpress.errors import ParseError
from inkpress.parsing import (
    DEFAULT_STRATEGIES,
    BlockquoteEndStrategy,
    CodeBlockContentStrategy,
    EmptyLineStrategy,
    LineCoordinator,
    LineStrategy,
    ListStrategy,
    ParagraphStrategy,
    ParseContext,
    RenderFlags,
    SingleLineStrategy,
    StrategyResult,
    TableStrategy,
)
from inkpress.parsing.coordinator import MAX_REDISPATCH
from inkpress.preprocess import normalize_newlines, preprocess, strip_reference_definitions
from inkpress.themes import COLOR_THEMES


def run(text: str, **options: object) -> str:
    """Dispatch ``text`` through a fresh coordinator (no post-processing)."""
    context = ParseContext.from_options(ParseOptions(**options).resolve())
    return LineCoordinator(context).run(preprocess(text))


class _Bounce:
    """Strategy that asks for every line to be dispatched again."""

    def can_process(self, context, line, trimmed, lines, index):  # noqa: ANN001, ANN201
        return True

    def process(self, coordinator, line, trimmed, lines, index):  # noqa: ANN001, ANN201
        return StrategyResult(reprocess_current_line=True)


class TestPreprocess:
    def test_newlines(self) -> None:
        assert normalize_newlines("a\r\nb\rc") == "a\nb\nc"

    def test_reference_definitions_emptied(self) -> None:
        text = 'a\n[1]: https://x.io "X"\n![logo]: /l.png\nb'
        assert strip_reference_definitions(text) == "a\n\n\nb"

    def test_inline_links_survive(self) -> None:
        assert strip_reference_definitions("[a](b)") == "[a](b)"

    def test_line_count_preserved(self) -> None:
        assert preprocess("a\r\n[x]: y\r\nb") == ["a", "", "b"]


class TestParseContext:
    def test_from_options(self) -> None:
        context = ParseContext.from_options(
            ParseOptions(theme="blue", is_preview=True, font_settings={"fontSize": 18}).resolve()
        )
        assert context.color_theme is COLOR_THEMES["blue"]
        assert context.flags == RenderFlags(is_preview=True, clean_html=False)
        assert context.font_size == 18

    def test_code_block_lifecycle(self) -> None:
        context = ParseContext()
        context.update(in_code_block=True, code_block_language="go")
        context.append_code_line("a")
        context.append_code_line("b")
        assert context.in_code_block
        assert context.end_code_block() == ("a\nb", "go")
        assert not context.in_code_block
        assert context.code_block_content == []

    def test_blockquote_lifecycle(self) -> None:
        context = ParseContext()
        context.update(in_blockquote=True, blockquote_content=["> a"])
        context.append_blockquote_line("> b")
        assert context.end_blockquote() == ["> a", "> b"]
        assert not context.in_blockquote

    def test_update_block_fields(self) -> None:
        context = ParseContext()
        context.update(in_blockquote=True, blockquote_content=("> x",))
        assert context.in_blockquote
        assert context.blockquote_content == ["> x"]

    def test_update_rejects_other_fields(self) -> None:
        with pytest.raises(AttributeError, match="color_theme"):
            ParseContext().update(color_theme=None)

    def test_reset_keeps_themes(self) -> None:
        context = ParseContext(color_theme=COLOR_THEMES["blue"])
        context.update(in_code_block=True, code_block_language="js")
        context.reset()
        assert not context.in_code_block
        assert context.color_theme is COLOR_THEMES["blue"]

    def test_snapshot_is_frozen_copy(self) -> None:
        context = ParseContext()
        context.update(in_code_block=True, code_block_language="js")
        context.append_code_line("x")
        snap = context.snapshot()
        context.append_code_line("y")
        assert snap.code_block_content == "x"
        with pytest.raises(dataclasses.FrozenInstanceError):
            snap.in_code_block = False  # type: ignore[misc]


class TestStrategyChain:
    def test_order(self) -> None:
        assert [type(s) for s in DEFAULT_STRATEGIES] == [
            CodeBlockContentStrategy,
            EmptyLineStrategy,
            BlockquoteEndStrategy,
            TableStrategy,
            ListStrategy,
            SingleLineStrategy,
            ParagraphStrategy,
        ]

    def test_protocol_conformance(self) -> None:
        assert all(isinstance(s, LineStrategy) for s in DEFAULT_STRATEGIES)

    def test_result_defaults(self) -> None:
        result = StrategyResult()
        assert result.fragment == ""
        assert not result.context_updates
        assert not result.reprocess_current_line

    def test_no_strategy_raises(self) -> None:
        coordinator = LineCoordinator(ParseContext(), strategies=())
        with pytest.raises(ParseError) as exc_info:
            coordinator.run(["a", "b"])
        assert exc_info.value.lineno == 1

    def test_runaway_redispatch_raises(self) -> None:
        coordinator = LineCoordinator(ParseContext(), strategies=(_Bounce(),))
        with pytest.raises(ParseError, match=str(MAX_REDISPATCH)):
            coordinator.run(["x"])

    def test_reset(self) -> None:
        coordinator = LineCoordinator(ParseContext())
        coordinator.run(["| a |", "| - |", "```"])
        coordinator.context.update(in_code_block=True)
        coordinator.reset()
        assert not coordinator.context.in_code_block
        assert not coordinator.table.is_active


class TestDocuments:
    def test_heading_then_paragraph(self) -> None:
        html = run("# Title\n\nBody text")
        assert html.index("<h1") < html.index("Body text")
        assert html.count("<p ") == 1

    def test_paragraph_style(self) -> None:
        html = run("text")
        assert html == (
            '<p style="margin: 12px 0; line-height: 1.6; font-size: 16px; '
            'font-weight: normal;">text</p>'
        )

    def test_fence_content_is_not_markdown(self) -> None:
        html = run("```\n# not a heading\n- not a list\n```")
        assert "<h1" not in html
        assert html.count("<pre") == 1
        assert "#&nbsp;not&nbsp;a&nbsp;heading" in html

    def test_fence_language_label(self) -> None:
        assert ">python</span>" in run("```python\nx = 1\n```")

    def test_unterminated_fence_is_flushed(self) -> None:
        html = run("```\nleft open")
        assert "<pre" in html
        assert "left&nbsp;open" in html

    def test_quote_closed_by_paragraph(self) -> None:
        html = run("> quoted\nplain")
        assert html.count("<blockquote") == 1
        assert html.index("</blockquote>") < html.index("plain")

    def test_lone_marker_splits_quote_paragraphs(self) -> None:
        html = run("> a\n>\n> b")
        assert html.count("<blockquote") == 1
        assert html.count("<p ") == 2

    def test_blank_line_inside_quote_keeps_it_open(self) -> None:
        html = run("> a\n\n> b")
        assert html.count("<blockquote") == 1

    def test_nested_quote(self) -> None:
        assert run("> a\n> > b").count("<blockquote") == 2

    def test_table(self) -> None:
        html = run("| a | b |\n| --- | --- |\n| 1 | 2 |\n\nafter")
        assert html.count("<table") == 1
        assert html.index("</table>") < html.index("after")

    def test_table_closed_by_text_line(self) -> None:
        html = run("| a |\n| - |\n| 1 |\ntext")
        assert html.index("</table>") < html.index(">text</p>")

    def test_blank_line_before_alignment_row(self) -> None:
        assert "<table" in run("| a |\n\n| - |\n| 1 |")

    def test_blank_line_ends_table(self) -> None:
        html = run("| a |\n| - |\n| 1 |\n\n| 2 |")
        assert html.count("<td ") == 1
        assert ">| 2 |</p>" in html

    def test_pipe_line_without_alignment_is_paragraph(self) -> None:
        html = run("a | b")
        assert "<table" not in html
        assert ">a | b</p>" in html

    def test_table_after_quote(self) -> None:
        html = run("> q\n| a |\n| - |\n| 1 |")
        assert html.index("</blockquote>") < html.index("<table")

    def test_quoted_table_lines_stay_in_quote(self) -> None:
        html = run("> | a |\n> | - |")
        assert "<table" not in html
        assert "<blockquote" in html

    def test_lists(self) -> None:
        html = run("- one\n- two\n1. three")
        assert html.count("<p ") == 3
        assert "●" in html
        assert ">1.</span>" in html

    @pytest.mark.parametrize("line", ["---", "***", "___"])
    def test_rule_not_mistaken_for_list(self, line: str) -> None:
        html = run(line)
        assert html.startswith("<hr ")

    @pytest.mark.parametrize("line", ["- - -", "* * *"])
    def test_spaced_rule_renders_as_list_item(self, line: str) -> None:
        html = run(line)
        assert html.startswith("<p ")
        assert "<hr" not in html
        assert "margin-left:" in html

    def test_hashtag_is_paragraph(self) -> None:
        assert run("#hashtag").startswith("<p ")

    def test_preview_headings_are_bare(self) -> None:
        assert run("# T\n## U", is_preview=True) == "<h1>T</h1><h2>U</h2>"

    def test_theme_flows_into_blocks(self) -> None:
        assert COLOR_THEMES["blue"].primary in run("---", theme="blue")

    def test_reference_definition_not_rendered(self) -> None:
        assert "x.io" not in run("[1]: https://x.io\ntext")
