"""Line coordinator: drives the strategy chain over a document.

The coordinator owns the per-parse collaborators (formatters and the table
and list processors) and the ParseContext. Strategies reach them through
the coordinator they are handed.

Thread Safety:
One coordinator per parse call. It holds mutable state.

Usage:
    >>> from inkpress.config import ParseOptions
    >>> from inkpress.parsing.context import ParseContext
    >>> coordinator = LineCoordinator(ParseContext.from_options(ParseOptions().resolve()))
    >>> html = coordinator.run(["# Title", "", "text"])
"""

from __future__ import annotations

from collections.abc import Sequence

from inkpress.blocks.blockquote import BlockquoteFormatter
from inkpress.blocks.code import CodeBlockFormatter
from inkpress.blocks.heading import HeadingFormatter
from inkpress.errors import ParseError
from inkpress.inline import InlineFormatter
from inkpress.parsing.context import ParseContext
from inkpress.parsing.strategies import DEFAULT_STRATEGIES, LineStrategy, StrategyResult
from inkpress.processors.lists import ListProcessor
from inkpress.processors.table import TableProcessor
from inkpress.stringbuilder import StringBuilder
from inkpress.themes import line_height_for
from inkpress.utils.logger import get_logger

logger = get_logger(__name__)

# A line is re-dispatched at most this many times before the chain is
# considered broken (closing a quote, then a table, needs two)
MAX_REDISPATCH = 4


class LineCoordinator:
    """Dispatch lines to the first accepting strategy and collect fragments."""

    __slots__ = (
        "context",
        "strategies",
        "inline",
        "headings",
        "code_blocks",
        "blockquotes",
        "table",
        "lists",
        "_paragraph_open",
    )

    def __init__(
        self,
        context: ParseContext,
        strategies: Sequence[LineStrategy] = DEFAULT_STRATEGIES,
    ) -> None:
        self.context = context
        self.strategies = tuple(strategies)
        font_size = context.font_size
        is_preview = context.flags.is_preview
        line_height = line_height_for(font_size, context.font_settings.line_height)

        self.inline = InlineFormatter(context.color_theme)
        self.headings = HeadingFormatter(self.inline, font_size, is_preview)
        self.code_blocks = CodeBlockFormatter(context.code_theme, font_size, is_preview)
        self.blockquotes = BlockquoteFormatter(self.inline, font_size)
        self.table = TableProcessor(self.inline, font_size)
        self.lists = ListProcessor(self.inline, font_size, line_height)
        self._paragraph_open = (
            f'<p style="margin: 12px 0; line-height: {line_height}; '
            f'font-size: {font_size}px; font-weight: normal;">'
        )

    def reset(self) -> None:
        """Forget all block state; themes and options are kept."""
        self.context.reset()
        self.table.reset()
        self.lists.reset()

    def process_line(self, line: str, lines: list[str], index: int) -> StrategyResult:
        """Run one line through the chain and apply its context updates.

        Raises:
            ParseError: No strategy accepted the line
        """
        trimmed = line.strip()
        for strategy in self.strategies:
            if not strategy.can_process(self.context, line, trimmed, lines, index):
                continue
            result = strategy.process(self, line, trimmed, lines, index)
            if result is None:
                continue
            if result.context_updates:
                self.context.update(**result.context_updates)
            return result
        raise ParseError("no strategy accepted the line", lineno=index + 1)

    def run(self, lines: list[str]) -> str:
        """Process every line, then close whatever is still open."""
        sb = StringBuilder()
        for index, line in enumerate(lines):
            for _attempt in range(MAX_REDISPATCH + 1):
                result = self.process_line(line, lines, index)
                sb.append(result.fragment)
                if not result.reprocess_current_line:
                    break
            else:
                raise ParseError(
                    f"line re-dispatched more than {MAX_REDISPATCH} times",
                    lineno=index + 1,
                )
        sb.append(self.finalize())
        return sb.build()

    def end_blockquote(self) -> str:
        lines = self.context.end_blockquote()
        return self.blockquotes.format(lines) if lines else ""

    def finalize(self) -> str:
        """Flush an open table, then an open quote, then an unclosed fence."""
        sb = StringBuilder()
        if self.table.is_active:
            step = self.table.flush()
            for row in step.released:
                sb.append(self.render_paragraph(row))
            sb.append(step.html)
        if self.context.in_blockquote:
            sb.append(self.end_blockquote())
        if self.context.in_code_block:
            logger.debug("Unterminated code fence at end of input")
            content, language = self.context.end_code_block()
            sb.append(self.code_blocks.format(content, language))
        return sb.build()

    def render_paragraph(self, text: str) -> str:
        return f"{self._paragraph_open}{self.inline.format(text.strip())}</p>"
