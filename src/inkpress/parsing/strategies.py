"""Line strategies.

Each strategy answers two questions about a line: can it handle it
(``can_process``), and what does handling it produce (``process``). The
coordinator asks them in a fixed order and uses the first that accepts.
``process`` may still decline by returning None, in which case the chain
continues with the next strategy.

Precedence::

    code-block content > blank line > blockquote end > table > list
    > single-line constructs > paragraph

Thread Safety:
Strategies are stateless. The module-level DEFAULT_STRATEGIES tuple is
shared by every coordinator.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from inkpress.blocks.code import FENCE
from inkpress.blocks.heading import match_heading
from inkpress.blocks.rule import format_rule, is_rule
from inkpress.parsing.context import ParseContext
from inkpress.stringbuilder import StringBuilder

if TYPE_CHECKING:
    from inkpress.parsing.coordinator import LineCoordinator


@dataclass(frozen=True, slots=True)
class StrategyResult:
    """What one strategy produced for one line.

    Attributes:
        fragment: Markup to append to the output ("" for none)
        context_updates: Block-state fields to set on the ParseContext
        reprocess_current_line: Dispatch the same line again afterwards
    """

    fragment: str = ""
    context_updates: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    reprocess_current_line: bool = False


@runtime_checkable
class LineStrategy(Protocol):
    """Contract for one link of the strategy chain."""

    def can_process(
        self, context: ParseContext, line: str, trimmed: str, lines: list[str], index: int
    ) -> bool: ...

    def process(
        self,
        coordinator: LineCoordinator,
        line: str,
        trimmed: str,
        lines: list[str],
        index: int,
    ) -> StrategyResult | None: ...


class CodeBlockContentStrategy:
    """Inside a fence: collect raw lines until the closing fence."""

    def can_process(
        self, context: ParseContext, line: str, trimmed: str, lines: list[str], index: int
    ) -> bool:
        return context.in_code_block

    def process(
        self,
        coordinator: LineCoordinator,
        line: str,
        trimmed: str,
        lines: list[str],
        index: int,
    ) -> StrategyResult:
        context = coordinator.context
        if trimmed.startswith(FENCE):
            content, language = context.end_code_block()
            return StrategyResult(coordinator.code_blocks.format(content, language))
        context.append_code_line(line)
        return StrategyResult()


class EmptyLineStrategy:
    """Blank line: paragraph break inside a quote, end of a finished table."""

    def can_process(
        self, context: ParseContext, line: str, trimmed: str, lines: list[str], index: int
    ) -> bool:
        return not trimmed

    def process(
        self,
        coordinator: LineCoordinator,
        line: str,
        trimmed: str,
        lines: list[str],
        index: int,
    ) -> StrategyResult:
        context = coordinator.context
        if context.in_blockquote:
            context.append_blockquote_line("")
        # A DETECTING table may still find its alignment row past blank lines
        if coordinator.table.is_processing:
            return StrategyResult(coordinator.table.flush().html)
        return StrategyResult()


class BlockquoteEndStrategy:
    """A non-quote line closes an open quote, then is dispatched again."""

    def can_process(
        self, context: ParseContext, line: str, trimmed: str, lines: list[str], index: int
    ) -> bool:
        return context.in_blockquote and not trimmed.startswith(">")

    def process(
        self,
        coordinator: LineCoordinator,
        line: str,
        trimmed: str,
        lines: list[str],
        index: int,
    ) -> StrategyResult:
        return StrategyResult(coordinator.end_blockquote(), reprocess_current_line=True)


class TableStrategy:
    """Header, alignment and data rows of a pipe table."""

    def can_process(
        self, context: ParseContext, line: str, trimmed: str, lines: list[str], index: int
    ) -> bool:
        # The table processor owns its state; it declines in process()
        return True

    def process(
        self,
        coordinator: LineCoordinator,
        line: str,
        trimmed: str,
        lines: list[str],
        index: int,
    ) -> StrategyResult | None:
        if not coordinator.table.is_active and trimmed.startswith(">"):
            return None
        step = coordinator.table.process_row(line, lines, index)
        if step is None:
            return None
        sb = StringBuilder()
        for row in step.released:
            sb.append(coordinator.render_paragraph(row))
        sb.append(step.html)
        return StrategyResult(sb.build(), reprocess_current_line=step.reprocess)


class ListStrategy:
    """List and task items, one line each."""

    def can_process(
        self, context: ParseContext, line: str, trimmed: str, lines: list[str], index: int
    ) -> bool:
        # Ahead of SingleLineStrategy, so spaced rules such as "- - -" render as items
        return bool(trimmed) and trimmed[0] in "*+-0123456789"

    def process(
        self,
        coordinator: LineCoordinator,
        line: str,
        trimmed: str,
        lines: list[str],
        index: int,
    ) -> StrategyResult | None:
        html = coordinator.lists.process_line(line)
        if html is None:
            return None
        return StrategyResult(html)


class SingleLineStrategy:
    """Fence open, horizontal rule, heading, and blockquote lines."""

    def can_process(
        self, context: ParseContext, line: str, trimmed: str, lines: list[str], index: int
    ) -> bool:
        return (
            trimmed.startswith(FENCE)
            or trimmed.startswith(">")
            or is_rule(trimmed)
            or match_heading(trimmed) is not None
        )

    def process(
        self,
        coordinator: LineCoordinator,
        line: str,
        trimmed: str,
        lines: list[str],
        index: int,
    ) -> StrategyResult | None:
        context = coordinator.context
        if trimmed.startswith(FENCE):
            return StrategyResult(
                context_updates={
                    "in_code_block": True,
                    "code_block_content": [],
                    "code_block_language": trimmed[len(FENCE) :].strip(),
                }
            )
        if trimmed.startswith(">"):
            # A lone ">" is a blank line inside the quote
            quoted = "" if trimmed == ">" else trimmed
            if context.in_blockquote:
                context.append_blockquote_line(quoted)
                return StrategyResult()
            return StrategyResult(
                context_updates={"in_blockquote": True, "blockquote_content": [quoted]}
            )
        if is_rule(trimmed):
            return StrategyResult(format_rule(context.color_theme))
        heading = match_heading(trimmed)
        if heading is None:
            return None
        return StrategyResult(coordinator.headings.format(*heading))


class ParagraphStrategy:
    """Fallback: anything else is a paragraph."""

    def can_process(
        self, context: ParseContext, line: str, trimmed: str, lines: list[str], index: int
    ) -> bool:
        return True

    def process(
        self,
        coordinator: LineCoordinator,
        line: str,
        trimmed: str,
        lines: list[str],
        index: int,
    ) -> StrategyResult:
        return StrategyResult(coordinator.render_paragraph(trimmed))


DEFAULT_STRATEGIES: tuple[LineStrategy, ...] = (
    CodeBlockContentStrategy(),
    EmptyLineStrategy(),
    BlockquoteEndStrategy(),
    TableStrategy(),
    ListStrategy(),
    SingleLineStrategy(),
    ParagraphStrategy(),
)
