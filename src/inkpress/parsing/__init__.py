"""Line-oriented parsing: context, strategy chain and coordinator."""

from inkpress.parsing.context import ContextSnapshot, ParseContext, RenderFlags
from inkpress.parsing.coordinator import MAX_REDISPATCH, LineCoordinator
from inkpress.parsing.strategies import (
    DEFAULT_STRATEGIES,
    BlockquoteEndStrategy,
    CodeBlockContentStrategy,
    EmptyLineStrategy,
    LineStrategy,
    ListStrategy,
    ParagraphStrategy,
    SingleLineStrategy,
    StrategyResult,
    TableStrategy,
)

__all__ = [
    "DEFAULT_STRATEGIES",
    "MAX_REDISPATCH",
    "BlockquoteEndStrategy",
    "CodeBlockContentStrategy",
    "ContextSnapshot",
    "EmptyLineStrategy",
    "LineCoordinator",
    "LineStrategy",
    "ListStrategy",
    "ParagraphStrategy",
    "ParseContext",
    "RenderFlags",
    "SingleLineStrategy",
    "StrategyResult",
    "TableStrategy",
]
