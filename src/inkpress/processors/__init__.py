"""Stateful multi-line sub-processors: pipe tables and list items."""

from inkpress.processors.lists import ListItem, ListProcessor, ListType
from inkpress.processors.table import (
    TableProcessor,
    TableState,
    TableStep,
    parse_alignment_row,
    split_row,
)

__all__ = [
    "ListItem",
    "ListProcessor",
    "ListType",
    "TableProcessor",
    "TableState",
    "TableStep",
    "parse_alignment_row",
    "split_row",
]
