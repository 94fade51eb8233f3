"""Shared utilities for inkpress."""

from inkpress.utils.logger import get_logger
from inkpress.utils.text import escape_attr, escape_html

__all__ = ["escape_attr", "escape_html", "get_logger"]
