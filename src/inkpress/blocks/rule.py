"""Horizontal rules."""

from __future__ import annotations

import re

from inkpress.themes import ColorTheme

RULE_RE = re.compile(r"^(-{3,}|={3,}|\*{3,}|_{3,})$")


def is_rule(trimmed: str) -> bool:
    return RULE_RE.match(trimmed) is not None


def format_rule(theme: ColorTheme) -> str:
    return (
        '<hr style="height: 2px; background: linear-gradient(to right, transparent, '
        f'{theme.primary}, transparent); border: none; margin: 32px 0;">'
    )
