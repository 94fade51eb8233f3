"""Per-parse mutable state.

A ParseContext is created for every parse call and never shared. It holds
the block accumulators (open code fence, open blockquote) next to the
resolved theme records the strategies read.

Thread Safety:
Not thread-safe; one instance per parse call. ``snapshot()`` returns a
frozen copy that can be handed to other threads.

Usage:
    >>> from inkpress.config import ParseOptions
    >>> context = ParseContext.from_options(ParseOptions().resolve())
    >>> context.update(in_code_block=True, code_block_language="python")
    >>> context.append_code_line("x = 1")
    >>> context.end_code_block()
    ('x = 1', 'python')
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from inkpress.themes import (
    DEFAULT_CODE_STYLE,
    DEFAULT_COLOR_THEME,
    DEFAULT_FONT_SETTINGS,
    DEFAULT_THEME_SYSTEM,
    CodeStyle,
    ColorTheme,
    FontSettings,
    ThemeSystem,
)

if TYPE_CHECKING:
    from inkpress.config import ParseOptions


@dataclass(frozen=True, slots=True)
class RenderFlags:
    """Output switches that do not depend on the theme."""

    is_preview: bool = False
    clean_html: bool = False


@dataclass(frozen=True, slots=True)
class ContextSnapshot:
    """Immutable view of a ParseContext at one point in time."""

    in_code_block: bool
    code_block_content: str
    code_block_language: str
    in_blockquote: bool
    blockquote_content: tuple[str, ...]
    color_theme: ColorTheme
    code_theme: CodeStyle
    theme_system: ThemeSystem
    font_settings: FontSettings
    flags: RenderFlags


# Fields a strategy may change through StrategyResult.context_updates
_BLOCK_FIELDS = frozenset(
    {
        "in_code_block",
        "code_block_content",
        "code_block_language",
        "in_blockquote",
        "blockquote_content",
    }
)


class ParseContext:
    """Block accumulators plus the resolved records for one parse call."""

    __slots__ = (
        "in_code_block",
        "code_block_content",
        "code_block_language",
        "in_blockquote",
        "blockquote_content",
        "color_theme",
        "code_theme",
        "theme_system",
        "font_settings",
        "flags",
    )

    def __init__(
        self,
        color_theme: ColorTheme = DEFAULT_COLOR_THEME,
        code_theme: CodeStyle = DEFAULT_CODE_STYLE,
        theme_system: ThemeSystem = DEFAULT_THEME_SYSTEM,
        font_settings: FontSettings = DEFAULT_FONT_SETTINGS,
        flags: RenderFlags | None = None,
    ) -> None:
        self.color_theme = color_theme
        self.code_theme = code_theme
        self.theme_system = theme_system
        self.font_settings = font_settings
        self.flags = flags or RenderFlags()
        self.in_code_block = False
        self.code_block_content: list[str] = []
        self.code_block_language = ""
        self.in_blockquote = False
        self.blockquote_content: list[str] = []

    @classmethod
    def from_options(cls, options: ParseOptions) -> ParseContext:
        """Build a context from resolved options."""
        return cls(
            color_theme=options.theme,  # type: ignore[arg-type]
            code_theme=options.code_theme,  # type: ignore[arg-type]
            theme_system=options.theme_system,  # type: ignore[arg-type]
            font_settings=options.font_settings,  # type: ignore[arg-type]
            flags=RenderFlags(is_preview=options.is_preview, clean_html=options.clean_html),
        )

    @property
    def font_size(self) -> int:
        return self.font_settings.font_size

    def reset(self) -> None:
        """Clear block accumulators; themes, fonts and flags are kept."""
        self.in_code_block = False
        self.code_block_content = []
        self.code_block_language = ""
        self.in_blockquote = False
        self.blockquote_content = []

    def update(self, **changes: Any) -> None:
        """Apply block-state changes requested by a strategy.

        Raises:
            AttributeError: A name is not a block-state field
        """
        for name, value in changes.items():
            if name not in _BLOCK_FIELDS:
                msg = f"ParseContext has no block-state field {name!r}"
                raise AttributeError(msg)
            if isinstance(value, (list, tuple)):
                value = list(value)
            setattr(self, name, value)

    def append_code_line(self, line: str) -> None:
        self.code_block_content.append(line)

    def end_code_block(self) -> tuple[str, str]:
        """Close the fence and return (content, language)."""
        block = "\n".join(self.code_block_content), self.code_block_language
        self.in_code_block = False
        self.code_block_content = []
        self.code_block_language = ""
        return block

    def append_blockquote_line(self, line: str) -> None:
        self.blockquote_content.append(line)

    def end_blockquote(self) -> list[str]:
        """Close the quote and return its accumulated lines."""
        lines = self.blockquote_content
        self.in_blockquote = False
        self.blockquote_content = []
        return lines

    def snapshot(self) -> ContextSnapshot:
        return ContextSnapshot(
            in_code_block=self.in_code_block,
            code_block_content="\n".join(self.code_block_content),
            code_block_language=self.code_block_language,
            in_blockquote=self.in_blockquote,
            blockquote_content=tuple(self.blockquote_content),
            color_theme=self.color_theme,
            code_theme=self.code_theme,
            theme_system=self.theme_system,
            font_settings=self.font_settings,
            flags=self.flags,
        )
