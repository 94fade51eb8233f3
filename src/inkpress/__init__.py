"""
inkpress: Markdown to self-contained, inline-styled HTML

Converts Markdown into markup that survives being pasted into rich-text
editors: every style is written inline, no ``<style>`` element or class is
needed, and links are restricted to safe schemes. Zero runtime
dependencies.

Quick Start:
    >>> from inkpress import parse
    >>> html = parse("# Hello, **World**!")

    >>> # Live preview markup (bare headings, no copy wrappers)
    >>> html = parse("# Hello", isPreview=True)

    >>> # Reusable converter with resolved themes
    >>> from inkpress import Converter
    >>> convert = Converter({"theme": "blue", "codeTheme": "github"})
    >>> html = convert("```js\\nconst x = 1;\\n```")

Custom copy adapters:
    >>> from inkpress import CopyAdapterRegistryBuilder, create_default_registry
    >>> builder = CopyAdapterRegistryBuilder()
    >>> builder.register(MyThemeAdapter())
    >>> convert = Converter(copy_adapters=builder.build())
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from inkpress.config import ParseOptions, coerce_options
from inkpress.errors import InkpressError, ParseError, ThemeError
from inkpress.inline import ALLOWED_SCHEMES, InlineFormatter, format_inline, sanitize_url
from inkpress.parsing import LineCoordinator, ParseContext, RenderFlags
from inkpress.postprocess import FontProcessor, SocialStyler, ThemeProcessor, clean_html
from inkpress.postprocess.adapters import (
    CopyAdapter,
    CopyAdapterRegistry,
    CopyAdapterRegistryBuilder,
    CopyContext,
    NullCopyAdapter,
    create_default_registry,
)
from inkpress.preprocess import preprocess
from inkpress.themes import (
    CodeStyle,
    ColorTheme,
    FontSettings,
    ThemeSystem,
    resolve_code_style,
    resolve_color_theme,
    resolve_font_settings,
    resolve_theme_system,
    resolve_themes,
)
from inkpress.utils.logger import get_logger

__version__ = "0.1.0"

logger = get_logger(__name__)


class Converter:
    """Markdown converter bound to one set of resolved options.

    Usage:
        >>> convert = Converter({"theme": "green", "fontSettings": {"fontSize": 15}})
        >>> html = convert("Some *text*")
        >>> pages = convert.convert_many(["# One", "# Two"])

    Thread Safety:
        Holds only immutable options and stateless post-processors. Every
        call builds its own ParseContext, so one converter may be used from
        several threads at once.
    """

    __slots__ = ("_options", "_theme_processor", "_font_processor", "_social")

    def __init__(
        self,
        options: ParseOptions | Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> None:
        """Resolve theme and font references once.

        Args:
            options: ParseOptions, a mapping of option names (snake_case or
                camelCase), or None for the defaults
            **overrides: Individual options applied on top of ``options``
        """
        resolved = coerce_options(options).merged(**overrides).resolve()
        self._options = resolved
        self._theme_processor = ThemeProcessor(resolved.theme, resolved.is_preview)  # type: ignore[arg-type]
        self._font_processor = FontProcessor(resolved.font_settings, resolved.is_preview)  # type: ignore[arg-type]
        self._social = SocialStyler(resolved.copy_adapters)

    @property
    def options(self) -> ParseOptions:
        return self._options

    def __call__(self, markdown_text: str | None) -> str:
        """Convert one document.

        Returns:
            HTML string; "" for None, non-string or blank input
        """
        if not isinstance(markdown_text, str) or not markdown_text.strip():
            return ""
        options = self._options
        lines = preprocess(markdown_text)
        logger.debug("Converting %d lines", len(lines))

        context = ParseContext.from_options(options)
        html = LineCoordinator(context).run(lines)

        html = self._theme_processor.process(html)
        html = self._font_processor.process(html)
        html = self._social.process(
            html,
            font_settings=context.font_settings,
            color_theme=context.color_theme,
            theme_system=context.theme_system,
            is_preview=context.flags.is_preview,
        )
        if context.flags.clean_html:
            html = clean_html(html)
        logger.debug("Converted %d lines into %d characters", len(lines), len(html))
        return html

    def convert_many(self, texts: Iterable[str | None]) -> list[str]:
        """Convert several documents with the same options."""
        return [self(text) for text in texts]


def parse(
    markdown_text: str | None,
    options: ParseOptions | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> str:
    """Convert Markdown to inline-styled HTML.

    Args:
        markdown_text: Markdown source
        options: ParseOptions, a mapping, or None
        **overrides: Individual options (``theme="blue"``, ``isPreview=True``...)

    Returns:
        HTML string; "" for None, non-string or blank input

    Raises:
        ThemeError: A theme reference has an unsupported type
        ParseError: The line strategy chain failed (internal defect)
    """
    if not isinstance(markdown_text, str) or not markdown_text.strip():
        return ""
    return Converter(options, **overrides)(markdown_text)


__all__ = [
    "ALLOWED_SCHEMES",
    "CodeStyle",
    "ColorTheme",
    "Converter",
    "CopyAdapter",
    "CopyAdapterRegistry",
    "CopyAdapterRegistryBuilder",
    "CopyContext",
    "FontSettings",
    "InkpressError",
    "InlineFormatter",
    "LineCoordinator",
    "NullCopyAdapter",
    "ParseContext",
    "ParseError",
    "ParseOptions",
    "RenderFlags",
    "ThemeError",
    "ThemeSystem",
    "__version__",
    "clean_html",
    "create_default_registry",
    "format_inline",
    "parse",
    "resolve_code_style",
    "resolve_color_theme",
    "resolve_font_settings",
    "resolve_theme_system",
    "resolve_themes",
    "sanitize_url",
]
