"""Conversion options for inkpress.

Options are an explicit, immutable value handed to each call. Nothing is
read from ambient or global state, so two conversions with different themes
can run side by side in one process.

Thread Safety:
ParseOptions is a frozen dataclass. Safe to share.

Usage:
    >>> from inkpress.config import ParseOptions
    >>> options = ParseOptions.from_dict({"theme": "blue", "isPreview": True})
    >>> options.is_preview
    True
    >>> options.resolve().theme.primary
    '#0066CC'

"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from inkpress.themes import (
    CodeStyle,
    ColorTheme,
    FontSettings,
    ThemeSystem,
    resolve_code_style,
    resolve_color_theme,
    resolve_font_settings,
    resolve_theme_system,
)

if TYPE_CHECKING:
    from inkpress.postprocess.adapters import CopyAdapterRegistry

# camelCase spellings accepted by from_dict
_ALIASES = {
    "codeTheme": "code_theme",
    "codeStyle": "code_theme",
    "colorTheme": "theme",
    "themeSystem": "theme_system",
    "isPreview": "is_preview",
    "cleanHtml": "clean_html",
    "fontSettings": "font_settings",
    "copyAdapters": "copy_adapters",
}


@dataclass(frozen=True, slots=True)
class ParseOptions:
    """Immutable conversion options.

    Theme fields accept an id, a partial mapping, a resolved record, or
    None; ``resolve()`` turns them into complete records.

    Attributes:
        theme: Color theme reference
        code_theme: Code-block style reference
        theme_system: Theme-system reference (selects the copy adapter)
        is_preview: Render for the live preview instead of for copying
        clean_html: Strip ``class`` and ``data-*`` attributes from the output
        font_settings: Font family key, size, line height, letter spacing
        copy_adapters: Adapter registry; None uses the built-in registry

    """

    theme: ColorTheme | Mapping[str, Any] | str | None = None
    code_theme: CodeStyle | Mapping[str, Any] | str | None = None
    theme_system: ThemeSystem | Mapping[str, Any] | str | None = None
    is_preview: bool = False
    clean_html: bool = False
    font_settings: FontSettings | Mapping[str, Any] | None = None
    copy_adapters: CopyAdapterRegistry | None = None

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> ParseOptions:
        """Create ParseOptions from a dictionary.

        Keys may be attribute names or their camelCase spellings
        (``isPreview``, ``themeSystem``...). Unknown keys are silently
        ignored.

        Example:
            >>> ParseOptions.from_dict({"cleanHtml": True, "bogus": 1}).clean_html
            True

        """
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered: dict[str, Any] = {}
        for key, value in config_dict.items():
            name = _ALIASES.get(key, key)
            if name in valid_fields:
                filtered[name] = value
        return cls(**filtered)

    def merged(self, **overrides: Any) -> ParseOptions:
        """Return a copy with ``overrides`` applied (camelCase accepted)."""
        if not overrides:
            return self
        updates = ParseOptions.from_dict(overrides)
        changes = {name: getattr(updates, name) for name in _override_fields(overrides)}
        return dataclasses.replace(self, **changes)

    def resolve(self) -> ParseOptions:
        """Return a copy whose theme and font fields are complete records."""
        return dataclasses.replace(
            self,
            theme=resolve_color_theme(self.theme),
            code_theme=resolve_code_style(self.code_theme),
            theme_system=resolve_theme_system(self.theme_system),
            font_settings=resolve_font_settings(self.font_settings),
        )


def _override_fields(overrides: Mapping[str, Any]) -> list[str]:
    """Field names addressed by ``overrides`` keys (aliases resolved)."""
    valid_fields = {f.name for f in dataclasses.fields(ParseOptions)}
    return [
        name for name in (_ALIASES.get(key, key) for key in overrides) if name in valid_fields
    ]


def coerce_options(options: ParseOptions | Mapping[str, Any] | None) -> ParseOptions:
    """Accept a ParseOptions, a plain mapping, or None."""
    if options is None:
        return ParseOptions()
    if isinstance(options, ParseOptions):
        return options
    if isinstance(options, Mapping):
        return ParseOptions.from_dict(options)
    msg = f"options must be ParseOptions, a mapping or None, not {type(options).__name__}"
    raise TypeError(msg)
