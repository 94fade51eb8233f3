"""Theme records and resolution.

The pipeline only ever sees fully-resolved, immutable records. Callers may
hand in an id, a partial mapping (camelCase or snake_case keys), a record,
or None; the ``resolve_*`` functions fill every gap from the defaults.

Thread Safety:
All records are frozen dataclasses and the built-in tables are read-only
mappings. Safe to share across threads.

Usage:
    >>> theme = resolve_color_theme({"primary": "#5865F2"})
    >>> theme.primary, theme.text_primary
    ('#5865F2', '#1f2328')
    >>> resolve_code_style("github").has_header
    True
"""

from __future__ import annotations

import dataclasses
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, TypeVar

from inkpress.errors import ThemeError
from inkpress.utils.color import round_half_up
from inkpress.utils.logger import get_logger

logger = get_logger(__name__)

_T = TypeVar("_T")
_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(key: str) -> str:
    return _CAMEL_RE.sub("_", key).lower()


def _normalize_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    return {_snake(str(k)): v for k, v in data.items()}


def merge_record(base: _T, data: Mapping[str, Any]) -> _T:
    """Overlay known, non-None keys of ``data`` onto a frozen record."""
    valid = {f.name for f in dataclasses.fields(base)}  # type: ignore[arg-type]
    updates = {k: v for k, v in _normalize_keys(data).items() if k in valid and v is not None}
    return dataclasses.replace(base, **updates)  # type: ignore[type-var]


@dataclass(frozen=True, slots=True)
class ColorTheme:
    """Accent and neutral colors used by every formatter."""

    id: str = "green"
    name: str = "Emerald"
    primary: str = "#00A86B"
    primary_hover: str = "#008B5A"
    primary_light: str = "rgba(0, 168, 107, 0.08)"
    primary_dark: str = "#006B47"
    text_primary: str = "#1f2328"
    text_secondary: str = "#656d76"
    text_tertiary: str = "#8b949e"
    text_muted: str = "#8b949e"
    bg_primary: str = "#ffffff"
    bg_secondary: str = "#f6f8fa"
    border_light: str = "#d0d7de"
    border_medium: str = "#8b949e"
    table_header_bg: str = "#f6f8fa"
    table_border: str = "#d0d7de"
    inline_code_bg: str = "rgba(0, 168, 107, 0.08)"
    inline_code_text: str = "#006B47"
    inline_code_border: str = "rgba(0, 168, 107, 0.15)"
    highlight: str = "#fff3a3"
    shadow_color: str = "rgba(0, 0, 0, 0.1)"


@dataclass(frozen=True, slots=True)
class SyntaxPalette:
    """Token colors for the code-block tokenizer."""

    keyword: str
    string: str
    comment: str
    number: str
    function: str


@dataclass(frozen=True, slots=True)
class CodeStyle:
    """Code-block chrome and syntax palette.

    Attributes:
        has_traffic_lights: Render three window-control dots and a language
            label in a header bar
        has_header: Render ``header_content`` in a bar styled by
            ``header_style``; ``{lang}`` in the content is replaced by the
            block language
        syntax: Token palette, or None for escape-only rendering
    """

    id: str = "mac"
    name: str = "Mac"
    background: str = "#1e1e1e"
    color: str = "#e6edf3"
    border: str = "none"
    border_radius: str = "12px"
    font_family: str = "Consolas, Monaco, 'Courier New', monospace"
    has_traffic_lights: bool = False
    has_header: bool = False
    header_style: str = ""
    header_content: str = ""
    syntax: SyntaxPalette | None = None

    @property
    def has_chrome(self) -> bool:
        """True when the block renders a header bar of either kind."""
        return self.has_traffic_lights or self.has_header


@dataclass(frozen=True, slots=True)
class ThemeSystem:
    """Layout family; selects the copy adapter and carries its config."""

    id: str = "default"
    name: str = "Default"
    layout: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    copy: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True, slots=True)
class FontSettings:
    """Typography chosen by the user.

    ``line_height`` and ``letter_spacing`` of None mean "derive from
    font_size" and "0" respectively.
    """

    font_family: str = "microsoft-yahei"
    font_size: int = 16
    line_height: float | None = None
    letter_spacing: float | None = None


DEFAULT_COLOR_THEME = ColorTheme()

COLOR_THEMES: Mapping[str, ColorTheme] = MappingProxyType(
    {
        "green": DEFAULT_COLOR_THEME,
        "blue": ColorTheme(
            id="blue",
            name="Ocean",
            primary="#0066CC",
            primary_hover="#0052A3",
            primary_light="rgba(0, 102, 204, 0.08)",
            primary_dark="#003D7A",
            inline_code_bg="rgba(0, 102, 204, 0.08)",
            inline_code_text="#003D7A",
            inline_code_border="rgba(0, 102, 204, 0.15)",
        ),
    }
)

CODE_STYLES: Mapping[str, CodeStyle] = MappingProxyType(
    {
        "mac": CodeStyle(
            id="mac",
            name="Mac",
            has_traffic_lights=True,
            syntax=SyntaxPalette(
                keyword="#ff7b72",
                string="#a5d6ff",
                comment="#8b949e",
                number="#79c0ff",
                function="#d2a8ff",
            ),
        ),
        "github": CodeStyle(
            id="github",
            name="GitHub",
            background="#f6f8fa",
            color="#24292f",
            border="1px solid #d0d7de",
            border_radius="8px",
            has_header=True,
            header_style=(
                "background: #f1f3f4; border-bottom: 1px solid #d0d7de; "
                "padding: 8px 16px; border-radius: 7px 7px 0 0; "
                "font-size: 12px; color: #656d76;"
            ),
            header_content="📄 {lang}",
            syntax=SyntaxPalette(
                keyword="#d73a49",
                string="#032f62",
                comment="#6a737d",
                number="#005cc5",
                function="#6f42c1",
            ),
        ),
    }
)
DEFAULT_CODE_STYLE = CODE_STYLES["mac"]

THEME_SYSTEMS: Mapping[str, ThemeSystem] = MappingProxyType(
    {
        "default": ThemeSystem(),
        "breeze": ThemeSystem(
            id="breeze",
            name="Breeze",
            layout=MappingProxyType({"padding": "24px 20px", "lineHeight": "1.75"}),
            copy=MappingProxyType(
                {
                    "headings": {
                        "h2": {"fontScale": 1.5, "lineHeight": "1.35em"},
                        "h3": {"fontScale": 1.22},
                        "h4": {"fontScale": 1.08},
                    },
                    "innerCard": {"shade": 0.04},
                }
            ),
        ),
    }
)
DEFAULT_THEME_SYSTEM = THEME_SYSTEMS["default"]

DEFAULT_FONT_SETTINGS = FontSettings()

# Platform-safe stacks; rich-text targets ignore fonts outside them
FONT_FAMILY_MAP: Mapping[str, str] = MappingProxyType(
    {
        "microsoft-yahei": "Microsoft YaHei, Arial, sans-serif",
        "pingfang-sc": "PingFang SC, Microsoft YaHei, Arial, sans-serif",
        "hiragino-sans": "Hiragino Sans GB, Microsoft YaHei, Arial, sans-serif",
        "arial": "Arial, sans-serif",
        "system-safe": "Microsoft YaHei, Arial, sans-serif",
    }
)
DEFAULT_FONT_FAMILY_KEY = "microsoft-yahei"


def resolve_font_family(key: str | None) -> str:
    """Map a font-family key to its platform-safe stack."""
    if key and key in FONT_FAMILY_MAP:
        return FONT_FAMILY_MAP[key]
    return FONT_FAMILY_MAP[DEFAULT_FONT_FAMILY_KEY]


def line_height_for(font_size: int, explicit: float | None = None) -> str:
    """Line height derived from the font size unless set explicitly.

    Small text gets more leading: <=14px -> 1.7, <=18px -> 1.6, else 1.5.
    """
    if explicit is not None and explicit > 0:
        return f"{explicit:g}"
    if font_size <= 14:
        return "1.7"
    if font_size <= 18:
        return "1.6"
    return "1.5"


def _resolve(
    kind: str,
    value: Any,
    record_type: type[_T],
    table: Mapping[str, _T],
    default: _T,
) -> _T:
    if value is None:
        return default
    if isinstance(value, record_type):
        return value
    if isinstance(value, str):
        record = table.get(value)
        if record is None:
            logger.warning("Unknown %s %r, using %r", kind, value, getattr(default, "id", ""))
            return default
        return record
    if isinstance(value, Mapping):
        base = default
        ref = value.get("id")
        if isinstance(ref, str) and ref in table:
            base = table[ref]
        return merge_record(base, value)
    raise ThemeError(kind, value)


def resolve_color_theme(value: ColorTheme | Mapping[str, Any] | str | None) -> ColorTheme:
    """Resolve a color-theme reference to a complete ColorTheme."""
    return _resolve("color theme", value, ColorTheme, COLOR_THEMES, DEFAULT_COLOR_THEME)


def resolve_code_style(value: CodeStyle | Mapping[str, Any] | str | None) -> CodeStyle:
    """Resolve a code-style reference.

    A mapping may carry a nested ``syntaxHighlight``/``syntax`` mapping with
    the five token colors.
    """
    if isinstance(value, Mapping):
        data = _normalize_keys(value)
        syntax = data.pop("syntax_highlight", None) or data.get("syntax")
        if isinstance(syntax, Mapping):
            colors = dataclasses.asdict(DEFAULT_CODE_STYLE.syntax)  # type: ignore[arg-type]
            colors.update(
                (k, v) for k, v in _normalize_keys(syntax).items() if k in colors and v
            )
            data["syntax"] = SyntaxPalette(**colors)
        value = data
    return _resolve("code style", value, CodeStyle, CODE_STYLES, DEFAULT_CODE_STYLE)


def resolve_theme_system(value: ThemeSystem | Mapping[str, Any] | str | None) -> ThemeSystem:
    """Resolve a theme-system reference."""
    return _resolve("theme system", value, ThemeSystem, THEME_SYSTEMS, DEFAULT_THEME_SYSTEM)


def _finite_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def resolve_font_settings(value: FontSettings | Mapping[str, Any] | None) -> FontSettings:
    """Resolve font settings so every field holds a usable value.

    Non-positive or non-numeric sizes fall back to the default size. A line
    height that is not a positive number and a letter spacing that is not a
    finite number become None, which later means "derive from the size" and
    "0" respectively. Numeric strings such as ``"1.8"`` are accepted.
    """
    if value is None:
        return DEFAULT_FONT_SETTINGS
    if isinstance(value, FontSettings):
        settings = value
    elif isinstance(value, Mapping):
        settings = merge_record(DEFAULT_FONT_SETTINGS, value)
    else:
        raise ThemeError("font settings", value)

    size_value = _finite_float(settings.font_size)
    size = round_half_up(size_value) if size_value is not None else 0
    if size <= 0:
        size = DEFAULT_FONT_SETTINGS.font_size
    line_height = _finite_float(settings.line_height)
    if line_height is not None and line_height <= 0:
        line_height = None
    family = settings.font_family
    if not isinstance(family, str):
        family = DEFAULT_FONT_SETTINGS.font_family

    resolved = FontSettings(
        font_family=family,
        font_size=size,
        line_height=line_height,
        letter_spacing=_finite_float(settings.letter_spacing),
    )
    return settings if resolved == settings else resolved


def resolve_themes(
    color_theme: Any = None,
    code_style: Any = None,
    theme_system: Any = None,
) -> tuple[ColorTheme, CodeStyle, ThemeSystem]:
    """Resolve all three theme references at once."""
    return (
        resolve_color_theme(color_theme),
        resolve_code_style(code_style),
        resolve_theme_system(theme_system),
    )
