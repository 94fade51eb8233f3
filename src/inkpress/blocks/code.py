"""Fenced code blocks and their syntax highlighter.

The highlighter is a small, language-agnostic tokenizer: comments, strings,
keywords, numbers and call sites, tried in that order over the escaped
source. A span claimed by an earlier rule can never be claimed again, which
is tracked with :class:`ClaimedRanges`. Colors come from the code style's
palette and are written inline; no ``<style>`` element is ever emitted.

Usage:
    >>> from inkpress.themes import CODE_STYLES
    >>> formatter = CodeBlockFormatter(CODE_STYLES["github"], 16, is_preview=False)
    >>> html = formatter.format("const x = 1;", "js")
"""

from __future__ import annotations

import re
from bisect import bisect_left
from collections.abc import Iterator

from inkpress.inline.placeholders import Placeholders
from inkpress.stringbuilder import StringBuilder
from inkpress.themes import CodeStyle, SyntaxPalette
from inkpress.utils.color import round_half_up
from inkpress.utils.logger import get_logger
from inkpress.utils.style import normalize_style, parse_style, serialize_style, update_declarations
from inkpress.utils.text import escape_html

logger = get_logger(__name__)

FENCE = "```"
CODE_FONT_SIZE = 14

LANGUAGE_ALIASES = {
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "rb": "ruby",
    "sh": "bash",
    "shell": "bash",
    "yml": "yaml",
    "md": "markdown",
    "htm": "html",
    "xml": "html",
    "c++": "cpp",
    "c#": "csharp",
    "cs": "csharp",
    "fs": "fsharp",
    "vb": "vbnet",
    "ps1": "powershell",
    "psm1": "powershell",
}

SUPPORTED_LANGUAGES = frozenset(
    (
        "javascript", "typescript", "python", "java", "c", "cpp", "csharp",
        "php", "ruby", "go", "rust", "swift", "kotlin", "scala", "html",
        "css", "scss", "sass", "less", "json", "yaml", "markdown",
        "bash", "powershell", "sql", "r", "matlab", "perl",
        "lua", "dart", "elixir", "erlang", "haskell", "clojure", "fsharp",
        "vbnet", "assembly", "dockerfile", "nginx", "apache", "text",
    )
)

_KEYWORDS = (
    "function|const|let|var|if|else|for|while|return|class|import|export|from|"
    "default|async|await|try|catch|finally|public|private|protected|static|void|"
    "int|string|boolean|true|false|null|undefined"
)

# (palette field, pattern) in claim order
TOKEN_RULES: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("comment", re.compile(r"//.*$", re.MULTILINE)),
    ("comment", re.compile(r"/\*[\s\S]*?\*/")),
    ("string", re.compile(r"([\"'`])(?!gt;|lt;|amp;|quot;)[^\"'`]*?\1")),
    ("keyword", re.compile(rf"\b(?:{_KEYWORDS})\b")),
    ("number", re.compile(r"\b\d+(?:\.\d+)?\b")),
    ("function", re.compile(r"\b[a-zA-Z_$][a-zA-Z0-9_$]*(?=\()")),
)

_TAG_RE = re.compile(r"<[^>]+>")


def normalize_language(language: str | None) -> str:
    """Lowercase and de-alias a fence language ("" -> "text")."""
    if not language or not language.strip():
        return "text"
    normalized = language.strip().lower()
    return LANGUAGE_ALIASES.get(normalized, normalized)


def is_supported_language(language: str | None) -> bool:
    return normalize_language(language) in SUPPORTED_LANGUAGES


class ClaimedRanges:
    """Set of disjoint half-open ``[start, end)`` intervals, kept sorted.

    Usage:
        >>> ranges = ClaimedRanges()
        >>> ranges.claim(0, 5)
        True
        >>> ranges.claim(3, 8)
        False
        >>> ranges.claim(5, 8)
        True
        >>> list(ranges)
        [(0, 5), (5, 8)]
    """

    __slots__ = ("_starts", "_ends")

    def __init__(self) -> None:
        self._starts: list[int] = []
        self._ends: list[int] = []

    def overlaps(self, start: int, end: int) -> bool:
        """True if ``[start, end)`` shares a position with a claimed range."""
        if start >= end:
            return False
        i = bisect_left(self._starts, end)
        # Only the interval starting right before ``end`` can reach into it
        return i > 0 and self._ends[i - 1] > start

    def claim(self, start: int, end: int) -> bool:
        """Claim ``[start, end)`` unless it overlaps; report success."""
        if start >= end or self.overlaps(start, end):
            return False
        i = bisect_left(self._starts, start)
        self._starts.insert(i, start)
        self._ends.insert(i, end)
        return True

    def __contains__(self, position: int) -> bool:
        return self.overlaps(position, position + 1)

    def __iter__(self) -> Iterator[tuple[int, int]]:
        return iter(zip(self._starts, self._ends))

    def __len__(self) -> int:
        return len(self._starts)


def _token_span(text: str, color: str) -> str:
    return (
        f'<span style="color: {color} !important; font-weight: inherit; '
        f'text-decoration: none;"><font color="{color}">{text}</font></span>'
    )


def _protect_spaces(html: str) -> str:
    """Turn literal spaces into ``&nbsp;`` without touching tag internals."""
    tags = Placeholders("T")
    shielded = _TAG_RE.sub(lambda m: tags.add(m.group(0)), html)
    return tags.restore(shielded.replace(" ", "&nbsp;"))


def tokenize(escaped: str) -> list[tuple[int, int, str]]:
    """Return non-overlapping (start, end, kind) tokens sorted by position."""
    claimed = ClaimedRanges()
    tokens: list[tuple[int, int, str]] = []
    for kind, pattern in TOKEN_RULES:
        for match in pattern.finditer(escaped):
            if claimed.claim(match.start(), match.end()):
                tokens.append((match.start(), match.end(), kind))
    tokens.sort()
    return tokens


def highlight_code(code: str, palette: SyntaxPalette | None) -> str:
    """Escape and colorize ``code``.

    Without a palette the result is only escaped and space-protected.
    """
    if not code:
        return ""
    escaped = escape_html(code)
    if palette is None:
        return escaped.replace(" ", "&nbsp;")

    sb = StringBuilder()
    last = 0
    for start, end, kind in tokenize(escaped):
        sb.append(escaped[last:start])
        sb.append(_token_span(escaped[start:end], getattr(palette, kind)))
        last = end
    sb.append(escaped[last:])
    return _protect_spaces(sb.build())


def _trim_blank_lines(content: str) -> str:
    lines = content.split("\n")
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return "\n".join(line.rstrip() for line in lines)


class CodeBlockFormatter:
    """Render a fenced block for one code style.

    Copy mode marks every declaration ``!important`` (paste targets apply
    their own stylesheet otherwise) and adds a width expander so the block
    scrolls horizontally instead of wrapping.
    """

    __slots__ = ("_style", "_base", "_preview")

    def __init__(self, code_style: CodeStyle, base_font_size: int, is_preview: bool) -> None:
        self._style = code_style
        self._base = base_font_size
        self._preview = is_preview

    def _css(self, style: str) -> str:
        if self._preview:
            return normalize_style(style)
        declarations = [
            (prop, value if value.endswith("!important") else f"{value} !important")
            for prop, value in parse_style(style)
        ]
        return serialize_style(declarations)

    def format(self, content: str, language: str | None = None) -> str:
        style = self._style
        chrome = style.has_chrome
        highlighted = highlight_code(_trim_blank_lines(content), style.syntax)

        pre_style = self._css(
            f"background: {style.background}; border-radius: {style.border_radius}; "
            f"padding: {'0' if chrome else '24px'}; overflow: hidden; "
            f"font-size: {CODE_FONT_SIZE}px; line-height: 1.3; border: {style.border}; "
            f"position: relative; font-family: {style.font_family}; margin: 32px 0; "
            f"font-weight: 400; color: {style.color}; box-sizing: border-box; "
            "display: block; color-scheme: light; min-height: auto; height: auto; "
            "max-height: none;" + ("" if self._preview else " vertical-align: top;")
        )
        scroll_style = self._css(
            "overflow-x: auto; overflow-y: hidden; width: 100%; color-scheme: light; "
            "box-sizing: border-box; "
            f"padding: {'12px 24px 20px 24px' if chrome else '24px'}; "
            "-webkit-overflow-scrolling: touch;"
        )
        code_style = self._css(
            f"background: transparent; border: none; font-family: {style.font_family}; "
            f"font-size: {CODE_FONT_SIZE}px; line-height: 1.3; color: {style.color}; "
            f"display: {'block' if self._preview else 'inline-block'}; "
            f"width: {'100%' if self._preview else 'auto'}; "
            + ("" if self._preview else "max-width: none; ")
            + "white-space: pre; word-spacing: normal; letter-spacing: normal; "
            "text-indent: 0; margin: 0; padding: 0; box-sizing: border-box;"
        )
        code = f'<code style="{code_style}">{highlighted}</code>'
        if not self._preview:
            expander = (
                "display: inline-block !important; min-width: max-content !important; "
                "width: auto !important; max-width: none !important;"
            )
            code = f'<span style="{expander}">{code}</span>'

        sb = StringBuilder()
        sb.append(f'<pre style="{pre_style}">')
        if chrome:
            sb.append(self._header(language))
        sb.append(f'<div style="{scroll_style}">{code}</div>')
        sb.append("</pre>")
        return sb.build()

    def _header(self, language: str | None) -> str:
        style = self._style
        label = ""
        if language and language.strip():
            name = normalize_language(language)
            if not is_supported_language(name):
                logger.debug("Unrecognized code language %r; using generic highlighting", name)
            label = escape_html(name)
        if style.has_traffic_lights:
            dots = (("#ff5f56", 6), ("#ffbd2e", 6), ("#27ca3f", 12))
            label_size = max(11, round_half_up(self._base * 0.75))
            parts = [
                f'<span style="color: {color} !important; margin-right: {gap}px !important; '
                "font-size: 12px !important; line-height: 1 !important; "
                'display: inline !important;">●</span>'
                for color, gap in dots
            ]
            parts.append(
                f'<span style="font-size: {label_size}px !important; color: #8b949e !important; '
                f'line-height: 1 !important; display: inline !important;">{label or "code"}</span>'
            )
            content = "".join(parts)
            header_style = update_declarations(style.header_style, {"padding": "12px 20px"})
        else:
            content = escape_html(style.header_content).replace("{lang}", label or "code")
            header_style = style.header_style
        if not self._preview:
            header_style = update_declarations(
                header_style,
                {"line-height": "1.2 !important", "min-height": "auto !important",
                 "height": "auto !important"},
            )
        return f'<div style="{header_style}">{content}</div>'
