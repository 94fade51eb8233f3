"""Links, images and URL sanitization.

Every destination goes through :func:`sanitize_url` before it reaches an
attribute. A rejected link renders its label as plain text; a rejected image
renders an inert placeholder carrying the alt text. Neither ever emits an
``href`` or ``src``.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit

from inkpress.inline.placeholders import Placeholders
from inkpress.themes import ColorTheme
from inkpress.utils.color import with_alpha
from inkpress.utils.logger import get_logger
from inkpress.utils.text import escape_attr, strip_url_noise, unescape_html

logger = get_logger(__name__)

ALLOWED_SCHEMES = frozenset(("http", "https", "mailto", "tel", "ftp"))
# Schemes that address a host and are meaningless without one
_HOST_SCHEMES = frozenset(("http", "https", "ftp"))
DEFAULT_SCHEME_PREFIX = "https://"

_SCHEME_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.-]*):")
_LINK_RE = re.compile(r"(?<!!)\[([^\]]+)\]\(([^)]+)\)")
_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")
_TAG_RE = re.compile(r"<[^>]+>")


def sanitize_url(url: str, allowed_schemes: frozenset[str] = ALLOWED_SCHEMES) -> str:
    """Return a safe URL, or "" if it must not be emitted.

    Entities are decoded and control characters removed first, so
    ``java&#x09;script:`` style obfuscation is seen for what it is. A URL
    without a scheme gets ``https://``. The result is not otherwise
    normalized: a safe URL comes back byte-identical.

    Examples:
        >>> sanitize_url("example.com/a_b")
        'https://example.com/a_b'
        >>> sanitize_url("javascript:alert(1)")
        ''
    """
    if not url:
        return ""
    candidate = strip_url_noise(unescape_html(url)).strip()
    if not candidate:
        return ""

    match = _SCHEME_RE.match(candidate)
    if match is None:
        candidate = DEFAULT_SCHEME_PREFIX + candidate.lstrip("/")
        scheme = DEFAULT_SCHEME_PREFIX.rstrip(":/")
    else:
        scheme = match.group(1).lower()

    if scheme not in allowed_schemes:
        logger.debug("Rejected URL with scheme %r", scheme)
        return ""

    try:
        parts = urlsplit(candidate)
    except ValueError:
        logger.debug("Rejected unparseable URL %r", candidate)
        return ""
    if scheme in _HOST_SCHEMES and not parts.netloc.strip("@:"):
        logger.debug("Rejected URL without host %r", candidate)
        return ""
    return candidate


def _plain_text(html: str, escapes: Placeholders, code: Placeholders) -> str:
    """Flatten formatted inline html to the plain text it displays."""
    text = escapes.restore(code.restore(html))
    return unescape_html(_TAG_RE.sub("", text))


class LinkFormatter:
    """Link and image rendering for one color theme."""

    __slots__ = ("_link_style", "_image_style")

    def __init__(self, theme: ColorTheme) -> None:
        self._link_style = (
            f"color: {theme.primary}; text-decoration: none; "
            f"border-bottom: 1px solid {with_alpha(theme.primary, '4D')};"
        )
        self._image_style = (
            "max-width: 100%; height: auto; border-radius: 6px; "
            f"box-shadow: 0 2px 8px {theme.shadow_color}; margin: 8px 0; display: block;"
        )

    def links(self, html: str, targets: Placeholders) -> str:
        """Render ``[label](target)``; the label keeps its formatting."""
        if "](" not in html:
            return html

        def repl(match: re.Match[str]) -> str:
            label, target = match.group(1), targets.restore(match.group(2))
            href = sanitize_url(target)
            if not href:
                return label
            return (
                f'<a href="{escape_attr(href)}" style="{self._link_style}" '
                f'target="_blank" rel="noopener noreferrer">{label}</a>'
            )

        return _LINK_RE.sub(repl, html)

    def images(
        self,
        html: str,
        targets: Placeholders,
        escapes: Placeholders,
        code: Placeholders,
    ) -> str:
        """Render ``![alt](target)``.

        Images with a non-empty alt are marked ``data-md-caption`` so the
        social styler can give them a caption.
        """
        if "![" not in html:
            return html

        def repl(match: re.Match[str]) -> str:
            alt = _plain_text(match.group(1), escapes, code).strip()
            src = sanitize_url(targets.restore(match.group(2)))
            if not src:
                return (
                    '<span style="color: #8b949e; font-style: italic;">'
                    f"[{escape_attr(alt or 'image')}]</span>"
                )
            caption = ' data-md-caption="true"' if alt else ""
            return (
                f'<img src="{escape_attr(src)}" alt="{escape_attr(alt)}"{caption} '
                f'style="{self._image_style}" loading="lazy">'
            )

        return _IMAGE_RE.sub(repl, html)
