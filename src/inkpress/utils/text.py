"""Text escaping utilities for inkpress.

Example:
    >>> from inkpress.utils.text import escape_html
    >>> escape_html("a < b")
    'a &lt; b'
"""

from __future__ import annotations

import html as html_module
import re

# ASCII control characters, which browsers drop from URLs
_URL_NOISE = re.compile(r"[\x00-\x1f\x7f]+")


def escape_html(text: str) -> str:
    """Escape text content: ``&``, ``<`` and ``>`` only.

    Quotes are left alone because the result is used as element content,
    never inside an attribute.

    Examples:
        >>> escape_html("<b>&</b>")
        '&lt;b&gt;&amp;&lt;/b&gt;'
    """
    if not text:
        return ""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def escape_attr(text: str) -> str:
    """Escape HTML special characters for safe use in attributes.

    Converts special characters to HTML entities:
    - & becomes &amp;
    - < becomes &lt;
    - > becomes &gt;
    - " becomes &quot;
    - ' becomes &#x27;

    Args:
        text: Text to escape

    Returns:
        HTML-escaped text safe for use in attribute values

    Examples:
        >>> escape_attr("<script>alert('xss')</script>")
        '&lt;script&gt;alert(&#x27;xss&#x27;)&lt;/script&gt;'
    """
    if not text:
        return ""

    escaped = html_module.escape(text, quote=True)
    return escaped.replace("'", "&#x27;")


def unescape_html(text: str) -> str:
    """Decode HTML entities (``&amp;`` -> ``&``)."""
    if not text:
        return ""
    return html_module.unescape(text)


def strip_url_noise(url: str) -> str:
    """Remove control characters (tab and newline included) from a URL candidate."""
    return _URL_NOISE.sub("", url)
