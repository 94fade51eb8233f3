"""Sentinel tokens that shield text from later inline passes.

A token is ``\\ue000`` + kind letter + index + ``\\ue001``. Both delimiters
live in the Private Use Area and contain none of the characters any inline
pattern matches, so a token survives every pass unchanged. Input text is
stripped of the delimiters before formatting so it cannot forge tokens.

Thread Safety:
Placeholders instances are created per format call and never shared.
"""

from __future__ import annotations

import re

OPEN = "\ue000"
CLOSE = "\ue001"

_DELIMITERS_RE = re.compile(f"[{OPEN}{CLOSE}]")


def strip_sentinels(text: str) -> str:
    """Remove sentinel delimiters from untrusted text."""
    return _DELIMITERS_RE.sub("", text)


class Placeholders:
    """Ordered token -> value table for one kind of protected content.

    Usage:
        >>> table = Placeholders("C")
        >>> token = table.add("<code>x</code>")
        >>> table.restore(f"a {token} b")
        'a <code>x</code> b'
    """

    __slots__ = ("_kind", "_pattern", "_values")

    def __init__(self, kind: str) -> None:
        self._kind = kind
        self._values: list[str] = []
        self._pattern = re.compile(f"{OPEN}{re.escape(kind)}(\\d+){CLOSE}")

    def add(self, value: str) -> str:
        """Store ``value`` and return its token."""
        token = f"{OPEN}{self._kind}{len(self._values)}{CLOSE}"
        self._values.append(value)
        return token

    def value(self, token: str) -> str | None:
        """Value of a single token, or None if ``token`` is not one."""
        match = self._pattern.fullmatch(token)
        if match is None:
            return None
        return self._values[int(match.group(1))]

    def restore(self, text: str) -> str:
        """Replace every token of this kind with its stored value."""
        if not self._values or OPEN not in text:
            return text
        return self._pattern.sub(lambda m: self._values[int(m.group(1))], text)

    def __len__(self) -> int:
        return len(self._values)
