"""StringBuilder for O(n) string accumulation.

Appends to a list, joins once at the end: O(n) total vs O(n²) for
repeated string concatenation. Used wherever a formatter emits a fragment
piece by piece.

Thread Safety:
StringBuilder instances are local to each formatter call.
No shared mutable state.

"""

from __future__ import annotations


class StringBuilder:
    """Efficient string accumulator.

    Usage:
            >>> sb = StringBuilder()
            >>> sb.append("<p>").append("Hello").append("</p>")
            >>> sb.build()
            '<p>Hello</p>'

    """

    __slots__ = ("_parts",)

    def __init__(self) -> None:
        """Initialize empty StringBuilder."""
        self._parts: list[str] = []

    def append(self, s: str) -> StringBuilder:
        """Append a string to the builder (empty strings are skipped)."""
        if s:
            self._parts.append(s)
        return self

    def extend(self, strings: list[str]) -> StringBuilder:
        """Append multiple strings at once."""
        self._parts.extend(s for s in strings if s)
        return self

    def build(self, separator: str = "") -> str:
        """Join all parts into final string."""
        return separator.join(self._parts)

    def __len__(self) -> int:
        """Return number of parts (not total length)."""
        return len(self._parts)

    def __bool__(self) -> bool:
        """Return True if any parts have been appended."""
        return bool(self._parts)
