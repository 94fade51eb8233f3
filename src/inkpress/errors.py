"""Exception classes for inkpress.

Malformed Markdown never raises: it degrades to paragraphs. These exceptions
signal programming errors (a strategy chain that claims no line, a theme
reference of an unsupported type).
"""

from __future__ import annotations


class InkpressError(Exception):
    """Base exception for all inkpress errors.

    Subclass this for specific error categories.
    """

    pass


class ParseError(InkpressError):
    """Error during line dispatch.

    Raised when no strategy claims a line, or when a line is re-dispatched
    more often than the chain allows. Both indicate a defect in the chain,
    not in the input.
    """

    def __init__(self, message: str, lineno: int | None = None) -> None:
        """Initialize parse error with optional location.

        Args:
            message: Error description
            lineno: Line number where error occurred (1-indexed)
        """
        self.message = message
        self.lineno = lineno
        location = f"line {lineno}: " if lineno is not None else ""
        super().__init__(f"{location}{message}")


class ThemeError(InkpressError):
    """A theme reference has a type the resolver cannot interpret."""

    def __init__(self, kind: str, value: object) -> None:
        """Initialize theme error.

        Args:
            kind: Which reference failed (e.g., "color theme")
            value: The offending value
        """
        self.kind = kind
        self.value = value
        super().__init__(
            f"Cannot resolve {kind} from {type(value).__name__!s}: {value!r}"
        )
