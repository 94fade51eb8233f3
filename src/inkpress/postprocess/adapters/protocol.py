"""CopyAdapter protocol for theme-specific copy decoration.

An adapter rewrites the fully wrapped copy-mode markup for one theme
system: heading decoration, link and table restyling, card backgrounds.

Thread Safety:
Adapters must be stateless. Everything they need arrives in the
CopyContext, and the same instance may serve several threads at once.

Example:
    >>> class PlainAdapter:
    ...     theme_ids = ("plain",)
    ...
    ...     def transform(self, html, context):
    ...         return html
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Protocol, runtime_checkable

from inkpress.themes import ThemeSystem


@dataclass(frozen=True, slots=True)
class CopyContext:
    """Values an adapter may read.

    Attributes:
        primary_color: Accent color of the active color theme
        base_font_size: Body font size in pixels
        primary_rgb: ``"r, g, b"`` of the accent, for ``rgba(...)``
        theme_system: Active theme system, including its ``copy`` config
    """

    primary_color: str
    base_font_size: int
    primary_rgb: str
    theme_system: ThemeSystem


@runtime_checkable
class CopyAdapter(Protocol):
    """Protocol for copy adapters.

    Attributes:
        theme_ids: Theme-system ids this adapter serves
    """

    theme_ids: ClassVar[tuple[str, ...]]

    def transform(self, html: str, context: CopyContext) -> str:
        """Return ``html`` decorated for the adapter's theme system."""
        ...


class NullCopyAdapter:
    """Adapter used when a theme system has none registered: returns input."""

    theme_ids: ClassVar[tuple[str, ...]] = ()

    def transform(self, html: str, context: CopyContext) -> str:
        return html


NULL_ADAPTER = NullCopyAdapter()
