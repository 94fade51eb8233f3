"""Copy adapter registry.

Maps theme-system ids to the adapter that decorates copy output for them.

Thread Safety:
CopyAdapterRegistry is immutable after creation. Safe to share.
Use CopyAdapterRegistryBuilder for mutable construction.

Example:
    >>> builder = CopyAdapterRegistryBuilder()
    >>> builder.register(BreezeCopyAdapter())
    >>> registry = builder.build()
    >>> "breeze" in registry
    True
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from inkpress.postprocess.adapters.protocol import NULL_ADAPTER

if TYPE_CHECKING:
    from inkpress.postprocess.adapters.protocol import CopyAdapter
    from inkpress.themes import ThemeSystem


def _theme_id(theme_system: ThemeSystem | str | None) -> str | None:
    if theme_system is None or isinstance(theme_system, str):
        return theme_system
    return theme_system.id


class CopyAdapterRegistry:
    """Immutable mapping of theme-system id to copy adapter.

    Thread Safety:
        Immutable after creation. Safe to share across threads.
    """

    __slots__ = ("_adapters", "_by_id")

    def __init__(
        self,
        adapters: tuple[CopyAdapter, ...],
        by_id: dict[str, CopyAdapter],
    ) -> None:
        """Initialize registry with pre-built mappings.

        Use CopyAdapterRegistryBuilder to create instances.
        """
        self._adapters = adapters
        self._by_id = by_id

    def get(self, theme_system: ThemeSystem | str | None) -> CopyAdapter | None:
        """Get the adapter for a theme system (record or id).

        Returns:
            Adapter if registered, None otherwise
        """
        key = _theme_id(theme_system)
        return self._by_id.get(key) if key is not None else None

    def resolve(self, theme_system: ThemeSystem | str | None) -> CopyAdapter:
        """Like get(), but falls back to the no-op adapter."""
        return self.get(theme_system) or NULL_ADAPTER

    def has(self, theme_id: str) -> bool:
        """Check if a theme-system id has an adapter."""
        return theme_id in self._by_id

    @property
    def theme_ids(self) -> frozenset[str]:
        return frozenset(self._by_id)

    @property
    def adapters(self) -> tuple[CopyAdapter, ...]:
        return self._adapters

    def __contains__(self, theme_id: str) -> bool:
        return self.has(theme_id)

    def __len__(self) -> int:
        return len(self._by_id)


class CopyAdapterRegistryBuilder:
    """Mutable builder for CopyAdapterRegistry.

    Register adapters, then call build() to create an immutable registry.
    """

    __slots__ = ("_adapters", "_by_id")

    def __init__(self) -> None:
        self._adapters: list[CopyAdapter] = []
        self._by_id: dict[str, CopyAdapter] = {}

    def register(self, adapter: CopyAdapter) -> CopyAdapterRegistryBuilder:
        """Register an adapter under each of its theme ids.

        Returns:
            Self for chaining

        Raises:
            TypeError: If the adapter lacks ``theme_ids`` or ``transform``
            ValueError: If a theme id is already taken
        """
        if not hasattr(adapter, "theme_ids"):
            msg = f"Adapter {type(adapter).__name__} missing 'theme_ids' attribute"
            raise TypeError(msg)

        if not callable(getattr(adapter, "transform", None)):
            msg = f"Adapter {type(adapter).__name__} missing 'transform' method"
            raise TypeError(msg)

        for theme_id in adapter.theme_ids:
            if theme_id in self._by_id:
                existing = self._by_id[theme_id]
                msg = f"Theme system '{theme_id}' already registered by {type(existing).__name__}"
                raise ValueError(msg)
            self._by_id[theme_id] = adapter

        self._adapters.append(adapter)
        return self

    def register_all(self, adapters: list[CopyAdapter]) -> CopyAdapterRegistryBuilder:
        for adapter in adapters:
            self.register(adapter)
        return self

    def build(self) -> CopyAdapterRegistry:
        return CopyAdapterRegistry(adapters=tuple(self._adapters), by_id=dict(self._by_id))

    def __len__(self) -> int:
        return len(self._adapters)


def create_default_registry() -> CopyAdapterRegistry:
    """Create a registry with the built-in adapters (breeze)."""
    from inkpress.postprocess.adapters.breeze import BreezeCopyAdapter

    return CopyAdapterRegistryBuilder().register(BreezeCopyAdapter()).build()


DEFAULT_REGISTRY = create_default_registry()
