"""Copy adapters: theme-system specific decoration of copy output."""

from inkpress.postprocess.adapters.breeze import BreezeCopyAdapter
from inkpress.postprocess.adapters.protocol import (
    NULL_ADAPTER,
    CopyAdapter,
    CopyContext,
    NullCopyAdapter,
)
from inkpress.postprocess.adapters.registry import (
    DEFAULT_REGISTRY,
    CopyAdapterRegistry,
    CopyAdapterRegistryBuilder,
    create_default_registry,
)

__all__ = [
    "DEFAULT_REGISTRY",
    "NULL_ADAPTER",
    "BreezeCopyAdapter",
    "CopyAdapter",
    "CopyAdapterRegistry",
    "CopyAdapterRegistryBuilder",
    "CopyContext",
    "NullCopyAdapter",
    "create_default_registry",
]
