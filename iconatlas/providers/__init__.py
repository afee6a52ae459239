"""Icon providers: registry plus the bundled sample set."""

from .builtin import build_default_registry
from .registry import ALL_CATEGORIES, ProviderInfo, ProviderRegistry, ProviderSpec, UnknownProviderError

__all__ = [
    "ALL_CATEGORIES",
    "ProviderInfo",
    "ProviderRegistry",
    "ProviderSpec",
    "UnknownProviderError",
    "build_default_registry",
]
