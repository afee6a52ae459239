"""Provider adapters: one per native icon export convention."""

from .base import ProviderAdapter
from .components import ComponentMapAdapter
from .css import CssGlyphAdapter
from .glyphs import UnicodeGlyphAdapter
from .paths import PathDataAdapter
from .remote import AsyncModuleAdapter, IconifyCollectionAdapter

__all__ = [
    "ProviderAdapter",
    "ComponentMapAdapter",
    "PathDataAdapter",
    "CssGlyphAdapter",
    "UnicodeGlyphAdapter",
    "IconifyCollectionAdapter",
    "AsyncModuleAdapter",
]
