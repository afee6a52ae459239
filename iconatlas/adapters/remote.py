"""
Adapters for providers whose drawable assets only exist after an async fetch.

  - IconifyCollectionAdapter: Iconify collection JSON (full, or reduced to
    names by data_tools/reduce_iconify_collections.py). Handles are
    "prefix:name" strings, resolved by IconifyResolver.
  - AsyncModuleAdapter: name -> loader callable (dynamic import style).
    The loader itself is the handle, resolved by ModuleLoaderResolver.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, Optional

from ..descriptors import AsyncRef, IconDescriptor, IconKind
from .base import IDENTIFIER_RE, ProviderAdapter, export_items

ICONIFY_NAME_RE = re.compile(r"^[a-z0-9]+(?:[-_][a-z0-9]+)*$")


class IconifyCollectionAdapter(ProviderAdapter):
    kind = IconKind.ASYNC_REF

    def __init__(self, provider: str, prefix: Optional[str] = None):
        super().__init__(provider)
        self.prefix = prefix

    def entries(self, raw: Any) -> Iterable[tuple[str, Any]]:
        if not isinstance(raw, Mapping):
            return
        prefix = raw.get("prefix") or self.prefix
        icons = raw.get("icons")
        if not isinstance(prefix, str) or not isinstance(icons, Mapping):
            return
        for name, icon in icons.items():
            if isinstance(icon, Mapping) and icon.get("hidden"):
                continue
            yield name, f"{prefix}:{name}"

        aliases = raw.get("aliases")
        if isinstance(aliases, Mapping):
            for name, alias in aliases.items():
                if not isinstance(alias, Mapping) or alias.get("hidden"):
                    continue
                parent = alias.get("parent")
                if isinstance(parent, str) and parent in icons:
                    yield name, f"{prefix}:{name}"

    def classify(self, name: str, value: Any) -> Optional[IconDescriptor]:
        if not isinstance(name, str) or not ICONIFY_NAME_RE.match(name):
            return None
        return self.describe(name, AsyncRef(handle=value))


class AsyncModuleAdapter(ProviderAdapter):
    kind = IconKind.ASYNC_REF

    def entries(self, raw: Any) -> Iterable[tuple[str, Any]]:
        return export_items(raw)

    def classify(self, name: str, value: Any) -> Optional[IconDescriptor]:
        if not IDENTIFIER_RE.match(name.replace("-", "_")) or not callable(value):
            return None
        return self.describe(name, AsyncRef(handle=value))
