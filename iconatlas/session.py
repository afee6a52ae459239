"""
Active provider context: which library is open, its descriptors, its asset
cache and the current selection. The HTTP layer keeps one CatalogSession on
app.state; tests build their own around a custom registry.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .catalog import CatalogPage, CatalogQuery, index, suggestions
from .descriptors import IconDescriptor, IconKind
from .loader import AsyncAssetLoader
from .providers.registry import ProviderRegistry, ProviderSpec
from .render import RenderDispatcher
from .selection import Selection

logger = logging.getLogger(__name__)


class IconNotFoundError(KeyError):
    """The active provider has no icon with that name."""


class CatalogSession:
    def __init__(self, registry: ProviderRegistry, loader: Optional[AsyncAssetLoader] = None):
        self.registry = registry
        self.loader = loader or AsyncAssetLoader()
        self.selection = Selection()
        self._spec: Optional[ProviderSpec] = None
        self._by_name: dict[str, IconDescriptor] = {}

    @property
    def active_key(self) -> Optional[str]:
        return self._spec.key if self._spec else None

    @property
    def descriptors(self) -> list[IconDescriptor]:
        return self._spec.descriptors() if self._spec else []

    async def activate(self, key: str) -> ProviderSpec:
        """
        Make `key` the active provider.
        Raises UnknownProviderError. Selecting the already active provider is a no-op.
        """
        spec = self.registry.get(key)
        if self._spec is spec:
            return spec

        descriptors = spec.descriptors()
        self._spec = spec
        self._by_name = {d.name: d for d in descriptors}
        self.selection.clear()
        activation = self.loader.activate(key)
        logger.info(f"Activated provider {key} ({len(descriptors)} icons)")

        if spec.resolver is not None and any(d.kind is IconKind.ASYNC_REF for d in descriptors):
            self.loader.start(activation, descriptors, spec.resolver)
        return spec

    async def wait_for_assets(self) -> None:
        """Wait for the current activation's prefetch, if one is running."""
        activation = self.loader.active
        if activation is not None and activation.task is not None:
            await asyncio.shield(activation.task)

    def asset_counts(self) -> dict[str, int]:
        cache = self.loader.cache
        if cache is None:
            return {"pending": 0, "resolved": 0, "failed": 0}
        return cache.counts()

    def browse(self, query: CatalogQuery) -> CatalogPage:
        return index(self.descriptors, query)

    def suggest(self, query: str, limit: int = 100) -> list[str]:
        return suggestions(self.descriptors, query, limit)

    def dispatcher(self) -> RenderDispatcher:
        return RenderDispatcher(self.loader.cache)

    def find(self, name: str) -> IconDescriptor:
        try:
            return self._by_name[name]
        except KeyError:
            raise IconNotFoundError(name) from None

    def select(self, name: str) -> IconDescriptor:
        return self.selection.select(self.find(name))
