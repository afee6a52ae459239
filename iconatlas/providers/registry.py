"""
Provider registry: the extensible plugin set of icon sources.

Each ProviderSpec pairs an adapter with a raw-export loader and, for async
providers, a resolver. Descriptors are built lazily the first time a provider
is selected, then kept for the lifetime of the spec.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ..adapters.base import ProviderAdapter
from ..descriptors import IconDescriptor
from ..loader import Resolver

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "All"


class UnknownProviderError(KeyError):
    """No provider is registered under the requested key."""


class ProviderInfo:
    """Display metadata for the library list."""

    def __init__(
        self,
        key: str,
        label: str,
        category: str = "General",
        author: str = "Unknown",
        license: str = "MIT",
        package: str = "",
        samples: Optional[list[str]] = None,
    ):
        self.key = key
        self.label = label
        self.category = category
        self.author = author
        self.license = license
        self.package = package
        self.samples = samples or []

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "label": self.label,
            "category": self.category,
            "author": self.author,
            "license": self.license,
            "package": self.package,
            "samples": self.samples,
        }


class ProviderSpec:
    def __init__(
        self,
        info: ProviderInfo,
        adapter: ProviderAdapter,
        load_raw: Callable[[], Any],
        resolver: Optional[Resolver] = None,
    ):
        self.info = info
        self.adapter = adapter
        self.load_raw = load_raw
        self.resolver = resolver
        self._descriptors: Optional[list[IconDescriptor]] = None

    @property
    def key(self) -> str:
        return self.info.key

    @property
    def loaded(self) -> bool:
        return self._descriptors is not None

    def descriptors(self) -> list[IconDescriptor]:
        """Run the adapter on first use; later calls return the same list."""
        if self._descriptors is None:
            try:
                raw = self.load_raw()
            except (OSError, ValueError) as e:
                logger.warning(f"Could not load raw exports for {self.key}: {e}")
                return []
            self._descriptors = self.adapter.build_descriptors(raw)
            logger.info(f"Provider {self.key}: {len(self._descriptors)} icons")
        return self._descriptors


class ProviderRegistry:
    def __init__(self):
        self._specs: dict[str, ProviderSpec] = {}

    def register(self, spec: ProviderSpec) -> ProviderSpec:
        if spec.key in self._specs:
            raise ValueError(f"Provider {spec.key!r} is already registered")
        if spec.adapter.provider != spec.key:
            raise ValueError(f"Adapter for {spec.key!r} emits provider {spec.adapter.provider!r}")
        self._specs[spec.key] = spec
        return spec

    def get(self, key: str) -> ProviderSpec:
        try:
            return self._specs[key]
        except KeyError:
            raise UnknownProviderError(key) from None

    def __contains__(self, key: str) -> bool:
        return key in self._specs

    def keys(self) -> list[str]:
        return list(self._specs)

    def infos(self) -> list[ProviderInfo]:
        return sorted((s.info for s in self._specs.values()), key=lambda i: i.label.casefold())

    def categories(self) -> list[str]:
        return [ALL_CATEGORIES] + sorted({s.info.category for s in self._specs.values()})

    def filter_providers(self, query: str = "", category: str = ALL_CATEGORIES) -> list[ProviderInfo]:
        """Library list filter: label substring (case-insensitive) and category."""
        needle = (query or "").strip().casefold()
        return [
            info for info in self.infos()
            if (not category or category == ALL_CATEGORIES or info.category == category)
            and needle in info.label.casefold()
        ]

    async def aclose(self) -> None:
        """Close resolvers that hold network clients."""
        seen = set()
        for spec in self._specs.values():
            resolver = spec.resolver
            if resolver is None or id(resolver) in seen:
                continue
            seen.add(id(resolver))
            aclose = getattr(resolver, "aclose", None)
            if aclose is not None:
                await aclose()
