"""
Async asset loader.

Some providers (Iconify collections, dynamically imported SVG modules) have
no drawable until an async fetch completes. The loader keeps one AssetCache
per provider activation:

    unloaded -> pending -> resolved | failed

  - Activating a provider prefetches its whole async set at once; every
    resolution is issued concurrently.
  - Each key is resolved at most once per activation. `failed` is terminal.
  - Switching providers starts a new activation with an empty cache. Results
    that land for an activation that is no longer current are dropped.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable, Optional

from .descriptors import AsyncRef, IconDescriptor, IconKind
from .resolvers import ResolvedAsset

logger = logging.getLogger(__name__)

Resolver = Callable[[Any], Awaitable[ResolvedAsset]]
AssetKey = tuple[str, str]


class AssetState(str, Enum):
    UNLOADED = "unloaded"
    PENDING = "pending"
    RESOLVED = "resolved"
    FAILED = "failed"


class AssetEntry:
    __slots__ = ("state", "asset", "error")

    def __init__(self, state: AssetState, asset: Optional[ResolvedAsset] = None, error: Optional[str] = None):
        self.state = state
        self.asset = asset
        self.error = error

    def __repr__(self) -> str:
        return f"AssetEntry({self.state.value})"


UNLOADED = AssetEntry(AssetState.UNLOADED)


class AssetCache:
    """(provider, name) -> AssetEntry for one provider activation."""

    def __init__(self, provider: str):
        self.provider = provider
        self._entries: dict[AssetKey, AssetEntry] = {}

    def get(self, key: AssetKey) -> AssetEntry:
        return self._entries.get(key, UNLOADED)

    def state(self, key: AssetKey) -> AssetState:
        return self.get(key).state

    def mark_pending(self, key: AssetKey) -> bool:
        """Move an unloaded key to pending. False if it was already seen."""
        if key[0] != self.provider or key in self._entries:
            return False
        self._entries[key] = AssetEntry(AssetState.PENDING)
        return True

    def settle(self, key: AssetKey, asset: Optional[ResolvedAsset] = None, error: Optional[str] = None) -> bool:
        """Record the outcome of a pending key. Settled keys never change again."""
        entry = self._entries.get(key)
        if entry is None or entry.state is not AssetState.PENDING:
            return False
        if asset is not None:
            self._entries[key] = AssetEntry(AssetState.RESOLVED, asset=asset)
        else:
            self._entries[key] = AssetEntry(AssetState.FAILED, error=error or "unknown error")
        return True

    def counts(self) -> dict[str, int]:
        out = {state.value: 0 for state in AssetState if state is not AssetState.UNLOADED}
        for entry in self._entries.values():
            out[entry.state.value] += 1
        return out

    def __len__(self) -> int:
        return len(self._entries)


class Activation:
    """One provider activation: owns its cache and its prefetch task."""

    def __init__(self, provider: str):
        self.provider = provider
        self.cache = AssetCache(provider)
        self.task: Optional[asyncio.Task] = None


class AsyncAssetLoader:
    def __init__(self):
        self._active: Optional[Activation] = None
        self.resolutions_issued = 0

    @property
    def active(self) -> Optional[Activation]:
        return self._active

    @property
    def cache(self) -> Optional[AssetCache]:
        return self._active.cache if self._active else None

    def is_current(self, activation: Activation) -> bool:
        return activation is self._active

    def activate(self, provider: str) -> Activation:
        """Start a fresh activation. Re-activating the current provider is a no-op."""
        if self._active is not None and self._active.provider == provider:
            return self._active
        if self._active is not None:
            logger.info(f"Discarding asset cache for {self._active.provider} ({len(self._active.cache)} entries)")
        self._active = Activation(provider)
        return self._active

    def deactivate(self) -> None:
        self._active = None

    async def prefetch(self, activation: Activation, descriptors: Iterable[IconDescriptor], resolver: Resolver) -> None:
        """Resolve every async descriptor of the activation concurrently."""
        if not self.is_current(activation):
            return
        pending = [
            d for d in descriptors
            if d.kind is IconKind.ASYNC_REF and activation.cache.mark_pending(d.key)
        ]
        if not pending:
            return
        logger.info(f"Prefetching {len(pending)} assets for {activation.provider}")
        await asyncio.gather(*(self._resolve(activation, d, resolver) for d in pending))
        if self.is_current(activation):
            logger.info(f"Assets settled for {activation.provider}: {activation.cache.counts()}")

    def start(self, activation: Activation, descriptors: Iterable[IconDescriptor], resolver: Resolver) -> asyncio.Task:
        """Schedule `prefetch` on the running loop without waiting for it."""
        activation.task = asyncio.create_task(self.prefetch(activation, list(descriptors), resolver))
        return activation.task

    async def _resolve(self, activation: Activation, descriptor: IconDescriptor, resolver: Resolver) -> None:
        self.resolutions_issued += 1
        asset: Optional[ResolvedAsset] = None
        error: Optional[str] = None
        payload = descriptor.payload
        try:
            if not isinstance(payload, AsyncRef):
                raise TypeError(f"{descriptor.name} has no async handle")
            result = resolver(payload.handle)
            if inspect.isawaitable(result):
                result = await result
            if not isinstance(result, ResolvedAsset):
                raise TypeError(f"resolver returned {type(result).__name__}")
            asset = result
        except asyncio.CancelledError:
            raise
        except Exception as e:
            error = str(e) or type(e).__name__
            logger.debug(f"Asset {descriptor.provider}/{descriptor.name} failed: {error}")

        if not self.is_current(activation):
            logger.debug(f"Dropping stale asset {descriptor.provider}/{descriptor.name}")
            return
        activation.cache.settle(descriptor.key, asset=asset, error=error)
