"""
Async resolution strategies for AsyncRef handles.

A resolver turns one opaque handle into a ResolvedAsset (inline SVG markup
or an image URL). Resolvers raise AssetResolutionError (or any other error)
on failure; the loader records that as a terminal `failed` state.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Mapping, Optional

import httpx
from bs4 import BeautifulSoup

from .config.settings import ASSET_TIMEOUT, ICONIFY_API_BASE

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": "IconAtlas/1.0",
}


class AssetResolutionError(Exception):
    """A handle could not be turned into a drawable asset."""


class ResolvedAsset:
    """Resolved form of an async icon: inline SVG or an image URL."""

    def __init__(self, svg: Optional[str] = None, url: Optional[str] = None):
        if (svg is None) == (url is None):
            raise ValueError("ResolvedAsset needs exactly one of svg or url")
        self.svg = svg
        self.url = url

    def to_dict(self) -> dict:
        return {"svg": self.svg, "url": self.url}

    def __repr__(self) -> str:
        return f"ResolvedAsset(url={self.url!r})" if self.url else "ResolvedAsset(svg=...)"


def parse_svg(markup: str) -> str:
    """
    Return the <svg> element's source if it is the document root, else raise.
    The original text is kept (html.parser would lowercase viewBox).
    """
    soup = BeautifulSoup(markup, "html.parser")
    root = soup.find(True)
    if root is None or root.name != "svg":
        raise AssetResolutionError("response is not an SVG document")
    start = markup.lower().find("<svg")
    end = markup.lower().rfind("</svg>")
    if end == -1:
        return markup[start:].strip()
    return markup[start:end + len("</svg>")]


def _asset_from_value(value: Any) -> ResolvedAsset:
    if isinstance(value, ResolvedAsset):
        return value
    if isinstance(value, Mapping) and "default" in value:
        value = value["default"]
    elif hasattr(value, "default"):
        value = value.default
    if not isinstance(value, str) or not value.strip():
        raise AssetResolutionError(f"loader returned {type(value).__name__}, expected a URL or SVG")
    value = value.strip()
    if value.startswith("<"):
        return ResolvedAsset(svg=parse_svg(value))
    return ResolvedAsset(url=value)


# ==================================================
# ICONIFY
# ==================================================


class IconifyResolver:
    """
    Fetch "prefix:name" handles from the Iconify API as SVG.

    One AsyncClient is shared by every request of a provider activation;
    pool waits are unbounded so a large eager prefetch queues instead of
    timing out.
    """

    def __init__(self, api_base: str = ICONIFY_API_BASE, client: Optional[httpx.AsyncClient] = None):
        self.api_base = api_base.rstrip("/")
        self._client = client

    def url_for(self, handle: str) -> str:
        prefix, _, name = handle.partition(":")
        if not prefix or not name:
            raise AssetResolutionError(f"bad iconify handle {handle!r}")
        return f"{self.api_base}/{prefix}/{name}.svg"

    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers=HEADERS,
                timeout=httpx.Timeout(ASSET_TIMEOUT, pool=None),
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def __call__(self, handle: Any) -> ResolvedAsset:
        if not isinstance(handle, str):
            raise AssetResolutionError(f"iconify handle must be a string, got {type(handle).__name__}")
        url = self.url_for(handle)
        try:
            r = await self.client().get(url)
            r.raise_for_status()
        except httpx.HTTPError as e:
            raise AssetResolutionError(f"failed to fetch {url}: {e}") from e
        return ResolvedAsset(svg=parse_svg(r.text))


# ==================================================
# MODULE LOADERS
# ==================================================


class ModuleLoaderResolver:
    """Call a loader handle (sync or async) and unwrap its `default` export."""

    async def __call__(self, handle: Any) -> ResolvedAsset:
        if not callable(handle):
            raise AssetResolutionError(f"loader handle is not callable: {handle!r}")
        value = handle()
        if inspect.isawaitable(value):
            value = await value
        return _asset_from_value(value)
