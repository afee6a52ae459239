import asyncio
import os

# Settings are read at import time; pin them before iconatlas is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DEFAULT_PROVIDER"] = "lucide"
os.environ.pop("ICONIFY_COLLECTIONS_DIR", None)

import pytest

from iconatlas.descriptors import AsyncRef, IconDescriptor, IconKind, UnicodeGlyph
from iconatlas.resolvers import AssetResolutionError, ResolvedAsset


def glyph(name: str, provider: str = "test") -> IconDescriptor:
    return IconDescriptor(provider, name, IconKind.UNICODE_GLYPH, UnicodeGlyph("*"))


def async_icon(name: str, provider: str = "remote") -> IconDescriptor:
    return IconDescriptor(provider, name, IconKind.ASYNC_REF, AsyncRef(f"{provider}:{name}"))


class FakeResolver:
    """
    Resolver stand-in: "prefix:name" -> inline SVG.
    Names in `failing` raise; when `gate` is set every call waits on it first.
    """

    def __init__(self, failing=(), gate: asyncio.Event = None):
        self.failing = set(failing)
        self.gate = gate
        self.calls = []

    async def __call__(self, handle):
        self.calls.append(handle)
        if self.gate is not None:
            await self.gate.wait()
        name = handle.partition(":")[2]
        if name in self.failing:
            raise AssetResolutionError(f"no such icon {name}")
        return ResolvedAsset(svg=f'<svg viewBox="0 0 24 24"><title>{name}</title></svg>')


@pytest.fixture
def fake_resolver():
    return FakeResolver()
