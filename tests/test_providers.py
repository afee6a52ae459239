import asyncio
import json

import pytest

from conftest import FakeResolver
from iconatlas.adapters import IconifyCollectionAdapter, UnicodeGlyphAdapter
from iconatlas.descriptors import IconKind
from iconatlas.providers import (
    ProviderInfo,
    ProviderRegistry,
    ProviderSpec,
    UnknownProviderError,
    build_default_registry,
)
from iconatlas.providers.builtin import register_iconify_collections
from iconatlas.resolvers import IconifyResolver
from iconatlas.session import CatalogSession, IconNotFoundError


def glyph_spec(key, label, category="Emoji", raw=None):
    return ProviderSpec(
        ProviderInfo(key, label, category),
        UnicodeGlyphAdapter(key),
        lambda: raw if raw is not None else {"star": "⭐", "fire": "🔥"},
    )


def remote_spec(key, names, resolver):
    collection = {"prefix": key, "icons": {n: {} for n in names}}
    return ProviderSpec(ProviderInfo(key, key.title(), "Remote"), IconifyCollectionAdapter(key), lambda: collection, resolver)


# --------------------------------------------------
# Registry
# --------------------------------------------------

def test_register_and_lookup():
    registry = ProviderRegistry()
    registry.register(glyph_spec("emoji", "Emoji"))
    assert "emoji" in registry
    assert registry.get("emoji").info.label == "Emoji"
    with pytest.raises(UnknownProviderError):
        registry.get("nope")
    with pytest.raises(ValueError):
        registry.register(glyph_spec("emoji", "Emoji again"))


def test_filter_providers_by_label_and_category():
    registry = ProviderRegistry()
    registry.register(glyph_spec("b", "Beta Glyphs", "Emoji"))
    registry.register(glyph_spec("a", "Alpha Glyphs", "Font"))
    registry.register(glyph_spec("c", "Gamma", "Font"))

    assert [i.key for i in registry.filter_providers()] == ["a", "b", "c"]
    assert [i.key for i in registry.filter_providers("GLYPH")] == ["a", "b"]
    assert [i.key for i in registry.filter_providers("", "Font")] == ["a", "c"]
    assert registry.categories() == ["All", "Emoji", "Font"]


def test_descriptors_are_built_once():
    calls = []

    def load():
        calls.append(1)
        return {"star": "⭐"}

    spec = ProviderSpec(ProviderInfo("e", "E"), UnicodeGlyphAdapter("e"), load)
    assert not spec.loaded
    first = spec.descriptors()
    assert spec.descriptors() is first
    assert calls == [1]


def test_raw_load_failure_gives_empty_provider():
    def load():
        raise OSError("missing data file")

    spec = ProviderSpec(ProviderInfo("e", "E"), UnicodeGlyphAdapter("e"), load)
    assert spec.descriptors() == []


def test_default_registry_covers_every_kind():
    registry = build_default_registry(collections_dir=None)
    kinds = {d.kind for key in registry.keys() for d in registry.get(key).descriptors()}
    assert kinds == set(IconKind)


def test_default_registry_names_unique_per_provider():
    registry = build_default_registry(collections_dir=None)
    for key in registry.keys():
        names = [d.name for d in registry.get(key).descriptors()]
        assert len(names) == len(set(names)), key
        assert names, key


def test_iconify_collection_files_are_registered(tmp_path):
    (tmp_path / "tabler.json").write_text(json.dumps({
        "prefix": "tabler",
        "info": {"name": "Tabler Icons", "author": {"name": "Paweł Kuna"}, "license": {"title": "MIT"}},
        "icons": {"home": {}, "star": {}},
    }), encoding="utf-8")
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")

    registry = ProviderRegistry()
    added = register_iconify_collections(registry, str(tmp_path), IconifyResolver("https://example.com"))
    assert added == 1
    spec = registry.get("iconify-tabler")
    assert spec.info.label == "Tabler Icons"
    assert spec.info.author == "Paweł Kuna"
    assert [d.payload.handle for d in spec.descriptors()] == ["tabler:home", "tabler:star"]


def test_iconify_resolver_urls():
    resolver = IconifyResolver("https://api.iconify.design/")
    assert resolver.url_for("mdi:home") == "https://api.iconify.design/mdi/home.svg"


# --------------------------------------------------
# Session
# --------------------------------------------------

def test_session_activation_and_selection():
    registry = ProviderRegistry()
    registry.register(glyph_spec("emoji", "Emoji"))
    registry.register(glyph_spec("more", "More", raw={"rocket": "🚀"}))
    session = CatalogSession(registry)

    async def run():
        await session.activate("emoji")
        session.select("star")
        # re-activating the same provider keeps the selection
        await session.activate("emoji")
        assert session.selection.current().name == "star"

        await session.activate("more")
        assert session.selection.current() is None
        assert [d.name for d in session.descriptors] == ["rocket"]
        with pytest.raises(IconNotFoundError):
            session.find("star")

    asyncio.run(run())


def test_session_prefetches_async_provider():
    registry = ProviderRegistry()
    resolver = FakeResolver(failing={"gone"})
    registry.register(remote_spec("remote", ["home", "star", "gone"], resolver))
    session = CatalogSession(registry)

    async def run():
        await session.activate("remote")
        await session.wait_for_assets()
        return session.asset_counts()

    assert asyncio.run(run()) == {"pending": 0, "resolved": 2, "failed": 1}
    assert sorted(resolver.calls) == ["remote:gone", "remote:home", "remote:star"]


def test_session_unknown_provider():
    session = CatalogSession(ProviderRegistry())
    with pytest.raises(UnknownProviderError):
        asyncio.run(session.activate("missing"))
    assert session.active_key is None
    assert session.descriptors == []
