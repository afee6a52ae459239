import asyncio

from conftest import FakeResolver, async_icon
from iconatlas.loader import AssetCache, AssetState, AsyncAssetLoader
from iconatlas.render import RenderDispatcher, render_cell
from iconatlas.resolvers import ResolvedAsset


def test_cache_transitions():
    cache = AssetCache("remote")
    key = ("remote", "home")
    assert cache.state(key) is AssetState.UNLOADED
    assert cache.mark_pending(key)
    assert not cache.mark_pending(key)
    assert cache.settle(key, asset=ResolvedAsset(url="https://example.com/home.svg"))
    assert cache.state(key) is AssetState.RESOLVED
    # settled entries are terminal
    assert not cache.settle(key, error="late failure")
    assert cache.state(key) is AssetState.RESOLVED


def test_cache_ignores_other_providers():
    cache = AssetCache("remote")
    assert not cache.mark_pending(("other", "home"))
    assert len(cache) == 0


def test_failing_resolver_leaves_empty_cell_not_placeholder():
    icons = [async_icon("home"), async_icon("star"), async_icon("broken")]
    resolver = FakeResolver(failing={"broken"})
    loader = AsyncAssetLoader()

    async def run():
        activation = loader.activate("remote")
        await loader.prefetch(activation, icons, resolver)

    asyncio.run(run())

    cache = loader.cache
    assert cache.counts() == {"pending": 0, "resolved": 2, "failed": 1}

    dispatcher = RenderDispatcher(cache)
    drawables = [dispatcher.render(d, 24, "#000") for d in icons]
    assert [d is not None and not d.placeholder for d in drawables] == [True, True, False]
    assert drawables[2] is None
    assert "icon-empty" in render_cell(dispatcher, icons[2], 24, "#000")


def test_each_key_resolved_once_per_activation():
    icons = [async_icon("home"), async_icon("star")]
    resolver = FakeResolver()
    loader = AsyncAssetLoader()

    async def run():
        activation = loader.activate("remote")
        await loader.prefetch(activation, icons, resolver)
        await loader.prefetch(activation, icons + icons, resolver)
        # same provider again: no new activation, no new resolutions
        again = loader.activate("remote")
        assert again is activation
        await loader.prefetch(again, icons, resolver)

    asyncio.run(run())
    assert sorted(resolver.calls) == ["remote:home", "remote:star"]
    assert loader.resolutions_issued == 2


def test_switch_provider_drops_in_flight_results():
    a_icons = [async_icon("one", "a"), async_icon("two", "a")]
    b_icons = [async_icon("uno", "b")]

    async def run():
        gate = asyncio.Event()
        slow = FakeResolver(gate=gate)
        loader = AsyncAssetLoader()

        a = loader.activate("a")
        a_task = loader.start(a, a_icons, slow)
        await asyncio.sleep(0)
        assert a.cache.counts()["pending"] == 2

        b = loader.activate("b")
        await loader.prefetch(b, b_icons, FakeResolver())

        gate.set()
        await a_task

        assert loader.cache is b.cache
        assert len(b.cache) == 1
        assert b.cache.state(("b", "uno")) is AssetState.RESOLVED
        assert b.cache.state(("a", "one")) is AssetState.UNLOADED
        # A's results were dropped, not written back to A's discarded cache either
        assert a.cache.counts()["pending"] == 2

    asyncio.run(run())


def test_render_before_resolution_is_placeholder():
    icon = async_icon("home")
    loader = AsyncAssetLoader()
    loader.activate("remote")
    drawable = RenderDispatcher(loader.cache).render(icon, 32, "red")
    assert drawable.placeholder
    assert "32px" in str(drawable)


def test_resolver_returning_wrong_type_fails():
    icon = async_icon("home")
    loader = AsyncAssetLoader()

    async def bad_resolver(handle):
        return "<svg/>"

    async def run():
        activation = loader.activate("remote")
        await loader.prefetch(activation, [icon], bad_resolver)

    asyncio.run(run())
    entry = loader.cache.get(icon.key)
    assert entry.state is AssetState.FAILED
    assert "resolver returned str" in entry.error
