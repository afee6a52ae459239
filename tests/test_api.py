"""
In-process API tests against iconatlas.main.app.
Startup opens the bundled registry; tests that need async assets swap in a
session built around a fake resolver so nothing touches the network.
"""

import pytest
from fastapi.testclient import TestClient

from conftest import FakeResolver
from iconatlas.adapters import IconifyCollectionAdapter
from iconatlas.main import app
from iconatlas.providers import ProviderInfo, ProviderRegistry, ProviderSpec, build_default_registry
from iconatlas.session import CatalogSession
from iconatlas.write_safety import favorite_limiter


@pytest.fixture
def client():
    favorite_limiter.reset()
    with TestClient(app) as c:
        yield c


@pytest.fixture
def remote_client(client):
    registry = build_default_registry(collections_dir=None)
    registry.register(ProviderSpec(
        ProviderInfo("remote", "Remote Test Set", "Remote"),
        IconifyCollectionAdapter("remote"),
        lambda: {"prefix": "remote", "icons": {"home": {}, "star": {}, "gone": {}}},
        FakeResolver(failing={"gone"}),
    ))
    app.state.catalog_session = CatalogSession(registry)
    return client


# --------------------------------------------------
# Pages
# --------------------------------------------------

def test_index_page_renders_default_provider(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "Icon Atlas" in r.text
    assert 'data-provider="lucide"' in r.text
    assert "icon-lucide" in r.text
    assert r.template.name == "index.html"
    assert r.context["request"].url.path == "/"


def test_grid_partial_search(client):
    r = client.get("/grid", params={"q": "chevron"})
    assert r.status_code == 200
    assert r.text.lstrip().startswith('<section id="results"')
    assert 'data-name="ChevronDown"' in r.text
    assert 'data-name="Home"' not in r.text
    assert r.template.name == "results.html"
    assert r.context["query"] == "chevron"


def test_grid_rejects_bad_sort(client):
    r = client.get("/grid", params={"sort": "sideways"})
    assert r.status_code == 400
    assert "sort" in r.json()["error"]


# --------------------------------------------------
# Providers
# --------------------------------------------------

def test_list_providers(client):
    data = client.get("/api/providers").json()
    keys = [p["key"] for p in data["providers"]]
    assert {"lucide", "shapes", "arrows", "primeicons", "emoji", "mdi", "zondicons"} <= set(keys)
    assert data["active"] == "lucide"
    assert data["categories"][0] == "All"

    fonts = client.get("/api/providers", params={"category": "Font"}).json()["providers"]
    assert [p["key"] for p in fonts] == ["primeicons"]


def test_provider_icons_search_and_paging(client):
    r = client.get("/api/providers/emoji/icons", params={"q": "FACE", "page_size": 1, "page": 9})
    data = r.json()
    assert r.status_code == 200
    assert data["page"] == 1
    assert data["total_results"] == 4
    assert data["total_pages"] == 4
    assert len(data["icons"]) == 1


def test_unknown_provider_is_404(client):
    r = client.get("/api/providers/nope/icons")
    assert r.status_code == 404
    assert r.json() == {"error": "Unknown provider: nope"}
    assert client.post("/api/providers/nope/activate").status_code == 404


def test_activate_switches_and_clears_selection(client):
    assert client.post("/api/select", data={"name": "Home"}).status_code == 200
    assert client.get("/api/selection").json()["selected"]["name"] == "Home"

    r = client.post("/api/providers/primeicons/activate")
    assert r.json()["active"] == "primeicons"
    assert client.get("/api/selection").json()["selected"] is None
    assert client.get("/api/suggestions", params={"q": "map"}).json() == {"suggestions": ["map-marker"]}


def test_async_provider_assets_settle(remote_client):
    r = remote_client.post("/api/providers/remote/activate", params={"wait": "true"})
    assert r.status_code == 200
    assert r.json()["assets"] == {"pending": 0, "resolved": 2, "failed": 1}
    assert remote_client.get("/api/assets").json() == {
        "provider": "remote", "pending": 0, "resolved": 2, "failed": 1,
    }

    grid = remote_client.get("/grid").text
    assert grid.count("icon-async") == 2
    assert grid.count("icon-empty") == 1
    assert "icon-placeholder" not in grid


# --------------------------------------------------
# Export
# --------------------------------------------------

def test_snippet_uses_palette_or_color(client):
    r = client.get("/api/icons/lucide/Home/snippet", params={"palette": "red", "shade": 2})
    data = r.json()
    assert data["color"] == "#dc2626"
    assert '<Home size={48} color="#dc2626" />' in data["snippet"]

    r = client.get("/api/icons/lucide/Home/snippet", params={"color": "tomato", "size": 16})
    assert r.json()["snippet"].count('color="tomato"') == 1


def test_snippet_validation(client):
    assert client.get("/api/icons/lucide/Home/snippet", params={"color": "red;x"}).status_code == 400
    assert client.get("/api/icons/lucide/Home/snippet", params={"size": 0}).status_code == 400
    assert client.get("/api/icons/lucide/Nope/snippet").status_code == 404


def test_svg_download(client):
    r = client.get("/api/icons/shapes/Ring.svg", params={"size": 64})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("image/svg+xml")
    assert 'filename="Ring.svg"' in r.headers["content-disposition"]
    assert r.text.startswith('<svg xmlns="http://www.w3.org/2000/svg"')
    assert 'fill="#14b8a6"' in r.text
    assert 'fill-rule="evenodd"' in r.text


def test_svg_not_available_for_css_glyphs(client):
    r = client.get("/api/icons/primeicons/check.svg")
    assert r.status_code == 404
    assert "No SVG available" in r.json()["error"]


def test_png_download_points_at_svg(client):
    r = client.get("/api/icons/shapes/Ring.png")
    assert r.status_code == 501
    assert r.json()["svg"] == "/api/icons/shapes/Ring.svg"
    assert client.get("/api/icons/shapes/Nope.png").status_code == 404


# --------------------------------------------------
# Favorites
# --------------------------------------------------

def test_favorites_round_trip(client):
    r = client.post("/api/favorites", data={"provider": "lucide", "name": "Star", "color": "#eab308", "size": "32"})
    assert r.status_code == 201
    assert r.json()["favorite"]["color"] == "#eab308"

    again = client.post("/api/favorites", data={"provider": "lucide", "name": "Star"})
    assert again.status_code == 200
    assert again.json()["status"] == "exists"
    assert client.get("/api/icons/lucide/Star/snippet").json()["favorite"] is True

    listed = client.get("/api/favorites", params={"provider": "lucide"}).json()["favorites"]
    assert [(f["provider"], f["name"]) for f in listed] == [("lucide", "Star")]

    assert client.delete("/api/favorites/lucide/Star").status_code == 200
    assert client.delete("/api/favorites/lucide/Star").status_code == 404
    assert client.get("/api/favorites").json()["favorites"] == []


def test_favorite_must_exist(client):
    r = client.post("/api/favorites", data={"provider": "lucide", "name": "NotAnIcon"})
    assert r.status_code == 404
    r = client.post("/api/favorites", data={"provider": "lucide", "name": "Star", "size": "5000"})
    assert r.status_code == 400


def test_favorites_rate_limited(client, monkeypatch):
    monkeypatch.setattr(favorite_limiter, "max_requests", 2)
    for _ in range(2):
        client.post("/api/favorites", data={"provider": "emoji", "name": "fire"})
    r = client.post("/api/favorites", data={"provider": "emoji", "name": "fire"})
    assert r.status_code == 429
    favorite_limiter.reset()
    assert client.delete("/api/favorites/emoji/fire").status_code == 200


def test_palettes(client):
    data = client.get("/api/palettes").json()
    assert data["default"] == "blue"
    assert data["palettes"]["red"][0] == "#ef4444"
