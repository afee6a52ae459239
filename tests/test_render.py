import pytest

from conftest import async_icon, glyph
from iconatlas.descriptors import (
    AsyncRef,
    ComponentRef,
    CssClassGlyph,
    IconDescriptor,
    IconKind,
    PathData,
    UnicodeGlyph,
)
from iconatlas.loader import AssetCache
from iconatlas.providers.builtin import create_lucide_icon
from iconatlas.render import RenderDispatcher, build_path_svg, render_cell, resize_svg
from iconatlas.resolvers import ResolvedAsset


class Corrupted:
    """Looks like a descriptor but skipped validation (e.g. mutated after build)."""

    def __init__(self, kind, payload, name="corrupt", provider="test"):
        self.kind = kind
        self.payload = payload
        self.name = name
        self.provider = provider


def test_component_gets_size_and_color():
    d = IconDescriptor("lucide", "Check", IconKind.COMPONENT_REF,
                       ComponentRef(create_lucide_icon('<path d="M20 6 9 17l-5-5"/>'), "Check"))
    markup = str(RenderDispatcher().render(d, 32, "#ef4444"))
    assert 'width="32"' in markup
    assert 'stroke="#ef4444"' in markup


def test_component_that_raises_has_no_drawable():
    def explode(**_props):
        raise RuntimeError("bad upstream component")

    d = IconDescriptor("lucide", "Boom", IconKind.COMPONENT_REF, ComponentRef(explode, "Boom"))
    assert RenderDispatcher().render(d, 24, "red") is None


def test_fixed_brand_color_wins():
    payload = PathData(paths=("M0 0h24v24H0z",), fixed_color="#181717")
    svg = build_path_svg(payload, 24, "#ff0000")
    assert 'fill="#181717"' in svg
    assert "#ff0000" not in svg


def test_stroked_path_and_fill_rule():
    svg = build_path_svg(PathData(paths=("M1 1", "M2 2"), stroked=True, fill_rule="evenodd"), 16, "blue")
    assert 'fill="none"' in svg and 'stroke="blue"' in svg
    assert svg.count('fill-rule="evenodd"') == 2


def test_css_and_glyph_markup_is_escaped():
    css = IconDescriptor("pi", "check", IconKind.CSS_CLASS_GLYPH, CssClassGlyph("pi pi-check"))
    assert 'class="pi pi-check"' in str(RenderDispatcher().render(css, 20, "red"))

    g = IconDescriptor("emoji", "<b>", IconKind.UNICODE_GLYPH, UnicodeGlyph("🚀"))
    markup = str(RenderDispatcher().render(g, 20, "red"))
    assert "🚀" in markup
    assert 'aria-label="&lt;b&gt;"' in markup


@pytest.mark.parametrize("kind, payload", [
    (IconKind.PATH_DATA, UnicodeGlyph("x")),
    (IconKind.UNICODE_GLYPH, UnicodeGlyph("")),
    (IconKind.CSS_CLASS_GLYPH, CssClassGlyph("")),
    (IconKind.COMPONENT_REF, ComponentRef("not callable", "X")),
    (IconKind.ASYNC_REF, AsyncRef(None)),
    ("mystery", PathData(paths=("M0 0",))),
    (None, None),
])
def test_malformed_descriptor_has_no_drawable(kind, payload):
    assert RenderDispatcher().render(Corrupted(kind, payload), 24, "red") is None


@pytest.mark.parametrize("size", [0, -4, 2000, 24.5, True])
def test_invalid_size_has_no_drawable(size):
    assert RenderDispatcher().render(glyph("star"), size, "red") is None


def test_placeholder_only_for_async_kinds():
    dispatcher = RenderDispatcher(AssetCache("remote"))
    for d in [glyph("star"), IconDescriptor("p", "dot", IconKind.PATH_DATA, PathData(paths=("M0 0",)))]:
        assert not dispatcher.render(d, 24, "red").placeholder
    assert dispatcher.render(async_icon("home"), 24, "red").placeholder


def test_async_without_matching_cache_is_placeholder():
    dispatcher = RenderDispatcher(AssetCache("other"))
    assert dispatcher.render(async_icon("home"), 24, "red").placeholder


def test_resolved_url_renders_img():
    cache = AssetCache("remote")
    icon = async_icon("home")
    cache.mark_pending(icon.key)
    cache.settle(icon.key, asset=ResolvedAsset(url="https://api.iconify.design/zondicons/home.svg"))
    markup = str(RenderDispatcher(cache).render(icon, 40, "red"))
    assert markup.startswith("<img")
    assert 'src="https://api.iconify.design/zondicons/home.svg"' in markup


def test_resize_svg_replaces_root_size_only():
    svg = '<svg width="100" height="100" viewBox="0 0 24 24"><rect width="5" height="5"/></svg>'
    out = resize_svg(svg, 16, "teal")
    assert out.startswith('<svg class="icon" width="16" height="16" style="color: teal"')
    assert 'viewBox="0 0 24 24"' in out
    assert '<rect width="5" height="5"/>' in out


def test_render_cell_for_missing_drawable():
    cell = render_cell(RenderDispatcher(), Corrupted(None, None), 24, "red")
    assert "icon-empty" in cell
    assert "24px" in cell
