"""
Selection & export.

Selection holds at most one descriptor and never touches the catalog or the
asset cache. Export helpers are pure: they build text (a usage snippet or a
standalone SVG document) and leave clipboard/download to the UI.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote

from .config.settings import DEFAULT_ICON_SIZE
from .descriptors import AsyncRef, ComponentRef, CssClassGlyph, IconDescriptor, PathData, UnicodeGlyph
from .loader import AssetCache, AssetState
from .render import build_path_svg, resize_svg

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"


class Selection:
    """The currently chosen icon (UI-owned)."""

    def __init__(self):
        self._current: Optional[IconDescriptor] = None

    def select(self, descriptor: IconDescriptor) -> IconDescriptor:
        self._current = descriptor
        return descriptor

    def current(self) -> Optional[IconDescriptor]:
        return self._current

    def clear(self) -> None:
        self._current = None


# ==================================================
# SNIPPETS
# ==================================================


def _component_snippet(payload: ComponentRef, color: str, size: int) -> str:
    module = payload.module or "icons"
    name = payload.export_name
    return (
        f'import {{ {name} }} from "{module}";\n'
        "\n"
        "function Demo() {\n"
        f'  return <{name} size={{{size}}} color="{color}" />;\n'
        "}\n"
        "\n"
        "export default Demo;"
    )


def _async_snippet(descriptor: IconDescriptor, payload: AsyncRef, color: str, size: int) -> str:
    if isinstance(payload.handle, str) and ":" in payload.handle:
        return (
            'import { Icon } from "@iconify/react";\n'
            "\n"
            f'<Icon icon="{payload.handle}" width={{{size}}} height={{{size}}} color="{color}" />'
        )
    src = f"/api/icons/{quote(descriptor.provider)}/{quote(descriptor.name)}.svg"
    return f'<img src="{src}" alt="{descriptor.name}" width="{size}" height="{size}" />'


def export_snippet(descriptor: IconDescriptor, color: str, size: int = DEFAULT_ICON_SIZE) -> str:
    """Short usage example for one icon. Pure string templating."""
    payload = descriptor.payload
    header_js = f"// {descriptor.provider} / {descriptor.name}\n"
    header_html = f"<!-- {descriptor.provider} / {descriptor.name} -->\n"

    if isinstance(payload, ComponentRef):
        return header_js + _component_snippet(payload, color, size)
    if isinstance(payload, AsyncRef):
        return header_js + _async_snippet(descriptor, payload, color, size)
    if isinstance(payload, PathData):
        return header_html + build_path_svg(payload, size, color)
    if isinstance(payload, CssClassGlyph):
        return header_html + (
            f'<i class="{payload.class_name}" style="font-size: {size}px; color: {color}"></i>'
        )
    if isinstance(payload, UnicodeGlyph):
        return header_html + f'<span style="font-size: {size}px; color: {color}">{payload.text}</span>'
    return header_html


# ==================================================
# SVG EXPORT
# ==================================================


def _with_namespace(svg: str) -> str:
    head, sep, rest = svg.partition(">")
    if "xmlns=" in head:
        return svg
    return head.replace("<svg", f'<svg xmlns="{SVG_NS}"', 1) + sep + rest


def export_svg(
    descriptor: IconDescriptor,
    size: int,
    color: str,
    assets: Optional[AssetCache] = None,
) -> Optional[str]:
    """
    Standalone SVG document for the download / "copy SVG" actions.
    Returns None for kinds with no vector form (CSS fonts, glyphs, image URLs)
    and for async icons that have not resolved.
    """
    payload = descriptor.payload
    svg: Optional[str] = None

    if isinstance(payload, PathData):
        svg = build_path_svg(payload, size, color)
    elif isinstance(payload, ComponentRef):
        try:
            markup = payload.component(size=size, color=color)
        except Exception as e:
            logger.warning(f"Export of {descriptor.provider}/{descriptor.name} failed: {e}")
            return None
        if isinstance(markup, str) and markup.lstrip().lower().startswith("<svg"):
            svg = markup
    elif isinstance(payload, AsyncRef) and assets is not None:
        entry = assets.get(descriptor.key)
        if entry.state is AssetState.RESOLVED and entry.asset and entry.asset.svg:
            svg = resize_svg(entry.asset.svg, size, color)

    if svg is None:
        return None
    return _with_namespace(svg)
