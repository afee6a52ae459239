"""
Render dispatcher: descriptor + size + color -> inline markup.

Dispatch is a switch over `kind` only, never over provider identity.
Anything that cannot be drawn comes back as None ("no drawable") instead of
raising, so a single bad entry only ever costs one empty grid cell.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from markupsafe import Markup, escape

from .descriptors import (
    AsyncRef,
    ComponentRef,
    CssClassGlyph,
    IconDescriptor,
    IconKind,
    PathData,
    UnicodeGlyph,
    validate_payload,
)
from .loader import AssetCache, AssetState

logger = logging.getLogger(__name__)

MIN_SIZE = 1
MAX_SIZE = 1024

_SVG_OPEN_RE = re.compile(r"<svg\b[^>]*>", re.I)
_SIZE_ATTR_RE = re.compile(r"\s(?:width|height|class|style)\s*=\s*(\"[^\"]*\"|'[^']*')", re.I)


class Drawable:
    """Rendered markup. `placeholder` marks the neutral loading skeleton."""

    __slots__ = ("markup", "kind", "placeholder")

    def __init__(self, markup: str, kind: Optional[IconKind] = None, placeholder: bool = False):
        self.markup = Markup(markup)
        self.kind = kind
        self.placeholder = placeholder

    def __html__(self) -> str:
        return str(self.markup)

    def __str__(self) -> str:
        return str(self.markup)

    def __repr__(self) -> str:
        label = "placeholder" if self.placeholder else (self.kind.value if self.kind else "markup")
        return f"Drawable({label})"


def _valid_size(size) -> bool:
    return isinstance(size, int) and not isinstance(size, bool) and MIN_SIZE <= size <= MAX_SIZE


def placeholder(size: int) -> Drawable:
    """Neutral loading skeleton with the same footprint as the icon."""
    size = size if _valid_size(size) else 24
    return Drawable(
        f'<span class="icon-placeholder" aria-busy="true" '
        f'style="display: inline-block; width: {size}px; height: {size}px"></span>',
        placeholder=True,
    )


def empty_cell(size: int) -> Markup:
    size = size if _valid_size(size) else 24
    return Markup(
        f'<span class="icon-empty" aria-hidden="true" '
        f'style="display: inline-block; width: {size}px; height: {size}px"></span>'
    )


def resize_svg(svg: str, size: int, color: str, css_class: str = "icon") -> str:
    """Force width/height/color on the root <svg> element of foreign markup."""
    m = _SVG_OPEN_RE.search(svg)
    if m is None:
        raise ValueError("markup has no <svg> element")
    tag = _SIZE_ATTR_RE.sub("", m.group(0))
    attrs = (
        f' class="{escape(css_class)}" width="{size}" height="{size}" '
        f'style="color: {escape(color)}"'
    )
    tag = tag[:4] + attrs + tag[4:]
    return svg[:m.start()] + tag + svg[m.end():]


def build_path_svg(payload: PathData, size: int, color: str) -> str:
    """Inline SVG for path data; fixed brand colors win over the requested color."""
    paint = escape(payload.fixed_color or color)
    if payload.stroked:
        paint_attrs = (
            f'fill="none" stroke="{paint}" stroke-width="2" '
            'stroke-linecap="round" stroke-linejoin="round"'
        )
    else:
        paint_attrs = f'fill="{paint}"'
    rule = f' fill-rule="{payload.fill_rule}"' if payload.fill_rule else ""
    paths = "".join(f'<path d="{escape(d)}"{rule}/>' for d in payload.paths)
    return (
        f'<svg class="icon icon-path" aria-hidden="true" width="{size}" height="{size}" '
        f'viewBox="{escape(payload.view_box)}" {paint_attrs}>'
        f"{paths}"
        "</svg>"
    )


class RenderDispatcher:
    """Draws descriptors. `assets` is the active provider's async cache, if any."""

    def __init__(self, assets: Optional[AssetCache] = None):
        self.assets = assets

    def render(self, descriptor: IconDescriptor, size: int, color: str) -> Optional[Drawable]:
        if not _valid_size(size) or not isinstance(color, str):
            return None
        kind = getattr(descriptor, "kind", None)
        payload = getattr(descriptor, "payload", None)
        problem = validate_payload(kind, payload)
        if problem:
            logger.debug(f"Not drawing {getattr(descriptor, 'name', '?')}: {problem}")
            return None

        match kind:
            case IconKind.COMPONENT_REF:
                return self._render_component(payload, size, color)
            case IconKind.PATH_DATA:
                return Drawable(build_path_svg(payload, size, color), kind)
            case IconKind.CSS_CLASS_GLYPH:
                return self._render_css(payload, size, color)
            case IconKind.UNICODE_GLYPH:
                return self._render_glyph(descriptor.name, payload, size, color)
            case IconKind.ASYNC_REF:
                return self._render_async(descriptor, payload, size, color)
        return None

    def _render_component(self, payload: ComponentRef, size: int, color: str) -> Optional[Drawable]:
        try:
            markup = payload.component(size=size, color=color)
        except Exception as e:
            # Third-party component code; a failure only empties this cell.
            logger.debug(f"Component {payload.export_name} failed: {e}")
            return None
        if not isinstance(markup, str) or not markup.strip():
            return None
        return Drawable(markup, IconKind.COMPONENT_REF)

    def _render_css(self, payload: CssClassGlyph, size: int, color: str) -> Drawable:
        return Drawable(
            f'<i class="{escape(payload.class_name)}" aria-hidden="true" '
            f'style="font-size: {size}px; color: {escape(color)}; display: inline-block; line-height: 1"></i>',
            IconKind.CSS_CLASS_GLYPH,
        )

    def _render_glyph(self, name: str, payload: UnicodeGlyph, size: int, color: str) -> Drawable:
        font = f"font-family: {escape(payload.font_family)}; " if payload.font_family else ""
        return Drawable(
            f'<span class="icon-glyph" role="img" aria-label="{escape(name)}" '
            f'style="{font}font-size: {size}px; line-height: 1; color: {escape(color)}">'
            f"{escape(payload.text)}</span>",
            IconKind.UNICODE_GLYPH,
        )

    def _render_async(self, descriptor: IconDescriptor, payload: AsyncRef, size: int, color: str) -> Optional[Drawable]:
        if self.assets is None or self.assets.provider != descriptor.provider:
            return placeholder(size)
        entry = self.assets.get(descriptor.key)
        if entry.state is AssetState.FAILED:
            return None
        if entry.state is not AssetState.RESOLVED or entry.asset is None:
            return placeholder(size)

        asset = entry.asset
        if asset.url:
            return Drawable(
                f'<img class="icon icon-async" src="{escape(asset.url)}" alt="{escape(descriptor.name)}" '
                f'width="{size}" height="{size}" loading="lazy">',
                IconKind.ASYNC_REF,
            )
        try:
            return Drawable(resize_svg(asset.svg, size, color, "icon icon-async"), IconKind.ASYNC_REF)
        except ValueError:
            return None


def render_cell(dispatcher: RenderDispatcher, descriptor: IconDescriptor, size: int, color: str) -> Markup:
    """Grid cell markup: the drawable, or a blank cell when there is none."""
    drawable = dispatcher.render(descriptor, size, color)
    if drawable is None:
        return empty_cell(size)
    return drawable.markup
