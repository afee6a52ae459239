"""
Icon descriptors: the normalized unit the whole catalog works with.

Every provider adapter turns its native exports into IconDescriptor values.
A descriptor carries a `kind` (how to draw it) and a payload whose shape is
fixed by that kind. Payloads are validated once, when the descriptor is built,
so the render layer only ever switches on `kind`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Union

_VIEW_BOX_RE = re.compile(r"^\s*-?[\d.]+(?:[\s,]+-?[\d.]+){3}\s*$")
_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_CSS_CLASS_RE = re.compile(r"^-?[_a-zA-Z][_a-zA-Z0-9-]*$")

# Longest emoji ZWJ sequences stay well under this many code points.
MAX_GLYPH_CODEPOINTS = 16


class DescriptorError(ValueError):
    """Raised when a payload is not structurally valid for its kind."""


class IconKind(str, Enum):
    COMPONENT_REF = "component_ref"
    PATH_DATA = "path_data"
    CSS_CLASS_GLYPH = "css_class_glyph"
    UNICODE_GLYPH = "unicode_glyph"
    ASYNC_REF = "async_ref"


# ==================================================
# PAYLOADS
# ==================================================


@dataclass(frozen=True)
class ComponentRef:
    """A drawable unit called with (size, color) that returns markup."""

    component: Callable[..., str]
    export_name: str
    module: str = ""


@dataclass(frozen=True)
class PathData:
    """One or more SVG path strings drawn inside a shared viewBox."""

    paths: tuple[str, ...]
    view_box: str = "0 0 24 24"
    fill_rule: Optional[str] = None
    # Brand icons mandate their own color; requested colors are ignored.
    fixed_color: Optional[str] = None
    stroked: bool = False


@dataclass(frozen=True)
class CssClassGlyph:
    class_name: str
    stylesheet: Optional[str] = None


@dataclass(frozen=True)
class UnicodeGlyph:
    text: str
    font_family: Optional[str] = None


@dataclass(frozen=True)
class AsyncRef:
    """Opaque handle; only the provider's resolver knows what it means."""

    handle: Any


Payload = Union[ComponentRef, PathData, CssClassGlyph, UnicodeGlyph, AsyncRef]

PAYLOAD_TYPES: dict[IconKind, type] = {
    IconKind.COMPONENT_REF: ComponentRef,
    IconKind.PATH_DATA: PathData,
    IconKind.CSS_CLASS_GLYPH: CssClassGlyph,
    IconKind.UNICODE_GLYPH: UnicodeGlyph,
    IconKind.ASYNC_REF: AsyncRef,
}


# ==================================================
# VALIDATION
# ==================================================


def _component_problem(payload: ComponentRef) -> Optional[str]:
    if not callable(payload.component):
        return "component is not callable"
    if not isinstance(payload.export_name, str) or not payload.export_name:
        return "component has no export name"
    return None


def _path_problem(payload: PathData) -> Optional[str]:
    if not isinstance(payload.paths, tuple) or not payload.paths:
        return "no path strings"
    for d in payload.paths:
        if not isinstance(d, str) or not d.strip():
            return "empty or non-string path"
    if not isinstance(payload.view_box, str) or not _VIEW_BOX_RE.match(payload.view_box):
        return f"bad viewBox {payload.view_box!r}"
    if payload.fill_rule not in (None, "nonzero", "evenodd"):
        return f"bad fill rule {payload.fill_rule!r}"
    if payload.fixed_color is not None and (
        not isinstance(payload.fixed_color, str) or not _HEX_COLOR_RE.match(payload.fixed_color)
    ):
        return f"bad fixed color {payload.fixed_color!r}"
    return None


def _css_problem(payload: CssClassGlyph) -> Optional[str]:
    if not isinstance(payload.class_name, str):
        return "class name is not a string"
    tokens = payload.class_name.split()
    if not tokens:
        return "empty class name"
    for token in tokens:
        if not _CSS_CLASS_RE.match(token):
            return f"bad css class {token!r}"
    return None


def _glyph_problem(payload: UnicodeGlyph) -> Optional[str]:
    text = payload.text
    if not isinstance(text, str) or not text.strip():
        return "empty glyph"
    if len(text) > MAX_GLYPH_CODEPOINTS:
        return f"glyph too long ({len(text)} code points)"
    if any(ch.isspace() for ch in text):
        return "glyph contains whitespace"
    return None


def _async_problem(payload: AsyncRef) -> Optional[str]:
    handle = payload.handle
    if handle is None:
        return "missing handle"
    if isinstance(handle, str) and not handle.strip():
        return "empty handle"
    return None


_CHECKS: dict[IconKind, Callable[[Any], Optional[str]]] = {
    IconKind.COMPONENT_REF: _component_problem,
    IconKind.PATH_DATA: _path_problem,
    IconKind.CSS_CLASS_GLYPH: _css_problem,
    IconKind.UNICODE_GLYPH: _glyph_problem,
    IconKind.ASYNC_REF: _async_problem,
}


def validate_payload(kind: Any, payload: Any) -> Optional[str]:
    """Return a description of what is wrong with `payload`, or None if it is usable."""
    if not isinstance(kind, IconKind):
        return f"unknown kind {kind!r}"
    expected = PAYLOAD_TYPES[kind]
    if not isinstance(payload, expected):
        return f"{kind.value} expects {expected.__name__}, got {type(payload).__name__}"
    return _CHECKS[kind](payload)


# ==================================================
# DESCRIPTOR
# ==================================================


@dataclass(frozen=True)
class IconDescriptor:
    provider: str
    name: str
    kind: IconKind
    payload: Payload

    def __post_init__(self) -> None:
        if not isinstance(self.provider, str) or not self.provider:
            raise DescriptorError("descriptor needs a provider key")
        if not isinstance(self.name, str) or not self.name:
            raise DescriptorError(f"descriptor in {self.provider} needs a name")
        problem = validate_payload(self.kind, self.payload)
        if problem:
            raise DescriptorError(f"{self.provider}/{self.name}: {problem}")

    @property
    def key(self) -> tuple[str, str]:
        return (self.provider, self.name)

    def to_dict(self) -> dict:
        """Convert to dict for API responses (payload internals stay private)."""
        data = {
            "provider": self.provider,
            "name": self.name,
            "kind": self.kind.value,
        }
        payload = self.payload
        if isinstance(payload, PathData) and payload.fixed_color:
            data["fixed_color"] = payload.fixed_color
        elif isinstance(payload, CssClassGlyph):
            data["class_name"] = payload.class_name
        elif isinstance(payload, UnicodeGlyph):
            data["text"] = payload.text
        elif isinstance(payload, AsyncRef) and isinstance(payload.handle, str):
            data["handle"] = payload.handle
        return data
