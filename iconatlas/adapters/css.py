"""
Adapter for icon fonts and CSS-class icon sets.

Two native shapes:
  - stylesheet text, where each icon is a `.pi-check:before { ... }` rule
    (PrimeIcons style). The base class is prepended: "pi pi-check".
  - a plain list of class names (Foundation / Blueprint style).
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Optional

from ..descriptors import CssClassGlyph, IconDescriptor, IconKind
from .base import ProviderAdapter

_ICON_NAME_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


class CssGlyphAdapter(ProviderAdapter):
    kind = IconKind.CSS_CLASS_GLYPH

    def __init__(self, provider: str, prefix: str, base_class: Optional[str] = None, stylesheet: Optional[str] = None):
        super().__init__(provider)
        self.prefix = prefix
        self.base_class = base_class
        self.stylesheet = stylesheet
        self._rule_re = re.compile(r"\." + re.escape(prefix) + r"-([a-z0-9-]+)::?before")

    def entries(self, raw: Any) -> Iterable[tuple[str, Any]]:
        if isinstance(raw, str):
            for m in self._rule_re.finditer(raw):
                yield m.group(1), m.group(0)
            return
        if isinstance(raw, (list, tuple, set, frozenset)):
            items = sorted(raw, key=str) if isinstance(raw, (set, frozenset)) else raw
            for item in items:
                if isinstance(item, str):
                    yield self._strip_prefix(item), item

    def _strip_prefix(self, class_name: str) -> str:
        token = class_name.split()[-1] if class_name.split() else ""
        marker = self.prefix + "-"
        return token[len(marker):] if token.startswith(marker) else token

    def classify(self, name: str, value: Any) -> Optional[IconDescriptor]:
        if not _ICON_NAME_RE.match(name):
            return None
        class_name = f"{self.prefix}-{name}"
        if self.base_class:
            class_name = f"{self.base_class} {class_name}"
        return self.describe(name, CssClassGlyph(class_name=class_name, stylesheet=self.stylesheet))
