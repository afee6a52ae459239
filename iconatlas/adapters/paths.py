"""
Adapter for providers that only ship vector path strings.

Accepted shapes:
  - {"name": "M3 9h18"}                           single path
  - {"name": ["M3 9h18", "M9 21V9"]}             several paths
  - {"siGithub": {"title": "GitHub", "hex": "181717", "path": "..."}}
  - [{"title": "GitHub", "slug": "github", "hex": "181717", "path": "..."}]
  - {"icons": [...]}                              Simple Icons data file

Brand records carry a `hex` color that the renderer must keep.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, Optional

from ..descriptors import IconDescriptor, IconKind, PathData
from .base import ProviderAdapter, export_items

# Brand titles carry punctuation ("AT&T", ".ENV"); only blank or control text is rejected.
_NAME_RE = re.compile(r"^[^\x00-\x1f\x7f\s](?:[^\x00-\x1f\x7f]*[^\x00-\x1f\x7f\s])?$")
_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{3})$")


def _as_paths(value: Any) -> Optional[tuple[str, ...]]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)) and value and all(isinstance(v, str) for v in value):
        return tuple(value)
    return None


class PathDataAdapter(ProviderAdapter):
    kind = IconKind.PATH_DATA

    def __init__(
        self,
        provider: str,
        view_box: str = "0 0 24 24",
        stroked: bool = False,
        brand_colors: bool = True,
        export_prefix: Optional[str] = None,
    ):
        super().__init__(provider)
        self.view_box = view_box
        self.stroked = stroked
        self.brand_colors = brand_colors
        # Simple Icons style modules prefix every icon export ("siGithub").
        self.export_prefix = export_prefix

    def entries(self, raw: Any) -> Iterable[tuple[str, Any]]:
        if isinstance(raw, Mapping) and isinstance(raw.get("icons"), list):
            raw = raw["icons"]
        if isinstance(raw, list):
            for record in raw:
                if isinstance(record, Mapping):
                    yield str(record.get("slug") or record.get("title") or ""), record
            return
        for name, value in export_items(raw):
            if self.export_prefix and not name.startswith(self.export_prefix):
                continue
            yield name, value

    def classify(self, name: str, value: Any) -> Optional[IconDescriptor]:
        paths = _as_paths(value)
        fixed_color = None
        view_box = self.view_box
        fill_rule = None

        if paths is None and isinstance(value, Mapping):
            paths = _as_paths(value.get("paths", value.get("path")))
            title = value.get("title")
            if isinstance(title, str) and _NAME_RE.match(title):
                name = title
            view_box = str(value.get("viewBox") or view_box)
            fill_rule = value.get("fillRule")
            hex_value = value.get("hex")
            if self.brand_colors and isinstance(hex_value, str):
                m = _HEX_RE.match(hex_value)
                if not m:
                    return None
                fixed_color = "#" + m.group(1).lower()

        if paths is None or not _NAME_RE.match(name):
            return None

        payload = PathData(
            paths=paths,
            view_box=view_box,
            fill_rule=fill_rule,
            fixed_color=fixed_color,
            stroked=self.stroked,
        )
        return self.describe(name, payload)
