"""
Adapter for emoji and other Unicode glyph sets.

Accepted shapes:
  - [{"name": "grinning face", "char": "😀"}, ...]          emoji.json
  - {"emojis": {"grinning": {"name": "Grinning Face",
                              "skins": [{"native": "😀"}]}}}  emoji-mart data
  - {"grinning face": "😀", ...}
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from ..descriptors import IconDescriptor, IconKind, UnicodeGlyph
from .base import ProviderAdapter, export_items


class UnicodeGlyphAdapter(ProviderAdapter):
    kind = IconKind.UNICODE_GLYPH

    def __init__(self, provider: str, font_family: Optional[str] = None):
        super().__init__(provider)
        self.font_family = font_family

    def entries(self, raw: Any) -> Iterable[tuple[str, Any]]:
        if isinstance(raw, list):
            for record in raw:
                if isinstance(record, Mapping):
                    yield str(record.get("name") or ""), record.get("char")
            return
        if isinstance(raw, Mapping) and isinstance(raw.get("emojis"), Mapping):
            for emoji_id, record in raw["emojis"].items():
                yield str(emoji_id), _first_native(record)
            return
        yield from export_items(raw)

    def classify(self, name: str, value: Any) -> Optional[IconDescriptor]:
        name = name.strip()
        if not name or not isinstance(value, str):
            return None
        return self.describe(name, UnicodeGlyph(text=value, font_family=self.font_family))


def _first_native(record: Any) -> Optional[str]:
    if not isinstance(record, Mapping):
        return None
    skins = record.get("skins")
    if isinstance(skins, list) and skins and isinstance(skins[0], Mapping):
        return skins[0].get("native")
    return None
