"""
Bundled sample providers.
One provider per icon kind so every render path is reachable out of the box;
extend by registering more ProviderSpec objects on the registry.

Reduced Iconify collections (see data_tools/reduce_iconify_collections.py)
found in ICONIFY_COLLECTIONS_DIR are registered as extra async providers.
"""

import json
import logging
from functools import partial
from pathlib import Path
from typing import Any, Callable, Optional

from ..adapters import (
    AsyncModuleAdapter,
    ComponentMapAdapter,
    CssGlyphAdapter,
    IconifyCollectionAdapter,
    PathDataAdapter,
    UnicodeGlyphAdapter,
)
from ..config.settings import ICONIFY_API_BASE, ICONIFY_COLLECTIONS_DIR
from ..resolvers import IconifyResolver, ModuleLoaderResolver
from .registry import ProviderInfo, ProviderRegistry, ProviderSpec

logger = logging.getLogger(__name__)


# ==================================================
# LUCIDE (component map)
# ==================================================

# Lucide icon key -> inner SVG. viewBox 0 0 24 24, stroke 2, round caps.
_LUCIDE_PATHS: dict[str, str] = {
    "layout": '<rect width="18" height="18" x="3" y="3" rx="2" ry="2"/><path d="M3 9h18"/><path d="M9 21V9"/>',
    "globe": '<circle cx="12" cy="12" r="10"/><path d="M12 2a14.5 14.5 0 0 0 0 20 14.5 14.5 0 0 0 0-20"/><path d="M2 12h20"/>',
    "shopping-bag": '<path d="M6 2 3 6v14a2 2 0 0 0 2 2h14a2 2 0 0 0 2-2V6l-3-4Z"/><path d="M3 6h18"/><path d="M16 10a4 4 0 0 1-8 0"/>',
    "square": '<rect width="18" height="18" x="3" y="3" rx="2"/>',
    "move": '<path d="m5 9-3 3 3 3"/><path d="M9 5l3-3 3 3"/><path d="M15 19l-3 3-3-3"/><path d="M19 9l3 3-3 3"/><path d="M2 12h20"/><path d="M12 2v20"/>',
    "ghost": '<path d="M9 10h.01"/><path d="M15 10h.01"/><path d="M12 2a8 8 0 0 0-8 8v12l3-3 2.5 2.5 3-3 3 3 2.5-2.5L20 22V10a8 8 0 0 0-8-8z"/>',
    "video": '<path d="m16 13 5.223 3.482a.5.5 0 0 0 .777-.416V7.87a.5.5 0 0 0-.752-.432L16 10.5"/><path d="M2 8.5v7a1.5 1.5 0 0 0 1.5 1.5h11a1.5 1.5 0 0 0 1.5-1.5v-7A1.5 1.5 0 0 0 14.5 7h-11A1.5 1.5 0 0 0 2 8.5Z"/>',
    "circle": '<circle cx="12" cy="12" r="10"/>',
    "file-text": '<path d="M15 2H6a2 2 0 0 0-2 2v16a2 2 0 0 0 2 2h12a2 2 0 0 0 2-2V7Z"/><path d="M14 2v4a2 2 0 0 0 2 2h4"/><path d="M10 9H8"/><path d="M16 13H8"/><path d="M16 17H8"/>',
    "wrench": '<path d="M14.7 6.3a1 1 0 0 0 0 1.4l1.6 1.6a1 1 0 0 0 1.4 0l3.77-3.77a6 6 0 0 1-7.94 7.94l-6.91 6.91a2.12 2.12 0 0 1-3-3l6.91-6.91a6 6 0 0 1 7.94-7.94l-3.76 3.76z"/>',
    "help-circle": '<circle cx="12" cy="12" r="10"/><path d="M9.09 9a3 3 0 0 1 5.83 1c0 2-3 3-3 3"/><path d="M12 17h.01"/>',
    "check": '<path d="M20 6 9 17l-5-5"/>',
    "x": '<path d="M18 6 6 18"/><path d="m6 6 12 12"/>',
    "plus": '<path d="M5 12h14"/><path d="M12 5v14"/>',
    "minus": '<path d="M5 12h14"/>',
    "search": '<circle cx="11" cy="11" r="8"/><path d="m21 21-4.3-4.3"/>',
    "heart": '<path d="M19 14c1.49-1.46 3-3.21 3-5.5A5.5 5.5 0 0 0 16.5 3c-1.76 0-3 .5-4.5 2-1.5-1.5-2.74-2-4.5-2A5.5 5.5 0 0 0 2 8.5c0 2.3 1.5 4.05 3 5.5l7 7Z"/>',
    "star": '<polygon points="12 2 15.09 8.26 22 9.27 17 14.14 18.18 21.02 12 17.77 5.82 21.02 7 14.14 2 9.27 8.91 8.26 12 2"/>',
    "home": '<path d="m3 9 9-7 9 7v11a2 2 0 0 1-2 2H5a2 2 0 0 1-2-2z"/><polyline points="9 22 9 12 15 12 15 22"/>',
    "copy": '<rect width="14" height="14" x="8" y="8" rx="2" ry="2"/><path d="M4 16c-1.1 0-2-.9-2-2V4c0-1.1.9-2 2-2h10c1.1 0 2 .9 2 2"/>',
    "download": '<path d="M21 15v4a2 2 0 0 1-2 2H5a2 2 0 0 1-2-2v-4"/><polyline points="7 10 12 15 17 10"/><line x1="12" x2="12" y1="15" y2="3"/>',
    "menu": '<line x1="4" x2="20" y1="12" y2="12"/><line x1="4" x2="20" y1="6" y2="6"/><line x1="4" x2="20" y1="18" y2="18"/>',
    "chevron-down": '<path d="m6 9 6 6 6-6"/>',
    "chevron-up": '<path d="m18 15-6-6-6 6"/>',
    "bell": '<path d="M6 8a6 6 0 0 1 12 0c0 7 3 9 3 9H3s3-2 3-9"/><path d="M10.3 21a1.94 1.94 0 0 0 3.4 0"/>',
    "user": '<path d="M19 21v-2a4 4 0 0 0-4-4H9a4 4 0 0 0-4 4v2"/><circle cx="12" cy="7" r="4"/>',
}


def _build_svg(path_content: str, size: int = 24, color: str = "currentColor") -> str:
    """Build full inline SVG with shared attributes and given path(s)."""
    return (
        f'<svg class="icon icon-lucide" aria-hidden="true" width="{size}" height="{size}" '
        f'viewBox="0 0 24 24" fill="none" stroke="{color}" stroke-width="2" '
        'stroke-linecap="round" stroke-linejoin="round">'
        f"{path_content}"
        "</svg>"
    )


def _pascal(key: str) -> str:
    return "".join(part.capitalize() for part in key.split("-"))


def create_lucide_icon(path_content: str) -> Callable[..., str]:
    """Component factory: the callable takes size/color props and returns SVG markup."""
    def component(size: int = 24, color: str = "currentColor", **_props: Any) -> str:
        return _build_svg(path_content, size, color)
    return component


def lucide_exports() -> dict[str, Any]:
    """Export surface shaped like lucide-react: every icon three times plus helpers."""
    exports: dict[str, Any] = {}
    for key, body in _LUCIDE_PATHS.items():
        component = create_lucide_icon(body)
        name = _pascal(key)
        exports[name] = component
        exports[f"{name}Icon"] = component
        exports[f"Lucide{name}"] = component
    exports["createLucideIcon"] = create_lucide_icon
    exports["icons"] = {_pascal(key): key for key in _LUCIDE_PATHS}
    return exports


# ==================================================
# PATH DATA
# ==================================================

# Simple Icons style records: one path, brand hex color.
SHAPE_MARKS: list[dict] = [
    {"title": "Circle", "slug": "circle", "hex": "3B82F6", "path": "M12 2a10 10 0 1 0 0 20a10 10 0 1 0 0-20z"},
    {"title": "Square", "slug": "square", "hex": "EF4444", "path": "M3 3h18v18H3z"},
    {"title": "Triangle", "slug": "triangle", "hex": "22C55E", "path": "M12 2 22 21H2z"},
    {"title": "Diamond", "slug": "diamond", "hex": "A855F7", "path": "M12 1 23 12 12 23 1 12z"},
    {"title": "Hexagon", "slug": "hexagon", "hex": "F59E0B", "path": "M12 1.5 21.1 6.75v10.5L12 22.5 2.9 17.25V6.75z"},
    {
        "title": "Ring",
        "slug": "ring",
        "hex": "14B8A6",
        "path": "M12 2a10 10 0 1 0 0 20a10 10 0 1 0 0-20zm0 5a5 5 0 1 1 0 10a5 5 0 1 1 0-10z",
        "fillRule": "evenodd",
    },
    {"title": "Cross", "slug": "cross", "hex": "EC4899", "path": "M9 2h6v7h7v6h-7v7H9v-7H2V9h7z"},
    {
        "title": "Star",
        "slug": "star",
        "hex": "EAB308",
        "path": "M12 1.5l3.09 6.26 6.91 1-5 4.87 1.18 6.88L12 17.27l-6.18 3.24L7 13.63 2 8.76l6.91-1z",
    },
    # Missing path; dropped by the adapter.
    {"title": "Broken", "slug": "broken", "hex": "000000"},
]

# Outline arrows: stroked, no fixed color.
ARROW_PATHS: dict[str, Any] = {
    "arrow-up": ["M12 19V5", "M5 12l7-7 7 7"],
    "arrow-down": ["M12 5v14", "M19 12l-7 7-7-7"],
    "arrow-left": ["M19 12H5", "M12 19l-7-7 7-7"],
    "arrow-right": ["M5 12h14", "M12 5l7 7-7 7"],
    "arrow-up-right": ["M7 17 17 7", "M7 7h10v10"],
    "arrow-down-left": ["M17 7 7 17", "M17 17H7V7"],
    "chevron-left": "M15 18l-6-6 6-6",
    "chevron-right": "M9 18l6-6-6-6",
    "corner-down-right": ["M15 10l5 5-5 5", "M4 4v7a4 4 0 0 0 4 4h12"],
    "refresh-cw": ["M21 2v6h-6", "M3 12a9 9 0 0 1 15-6.7L21 8", "M3 22v-6h6", "M21 12a9 9 0 0 1-15 6.7L3 16"],
}


# ==================================================
# CSS GLYPHS
# ==================================================

PRIMEICONS_STYLESHEET = "https://unpkg.com/primeicons@7.0.0/primeicons.css"

_PRIMEICONS_NAMES = [
    "check", "times", "search", "home", "user", "cog", "heart", "star", "trash",
    "pencil", "bell", "calendar", "envelope", "download", "upload", "filter",
    "plus", "minus", "refresh", "lock", "unlock", "eye", "bookmark", "cloud",
    "globe", "image", "map-marker", "phone", "shopping-cart", "github",
]


def primeicons_css() -> str:
    """Stylesheet text in the shape primeicons.css ships (glyph rules plus helpers)."""
    rules = [
        ".pi {\n  font-family: 'primeicons';\n  speak: none;\n  font-style: normal;\n}",
        ".pi-spin {\n  animation: fa-spin 2s infinite linear;\n}",
    ]
    for i, name in enumerate(_PRIMEICONS_NAMES):
        rules.append(f'.pi-{name}:before {{\n  content: "\\e9{i:02x}";\n}}')
    return "\n\n".join(rules)


# ==================================================
# UNICODE GLYPHS
# ==================================================

EMOJI: list[dict] = [
    {"name": "grinning face", "char": "😀"},
    {"name": "face with tears of joy", "char": "😂"},
    {"name": "smiling face with heart-eyes", "char": "😍"},
    {"name": "thinking face", "char": "🤔"},
    {"name": "thumbs up", "char": "👍"},
    {"name": "clapping hands", "char": "👏"},
    {"name": "waving hand", "char": "👋"},
    {"name": "red heart", "char": "❤️"},
    {"name": "fire", "char": "🔥"},
    {"name": "sparkles", "char": "✨"},
    {"name": "star", "char": "⭐"},
    {"name": "rocket", "char": "🚀"},
    {"name": "party popper", "char": "🎉"},
    {"name": "light bulb", "char": "💡"},
    {"name": "check mark button", "char": "✅"},
    {"name": "cross mark", "char": "❌"},
    {"name": "warning", "char": "⚠️"},
    {"name": "hourglass done", "char": "⌛"},
    {"name": "sun", "char": "☀️"},
    {"name": "rainbow", "char": "🌈"},
    {"name": "globe showing Europe-Africa", "char": "🌍"},
    {"name": "laptop", "char": "💻"},
    {"name": "package", "char": "📦"},
    {"name": "magnifying glass tilted left", "char": "🔍"},
    {"name": "family: man, woman, girl, boy", "char": "👨‍👩‍👧‍👦"},
    # Not a glyph; dropped.
    {"name": "blank", "char": "   "},
]


# ==================================================
# ASYNC PROVIDERS
# ==================================================

# Reduced Material Design Icons collection (names only).
MDI_COLLECTION: dict = {
    "prefix": "mdi",
    "icons": {
        name: {} for name in (
            "account", "bell", "calendar", "camera", "check", "close", "cloud",
            "cog", "delete", "download", "email", "folder", "github", "heart",
            "home", "magnify", "menu", "pencil", "star", "upload",
        )
    },
    "aliases": {
        "house": {"parent": "home"},
        "trash-can-outline-old": {"parent": "no-such-icon"},
    },
}
MDI_COLLECTION["icons"]["account-outline-legacy"] = {"hidden": True}

_ZONDICON_NAMES = [
    "add-outline", "airplane", "album", "announcement", "arrow-left", "bookmark",
    "calendar", "camera", "checkmark", "cloud", "cog", "heart", "home",
    "location", "lock-closed", "music-notes", "search", "star-full", "trash", "user",
]


def _zondicon_loader(name: str, api_base: str) -> Callable[[], Any]:
    async def load() -> dict:
        return {"default": f"{api_base}/zondicons/{name}.svg"}
    return load


def zondicon_modules(api_base: str = ICONIFY_API_BASE) -> dict[str, Callable[[], Any]]:
    """name -> loader, the shape a bundler's glob import produces."""
    return {name: _zondicon_loader(name, api_base) for name in _ZONDICON_NAMES}


# ==================================================
# REGISTRY
# ==================================================


def _read_json(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def register_iconify_collections(
    registry: ProviderRegistry,
    directory: Optional[str],
    resolver: IconifyResolver,
) -> int:
    """Register one async provider per reduced collection file. Returns how many were added."""
    if not directory:
        return 0
    root = Path(directory)
    if not root.is_dir():
        logger.warning(f"ICONIFY_COLLECTIONS_DIR {directory} is not a directory")
        return 0

    added = 0
    for path in sorted(root.glob("*.json")):
        try:
            data = _read_json(path)
        except (OSError, ValueError) as e:
            logger.warning(f"Skipping collection {path.name}: {e}")
            continue
        prefix = data.get("prefix") if isinstance(data, dict) else None
        if not isinstance(prefix, str) or not prefix:
            logger.warning(f"Skipping collection {path.name}: no prefix")
            continue
        key = f"iconify-{prefix}"
        if key in registry:
            continue
        meta = data.get("info") if isinstance(data.get("info"), dict) else {}
        author = meta.get("author")
        license_info = meta.get("license")
        info = ProviderInfo(
            key=key,
            label=meta.get("name") or prefix,
            category=meta.get("category") or "Iconify",
            author=author.get("name", "Unknown") if isinstance(author, dict) else "Unknown",
            license=license_info.get("title", "Unknown") if isinstance(license_info, dict) else "Unknown",
            package=f"@iconify-json/{prefix}",
            samples=[s for s in meta.get("samples", []) if isinstance(s, str)],
        )
        registry.register(ProviderSpec(
            info=info,
            adapter=IconifyCollectionAdapter(key, prefix=prefix),
            load_raw=partial(_read_json, path),
            resolver=resolver,
        ))
        added += 1

    logger.info(f"Registered {added} Iconify collections from {directory}")
    return added


def build_default_registry(collections_dir: Optional[str] = ICONIFY_COLLECTIONS_DIR) -> ProviderRegistry:
    registry = ProviderRegistry()
    iconify = IconifyResolver(ICONIFY_API_BASE)

    registry.register(ProviderSpec(
        info=ProviderInfo(
            "lucide", "Lucide", "Outline", "Lucide Contributors", "ISC", "lucide-react",
            samples=["Home", "Search", "Heart"],
        ),
        adapter=ComponentMapAdapter("lucide", module="lucide-react", reject_suffix="Icon", reject_prefixes=("Lucide",)),
        load_raw=lucide_exports,
    ))
    registry.register(ProviderSpec(
        info=ProviderInfo(
            "shapes", "Shape Marks", "Brands", "Icon Atlas", "CC0-1.0", "simple-icons",
            samples=["Circle", "Ring", "Star"],
        ),
        adapter=PathDataAdapter("shapes"),
        load_raw=lambda: {"icons": SHAPE_MARKS},
    ))
    registry.register(ProviderSpec(
        info=ProviderInfo(
            "arrows", "Outline Arrows", "Outline", "Icon Atlas", "MIT", "feather-icons",
            samples=["arrow-up", "arrow-right", "refresh-cw"],
        ),
        adapter=PathDataAdapter("arrows", stroked=True, brand_colors=False),
        load_raw=lambda: ARROW_PATHS,
    ))
    registry.register(ProviderSpec(
        info=ProviderInfo(
            "primeicons", "PrimeIcons", "Font", "PrimeTek", "MIT", "primeicons",
            samples=["check", "search", "cog"],
        ),
        adapter=CssGlyphAdapter("primeicons", prefix="pi", base_class="pi", stylesheet=PRIMEICONS_STYLESHEET),
        load_raw=primeicons_css,
    ))
    registry.register(ProviderSpec(
        info=ProviderInfo(
            "emoji", "Emoji", "Emoji", "Unicode Consortium", "Unicode", "emoji.json",
            samples=["rocket", "fire", "sparkles"],
        ),
        adapter=UnicodeGlyphAdapter("emoji"),
        load_raw=lambda: EMOJI,
    ))
    registry.register(ProviderSpec(
        info=ProviderInfo(
            "mdi", "Material Design Icons", "Material", "Pictogrammers", "Apache 2.0", "@iconify-json/mdi",
            samples=["home", "heart", "github"],
        ),
        adapter=IconifyCollectionAdapter("mdi"),
        load_raw=lambda: MDI_COLLECTION,
        resolver=iconify,
    ))
    registry.register(ProviderSpec(
        info=ProviderInfo(
            "zondicons", "Zondicons", "Solid", "Steve Schoger", "MIT", "zondicons",
            samples=["airplane", "heart", "home"],
        ),
        adapter=AsyncModuleAdapter("zondicons"),
        load_raw=zondicon_modules,
        resolver=ModuleLoaderResolver(),
    ))

    register_iconify_collections(registry, collections_dir, iconify)
    return registry
