"""
Color palettes for previews and exports.
A palette is a named list of colors; a shade index picks one. Purely a render parameter.
"""

import re
from typing import Optional

COLOR_THEMES: dict[str, list[str]] = {
    "zinc": ["#71717a", "#a1a1aa", "#27272a", "#52525b", "#3f3f46"],
    "gray": ["#9ca3af", "#4b5563", "#6b7280", "#374151", "#1f2937"],
    "slate": ["#64748b", "#94a3b8", "#334155", "#475569", "#1e293b"],
    "stone": ["#78716c", "#a8a29e", "#57534e", "#44403c", "#292524"],
    "orange": ["#f97316", "#fb923c", "#ea580c", "#fdba74", "#ffedd5"],
    "green": ["#22c55e", "#4ade80", "#16a34a", "#86efac", "#dcfce7"],
    "emerald": ["#10b981", "#34d399", "#059669", "#6ee7b7", "#a7f3d0"],
    "teal": ["#14b8a6", "#2dd4bf", "#0d9488", "#5eead4", "#99f6e4"],
    "cyan": ["#06b6d4", "#22d3ee", "#0891b2", "#67e8f9", "#a5f3fc"],
    "sky": ["#0ea5e9", "#38bdf8", "#0284c7", "#7dd3fc", "#bae6fd"],
    "blue": ["#3b82f6", "#60a5fa", "#2563eb", "#93c5fd", "#bfdbfe"],
    "indigo": ["#6366f1", "#818cf8", "#4f46e5", "#a5b4fc", "#c7d2fe"],
    "violet": ["#8b5cf6", "#a78bfa", "#7c3aed", "#c4b5fd", "#ddd6fe"],
    "purple": ["#9333ea", "#a855f7", "#7e22ce", "#d8b4fe", "#f3e8ff"],
    "pink": ["#ec4899", "#f472b6", "#db2777", "#f9a8d4", "#fce7f3"],
    "rose": ["#f43f5e", "#fb7185", "#e11d48", "#fecdd3", "#ffe4e6"],
    "red": ["#ef4444", "#f87171", "#dc2626", "#fca5a5", "#fee2e2"],
    "yellow": ["#eab308", "#facc15", "#ca8a04", "#fde047", "#fef9c3"],
    "amber": ["#f59e0b", "#fbbf24", "#d97706", "#fcd34d", "#fef3c7"],
    "lime": ["#84cc16", "#a3e635", "#65a30d", "#bef264", "#ecfccb"],
    "midnight": ["#1e1b4b", "#312e81", "#1e3a8a", "#4338ca", "#6366f1"],
    "neon": ["#39ff14", "#7fff00", "#00ffcc", "#cc00ff", "#ff00aa"],
}

DEFAULT_PALETTE = "blue"

# Hex, rgb()/hsl() and bare keywords such as "currentColor" or "tomato".
_COLOR_RE = re.compile(
    r"^(#[0-9a-fA-F]{3,8}|(?:rgb|rgba|hsl|hsla)\([\d\s.,%/]+\)|[a-zA-Z]+)$"
)


def get_palette(name: Optional[str]) -> list[str]:
    """Return the named palette; unknown names fall back to the default."""
    return COLOR_THEMES.get((name or "").strip(), COLOR_THEMES[DEFAULT_PALETTE])


def resolve_color(name: Optional[str], index: int = 0) -> str:
    """Pick a shade. An index outside the palette resets to the first shade."""
    palette = get_palette(name)
    if not isinstance(index, int) or index < 0 or index >= len(palette):
        index = 0
    return palette[index]


def is_valid_color(value: Optional[str]) -> bool:
    return bool(value) and bool(_COLOR_RE.match(value.strip()))
