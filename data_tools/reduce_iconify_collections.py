"""
Iconify collection reducer (offline script).

Downloads full Iconify collection JSON files from the icon-sets repository and
writes reduced copies that only keep what the catalog needs:

  {
    "prefix": "mdi",
    "total": 7447,
    "info": {"name": "Material Design Icons", "author": {...}, "license": {...}, ...},
    "icons": {"home": {}, "account-old": {"hidden": true}, ...},
    "aliases": {"house": {"parent": "home"}, ...}
  }

SVG bodies are dropped; the app fetches drawables from the Iconify API at
activation time. Point ICONIFY_COLLECTIONS_DIR at the output directory.

Usage:
    python data_tools/reduce_iconify_collections.py [prefix ...]
"""
import json
import os
import sys
import time

import requests

# ==================================================
# CONFIG
# ==================================================

_SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
OUTPUT_DIR = os.getenv("ICONIFY_COLLECTIONS_DIR") or os.path.join(_SCRIPT_DIR, "collections")

ICON_SETS_RAW = "https://raw.githubusercontent.com/iconify/icon-sets/master/json"
DEFAULT_PREFIXES = ["mdi", "tabler", "ph", "carbon", "heroicons", "bi"]

REQUEST_TIMEOUT = 60
SLEEP_SECONDS = 1

HEADERS = {
    "User-Agent": "IconAtlas/1.0 (collection reducer)",
}

_INFO_KEYS = ("name", "author", "license", "category", "samples", "height", "palette")


def fetch_collection(prefix: str) -> dict:
    url = f"{ICON_SETS_RAW}/{prefix}.json"
    r = requests.get(url, headers=HEADERS, timeout=REQUEST_TIMEOUT)
    r.raise_for_status()
    data = r.json()
    if not isinstance(data, dict) or not isinstance(data.get("icons"), dict):
        raise ValueError(f"Unexpected JSON structure for '{prefix}'")
    return data


def reduce_collection(data: dict) -> dict:
    """Strip SVG bodies; keep names, hidden flags, aliases and display info."""
    icons = {
        name: ({"hidden": True} if isinstance(icon, dict) and icon.get("hidden") else {})
        for name, icon in data["icons"].items()
    }
    aliases = {}
    for name, alias in (data.get("aliases") or {}).items():
        if isinstance(alias, dict) and alias.get("parent"):
            aliases[name] = {"parent": alias["parent"]}
            if alias.get("hidden"):
                aliases[name]["hidden"] = True

    info = data.get("info") if isinstance(data.get("info"), dict) else {}
    return {
        "prefix": data.get("prefix"),
        "total": sum(1 for icon in icons.values() if not icon.get("hidden")),
        "info": {k: info[k] for k in _INFO_KEYS if k in info},
        "icons": icons,
        "aliases": aliases,
    }


def write_collection(reduced: dict, output_dir: str) -> str:
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, f"{reduced['prefix']}.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(reduced, f, ensure_ascii=False, separators=(",", ":"))
    return path


def main():
    prefixes = sys.argv[1:] or DEFAULT_PREFIXES
    written = 0
    for idx, prefix in enumerate(prefixes, start=1):
        print(f"[{idx}] Fetching {prefix}")
        try:
            reduced = reduce_collection(fetch_collection(prefix))
        except (requests.RequestException, ValueError) as e:
            print(f"[ERROR] {prefix} → {e}")
            continue
        path = write_collection(reduced, OUTPUT_DIR)
        print(f"    {reduced['total']} icons → {path}")
        written += 1
        time.sleep(SLEEP_SECONDS)

    print(f"\n✅ Reduced {written}/{len(prefixes)} collections.")
    print(f"📄 Output directory: {OUTPUT_DIR}")


if __name__ == "__main__":
    main()
