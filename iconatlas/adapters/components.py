"""
Adapter for component libraries: a named-export map (or module) of callables.

Lucide style libraries export every icon twice (`Home` and `HomeIcon`) plus
helpers such as `createLucideIcon` and metadata like `icons`; Radix style
libraries only keep the `*Icon` exports. Both are handled by configuration.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Optional, Sequence

from ..descriptors import ComponentRef, IconDescriptor, IconKind
from .base import ProviderAdapter, export_items

COMPONENT_NAME_RE = re.compile(r"^[A-Z][A-Za-z0-9]*$")


class ComponentMapAdapter(ProviderAdapter):
    kind = IconKind.COMPONENT_REF

    def __init__(
        self,
        provider: str,
        module: str = "",
        require_suffix: Optional[str] = None,
        reject_suffix: Optional[str] = None,
        reject_prefixes: Sequence[str] = (),
        name_pattern: re.Pattern = COMPONENT_NAME_RE,
    ):
        super().__init__(provider)
        self.module = module
        self.require_suffix = require_suffix
        self.reject_suffix = reject_suffix
        self.reject_prefixes = tuple(reject_prefixes)
        self.name_pattern = name_pattern

    def entries(self, raw: Any) -> Iterable[tuple[str, Any]]:
        return export_items(raw)

    def is_icon_name(self, name: str) -> bool:
        if not self.name_pattern.match(name):
            return False
        if self.require_suffix and not name.endswith(self.require_suffix):
            return False
        if self.reject_suffix and name.endswith(self.reject_suffix):
            return False
        return not any(name.startswith(p) for p in self.reject_prefixes)

    def classify(self, name: str, value: Any) -> Optional[IconDescriptor]:
        if not self.is_icon_name(name) or not callable(value):
            return None
        return self.describe(name, ComponentRef(component=value, export_name=name, module=self.module))
