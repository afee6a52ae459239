"""
Provider adapter base class.

An adapter converts one provider's native export shape into a flat list of
IconDescriptor values. Adapters are pure: the same raw exports always give
the same descriptor list. Entries that cannot be classified are dropped, never
raised, so a provider whose export surface drifts upstream stays browsable.
"""

from __future__ import annotations

import logging
import re
from types import ModuleType
from typing import Any, Iterable, Iterator, Mapping, Optional

from ..descriptors import DescriptorError, IconDescriptor, IconKind

logger = logging.getLogger(__name__)

IDENTIFIER_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


def export_items(raw: Any) -> Iterator[tuple[str, Any]]:
    """
    Yield (name, value) pairs from a named-export container.
    Accepts mappings and modules; anything else yields nothing.
    """
    if isinstance(raw, ModuleType):
        raw = vars(raw)
    if not isinstance(raw, Mapping):
        return
    for name, value in raw.items():
        if isinstance(name, str):
            yield name, value


class ProviderAdapter:
    """Base adapter. Subclasses implement `entries` and `classify`."""

    kind: IconKind

    def __init__(self, provider: str):
        self.provider = provider

    def entries(self, raw: Any) -> Iterable[tuple[str, Any]]:
        """Yield (native name, native value) pairs from the raw exports."""
        raise NotImplementedError

    def classify(self, name: str, value: Any) -> Optional[IconDescriptor]:
        """Return a descriptor for one entry, or None when it is not an icon."""
        raise NotImplementedError

    def build_descriptors(self, raw: Any) -> list[IconDescriptor]:
        descriptors: list[IconDescriptor] = []
        seen: set[str] = set()
        dropped = 0

        try:
            entries = list(self.entries(raw))
        except (TypeError, ValueError, AttributeError, KeyError) as e:
            logger.debug(f"{self.provider}: unexpected export shape ({e}); no icons")
            return []

        for name, value in entries:
            try:
                descriptor = self.classify(name, value)
            except (DescriptorError, TypeError, ValueError, AttributeError, KeyError) as e:
                logger.debug(f"{self.provider}: dropping {name!r}: {e}")
                descriptor = None

            if descriptor is None:
                dropped += 1
                continue
            if descriptor.name in seen:
                dropped += 1
                continue
            seen.add(descriptor.name)
            descriptors.append(descriptor)

        if dropped:
            logger.debug(f"{self.provider}: kept {len(descriptors)} icons, dropped {dropped} entries")
        return descriptors

    def describe(self, name: str, payload: Any) -> IconDescriptor:
        return IconDescriptor(provider=self.provider, name=name, kind=self.kind, payload=payload)
