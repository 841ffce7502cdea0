"""Resolver capability: raw specifier + referrer -> canonical specifier."""

from __future__ import annotations

from typing import Optional, Protocol

from ..import_map import ImportMap
from ..specifier import ModuleSpecifier, resolve_import


class Resolver(Protocol):
    def resolve(self, specifier: str, referrer: ModuleSpecifier) -> ModuleSpecifier:
        """Return the canonical specifier or raise ``ResolutionError``."""
        ...


class DocResolver:
    """Consults an optional import map before the standard resolution rules."""

    def __init__(self, import_map: Optional[ImportMap] = None) -> None:
        self.import_map = import_map

    def resolve(self, specifier: str, referrer: ModuleSpecifier) -> ModuleSpecifier:
        if self.import_map is not None:
            mapped = self.import_map.lookup(specifier, referrer)
            if mapped is not None:
                return mapped
        return resolve_import(specifier, referrer)


__all__ = ["DocResolver", "Resolver"]
