"""Module graph data model: records, dependency edges and the graph arena."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple, Union

from ..errors import LoadError, ModuleGraphError, ResolutionError
from ..media_type import MediaType
from ..specifier import ModuleSpecifier


@dataclass
class Dependency:
    """One dependency edge; the target is a specifier value, never a record."""

    specifier: str
    resolved: Union[ModuleSpecifier, ResolutionError]
    kind: str = "import"
    is_dynamic: bool = False
    is_type_only: bool = False
    line: int = 0
    col: int = 0

    @property
    def maybe_specifier(self) -> Optional[ModuleSpecifier]:
        if isinstance(self.resolved, ModuleSpecifier):
            return self.resolved
        return None

    @property
    def error(self) -> Optional[ResolutionError]:
        if isinstance(self.resolved, ResolutionError):
            return self.resolved
        return None


@dataclass
class ModuleRecord:
    """A loaded module and the dependencies discovered in its source."""

    specifier: ModuleSpecifier
    media_type: MediaType
    source: str
    dependencies: Dict[str, Dependency] = field(default_factory=dict)
    types_dependency: Optional[Dependency] = None
    headers: Optional[Dict[str, str]] = None

    def resolve_dependency(self, specifier: str) -> Optional[Dependency]:
        return self.dependencies.get(specifier)


ModuleSlot = Union[ModuleRecord, ModuleGraphError]


@dataclass
class ModuleGraph:
    """Arena of modules keyed by canonical specifier.

    Slots hold either a :class:`ModuleRecord` or the error recorded while
    loading it. Redirects map a requested specifier to the final one.
    """

    root: ModuleSpecifier
    modules: Dict[ModuleSpecifier, ModuleSlot] = field(default_factory=dict)
    redirects: Dict[ModuleSpecifier, ModuleSpecifier] = field(default_factory=dict)

    def resolve(self, specifier: ModuleSpecifier) -> ModuleSpecifier:
        """Follow redirects until a non-redirected specifier is reached."""
        seen = {specifier}
        current = specifier
        while current in self.redirects:
            current = self.redirects[current]
            if current in seen:
                break
            seen.add(current)
        return current

    def get(self, specifier: ModuleSpecifier) -> Optional[ModuleRecord]:
        slot = self.modules.get(self.resolve(specifier))
        return slot if isinstance(slot, ModuleRecord) else None

    def try_get(self, specifier: ModuleSpecifier) -> ModuleRecord:
        """Return the module record, raising the recorded error if there is one."""
        resolved = self.resolve(specifier)
        slot = self.modules.get(resolved)
        if slot is None:
            raise LoadError(str(resolved), "Module not in graph", missing=True)
        if isinstance(slot, ModuleGraphError):
            raise slot
        return slot

    def specifiers(self) -> List[ModuleSpecifier]:
        return list(self.modules)

    def records(self) -> Iterator[ModuleRecord]:
        for slot in self.modules.values():
            if isinstance(slot, ModuleRecord):
                yield slot

    def errors(self) -> Iterator[Tuple[ModuleSpecifier, ModuleGraphError]]:
        """Module-level errors followed by edge-level resolution errors."""
        for specifier, slot in self.modules.items():
            if isinstance(slot, ModuleGraphError):
                yield specifier, slot
        for record in self.records():
            for dependency in record.dependencies.values():
                if dependency.error is not None:
                    yield record.specifier, dependency.error

    def __contains__(self, specifier: object) -> bool:
        if not isinstance(specifier, ModuleSpecifier):
            return False
        return self.resolve(specifier) in self.modules

    def __len__(self) -> int:
        return len(self.modules)


__all__ = ["Dependency", "ModuleGraph", "ModuleRecord", "ModuleSlot"]
