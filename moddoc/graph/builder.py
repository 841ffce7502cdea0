"""Concurrent, cycle-tolerant module graph construction."""

from __future__ import annotations

import asyncio
from typing import Dict, Optional, Set, Union

from ..errors import InvalidRoot, InvalidSpecifier, LoadError, ResolutionError
from ..logging import get_logger
from ..media_type import MediaType
from ..parser import SourceParser, analyze_dependencies
from ..specifier import ModuleSpecifier, resolve_import
from .loader import LoadResponse, Loader
from .models import Dependency, ModuleGraph, ModuleRecord
from .resolver import Resolver

_LOGGER = get_logger("graph")

_TYPES_HEADER = "x-typescript-types"

LoadOutcome = Union[LoadResponse, LoadError, None]


class GraphBuilder:
    """Discovers every module reachable from a root and records it once.

    Loads for the whole discovery frontier run concurrently, but only the
    coroutine running :meth:`build` writes to the graph, and a specifier is
    scheduled at most once, so the resulting graph does not depend on the
    order in which loads complete.
    """

    def __init__(
        self,
        root: ModuleSpecifier,
        loader: Loader,
        resolver: Optional[Resolver] = None,
        source_parser: Optional[SourceParser] = None,
    ) -> None:
        self.graph = ModuleGraph(root=root)
        self._loader = loader
        self._resolver = resolver
        self._source_parser = source_parser or SourceParser()
        self._seen: Set[ModuleSpecifier] = set()
        self._pending: Dict["asyncio.Task[LoadOutcome]", ModuleSpecifier] = {}

    async def build(self) -> ModuleGraph:
        self._enqueue(self.graph.root, is_dynamic=False)
        while self._pending:
            done, _ = await asyncio.wait(list(self._pending), return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                requested = self._pending.pop(task)
                self._visit(requested, task.result())
        _LOGGER.debug(
            "Module graph for %s: %d modules, %d redirects",
            self.graph.root,
            len(self.graph.modules),
            len(self.graph.redirects),
        )
        return self.graph

    def _enqueue(self, specifier: ModuleSpecifier, *, is_dynamic: bool) -> None:
        if specifier in self._seen:
            return
        self._seen.add(specifier)
        task = asyncio.ensure_future(self._load(specifier, is_dynamic))
        self._pending[task] = specifier

    async def _load(self, specifier: ModuleSpecifier, is_dynamic: bool) -> LoadOutcome:
        try:
            return await self._loader.load(specifier, is_dynamic)
        except LoadError as exc:
            return exc
        except Exception as exc:  # loaders are pluggable; failures become graph data
            _LOGGER.debug("Loader raised for %s", specifier, exc_info=True)
            return LoadError(str(specifier), f"Unable to load module ({exc})")

    def _visit(self, requested: ModuleSpecifier, outcome: LoadOutcome) -> None:
        if isinstance(outcome, LoadError):
            _LOGGER.debug("Failed to load %s: %s", requested, outcome.reason)
            self.graph.modules[requested] = outcome
            return
        if outcome is None:
            _LOGGER.debug("Module not found: %s", requested)
            self.graph.modules[requested] = LoadError(str(requested), "Module not found", missing=True)
            return

        final = outcome.specifier
        if final != requested:
            self.graph.redirects[requested] = final
            if final in self._seen:
                return
            self._seen.add(final)
        self.graph.modules[final] = self._build_record(final, outcome)

    def _build_record(self, specifier: ModuleSpecifier, response: LoadResponse) -> ModuleRecord:
        media_type = MediaType.from_specifier_and_headers(specifier, response.headers)
        record = ModuleRecord(
            specifier=specifier,
            media_type=media_type,
            source=response.content,
            headers=response.headers,
        )
        if media_type.is_parsable:
            parsed = self._source_parser.parse_module(specifier, response.content, media_type)
            for descriptor in analyze_dependencies(parsed):
                existing = record.dependencies.get(descriptor.specifier)
                if existing is not None:
                    existing.is_dynamic = existing.is_dynamic and descriptor.is_dynamic
                    existing.is_type_only = existing.is_type_only and descriptor.is_type_only
                    continue
                dependency = Dependency(
                    specifier=descriptor.specifier,
                    resolved=self._resolve(descriptor.specifier, specifier),
                    kind=descriptor.kind,
                    is_dynamic=descriptor.is_dynamic,
                    is_type_only=descriptor.is_type_only,
                    line=descriptor.line,
                    col=descriptor.col,
                )
                record.dependencies[descriptor.specifier] = dependency
                if dependency.maybe_specifier is not None:
                    self._enqueue(dependency.maybe_specifier, is_dynamic=dependency.is_dynamic)

        types_specifier = (response.headers or {}).get(_TYPES_HEADER)
        if types_specifier:
            record.types_dependency = Dependency(
                specifier=types_specifier,
                resolved=self._resolve(types_specifier, specifier),
                kind="types",
                is_type_only=True,
            )
            if record.types_dependency.maybe_specifier is not None:
                self._enqueue(record.types_dependency.maybe_specifier, is_dynamic=False)
        return record

    def _resolve(self, specifier: str, referrer: ModuleSpecifier) -> Union[ModuleSpecifier, ResolutionError]:
        try:
            if self._resolver is not None:
                return self._resolver.resolve(specifier, referrer)
            return resolve_import(specifier, referrer)
        except ResolutionError as exc:
            _LOGGER.debug("Unable to resolve %r from %s: %s", specifier, referrer, exc.reason)
            return exc


async def create_graph(
    root: Union[ModuleSpecifier, str],
    loader: Loader,
    resolver: Optional[Resolver] = None,
    source_parser: Optional[SourceParser] = None,
) -> ModuleGraph:
    """Build the module graph reachable from ``root``.

    Missing modules, load failures and unresolvable specifiers are recorded in
    the graph; only a malformed root raises (:class:`InvalidRoot`).
    """
    if not isinstance(root, ModuleSpecifier):
        try:
            root = ModuleSpecifier.parse(root)
        except InvalidSpecifier as exc:
            raise InvalidRoot(str(root), exc.reason) from exc
    builder = GraphBuilder(root, loader, resolver, source_parser)
    return await builder.build()


__all__ = ["GraphBuilder", "create_graph"]
