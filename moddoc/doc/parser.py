"""Documentation extraction over a module graph, with re-export chasing."""

from __future__ import annotations

from typing import Dict, List, Optional, Set, Tuple

from ..errors import DocGenerationError, ModuleGraphError
from ..graph.models import ModuleGraph, ModuleRecord
from ..logging import get_logger
from ..media_type import MediaType
from ..parser import SourceParser
from ..specifier import ModuleSpecifier
from .extractor import DeclarationExtractor, ModuleDoc, Reexport
from .node import DeclarationKind, DocNode, DocNodeKind

_LOGGER = get_logger("doc")

_NodeKey = Tuple[str, int, int, str, DocNodeKind]


class DocParser:
    """Produces :class:`DocNode` sequences for modules of a built graph.

    Results are memoized per module for the lifetime of the parser, which is
    expected to be one documentation run.
    """

    def __init__(
        self,
        graph: Optional[ModuleGraph] = None,
        *,
        private: bool = False,
        source_parser: Optional[SourceParser] = None,
    ) -> None:
        self.graph = graph
        self.private = private
        self._source_parser = source_parser or SourceParser()
        self._modules: Dict[ModuleSpecifier, ModuleDoc] = {}
        self._flattened: Dict[ModuleSpecifier, List[DocNode]] = {}
        self._in_progress: Set[ModuleSpecifier] = set()

    def parse_source(self, specifier: ModuleSpecifier, media_type: MediaType, source: str) -> List[DocNode]:
        """Document source text that is not part of the graph."""
        if media_type is MediaType.JSON:
            return []
        if not media_type.is_parsable:
            raise DocGenerationError(str(specifier), f"Unsupported media type {media_type.value}")
        parsed = self._source_parser.parse_module(specifier, source, media_type)
        module = DeclarationExtractor(parsed, private=self.private).extract()
        return module.nodes + module.import_nodes()

    def parse_module(self, specifier: ModuleSpecifier) -> ModuleDoc:
        record = self._record(specifier)
        cached = self._modules.get(record.specifier)
        if cached is not None:
            return cached

        if record.media_type is MediaType.JSON:
            module = ModuleDoc(specifier=str(record.specifier))
        elif not record.media_type.is_parsable:
            raise DocGenerationError(
                str(record.specifier), f"Unsupported media type {record.media_type.value}"
            )
        else:
            parsed = self._source_parser.parse_module(record.specifier, record.source, record.media_type)
            module = DeclarationExtractor(parsed, private=self.private).extract()
            for binding in module.imports:
                dependency = record.resolve_dependency(binding.src)
                if dependency is not None and dependency.maybe_specifier is not None:
                    binding.src = str(dependency.maybe_specifier)
        _LOGGER.debug(
            "Extracted %d nodes, %d imports, %d re-exports from %s",
            len(module.nodes),
            len(module.imports),
            len(module.reexports),
            record.specifier,
        )
        self._modules[record.specifier] = module
        return module

    def parse(self, specifier: ModuleSpecifier) -> List[DocNode]:
        """Local doc nodes of one module; re-exports are not followed."""
        module = self.parse_module(specifier)
        return module.nodes + module.import_nodes()

    def parse_with_reexports(self, specifier: ModuleSpecifier) -> List[DocNode]:
        """Re-exported nodes first, then the module's own nodes, then its imports.

        ``export *`` carries the target's import nodes along with its
        declarations. Raises :class:`DocGenerationError` when the module, or
        any module reached through a re-export, failed to load or resolve.
        """
        return self._flatten(self._record(specifier))

    def _flatten(self, record: ModuleRecord) -> List[DocNode]:
        cached = self._flattened.get(record.specifier)
        if cached is not None:
            return cached
        if record.specifier in self._in_progress:
            _LOGGER.debug("Re-export cycle through %s", record.specifier)
            return []

        self._in_progress.add(record.specifier)
        try:
            module = self.parse_module(record.specifier)
            nodes: List[DocNode] = []
            seen: Set[_NodeKey] = set()
            for reexport in module.reexports:
                target = self._reexport_target(record, reexport)
                for node in self._reexported_nodes(reexport, self._flatten(target)):
                    location = node.location
                    key = (location.specifier, location.line, location.col, node.name, node.kind)
                    if key in seen:
                        continue
                    seen.add(key)
                    nodes.append(node)
            nodes.extend(module.nodes)
            nodes.extend(module.import_nodes())
        finally:
            self._in_progress.discard(record.specifier)
        self._flattened[record.specifier] = nodes
        return nodes

    def _reexported_nodes(self, reexport: Reexport, target_nodes: List[DocNode]) -> List[DocNode]:
        if reexport.kind == "all":
            return list(target_nodes)
        target_nodes = [node for node in target_nodes if node.kind is not DocNodeKind.IMPORT]
        if reexport.kind == "namespace":
            alias = reexport.alias or "default"
            location = reexport.location
            assert location is not None
            return [
                DocNode(
                    name=alias,
                    kind=DocNodeKind.NAMESPACE,
                    location=location,
                    declaration_kind=DeclarationKind.EXPORT,
                    js_doc=reexport.js_doc,
                    signature=f"export * as {alias}",
                    children=[node.clone() for node in target_nodes],
                )
            ]
        matches = [node for node in target_nodes if node.name == reexport.name]
        if not matches:
            _LOGGER.debug("Re-exported name %r not found in %s", reexport.name, reexport.src)
        return [node.clone(name=reexport.alias) for node in matches]

    def _reexport_target(self, record: ModuleRecord, reexport: Reexport) -> ModuleRecord:
        dependency = record.resolve_dependency(reexport.src)
        if dependency is None:
            raise DocGenerationError(
                str(record.specifier), f'Dependency "{reexport.src}" is missing from the module graph'
            )
        if dependency.error is not None:
            raise DocGenerationError(str(record.specifier), dependency.error)
        assert dependency.maybe_specifier is not None
        return self._record(dependency.maybe_specifier)

    def _record(self, specifier: ModuleSpecifier) -> ModuleRecord:
        """The record documenting ``specifier``, preferring its types module."""
        if self.graph is None:
            raise DocGenerationError(str(specifier), "No module graph to document from")
        try:
            record = self.graph.try_get(specifier)
        except ModuleGraphError as exc:
            raise DocGenerationError(str(specifier), exc) from exc
        types = record.types_dependency
        if types is None:
            return record
        if types.error is not None:
            raise DocGenerationError(str(record.specifier), types.error)
        assert types.maybe_specifier is not None
        try:
            return self.graph.try_get(types.maybe_specifier)
        except ModuleGraphError as exc:
            raise DocGenerationError(str(types.maybe_specifier), exc) from exc


__all__ = ["DocParser"]
