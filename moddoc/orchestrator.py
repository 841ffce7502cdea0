"""Pipeline orchestration for the documentation command."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import List, Optional, TextIO

from .builtins import builtin_specifier, get_types
from .colors import use_color
from .config import ModdocConfig, load_config
from .doc import DocNode, DocNodeKind, DocParser, DocPrinter, find_nodes_by_name_recursively, nodes_to_json
from .errors import FilterNotFound
from .fetcher import File, FileFetcher
from .graph import DocLoader, DocResolver, StubLoader, create_graph
from .import_map import ImportMap, load_import_map
from .logging import get_logger
from .media_type import MediaType
from .output import write_json_to_stdout, write_to_stdout_ignore_sigpipe
from .parser import SourceParser
from .specifier import resolve_url_or_path

SYNTHETIC_ROOT = "./$moddoc$doc.ts"


class Orchestrator:
    """Ties graph construction, extraction and rendering together.

    With no source file (or ``--builtin``) the bundled declarations are
    documented directly. Otherwise a synthetic root module that re-exports
    everything from the requested file is seeded into the fetcher, so that a
    file with external types is still documented through them.
    """

    def __init__(
        self,
        config: ModdocConfig | None = None,
        fetcher: FileFetcher | None = None,
        source_parser: SourceParser | None = None,
        cwd: Path | None = None,
    ) -> None:
        self.config = config or load_config()
        self.cwd = cwd
        self.fetcher = fetcher or FileFetcher(
            request_timeout=self.config.request_timeout,
            user_agent=self.config.user_agent,
        )
        self.source_parser = source_parser or SourceParser()
        self.logger = get_logger("orchestrator")

    async def generate(
        self,
        source_file: Optional[str] = None,
        *,
        private: bool = False,
        unstable: bool = False,
        import_map: Optional[str] = None,
    ) -> List[DocNode]:
        """Build the graph for ``source_file`` and return its doc nodes."""
        private = private or self.config.private
        unstable = unstable or self.config.unstable
        if source_file is None or source_file == "--builtin":
            return await self._generate_builtin(private=private, unstable=unstable)

        target = resolve_url_or_path(source_file, self.cwd)
        root = resolve_url_or_path(SYNTHETIC_ROOT, self.cwd)
        self.fetcher.insert_cached(
            File(
                specifier=root,
                source=f"export * from {json.dumps(str(target))};",
                media_type=MediaType.TYPESCRIPT,
                local=Path(SYNTHETIC_ROOT),
            )
        )
        resolver = DocResolver(self._load_import_map(import_map))
        self.logger.debug("Documenting %s via %s", target, root)
        graph = await create_graph(root, DocLoader(self.fetcher), resolver, self.source_parser)
        doc_parser = DocParser(graph, private=private, source_parser=self.source_parser)
        return doc_parser.parse_with_reexports(root)

    async def _generate_builtin(self, *, private: bool, unstable: bool) -> List[DocNode]:
        specifier = builtin_specifier()
        graph = await create_graph(specifier, StubLoader(), source_parser=self.source_parser)
        doc_parser = DocParser(graph, private=private, source_parser=self.source_parser)
        self.logger.debug("Documenting built-in declarations (unstable=%s)", unstable)
        return doc_parser.parse_source(specifier, MediaType.DTS, get_types(unstable))

    def render(
        self,
        nodes: List[DocNode],
        *,
        filter_name: Optional[str] = None,
        private: bool = False,
        color: Optional[bool] = None,
    ) -> str:
        """Render nodes as text, without import nodes.

        Raises :class:`FilterNotFound` when a filter matches nothing.
        """
        visible = [node for node in nodes if node.kind is not DocNodeKind.IMPORT]
        if filter_name:
            visible = find_nodes_by_name_recursively(visible, filter_name)
            if not visible:
                raise FilterNotFound(filter_name)
        if color is None:
            color = use_color(self.config.color)
        return DocPrinter(visible, color, private or self.config.private).format()

    def print_docs(
        self,
        source_file: Optional[str] = None,
        *,
        as_json: bool = False,
        filter_name: Optional[str] = None,
        private: bool = False,
        unstable: bool = False,
        import_map: Optional[str] = None,
        stream: Optional[TextIO] = None,
    ) -> None:
        """Generate documentation and write it to ``stream`` (stdout by default).

        JSON output carries every node, imports included, and ignores the
        filter. Nothing is written when generation or filtering fails.
        """
        nodes = asyncio.run(
            self.generate(source_file, private=private, unstable=unstable, import_map=import_map)
        )
        if as_json:
            write_json_to_stdout(nodes_to_json(nodes), stream)
            return
        details = self.render(nodes, filter_name=filter_name, private=private)
        write_to_stdout_ignore_sigpipe(details, stream)

    def _load_import_map(self, location: Optional[str]) -> Optional[ImportMap]:
        location = location or self.config.import_map
        if not location:
            return None
        return load_import_map(location, self.fetcher, self.cwd)


__all__ = ["Orchestrator", "SYNTHETIC_ROOT"]
