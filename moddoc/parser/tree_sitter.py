"""Tree-sitter powered parsing of TypeScript and JavaScript sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser, Tree

from ..logging import get_logger
from ..media_type import MediaType
from ..specifier import ModuleSpecifier

_LOGGER = get_logger("parser")

_LANGUAGES = {
    "typescript": Language(tsts.language_typescript()),
    "tsx": Language(tsts.language_tsx()),
}


@dataclass
class ParsedSource:
    """A module's source text together with its syntax tree."""

    specifier: ModuleSpecifier
    media_type: MediaType
    source: str
    source_bytes: bytes
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Optional[Node]) -> str:
        if node is None:
            return ""
        return self.source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


class SourceParser:
    """Parses module sources and keeps the latest tree per specifier.

    The graph builder and the doc parser share one instance so every module
    is parsed once per run.
    """

    def __init__(self) -> None:
        self._parsers: Dict[str, Parser] = {}
        self._parsed: Dict[ModuleSpecifier, ParsedSource] = {}

    def parse_module(
        self, specifier: ModuleSpecifier, source: str, media_type: MediaType
    ) -> ParsedSource:
        cached = self._parsed.get(specifier)
        if cached is not None and cached.source == source and cached.media_type is media_type:
            return cached

        language_key = self._language_for(media_type)
        source_bytes = source.encode("utf-8")
        tree = self._get_parser(language_key).parse(source_bytes)
        if tree.root_node.has_error:
            _LOGGER.debug("Syntax errors while parsing %s; documenting what parsed", specifier)
        parsed = ParsedSource(
            specifier=specifier,
            media_type=media_type,
            source=source,
            source_bytes=source_bytes,
            tree=tree,
        )
        self._parsed[specifier] = parsed
        return parsed

    def _get_parser(self, language_key: str) -> Parser:
        parser = self._parsers.get(language_key)
        if parser is None:
            parser = Parser(_LANGUAGES[language_key])
            self._parsers[language_key] = parser
        return parser

    @staticmethod
    def _language_for(media_type: MediaType) -> str:
        if not media_type.is_parsable:
            raise ValueError(f"Cannot parse {media_type.value} sources")
        return "tsx" if media_type.uses_jsx else "typescript"


def string_value(parsed: ParsedSource, node: Optional[Node]) -> str:
    """Return the contents of a string literal node without its quotes."""
    raw = parsed.text(node)
    if len(raw) >= 2 and raw[0] in "\"'`" and raw[-1] == raw[0]:
        return raw[1:-1]
    return raw


def position(node: Node) -> tuple[int, int]:
    """1-based line and 0-based column of a node's start."""
    return node.start_point[0] + 1, node.start_point[1]


__all__ = ["ParsedSource", "SourceParser", "position", "string_value"]
