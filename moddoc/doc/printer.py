"""Plain and coloured text rendering of documentation nodes."""

from __future__ import annotations

import re
from io import StringIO
from typing import List, Optional, Sequence

from rich.console import Console
from rich.text import Text

from .node import DeclarationKind, DocNode, DocNodeKind, JsDoc

_KIND_ORDER = {
    DocNodeKind.FUNCTION: 0,
    DocNodeKind.VARIABLE: 1,
    DocNodeKind.CLASS: 2,
    DocNodeKind.ENUM: 3,
    DocNodeKind.INTERFACE: 4,
    DocNodeKind.TYPE_ALIAS: 5,
    DocNodeKind.NAMESPACE: 6,
    DocNodeKind.IMPORT: 7,
}

_KEYWORDS_RE = re.compile(
    r"^(?:(?:export|declare|default|abstract|async|static|readonly|public|protected|private|"
    r"function\*?|class|interface|enum|type|namespace|module|const|let|var|get|set|import|new)\s+)+"
)

_INDENT = "  "


class DocPrinter:
    """Formats top-level nodes sorted by kind then name.

    Each node is introduced by a ``Defined in`` line, followed by its
    signature, its documentation and, for containers, its members.
    """

    def __init__(self, nodes: Sequence[DocNode], use_color: bool = False, private: bool = False) -> None:
        self.nodes = list(nodes)
        self.use_color = use_color
        self.private = private

    def format(self) -> str:
        text = Text()
        for node in sorted(self.nodes, key=lambda item: (_KIND_ORDER[item.kind], item.name)):
            self._format_node(text, node)
        if not self.use_color:
            return text.plain
        buffer = StringIO()
        console = Console(
            file=buffer,
            force_terminal=True,
            color_system="standard",
            soft_wrap=True,
            highlight=False,
            emoji=False,
            markup=False,
        )
        console.print(text, end="")
        return buffer.getvalue()

    def __str__(self) -> str:
        return self.format()

    def _format_node(self, text: Text, node: DocNode) -> None:
        text.append(f"Defined in {node.location}", style="dim")
        text.append("\n\n")
        self._signature(text, node, 0)
        self._js_doc(text, node.js_doc, 1)
        members = self._visible(node.children)
        if node.kind.is_container and members:
            text.append("\n")
            for child in members:
                self._member(text, child, 1)
        text.append("\n")

    def _member(self, text: Text, node: DocNode, depth: int) -> None:
        self._signature(text, node, depth)
        self._js_doc(text, node.js_doc, depth + 1)
        if node.kind is DocNodeKind.NAMESPACE:
            for child in self._visible(node.children):
                self._member(text, child, depth + 1)

    def _signature(self, text: Text, node: DocNode, depth: int) -> None:
        signature = node.signature or f"{node.kind.value} {node.name}"
        line = Text(_INDENT * depth)
        keywords = _KEYWORDS_RE.match(signature)
        if keywords:
            line.append(keywords.group(0), style="magenta")
            rest = signature[keywords.end() :]
        else:
            rest = signature
        if rest.startswith(node.name):
            line.append(node.name, style="bold")
            line.append(rest[len(node.name) :])
        else:
            line.append(rest)
        text.append_text(line)
        text.append("\n")

    def _js_doc(self, text: Text, js_doc: Optional[JsDoc], depth: int) -> None:
        if js_doc is None or js_doc.is_empty():
            return
        indent = _INDENT * depth
        if js_doc.summary:
            for line in js_doc.summary.splitlines():
                text.append(f"{indent}{line}".rstrip())
                text.append("\n")
        if js_doc.tags:
            if js_doc.summary:
                text.append("\n")
            for tag in js_doc.tags:
                header = Text(f"{indent}@{tag.kind}", style="bold")
                if tag.type:
                    header.append(" {")
                    header.append(tag.type, style="cyan")
                    header.append("}")
                if tag.name:
                    header.append(" ")
                    header.append(f"[{tag.name}]" if tag.optional else tag.name)
                text.append_text(header)
                text.append("\n")
                if tag.doc:
                    for line in tag.doc.splitlines():
                        text.append(f"{indent}{_INDENT * 2}{line}".rstrip())
                        text.append("\n")

    def _visible(self, nodes: List[DocNode]) -> List[DocNode]:
        if self.private:
            return nodes
        return [node for node in nodes if node.declaration_kind is not DeclarationKind.PRIVATE]


__all__ = ["DocPrinter"]
