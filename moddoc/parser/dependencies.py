"""Extraction of module dependencies from parsed sources."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional

from tree_sitter import Node

from .tree_sitter import ParsedSource, position, string_value

_REFERENCE_RE = re.compile(r"""^///\s*<reference\s+(path|types)\s*=\s*["']([^"']+)["']""")


@dataclass
class DependencyDescriptor:
    """A raw dependency specifier found in a module."""

    specifier: str
    kind: str
    line: int
    col: int
    is_dynamic: bool = False
    is_type_only: bool = False


def analyze_dependencies(parsed: ParsedSource) -> List[DependencyDescriptor]:
    """Return static, re-export, reference and dynamic dependencies in source order."""
    dependencies: List[DependencyDescriptor] = []
    in_header = True
    for child in parsed.root.children:
        if child.type == "comment":
            if in_header:
                reference = _reference_directive(parsed, child)
                if reference is not None:
                    dependencies.append(reference)
            continue
        in_header = False
        if child.type == "import_statement":
            dependency = _static_dependency(parsed, child, "import")
            if dependency is not None:
                dependencies.append(dependency)
        elif child.type == "export_statement":
            dependency = _static_dependency(parsed, child, "export")
            if dependency is not None:
                dependencies.append(dependency)

    for call in _iter_dynamic_imports(parsed.root):
        dependency = _dynamic_dependency(parsed, call)
        if dependency is not None:
            dependencies.append(dependency)
    dependencies.sort(key=lambda dep: (dep.line, dep.col))
    return dependencies


def import_source_node(node: Node) -> Optional[Node]:
    """The string node naming the module of an import/export statement."""
    source = node.child_by_field_name("source")
    if source is not None:
        return source
    for child in node.children:
        if child.type == "import_require_clause":
            return child.child_by_field_name("source") or next(
                (c for c in child.children if c.type == "string"), None
            )
        if child.type == "string":
            return child
    return None


def _static_dependency(parsed: ParsedSource, node: Node, kind: str) -> Optional[DependencyDescriptor]:
    source = import_source_node(node)
    if source is None:
        return None
    specifier = string_value(parsed, source)
    if not specifier:
        return None
    line, col = position(source)
    if any(c.type == "import_require_clause" for c in node.children):
        kind = "require"
    return DependencyDescriptor(
        specifier=specifier,
        kind=kind,
        line=line,
        col=col,
        is_type_only=any(c.type == "type" for c in node.children),
    )


def _reference_directive(parsed: ParsedSource, node: Node) -> Optional[DependencyDescriptor]:
    match = _REFERENCE_RE.match(parsed.text(node))
    if not match:
        return None
    line, col = position(node)
    return DependencyDescriptor(
        specifier=match.group(2),
        kind="reference" if match.group(1) == "path" else "types",
        line=line,
        col=col,
        is_type_only=True,
    )


def _iter_dynamic_imports(root: Node) -> Iterator[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "call_expression":
            function = node.child_by_field_name("function")
            if function is not None and function.type == "import":
                yield node
        stack.extend(reversed(node.children))


def _dynamic_dependency(parsed: ParsedSource, call: Node) -> Optional[DependencyDescriptor]:
    arguments = call.child_by_field_name("arguments")
    if arguments is None or not arguments.named_children:
        return None
    argument = arguments.named_children[0]
    if argument.type == "template_string":
        if any(c.type == "template_substitution" for c in argument.named_children):
            return None
    elif argument.type != "string":
        return None
    specifier = string_value(parsed, argument)
    if not specifier:
        return None
    line, col = position(argument)
    return DependencyDescriptor(
        specifier=specifier,
        kind="dynamic",
        line=line,
        col=col,
        is_dynamic=True,
    )


__all__ = ["DependencyDescriptor", "analyze_dependencies", "import_source_node"]
