"""Dotted-path lookup over documentation node trees."""

from __future__ import annotations

from typing import List, Sequence

from .node import DocNode


def find_nodes_by_name_recursively(nodes: Sequence[DocNode], name: str) -> List[DocNode]:
    """Return every node matching a dotted path such as ``Runtime.Process.pid``.

    The first segment is matched against ``nodes``; each following segment is
    matched against the children of the previous matches. An empty list means
    nothing matched.
    """
    segments = [segment for segment in name.split(".") if segment]
    if not segments:
        return []
    matches = [node for node in nodes if node.name == segments[0]]
    for segment in segments[1:]:
        matches = [child for node in matches for child in node.children if child.name == segment]
        if not matches:
            break
    return matches


__all__ = ["find_nodes_by_name_recursively"]
