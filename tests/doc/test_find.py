"""Tests for moddoc.doc.find."""

from __future__ import annotations

from moddoc.doc import DocNode, DocNodeKind, Location, find_nodes_by_name_recursively


def _node(name: str, kind: DocNodeKind, *children: DocNode) -> DocNode:
    return DocNode(
        name=name,
        kind=kind,
        location=Location("file:///p/mod.ts", 1, 0),
        children=list(children),
    )


NODES = [
    _node(
        "Runtime",
        DocNodeKind.NAMESPACE,
        _node("cwd", DocNodeKind.FUNCTION),
        _node("errors", DocNodeKind.NAMESPACE, _node("NotFound", DocNodeKind.CLASS)),
    ),
    _node("Runtime", DocNodeKind.INTERFACE, _node("pid", DocNodeKind.VARIABLE)),
    _node("greet", DocNodeKind.FUNCTION),
]


def test_first_segment_matches_top_level_names() -> None:
    matches = find_nodes_by_name_recursively(NODES, "greet")

    assert [node.kind for node in matches] == [DocNodeKind.FUNCTION]


def test_dotted_path_descends_through_every_match() -> None:
    assert [node.name for node in find_nodes_by_name_recursively(NODES, "Runtime")] == ["Runtime", "Runtime"]
    assert [node.name for node in find_nodes_by_name_recursively(NODES, "Runtime.pid")] == ["pid"]
    assert [node.name for node in find_nodes_by_name_recursively(NODES, "Runtime.errors.NotFound")] == [
        "NotFound"
    ]


def test_no_match_returns_empty_list() -> None:
    assert find_nodes_by_name_recursively(NODES, "doesNotExist") == []
    assert find_nodes_by_name_recursively(NODES, "Runtime.missing.deeper") == []
    assert find_nodes_by_name_recursively(NODES, "") == []


def test_nested_names_do_not_match_at_top_level() -> None:
    assert find_nodes_by_name_recursively(NODES, "cwd") == []
