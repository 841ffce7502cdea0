"""Tests for moddoc.graph.loader."""

from __future__ import annotations

import asyncio
from pathlib import Path

from moddoc.fetcher import FileFetcher
from moddoc.graph import DocLoader, StubLoader, create_graph
from moddoc.specifier import ModuleSpecifier


def test_stub_loader_never_finds_anything() -> None:
    result = asyncio.run(StubLoader().load(ModuleSpecifier.parse("moddoc://lib.builtin.d.ts"), False))

    assert result is None


def test_doc_loader_reads_through_fetcher(module_builder) -> None:
    module_builder.write({"mod.ts": "export const answer = 42;\n"})
    loader = DocLoader(FileFetcher())

    response = asyncio.run(loader.load(module_builder.specifier("mod.ts"), False))

    assert response is not None
    assert response.specifier == module_builder.specifier("mod.ts")
    assert response.content == "export const answer = 42;\n"


def test_doc_loader_reports_missing_files_as_none(tmp_path: Path) -> None:
    loader = DocLoader(FileFetcher())

    assert asyncio.run(loader.load(ModuleSpecifier.from_path(tmp_path / "nope.ts"), False)) is None


def test_graph_over_local_files(module_builder) -> None:
    module_builder.write(
        {
            "mod.ts": 'export * from "./lib/a.ts";\n',
            "lib/a.ts": 'import { b } from "./b.ts";\nexport const a = b;\n',
            "lib/b.ts": "export const b = 1;\n",
        }
    )

    graph = asyncio.run(create_graph(module_builder.specifier("mod.ts"), DocLoader(FileFetcher())))

    assert len(graph) == 3
    assert list(graph.errors()) == []
