"""End-to-end tests for moddoc.orchestrator."""

from __future__ import annotations

import asyncio
import io
import json

import pytest

from moddoc.config import ModdocConfig
from moddoc.doc import DocNodeKind
from moddoc.errors import DocGenerationError, FilterNotFound, InvalidRoot
from moddoc.orchestrator import Orchestrator


def _orchestrator(module_builder, **overrides) -> Orchestrator:
    config = ModdocConfig(root=module_builder.path(), color="never", **overrides)
    return Orchestrator(config=config, cwd=module_builder.path())


def test_documents_greet_with_summary(module_builder) -> None:
    module_builder.write(
        {
            "mod.ts": """
                /** Say hello to someone. */
                export function greet(name: string): string {
                  return `hello ${name}`;
                }
            """
        }
    )
    orchestrator = _orchestrator(module_builder)

    nodes = asyncio.run(orchestrator.generate("./mod.ts"))

    assert [(node.name, node.kind) for node in nodes] == [("greet", DocNodeKind.FUNCTION)]
    assert nodes[0].js_doc.summary == "Say hello to someone."

    stream = io.StringIO()
    orchestrator.print_docs("./mod.ts", as_json=True, stream=stream)
    payload = json.loads(stream.getvalue())
    assert payload[0]["name"] == "greet"
    assert payload[0]["location"]["specifier"].endswith("mod.ts")
    assert payload[0]["jsDoc"]["summary"] == "Say hello to someone."


def test_filter_finds_reexported_symbol_at_its_declaration(module_builder) -> None:
    module_builder.write(
        {
            "mod.ts": 'export { util } from "./lib.ts";\nexport const other = 1;\n',
            "lib.ts": "/** A utility. */\nexport function util(): void {}\n",
        }
    )
    orchestrator = _orchestrator(module_builder)
    nodes = asyncio.run(orchestrator.generate("mod.ts"))

    text = orchestrator.render(nodes, filter_name="util")

    assert text.count("Defined in") == 1
    assert f"Defined in {module_builder.specifier('lib.ts')}:2:0" in text
    assert "function util(): void" in text
    assert "other" not in text


def test_missing_filter_raises_and_writes_nothing(module_builder) -> None:
    module_builder.write({"mod.ts": "export const a = 1;\n"})
    orchestrator = _orchestrator(module_builder)
    stream = io.StringIO()

    with pytest.raises(FilterNotFound) as excinfo:
        orchestrator.print_docs("mod.ts", filter_name="doesNotExist", stream=stream)

    assert str(excinfo.value) == "Node doesNotExist was not found!"
    assert stream.getvalue() == ""


def test_imports_appear_in_json_but_not_in_text(module_builder) -> None:
    module_builder.write(
        {
            "mod.ts": 'import { dep } from "./dep.ts";\nexport const a = dep;\n',
            "dep.ts": "export const dep = 1;\n",
        }
    )
    orchestrator = _orchestrator(module_builder)

    json_stream = io.StringIO()
    orchestrator.print_docs("mod.ts", as_json=True, stream=json_stream)
    payload = json.loads(json_stream.getvalue())

    assert [(entry["name"], entry["kind"]) for entry in payload] == [("a", "variable"), ("dep", "import")]
    assert payload[1]["importDef"]["src"] == str(module_builder.specifier("dep.ts"))
    assert payload[1]["location"]["specifier"].endswith("mod.ts")

    text_stream = io.StringIO()
    orchestrator.print_docs("mod.ts", stream=text_stream)
    text = text_stream.getvalue()

    assert text.count("Defined in") == 1
    assert "const a" in text
    assert "dep" not in text


def test_missing_root_module_fails_generation(module_builder) -> None:
    orchestrator = _orchestrator(module_builder)

    with pytest.raises(DocGenerationError):
        asyncio.run(orchestrator.generate("missing.ts"))


def test_invalid_root_raises_before_io(module_builder) -> None:
    orchestrator = _orchestrator(module_builder)

    with pytest.raises(InvalidRoot):
        asyncio.run(orchestrator.generate("https://"))


def test_import_map_resolves_bare_reexports(module_builder) -> None:
    module_builder.write(
        {
            "import_map.json": json.dumps({"imports": {"shared": "./vendor/shared.ts"}}),
            "mod.ts": 'export * from "shared";\n',
            "vendor/shared.ts": "export class Shared {}\n",
        }
    )
    orchestrator = _orchestrator(module_builder)

    nodes = asyncio.run(orchestrator.generate("mod.ts", import_map="import_map.json"))

    assert [node.name for node in nodes] == ["Shared"]
    assert nodes[0].location.specifier == str(module_builder.specifier("vendor/shared.ts"))


def test_config_private_flag_includes_private_members(module_builder) -> None:
    module_builder.write({"mod.ts": "export class A {\n  private secret = 1;\n}\nfunction hidden() {}\n"})
    orchestrator = _orchestrator(module_builder, private=True)

    nodes = asyncio.run(orchestrator.generate("mod.ts"))

    assert {node.name for node in nodes} == {"A", "hidden"}
    text = orchestrator.render(nodes)
    assert "secret" in text
