"""CLI behaviour tests."""

from __future__ import annotations

import json

import pytest

from moddoc.cli import _build_parser, main


@pytest.fixture
def project(module_builder, monkeypatch):
    module_builder.write(
        {
            ".moddoc.yml": "color: never\n",
            "mod.ts": "/** Say hello. */\nexport function greet(name: string): string {\n  return name;\n}\n",
        }
    )
    monkeypatch.chdir(module_builder.path())
    return module_builder


def test_cli_accepts_documented_flags() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        ["mod.ts", "--json", "--private", "--filter", "greet", "--import-map", "map.json", "--unstable", "-v"]
    )

    assert args.source_file == "mod.ts"
    assert args.json is True
    assert args.private is True
    assert args.filter_option == "greet"
    assert args.import_map == "map.json"
    assert args.unstable is True
    assert args.verbose is True


def test_cli_prints_text_docs(project, capsys) -> None:
    main(["mod.ts"])

    out = capsys.readouterr().out
    assert "Defined in file://" in out
    assert "function greet(name: string): string" in out
    assert "Say hello." in out


def test_cli_prints_json_docs(project, capsys) -> None:
    main(["mod.ts", "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert payload[0]["name"] == "greet"
    assert payload[0]["location"]["specifier"].endswith("mod.ts")


def test_cli_filter_not_found_exits_non_zero(project, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["mod.ts", "doesNotExist"])

    captured = capsys.readouterr()
    assert excinfo.value.code == 1
    assert captured.out == ""
    assert "Node doesNotExist was not found!" in captured.err


def test_cli_reports_generation_failures(project, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["missing.ts"])

    assert excinfo.value.code == 1
    assert "Unable to generate documentation" in capsys.readouterr().err


def test_cli_builtin_with_filter(project, capsys) -> None:
    main(["--builtin", "Runtime.cwd"])

    out = capsys.readouterr().out
    assert "function cwd(): string" in out
    assert out.count("Defined in moddoc://lib.builtin.d.ts") == 1


def test_cli_reports_config_errors(module_builder, monkeypatch, capsys) -> None:
    module_builder.write({".moddoc.yml": "color: rainbow\n"})
    monkeypatch.chdir(module_builder.path())

    with pytest.raises(SystemExit) as excinfo:
        main(["--builtin"])

    assert excinfo.value.code == 1
    assert "color must be one of" in capsys.readouterr().err
