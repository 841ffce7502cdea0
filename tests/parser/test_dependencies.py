"""Tests for moddoc.parser dependency analysis."""

from __future__ import annotations

import textwrap

from moddoc.media_type import MediaType
from moddoc.parser import SourceParser, analyze_dependencies
from moddoc.specifier import ModuleSpecifier

SPECIFIER = ModuleSpecifier.parse("file:///project/mod.ts")


def _analyze(source: str, media_type: MediaType = MediaType.TYPESCRIPT):
    parsed = SourceParser().parse_module(SPECIFIER, textwrap.dedent(source).lstrip("\n"), media_type)
    return analyze_dependencies(parsed)


def test_static_imports_and_reexports() -> None:
    dependencies = _analyze(
        """
        import def, { a as b } from "./a.ts";
        import * as ns from "./ns.ts";
        import "./side-effect.ts";
        export { c } from "./c.ts";
        export * from "./d.ts";
        export * as e from "./e.ts";
        export const local = 1;
        """
    )

    assert [dep.specifier for dep in dependencies] == [
        "./a.ts",
        "./ns.ts",
        "./side-effect.ts",
        "./c.ts",
        "./d.ts",
        "./e.ts",
    ]
    assert [dep.kind for dep in dependencies] == ["import", "import", "import", "export", "export", "export"]
    assert dependencies[0].line == 1


def test_type_only_imports_and_require() -> None:
    dependencies = _analyze(
        """
        import type { T } from "./types.ts";
        import fs = require("./fs.ts");
        """
    )

    assert dependencies[0].is_type_only is True
    assert dependencies[1].kind == "require"
    assert dependencies[1].specifier == "./fs.ts"


def test_reference_directives_only_in_header() -> None:
    dependencies = _analyze(
        """
        /// <reference path="./globals.d.ts" />
        /// <reference types="./types.d.ts" />
        export const a = 1;
        /// <reference path="./ignored.d.ts" />
        """
    )

    assert [(dep.specifier, dep.kind) for dep in dependencies] == [
        ("./globals.d.ts", "reference"),
        ("./types.d.ts", "types"),
    ]


def test_dynamic_imports_need_literal_specifiers() -> None:
    dependencies = _analyze(
        """
        const name = "x";
        export async function load() {
          await import("./static.ts");
          await import(`./template.ts`);
          await import(`./${name}.ts`);
          await import(name);
        }
        """
    )

    assert [dep.specifier for dep in dependencies] == ["./static.ts", "./template.ts"]
    assert all(dep.is_dynamic for dep in dependencies)


def test_jsx_sources_parse_with_tsx_grammar() -> None:
    dependencies = _analyze(
        """
        import { h } from "./h.js";
        export const view = <div>hello</div>;
        """,
        MediaType.JSX,
    )

    assert [dep.specifier for dep in dependencies] == ["./h.js"]
