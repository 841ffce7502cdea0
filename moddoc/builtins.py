"""Bundled declarations for the runtime's built-in APIs."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from .specifier import ModuleSpecifier

TYPINGS_DIR = Path(__file__).with_name("typings")

BUILTIN_SPECIFIER = "moddoc://lib.builtin.d.ts"


def builtin_specifier() -> ModuleSpecifier:
    return ModuleSpecifier.parse(BUILTIN_SPECIFIER)


@lru_cache(maxsize=2)
def get_types(unstable: bool = False) -> str:
    """Return the built-in declaration source, with unstable APIs appended on request."""
    types = (TYPINGS_DIR / "lib.builtin.d.ts").read_text(encoding="utf-8")
    if unstable:
        unstable_types = (TYPINGS_DIR / "lib.unstable.d.ts").read_text(encoding="utf-8")
        types = f"{types}\n{unstable_types}"
    return types


__all__ = ["BUILTIN_SPECIFIER", "TYPINGS_DIR", "builtin_specifier", "get_types"]
