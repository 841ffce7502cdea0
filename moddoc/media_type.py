"""Media type detection from specifiers and transport headers."""

from __future__ import annotations

from enum import Enum
from typing import Mapping, Optional

from .specifier import ModuleSpecifier


class MediaType(str, Enum):
    """Classifies a module's content and how it should be parsed."""

    TYPESCRIPT = "TypeScript"
    TSX = "TSX"
    DTS = "Dts"
    JAVASCRIPT = "JavaScript"
    JSX = "JSX"
    JSON = "Json"
    WASM = "Wasm"
    UNKNOWN = "Unknown"

    @property
    def is_declaration(self) -> bool:
        return self is MediaType.DTS

    @property
    def is_parsable(self) -> bool:
        return self in _PARSABLE

    @property
    def uses_jsx(self) -> bool:
        return self in (MediaType.TSX, MediaType.JSX, MediaType.JAVASCRIPT)

    @classmethod
    def from_specifier(cls, specifier: ModuleSpecifier) -> "MediaType":
        return cls.from_path(specifier.path)

    @classmethod
    def from_path(cls, path: str) -> "MediaType":
        lower = path.lower()
        for suffix in _DECLARATION_SUFFIXES:
            if lower.endswith(suffix):
                return cls.DTS
        _, dot, extension = lower.rpartition(".")
        if not dot:
            return cls.UNKNOWN
        return _EXTENSIONS.get(extension, cls.UNKNOWN)

    @classmethod
    def from_specifier_and_headers(
        cls,
        specifier: ModuleSpecifier,
        headers: Optional[Mapping[str, str]] = None,
    ) -> "MediaType":
        """Prefer the ``content-type`` header, falling back to the path."""
        content_type = None
        if headers:
            content_type = headers.get("content-type")
        if content_type:
            return cls.from_content_type(specifier, content_type)
        return cls.from_specifier(specifier)

    @classmethod
    def from_content_type(cls, specifier: ModuleSpecifier, content_type: str) -> "MediaType":
        mime = content_type.split(";", 1)[0].strip().lower()
        if mime in _TYPESCRIPT_TYPES:
            path_type = cls.from_specifier(specifier)
            if path_type in (cls.DTS, cls.TSX):
                return path_type
            return cls.TYPESCRIPT
        if mime in _JAVASCRIPT_TYPES:
            if cls.from_specifier(specifier) is cls.JSX:
                return cls.JSX
            return cls.JAVASCRIPT
        if mime == "text/jsx":
            return cls.JSX
        if mime == "text/tsx":
            return cls.TSX
        if mime in _JSON_TYPES:
            return cls.JSON
        if mime == "application/wasm":
            return cls.WASM
        if mime in _PATH_FALLBACK_TYPES:
            return cls.from_specifier(specifier)
        return cls.UNKNOWN


_DECLARATION_SUFFIXES = (".d.ts", ".d.mts", ".d.cts")

_EXTENSIONS = {
    "ts": MediaType.TYPESCRIPT,
    "mts": MediaType.TYPESCRIPT,
    "cts": MediaType.TYPESCRIPT,
    "tsx": MediaType.TSX,
    "js": MediaType.JAVASCRIPT,
    "mjs": MediaType.JAVASCRIPT,
    "cjs": MediaType.JAVASCRIPT,
    "jsx": MediaType.JSX,
    "json": MediaType.JSON,
    "wasm": MediaType.WASM,
}

_TYPESCRIPT_TYPES = {
    "application/typescript",
    "text/typescript",
    "video/vnd.dlna.mpeg-tts",
    "video/mp2t",
    "application/x-typescript",
}

_JAVASCRIPT_TYPES = {
    "application/javascript",
    "text/javascript",
    "application/ecmascript",
    "text/ecmascript",
    "application/x-javascript",
    "application/node",
}

_JSON_TYPES = {"application/json", "text/json"}

_PATH_FALLBACK_TYPES = {"text/plain", "application/octet-stream"}

_PARSABLE = {
    MediaType.TYPESCRIPT,
    MediaType.TSX,
    MediaType.DTS,
    MediaType.JAVASCRIPT,
    MediaType.JSX,
}


__all__ = ["MediaType"]
