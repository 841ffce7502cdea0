"""Exception taxonomy shared by the graph, doc and CLI layers."""

from __future__ import annotations

from typing import Optional


class ModdocError(Exception):
    """Base class for every error raised by moddoc."""


class ConfigError(ModdocError):
    """Raised when a configuration or import map file cannot be parsed."""


class InvalidRoot(ModdocError):
    """Raised when the documentation root cannot be turned into a specifier."""

    def __init__(self, root: str, reason: str) -> None:
        super().__init__(f'Invalid root "{root}": {reason}')
        self.root = root
        self.reason = reason


class ModuleGraphError(ModdocError):
    """Errors that are recorded inside a module graph instead of raised."""


class ResolutionError(ModuleGraphError):
    """A dependency specifier could not be mapped to a module specifier."""

    def __init__(self, specifier: str, referrer: Optional[str], reason: str) -> None:
        message = reason
        if referrer:
            message = f"{reason}\n    from {referrer}"
        super().__init__(message)
        self.specifier = specifier
        self.referrer = referrer
        self.reason = reason


class InvalidSpecifier(ResolutionError):
    """The specifier text is not a valid absolute or relative URL."""


class ImportMapError(ResolutionError):
    """An import map entry explicitly refused to resolve the specifier."""


class LoadError(ModuleGraphError):
    """A module's source could not be loaded (missing or I/O failure)."""

    def __init__(self, specifier: str, reason: str, *, missing: bool = False) -> None:
        super().__init__(f"{reason}: {specifier}")
        self.specifier = specifier
        self.reason = reason
        self.missing = missing


class DocGenerationError(ModdocError):
    """Documentation extraction reached a module it could not document."""

    def __init__(self, specifier: str, cause: BaseException | str) -> None:
        super().__init__(f"Unable to generate documentation for {specifier}: {cause}")
        self.specifier = specifier
        self.cause = cause


class FilterNotFound(ModdocError):
    """A name filter matched no documentation nodes."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Node {name} was not found!")
        self.name = name


__all__ = [
    "ConfigError",
    "DocGenerationError",
    "FilterNotFound",
    "ImportMapError",
    "InvalidRoot",
    "InvalidSpecifier",
    "LoadError",
    "ModdocError",
    "ModuleGraphError",
    "ResolutionError",
]
