"""Loader capability and its two variants."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Dict, Optional, Protocol

from ..fetcher import FileFetcher
from ..specifier import ModuleSpecifier


@dataclass
class LoadResponse:
    """Source returned by a loader; ``specifier`` is the final (redirected) one."""

    specifier: ModuleSpecifier
    content: str
    headers: Optional[Dict[str, str]] = None


class Loader(Protocol):
    """Anything that can asynchronously load a module's source.

    Returns ``None`` when the module does not exist and raises
    :class:`~moddoc.errors.LoadError` for I/O failures.
    """

    async def load(self, specifier: ModuleSpecifier, is_dynamic: bool) -> Optional[LoadResponse]:
        ...


class StubLoader:
    """Never performs I/O; every specifier is reported as not found."""

    async def load(self, specifier: ModuleSpecifier, is_dynamic: bool) -> Optional[LoadResponse]:
        return None


class DocLoader:
    """Loads modules through the file fetcher, off the event loop."""

    def __init__(self, fetcher: FileFetcher) -> None:
        self._fetcher = fetcher

    async def load(self, specifier: ModuleSpecifier, is_dynamic: bool) -> Optional[LoadResponse]:
        file = await asyncio.to_thread(self._fetcher.fetch, specifier)
        if file is None:
            return None
        return LoadResponse(
            specifier=file.specifier,
            content=file.source,
            headers=file.headers,
        )


__all__ = ["DocLoader", "LoadResponse", "Loader", "StubLoader"]
