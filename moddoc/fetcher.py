"""Source fetching for local and remote modules with an in-memory cache."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from .errors import InvalidSpecifier, LoadError
from .logging import get_logger
from .media_type import MediaType
from .specifier import ModuleSpecifier

_LOGGER = get_logger("fetcher")


@dataclass
class File:
    """A fetched (or synthesized) module source."""

    specifier: ModuleSpecifier
    source: str
    media_type: MediaType
    headers: Optional[Dict[str, str]] = None
    local: Optional[Path] = None


class FileFetcher:
    """Retrieves module sources from disk or over HTTP(S).

    Results are cached per run so that a module requested by several
    referrers is read once, and callers may seed synthetic modules with
    :meth:`insert_cached`.
    """

    DEFAULT_USER_AGENT = "moddoc"

    def __init__(
        self,
        *,
        request_timeout: float = 60.0,
        user_agent: str | None = None,
    ) -> None:
        self.request_timeout = request_timeout
        self.user_agent = user_agent or self.DEFAULT_USER_AGENT
        self._cache: Dict[ModuleSpecifier, File] = {}
        self._lock = threading.Lock()

    def insert_cached(self, file: File) -> None:
        with self._lock:
            self._cache[file.specifier] = file

    def get_cached(self, specifier: ModuleSpecifier) -> Optional[File]:
        with self._lock:
            return self._cache.get(specifier)

    def fetch(self, specifier: ModuleSpecifier) -> Optional[File]:
        """Return the module source, ``None`` when it does not exist.

        Raises :class:`LoadError` for any other failure.
        """
        cached = self.get_cached(specifier)
        if cached is not None:
            return cached

        if specifier.is_file():
            file = self._fetch_local(specifier)
        elif specifier.is_remote():
            file = self._fetch_remote(specifier)
        elif specifier.scheme == "moddoc":
            # Built-in declarations are supplied out of band, never fetched.
            return None
        else:
            raise LoadError(str(specifier), f"Unsupported scheme \"{specifier.scheme}\"")

        if file is not None:
            with self._lock:
                self._cache[specifier] = file
                self._cache.setdefault(file.specifier, file)
        return file

    def _fetch_local(self, specifier: ModuleSpecifier) -> Optional[File]:
        path = specifier.to_path()
        assert path is not None
        try:
            source = path.read_text(encoding="utf-8")
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            _LOGGER.debug("Local module not found: %s", path)
            return None
        except UnicodeDecodeError as exc:
            raise LoadError(str(specifier), f"Module is not valid UTF-8 ({exc.reason})") from exc
        except OSError as exc:
            raise LoadError(str(specifier), f"Unable to read module ({exc.strerror or exc})") from exc
        return File(
            specifier=specifier,
            source=_strip_bom(source),
            media_type=MediaType.from_specifier(specifier),
            local=path,
        )

    def _fetch_remote(self, specifier: ModuleSpecifier) -> Optional[File]:
        request = Request(
            str(specifier),
            headers={"User-Agent": self.user_agent, "Accept": "*/*"},
            method="GET",
        )
        try:
            with urlopen(request, timeout=self.request_timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
                final_url = response.geturl() or str(specifier)
                headers = {key.lower(): value for key, value in response.headers.items()}
        except HTTPError as exc:
            if exc.code == 404:
                _LOGGER.debug("Remote module not found: %s", specifier)
                return None
            raise LoadError(str(specifier), f"Import failed with HTTP status {exc.code}") from exc
        except URLError as exc:
            raise LoadError(str(specifier), f"Import failed: {exc.reason}") from exc

        try:
            final = ModuleSpecifier.parse(final_url)
        except InvalidSpecifier as exc:
            raise LoadError(str(specifier), f"Redirected to an invalid URL {final_url!r}") from exc
        if final != specifier:
            _LOGGER.debug("Redirect %s -> %s", specifier, final)

        charset = _charset(headers.get("content-type")) or "utf-8"
        try:
            source = raw.decode(charset)
        except (LookupError, UnicodeDecodeError) as exc:
            raise LoadError(str(specifier), f"Unable to decode module as {charset}") from exc

        return File(
            specifier=final,
            source=_strip_bom(source),
            media_type=MediaType.from_specifier_and_headers(final, headers),
            headers=headers,
        )


def _charset(content_type: Optional[str]) -> Optional[str]:
    if not content_type:
        return None
    for part in content_type.split(";")[1:]:
        key, _, value = part.strip().partition("=")
        if key.lower() == "charset" and value:
            return value.strip('"')
    return None


def _strip_bom(source: str) -> str:
    return source[1:] if source.startswith("\ufeff") else source


__all__ = ["File", "FileFetcher"]
