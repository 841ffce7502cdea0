"""Canonical module specifiers and the standard resolution rules."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional
from urllib.parse import urljoin, urlsplit, urlunsplit
from urllib.request import url2pathname

from .errors import InvalidRoot, InvalidSpecifier, ResolutionError

# Two or more scheme characters, so Windows drive letters are treated as paths.
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]+:")
_DEFAULT_PORTS = {"http": 80, "https": 443}
_HIERARCHICAL_SCHEMES = {"file", "http", "https"}
_RELATIVE_PREFIXES = ("/", "./", "../")


class ModuleSpecifier:
    """Immutable, canonical absolute module identifier.

    Two specifiers are equal when their canonical URL strings are equal; the
    string form is the only identity used by the module graph and doc tree.
    """

    __slots__ = ("_url", "_scheme")

    def __init__(self, url: str) -> None:
        self._url = url
        self._scheme = url.split(":", 1)[0]

    @classmethod
    def parse(cls, text: str) -> "ModuleSpecifier":
        """Parse an absolute URL into canonical form."""
        candidate = text.strip()
        if not _SCHEME_RE.match(candidate):
            raise InvalidSpecifier(text, None, f'Invalid URL "{text}": relative URL without a base')
        try:
            parts = urlsplit(candidate)
            port = parts.port
        except ValueError as exc:
            raise InvalidSpecifier(text, None, f'Invalid URL "{text}": {exc}') from exc

        scheme = parts.scheme.lower()
        netloc = parts.netloc
        path = parts.path
        if scheme in _DEFAULT_PORTS:
            host = parts.hostname
            if not host:
                raise InvalidSpecifier(text, None, f'Invalid URL "{text}": empty host')
            netloc = f"[{host}]" if ":" in host else host
            if port is not None and port != _DEFAULT_PORTS[scheme]:
                netloc = f"{netloc}:{port}"
            userinfo = parts.netloc.rpartition("@")[0] if "@" in parts.netloc else ""
            if userinfo:
                netloc = f"{userinfo}@{netloc}"
            path = path or "/"
        elif scheme == "file":
            netloc = netloc.lower()
            path = path or "/"
        if path.startswith("/"):
            path = _remove_dot_segments(path)
        return cls(urlunsplit((scheme, netloc, path, parts.query, parts.fragment)))

    @classmethod
    def from_path(cls, path: Path) -> "ModuleSpecifier":
        """Return the ``file://`` specifier for an absolute filesystem path."""
        return cls.parse(Path(os.path.normpath(path)).as_uri())

    @property
    def scheme(self) -> str:
        return self._scheme

    @property
    def path(self) -> str:
        return urlsplit(self._url).path

    def is_file(self) -> bool:
        return self._scheme == "file"

    def is_remote(self) -> bool:
        return self._scheme in ("http", "https")

    def to_path(self) -> Optional[Path]:
        """Filesystem path for ``file://`` specifiers, ``None`` otherwise."""
        if not self.is_file():
            return None
        return Path(url2pathname(self.path))

    def __str__(self) -> str:
        return self._url

    def __repr__(self) -> str:
        return f"ModuleSpecifier({self._url!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ModuleSpecifier):
            return self._url == other._url
        return NotImplemented

    def __lt__(self, other: "ModuleSpecifier") -> bool:
        return self._url < other._url

    def __hash__(self) -> int:
        return hash(self._url)


def _remove_dot_segments(path: str) -> str:
    output: list[str] = []
    segments = path.split("/")
    for index, segment in enumerate(segments[1:], start=1):
        last = index == len(segments) - 1
        if segment == ".":
            if last:
                output.append("")
            continue
        if segment == "..":
            if output:
                output.pop()
            if last:
                output.append("")
            continue
        output.append(segment)
    return "/" + "/".join(output)


def has_scheme(text: str) -> bool:
    return bool(_SCHEME_RE.match(text))


def is_relative_specifier(text: str) -> bool:
    return text.startswith(_RELATIVE_PREFIXES)


def resolve_import(specifier: str, referrer: ModuleSpecifier) -> ModuleSpecifier:
    """Resolve an import specifier relative to the module that contains it."""
    if is_relative_specifier(specifier):
        if referrer.scheme not in _HIERARCHICAL_SCHEMES:
            raise ResolutionError(
                specifier,
                str(referrer),
                f'Relative import path "{specifier}" cannot be resolved from a {referrer.scheme}: module',
            )
        joined = urljoin(str(referrer), specifier)
        try:
            return ModuleSpecifier.parse(joined)
        except InvalidSpecifier as exc:
            raise InvalidSpecifier(specifier, str(referrer), exc.reason) from exc
    if has_scheme(specifier):
        try:
            return ModuleSpecifier.parse(specifier)
        except InvalidSpecifier as exc:
            raise InvalidSpecifier(specifier, str(referrer), exc.reason) from exc
    raise ResolutionError(
        specifier,
        str(referrer),
        f'Relative import path "{specifier}" not prefixed with / or ./ or ../',
    )


def resolve_url_or_path(text: str, cwd: Optional[Path] = None) -> ModuleSpecifier:
    """Turn a CLI entry point (URL or local path) into a canonical specifier."""
    if not text or not text.strip():
        raise InvalidRoot(text, "empty specifier")
    if has_scheme(text):
        try:
            return ModuleSpecifier.parse(text)
        except InvalidSpecifier as exc:
            raise InvalidRoot(text, exc.reason) from exc
    path = Path(text).expanduser()
    if not path.is_absolute():
        path = (cwd or Path.cwd()) / path
    return ModuleSpecifier.from_path(path)


__all__ = [
    "ModuleSpecifier",
    "has_scheme",
    "is_relative_specifier",
    "resolve_import",
    "resolve_url_or_path",
]
