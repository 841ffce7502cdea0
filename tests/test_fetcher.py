"""Tests for moddoc.fetcher."""

from __future__ import annotations

import io
from pathlib import Path
from urllib.error import HTTPError, URLError

import pytest

from moddoc import fetcher as fetcher_module
from moddoc.errors import LoadError
from moddoc.fetcher import File, FileFetcher
from moddoc.media_type import MediaType
from moddoc.specifier import ModuleSpecifier


class _FakeResponse:
    def __init__(self, body: bytes, url: str, headers: dict[str, str]) -> None:
        self._body = body
        self._url = url
        self.headers = headers

    def read(self) -> bytes:
        return self._body

    def geturl(self) -> str:
        return self._url

    def __enter__(self) -> "_FakeResponse":
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None


def test_fetch_reads_local_files_and_strips_bom(tmp_path: Path) -> None:
    module = tmp_path / "mod.ts"
    module.write_text("\ufeffexport const a = 1;\n", encoding="utf-8")
    fetcher = FileFetcher()

    file = fetcher.fetch(ModuleSpecifier.from_path(module))

    assert file is not None
    assert file.source == "export const a = 1;\n"
    assert file.media_type is MediaType.TYPESCRIPT
    assert file.local == module


def test_fetch_returns_none_for_missing_local_file(tmp_path: Path) -> None:
    assert FileFetcher().fetch(ModuleSpecifier.from_path(tmp_path / "missing.ts")) is None


def test_inserted_files_are_served_from_cache() -> None:
    fetcher = FileFetcher()
    specifier = ModuleSpecifier.parse("file:///virtual/$root.ts")
    fetcher.insert_cached(File(specifier=specifier, source="export {};", media_type=MediaType.TYPESCRIPT))

    file = fetcher.fetch(specifier)

    assert file is not None
    assert file.source == "export {};"
    assert fetcher.get_cached(specifier) is file


def test_fetch_remote_follows_redirects_and_lowercases_headers(monkeypatch) -> None:
    captured = {}

    def fake_urlopen(request, timeout):
        captured["url"] = request.full_url
        captured["timeout"] = timeout
        captured["agent"] = request.get_header("User-agent")
        return _FakeResponse(
            b"export function f(): void {}",
            "https://cdn.test/v2/mod.ts",
            {"Content-Type": "application/typescript; charset=utf-8", "X-TypeScript-Types": "./mod.d.ts"},
        )

    monkeypatch.setattr(fetcher_module, "urlopen", fake_urlopen)
    fetcher = FileFetcher(request_timeout=5.0, user_agent="moddoc-test")

    file = fetcher.fetch(ModuleSpecifier.parse("https://cdn.test/mod.ts"))

    assert file is not None
    assert str(file.specifier) == "https://cdn.test/v2/mod.ts"
    assert file.headers == {
        "content-type": "application/typescript; charset=utf-8",
        "x-typescript-types": "./mod.d.ts",
    }
    assert file.media_type is MediaType.TYPESCRIPT
    assert captured == {"url": "https://cdn.test/mod.ts", "timeout": 5.0, "agent": "moddoc-test"}


def test_fetch_remote_404_is_not_found(monkeypatch) -> None:
    def fake_urlopen(request, timeout):
        raise HTTPError(request.full_url, 404, "Not Found", {}, io.BytesIO(b""))

    monkeypatch.setattr(fetcher_module, "urlopen", fake_urlopen)

    assert FileFetcher().fetch(ModuleSpecifier.parse("https://cdn.test/missing.ts")) is None


def test_fetch_remote_errors_raise_load_error(monkeypatch) -> None:
    def fake_urlopen(request, timeout):
        raise URLError("connection refused")

    monkeypatch.setattr(fetcher_module, "urlopen", fake_urlopen)

    with pytest.raises(LoadError) as excinfo:
        FileFetcher().fetch(ModuleSpecifier.parse("https://cdn.test/mod.ts"))

    assert "connection refused" in str(excinfo.value)


def test_builtin_scheme_is_never_fetched() -> None:
    assert FileFetcher().fetch(ModuleSpecifier.parse("moddoc://lib.builtin.d.ts")) is None


def test_unsupported_scheme_raises() -> None:
    with pytest.raises(LoadError):
        FileFetcher().fetch(ModuleSpecifier.parse("data:text/plain,hello"))
