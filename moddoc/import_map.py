"""Import map parsing and resolution (``imports`` and ``scopes``)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urljoin

from .errors import ConfigError, ImportMapError, InvalidRoot, InvalidSpecifier
from .logging import get_logger
from .specifier import ModuleSpecifier, has_scheme, is_relative_specifier, resolve_url_or_path

_LOGGER = get_logger("import_map")

# Sorted (key, target) pairs, longest key first; a ``None`` target blocks the key.
SpecifierMap = List[Tuple[str, Optional[str]]]


@dataclass
class ImportMap:
    """Parsed import map, read-only for the duration of a run."""

    base_url: ModuleSpecifier
    imports: SpecifierMap = field(default_factory=list)
    scopes: List[Tuple[str, SpecifierMap]] = field(default_factory=list)

    @classmethod
    def from_json(cls, text: str, base_url: ModuleSpecifier) -> "ImportMap":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Import map {base_url} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Import map {base_url} must contain a JSON object")
        return cls.from_dict(data, base_url)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], base_url: ModuleSpecifier) -> "ImportMap":
        for key in data:
            if key not in ("imports", "scopes"):
                _LOGGER.warning("Import map %s: unknown top-level key %r ignored", base_url, key)

        raw_imports = data.get("imports", {})
        if not isinstance(raw_imports, dict):
            raise ConfigError('Import map "imports" must be a JSON object')
        imports = _parse_specifier_map(raw_imports, base_url)

        raw_scopes = data.get("scopes", {})
        if not isinstance(raw_scopes, dict):
            raise ConfigError('Import map "scopes" must be a JSON object')
        scopes: List[Tuple[str, SpecifierMap]] = []
        for scope_prefix, scope_imports in raw_scopes.items():
            if not isinstance(scope_imports, dict):
                raise ConfigError(f'Import map scope "{scope_prefix}" must be a JSON object')
            scope_url = urljoin(str(base_url), scope_prefix)
            try:
                normalized = str(ModuleSpecifier.parse(scope_url))
            except InvalidSpecifier:
                _LOGGER.warning("Import map: invalid scope prefix %r ignored", scope_prefix)
                continue
            scopes.append((normalized, _parse_specifier_map(scope_imports, base_url)))
        scopes.sort(key=lambda item: item[0], reverse=True)
        return cls(base_url=base_url, imports=imports, scopes=scopes)

    def lookup(self, specifier: str, referrer: ModuleSpecifier) -> Optional[ModuleSpecifier]:
        """Return the mapped specifier, ``None`` when the map has no entry.

        Raises :class:`ImportMapError` when an entry matches but refuses the
        specifier (a ``null`` target or a prefix match that backtracks).
        """
        normalized = _normalize_specifier_key(specifier, referrer) or specifier
        referrer_url = str(referrer)
        for scope_prefix, scope_imports in self.scopes:
            if scope_prefix == referrer_url or (
                scope_prefix.endswith("/") and referrer_url.startswith(scope_prefix)
            ):
                resolved = _resolve_imports_match(normalized, scope_imports, specifier, referrer)
                if resolved is not None:
                    return resolved
        return _resolve_imports_match(normalized, self.imports, specifier, referrer)


def load_import_map(location: str, fetcher: Any = None, cwd: Optional[Path] = None) -> ImportMap:
    """Read and parse an import map from a local path or URL."""
    try:
        specifier = resolve_url_or_path(location, cwd)
    except InvalidRoot as exc:
        raise ConfigError(f"Invalid import map location {location!r}: {exc.reason}") from exc
    if fetcher is not None:
        file = fetcher.fetch(specifier)
        if file is None:
            raise ConfigError(f"Import map not found: {specifier}")
        text = file.source
    else:
        path = specifier.to_path()
        if path is None:
            raise ConfigError(f"Import map {specifier} requires a fetcher to load")
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Unable to read import map {path}: {exc}") from exc
    _LOGGER.debug("Loaded import map from %s", specifier)
    return ImportMap.from_json(text, specifier)


def _parse_specifier_map(raw: Mapping[str, Any], base_url: ModuleSpecifier) -> SpecifierMap:
    entries: Dict[str, Optional[str]] = {}
    for key, value in raw.items():
        normalized_key = _normalize_specifier_key(key, base_url)
        if normalized_key is None:
            _LOGGER.warning("Import map: invalid specifier key %r ignored", key)
            continue
        if not isinstance(value, str):
            _LOGGER.warning("Import map: target for %r must be a string", key)
            entries[normalized_key] = None
            continue
        target = _parse_target(value, base_url)
        if target is None:
            _LOGGER.warning("Import map: invalid target %r for %r", value, key)
        elif key.endswith("/") and not target.endswith("/"):
            _LOGGER.warning("Import map: target %r for package prefix %r must end with '/'", value, key)
            target = None
        entries[normalized_key] = target
    return sorted(entries.items(), key=lambda item: item[0], reverse=True)


def _normalize_specifier_key(key: str, base: ModuleSpecifier) -> Optional[str]:
    if not key:
        return None
    if is_relative_specifier(key):
        try:
            return str(ModuleSpecifier.parse(urljoin(str(base), key)))
        except InvalidSpecifier:
            return None
    if has_scheme(key):
        try:
            return str(ModuleSpecifier.parse(key))
        except InvalidSpecifier:
            return key
    return key


def _parse_target(value: str, base: ModuleSpecifier) -> Optional[str]:
    if is_relative_specifier(value):
        candidate = urljoin(str(base), value)
    elif has_scheme(value):
        candidate = value
    else:
        return None
    try:
        parsed = str(ModuleSpecifier.parse(candidate))
    except InvalidSpecifier:
        return None
    if value.endswith("/") and not parsed.endswith("/"):
        parsed += "/"
    return parsed


def _resolve_imports_match(
    normalized: str,
    specifier_map: SpecifierMap,
    specifier: str,
    referrer: ModuleSpecifier,
) -> Optional[ModuleSpecifier]:
    for key, target in specifier_map:
        if key == normalized:
            if target is None:
                raise ImportMapError(specifier, str(referrer), f'Import map entry for "{key}" is blocked (null)')
            return ModuleSpecifier.parse(target)
        if key.endswith("/") and normalized.startswith(key):
            if target is None:
                raise ImportMapError(specifier, str(referrer), f'Import map entry for "{key}" is blocked (null)')
            after_prefix = normalized[len(key):]
            resolved = urljoin(target, after_prefix)
            if not resolved.startswith(target):
                raise ImportMapError(
                    specifier,
                    str(referrer),
                    f'Import "{specifier}" backtracks above its prefix "{key}"',
                )
            return ModuleSpecifier.parse(resolved)
    return None


__all__ = ["ImportMap", "load_import_map"]
