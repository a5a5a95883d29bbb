"""
Translation store
=================

The store owns the locale files. The pipeline only asks it questions
(is this key taken, does this text already have a key, which file should new
keys go to) and hands it records to persist.

`JsonLocaleStore` supports the two common vue-i18n/i18next layouts:

    locales/en.json              one file per locale
    locales/en/common.json       one directory per locale, one file per namespace
"""

from __future__ import annotations

import inspect
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple, Union

from ..utils.encoding import decode_bytes
from .exceptions import StoreError
from .models import TranslationRecord

# chooser(keypath, candidate_files) -> chosen file, None to abort
FileChooser = Callable[[str, List[Path]], Union[Optional[Path], Awaitable[Optional[Path]]]]


class TranslationStore(ABC):
    @abstractmethod
    def search_key_by_value(self, text: str, locale: Optional[str] = None) -> Optional[str]: ...

    @abstractmethod
    def key_exists(self, key: str, locale: Optional[str] = None) -> bool: ...

    @abstractmethod
    def write_entries(self, records: Iterable[TranslationRecord]) -> bool: ...

    @abstractmethod
    async def resolve_target_file(self, keypath: str, locale: str,
                                  chooser: Optional[FileChooser] = None) -> Optional[Path]: ...

    def invalidate(self) -> None:
        """Drop cached state so the next query re-reads the backing files."""


def flatten(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    flat: Dict[str, Any] = {}
    for name, value in data.items():
        path = f"{prefix}.{name}" if prefix else str(name)
        if isinstance(value, dict):
            flat.update(flatten(value, path))
        else:
            flat[path] = value
    return flat


def set_nested(data: Dict[str, Any], keypath: str, value: Any) -> None:
    """Store `value` under a dotted keypath, creating intermediate objects.

    Falls back to a flat key when a prefix of the path already holds a
    plain value.
    """
    parts = keypath.split(".")
    node = data
    for index, part in enumerate(parts[:-1]):
        child = node.get(part)
        if child is None:
            child = node[part] = {}
        elif not isinstance(child, dict):
            node[".".join(parts[index:])] = value
            return
        node = child
    node[parts[-1]] = value


class JsonLocaleStore(TranslationStore):
    def __init__(self, root: Union[str, Path], default_locale: str = "en", indent: int = 2):
        self.root = Path(root)
        self.default_locale = default_locale
        self.indent = indent
        self.logger = logging.getLogger(__name__)
        # locale -> keypath -> (value, file)
        self._cache: Optional[Dict[str, Dict[str, Tuple[Any, Path]]]] = None

    # --- Files ------------------------------------------------------------

    def locale_files(self, locale: str) -> List[Path]:
        files = []
        single = self.root / f"{locale}.json"
        if single.is_file():
            files.append(single)
        locale_dir = self.root / locale
        if locale_dir.is_dir():
            files.extend(sorted(locale_dir.glob("*.json")))
        return files

    def locales(self) -> List[str]:
        if not self.root.is_dir():
            return []
        found = {p.stem for p in self.root.glob("*.json")}
        found.update(p.name for p in self.root.iterdir() if p.is_dir() and any(p.glob("*.json")))
        return sorted(found)

    def _is_namespace_file(self, path: Path, locale: str) -> bool:
        return path.parent.name == locale and path.parent.parent == self.root

    def _read_json(self, path: Path) -> Dict[str, Any]:
        if not path.is_file():
            return {}
        try:
            text, _enc = decode_bytes(path.read_bytes())
            data = json.loads(text) if text.strip() else {}
        except (OSError, ValueError) as e:
            raise StoreError(f"Could not read locale file {path}: {e}") from e
        if not isinstance(data, dict):
            raise StoreError(f"Locale file {path} must contain a JSON object")
        return data

    def _load(self) -> Dict[str, Dict[str, Tuple[Any, Path]]]:
        if self._cache is not None:
            return self._cache
        cache: Dict[str, Dict[str, Tuple[Any, Path]]] = {}
        for locale in self.locales():
            entries: Dict[str, Tuple[Any, Path]] = {}
            for path in self.locale_files(locale):
                prefix = path.stem if self._is_namespace_file(path, locale) else ""
                for keypath, value in flatten(self._read_json(path), prefix).items():
                    entries.setdefault(keypath, (value, path))
            cache[locale] = entries
        self.logger.debug(f"Loaded {sum(len(v) for v in cache.values())} key(s) from {self.root}")
        self._cache = cache
        return cache

    # --- Queries ----------------------------------------------------------

    def search_key_by_value(self, text: str, locale: Optional[str] = None) -> Optional[str]:
        entries = self._load().get(locale or self.default_locale, {})
        for keypath, (value, _path) in entries.items():
            if value == text:
                return keypath
        return None

    def key_exists(self, key: str, locale: Optional[str] = None) -> bool:
        cache = self._load()
        if locale is not None:
            return key in cache.get(locale, {})
        return any(key in entries for entries in cache.values())

    def get(self, key: str, locale: Optional[str] = None) -> Optional[Any]:
        entry = self._load().get(locale or self.default_locale, {}).get(key)
        return entry[0] if entry else None

    async def resolve_target_file(self, keypath: str, locale: str,
                                  chooser: Optional[FileChooser] = None) -> Optional[Path]:
        candidates = self.locale_files(locale)
        if not candidates:
            return self.root / f"{locale}.json"

        namespace = keypath.split(".", 1)[0]
        for path in candidates:
            if self._is_namespace_file(path, locale) and path.stem == namespace:
                return path

        if len(candidates) == 1 or chooser is None:
            return candidates[0]

        choice = chooser(keypath, candidates)
        if inspect.isawaitable(choice):
            choice = await choice
        return Path(choice) if choice else None

    # --- Persistence ------------------------------------------------------

    def write_entries(self, records: Iterable[TranslationRecord]) -> bool:
        grouped: Dict[Path, List[TranslationRecord]] = {}
        for record in records:
            target = Path(record.target_file) if record.target_file else self.root / f"{record.locale}.json"
            grouped.setdefault(target, []).append(record)

        for path, items in grouped.items():
            data = self._read_json(path)
            for record in items:
                keypath = record.keypath
                if self._is_namespace_file(path, record.locale) and keypath.startswith(path.stem + "."):
                    keypath = keypath[len(path.stem) + 1:]
                set_nested(data, keypath, record.value)
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                with open(path, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=self.indent, ensure_ascii=False)
                    f.write("\n")
            except OSError as e:
                raise StoreError(f"Could not write locale file {path}: {e}") from e
            self.logger.info(f"Wrote {len(items)} key(s) to {path}")

        self.invalidate()
        return True

    def invalidate(self) -> None:
        self._cache = None
