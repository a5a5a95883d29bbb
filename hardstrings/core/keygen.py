"""
Key generation
==============

Turns a detected string into a translation key. The strategy decides the
shape of the key (slug, random id, verbatim text, translated slug); prefix,
file-name placeholders and case style are applied afterwards and the result
is disambiguated against the keys of the current batch and of the store.
"""

from __future__ import annotations

import asyncio
import logging
import re
import unicodedata
import uuid
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Set, Tuple, Union

from pypinyin import lazy_pinyin

from .retry import RetryPolicy
from .settings import ExtractionSettings

DEFAULT_KEY = "key"
ESCAPE_CHAR = "$"

HAN_RE = re.compile(r'[\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff]')
SLUG_WORD_RE = re.compile(r'[a-z0-9]+')
CAMEL_BOUNDARY_RE = re.compile(r'([a-z0-9])([A-Z])')
WORD_SPLIT_RE = re.compile(r'[\W_]+')


def transliterate(text: str) -> str:
    """Best-effort ASCII rendering of `text`.

    Han characters become pinyin syllables, accented letters lose their
    marks, anything else without an ASCII form is dropped.
    """
    if HAN_RE.search(text):
        text = " ".join(lazy_pinyin(text))
    normalized = unicodedata.normalize("NFKD", text)
    return normalized.encode("ascii", "ignore").decode("ascii")


def slugify(text: str, delimiter: str = "-") -> str:
    words = SLUG_WORD_RE.findall(transliterate(text).lower())
    return delimiter.join(words)


def _words(segment: str) -> list:
    spaced = CAMEL_BOUNDARY_RE.sub(r'\1 \2', segment)
    return [w for w in WORD_SPLIT_RE.split(spaced) if w]


def _change_segment_case(segment: str, style: str) -> str:
    words = _words(segment)
    if not words:
        return segment
    if style == "kebab-case":
        return "-".join(w.lower() for w in words)
    if style == "snake_case":
        return "_".join(w.lower() for w in words)
    if style == "ALL_CAPS":
        return "_".join(w.upper() for w in words)
    if style == "camelCase":
        return words[0].lower() + "".join(w[:1].upper() + w[1:].lower() for w in words[1:])
    if style == "PascalCase":
        return "".join(w[:1].upper() + w[1:].lower() for w in words)
    return segment


def change_case(key: str, style: str = "default") -> str:
    """Apply a case style to every dot-separated segment of a keypath."""
    if not style or style == "default":
        return key
    return ".".join(_change_segment_case(segment, style) for segment in key.split("."))


class UsedKeys:
    """Keys minted during one batch.

    Checking a candidate and registering it happen under one lock so that
    concurrent workers never pick the same key.
    """

    def __init__(self, keys: Iterable[str] = ()):
        self._keys: Set[str] = set(keys)
        self._lock = asyncio.Lock()

    def __contains__(self, key: str) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._keys))

    async def register(self, key: str):
        async with self._lock:
            self._keys.add(key)

    async def reserve(self, base: str, exists: Callable[[str], bool], delimiter: str = "-") -> str:
        """Return the first free candidate of `base`, `base-0`, `base-1`, ...
        and register it."""
        async with self._lock:
            candidate = base
            index = 0
            while candidate in self._keys or exists(candidate):
                candidate = f"{base}{delimiter}{index}"
                index += 1
            self._keys.add(candidate)
            return candidate


class KeyGenerator:
    def __init__(self, settings: ExtractionSettings, store, translator=None,
                 retry_policy: Optional[RetryPolicy] = None):
        self.settings = settings
        self.store = store
        self.translator = translator
        self.retry_policy = retry_policy or RetryPolicy(
            max_attempts=settings.translate_retry_attempts,
            delay=settings.translate_retry_delay,
        )
        self.logger = logging.getLogger(__name__)

    async def generate(self, text: str, filepath: Optional[Union[str, Path]] = None,
                       reuse_existing: bool = False, used_keys: Optional[UsedKeys] = None) -> str:
        key, _reused = await self.generate_key(text, filepath, reuse_existing, used_keys)
        return key

    async def generate_key(self, text: str, filepath: Optional[Union[str, Path]] = None,
                           reuse_existing: bool = False,
                           used_keys: Optional[UsedKeys] = None) -> Tuple[str, bool]:
        """Like `generate`, also telling whether the key already existed in the store."""
        if used_keys is None:
            used_keys = UsedKeys()

        if reuse_existing:
            existing = self.store.search_key_by_value(text)
            if existing:
                self.logger.debug(f"Reusing key '{existing}' for {text!r}")
                await used_keys.register(existing)
                return existing, True

        strategy = self.settings.keygen_strategy
        key = await self.key_for_strategy(text, strategy)

        if self.settings.key_prefix and strategy not in ("empty", "source"):
            key = self.settings.key_prefix + key

        if filepath and "fileName" in key:
            path = Path(filepath)
            key = key.replace("{fileName}", path.name).replace("{fileNameWithoutExt}", path.stem)

        key = change_case(key, self.settings.keygen_style).strip()

        if not key:
            key = DEFAULT_KEY

        key = await used_keys.reserve(key, self.store.key_exists, self.settings.preferred_delimiter)
        return key, False

    async def key_for_strategy(self, text: str, strategy: str) -> str:
        if strategy == "random":
            return uuid.uuid4().hex
        if strategy == "empty":
            return ""
        if strategy == "source":
            return text
        if strategy == "english":
            return await self._english_key(text)

        key = slugify(text.replace(ESCAPE_CHAR, ""), self.settings.preferred_delimiter)
        max_length = self.settings.extract_key_max_length
        if max_length:
            key = key[:max_length]
        return key

    async def _english_key(self, text: str) -> str:
        if self.translator is None:
            self.logger.error("The 'english' key strategy needs a translator; falling back to the default key")
            return ""
        try:
            translated = await self.retry_policy.run(
                self.translator.translate, text, self.settings.source_language, "en"
            )
        except Exception as e:
            self.logger.error(
                f"Translating {text!r} failed after {self.retry_policy.max_attempts} attempts: {e}"
            )
            return ""
        if not translated:
            return ""
        return slugify(translated, "-")
