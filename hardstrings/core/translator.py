"""Translation services used by the `english` key strategy (Google + offline pseudo engine)."""

from __future__ import annotations

import asyncio
import logging
import urllib.parse
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, Optional

import aiohttp
import requests

from .exceptions import ConfigError, TranslationError
from .settings import TranslatorSettings


class TranslationEngine(Enum):
    GOOGLE = "google"
    PSEUDO = "pseudo"


class BaseTranslator(ABC):
    def __init__(self, settings: Optional[TranslatorSettings] = None):
        self.settings = settings or TranslatorSettings()
        self.logger = logging.getLogger(self.__class__.__name__)
        self._session: Optional[aiohttp.ClientSession] = None
        self._connector: Optional[aiohttp.TCPConnector] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._connector = aiohttp.TCPConnector(limit=16, ttl_dns_cache=300)
            timeout = aiohttp.ClientTimeout(total=self.settings.timeout)
            self._session = aiohttp.ClientSession(connector=self._connector, timeout=timeout)
        return self._session

    async def close(self):
        if self._session:
            try:
                await self._session.close()
            except aiohttp.ClientError as e:
                self.logger.debug(f"Error while closing session: {e}")
            self._session = None
            self._connector = None

    @abstractmethod
    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """Return the translation of `text`; raise TranslationError on failure."""


def _join_segments(data) -> str:
    """Flatten the `translate_a/single` response into text."""
    if data and isinstance(data, list) and data[0]:
        return ''.join(part[0] for part in data[0] if part and part[0])
    return ''


class GoogleTranslator(BaseTranslator):
    """Keyless Google Translate client.

    Rotates over several public endpoints and falls back to a blocking
    `requests` call in a worker thread when every async attempt fails.
    """

    google_endpoints = [
        "https://translate.googleapis.com/translate_a/single",
        "https://translate.google.com/translate_a/single",
    ]
    user_agent = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36'

    def __init__(self, settings: Optional[TranslatorSettings] = None):
        super().__init__(settings)
        self._endpoint_index = 0
        self._endpoint_failures: Dict[str, int] = {}

    def _get_next_endpoint(self) -> str:
        """Round-robin endpoint selection preferring endpoints that work."""
        min_failures = min(self._endpoint_failures.get(ep, 0) for ep in self.google_endpoints)
        available = [ep for ep in self.google_endpoints
                     if self._endpoint_failures.get(ep, 0) <= min_failures + 2]
        self._endpoint_index = (self._endpoint_index + 1) % len(available)
        return available[self._endpoint_index]

    def _params(self, text: str, source_lang: str, target_lang: str) -> Dict[str, str]:
        return {'client': 'gtx', 'sl': source_lang, 'tl': target_lang, 'dt': 't', 'q': text}

    async def _try_endpoint(self, endpoint: str, params: Dict[str, str]) -> Optional[str]:
        query = urllib.parse.urlencode(params, doseq=True, safe='')
        url = f"{endpoint}?{query}"
        try:
            session = await self._get_session()
            async with session.get(url, headers={'User-Agent': self.user_agent}) as resp:
                if resp.status == 200:
                    text = _join_segments(await resp.json(content_type=None))
                    if text:
                        self._endpoint_failures[endpoint] = 0
                        return text
                else:
                    self.logger.debug(f"{endpoint} answered HTTP {resp.status}")
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            self.logger.debug(f"{endpoint} failed: {e}")
        self._endpoint_failures[endpoint] = self._endpoint_failures.get(endpoint, 0) + 1
        return None

    def _translate_sync(self, params: Dict[str, str]) -> str:
        resp = requests.get(
            self.google_endpoints[0],
            params=params,
            timeout=self.settings.timeout,
            headers={'User-Agent': self.user_agent},
        )
        resp.raise_for_status()
        return _join_segments(resp.json())

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        params = self._params(text, source_lang, target_lang)

        for _ in range(len(self.google_endpoints)):
            result = await self._try_endpoint(self._get_next_endpoint(), params)
            if result:
                return result

        if self.settings.use_sync_fallback:
            self.logger.debug("Google endpoints failed, trying the blocking fallback")
            try:
                result = await asyncio.to_thread(self._translate_sync, params)
            except (requests.RequestException, ValueError) as e:
                raise TranslationError(f"All translation methods failed: {e}") from e
            if result:
                return result

        raise TranslationError("All translation methods failed")


class PseudoTranslator(BaseTranslator):
    """Offline engine: returns the text unchanged so keys are built from the
    source itself. Useful when the source language already is English."""

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        return text


def build_translator(settings: Optional[TranslatorSettings] = None) -> BaseTranslator:
    settings = settings or TranslatorSettings()
    try:
        engine = TranslationEngine(settings.engine)
    except ValueError:
        raise ConfigError(f"Unknown translation engine '{settings.engine}'") from None
    if engine is TranslationEngine.GOOGLE:
        return GoogleTranslator(settings)
    return PseudoTranslator(settings)
