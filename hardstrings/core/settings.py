"""
Extraction settings
===================

Immutable settings values handed to every component of the pipeline. The
`ConfigManager` in `hardstrings.utils.config` builds them from a JSON file;
tests build them directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .exceptions import ConfigError

KEYGEN_STRATEGIES = ("slug", "random", "empty", "source", "english")
KEYGEN_STYLES = ("default", "kebab-case", "snake_case", "camelCase", "PascalCase", "ALL_CAPS")
VUE_API_STYLES = ("", "composition", "options")


@dataclass(frozen=True)
class MarkupParserOptions:
    """Options for the HTML-like markup scanner."""
    attributes: bool = True
    inline_text: bool = True
    ignored_tags: Tuple[str, ...] = ("style", "code", "pre", "noscript", "svg", "path")
    ignored_attributes: Tuple[str, ...] = (
        "class", "id", "style", "href", "src", "srcset", "type", "name", "key",
        "ref", "for", "lang", "rel", "target", "width", "height", "role", "slot",
        "is", "xmlns", "method", "action", "autocomplete", "tabindex", "to",
        "data-testid", "data-test", "icon", "color", "size", "variant",
    )


@dataclass(frozen=True)
class ScriptParserOptions:
    """Options for the script literal scanner."""
    ignored_callees: Tuple[str, ...] = (
        "console.log", "console.warn", "console.error", "console.info", "console.debug",
        "require", "import", "emit", "$emit", "querySelector", "querySelectorAll",
        "getElementById", "addEventListener", "removeEventListener", "getItem",
        "setItem", "removeItem", "defineProps", "defineEmits",
    )
    skip_object_keys: bool = True


@dataclass(frozen=True)
class TranslatorSettings:
    """Translation service used by the `english` key strategy."""
    engine: str = "google"
    timeout: int = 15
    use_sync_fallback: bool = True


@dataclass(frozen=True)
class ExtractionSettings:
    """Settings for key generation and batch extraction."""
    keygen_strategy: str = "slug"
    keygen_style: str = "default"
    key_prefix: str = ""
    preferred_delimiter: str = "-"
    extract_key_max_length: Optional[int] = None
    source_language: str = "en"
    display_language: str = "en"
    concurrency: int = 3
    vue_api_style: str = ""
    enabled_frameworks: Tuple[str, ...] = ()
    detect_frameworks_by_language: bool = True
    locales_dir: str = "locales"
    save_after_extract: bool = True
    dry_run: bool = False
    ignore_globs: Tuple[str, ...] = ()
    translate_retry_attempts: int = 10
    translate_retry_delay: float = 1.0
    markup_parser: MarkupParserOptions = field(default_factory=MarkupParserOptions)
    script_parser: ScriptParserOptions = field(default_factory=ScriptParserOptions)
    translator: TranslatorSettings = field(default_factory=TranslatorSettings)

    def __post_init__(self):
        if self.keygen_strategy not in KEYGEN_STRATEGIES:
            raise ConfigError(
                f"Unknown keygen strategy '{self.keygen_strategy}' "
                f"(expected one of: {', '.join(KEYGEN_STRATEGIES)})"
            )
        if self.keygen_style not in KEYGEN_STYLES:
            raise ConfigError(
                f"Unknown keygen style '{self.keygen_style}' "
                f"(expected one of: {', '.join(KEYGEN_STYLES)})"
            )
        if self.vue_api_style not in VUE_API_STYLES:
            raise ConfigError(f"Unknown vue api style '{self.vue_api_style}'")
        if self.concurrency < 1:
            raise ConfigError("concurrency must be at least 1")
        if self.translate_retry_attempts < 1:
            raise ConfigError("translate_retry_attempts must be at least 1")
        if self.extract_key_max_length is not None and self.extract_key_max_length < 1:
            raise ConfigError("extract_key_max_length must be positive")
