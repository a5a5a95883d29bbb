"""
Configuration Manager
=====================

Loads extraction settings from a JSON file and saves them back.
"""

import json
import logging
from dataclasses import asdict, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Type

from hardstrings.core.exceptions import ConfigError
from hardstrings.core.settings import (
    ExtractionSettings,
    MarkupParserOptions,
    ScriptParserOptions,
    TranslatorSettings,
)

NESTED_SECTIONS = {
    'markup_parser': MarkupParserOptions,
    'script_parser': ScriptParserOptions,
    'translator': TranslatorSettings,
}


class ConfigManager:
    """Manages extraction configuration."""

    def __init__(self, config_file: str = "hardstrings.json"):
        self.logger = logging.getLogger(__name__)
        self.config_file = Path(config_file)
        self.extraction = ExtractionSettings()

    @property
    def settings(self) -> ExtractionSettings:
        return self.extraction

    def _build_section(self, cls: Type, data: Any, section: str, **extra):
        if not isinstance(data, dict):
            raise ConfigError(f"Section '{section}' must be an object")
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for name, value in data.items():
            if name not in known or name in extra:
                self.logger.warning(f"Ignoring unknown setting '{section}.{name}'")
                continue
            # JSON arrays map to the tuple fields
            values[name] = tuple(value) if isinstance(value, list) else value
        try:
            return cls(**values, **extra)
        except TypeError as e:
            raise ConfigError(f"Invalid section '{section}': {e}") from e

    def load_config(self) -> bool:
        """Load configuration from file.

        Returns False when the file is missing or unreadable (defaults are
        kept); raises ConfigError when it holds invalid values.
        """
        if not self.config_file.exists():
            self.logger.info("Config file doesn't exist, using defaults")
            return False

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                config_data = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.error(f"Error loading configuration: {e}")
            return False

        if not isinstance(config_data, dict):
            raise ConfigError(f"{self.config_file} must contain a JSON object")

        nested = {
            name: self._build_section(cls, config_data.get(name, {}), name)
            for name, cls in NESTED_SECTIONS.items()
        }
        self.extraction = self._build_section(
            ExtractionSettings, config_data.get('extraction', {}), 'extraction', **nested
        )
        self.logger.info("Configuration loaded successfully")
        return True

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self.extraction)
        config_data = {name: data.pop(name) for name in NESTED_SECTIONS}
        return {'extraction': data, **config_data}

    def save_config(self) -> bool:
        """Save configuration to file."""
        try:
            # Create backup if file exists
            if self.config_file.exists():
                backup_file = self.config_file.with_suffix(self.config_file.suffix + '.bak')
                if backup_file.exists():
                    try:
                        backup_file.unlink()
                    except OSError as e:
                        self.logger.warning(f"Could not remove existing backup: {e}")
                try:
                    self.config_file.rename(backup_file)
                except OSError as e:
                    self.logger.warning(f"Could not create backup: {e}")

            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(self.to_dict(), f, indent=4, ensure_ascii=False)

            self.logger.info("Configuration saved successfully")
            return True

        except OSError as e:
            self.logger.error(f"Error saving configuration: {e}")
            return False

    def apply_overrides(self, **overrides) -> ExtractionSettings:
        """Replace top-level extraction settings; None values are ignored."""
        values = {name: value for name, value in overrides.items() if value is not None}
        if values:
            try:
                self.extraction = replace(self.extraction, **values)
            except TypeError as e:
                raise ConfigError(str(e)) from e
        return self.extraction

    def reset_to_defaults(self) -> None:
        self.extraction = ExtractionSettings()
        self.logger.info("Configuration reset to defaults")


def load_settings(config_file: Optional[str] = None) -> ExtractionSettings:
    manager = ConfigManager(config_file or "hardstrings.json")
    manager.load_config()
    return manager.settings
