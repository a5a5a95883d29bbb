"""
Extraction rules
================

Rules decide whether a literal looks like human-readable text worth
extracting. Each rule returns True (extract), False (skip) or None (no
opinion); the first decisive answer wins and "no opinion" everywhere means skip.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from .models import SourceKind


class ExtractionRule(ABC):
    @abstractmethod
    def should_extract(self, text: str, source: SourceKind) -> Optional[bool]: ...


class NonAsciiExtractionRule(ExtractionRule):
    """Anything containing non-ASCII letters (CJK, Cyrillic, accents) is text."""

    non_ascii_letter_re = re.compile(r'[^\x00-\x7F]')

    def should_extract(self, text: str, source: SourceKind) -> Optional[bool]:
        if any(ch.isalpha() for ch in self.non_ascii_letter_re.findall(text)):
            return True
        return None


class BasicExtractionRule(ExtractionRule):
    """Filters out technical strings and accepts plain prose."""

    url_re = re.compile(r'^(?:[a-z][a-z0-9+.-]*:)?//\S+$', re.IGNORECASE)
    path_re = re.compile(r'^(?:\.{0,2}/|~/|[A-Za-z]:\\)\S*$|^\S+\.(?:png|jpe?g|gif|svg|webp|css|scss|js|ts|vue|json|html?)$', re.IGNORECASE)
    number_re = re.compile(r'^[-+]?\d[\d.,_]*%?$')
    symbols_re = re.compile(r'^[\W_]+$')
    # camelCase, snake_case, kebab-case, CONSTANT, dotted.key.paths
    identifier_re = re.compile(r'^[A-Za-z_$][\w$]*(?:[.:/-][\w$]+)*$')
    css_like_re = re.compile(r'^(?:#[0-9a-f]{3,8}|\d+(?:px|em|rem|vh|vw|%))$', re.IGNORECASE)

    def should_extract(self, text: str, source: SourceKind) -> Optional[bool]:
        stripped = text.strip()
        if len(stripped) < 2:
            return False
        if not re.search(r'[A-Za-z]', stripped):
            # Nothing readable in ASCII; let other rules decide
            return None
        if self.url_re.match(stripped) or self.path_re.match(stripped):
            return False
        if self.number_re.match(stripped) or self.symbols_re.match(stripped):
            return False
        if self.css_like_re.match(stripped):
            return False
        if self.identifier_re.match(stripped):
            # A single capitalised word ("Submit") is prose, identifiers are not
            if re.fullmatch(r'[A-Z][a-z]+', stripped):
                return True
            return False
        return True


class DynamicExtractionRule(ExtractionRule):
    """Judges a dynamic literal by its static parts only."""

    def __init__(self, rules: Sequence[ExtractionRule], interpolation_re: Optional[re.Pattern] = None):
        self.rules = list(rules)
        self.interpolation_re = interpolation_re or re.compile(r'\$\{[^}]*\}|\{\{.*?\}\}|\{[^{}]*\}', re.DOTALL)

    def should_extract(self, text: str, source: SourceKind) -> Optional[bool]:
        static = self.interpolation_re.sub(' ', text)
        if not static.strip():
            return False
        return first_decision(self.rules, static, source)


def first_decision(rules: Sequence[ExtractionRule], text: str, source: SourceKind) -> Optional[bool]:
    for rule in rules:
        decision = rule.should_extract(text, source)
        if decision is not None:
            return decision
    return None


def should_extract(rules: Sequence[ExtractionRule], text: str, source: SourceKind) -> bool:
    return first_decision(rules, text, source) is True


DEFAULT_RULES: List[ExtractionRule] = [
    NonAsciiExtractionRule(),
    BasicExtractionRule(),
]

DEFAULT_DYNAMIC_RULES: List[ExtractionRule] = [
    DynamicExtractionRule(DEFAULT_RULES),
]
