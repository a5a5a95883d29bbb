"""
Data structures shared by the detection and extraction pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple


class SourceKind(Enum):
    """Where a literal was found."""
    HTML_INLINE = "html-inline"
    HTML_ATTRIBUTE = "html-attribute"
    JS_STRING = "js-string"
    JS_TEMPLATE = "js-template"


@dataclass
class Occurrence:
    """One hard-coded string found in a document.

    Offsets refer to the document text before any edit is applied.
    """
    start: int
    end: int
    text: str                    # Resolved text, empty until parsed for dynamic literals
    source: SourceKind
    raw_text: Optional[str] = None   # Source as written (dynamic literals)
    is_dynamic: bool = False
    args: Optional[List[str]] = None
    attr_name: Optional[str] = None
    full_start: Optional[int] = None  # Whole `name="value"` span for attributes
    full_end: Optional[int] = None

    @property
    def key_text(self) -> str:
        return self.raw_text or self.text

    @property
    def is_attribute(self) -> bool:
        return self.source is SourceKind.HTML_ATTRIBUTE

    def shifted(self, offset: int) -> "Occurrence":
        """Return a copy moved by `offset` characters (nested regions)."""
        return Occurrence(
            start=self.start + offset,
            end=self.end + offset,
            text=self.text,
            source=self.source,
            raw_text=self.raw_text,
            is_dynamic=self.is_dynamic,
            args=list(self.args) if self.args is not None else None,
            attr_name=self.attr_name,
            full_start=self.full_start + offset if self.full_start is not None else None,
            full_end=self.full_end + offset if self.full_end is not None else None,
        )


@dataclass
class ExtractionPlanItem:
    """An occurrence enriched with its key and replacement text."""
    start: int
    end: int
    replacement: str
    keypath: str
    message: str
    locale: str
    reused: bool = False          # Key already stored with this text


@dataclass
class TranslationRecord:
    """A key/value pair to be written to the translation store."""
    keypath: str
    value: str
    locale: str
    source_file: Optional[str] = None
    target_file: Optional[str] = None


@dataclass
class Document:
    """An open source document."""
    path: Path
    text: str
    language_id: str
    encoding: str = "utf-8"

    def position_at(self, offset: int) -> Tuple[int, int]:
        """1-based (line, column) of `offset`."""
        before = self.text[:offset]
        line = before.count("\n") + 1
        column = offset - (before.rfind("\n") + 1) + 1
        return line, column


class ExtractionStatus(Enum):
    DONE = "done"
    SKIPPED = "skipped"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass
class ExtractionReport:
    """Outcome of one document's extraction."""
    path: Path
    status: ExtractionStatus
    detected: int = 0
    extracted: int = 0
    dropped: int = 0
    keys: List[str] = field(default_factory=list)
    error: Optional[str] = None
