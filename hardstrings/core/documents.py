"""
Document access and multi-range replacement.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from ..utils.encoding import decode_bytes
from ..utils.file_scanner import language_id_for
from .exceptions import EditConflictError, ParseError
from .models import Document

# (start, end, replacement) in pre-edit offsets
Edit = Tuple[int, int, str]


def apply_replacements(text: str, edits: Iterable[Edit]) -> str:
    """Apply all edits to `text` in one pass.

    Edits are applied right to left (descending start) so an applied edit
    never moves a pending span. Overlapping or out-of-range edits raise
    EditConflictError before anything is changed.
    """
    ordered: List[Edit] = sorted(edits, key=lambda e: (e[0], e[1]), reverse=True)

    previous_start = len(text)
    for start, end, _replacement in ordered:
        if start < 0 or end < start or end > len(text):
            raise EditConflictError(f"Edit span {start}:{end} is outside the document")
        if end > previous_start:
            raise EditConflictError(f"Edit span {start}:{end} overlaps an edit starting at {previous_start}")
        previous_start = start

    for start, end, replacement in ordered:
        text = text[:start] + replacement + text[end:]
    return text


class DocumentSource(ABC):
    @abstractmethod
    def open_document(self, path: Union[str, Path]) -> Document: ...

    @abstractmethod
    def apply_edits(self, document: Document, edits: Iterable[Edit]) -> bool: ...

    @abstractmethod
    def save_document(self, document: Document) -> None: ...


class FileDocumentSource(DocumentSource):
    """Documents backed by files on disk; edits stay in memory until saved."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def open_document(self, path: Union[str, Path]) -> Document:
        path = Path(path)
        raw = path.read_bytes()
        if b"\x00" in raw[:8192]:
            raise ParseError(f"{path} looks like a binary file")
        text, encoding = decode_bytes(raw)
        return Document(path=path, text=text, language_id=language_id_for(path) or "", encoding=encoding)

    def apply_edits(self, document: Document, edits: Iterable[Edit]) -> bool:
        document.text = apply_replacements(document.text, edits)
        return True

    def save_document(self, document: Document) -> None:
        with open(document.path, 'w', encoding=document.encoding, newline='') as f:
            f.write(document.text)
        self.logger.debug(f"Saved {document.path}")
