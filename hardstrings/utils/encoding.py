"""
Encoding helpers to read source files without crashing on unusual bytes.
"""

from __future__ import annotations

import codecs
from pathlib import Path
from typing import Optional, Tuple

import chardet

PREFERRED_ENCODINGS: Tuple[str, ...] = ("utf-8",)


def decode_bytes(raw: bytes, preferred: Tuple[str, ...] = PREFERRED_ENCODINGS) -> Tuple[str, str]:
    """
    Decode raw bytes and report the encoding that worked:
    - a UTF-8 BOM wins (reported as utf-8-sig so saving keeps it)
    - then the preferred encodings
    - then chardet detection with errors='replace'
    """
    if raw.startswith(codecs.BOM_UTF8):
        return raw[len(codecs.BOM_UTF8):].decode("utf-8", errors="replace"), "utf-8-sig"

    for enc in preferred:
        try:
            return raw.decode(enc), enc
        except UnicodeDecodeError:
            continue

    detected = chardet.detect(raw)
    enc = detected.get("encoding") or "utf-8"
    try:
        return raw.decode(enc, errors="replace"), enc
    except LookupError:
        return raw.decode("utf-8", errors="replace"), "utf-8"


def read_text_safely(path: Path, preferred: Tuple[str, ...] = PREFERRED_ENCODINGS) -> Optional[str]:
    """Read file as text; None on I/O failure."""
    try:
        raw = Path(path).read_bytes()
    except OSError:
        return None
    text, _enc = decode_bytes(raw, preferred)
    return text
