"""
Dynamic literal parsing.

Turns the raw source of a literal such as `Hello ${user.name}!` or
`Total: {{ count }}` into the message text `Hello {0}!` plus the list of
interpolated expressions.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

SCRIPT_INTERPOLATION_RE = re.compile(r'\$\{\s*(.*?)\s*\}', re.DOTALL)
MUSTACHE_INTERPOLATION_RE = re.compile(r'\{\{\s*(.*?)\s*\}\}', re.DOTALL)
BRACE_INTERPOLATION_RE = re.compile(r'\{(?![#:/@])\s*([^{}]*?)\s*\}')

QUOTE_CHARS = "'\"`"


@dataclass
class ParsedHardString:
    text: str
    args: List[str] = field(default_factory=list)


def _interpolation_re(raw_text: str, language_id: str) -> re.Pattern:
    if '${' in raw_text:
        return SCRIPT_INTERPOLATION_RE
    if language_id == "svelte" and '{{' not in raw_text:
        return BRACE_INTERPOLATION_RE
    return MUSTACHE_INTERPOLATION_RE


def parse_hard_string(raw_text: str, language_id: str = "", is_dynamic: bool = False) -> Optional[ParsedHardString]:
    """Extract message text and arguments from a literal as written.

    Returns None when nothing but quotes and whitespace is left.
    """
    if raw_text is None:
        return None
    text = raw_text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in QUOTE_CHARS:
        text = text[1:-1]
    text = text.strip()
    if not text:
        return None

    if not is_dynamic:
        return ParsedHardString(text=text)

    args: List[str] = []
    pattern = _interpolation_re(text, language_id)

    def repl(match: re.Match) -> str:
        args.append(match.group(1))
        return '{' + str(len(args) - 1) + '}'

    message = pattern.sub(repl, text).strip()
    if not message:
        return None
    return ParsedHardString(text=message, args=args)
