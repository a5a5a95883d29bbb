"""
Script literal scanner.

Finds string and template literals in JavaScript/TypeScript code (standalone
files or `<script>` blocks) and yields the human-readable ones as
occurrences. Comments are consumed by the scanner so quotes inside them are
never mistaken for literals.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterator, Optional, Sequence

import pyparsing as pp

from .models import Occurrence, SourceKind
from .rules import DEFAULT_DYNAMIC_RULES, DEFAULT_RULES, ExtractionRule, should_extract
from .settings import ScriptParserOptions

TEMPLATE_EXPR_RE = re.compile(r'\$\{')

# import x from '...', export * from '...', import('...'), require('...')
MODULE_SPECIFIER_RE = re.compile(r'(?:\bimport\s*\(?|\bfrom|\brequire\s*\()\s*$')
OBJECT_KEY_BEFORE_RE = re.compile(r'[{,]\s*$')
OBJECT_KEY_AFTER_RE = re.compile(r'^\s*:')

_ESCAPES = {
    'n': '\n', 't': '\t', 'r': '\r', 'b': '\b', 'f': '\f', 'v': '\v', '0': '\0',
    '\\': '\\', "'": "'", '"': '"', '`': '`', '\n': '',
}
_ESCAPE_RE = re.compile(r'\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|.)', re.DOTALL)


def unescape_js_string(body: str) -> str:
    """Resolve backslash escapes of a JS string literal body."""

    def repl(match: re.Match) -> str:
        seq = match.group(1)
        if seq.startswith('u{'):
            return chr(int(seq[2:-1], 16))
        if seq.startswith('u') and len(seq) == 5:
            return chr(int(seq[1:], 16))
        if seq.startswith('x') and len(seq) == 3:
            return chr(int(seq[1:], 16))
        return _ESCAPES.get(seq, seq)

    return _ESCAPE_RE.sub(repl, body)


@lru_cache(maxsize=1)
def _literal_scanner() -> pp.ParserElement:
    single = pp.QuotedString("'", esc_char="\\", unquote_results=False)
    double = pp.QuotedString('"', esc_char="\\", unquote_results=False)
    template = pp.QuotedString("`", esc_char="\\", multiline=True, unquote_results=False)
    comment = pp.c_style_comment | pp.dbl_slash_comment
    # Tabs must survive, otherwise reported offsets drift
    return (comment | template | single | double).parse_with_tabs()


def _callee_re(callees: Sequence[str]) -> Optional[re.Pattern]:
    if not callees:
        return None
    names = '|'.join(re.escape(name) for name in sorted(callees, key=len, reverse=True))
    return re.compile(r'(?<![\w$])(?:' + names + r')\s*\(\s*(?:[^()]*,\s*)?$')


class ScriptStringDetector:
    """Callable detector for script code; reusable across documents."""

    def __init__(
        self,
        rules: Sequence[ExtractionRule] = DEFAULT_RULES,
        dynamic_rules: Sequence[ExtractionRule] = DEFAULT_DYNAMIC_RULES,
        options: Optional[ScriptParserOptions] = None,
    ):
        self.rules = rules
        self.dynamic_rules = dynamic_rules
        self.options = options or ScriptParserOptions()
        self._callee_re = _callee_re(self.options.ignored_callees)

    def __call__(self, code: str) -> Iterator[Occurrence]:
        return self.detect(code)

    def detect(self, code: str) -> Iterator[Occurrence]:
        for _tokens, start, end in _literal_scanner().scan_string(code):
            literal = code[start:end]
            if literal.startswith('/'):
                continue
            if self._in_skipped_context(code, start, end):
                continue
            occurrence = self._to_occurrence(literal, start, end)
            if occurrence is not None:
                yield occurrence

    def _in_skipped_context(self, code: str, start: int, end: int) -> bool:
        line_start = code.rfind('\n', 0, start) + 1
        before = code[max(line_start, start - 200):start]
        if MODULE_SPECIFIER_RE.search(before):
            return True
        if self._callee_re is not None and self._callee_re.search(before):
            return True
        if self.options.skip_object_keys:
            window_before = code[max(0, start - 200):start]
            if OBJECT_KEY_BEFORE_RE.search(window_before) and OBJECT_KEY_AFTER_RE.match(code[end:end + 20]):
                return True
        return False

    def _to_occurrence(self, literal: str, start: int, end: int) -> Optional[Occurrence]:
        quote = literal[0]
        body = literal[1:-1]
        if quote == '`' and TEMPLATE_EXPR_RE.search(body):
            if not should_extract(self.dynamic_rules, body, SourceKind.JS_TEMPLATE):
                return None
            return Occurrence(
                start=start,
                end=end,
                text='',
                source=SourceKind.JS_TEMPLATE,
                raw_text=body,
                is_dynamic=True,
            )

        text = unescape_js_string(body)
        if not should_extract(self.rules, text, SourceKind.JS_STRING):
            return None
        return Occurrence(start=start, end=end, text=text, source=SourceKind.JS_STRING)


def detect_script_strings(
    code: str,
    rules: Sequence[ExtractionRule] = DEFAULT_RULES,
    dynamic_rules: Sequence[ExtractionRule] = DEFAULT_DYNAMIC_RULES,
    options: Optional[ScriptParserOptions] = None,
    offset: int = 0,
) -> Iterator[Occurrence]:
    detector = ScriptStringDetector(rules, dynamic_rules, options)
    for occurrence in detector.detect(code):
        yield occurrence.shifted(offset) if offset else occurrence
