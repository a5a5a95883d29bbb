"""
HTML-like markup scanner.

Walks Vue/Svelte/HTML templates tag by tag and yields hard-coded text nodes
and attribute values. `<script>` regions are handed to a script detector and
the nested offsets are translated back into document coordinates.
"""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Optional, Sequence

from .models import Occurrence, SourceKind
from .rules import DEFAULT_DYNAMIC_RULES, DEFAULT_RULES, ExtractionRule, should_extract
from .settings import MarkupParserOptions

logger = logging.getLogger(__name__)

ScriptDetector = Callable[[str], Iterable[Occurrence]]

COMMENT_RE = re.compile(r'<!--.*?(?:-->|$)', re.DOTALL)
DECLARATION_RE = re.compile(r'<![^>]*>|<\?.*?\?>', re.DOTALL)
END_TAG_RE = re.compile(r'</\s*[A-Za-z][\w:.-]*\s*>')

_ATTR_TOKEN = r'''(?:[^\s"'<>/=]+(?:\s*=\s*(?:"[^"]*"|'[^']*'|\{[^{}]*\}|[^\s"'=<>`]+))?|\{[^{}]*\})'''
START_TAG_RE = re.compile(
    r'<(?P<name>[A-Za-z][\w:.-]*)(?P<attrs>(?:\s+' + _ATTR_TOKEN + r')*)\s*(?P<selfclose>/?)>',
    re.DOTALL,
)
ATTR_RE = re.compile(
    r'''(?P<name>[^\s"'<>/=]+)(?:\s*=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|\{[^{}]*\}|[^\s"'=<>`]+))?|\{[^{}]*\}''',
    re.DOTALL,
)
WHITESPACE_RE = re.compile(r'\s+')

# Tags whose content is not markup
RAW_TEXT_TAGS = ("script", "style", "textarea", "title")


@dataclass(frozen=True)
class MarkupDialect:
    """Interpolation syntax of a template language."""
    name: str
    interpolation_re: re.Pattern
    # Control-flow tags that split text nodes ({#if}, {/each}, ...)
    block_re: Optional[re.Pattern] = None


VUE_DIALECT = MarkupDialect(
    name="vue",
    interpolation_re=re.compile(r'\{\{.*?\}\}', re.DOTALL),
)
SVELTE_DIALECT = MarkupDialect(
    name="svelte",
    interpolation_re=re.compile(r'\{(?![#:/@])[^{}]*\}'),
    block_re=re.compile(r'\{[#:/@][^{}]*\}'),
)
HTML_DIALECT = VUE_DIALECT


class MarkupStringDetector:
    """Scanner for one markup dialect."""

    def __init__(
        self,
        dialect: MarkupDialect = HTML_DIALECT,
        rules: Sequence[ExtractionRule] = DEFAULT_RULES,
        dynamic_rules: Sequence[ExtractionRule] = DEFAULT_DYNAMIC_RULES,
        options: Optional[MarkupParserOptions] = None,
        script_detector: Optional[ScriptDetector] = None,
    ):
        self.dialect = dialect
        self.rules = rules
        self.dynamic_rules = dynamic_rules
        self.options = options or MarkupParserOptions()
        self.script_detector = script_detector
        self._ignored_tags = {tag.lower() for tag in self.options.ignored_tags}
        self._ignored_attrs = {attr.lower() for attr in self.options.ignored_attributes}

    def detect(self, text: str) -> Iterator[Occurrence]:
        pos = 0
        text_start = 0
        length = len(text)

        while pos < length:
            lt = text.find('<', pos)
            if lt == -1:
                break

            match = COMMENT_RE.match(text, lt) or DECLARATION_RE.match(text, lt) or END_TAG_RE.match(text, lt)
            if match:
                yield from self._text_node(text, text_start, lt)
                pos = text_start = match.end()
                continue

            match = START_TAG_RE.match(text, lt)
            if not match:
                # Stray '<' belongs to the surrounding text
                pos = lt + 1
                continue

            yield from self._text_node(text, text_start, lt)
            yield from self._attributes(text, match)

            tag = match.group('name').lower()
            pos = text_start = match.end()
            if match.group('selfclose'):
                continue
            if tag in RAW_TEXT_TAGS or tag in self._ignored_tags:
                close_re = re.compile(r'</\s*' + re.escape(tag) + r'\s*>', re.IGNORECASE)
                close = close_re.search(text, pos)
                if close is None:
                    logger.debug("Unclosed <%s> tag at offset %d", tag, lt)
                inner_end = close.start() if close else length
                if tag == 'script' and self.script_detector is not None:
                    yield from self._script_region(text, pos, inner_end)
                elif tag in ('textarea', 'title') and tag not in self._ignored_tags:
                    yield from self._text_node(text, pos, inner_end)
                pos = text_start = close.end() if close else length

        yield from self._text_node(text, text_start, length)

    # --- Internal helpers -------------------------------------------------

    def _script_region(self, text: str, start: int, end: int) -> Iterator[Occurrence]:
        for occurrence in self.script_detector(text[start:end]):
            yield occurrence.shifted(start)

    def _text_node(self, text: str, start: int, end: int) -> Iterator[Occurrence]:
        if not self.options.inline_text or start >= end:
            return
        block_re = self.dialect.block_re
        if block_re is None:
            segments = [(start, end)]
        else:
            segments = []
            cursor = start
            for block in block_re.finditer(text, start, end):
                segments.append((cursor, block.start()))
                cursor = block.end()
            segments.append((cursor, end))

        for seg_start, seg_end in segments:
            occurrence = self._inline_occurrence(text, seg_start, seg_end)
            if occurrence is not None:
                yield occurrence

    def _inline_occurrence(self, text: str, start: int, end: int) -> Optional[Occurrence]:
        segment = text[start:end]
        stripped = segment.strip()
        if not stripped:
            return None
        t_start = start + (len(segment) - len(segment.lstrip()))
        t_end = end - (len(segment) - len(segment.rstrip()))
        raw = text[t_start:t_end]

        if self.dialect.interpolation_re.search(raw):
            if not should_extract(self.dynamic_rules, raw, SourceKind.HTML_INLINE):
                return None
            return Occurrence(
                start=t_start,
                end=t_end,
                text='',
                source=SourceKind.HTML_INLINE,
                raw_text=raw,
                is_dynamic=True,
            )

        value = WHITESPACE_RE.sub(' ', html.unescape(raw))
        if not should_extract(self.rules, value, SourceKind.HTML_INLINE):
            return None
        return Occurrence(start=t_start, end=t_end, text=value, source=SourceKind.HTML_INLINE)

    def _attributes(self, text: str, tag_match: re.Match) -> Iterator[Occurrence]:
        if not self.options.attributes:
            return
        attrs_start, attrs_end = tag_match.span('attrs')
        for attr in ATTR_RE.finditer(text, attrs_start, attrs_end):
            name = attr.group('name')
            if not name:
                continue
            group = 'dq' if attr.group('dq') is not None else 'sq' if attr.group('sq') is not None else None
            if group is None:
                continue
            if name.lower() in self._ignored_attrs:
                continue
            value = attr.group(group)
            if not value.strip():
                continue
            v_start, v_end = attr.span(group)
            occurrence = self._attribute_occurrence(value, v_start, v_end, name, attr.start(), attr.end())
            if occurrence is not None:
                yield occurrence

    def _attribute_occurrence(
        self, value: str, start: int, end: int, name: str, full_start: int, full_end: int
    ) -> Optional[Occurrence]:
        if self.dialect.interpolation_re.search(value):
            if not should_extract(self.dynamic_rules, value, SourceKind.HTML_ATTRIBUTE):
                return None
            return Occurrence(
                start=start,
                end=end,
                text='',
                source=SourceKind.HTML_ATTRIBUTE,
                raw_text=value,
                is_dynamic=True,
                attr_name=name,
                full_start=full_start,
                full_end=full_end,
            )

        resolved = html.unescape(value)
        if not should_extract(self.rules, resolved, SourceKind.HTML_ATTRIBUTE):
            return None
        return Occurrence(
            start=start,
            end=end,
            text=resolved,
            source=SourceKind.HTML_ATTRIBUTE,
            attr_name=name,
            full_start=full_start,
            full_end=full_end,
        )


def detect_markup_strings(
    text: str,
    rules: Sequence[ExtractionRule] = DEFAULT_RULES,
    dynamic_rules: Sequence[ExtractionRule] = DEFAULT_DYNAMIC_RULES,
    options: Optional[MarkupParserOptions] = None,
    script_detector: Optional[ScriptDetector] = None,
    dialect: MarkupDialect = HTML_DIALECT,
) -> Iterator[Occurrence]:
    return MarkupStringDetector(dialect, rules, dynamic_rules, options, script_detector).detect(text)
