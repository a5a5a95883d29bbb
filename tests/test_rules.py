from hardstrings.core.models import SourceKind
from hardstrings.core.rules import (
    DEFAULT_DYNAMIC_RULES,
    DEFAULT_RULES,
    BasicExtractionRule,
    NonAsciiExtractionRule,
    first_decision,
    should_extract,
)


def _extract(text, source=SourceKind.JS_STRING):
    return should_extract(DEFAULT_RULES, text, source)


def test_prose_is_extracted():
    assert _extract("Hello world")
    assert _extract("Submit")
    assert _extract("Save changes?")


def test_technical_strings_are_skipped():
    for text in ("userName", "primary-button", "app.title", "MAX_SIZE", "https://example.com",
                 "./assets/logo.png", "#fff", "12px", "42", "--", "a"):
        assert not _extract(text), text


def test_non_ascii_text_wins():
    assert _extract("你好")
    assert _extract("Привет")
    assert NonAsciiExtractionRule().should_extract("plain ascii", SourceKind.JS_STRING) is None


def test_no_opinion_means_skip():
    assert first_decision([NonAsciiExtractionRule()], "Hello world", SourceKind.JS_STRING) is None
    assert not should_extract([NonAsciiExtractionRule()], "Hello world", SourceKind.JS_STRING)
    assert BasicExtractionRule().should_extract("12 34", SourceKind.JS_STRING) is None


def test_dynamic_rule_judges_static_parts():
    assert should_extract(DEFAULT_DYNAMIC_RULES, "Hello ${name}, welcome", SourceKind.JS_TEMPLATE)
    assert should_extract(DEFAULT_DYNAMIC_RULES, "Total: {{ count }}", SourceKind.HTML_INLINE)
    assert not should_extract(DEFAULT_DYNAMIC_RULES, "${a}${b}", SourceKind.JS_TEMPLATE)
    assert not should_extract(DEFAULT_DYNAMIC_RULES, "{{ item.label }}", SourceKind.HTML_INLINE)
