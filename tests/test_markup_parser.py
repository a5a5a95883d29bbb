from hardstrings.core.markup_parser import SVELTE_DIALECT, VUE_DIALECT, detect_markup_strings
from hardstrings.core.models import SourceKind
from hardstrings.core.script_parser import ScriptStringDetector
from hardstrings.core.settings import MarkupParserOptions


VUE_TEMPLATE = """<template>
  <div>
    <h1>Welcome to our app</h1>
    <input placeholder="Enter your name" class="form-input" />
    <p>{{ message }}</p>
    <my-button :label="dynamicLabel" title="Click to submit"></my-button>
  </div>
</template>
"""


def _found(text, **kwargs):
    return list(detect_markup_strings(text, **kwargs))


def test_vue_template_text_and_attributes():
    found = _found(VUE_TEMPLATE, dialect=VUE_DIALECT)
    assert [(o.source, o.text) for o in found] == [
        (SourceKind.HTML_INLINE, "Welcome to our app"),
        (SourceKind.HTML_ATTRIBUTE, "Enter your name"),
        (SourceKind.HTML_ATTRIBUTE, "Click to submit"),
    ]
    inline = found[0]
    assert VUE_TEMPLATE[inline.start:inline.end] == "Welcome to our app"


def test_attribute_spans():
    text = '<my-button label="Submit form"></my-button>'
    occ = _found(text)[0]
    assert occ.attr_name == "label"
    assert text[occ.start:occ.end] == "Submit form"
    assert text[occ.full_start:occ.full_end] == 'label="Submit form"'


def test_single_quoted_attribute():
    text = "<input placeholder='Type something here'>"
    occ = _found(text)[0]
    assert occ.text == "Type something here"
    assert text[occ.start:occ.end] == "Type something here"


def test_attributes_can_be_disabled():
    text = '<input placeholder="Enter your name">'
    assert _found(text, options=MarkupParserOptions(attributes=False)) == []


def test_entities_are_resolved_and_whitespace_collapsed():
    text = "<p>\n  Tom &amp; Jerry\n  forever\n</p>"
    occ = _found(text)[0]
    assert occ.text == "Tom & Jerry forever"
    assert text[occ.start:occ.end] == "Tom &amp; Jerry\n  forever"


def test_comments_and_ignored_tags_are_skipped():
    text = (
        "<!-- Hidden note here -->"
        "<code>Some code sample</code>"
        "<style>.title { content: 'Styled text' }</style>"
        "<p>Visible text here</p>"
    )
    assert [o.text for o in _found(text)] == ["Visible text here"]


def test_stray_angle_bracket_is_text():
    text = "<p>a < b is true here</p>"
    assert [o.text for o in _found(text)] == ["a < b is true here"]


def test_mustache_text_is_dynamic():
    text = "<p>Total: {{ count }} items</p>"
    occ = _found(text, dialect=VUE_DIALECT)[0]
    assert occ.is_dynamic
    assert occ.text == ""
    assert occ.raw_text == "Total: {{ count }} items"


def test_script_block_is_delegated_with_document_offsets():
    text = (
        "<template><p>Hello from template</p></template>\n"
        "<script>\n"
        "export default { data() { return { msg: 'Hello from script' } } }\n"
        "</script>\n"
    )
    found = _found(text, script_detector=ScriptStringDetector())
    assert [o.source for o in found] == [SourceKind.HTML_INLINE, SourceKind.JS_STRING]
    script_occ = found[1]
    assert text[script_occ.start:script_occ.end] == "'Hello from script'"


def test_script_block_without_detector_is_skipped():
    text = "<script>const a = 'Hello from script'</script>"
    assert _found(text) == []


def test_svelte_blocks_split_text_nodes():
    text = "<p>{#if user}Welcome back friend{:else}Please sign in{/if}</p>"
    found = _found(text, dialect=SVELTE_DIALECT)
    assert [o.text for o in found] == ["Welcome back friend", "Please sign in"]
    for occ in found:
        assert text[occ.start:occ.end] == occ.text


def test_svelte_brace_interpolation_is_dynamic():
    text = "<p>Hello {name}, nice day</p>"
    occ = _found(text, dialect=SVELTE_DIALECT)[0]
    assert occ.is_dynamic
    assert occ.raw_text == "Hello {name}, nice day"
