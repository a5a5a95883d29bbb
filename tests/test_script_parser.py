from hardstrings.core.models import SourceKind
from hardstrings.core.script_parser import detect_script_strings, unescape_js_string
from hardstrings.core.settings import ScriptParserOptions


def _texts(code):
    return [o.text for o in detect_script_strings(code)]


def test_plain_string_literal_span_covers_quotes():
    code = "const title = 'Hello world'"
    found = list(detect_script_strings(code))
    assert len(found) == 1
    occ = found[0]
    assert occ.source is SourceKind.JS_STRING
    assert occ.text == "Hello world"
    assert code[occ.start:occ.end] == "'Hello world'"


def test_tabs_do_not_shift_offsets():
    code = "\tconst a = {\n\t\tmsg: \"Hello world\"\n\t}"
    occ = list(detect_script_strings(code))[0]
    assert code[occ.start:occ.end] == '"Hello world"'


def test_module_specifiers_and_logging_calls_are_skipped():
    code = (
        "import Thing from 'Some long module'\n"
        "const lazy = import('Another module here')\n"
        "const dep = require('Legacy module name')\n"
        "console.log('Debug message here')\n"
        "this.$emit('Custom event name')\n"
        "alert('Saved successfully')\n"
    )
    assert _texts(code) == ["Saved successfully"]


def test_object_keys_are_skipped_but_values_kept():
    code = "const labels = { 'Display name': 1, title: 'Page title here' }"
    assert _texts(code) == ["Page title here"]


def test_object_keys_kept_when_option_disabled():
    code = "const labels = { 'Display name': 1 }"
    found = list(detect_script_strings(code, options=ScriptParserOptions(skip_object_keys=False)))
    assert [o.text for o in found] == ["Display name"]


def test_comments_are_ignored():
    code = "// 'Hello world'\n/* \"Another one\" */\nconst x = 'Real text here'"
    assert _texts(code) == ["Real text here"]


def test_urls_inside_strings_are_not_comments():
    code = "const a = 'https://example.com'; const b = 'Open the docs'"
    assert _texts(code) == ["Open the docs"]


def test_technical_strings_are_rejected():
    code = "const a = 'primary-button'; const b = 'userName'; const c = '42'; const d = './icon.png'"
    assert _texts(code) == []


def test_template_literal_with_expression_is_dynamic():
    code = "const greeting = `Hello ${user.name}, welcome back`"
    occ = list(detect_script_strings(code))[0]
    assert occ.source is SourceKind.JS_TEMPLATE
    assert occ.is_dynamic
    assert occ.text == ""
    assert occ.raw_text == "Hello ${user.name}, welcome back"
    assert code[occ.start:occ.end].startswith("`")


def test_template_literal_without_expression_is_plain():
    occ = list(detect_script_strings("const a = `Plain template text`"))[0]
    assert occ.source is SourceKind.JS_STRING
    assert occ.text == "Plain template text"


def test_expression_only_template_is_rejected():
    assert _texts("const a = `${count}`") == []


def test_escapes_are_resolved():
    occ = list(detect_script_strings("const a = 'It\\'s fine now'"))[0]
    assert occ.text == "It's fine now"
    assert unescape_js_string("caf\\u00e9 \\x41") == "café A"


def test_offset_moves_spans():
    code = "const a = 'Hello world'"
    plain = list(detect_script_strings(code))[0]
    moved = list(detect_script_strings(code, offset=100))[0]
    assert moved.start == plain.start + 100
    assert moved.end == plain.end + 100


def test_cjk_text_is_extracted():
    assert _texts("const a = '你好世界'") == ["你好世界"]
