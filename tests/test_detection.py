from pathlib import Path

from hardstrings.core.detection import HardStringDetector
from hardstrings.core.frameworks import FrameworkRegistry
from hardstrings.core.models import Document, SourceKind
from hardstrings.core.settings import ExtractionSettings


VUE_SOURCE = """<template>
  <div>
    <my-button :label="Bound label text" label="Plain label text"></my-button>
    <p>Welcome back</p>
  </div>
</template>
<script>
export default {
  computed: {
    title() { return this.$t('Already translated') },
    other() { return 'Needs translation' },
  },
}
</script>
"""


def _detector(**overrides):
    settings = ExtractionSettings(**overrides)
    return HardStringDetector(FrameworkRegistry(settings))


def test_vue_document_filters_bound_attributes_and_existing_calls():
    document = Document(path=Path("App.vue"), text=VUE_SOURCE, language_id="vue")
    found = _detector().run(document)
    assert [o.text for o in found] == ["Plain label text", "Welcome back", "Needs translation"]
    assert [o.source for o in found] == [
        SourceKind.HTML_ATTRIBUTE, SourceKind.HTML_INLINE, SourceKind.JS_STRING,
    ]
    assert found == sorted(found, key=lambda o: o.start)


def test_script_document():
    document = Document(path=Path("main.ts"), text="export const msg = 'Hello world'\n", language_id="typescript")
    found = _detector().run(document)
    assert [o.text for o in found] == ["Hello world"]


def test_unknown_language_returns_none():
    document = Document(path=Path("notes.txt"), text="Hello world", language_id="")
    assert _detector().run(document) is None


def test_auto_mode_needs_auto_capable_framework():
    document = Document(path=Path("main.js"), text="const a = 'Hello world'", language_id="javascript")
    assert _detector().run(document, is_auto=True) is None
    assert len(_detector().run(document)) == 1
