import json

import pytest

from hardstrings.core.exceptions import ConfigError, NoFrameworkError
from hardstrings.core.frameworks import (
    FrameworkRegistry,
    ReactI18nextFramework,
    SvelteFramework,
    VueFramework,
    quote_key,
    read_package_dependencies,
)
from hardstrings.core.models import Occurrence, SourceKind
from hardstrings.core.settings import ExtractionSettings


def _attr(name, value="Click me please", start=10):
    return Occurrence(
        start=start,
        end=start + len(value),
        text=value,
        source=SourceKind.HTML_ATTRIBUTE,
        attr_name=name,
        full_start=start - len(name) - 2,
        full_end=start + len(value) + 1,
    )


def test_vue_templates_per_source():
    vue = VueFramework()
    assert vue.refactor_templates("app.title", source=SourceKind.HTML_INLINE) == ["{{ $t('app.title') }}"]
    assert vue.refactor_templates("app.title", source=SourceKind.HTML_ATTRIBUTE) == ["$t('app.title')"]
    assert vue.refactor_templates("app.title", source=SourceKind.JS_STRING) == [
        "this.$t('app.title')", "i18n.t('app.title')", "t('app.title')",
    ]
    assert len(vue.refactor_templates("app.title")) == 7


def test_vue_api_style_narrows_script_templates():
    composition = VueFramework(ExtractionSettings(vue_api_style="composition"))
    options = VueFramework(ExtractionSettings(vue_api_style="options"))
    assert composition.refactor_templates("k", source=SourceKind.JS_STRING) == ["t('k')"]
    assert options.refactor_templates("k", source=SourceKind.JS_TEMPLATE) == ["this.$t('k')"]


def test_vue_params_use_list_arguments():
    vue = VueFramework()
    assert vue.refactor_templates("greet", ["user.name", "count"], SourceKind.JS_TEMPLATE)[0] == \
        "this.$t('greet', [user.name, count])"


def test_default_params_use_object_arguments():
    react = ReactI18nextFramework()
    assert react.refactor_templates("greet", ["user.name"], SourceKind.JS_TEMPLATE) == [
        "t('greet', { 0: user.name })", "i18n.t('greet', { 0: user.name })",
    ]


def test_svelte_templates():
    svelte = SvelteFramework()
    assert svelte.refactor_templates("a.b", source=SourceKind.HTML_INLINE) == ["{$_('a.b')}"]
    assert svelte.refactor_templates("a.b", source=SourceKind.JS_STRING) == ["$_('a.b')", "get(_)('a.b')"]


def test_vue_bound_attributes():
    vue = VueFramework()
    assert vue.is_bound_attribute(_attr(":label"))
    assert vue.is_bound_attribute(_attr("v-bind:title"))
    assert vue.is_bound_attribute(_attr("@click"))
    assert not vue.is_bound_attribute(_attr("label"))


def test_svelte_bound_attributes():
    svelte = SvelteFramework()
    assert svelte.is_bound_attribute(_attr("on:click"))
    assert svelte.is_bound_attribute(_attr("title", value="{greeting}"))
    assert not svelte.is_bound_attribute(_attr("title"))


def test_attribute_rewrites():
    text = '<my-button label="Submit">'
    occ = Occurrence(
        start=18, end=24, text="Submit", source=SourceKind.HTML_ATTRIBUTE,
        attr_name="label", full_start=11, full_end=25,
    )
    assert text[occ.full_start:occ.full_end] == 'label="Submit"'
    assert VueFramework().rewrite_attribute(occ, "$t('app.submit')") == (11, 25, ':label="$t(\'app.submit\')"')
    assert SvelteFramework().rewrite_attribute(occ, "$_('app.submit')") == (11, 25, "label={$_('app.submit')}")
    assert ReactI18nextFramework().rewrite_attribute(occ, "t('x')") is None


def test_existing_usage_matching():
    vue = VueFramework()
    assert vue.match_existing_usage("{{ $t('app.title') }}") == "app.title"
    assert vue.match_existing_usage("this.$t(\"menu.open\")") == "menu.open"
    assert vue.match_existing_usage("const a = 'plain'") is None

    text = "const a = t('hello.world')"
    spans = ReactI18nextFramework().existing_usage_spans(text)
    assert [key for key, _s, _e in spans] == ["hello.world"]


def test_registry_override_and_unknown_framework():
    registry = FrameworkRegistry(ExtractionSettings(enabled_frameworks=("svelte",)))
    assert [fw.id for fw in registry.enabled] == ["svelte"]
    assert registry.for_document("vue") is None

    with pytest.raises(ConfigError):
        FrameworkRegistry(ExtractionSettings(enabled_frameworks=("angular",)))


def test_registry_detects_from_package_json(tmp_path):
    (tmp_path / "package.json").write_text(json.dumps({
        "dependencies": {"svelte": "^4.0.0"},
        "devDependencies": {"svelte-i18n": "^4.0.0"},
    }), encoding="utf-8")
    assert "svelte-i18n" in read_package_dependencies(tmp_path)

    registry = FrameworkRegistry(ExtractionSettings(), project_root=tmp_path)
    assert [fw.id for fw in registry.enabled] == ["svelte"]


def test_registry_falls_back_to_language_detection(tmp_path):
    registry = FrameworkRegistry(ExtractionSettings(), project_root=tmp_path)
    assert registry.for_document("vue").id == "vue"
    assert registry.for_document("svelte").id == "svelte"
    assert registry.for_document("typescriptreact").id == "vue"
    assert registry.for_document("typescriptreact", is_auto=True).id == "react-i18next"

    registry = FrameworkRegistry(ExtractionSettings(detect_frameworks_by_language=False))
    assert registry.enabled == []
    with pytest.raises(NoFrameworkError):
        registry.require_for_document("vue")


def test_broken_package_json_is_ignored(tmp_path):
    (tmp_path / "package.json").write_text("{ not json", encoding="utf-8")
    assert read_package_dependencies(tmp_path) == set()


def test_composition_style_uses_t_in_templates():
    vue = VueFramework(ExtractionSettings(vue_api_style="composition"))
    assert vue.refactor_templates("app.submit", source=SourceKind.HTML_ATTRIBUTE) == ["t('app.submit')"]
    assert vue.refactor_templates("app.submit", source=SourceKind.HTML_INLINE) == ["{{ t('app.submit') }}"]
    options = VueFramework(ExtractionSettings(vue_api_style="options"))
    assert options.refactor_templates("app.submit", source=SourceKind.HTML_ATTRIBUTE) == ["$t('app.submit')"]


def test_keys_are_quoted_as_js_strings():
    assert quote_key("app.title") == "'app.title'"
    assert quote_key("Don't panic") == "'Don\\'t panic'"
    assert quote_key("a\\b") == "'a\\\\b'"
    assert quote_key("two\nlines") == "'two\\nlines'"
    assert ReactI18nextFramework().refactor_templates("It's", source=SourceKind.JS_STRING)[0] == "t('It\\'s')"


def test_vue_attribute_rewrite_escapes_double_quotes():
    occ = Occurrence(
        start=18, end=24, text="Submit", source=SourceKind.HTML_ATTRIBUTE,
        attr_name="label", full_start=11, full_end=25,
    )
    _start, _end, text = VueFramework().rewrite_attribute(occ, "$t('Say \"hi\"')")
    assert text == ":label=\"$t('Say &quot;hi&quot;')\""
