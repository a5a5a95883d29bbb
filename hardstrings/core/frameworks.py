"""
Framework adapters
==================

One adapter per i18n framework. An adapter knows which languages it handles,
how to find hard-coded strings in them, how existing translation calls look
and which code replaces an extracted string.
"""

from __future__ import annotations

import html
import json
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple, Type

from .exceptions import ConfigError, NoFrameworkError
from .markup_parser import HTML_DIALECT, SVELTE_DIALECT, VUE_DIALECT, MarkupDialect, MarkupStringDetector
from .models import Document, Occurrence, SourceKind
from .rules import DEFAULT_DYNAMIC_RULES, DEFAULT_RULES, ExtractionRule
from .script_parser import ScriptStringDetector
from .settings import ExtractionSettings

logger = logging.getLogger(__name__)

# Substituted for `{key}` in usage patterns
KEY_PATTERN = r'[\w.\-\[\]/: ]*?'

AttributeEdit = Tuple[int, int, str]


def quote_key(keypath: str) -> str:
    """Single-quoted JS string literal for `keypath`."""
    escaped = (
        keypath.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f"'{escaped}'"


class Framework(ABC):
    id: str = ""
    display: str = ""
    language_ids: Tuple[str, ...] = ()
    # Languages scanned as markup; the rest go through the script scanner
    markup_language_ids: Tuple[str, ...] = ()
    detection_dependencies: Tuple[str, ...] = ()
    usage_match_regex: Tuple[str, ...] = ()
    support_auto_extraction: Tuple[str, ...] = ()
    dialect: MarkupDialect = HTML_DIALECT
    rules: Sequence[ExtractionRule] = DEFAULT_RULES
    dynamic_rules: Sequence[ExtractionRule] = DEFAULT_DYNAMIC_RULES

    def __init__(self, settings: Optional[ExtractionSettings] = None):
        self.settings = settings or ExtractionSettings()
        self.logger = logging.getLogger(self.__class__.__name__)
        self._usage_res = [
            re.compile(pattern.replace('{key}', KEY_PATTERN))
            for pattern in self.usage_match_regex
        ]

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.id}>"

    # --- Selection --------------------------------------------------------

    def applies_to(self, language_id: str) -> bool:
        return language_id in self.language_ids

    def detected_in(self, dependencies: Iterable[str]) -> bool:
        return any(dep in self.detection_dependencies for dep in dependencies)

    # --- Detection --------------------------------------------------------

    def detect_hard_strings(self, document: Document, settings: Optional[ExtractionSettings] = None) -> List[Occurrence]:
        settings = settings or self.settings
        script_detector = ScriptStringDetector(self.rules, self.dynamic_rules, settings.script_parser)
        if document.language_id in self.markup_language_ids:
            detector = MarkupStringDetector(
                self.dialect,
                self.rules,
                self.dynamic_rules,
                settings.markup_parser,
                script_detector=script_detector,
            )
            return list(detector.detect(document.text))
        return list(script_detector.detect(document.text))

    def is_bound_attribute(self, occurrence: Occurrence) -> bool:
        return False

    # --- Existing usages --------------------------------------------------

    def existing_usage_spans(self, text: str) -> List[Tuple[str, int, int]]:
        spans = []
        for usage_re in self._usage_res:
            for match in usage_re.finditer(text):
                spans.append((match.group(1), match.start(), match.end()))
        return spans

    def match_existing_usage(self, text: str) -> Optional[str]:
        for usage_re in self._usage_res:
            match = usage_re.search(text)
            if match:
                return match.group(1)
        return None

    # --- Replacement ------------------------------------------------------

    def format_params(self, keypath: str, args: Optional[Sequence[str]] = None) -> str:
        params = quote_key(keypath)
        if args:
            params += ', { ' + ', '.join(f'{i}: {arg}' for i, arg in enumerate(args)) + ' }'
        return params

    @abstractmethod
    def refactor_templates(self, keypath: str, args: Optional[Sequence[str]] = None,
                           source: Optional[SourceKind] = None) -> List[str]:
        raise NotImplementedError

    def rewrite_attribute(self, occurrence: Occurrence, template: str) -> Optional[AttributeEdit]:
        """Full-span replacement for an attribute occurrence, or None to
        replace the literal only."""
        return None


class VueFramework(Framework):
    id = "vue"
    display = "Vue"
    language_ids = ("vue", "vue-html", "javascript", "typescript", "javascriptreact", "typescriptreact", "ejs")
    markup_language_ids = ("vue", "vue-html")
    detection_dependencies = (
        "vue-i18n",
        "vuex-i18n",
        "@panter/vue-i18next",
        "@nuxtjs/i18n",
        "nuxt-i18n",
        "@intlify/nuxt3",
    )
    usage_match_regex = (
        r'''(?:i18n(?:-\w+)?[ \n]\s*(?:\w+=['"][^'"]*['"][ \n]\s*)?(?:key)?path=|v-t=['"`{]|(?:this\.|\$|i18n\.|[^\w\d])(?:t|tc|te)\()\s*['"`]({key})['"`]''',
    )
    support_auto_extraction = ("vue",)
    dialect = VUE_DIALECT

    bound_prefixes = (":", "v-bind:", "@", "v-on:", "#", "v-")

    def format_params(self, keypath: str, args: Optional[Sequence[str]] = None) -> str:
        params = quote_key(keypath)
        if args:
            params += f", [{', '.join(args)}]"
        return params

    def refactor_templates(self, keypath: str, args: Optional[Sequence[str]] = None,
                           source: Optional[SourceKind] = None) -> List[str]:
        params = self.format_params(keypath, args)

        style = self.settings.vue_api_style
        # `t` from useI18n() is exposed to <script setup> templates
        call = "t" if style == "composition" else "$t"

        if source is SourceKind.HTML_INLINE:
            return [f"{{{{ {call}({params}) }}}}"]
        if source is SourceKind.HTML_ATTRIBUTE:
            return [f"{call}({params})"]
        if source in (SourceKind.JS_STRING, SourceKind.JS_TEMPLATE):
            if style == "composition":
                return [f"t({params})"]
            if style == "options":
                return [f"this.$t({params})"]
            return [f"this.$t({params})", f"i18n.t({params})", f"t({params})"]

        return [
            f"{{{{ $t({params}) }}}}",
            f"this.$t({params})",
            f"$t({params})",
            f"i18n.t({params})",
            f"{{{{ t({params}) }}}}",
            f"t({params})",
            keypath,
        ]

    def is_bound_attribute(self, occurrence: Occurrence) -> bool:
        name = occurrence.attr_name
        if not occurrence.is_attribute or not name:
            return False
        return name.startswith(self.bound_prefixes)

    def rewrite_attribute(self, occurrence: Occurrence, template: str) -> Optional[AttributeEdit]:
        if not occurrence.is_attribute or occurrence.full_start is None or occurrence.full_end is None:
            return None
        value = html.escape(template, quote=False).replace('"', '&quot;')
        return occurrence.full_start, occurrence.full_end, f':{occurrence.attr_name}="{value}"'


class SvelteFramework(Framework):
    id = "svelte"
    display = "Svelte"
    language_ids = ("svelte", "javascript", "typescript")
    markup_language_ids = ("svelte",)
    detection_dependencies = ("svelte-i18n",)
    usage_match_regex = (
        r'''(?:\$_|\$t|\$format|get\(_\))\(\s*['"`]({key})['"`]''',
    )
    support_auto_extraction = ("svelte",)
    dialect = SVELTE_DIALECT

    directive_prefixes = ("on:", "bind:", "use:", "class:")

    def refactor_templates(self, keypath: str, args: Optional[Sequence[str]] = None,
                           source: Optional[SourceKind] = None) -> List[str]:
        params = self.format_params(keypath, args)

        if source is SourceKind.HTML_INLINE:
            return [f"{{$_({params})}}"]
        if source is SourceKind.HTML_ATTRIBUTE:
            return [f"$_({params})"]
        if source in (SourceKind.JS_STRING, SourceKind.JS_TEMPLATE):
            return [f"$_({params})", f"get(_)({params})"]

        return [f"{{$_({params})}}", f"$_({params})", f"get(_)({params})", keypath]

    def is_bound_attribute(self, occurrence: Occurrence) -> bool:
        name = occurrence.attr_name
        if not occurrence.is_attribute or not name:
            return False
        if name.startswith(self.directive_prefixes):
            return True
        value = occurrence.key_text.strip()
        return value.startswith('{') and value.endswith('}')

    def rewrite_attribute(self, occurrence: Occurrence, template: str) -> Optional[AttributeEdit]:
        if not occurrence.is_attribute or occurrence.full_start is None or occurrence.full_end is None:
            return None
        return occurrence.full_start, occurrence.full_end, f'{occurrence.attr_name}={{{template}}}'


class ReactI18nextFramework(Framework):
    id = "react-i18next"
    display = "React i18next"
    language_ids = ("javascript", "typescript", "javascriptreact", "typescriptreact")
    detection_dependencies = ("react-i18next", "next-i18next")
    usage_match_regex = (
        r'''(?:[^\w\d]|^)(?:i18nKey=|t\(|i18n\.t\()\s*['"`]({key})['"`]''',
    )
    support_auto_extraction = ("javascriptreact", "typescriptreact")

    def refactor_templates(self, keypath: str, args: Optional[Sequence[str]] = None,
                           source: Optional[SourceKind] = None) -> List[str]:
        params = self.format_params(keypath, args)
        return [f"t({params})", f"i18n.t({params})"]


DEFAULT_FRAMEWORKS: Tuple[Type[Framework], ...] = (VueFramework, SvelteFramework, ReactI18nextFramework)


def read_package_dependencies(project_root: Optional[Path]) -> Set[str]:
    """Dependency names declared in `<project_root>/package.json`."""
    if project_root is None:
        return set()
    manifest = Path(project_root) / "package.json"
    if not manifest.is_file():
        return set()
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read {manifest}: {e}")
        return set()

    names: Set[str] = set()
    for section in ("dependencies", "devDependencies", "peerDependencies"):
        deps = data.get(section)
        if isinstance(deps, dict):
            names.update(deps.keys())
    return names


class FrameworkRegistry:
    """Picks the framework adapter for each document."""

    def __init__(self, settings: Optional[ExtractionSettings] = None,
                 project_root: Optional[Path] = None,
                 framework_classes: Sequence[Type[Framework]] = DEFAULT_FRAMEWORKS):
        self.logger = logging.getLogger(__name__)
        self.settings = settings or ExtractionSettings()
        self.available: Dict[str, Framework] = {cls.id: cls(self.settings) for cls in framework_classes}
        self.enabled: List[Framework] = self.enabled_frameworks(self.settings, project_root)

    def enabled_frameworks(self, settings: ExtractionSettings,
                           project_root: Optional[Path] = None) -> List[Framework]:
        if settings.enabled_frameworks:
            unknown = [fid for fid in settings.enabled_frameworks if fid not in self.available]
            if unknown:
                raise ConfigError(
                    f"Unknown framework(s): {', '.join(unknown)} "
                    f"(available: {', '.join(self.available)})"
                )
            return [self.available[fid] for fid in settings.enabled_frameworks]

        dependencies = read_package_dependencies(project_root)
        if dependencies:
            detected = [fw for fw in self.available.values() if fw.detected_in(dependencies)]
            if detected:
                self.logger.info(f"Detected frameworks: {', '.join(fw.id for fw in detected)}")
                return detected

        if settings.detect_frameworks_by_language:
            return list(self.available.values())
        return []

    def for_document(self, language_id: str, is_auto: bool = False) -> Optional[Framework]:
        for framework in self.enabled:
            if not framework.applies_to(language_id):
                continue
            if is_auto and language_id not in framework.support_auto_extraction:
                continue
            return framework
        return None

    def require_for_document(self, language_id: str, is_auto: bool = False) -> Framework:
        framework = self.for_document(language_id, is_auto)
        if framework is None:
            raise NoFrameworkError(f"No framework handles language '{language_id}'")
        return framework
