"""
Core module for HardStrings
===========================
"""

from .detection import HardStringDetector
from .documents import DocumentSource, FileDocumentSource, apply_replacements
from .exceptions import (
    ConfigError, EditConflictError, ExtractionCancelled, HardStringsError,
    NoFrameworkError, ParseError, StoreError, TranslationError,
)
from .extraction import BatchExtractor
from .frameworks import (
    Framework, FrameworkRegistry, ReactI18nextFramework, SvelteFramework, VueFramework
)
from .hard_string import ParsedHardString, parse_hard_string
from .keygen import KeyGenerator, UsedKeys, change_case, slugify
from .markup_parser import detect_markup_strings
from .models import (
    Document, ExtractionPlanItem, ExtractionReport, ExtractionStatus,
    Occurrence, SourceKind, TranslationRecord,
)
from .progress import CancellationToken, LoggingReporter, NotificationKind, ProgressReporter
from .retry import RetryPolicy
from .script_parser import detect_script_strings
from .settings import ExtractionSettings, MarkupParserOptions, ScriptParserOptions, TranslatorSettings
from .store import JsonLocaleStore, TranslationStore
from .translator import BaseTranslator, GoogleTranslator, PseudoTranslator, build_translator

__all__ = [
    'HardStringDetector',
    'DocumentSource', 'FileDocumentSource', 'apply_replacements',
    'ConfigError', 'EditConflictError', 'ExtractionCancelled', 'HardStringsError',
    'NoFrameworkError', 'ParseError', 'StoreError', 'TranslationError',
    'BatchExtractor',
    'Framework', 'FrameworkRegistry', 'ReactI18nextFramework', 'SvelteFramework', 'VueFramework',
    'ParsedHardString', 'parse_hard_string',
    'KeyGenerator', 'UsedKeys', 'change_case', 'slugify',
    'detect_markup_strings', 'detect_script_strings',
    'Document', 'ExtractionPlanItem', 'ExtractionReport', 'ExtractionStatus',
    'Occurrence', 'SourceKind', 'TranslationRecord',
    'CancellationToken', 'LoggingReporter', 'NotificationKind', 'ProgressReporter',
    'RetryPolicy',
    'ExtractionSettings', 'MarkupParserOptions', 'ScriptParserOptions', 'TranslatorSettings',
    'JsonLocaleStore', 'TranslationStore',
    'BaseTranslator', 'GoogleTranslator', 'PseudoTranslator', 'build_translator',
]
