"""
HardStrings - Hard-coded String Extraction for i18n Projects
============================================================

Finds human-readable literals in Vue, Svelte and script sources, replaces them
with translation calls and stores the extracted text in locale files:
- Framework-aware detection (markup text, attributes, script strings)
- Several key generation strategies (slug, random, source, english)
- Bounded-concurrency batch extraction with cancellation
- JSON locale store with nested keys

License: MIT
"""

__version__ = "1.0.0"
