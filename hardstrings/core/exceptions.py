"""
Custom exceptions for HardStrings.
"""

class HardStringsError(Exception):
    """Base exception for HardStrings."""
    pass

class ParseError(HardStringsError):
    """Raised when a source document cannot be scanned."""
    pass

class TranslationError(HardStringsError):
    """Raised when the translation service fails."""
    pass

class ConfigError(HardStringsError):
    """Raised when configuration values are invalid."""
    pass

class NoFrameworkError(HardStringsError):
    """Raised when no framework adapter matches a document."""
    pass

class EditConflictError(HardStringsError):
    """Raised when replacement ranges overlap."""
    pass

class StoreError(HardStringsError):
    """Raised when the translation store cannot be read or written."""
    pass

class ExtractionCancelled(HardStringsError):
    """Raised when the user cancels an extraction."""
    pass
