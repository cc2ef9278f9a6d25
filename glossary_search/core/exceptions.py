"""Exception hierarchy shared by the core, storage and service layers."""


class GlossaryError(Exception):
    """Base class for all glossary errors."""


class InvalidSearchOptionError(GlossaryError, ValueError):
    """Raised when a caller passes an unsupported option value."""


class NotFoundError(GlossaryError, LookupError):
    """Raised when a referenced dictionary, term or definition does not exist."""


class DuplicateDictionaryError(GlossaryError):
    """Raised when a dictionary name is already taken."""


class DuplicateTermError(GlossaryError):
    """Raised when a term already exists in the target dictionary."""


class TransferError(GlossaryError, ValueError):
    """Raised when import data cannot be parsed."""


class TextTooLongError(GlossaryError, ValueError):
    """Raised when a text to scan exceeds the configured maximum length."""
