"""Exceptions raised by shell-secrets."""


class SecretsError(Exception):
    """Base exception for secrets errors."""
    pass


class ArgumentError(SecretsError):
    """Wrong number of arguments for an operation."""
    pass


class UnknownOperationError(SecretsError):
    """Operation name not recognized."""
    pass


class StoreIOError(SecretsError):
    """Store file could not be read or written."""
    pass


class DecodeError(SecretsError):
    """Malformed token or line in the store file."""
    pass


class EmptyValueError(SecretsError):
    """Refused to store an empty value entered at the prompt."""
    pass


class FormatError(SecretsError):
    """List format could not render a row."""
    pass
