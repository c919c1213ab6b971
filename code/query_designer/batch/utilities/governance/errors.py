"""
Exceptions and warnings raised by the query governance pipeline.
"""

from typing import Optional


class QueryDesignerError(Exception):
    """Base exception for the query designer."""

    pass


class UnsupportedDialectError(QueryDesignerError):
    """Exception raised when no diagnostic syntax exists for a dialect."""

    def __init__(self, dialect: Optional[str], reason: Optional[str] = None):
        self.dialect = dialect
        self.reason = reason
        if reason:
            message = f"Unsupported dialect '{dialect}': {reason}"
        else:
            message = f"Unsupported dialect: '{dialect}'"
        super().__init__(message)


class GovernanceConfigError(QueryDesignerError):
    """Exception raised when policy configuration cannot be loaded."""

    pass


class MalformedMetadataWarning(UserWarning):
    """Issued when a metadata marker is present but no fields could be parsed."""

    pass
