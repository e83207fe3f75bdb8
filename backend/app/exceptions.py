"""Custom exceptions for the FLE logbook application."""

from enum import Enum


class FleLogbookError(Exception):
    """Base exception for FLE logbook application."""

    pass


class LexError(FleLogbookError):
    """Raised when log text cannot be decoded as UTF-8."""

    pass


class CompileErrorKind(str, Enum):
    MISSING_OPERATOR_CONTEXT = "MissingOperatorContext"
    UNKNOWN_DIRECTIVE = "UnknownDirective"
    MALFORMED_REFERENCE = "MalformedReference"
    INCOMPLETE_QSO = "IncompleteQso"
    INVALID_OPERAND = "InvalidOperand"
    UNEXPECTED_TOKEN = "UnexpectedToken"


class CompileError(FleLogbookError):
    """Raised for one rejected FLE line; collected by the compiler."""

    def __init__(self, kind: CompileErrorKind, message: str, column: int = 0, line: int = 0):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.column = column
        self.line = line


class ConversionError(FleLogbookError):
    """Raised when a single imported row cannot be mapped to a contact."""

    pass


class FormatError(FleLogbookError):
    """Raised when a contact lacks a field the export format requires."""

    pass


class UnknownDialectError(FleLogbookError, ValueError):
    """Raised for an unknown dialect or export target tag."""

    pass
