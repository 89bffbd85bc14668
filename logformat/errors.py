"""Exceptions raised while compiling a line format or decoding values.

Compile errors derive from FormatError and carry the ErrorCode reported to
callers; LogLineParser turns them into ParseError values instead of letting
them escape.
"""

from __future__ import annotations

from .types import ErrorCode, ParseError, ValueType


class FormatError(Exception):
    """Base class for errors that abort compilation of a line format."""
    code: ErrorCode = ErrorCode.NO_MATCH

    def __init__(self, message: str, token: str | None = None, position: int | None = None):
        super().__init__(message)
        self.message = message
        self.token = token
        self.position = position

    def to_parse_error(self) -> ParseError:
        return ParseError(code=self.code, text=self.message, token=self.token, position=self.position)


class EmptyFormatError(FormatError):
    code = ErrorCode.EMPTY_FORMAT

    def __init__(self) -> None:
        super().__init__("Enter log file format line")


class UnknownTokenError(FormatError):
    """A template references a token name with no description."""
    code = ErrorCode.UNKNOWN_TOKEN

    def __init__(self, name: str, position: int):
        if name:
            message = f"Unknown token '%{name}' at position {position}"
        else:
            message = f"Expected a token name after '%' at position {position} (write '%%' for a literal '%')"
        super().__init__(message, token=name or None, position=position)


class MissingFieldError(FormatError):
    """A referenced time/date/datetime token has no temporal format."""
    code = ErrorCode.MISSING_FIELD

    def __init__(self, name: str, value_type: ValueType):
        super().__init__(
            f"Fill format field: token '%{name}' needs a {value_type.format_field}",
            token=name,
        )
        self.value_type = value_type


class InvalidPatternError(FormatError):
    code = ErrorCode.INVALID_PATTERN

    def __init__(self, name: str, pattern: str, reason: str):
        super().__init__(f"Token '%{name}' has an invalid regular expression {pattern!r}: {reason}", token=name)
        self.pattern = pattern


class InvalidTemporalFormatError(FormatError):
    code = ErrorCode.INVALID_TEMPORAL_FORMAT

    def __init__(self, name: str, temporal_format: str, reason: str):
        super().__init__(f"Token '%{name}' has an invalid format {temporal_format!r}: {reason}", token=name)
        self.temporal_format = temporal_format


class TemporalPatternError(ValueError):
    """A temporal format string uses unsupported syntax."""


class TemporalDecodeError(ValueError):
    """Text does not decode against a temporal format."""


class LocaleNotFoundError(ValueError):
    """A locale identifier is not known to the locale database."""

    def to_parse_error(self) -> ParseError:
        return ParseError(code=ErrorCode.UNKNOWN_LOCALE, text=str(self))
