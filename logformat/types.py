from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Pattern, Union


class ValueType(str, Enum):
    """Target type a token's captured text is converted to."""
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    TIME = "time"
    DATE = "date"
    DATETIME = "datetime"

    @property
    def is_temporal(self) -> bool:
        return self in (ValueType.TIME, ValueType.DATE, ValueType.DATETIME)

    @property
    def format_field(self) -> str:
        """Name of the setting that must hold a temporal format for this type."""
        return f"{self.value} format"


class ErrorCode(str, Enum):
    NO_ERROR = "NO_ERROR"
    NO_MATCH = "NO_MATCH"
    TYPE_ERROR = "TYPE_ERROR"
    MISSING_FIELD = "MISSING_FIELD"
    UNKNOWN_TOKEN = "UNKNOWN_TOKEN"
    EMPTY_FORMAT = "EMPTY_FORMAT"
    INVALID_PATTERN = "INVALID_PATTERN"
    INVALID_TEMPORAL_FORMAT = "INVALID_TEMPORAL_FORMAT"
    NOT_COMPILED = "NOT_COMPILED"
    UNKNOWN_LOCALE = "UNKNOWN_LOCALE"


Value = Union[int, float, str, time, date, datetime]


def normalize_token_name(name: str) -> str:
    """Strip one leading and one trailing '%' so '%t', '%t%' and 't' are the same token."""
    if name.startswith("%"):
        name = name[1:]
    if name.endswith("%"):
        name = name[:-1]
    return name


@dataclass(frozen=True)
class TokenDescription:
    """How a token is recognized (pattern) and decoded (type, temporal_format)."""
    name: str
    pattern: str
    type: ValueType = ValueType.STRING
    # Temporal pattern in CLDR letters, required for time/date/datetime tokens
    temporal_format: str = ""


@dataclass(frozen=True)
class TokenInfo:
    """One compiled token reference of a line format, in template order."""
    token: str
    type: ValueType
    regex: Pattern[str]
    temporal_format: str = ""
    index: int = 0

    def capture(self, match: re.Match) -> str:
        """Text a regex match contributes: the first group if the pattern has groups."""
        if self.regex.groups:
            return match.group(1) or ""
        return match.group(0)


@dataclass(frozen=True)
class ParseError:
    """Outcome of a compile or match step; NO_ERROR means success."""
    code: ErrorCode
    text: str = ""
    token: str | None = None
    index: int | None = None
    position: int | None = None
    raw: str | None = None

    def __bool__(self) -> bool:
        return self.code is not ErrorCode.NO_ERROR

    @property
    def error_code(self) -> ErrorCode:
        return self.code

    @property
    def error_text(self) -> str:
        return self.text


NO_ERROR = ParseError(ErrorCode.NO_ERROR)


@dataclass
class FieldValue:
    """A captured field tagged with its declared type.

    - value: the decoded value, or None when conversion failed
    - raw: the text the token's regex captured
    """
    token: str
    type: ValueType
    raw: str
    value: Value | None = None

    @property
    def ok(self) -> bool:
        return self.value is not None

    def render(self) -> str:
        """Return the display form: ISO 8601 for temporal values, raw text on failure."""
        if self.value is None:
            return self.raw
        if isinstance(self.value, (time, date, datetime)):
            return self.value.isoformat()
        return str(self.value)


@dataclass
class ParseResult:
    """Container for one parsed sample line.

    - fields: one entry per token reference, in template order (partial on error)
    - error: NO_ERROR, or the first failure met on this line
    """
    line: str
    fields: list[FieldValue] = field(default_factory=list)
    error: ParseError = NO_ERROR

    @property
    def ok(self) -> bool:
        return not self.error

    def values(self) -> list[Value | None]:
        return [f.value for f in self.fields]

    def rendered(self) -> list[str]:
        return [f.render() for f in self.fields]
