"""Locale-aware decoding of time, date and datetime text.

Temporal formats use CLDR pattern letters, the same syntax babel.dates uses
for formatting, so a value formatted with a pattern decodes with it again:

    y, yyyy   year (1-4 digits / 4 digits)     yy       two-digit year
    M, MM     month number                     MMM/MMMM abbreviated/wide name
    L..LLLL   as M, with stand-alone names     d, dd    day of month
    E..EEE    abbreviated weekday              EEEE     wide weekday
    H, HH     hour 0-23                        k, kk    hour 1-24
    h, hh     hour 1-12                        K, KK    hour 0-11
    m, mm     minute                           s, ss    second
    S...      fraction of second               a        AM/PM marker
    Z, x, X   UTC offset (+02:00, +0200, Z)

Text between single quotes is literal, and '' is a single quote. Month and
weekday names and AM/PM markers come from the active locale and match
case-insensitively.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Protocol

from .errors import TemporalDecodeError, TemporalPatternError
from .types import ValueType

# Maximum run length accepted per pattern letter
_FIELD_LETTERS: dict[str, int] = {
    "y": 4, "M": 4, "L": 4, "d": 2, "E": 4,
    "H": 2, "k": 2, "h": 2, "K": 2, "m": 2, "s": 2,
    "S": 9, "a": 3, "Z": 5, "x": 5, "X": 5,
}

_OFFSET_RE = r"Z|[+-]\d{2}(?::?\d{2})?"

# Two-digit years below this pivot belong to the 2000s
_TWO_DIGIT_YEAR_PIVOT = 69


class LocaleNames(Protocol):
    """Locale lookups a decoder needs; implemented by LocaleProvider."""
    def month_names(self, width: str = "wide", context: str = "format") -> dict[int, str]: ...

    def weekday_names(self, width: str = "wide", context: str = "format") -> dict[int, str]: ...

    def am_pm(self) -> tuple[list[str], list[str]]: ...


@dataclass(frozen=True)
class PatternToken:
    text: str
    is_field: bool

    @property
    def letter(self) -> str:
        return self.text[0]


def tokenize_pattern(pattern: str) -> list[PatternToken]:
    """Split a CLDR temporal pattern into field and literal tokens.

    "dd.MM.yyyy" -> [dd, '.', MM, '.', yyyy]
    "h 'o''clock' a" -> [h, ' ', "o'clock", ' ', a]

    Raises TemporalPatternError for unknown letters, over-long runs and
    unterminated quotes. No locale is consulted.
    """
    if not pattern:
        raise TemporalPatternError("format is empty")
    tokens: list[PatternToken] = []
    i = 0
    n = len(pattern)
    while i < n:
        char = pattern[i]
        if char == "'":
            if i + 1 < n and pattern[i + 1] == "'":
                tokens.append(PatternToken("'", False))
                i += 2
                continue
            i += 1
            literal: list[str] = []
            closed = False
            while i < n:
                if pattern[i] == "'":
                    if i + 1 < n and pattern[i + 1] == "'":
                        literal.append("'")
                        i += 2
                        continue
                    i += 1
                    closed = True
                    break
                literal.append(pattern[i])
                i += 1
            if not closed:
                raise TemporalPatternError("unterminated quoted text")
            if literal:
                tokens.append(PatternToken("".join(literal), False))
            continue
        if char.isascii() and char.isalpha():
            j = i + 1
            while j < n and pattern[j] == char:
                j += 1
            run = pattern[i:j]
            limit = _FIELD_LETTERS.get(char)
            if limit is None:
                raise TemporalPatternError(f"unsupported pattern letter {char!r} at position {i}")
            if len(run) > limit:
                raise TemporalPatternError(f"{run!r} at position {i} is longer than {limit} letters")
            tokens.append(PatternToken(run, True))
            i = j
            continue
        tokens.append(PatternToken(char, False))
        i += 1
    return tokens


def _alternation(names: dict[str, int]) -> str:
    if not names:
        # locale has no names for this field: never match
        return r"(?!)"
    ordered = sorted(names, key=lambda s: (-len(s), s))
    return "|".join(re.escape(name) for name in ordered)


def _name_lookup(names: dict[int, str]) -> dict[str, int]:
    return {name.casefold(): number for number, name in names.items() if name}


class TemporalDecoder:
    """Regex-backed decoder for one (pattern, locale) pair."""

    def __init__(self, pattern: str, names: LocaleNames):
        self.pattern = pattern
        self._handlers: list[Callable[[dict, str], None]] = []
        self._letters: set[str] = set()
        parts: list[str] = []
        for token in tokenize_pattern(pattern):
            if not token.is_field:
                parts.append(re.escape(token.text))
                continue
            regex, handler = self._field(token, names)
            parts.append(f"({regex})")
            self._handlers.append(handler)
            self._letters.add(token.letter)
        self._regex = re.compile("".join(parts), re.IGNORECASE)

    def _field(self, token: PatternToken, names: LocaleNames) -> tuple[str, Callable[[dict, str], None]]:
        letter, width = token.letter, len(token.text)

        def number(key: str) -> Callable[[dict, str], None]:
            def store(parts: dict, text: str) -> None:
                parts[key] = int(text)
            return store

        digits = r"\d{1,2}" if width == 1 else r"\d{2}"
        if letter == "y":
            if width == 2:
                def two_digit_year(parts: dict, text: str) -> None:
                    value = int(text)
                    parts["year"] = value + (2000 if value < _TWO_DIGIT_YEAR_PIVOT else 1900)
                return r"\d{2}", two_digit_year
            return (r"\d{1,4}" if width == 1 else r"\d{4}"), number("year")
        if letter in "ML":
            if width <= 2:
                return digits, number("month")
            context = "format" if letter == "M" else "stand-alone"
            width_name = "abbreviated" if width == 3 else "wide"
            lookup = _name_lookup(names.month_names(width_name, context))
            return _alternation(lookup), self._named("month", lookup)
        if letter == "E":
            width_name = "wide" if width == 4 else "abbreviated"
            lookup = _name_lookup(names.weekday_names(width_name, "format"))
            return _alternation(lookup), self._named("weekday", lookup)
        if letter == "d":
            return digits, number("day")
        if letter in "HkhK":
            return digits, number(f"hour_{letter}")
        if letter == "m":
            return digits, number("minute")
        if letter == "s":
            return digits, number("second")
        if letter == "S":
            def fraction(parts: dict, text: str) -> None:
                parts["microsecond"] = int((text + "000000")[:6])
            return rf"\d{{{width}}}", fraction
        if letter == "a":
            am, pm = names.am_pm()
            lookup = {marker.casefold(): 0 for marker in am if marker}
            lookup.update({marker.casefold(): 12 for marker in pm if marker})
            return _alternation(lookup), self._named("period", lookup)
        # Z, x, X
        return _OFFSET_RE, self._offset

    @staticmethod
    def _named(key: str, lookup: dict[str, int]) -> Callable[[dict, str], None]:
        def store(parts: dict, text: str) -> None:
            value = lookup.get(text.casefold())
            if value is None:
                raise TemporalDecodeError(f"{text!r} is not a known {key} name")
            parts[key] = value
        return store

    @staticmethod
    def _offset(parts: dict, text: str) -> None:
        if text.upper() == "Z":
            parts["tzinfo"] = timezone.utc
            return
        sign = -1 if text[0] == "-" else 1
        digits = text[1:].replace(":", "")
        hours = int(digits[:2])
        minutes = int(digits[2:4] or 0)
        parts["tzinfo"] = timezone(sign * timedelta(hours=hours, minutes=minutes))

    def decode(self, text: str, kind: ValueType) -> time | date | datetime:
        m = self._regex.fullmatch(text)
        if m is None:
            raise TemporalDecodeError(f"{text!r} does not match format {self.pattern!r}")
        parts: dict = {}
        for handler, group in zip(self._handlers, m.groups()):
            handler(parts, group)
        try:
            return self._build(parts, kind)
        except ValueError as exc:
            raise TemporalDecodeError(f"{text!r} is not a valid {kind.value}: {exc}") from exc

    def _hour(self, parts: dict) -> int:
        period = parts.get("period")
        if "hour_H" in parts:
            return parts["hour_H"]
        if "hour_k" in parts:
            value = parts["hour_k"]
            if not 1 <= value <= 24:
                raise ValueError(f"hour {value} is outside 1..24")
            return 0 if value == 24 else value
        if "hour_h" in parts:
            value = parts["hour_h"]
            if not 1 <= value <= 12:
                raise ValueError(f"hour {value} is outside 1..12")
            return value if period is None else value % 12 + period
        if "hour_K" in parts:
            value = parts["hour_K"]
            if not 0 <= value <= 11:
                raise ValueError(f"hour {value} is outside 0..11")
            return value if period is None else value + period
        return 0

    def _build(self, parts: dict, kind: ValueType) -> time | date | datetime:
        clock = time(
            self._hour(parts),
            parts.get("minute", 0),
            parts.get("second", 0),
            parts.get("microsecond", 0),
            tzinfo=parts.get("tzinfo"),
        )
        if kind is ValueType.TIME:
            return clock
        day = date(parts.get("year", 1900), parts.get("month", 1), parts.get("day", 1))
        weekday = parts.get("weekday")
        if weekday is not None and {"y", "d"} <= self._letters and self._letters & {"M", "L"}:
            if day.weekday() != weekday:
                raise ValueError(f"{day.isoformat()} is not on the given weekday")
        if kind is ValueType.DATE:
            return day
        return datetime.combine(day, clock)
