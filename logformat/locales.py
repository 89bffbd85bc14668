"""Locale lookups backed by Babel's CLDR data."""

from __future__ import annotations

import logging
from decimal import Decimal

import babel
from babel import Locale, UnknownLocaleError, localedata
from babel.dates import get_day_names, get_month_names, get_period_names
from babel.numbers import NumberFormatError, get_decimal_symbol, get_group_symbol, parse_decimal

from .errors import LocaleNotFoundError
from .temporal import TemporalDecoder
from .types import ValueType

logger = logging.getLogger(__name__)

FALLBACK_LOCALE = "en_US"


def parse_locale(identifier: str) -> Locale:
    """Parse 'de', 'de_DE', 'de-DE' or 'zh_Hans_CN' into a Babel Locale."""
    if not identifier or not identifier.strip():
        raise LocaleNotFoundError("Locale identifier is empty")
    try:
        return Locale.parse(identifier.strip().replace("-", "_"))
    except (UnknownLocaleError, ValueError) as e:
        raise LocaleNotFoundError(f"Unknown locale {identifier!r}: {e}") from e


class LocaleProvider:
    """Numeric and temporal conventions of one locale.

    Decoders built for temporal formats are kept per provider; selecting a
    different locale means building a new provider.
    """

    def __init__(self, identifier: str = FALLBACK_LOCALE):
        self._locale = parse_locale(identifier)
        self._decoders: dict[str, TemporalDecoder] = {}

    @property
    def identifier(self) -> str:
        return str(self._locale)

    @property
    def display_name(self) -> str:
        return self._locale.get_display_name("en") or self.identifier

    @property
    def decimal_symbol(self) -> str:
        return get_decimal_symbol(self._locale)

    @property
    def group_symbol(self) -> str:
        return get_group_symbol(self._locale)

    def month_names(self, width: str = "wide", context: str = "format") -> dict[int, str]:
        return dict(get_month_names(width, context, self._locale))

    def weekday_names(self, width: str = "wide", context: str = "format") -> dict[int, str]:
        """Weekday names keyed like date.weekday(): Monday is 0."""
        return dict(get_day_names(width, context, self._locale))

    def am_pm(self) -> tuple[list[str], list[str]]:
        """AM and PM markers, abbreviated form first."""
        am: list[str] = []
        pm: list[str] = []
        for width in ("abbreviated", "wide"):
            periods = get_period_names(width, "format", self._locale)
            for key, markers in (("am", am), ("pm", pm)):
                marker = periods.get(key)
                if marker and marker not in markers:
                    markers.append(marker)
        return am or ["AM"], pm or ["PM"]

    def parse_integer(self, text: str) -> int:
        """Parse an integer; group separators must sit where the locale groups digits."""
        if self.decimal_symbol in text:
            raise NumberFormatError(f"{text!r} is not a valid integer")
        value = self._parse_decimal(text)
        if not value.is_finite() or value != value.to_integral_value():
            raise NumberFormatError(f"{text!r} is not a valid integer")
        return int(value)

    def parse_float(self, text: str) -> float:
        """Parse a decimal number; '0.75' under de_DE is rejected rather than read as 75."""
        return float(self._parse_decimal(text))

    def _parse_decimal(self, text: str) -> Decimal:
        return parse_decimal(text, locale=self._locale, strict=True)

    def decoder(self, pattern: str) -> TemporalDecoder:
        decoder = self._decoders.get(pattern)
        if decoder is None:
            decoder = TemporalDecoder(pattern, self)
            self._decoders[pattern] = decoder
        return decoder

    def decode(self, text: str, pattern: str, kind: ValueType):
        """Decode text against a temporal pattern into a time, date or datetime.

        Raises TemporalDecodeError when the text does not fit the pattern.
        """
        return self.decoder(pattern).decode(text, kind)

    def __repr__(self) -> str:
        return f"LocaleProvider({self.identifier!r})"


def default_locale() -> str:
    """Locale of the environment (LANG, LC_ALL, ...) or en_US when unset or unknown."""
    identifier = babel.default_locale()
    if identifier:
        try:
            return str(parse_locale(identifier))
        except LocaleNotFoundError:
            logger.debug("Ignoring environment locale %r", identifier)
    return FALLBACK_LOCALE


def available_languages() -> dict[str, str]:
    """Map English language names to locale identifiers, one per language, sorted by name."""
    languages: dict[str, str] = {}
    for identifier in localedata.locale_identifiers():
        if "_" in identifier or identifier == "root":
            continue
        try:
            name = Locale.parse(identifier).english_name
        except (UnknownLocaleError, ValueError):
            continue
        if name and name not in languages:
            languages[name] = identifier
    return dict(sorted(languages.items()))
