from __future__ import annotations

import logging
from typing import Iterable, Mapping

from .compiler import CompiledFormat, compile_format, default_token_descriptions
from .errors import FormatError, LocaleNotFoundError
from .locales import LocaleProvider, default_locale
from .matcher import match_line
from .types import ErrorCode, NO_ERROR, ParseError, ParseResult, TokenDescription, TokenInfo

logger = logging.getLogger(__name__)

_NOT_COMPILED = ParseError(code=ErrorCode.NOT_COMPILED, text="No line format has been set")


class LogLineParser:
    """Compile a line format and apply it to sample lines.

    One instance per session. Token descriptions, line format and locale are
    set between checks; every operation records its outcome in error()
    instead of raising. Only the constructor raises, with
    LocaleNotFoundError for an unknown locale.
    """

    def __init__(self, locale: str | None = None, allow_trailing: bool = True):
        self._locale = LocaleProvider(locale or default_locale())
        self._descriptions: dict[str, TokenDescription] = default_token_descriptions()
        self._compiled: CompiledFormat | None = None
        self._compile_error: ParseError = _NOT_COMPILED
        self._error: ParseError = NO_ERROR
        self.allow_trailing = allow_trailing

    @property
    def locale(self) -> LocaleProvider:
        return self._locale

    @property
    def line_format(self) -> str | None:
        return self._compiled.template if self._compiled else None

    def set_token_description(self, descriptions: Mapping[str, TokenDescription]) -> None:
        """Replace the token registry; the line format must be set again afterwards."""
        self._descriptions = dict(descriptions)
        self._compiled = None
        self._compile_error = _NOT_COMPILED

    def token_descriptions(self) -> dict[str, TokenDescription]:
        return dict(self._descriptions)

    def set_line_format(self, template: str) -> bool:
        self._compiled = None
        try:
            self._compiled = compile_format(template, self._descriptions)
        except FormatError as e:
            logger.debug("Cannot compile %r: %s", template, e)
            self._compile_error = self._error = e.to_parse_error()
            return False
        self._compile_error = self._error = NO_ERROR
        return True

    def set_locale(self, identifier: str) -> bool:
        """Select the locale used for numbers and temporal values; compiled state is kept."""
        try:
            self._locale = LocaleProvider(identifier)
        except LocaleNotFoundError as e:
            self._error = e.to_parse_error()
            return False
        logger.debug("Locale set to %s", self._locale.identifier)
        self._error = NO_ERROR
        return True

    def token_info(self) -> list[TokenInfo]:
        return self._compiled.token_infos() if self._compiled else []

    def parse(self, line: str) -> ParseResult:
        if self._compiled is None:
            self._error = self._compile_error
            return ParseResult(line=line.rstrip("\r\n"), error=self._compile_error)
        result = match_line(self._compiled, line, self._locale, self.allow_trailing)
        self._error = result.error
        return result

    def parse_line(self, line: str) -> list[str]:
        """Return the rendered field values of a line; partial when error() is set."""
        return self.parse(line).rendered()

    def check(self, lines: Iterable[str]) -> list[ParseResult]:
        """Parse every line independently; a compile error yields no results."""
        if self._compiled is None:
            self.parse("")
            return []
        results = [self.parse(line) for line in lines]
        self._error = next((r.error for r in results if r.error), NO_ERROR)
        return results

    def error(self) -> ParseError:
        return self._error
