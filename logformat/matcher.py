from __future__ import annotations

import logging

from .compiler import CompiledFormat
from .locales import LocaleProvider
from .segments import TokenSegment
from .types import ErrorCode, FieldValue, NO_ERROR, ParseError, ParseResult, TokenInfo, ValueType

logger = logging.getLogger(__name__)


def coerce(info: TokenInfo, raw: str, locale: LocaleProvider) -> tuple[FieldValue, ParseError]:
    """Convert captured text to the token's type using the locale's conventions."""
    try:
        if info.type is ValueType.INTEGER:
            value = locale.parse_integer(raw)
        elif info.type is ValueType.FLOAT:
            value = locale.parse_float(raw)
        elif info.type is ValueType.STRING:
            value = raw
        else:
            value = locale.decode(raw, info.temporal_format, info.type)
    except ValueError as e:
        if info.type.is_temporal:
            detail = f"format {info.temporal_format!r}, locale {locale.identifier}"
        else:
            detail = f"locale {locale.identifier}"
        error = ParseError(
            code=ErrorCode.TYPE_ERROR,
            text=f"Token '%{info.token}' cannot convert {raw!r} to {info.type.value} ({detail}): {e}",
            token=info.token,
            index=info.index,
            raw=raw,
        )
        return FieldValue(info.token, info.type, raw), error
    return FieldValue(info.token, info.type, raw, value), NO_ERROR


def _coerce_all(captures: list[tuple[TokenInfo, str]], locale: LocaleProvider) -> tuple[list[FieldValue], ParseError]:
    fields: list[FieldValue] = []
    first_error = NO_ERROR
    for info, raw in captures:
        value, error = coerce(info, raw, locale)
        fields.append(value)
        if error and not first_error:
            first_error = error
    return fields, first_error


def match_line(
    compiled: CompiledFormat,
    line: str,
    locale: LocaleProvider,
    allow_trailing: bool = True,
) -> ParseResult:
    """Walk the segments over one line, then convert every captured field.

    Mismatches report NO_MATCH with the fields captured before the failure;
    conversion failures report the first TYPE_ERROR with all fields.
    """
    text = line.rstrip("\r\n")
    pos = 0
    captures: list[tuple[TokenInfo, str]] = []
    for segment in compiled.segments:
        m = segment.match(text, pos)
        if m is None:
            fields, _ = _coerce_all(captures, locale)
            return ParseResult(line=text, fields=fields, error=segment.mismatch(text, pos))
        if isinstance(segment, TokenSegment):
            captures.append((segment.info, m.text))
        pos = m.end

    fields, error = _coerce_all(captures, locale)
    if not allow_trailing and pos < len(text):
        error = ParseError(
            code=ErrorCode.NO_MATCH,
            text=f"Unexpected trailing text at position {pos}: {text[pos:]!r}",
            position=pos,
            raw=text[pos:],
        )
    logger.debug("%s: %r", error.code.value, text)
    return ParseResult(line=text, fields=fields, error=error)
