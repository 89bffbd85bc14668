"""Compile a line-format template into an ordered list of segments.

Template grammar:

- '%%' is a literal '%'.
- '%' followed by word characters [A-Za-z0-9_] references the token named by
  the longest such run. A '%' right after the name ends the reference and is
  consumed, so '%Integer% done' is the token Integer then ' done', and two
  adjacent tokens are written '%t%%d'.
- A '%' followed by anything else is an error.
- All other characters are literal text.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Mapping

from .errors import (
    EmptyFormatError,
    InvalidPatternError,
    InvalidTemporalFormatError,
    MissingFieldError,
    TemporalPatternError,
    UnknownTokenError,
)
from .segments import LiteralSegment, Segment, TokenSegment
from .temporal import tokenize_pattern
from .types import TokenDescription, TokenInfo, ValueType, normalize_token_name

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"\w+", re.ASCII)


@dataclass(frozen=True)
class TemplatePart:
    """A scanned piece of template: literal text or a token name."""
    text: str
    is_token: bool
    position: int


@dataclass
class CompiledFormat:
    template: str
    segments: list[Segment] = field(default_factory=list)

    def token_infos(self) -> list[TokenInfo]:
        return [s.info for s in self.segments if isinstance(s, TokenSegment)]


def scan_template(template: str) -> list[TemplatePart]:
    """Split a template into literal and token parts, merging adjacent literals."""
    parts: list[TemplatePart] = []
    literal: list[str] = []
    literal_start = 0
    i = 0
    n = len(template)
    while i < n:
        char = template[i]
        if char != "%":
            if not literal:
                literal_start = i
            literal.append(char)
            i += 1
            continue
        if template.startswith("%%", i):
            if not literal:
                literal_start = i
            literal.append("%")
            i += 2
            continue
        m = _NAME_RE.match(template, i + 1)
        if m is None:
            raise UnknownTokenError("", i)
        if literal:
            parts.append(TemplatePart("".join(literal), False, literal_start))
            literal = []
        parts.append(TemplatePart(m.group(), True, i))
        i = m.end()
        if i < n and template[i] == "%":
            i += 1
    if literal:
        parts.append(TemplatePart("".join(literal), False, literal_start))
    return parts


def compile_format(template: str, descriptions: Mapping[str, TokenDescription]) -> CompiledFormat:
    """Resolve every token reference and compile its regex.

    Checks run in this order, each over the whole template: empty template,
    known temporal tokens without a format, unknown tokens, then regex and
    temporal format syntax. The first failure raises a FormatError subclass.
    """
    if not template:
        raise EmptyFormatError()
    registry = {normalize_token_name(name): desc for name, desc in descriptions.items()}
    parts = scan_template(template)
    references = [p for p in parts if p.is_token]

    for ref in references:
        desc = registry.get(ref.text)
        if desc is not None and desc.type.is_temporal and not desc.temporal_format:
            raise MissingFieldError(ref.text, desc.type)
    for ref in references:
        if ref.text not in registry:
            raise UnknownTokenError(ref.text, ref.position)

    # One regex per distinct token, shared by all of its references
    regexes: dict[str, re.Pattern[str]] = {}
    for ref in references:
        if ref.text in regexes:
            continue
        desc = registry[ref.text]
        try:
            regexes[ref.text] = re.compile(desc.pattern)
        except re.error as e:
            raise InvalidPatternError(ref.text, desc.pattern, str(e)) from e
        if desc.type.is_temporal:
            try:
                tokenize_pattern(desc.temporal_format)
            except TemporalPatternError as e:
                raise InvalidTemporalFormatError(ref.text, desc.temporal_format, str(e)) from e

    segments: list[Segment] = []
    index = 0
    for part in parts:
        if not part.is_token:
            segments.append(LiteralSegment(part.text))
            continue
        desc = registry[part.text]
        info = TokenInfo(
            token=part.text,
            type=desc.type,
            regex=regexes[part.text],
            temporal_format=desc.temporal_format if desc.type.is_temporal else "",
            index=index,
        )
        segments.append(TokenSegment(info))
        index += 1
    logger.debug("Compiled %r into %d segments (%d tokens)", template, len(segments), index)
    return CompiledFormat(template=template, segments=segments)


def default_token_descriptions() -> dict[str, TokenDescription]:
    """The six standard tokens; %t, %d and %l still need a temporal format."""
    return {
        "i": TokenDescription("i", r"[-+]?\d+", ValueType.INTEGER),
        "f": TokenDescription("f", r"[-+]?\d+(?:[.,]\d+)?", ValueType.FLOAT),
        "s": TokenDescription("s", r"\S+", ValueType.STRING),
        "t": TokenDescription("t", r"\d{1,2}:\d{2}(?::\d{2})?", ValueType.TIME),
        "d": TokenDescription("d", r"\d{1,4}[./-]\d{1,2}[./-]\d{1,4}", ValueType.DATE),
        "l": TokenDescription(
            "l", r"\d{1,4}[./-]\d{1,2}[./-]\d{1,4}[ T]\d{1,2}:\d{2}(?::\d{2})?", ValueType.DATETIME
        ),
    }
