from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .types import ErrorCode, ParseError, TokenInfo

# Remaining input shown in mismatch messages is cut to this many characters
_PREVIEW_LENGTH = 40


def _preview(line: str, pos: int) -> str:
    rest = line[pos:]
    if len(rest) > _PREVIEW_LENGTH:
        return rest[:_PREVIEW_LENGTH] + "..."
    return rest


@dataclass(frozen=True)
class SegmentMatch:
    end: int
    text: str


class Segment:
    """Abstract base for one compiled piece of a line format.

    match() consumes input at a cursor position and returns where the
    segment ends; mismatch() explains why it could not.
    """
    def match(self, line: str, pos: int) -> Optional[SegmentMatch]:
        raise NotImplementedError

    def mismatch(self, line: str, pos: int) -> ParseError:
        raise NotImplementedError


@dataclass(frozen=True)
class LiteralSegment(Segment):
    """Text that must appear verbatim."""
    text: str

    def match(self, line: str, pos: int) -> Optional[SegmentMatch]:
        if line.startswith(self.text, pos):
            return SegmentMatch(end=pos + len(self.text), text=self.text)
        return None

    def mismatch(self, line: str, pos: int) -> ParseError:
        return ParseError(
            code=ErrorCode.NO_MATCH,
            text=f"Expected {self.text!r} at position {pos}, found {_preview(line, pos)!r}",
            position=pos,
            raw=line[pos:],
        )


@dataclass(frozen=True)
class TokenSegment(Segment):
    """A token reference, matched by its regex anchored at the cursor."""
    info: TokenInfo

    def match(self, line: str, pos: int) -> Optional[SegmentMatch]:
        m = self.info.regex.match(line, pos)
        if m is None:
            return None
        return SegmentMatch(end=m.end(), text=self.info.capture(m))

    def mismatch(self, line: str, pos: int) -> ParseError:
        return ParseError(
            code=ErrorCode.NO_MATCH,
            text=(
                f"Token '%{self.info.token}' ({self.info.type.value}) pattern {self.info.regex.pattern!r} "
                f"does not match at position {pos}: {_preview(line, pos)!r}"
            ),
            token=self.info.token,
            index=self.info.index,
            position=pos,
            raw=line[pos:],
        )
