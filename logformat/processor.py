from __future__ import annotations

import logging
from dataclasses import dataclass, field
from itertools import islice
from typing import TextIO

from jinja2 import Template

from .config import Config
from .jinja import DEFAULT_BAD_TEMPLATE, DEFAULT_ERROR_TEMPLATE, DEFAULT_OK_TEMPLATE, compile_template
from .parser import LogLineParser
from .types import NO_ERROR, ParseError, ParseResult, TokenInfo

logger = logging.getLogger(__name__)


@dataclass
class FormatHistory:
    """Line formats that compiled during this session, most recent last."""
    items: list[str] = field(default_factory=list)

    def add(self, template: str) -> None:
        """Record a format that compiled; adding one already present moves it to the end.

        Rejected formats never reach the history: Processor.check only calls
        this after set_line_format succeeds.
        """
        if template in self.items:
            self.items.remove(template)
        self.items.append(template)

    def select(self, index: int) -> str | None:
        """Return the format at 'index', or None when there is none."""
        if 0 <= index < len(self.items):
            return self.items[index]
        return None

    def clear(self) -> None:
        self.items.clear()

    def __len__(self) -> int:
        return len(self.items)


@dataclass
class CheckReport:
    template: str
    token_info: list[TokenInfo] = field(default_factory=list)
    results: list[ParseResult] = field(default_factory=list)
    # Compile error; when set no line was parsed
    error: ParseError = NO_ERROR

    @property
    def ok(self) -> bool:
        # An empty sample is not a pass
        return not self.error and bool(self.results) and all(r.ok for r in self.results)


@dataclass
class Processor:
    config: Config
    history: FormatHistory = field(default_factory=FormatHistory)
    sample: list[str] = field(default_factory=list)
    parser: LogLineParser = field(init=False)
    _templates: dict[str, Template] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.parser = LogLineParser(allow_trailing=self.config.allow_trailing)
        if self.config.locale and not self.parser.set_locale(self.config.locale):
            raise ValueError(self.parser.error().text)
        report = self.config.report
        self._templates = {
            "ok": compile_template(report.ok or DEFAULT_OK_TEMPLATE),
            "bad": compile_template(report.bad or DEFAULT_BAD_TEMPLATE),
            "error": compile_template(report.error or DEFAULT_ERROR_TEMPLATE),
        }

    def load_sample(self, src: TextIO) -> list[str]:
        """Read at most config.sample_lines lines from 'src', replacing the previous sample."""
        self.sample = [raw_line.rstrip("\r\n") for raw_line in islice(src, self.config.sample_lines)]
        logger.debug("Loaded %d sample lines", len(self.sample))
        return self.sample

    def check(self, template: str | None = None) -> CheckReport:
        """Compile 'template' (the profile's format by default) and parse the sample."""
        template = self.config.format if template is None else template
        self.parser.set_token_description(self.config.token_descriptions())
        if not self.parser.set_line_format(template):
            error = self.parser.error()
            logger.warning("Line format %r rejected: %s", template, error.text)
            return CheckReport(template=template, error=error)
        self.history.add(template)
        if not self.sample:
            logger.warning("No sample lines to check format %r against", template)
        return CheckReport(
            template=template,
            token_info=self.parser.token_info(),
            results=self.parser.check(self.sample),
        )

    def render(self, report: CheckReport) -> list[str]:
        if report.error:
            return [self._templates["error"].render(error=report.error, template=report.template)]
        rendered: list[str] = []
        for result in report.results:
            if result.ok:
                fields = [
                    {"value": f.render(), "token": f.token, "type": f.type.value, "raw": f.raw}
                    for f in result.fields
                ]
                rendered.append(self._templates["ok"].render(line=result.line, fields=fields))
            else:
                rendered.append(
                    self._templates["bad"].render(line=result.line, values=result.rendered(), error=result.error)
                )
        return rendered

    def process_stream(self, src: TextIO, dst: TextIO, template: str | None = None) -> CheckReport:
        self.load_sample(src)
        report = self.check(template)
        for text in self.render(report):
            dst.write(text + "\n")
        return report
