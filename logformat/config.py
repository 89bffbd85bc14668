from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .compiler import default_token_descriptions
from .types import TokenDescription, ValueType, normalize_token_name

ValueTypeName = Literal["integer", "float", "string", "time", "date", "datetime"]


class TokenConfig(BaseModel):
    """Override or define one token.

    - pattern: regular expression capturing the token's text
    - format: temporal pattern (CLDR letters) for time/date/datetime tokens
    - type: target value type
    """
    pattern: str | None = Field(default=None, description="Regex matched at the cursor; group 1 is captured if present")
    format: str | None = Field(default=None, description="Temporal pattern such as 'dd.MM.yyyy' or 'HH:mm:ss'")
    type: ValueTypeName | None = None


class ReportConfig(BaseModel):
    """Jinja2 templates used to render check results; None selects the default."""
    ok: str | None = Field(default=None, description="Template for a line that parsed")
    bad: str | None = Field(default=None, description="Template for a line that failed")
    error: str | None = Field(default=None, description="Template for a format that did not compile")


class Config(BaseModel):
    """A log format profile loaded from YAML."""
    description: str | None = Field(default=None, description="Optional description of this profile")
    format: str = Field(default="", description="Line format template, e.g. '%d %t [%s] %i'")
    locale: str | None = Field(default=None, description="Locale for numbers and dates; environment default when unset")
    allow_trailing: bool = Field(default=True, description="Ignore text after the last segment")
    sample_lines: int = Field(default=3, description="Number of leading input lines to check")
    tokens: dict[str, TokenConfig] = Field(default_factory=dict)
    report: ReportConfig = Field(default_factory=ReportConfig)

    @field_validator("sample_lines")
    @classmethod
    def _validate_sample_lines(cls, v: int) -> int:
        if v < 1:
            raise ValueError("'sample_lines' must be at least 1")
        return v

    @field_validator("tokens")
    @classmethod
    def _validate_tokens(cls, v: dict[str, TokenConfig]) -> dict[str, TokenConfig]:
        defaults = default_token_descriptions()
        for name, tc in v.items():
            key = normalize_token_name(name)
            if not key:
                raise ValueError(f"token name {name!r} is empty")
            if key not in defaults and (tc.pattern is None or tc.type is None):
                raise ValueError(f"new token {name!r} needs both 'pattern' and 'type'")
        return v

    def token_descriptions(self) -> dict[str, TokenDescription]:
        descriptions = default_token_descriptions()
        for name, tc in self.tokens.items():
            key = normalize_token_name(name)
            base = descriptions.get(key)
            value_type = ValueType(tc.type) if tc.type else base.type
            descriptions[key] = TokenDescription(
                name=key,
                pattern=tc.pattern if tc.pattern is not None else base.pattern,
                type=value_type,
                temporal_format=tc.format if tc.format is not None else (base.temporal_format if base else ""),
            )
        return descriptions


def load_config(path: str | Path) -> Config:
    """Load YAML profile from 'path' and validate into a Config model."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    try:
        return Config.model_validate(data)
    except ValidationError as e:
        # Re-raise with a cleaner message for CLI users
        raise ValueError(str(e))
