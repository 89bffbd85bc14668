"""Jinja2 environment and report templates used across logformat.

The environment is created once at import time and reused for every check.
"""

from __future__ import annotations

from jinja2 import Environment, StrictUndefined, Template

# Singleton environment reused across the process
JINJA_ENV: Environment = Environment(undefined=StrictUndefined, autoescape=False)

DEFAULT_OK_TEMPLATE = (
    "OK: {{ line }} -> "
    "{% for f in fields %}({{ f.value }}, {{ f.token }}, {{ f.type }}){% if not loop.last %}, {% endif %}{% endfor %}"
)
DEFAULT_BAD_TEMPLATE = "BAD: {{ line }} -> {{ values | join(', ') }}|{{ error.text }}"
DEFAULT_ERROR_TEMPLATE = "ERROR: {{ error.text }}"


def compile_template(source: str) -> Template:
    """Compile a Jinja2 template from a string.
    """
    return JINJA_ENV.from_string(source)
