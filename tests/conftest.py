import pytest

from logformat.parser import LogLineParser
from logformat.types import TokenDescription, ValueType


@pytest.fixture
def parser():
    return LogLineParser(locale="en_US")


@pytest.fixture
def app_tokens():
    """Registry for lines like '12.03.2024 14:30:05 [worker-1] jobs=17 load=0.75'."""
    return {
        "d": TokenDescription("d", r"\d{2}\.\d{2}\.\d{4}", ValueType.DATE, "dd.MM.yyyy"),
        "t": TokenDescription("t", r"\d{2}:\d{2}:\d{2}", ValueType.TIME, "HH:mm:ss"),
        "s": TokenDescription("s", r"[^\]]+", ValueType.STRING),
        "i": TokenDescription("i", r"\d+", ValueType.INTEGER),
        "f": TokenDescription("f", r"\d+[.,]\d+", ValueType.FLOAT),
    }


@pytest.fixture
def write_file(tmp_path):
    def _write(name: str, content: str):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path
    return _write
