import io

import pytest

from logformat.config import Config
from logformat.processor import FormatHistory, Processor
from logformat.types import ErrorCode

LOG = """\
12.03.2024 14:30:05 [worker-1] id=17
12.03.2024 14:30:06 [worker-2] id=x
13.03.2024 09:00:00 [main] id=3
14.03.2024 10:00:00 [main] id=4
"""


@pytest.fixture
def config():
    return Config.model_validate(
        {
            "format": "%d %t [%s] id=%i",
            "locale": "en_US",
            "tokens": {
                "d": {"format": "dd.MM.yyyy"},
                "t": {"format": "HH:mm:ss"},
                "s": {"pattern": r"[^\]]+"},
            },
        }
    )


def test_sample_is_bounded(config):
    processor = Processor(config=config)
    sample = processor.load_sample(io.StringIO(LOG))
    assert len(sample) == 3
    assert sample[0] == "12.03.2024 14:30:05 [worker-1] id=17"


def test_check_and_render(config):
    processor = Processor(config=config)
    processor.load_sample(io.StringIO(LOG))
    report = processor.check()
    assert not report.ok
    assert [r.ok for r in report.results] == [True, False, True]
    assert len(report.token_info) == 4

    lines = processor.render(report)
    assert lines[0] == (
        "OK: 12.03.2024 14:30:05 [worker-1] id=17 -> "
        "(2024-03-12, d, date), (14:30:05, t, time), (worker-1, s, string), (17, i, integer)"
    )
    assert lines[1].startswith("BAD: 12.03.2024 14:30:06 [worker-2] id=x -> 2024-03-12, 14:30:06, worker-2|")
    assert "'%i'" in lines[1]


def test_compile_error_renders_once(config):
    processor = Processor(config=config)
    processor.load_sample(io.StringIO(LOG))
    report = processor.check("%l %s")
    assert report.error.code is ErrorCode.MISSING_FIELD
    assert report.results == []
    rendered = processor.render(report)
    assert len(rendered) == 1
    assert rendered[0].startswith("ERROR: Fill format field")



def test_empty_sample_is_not_ok(config):
    processor = Processor(config=config)
    processor.load_sample(io.StringIO(""))
    report = processor.check()
    assert not report.error
    assert report.results == []
    assert not report.ok
    assert processor.render(report) == []

def test_history_tracks_compiled_formats(config):
    processor = Processor(config=config)
    processor.check()
    processor.check("%s")
    processor.check("%nope")
    processor.check()
    assert processor.history.items == ["%s", "%d %t [%s] id=%i"]


def test_history_select_and_clear():
    history = FormatHistory()
    history.add("%i")
    history.add("%s")
    assert history.select(0) == "%i"
    assert history.select(5) is None
    assert history.select(-1) is None
    history.clear()
    assert len(history) == 0


def test_custom_report_templates(config):
    report = {"ok": "{{ fields | map(attribute='value') | join('|') }}", "bad": "{{ error.code.value }}"}
    cfg = Config.model_validate({**config.model_dump(), "report": report})
    processor = Processor(config=cfg)
    dst = io.StringIO()
    processor.process_stream(io.StringIO(LOG), dst)
    assert dst.getvalue().splitlines() == [
        "2024-03-12|14:30:05|worker-1|17",
        "NO_MATCH",
        "2024-03-13|09:00:00|main|3",
    ]


def test_unknown_locale_rejected(config):
    with pytest.raises(ValueError):
        Processor(config=config.model_copy(update={"locale": "xx_XX"}))


def test_trailing_option_from_config(config):
    cfg = config.model_copy(update={"allow_trailing": False, "format": "%d"})
    processor = Processor(config=cfg)
    processor.load_sample(io.StringIO("12.03.2024 rest\n"))
    report = processor.check()
    assert report.results[0].error.code is ErrorCode.NO_MATCH
