from datetime import date, datetime, time

from logformat.parser import LogLineParser
from logformat.types import ErrorCode, TokenDescription, ValueType

APP_FORMAT = "%d %t [%s] jobs=%i load=%f"
APP_LINE = "12.03.2024 14:30:05 [worker-1] jobs=17 load=0.75"


def _integer_parser():
    parser = LogLineParser(locale="en_US")
    parser.set_token_description({"Integer": TokenDescription("Integer", r"\d+", ValueType.INTEGER)})
    assert parser.set_line_format("id=%Integer% done")
    return parser


def test_integer_example():
    parser = _integer_parser()
    result = parser.parse("id=42 done")
    assert result.values() == [42]
    assert parser.parse_line("id=42 done") == ["42"]
    assert parser.error().code is ErrorCode.NO_ERROR
    assert not parser.error()


def test_integer_example_mismatch():
    parser = _integer_parser()
    assert parser.parse_line("id=x done") == []
    error = parser.error()
    assert error.code is ErrorCode.NO_MATCH
    assert error.token == "Integer"
    assert "Integer" in error.text
    assert error.position == 3


def test_type_error_names_token_and_text():
    parser = LogLineParser(locale="en_US")
    parser.set_token_description({"Integer": TokenDescription("Integer", r"\S+", ValueType.INTEGER)})
    parser.set_line_format("id=%Integer% done")
    result = parser.parse("id=4x2 done")
    assert result.error.code is ErrorCode.TYPE_ERROR
    assert result.error.token == "Integer"
    assert result.error.raw == "4x2"
    assert "Integer" in result.error.text and "4x2" in result.error.text
    assert result.rendered() == ["4x2"]


def test_full_line(app_tokens):
    parser = LogLineParser(locale="en_US")
    parser.set_token_description(app_tokens)
    assert parser.set_line_format(APP_FORMAT)
    result = parser.parse(APP_LINE)
    assert result.ok
    assert result.values() == [date(2024, 3, 12), time(14, 30, 5), "worker-1", 17, 0.75]
    assert parser.parse_line(APP_LINE) == ["2024-03-12", "14:30:05", "worker-1", "17", "0.75"]
    assert [i.token for i in parser.token_info()] == ["d", "t", "s", "i", "f"]


def test_round_trip_substituted_values(app_tokens):
    parser = LogLineParser(locale="en_US")
    parser.set_token_description(app_tokens)
    parser.set_line_format(APP_FORMAT)
    values = {"d": "01.02.2023", "t": "23:59:59", "s": "main", "i": "0", "f": "12.5"}
    line = f"{values['d']} {values['t']} [{values['s']}] jobs={values['i']} load={values['f']}"
    assert parser.parse(line).values() == [date(2023, 2, 1), time(23, 59, 59), "main", 0, 12.5]


def test_parsing_is_idempotent(app_tokens):
    parser = LogLineParser(locale="en_US")
    parser.set_token_description(app_tokens)
    parser.set_line_format(APP_FORMAT)
    assert parser.parse(APP_LINE) == parser.parse(APP_LINE)
    bad = "12.03.2024 14:30:05 [worker-1] jobs=x"
    assert parser.parse(bad) == parser.parse(bad)


def test_missing_format_fails_before_matching(parser):
    assert not parser.set_line_format("%t %s")
    assert parser.error().code is ErrorCode.MISSING_FIELD
    assert parser.check(["14:30 hello"]) == []
    assert parser.error().code is ErrorCode.MISSING_FIELD
    assert parser.token_info() == []


def test_unknown_token(parser):
    assert not parser.set_line_format("%i %nope")
    assert parser.error().code is ErrorCode.UNKNOWN_TOKEN
    assert parser.error().token == "nope"
    assert parser.parse("1 x").error.code is ErrorCode.UNKNOWN_TOKEN


def test_parse_before_format(parser):
    result = parser.parse("anything")
    assert result.error.code is ErrorCode.NOT_COMPILED
    assert parser.error().code is ErrorCode.NOT_COMPILED


def test_new_descriptions_require_new_format(parser):
    assert parser.set_line_format("%i")
    parser.set_token_description({"n": TokenDescription("n", r"\d+", ValueType.INTEGER)})
    assert parser.token_info() == []
    assert parser.parse("5").error.code is ErrorCode.NOT_COMPILED


def test_partial_values_on_literal_mismatch(parser):
    parser.set_line_format("%i-%i")
    result = parser.parse("5+6")
    assert result.error.code is ErrorCode.NO_MATCH
    assert result.values() == [5]
    assert "'-'" in result.error.text


def test_capture_group_selects_value():
    parser = LogLineParser(locale="en_US")
    parser.set_token_description({"pid": TokenDescription("pid", r"\[(\d+)\]", ValueType.INTEGER)})
    parser.set_line_format("sshd%pid%: ok")
    assert parser.parse("sshd[731]: ok").values() == [731]


def test_trailing_text(parser):
    parser.set_line_format("%i")
    assert parser.parse("42 and more").ok
    parser.allow_trailing = False
    result = parser.parse("42 and more")
    assert result.error.code is ErrorCode.NO_MATCH
    assert result.error.raw == " and more"
    assert parser.parse("42").ok


def test_line_endings_are_stripped(parser):
    parser.allow_trailing = False
    parser.set_line_format("%s")
    result = parser.parse("word\r\n")
    assert result.ok
    assert result.values() == ["word"]


def test_locale_change_keeps_format():
    parser = LogLineParser(locale="en_US")
    parser.set_token_description({"d": TokenDescription("d", r"\d+ \w+ \d+", ValueType.DATE, "d MMMM yyyy")})
    parser.set_line_format("on %d")
    assert parser.parse("on 12 March 2024").values() == [date(2024, 3, 12)]
    assert parser.parse("on 12 März 2024").error.code is ErrorCode.TYPE_ERROR

    assert parser.set_locale("de_DE")
    assert parser.line_format == "on %d"
    assert parser.parse("on 12 März 2024").values() == [date(2024, 3, 12)]
    result = parser.parse("on 12 March 2024")
    assert result.error.code is ErrorCode.TYPE_ERROR
    assert "d MMMM yyyy" in result.error.text


def test_locale_changes_numbers(parser):
    parser.set_line_format("v=%f")
    assert parser.parse("v=3,5").error.code is ErrorCode.TYPE_ERROR
    parser.set_locale("de_DE")
    assert parser.parse("v=3,5").values() == [3.5]


def test_decimal_point_is_type_error_under_de(parser):
    parser.set_locale("de_DE")
    parser.set_line_format("load=%f")
    result = parser.parse("load=0.75")
    assert result.error.code is ErrorCode.TYPE_ERROR
    assert result.error.token == "f"
    assert "de_DE" in result.error.text


def test_unknown_locale_keeps_previous(parser):
    assert not parser.set_locale("xx_XX")
    assert parser.error().code is ErrorCode.UNKNOWN_LOCALE
    assert parser.locale.identifier == "en_US"


def test_check_reports_each_line(parser):
    parser.set_line_format("%i %s")
    results = parser.check(["1 a", "x b", "3 c"])
    assert [r.ok for r in results] == [True, False, True]
    assert results[2].values() == [3, "c"]
    assert parser.error().code is ErrorCode.NO_MATCH


def test_datetime_token():
    parser = LogLineParser(locale="en_US")
    parser.set_token_description(
        {"l": TokenDescription("l", r"\d{4}-\d{2}-\d{2} [\d:]+", ValueType.DATETIME, "yyyy-MM-dd HH:mm:ss")}
    )
    parser.set_line_format("%l%|")
    result = parser.parse("2024-03-12 14:30:05|rest")
    assert result.values() == [datetime(2024, 3, 12, 14, 30, 5)]
    assert result.rendered() == ["2024-03-12T14:30:05"]
