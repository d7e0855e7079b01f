import pytest

from timers.parser import (
    extract_label,
    parse_duration,
    parse_timer_id,
    parse_timer_request,
    strip_label,
)


def test_parse_hours_and_minutes():
    assert parse_duration("add 1h30m tea") == 5400


def test_parse_is_independent_of_token_order():
    expected = 2 * 86400 + 3 * 3600 + 4 * 60 + 5
    assert parse_duration("add 5s 4m 3h 2d x") == expected
    assert parse_duration("add 2d 3h 4m 5s x") == expected
    assert parse_duration("add 4m2d5s3h") == expected


def test_parse_without_tokens_is_zero():
    assert parse_duration("add reminder") == 0
    assert parse_duration("") == 0


def test_parse_only_first_match_per_unit_counts():
    assert parse_duration("add 10s 20s") == 10


def test_parse_fixed_width_keeps_trailing_digits():
    assert parse_duration("add 99s") == 99
    assert parse_duration("add 123s") == 23
    assert parse_duration("add 999d") == 999 * 86400


def test_parse_timer_request_returns_seconds_and_label():
    request = parse_timer_request("add 10m30s reminder")
    assert request.seconds == 630
    assert request.label == "10m30s reminder"
    assert request.raw_text == "add 10m30s reminder"


def test_zero_second_request():
    request = parse_timer_request("add 0s label")
    assert request.seconds == 0
    assert request.label == "0s label"


def test_offset_label_is_truncated():
    text = "add " + "x" * 600
    assert extract_label(text) == "x" * 512
    assert extract_label("add 5m hi", max_length=3) == "5m "


def test_offset_label_on_short_text_is_empty():
    assert extract_label("add") == ""
    assert extract_label("") == ""


def test_strip_label_drops_command_and_durations():
    assert strip_label("add 2s test") == "test"
    assert strip_label("add 1h30m  make   tea") == "make tea"
    assert strip_label("add") == ""


def test_strip_strategy_through_request():
    request = parse_timer_request("add 1m stretch", strategy="strip")
    assert request.seconds == 60
    assert request.label == "stretch"


def test_unknown_label_strategy_is_rejected():
    with pytest.raises(ValueError):
        parse_timer_request("add 1m x", strategy="tokens")


def test_parse_timer_id():
    assert parse_timer_id("remove 3") == 3
    assert parse_timer_id("remove 123456") == 12345
    assert parse_timer_id("remove") is None
    assert parse_timer_id("remove", default=16) == 16
    assert parse_timer_id("remove 7", default=16) == 7
