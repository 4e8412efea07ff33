from datetime import datetime, timezone

from refclip.core.checks import is_number, is_valid_url
from refclip.utils.isotime import parse_iso, to_iso


def test_is_number():
    assert is_number(0) and is_number(1.5)
    assert not is_number(True)
    assert not is_number(float("nan"))
    assert not is_number("1")


def test_is_valid_url():
    assert is_valid_url("https://example.com/game?id=1")
    assert is_valid_url("file:///C:/videos/game.mp4")
    assert not is_valid_url("example.com")
    assert not is_valid_url("https://exa mple.com")
    assert not is_valid_url("")
    assert not is_valid_url(None)


def test_iso_round_trip():
    dt = datetime(2025, 11, 11, 10, 30, 0, 123456, tzinfo=timezone.utc)
    text = to_iso(dt)
    assert text == "2025-11-11T10:30:00.123456Z"
    assert parse_iso(text) == dt


def test_parse_iso_variants():
    assert parse_iso("2025-11-11T10:30:00.000Z") == datetime(2025, 11, 11, 10, 30, tzinfo=timezone.utc)
    assert parse_iso("2025-11-11T12:30:00+02:00") == datetime(2025, 11, 11, 10, 30, tzinfo=timezone.utc)
    assert parse_iso("2025-11-15") == datetime(2025, 11, 15, tzinfo=timezone.utc)
    assert parse_iso("yesterday") is None
    assert parse_iso(12) is None


def test_is_number_rejects_non_finite():
    assert not is_number(float("inf"))
    assert not is_number(10 ** 400)


def test_parse_iso_out_of_range_offset():
    assert parse_iso("9999-12-31T23:59:59-05:00") is None
    assert parse_iso("0001-01-01T00:00:00+05:00") is None
