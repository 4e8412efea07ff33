from refclip.utils.timefmt import format_time, format_timestamp


def test_format_time_edge_cases():
    assert format_time(-1.0) == "00:00.000"  # negative clamps
    assert format_time(0.0) == "00:00.000"
    assert format_time(0.9996) == "00:01.000"
    assert format_time(61.0) == "01:01.000"
    assert format_time(3600 + 62.5).startswith("61:02")


def test_format_time_precision():
    assert format_time(1.2344) == "00:01.234"
    assert format_time(1.2345) == "00:01.235"  # rounds up (half-up)


def test_format_timestamp_hours_and_centiseconds():
    assert format_timestamp(0) == "00:00:00.00"
    assert format_timestamp(6108.35) == "01:41:48.35"
    assert format_timestamp(59.999) == "00:01:00.00"
    assert format_timestamp(0.29) == "00:00:00.29"


def test_format_timestamp_missing_value():
    assert format_timestamp(None) == "--:--:--"
    assert format_timestamp(None, placeholder="") == ""
    assert format_timestamp(-3.0) == "00:00:00.00"
