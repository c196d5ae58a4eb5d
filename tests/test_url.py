"""Tests for request URL construction."""

from datetime import datetime, timedelta, timezone

import pytest

from openweathermap.exceptions import OpenWeatherMapValidationError
from openweathermap.types import (
    UV_INDEX_URL,
    WEATHER_URL,
    HistoryType,
    Mode,
    TimePrecision,
    Units,
)
from openweathermap.url import (
    build_url,
    build_uv_index_url,
    format_uv_moment,
    history_suffix,
    redact_url,
    to_utc,
    unix_seconds,
)

MARCH_1 = datetime(2024, 3, 1, tzinfo=timezone.utc)


class TestBuildUrl:
    """Tests for the common URL layout."""

    def test_layout(self):
        url = build_url(WEATHER_URL, "q=Berlin", Units.METRIC, "de", Mode.XML, "", "stored")
        assert url == f"{WEATHER_URL}?q=Berlin&units=metric&lang=de&mode=xml&APPID=stored"

    def test_string_options(self):
        url = build_url(WEATHER_URL, "id=1", "imperial", "en", "json", "", "k")
        assert "&units=imperial&lang=en&mode=json&" in url

    def test_per_call_appid_wins(self):
        url = build_url(WEATHER_URL, "id=1", "metric", "en", "xml", "override", "stored")
        assert url.endswith("APPID=override")

    def test_missing_credential_leaves_it_empty(self):
        url = build_url(WEATHER_URL, "id=1", "metric", "en", "xml", "", "")
        assert url.endswith("&APPID=")

    def test_distinct_credentials_give_distinct_urls(self):
        first = build_url(WEATHER_URL, "id=1", "metric", "en", "xml", "a", "")
        second = build_url(WEATHER_URL, "id=1", "metric", "en", "xml", "b", "")
        assert first != second

    def test_invalid_units(self):
        with pytest.raises(OpenWeatherMapValidationError):
            build_url(WEATHER_URL, "id=1", "kelvin", "en", "xml", "", "k")

    def test_invalid_mode(self):
        with pytest.raises(OpenWeatherMapValidationError):
            build_url(WEATHER_URL, "id=1", "metric", "en", "csv", "", "k")


class TestHistorySuffix:
    """Tests for weather history parameters."""

    def test_with_count(self):
        assert history_suffix(MARCH_1, 24, HistoryType.HOUR) == (
            "&type=hour&start=1709251200&cnt=24"
        )

    def test_with_end(self):
        end = MARCH_1 + timedelta(days=1)
        assert history_suffix(MARCH_1, end, "day") == (
            "&type=day&start=1709251200&end=1709337600"
        )

    def test_naive_start_is_utc(self):
        assert history_suffix(datetime(2024, 3, 1), 1, "tick") == (
            "&type=tick&start=1709251200&cnt=1"
        )

    def test_unknown_type(self):
        with pytest.raises(OpenWeatherMapValidationError) as exc_info:
            history_suffix(MARCH_1, 24, "week")

        assert "tick" in str(exc_info.value)

    @pytest.mark.parametrize("end_or_count", [0, -1, "5", True, 2.5, None])
    def test_invalid_end_or_count(self, end_or_count):
        with pytest.raises(OpenWeatherMapValidationError):
            history_suffix(MARCH_1, end_or_count, "hour")


class TestTimes:
    def test_to_utc_naive(self):
        assert to_utc(datetime(2024, 3, 1)) == MARCH_1

    def test_to_utc_converts_offset(self):
        berlin = timezone(timedelta(hours=1))
        assert to_utc(datetime(2024, 3, 1, 1, tzinfo=berlin)) == MARCH_1

    def test_unix_seconds(self):
        assert unix_seconds(MARCH_1) == 1709251200


class TestUVIndexUrl:
    """Tests for UV index URLs and timestamp precision."""

    MOMENT = datetime(2024, 3, 5, 14, 30, 15, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "precision,expected",
        [
            ("year", "2024Z"),
            ("month", "2024-03Z"),
            ("day", "2024-03-05Z"),
            ("hour", "2024-03-05T14Z"),
            ("minute", "2024-03-05T14:30Z"),
            ("second", "2024-03-05T14:30:15Z"),
        ],
    )
    def test_precision(self, precision, expected):
        assert format_uv_moment(self.MOMENT, precision) == expected

    def test_moment_is_converted_to_utc(self):
        moment = datetime(2024, 3, 5, 16, 30, tzinfo=timezone(timedelta(hours=2)))
        assert format_uv_moment(moment, TimePrecision.HOUR) == "2024-03-05T14Z"

    @pytest.mark.parametrize(
        "precision,expected", [("year", "0999Z"), ("day", "0999-01-02Z")]
    )
    def test_early_years_are_zero_padded(self, precision, expected):
        moment = datetime(999, 1, 2, tzinfo=timezone.utc)
        assert format_uv_moment(moment, precision) == expected

    def test_unknown_precision(self):
        with pytest.raises(OpenWeatherMapValidationError):
            format_uv_moment(self.MOMENT, "week")

    def test_current(self):
        assert build_uv_index_url(40.75, -74.25, "k") == (
            f"{UV_INDEX_URL}/40.75,-74.25/current.json?appid=k"
        )

    def test_point_in_time(self):
        url = build_uv_index_url(40.75, -74.25, "k", self.MOMENT, "day")
        assert url == f"{UV_INDEX_URL}/40.75,-74.25/2024-03-05Z.json?appid=k"


class TestRedactUrl:
    def test_upper_case_parameter(self):
        url = f"{WEATHER_URL}?q=Berlin&mode=xml&APPID=secret"
        assert redact_url(url) == f"{WEATHER_URL}?q=Berlin&mode=xml&APPID=***"

    def test_lower_case_parameter(self):
        assert redact_url("https://x/current.json?appid=secret") == (
            "https://x/current.json?appid=***"
        )

    def test_keeps_following_parameters(self):
        assert redact_url("https://x?APPID=secret&cnt=10") == "https://x?APPID=***&cnt=10"
