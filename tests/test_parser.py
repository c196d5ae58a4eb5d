"""Tests for response decoding and error envelope detection."""

import logging

import pytest

from openweathermap.exceptions import OpenWeatherMapAPIError, OpenWeatherMapResponseError
from openweathermap.parser import (
    ErrorEnvelope,
    Undecodable,
    attempt_json,
    attempt_xml,
    classify,
    error_code,
    parse_json,
    parse_status_envelope,
    parse_xml,
)


class TestStages:
    """Tests for the individual decoding stages."""

    def test_attempt_xml_success(self):
        root = attempt_xml("<current><city id='1'/></current>")
        assert root.tag == "current"

    def test_attempt_xml_failure(self):
        assert isinstance(attempt_xml("not xml"), Undecodable)

    def test_attempt_json_failure(self):
        assert isinstance(attempt_json("{broken"), Undecodable)

    def test_classify_envelope(self):
        assert classify({"cod": "401", "message": "Invalid API key"}) == ErrorEnvelope(
            message="Invalid API key", code=401
        )

    def test_classify_null_message_is_payload(self):
        document = {"message": None, "list": []}
        assert classify(document) is document

    @pytest.mark.parametrize(
        "value,expected",
        [("404", 404), (401, 401), (None, 0), ("abc", 0)],
    )
    def test_error_code(self, value, expected):
        assert error_code(value) == expected


class TestParseXml:
    """Tests for parse_xml."""

    def test_valid_document(self):
        root = parse_xml("<current><city id='2950159'/></current>")
        assert root.find("city").get("id") == "2950159"

    def test_with_declaration(self, current_xml):
        assert parse_xml(current_xml).tag == "current"

    def test_error_envelope(self, not_found_json):
        with pytest.raises(OpenWeatherMapAPIError) as exc_info:
            parse_xml(not_found_json)

        assert exc_info.value.code == 404
        assert exc_info.value.message == "city not found"
        assert str(exc_info.value) == "API error 404: city not found"

    def test_envelope_without_code(self):
        with pytest.raises(OpenWeatherMapAPIError) as exc_info:
            parse_xml('{"message": "something went wrong"}')

        assert exc_info.value.code == 0

    @pytest.mark.parametrize("body", ["not xml at all", "", '{"cod": 200}', "[1, 2]"])
    def test_garbage(self, body):
        with pytest.raises(OpenWeatherMapResponseError) as exc_info:
            parse_xml(body)

        assert exc_info.value.body == body

    def test_error_is_logged(self, caplog, not_found_json):
        with caplog.at_level(logging.ERROR, logger="openweathermap.parser"):
            with pytest.raises(OpenWeatherMapAPIError):
                parse_xml(not_found_json)

        assert "city not found" in caplog.text

    def test_custom_logger(self, caplog):
        log = logging.getLogger("weather-app")
        with caplog.at_level(logging.ERROR, logger="weather-app"):
            with pytest.raises(OpenWeatherMapResponseError):
                parse_xml("garbage", log)

        assert any(record.name == "weather-app" for record in caplog.records)


class TestParseJson:
    """Tests for parse_json."""

    def test_valid_object(self):
        assert parse_json('{"coord": {"lat": 1}}') == {"coord": {"lat": 1}}

    def test_error_envelope(self):
        with pytest.raises(OpenWeatherMapAPIError) as exc_info:
            parse_json('{"cod": 401, "message": "Invalid API key"}')

        assert exc_info.value.code == 401

    def test_null_message_is_success(self):
        assert parse_json('{"message": null, "cnt": 0}')["cnt"] == 0

    def test_invalid_json(self):
        with pytest.raises(OpenWeatherMapResponseError) as exc_info:
            parse_json("{broken")

        assert "invalid json" in str(exc_info.value)
        assert exc_info.value.body == "{broken"

    def test_not_an_object(self):
        with pytest.raises(OpenWeatherMapResponseError):
            parse_json("[1, 2]")


class TestParseStatusEnvelope:
    """Tests for status-coded envelopes such as weather history."""

    def test_success_with_informational_message(self, history_json):
        document = parse_status_envelope(history_json)
        assert document["message"] == "Count: 3"
        assert len(document["list"]) == 3

    def test_numeric_success_code(self):
        assert parse_status_envelope('{"cod": 200, "list": []}') == {"cod": 200, "list": []}

    def test_error_status(self):
        with pytest.raises(OpenWeatherMapAPIError) as exc_info:
            parse_status_envelope('{"cod": "401", "message": "Invalid API key"}')

        assert exc_info.value.code == 401
        assert exc_info.value.message == "Invalid API key"

    def test_error_without_message(self):
        with pytest.raises(OpenWeatherMapAPIError) as exc_info:
            parse_status_envelope('{"cod": 500}')

        assert exc_info.value.message == "Unknown error"

    def test_invalid_json(self):
        with pytest.raises(OpenWeatherMapResponseError):
            parse_status_envelope("<html></html>")
