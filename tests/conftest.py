import json
from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest


class FakeFetcher:
    """Returns a fixed body and records every requested URL."""

    def __init__(self, body: str = "") -> None:
        self.body = body
        self.urls: list[str] = []

    async def fetch(self, url: str) -> str:
        self.urls.append(url)
        return self.body


class TransportDown(Exception):
    pass


class FailingFetcher:
    def __init__(self) -> None:
        self.urls: list[str] = []

    async def fetch(self, url: str) -> str:
        self.urls.append(url)
        raise TransportDown("network unreachable")


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def failing_fetcher() -> FailingFetcher:
    return FailingFetcher()


@pytest.fixture
def current_xml() -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        "<current>"
        '<city id="2950159" name="Berlin">'
        '<coord lon="13.41" lat="52.52"></coord>'
        "<country>DE</country>"
        "<timezone>3600</timezone>"
        '<sun rise="2024-03-05T05:51:40" set="2024-03-05T17:04:47"></sun>'
        "</city>"
        '<temperature value="8.5" min="7.2" max="9.9" unit="celsius"></temperature>'
        '<feels_like value="6.1" unit="celsius"></feels_like>'
        '<humidity value="81" unit="%"></humidity>'
        '<pressure value="1012" unit="hPa"></pressure>'
        "<wind>"
        '<speed value="4.6" unit="m/s" name="Gentle Breeze"></speed>'
        "<gusts></gusts>"
        '<direction value="250" code="WSW" name="West-southwest"></direction>'
        "</wind>"
        '<clouds value="75" name="broken clouds"></clouds>'
        '<visibility value="10000"></visibility>'
        '<precipitation mode="no"></precipitation>'
        '<weather number="803" value="broken clouds" icon="04d"></weather>'
        '<lastupdate value="2024-03-05T12:20:00"></lastupdate>'
        "</current>"
    )


def _forecast_document(times: list[str]) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        "<weatherdata>"
        "<location>"
        "<name>Berlin</name><type></type><country>DE</country><timezone>3600</timezone>"
        '<location altitude="0" latitude="52.5244" longitude="13.4105" '
        'geobase="geonames" geobaseid="2950159"></location>'
        "</location>"
        "<credit></credit>"
        "<meta><lastupdate>2024-03-05T11:00:00</lastupdate><calctime>0.01</calctime></meta>"
        '<sun rise="2024-03-05T05:51:40" set="2024-03-05T17:04:47"></sun>'
        f"<forecast>{''.join(times)}</forecast>"
        "</weatherdata>"
    )


@pytest.fixture
def hourly_forecast_xml() -> Callable[[int], str]:
    def build(points: int = 40) -> str:
        start = datetime(2024, 3, 5, 12, tzinfo=timezone.utc)
        times = []
        for i in range(points):
            begin = start + timedelta(hours=3 * i)
            end = begin + timedelta(hours=3)
            times.append(
                f'<time from="{begin:%Y-%m-%dT%H:%M:%S}" to="{end:%Y-%m-%dT%H:%M:%S}">'
                '<symbol number="500" name="light rain" var="10d"></symbol>'
                '<precipitation unit="3h" value="0.31" type="rain"></precipitation>'
                '<windDirection deg="253" code="WSW" name="West-southwest"></windDirection>'
                '<windSpeed mps="6.27" unit="m/s" name="Strong breeze"></windSpeed>'
                f'<temperature unit="celsius" value="{5 + i}" min="4.1" max="6.3"></temperature>'
                '<pressure unit="hPa" value="1021"></pressure>'
                '<humidity value="93" unit="%"></humidity>'
                '<clouds value="overcast clouds" all="100" unit="%"></clouds>'
                "</time>"
            )
        return _forecast_document(times)

    return build


@pytest.fixture
def daily_forecast_xml() -> Callable[[int], str]:
    def build(days: int = 16) -> str:
        start = datetime(2024, 3, 5, tzinfo=timezone.utc)
        times = []
        for i in range(days):
            day = start + timedelta(days=i)
            times.append(
                f'<time day="{day:%Y-%m-%d}">'
                '<symbol number="800" name="clear sky" var="01d"></symbol>'
                "<precipitation></precipitation>"
                '<windDirection deg="90" code="E" name="East"></windDirection>'
                '<windSpeed mps="3.1" unit="m/s" name="Light breeze"></windSpeed>'
                '<temperature day="11.2" min="3.4" max="12.8" night="4.0" eve="9.5" '
                'morn="3.9" unit="celsius"></temperature>'
                '<pressure unit="hPa" value="1025"></pressure>'
                '<humidity value="60" unit="%"></humidity>'
                '<clouds value="clear sky" all="0" unit="%"></clouds>'
                "</time>"
            )
        return _forecast_document(times)

    return build


@pytest.fixture
def group_json() -> str:
    return json.dumps(
        {
            "cnt": 2,
            "list": [
                {
                    "coord": {"lon": 13.41, "lat": 52.52},
                    "sys": {"country": "DE", "sunrise": 1709617900, "sunset": 1709658287},
                    "weather": [
                        {"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}
                    ],
                    "main": {
                        "temp": 8.5,
                        "feels_like": 6.1,
                        "temp_min": 7.2,
                        "temp_max": 9.9,
                        "pressure": 1012,
                        "humidity": 81,
                    },
                    "visibility": 10000,
                    "wind": {"speed": 4.6, "deg": 250},
                    "clouds": {"all": 75},
                    "rain": {"1h": 0.3},
                    "dt": 1709641200,
                    "id": 2950159,
                    "name": "Berlin",
                },
                {
                    "coord": {"lon": -0.13, "lat": 51.51},
                    "sys": {"country": "GB", "sunrise": 1709620000, "sunset": 1709660000},
                    "weather": [
                        {"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"}
                    ],
                    "main": {
                        "temp": 10.0,
                        "temp_min": 9.0,
                        "temp_max": 11.0,
                        "pressure": 1020,
                        "humidity": 70,
                    },
                    "wind": {"speed": 2.0},
                    "clouds": {"all": 0},
                    "dt": 1709641200,
                    "id": 2643743,
                    "name": "London",
                },
            ],
        }
    )


@pytest.fixture
def history_json() -> str:
    records = []
    for i in range(3):
        record = {
            "dt": 1709251200 + i * 3600,
            "main": {
                "temp": 275.0 + i,
                "temp_min": 274.0,
                "temp_max": 276.5,
                "pressure": 1015,
                "humidity": 88,
            },
            "wind": {"speed": 3.6, "deg": 200},
            "clouds": {"all": 90},
            "weather": [
                {"id": 804, "main": "Clouds", "description": "overcast clouds", "icon": "04n"}
            ],
        }
        if i == 0:
            record["city"] = {"country": "DE", "population": 3426354}
            record["rain"] = {"3h": 0.5}
        records.append(record)

    return json.dumps(
        {
            "message": "Count: 3",
            "cod": "200",
            "city_id": 2950159,
            "calctime": 0.0123,
            "cnt": 3,
            "list": records,
        }
    )


@pytest.fixture
def uv_json() -> str:
    return json.dumps(
        {
            "time": "2024-06-01T12:00:00Z",
            "location": {"latitude": 40.75, "longitude": -74.25},
            "data": 7.12,
        }
    )


@pytest.fixture
def not_found_json() -> str:
    return json.dumps({"cod": "404", "message": "city not found"})
