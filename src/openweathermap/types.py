"""Types and constants for the OpenWeatherMap API client.

This module defines enumerations, endpoint URLs and configuration
constants used throughout the OpenWeatherMap client.

Example:
    Using Units enum::

        from openweathermap import OpenWeatherMapClient, Units

        async with OpenWeatherMapClient(api_key="...") as client:
            weather = await client.get_weather("Berlin,de", units=Units.METRIC)
            print(weather.temperature.now)
"""

from enum import Enum


class Units(str, Enum):
    """Unit system for temperatures and wind speeds.

    Attributes:
        METRIC: Celsius and meters per second.
        IMPERIAL: Fahrenheit and miles per hour.

    Example:
        >>> Units.METRIC.value
        'metric'
    """

    METRIC = "metric"
    IMPERIAL = "imperial"


class Mode(str, Enum):
    """Response format requested from the provider.

    ``HTML`` is only useful for raw requests; the client never parses it.
    """

    XML = "xml"
    JSON = "json"
    HTML = "html"


class HistoryType(str, Enum):
    """Period granularity for weather history requests."""

    TICK = "tick"
    HOUR = "hour"
    DAY = "day"


class TimePrecision(str, Enum):
    """How much of a timestamp is sent for point-in-time UV index requests.

    Coarser precisions drop the finer fields, e.g. ``MONTH`` sends
    ``2024-03Z`` for any moment in March 2024.
    """

    YEAR = "year"
    MONTH = "month"
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"


WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"
"""str: Current weather endpoint."""

WEATHER_GROUP_URL = "https://api.openweathermap.org/data/2.5/group"
"""str: Current weather for several city ids at once. JSON only."""

HOURLY_FORECAST_URL = "https://api.openweathermap.org/data/2.5/forecast"
"""str: Three-hourly forecast endpoint, covers up to 5 days."""

DAILY_FORECAST_URL = "https://api.openweathermap.org/data/2.5/forecast/daily"
"""str: Daily forecast endpoint, covers up to 16 days."""

HISTORY_URL = "https://history.openweathermap.org/data/2.5/history/city"
"""str: Weather history endpoint."""

UV_INDEX_URL = "https://api.openweathermap.org/v3/uvi"
"""str: Base of the UV index endpoints (current and point-in-time)."""

DEFAULT_UNITS = Units.IMPERIAL
"""Units: Unit system used when none is passed."""

DEFAULT_LANGUAGE = "en"
"""str: Language code used when none is passed."""

DEFAULT_TTL_SECONDS = 600
"""int: Default cache time-to-live in seconds.

Only relevant when a cache is configured. A TTL of 0 disables caching.
"""

MAX_FORECAST_DAYS = 16
"""int: Maximum number of forecast days the provider supports.

Requests exceeding this raise OpenWeatherMapValidationError.
"""

HOURLY_FORECAST_MAX_DAYS = 5
"""int: Longest horizon served from the three-hourly forecast endpoint."""

SLOTS_PER_DAY = 8
"""int: Number of three-hourly forecast points per day."""

HISTORY_SUCCESS_CODE = 200
"""int: Status code carried by a successful history envelope."""
