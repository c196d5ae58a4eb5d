"""OpenWeatherMap API async client for current weather, forecasts and history.

This module provides an async client for fetching weather data from the
OpenWeatherMap API and normalizing its XML and JSON responses into a small
set of pydantic models.

Key features:
    - Current weather for one place or a group of city ids
    - Three-hourly forecast up to 5 days, daily forecast up to 16 days
    - Weather history by tick, hour or day
    - Current and point-in-time UV index
    - Places by name, city id, coordinates or zip code
    - Optional response caching keyed by request URL
    - Provider error envelopes surfaced as OpenWeatherMapAPIError in every
      response format
    - Optional DataFrame conversion via openweathermap.dataframe module

Caching strategy:
    No caching by default. Pass ``cache=MemoryCache()`` (or any object with
    ``is_fresh``/``get``/``put``) and a ``ttl_seconds`` to reuse response
    bodies. ``client.was_cached`` tells whether the last call was served
    from the cache.

Example:
    Fetch current weather::

        import asyncio
        from openweathermap import OpenWeatherMapClient, Units

        async def main():
            async with OpenWeatherMapClient(api_key="...") as client:
                weather = await client.get_weather("London,uk", units=Units.METRIC)
                print(f"{weather.city.name}: {weather.temperature.now}")
                print(f"Wind: {weather.wind.speed}")

        asyncio.run(main())

    Fetch a 10 day forecast by coordinates::

        async with OpenWeatherMapClient(api_key="...") as client:
            forecast = await client.get_weather_forecast(
                {"lat": 51.51, "lon": -0.13}, units=Units.METRIC, days=10
            )
            for day in forecast:
                print(f"{day.time_from:%a}: {day.temperature.min} - {day.temperature.max}")

    Get the UV index::

        async with OpenWeatherMapClient(api_key="...") as client:
            uv = await client.get_current_uv_index(40.75, -74.0)
            print(f"UV index: {uv.uv_index}")

See Also:
    - OpenWeatherMap API docs: https://openweathermap.org/api
    - Usage policies: https://openweathermap.org/terms
"""

from .cache import Cache, CacheGate, MemoryCache
from .client import OpenWeatherMapClient
from .exceptions import (
    OpenWeatherMapAPIError,
    OpenWeatherMapConnectionError,
    OpenWeatherMapCredentialError,
    OpenWeatherMapError,
    OpenWeatherMapQueryError,
    OpenWeatherMapResponseError,
    OpenWeatherMapValidationError,
)
from .fetcher import Fetcher, HttpxFetcher
from .models import (
    City,
    CurrentWeather,
    CurrentWeatherGroup,
    Forecast,
    History,
    Location,
    Sun,
    Temperature,
    Unit,
    UVIndex,
    Weather,
    WeatherForecast,
    WeatherHistory,
    Wind,
)
from .query import CityId, CityIds, CityName, Coordinates, Query, ZipCode, encode_query
from .types import (
    DEFAULT_LANGUAGE,
    DEFAULT_TTL_SECONDS,
    DEFAULT_UNITS,
    MAX_FORECAST_DAYS,
    HistoryType,
    Mode,
    TimePrecision,
    Units,
)

COPYRIGHT = 'Weather data from <a href="https://openweathermap.org">OpenWeatherMap.org</a>'
"""str: Attribution notice to display next to weather data."""

__all__ = [
    "OpenWeatherMapClient",
    "Units",
    "Mode",
    "HistoryType",
    "TimePrecision",
    "Cache",
    "CacheGate",
    "MemoryCache",
    "Fetcher",
    "HttpxFetcher",
    "Query",
    "CityName",
    "CityId",
    "CityIds",
    "Coordinates",
    "ZipCode",
    "encode_query",
    "City",
    "Sun",
    "Location",
    "Unit",
    "Temperature",
    "Wind",
    "Weather",
    "CurrentWeather",
    "CurrentWeatherGroup",
    "Forecast",
    "WeatherForecast",
    "History",
    "WeatherHistory",
    "UVIndex",
    "OpenWeatherMapError",
    "OpenWeatherMapAPIError",
    "OpenWeatherMapConnectionError",
    "OpenWeatherMapCredentialError",
    "OpenWeatherMapQueryError",
    "OpenWeatherMapResponseError",
    "OpenWeatherMapValidationError",
    "COPYRIGHT",
    "DEFAULT_LANGUAGE",
    "DEFAULT_TTL_SECONDS",
    "DEFAULT_UNITS",
    "MAX_FORECAST_DAYS",
]
