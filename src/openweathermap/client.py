"""Async client for the OpenWeatherMap weather API.

This module provides OpenWeatherMapClient, the single entry point of the
package. Every public method runs the same pipeline:

    place -> query fragment -> request URL -> cache or fetch -> parse -> model

Methods differ only in endpoint, response format and the model built from
the parsed document. ``get_raw_*`` methods stop after the cache/fetch step
and return the body as text.

Caching:
    Disabled unless a cache is passed. Cached bodies are keyed by the full
    request URL and considered fresh for ``ttl_seconds``. A TTL of 0
    disables caching even with a cache configured.

Example:
    Fetch current weather and a forecast::

        import asyncio
        from openweathermap import OpenWeatherMapClient, Units

        async def main():
            async with OpenWeatherMapClient(api_key="...") as client:
                weather = await client.get_weather("Berlin,de", units=Units.METRIC)
                print(f"{weather.city.name}: {weather.temperature.now}")

                forecast = await client.get_weather_forecast(
                    {"lat": 52.52, "lon": 13.41}, units=Units.METRIC, days=3
                )
                for point in forecast:
                    print(f"{point.time_from}: {point.weather.description}")

        asyncio.run(main())
"""

import logging
from datetime import datetime
from typing import Any, Callable, Optional, TypeVar, Union

from .cache import Cache, CacheGate
from .exceptions import (
    OpenWeatherMapCredentialError,
    OpenWeatherMapResponseError,
    OpenWeatherMapValidationError,
)
from .fetcher import Fetcher, HttpxFetcher
from .models import (
    CurrentWeather,
    CurrentWeatherGroup,
    UVIndex,
    WeatherForecast,
    WeatherHistory,
    forecast_limit,
)
from .parser import parse_json, parse_status_envelope, parse_xml
from .query import encode_query, to_query
from .types import (
    DAILY_FORECAST_URL,
    DEFAULT_LANGUAGE,
    DEFAULT_TTL_SECONDS,
    DEFAULT_UNITS,
    HISTORY_URL,
    HOURLY_FORECAST_MAX_DAYS,
    HOURLY_FORECAST_URL,
    MAX_FORECAST_DAYS,
    WEATHER_GROUP_URL,
    WEATHER_URL,
    HistoryType,
    Mode,
    TimePrecision,
    Units,
)
from .url import (
    build_url,
    build_uv_index_url,
    history_suffix,
    to_history_type,
    to_precision,
)

T = TypeVar("T")


class OpenWeatherMapClient:
    """Async client for the OpenWeatherMap API.

    Args:
        api_key: Provider API key. Used whenever a call passes no ``appid``.
        fetcher: Retrieves response bodies. Defaults to an HttpxFetcher
            owned and closed by this client.
        cache: Optional response cache, e.g. ``MemoryCache()``.
        ttl_seconds: Cache freshness window in seconds. Defaults to 600.
            0 disables caching.
        timeout: HTTP timeout in seconds for the default fetcher.
            Defaults to 30.0.
        logger: Logger for diagnostics. Defaults to this module's logger.

    Attributes:
        _gate: Decides between cache and fetcher.
        _ttl: Cache TTL in seconds.
        _http: The default fetcher, None when one was injected.

    Example:
        Using as async context manager (recommended)::

            async with OpenWeatherMapClient(api_key="...") as client:
                weather = await client.get_weather("London,uk")

        With an in-memory cache::

            from openweathermap import MemoryCache

            async with OpenWeatherMapClient(
                api_key="...", cache=MemoryCache(), ttl_seconds=300
            ) as client:
                await client.get_weather(2643743)
                await client.get_weather(2643743)
                print(client.was_cached)  # True
    """

    def __init__(
        self,
        *,
        api_key: str = "",
        fetcher: Optional[Fetcher] = None,
        cache: Optional[Cache] = None,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        timeout: float = 30.0,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if ttl_seconds < 0:
            raise OpenWeatherMapValidationError(
                f"ttl_seconds must be >= 0, got {ttl_seconds}"
            )

        self._api_key = api_key
        self._ttl = ttl_seconds
        self._http: Optional[HttpxFetcher] = None
        if fetcher is None:
            self._http = HttpxFetcher(timeout=timeout)
            fetcher = self._http
        self._gate = CacheGate(fetcher, cache)
        self._logger = logger if logger is not None else logging.getLogger(__name__)

    async def __aenter__(self) -> "OpenWeatherMapClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the default HTTP fetcher. Injected fetchers are left open.

        Safe to call multiple times.
        """
        if self._http is not None:
            await self._http.close()

    @property
    def api_key(self) -> str:
        return self._api_key

    @api_key.setter
    def api_key(self, value: str) -> None:
        self._api_key = value

    @property
    def was_cached(self) -> bool:
        """Whether the most recent request was served from the cache.

        Shared by all calls on this client; with concurrent calls it may
        describe another call than yours.
        """
        return self._gate.was_cached

    def _validate_forecast_days(self, days: int, maximum: int = MAX_FORECAST_DAYS) -> None:
        """Validate a forecast horizon.

        Raises:
            OpenWeatherMapValidationError: If days not in [1, maximum].
        """
        if not 1 <= days <= maximum:
            raise OpenWeatherMapValidationError(
                f"Forecasts are only available for the next {maximum} days, "
                f"days must be in range [1, {maximum}], got {days}"
            )

    def _validate_uv_request(self, lat: Any, lon: Any) -> None:
        if not self._api_key:
            raise OpenWeatherMapCredentialError(
                "An API key is required for UV index requests, set client.api_key first"
            )
        for name, value in (("lat", lat), ("lon", lon)):
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise OpenWeatherMapValidationError(
                    f"{name} must be a number, got {value!r}"
                )

    async def _resolve(self, url: str) -> str:
        body, _ = await self._gate.resolve(url, self._ttl)
        return body

    def _hydrate(self, build: Callable[[], T]) -> T:
        """Build a model, reporting structurally broken documents.

        Raises:
            OpenWeatherMapResponseError: If the document lacks required
                fields or holds values of the wrong type.
        """
        try:
            return build()
        except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
            self._logger.error(f"OpenWeatherMap returned an unexpected document: {e!r}")
            raise OpenWeatherMapResponseError(
                f"OpenWeatherMap returned an unexpected document: {e}"
            ) from e

    async def get_weather(
        self,
        query: Any,
        units: Union[Units, str] = DEFAULT_UNITS,
        lang: str = DEFAULT_LANGUAGE,
        *,
        appid: str = "",
    ) -> CurrentWeather:
        """Get the current weather at a place.

        Args:
            query: City name (``"Berlin,de"``), city id (``2950159``),
                coordinates (``{"lat": 52.52, "lon": 13.41}``), zip code
                (``"zip:94040,us"``) or a Query value.
            units: Unit system. Defaults to imperial.
            lang: Language of descriptions. Defaults to "en".
            appid: Per-call API key overriding the stored one.

        Returns:
            CurrentWeather for the place.

        Raises:
            OpenWeatherMapQueryError: If the query has no recognized shape.
            OpenWeatherMapValidationError: If units are unknown.
            OpenWeatherMapAPIError: If the provider returns an error.
            OpenWeatherMapResponseError: If the response can't be decoded.
            OpenWeatherMapConnectionError: If the HTTP request fails.

        Example:
            >>> weather = await client.get_weather("Berlin,de", units="metric")
            >>> print(weather.temperature.now, weather.weather.description)
        """
        answer = await self.get_raw_weather_data(query, units, lang, appid=appid, mode=Mode.XML)
        root = parse_xml(answer, self._logger)
        return self._hydrate(lambda: CurrentWeather.from_xml(root, units))

    async def get_weather_group(
        self,
        ids: list[int],
        units: Union[Units, str] = DEFAULT_UNITS,
        lang: str = DEFAULT_LANGUAGE,
        *,
        appid: str = "",
    ) -> CurrentWeatherGroup:
        """Get the current weather for several city ids in one request.

        Example:
            >>> group = await client.get_weather_group([2950159, 2643743])
            >>> [w.city.name for w in group]
            ['Berlin', 'London']
        """
        answer = await self.get_raw_weather_group_data(ids, units, lang, appid=appid)
        document = parse_json(answer, self._logger)
        return self._hydrate(lambda: CurrentWeatherGroup.from_json(document, units))

    async def get_weather_forecast(
        self,
        query: Any,
        units: Union[Units, str] = DEFAULT_UNITS,
        lang: str = DEFAULT_LANGUAGE,
        *,
        appid: str = "",
        days: int = 1,
    ) -> WeatherForecast:
        """Get a forecast for up to 16 days.

        Horizons of up to 5 days use the three-hourly endpoint and keep
        ``days * 8`` points. Longer horizons use the daily endpoint with one
        point per day.

        Args:
            query: Place, see get_weather().
            units: Unit system. Defaults to imperial.
            lang: Language of descriptions. Defaults to "en".
            appid: Per-call API key overriding the stored one.
            days: Forecast horizon in days (1-16). Defaults to 1.

        Returns:
            WeatherForecast with at most ``days * 8`` (<= 5 days) or
            ``days`` (6-16 days) points.

        Raises:
            OpenWeatherMapValidationError: If days not in [1, 16]. Raised
                before any request.

        Example:
            >>> forecast = await client.get_weather_forecast("Berlin", days=3)
            >>> len(forecast) <= 24
            True
        """
        self._validate_forecast_days(days)

        if days <= HOURLY_FORECAST_MAX_DAYS:
            answer = await self.get_raw_hourly_forecast_data(
                query, units, lang, appid=appid, mode=Mode.XML
            )
        else:
            answer = await self.get_raw_daily_forecast_data(
                query, units, lang, appid=appid, mode=Mode.XML, cnt=days
            )

        root = parse_xml(answer, self._logger)
        limit = forecast_limit(days)
        return self._hydrate(lambda: WeatherForecast.from_xml(root, limit=limit))

    async def get_daily_weather_forecast(
        self,
        query: Any,
        units: Union[Units, str] = DEFAULT_UNITS,
        lang: str = DEFAULT_LANGUAGE,
        *,
        appid: str = "",
        days: int = 1,
    ) -> WeatherForecast:
        """Get a daily forecast (one point per day) for up to 16 days.

        Raises:
            OpenWeatherMapValidationError: If days not in [1, 16].
        """
        self._validate_forecast_days(days)
        answer = await self.get_raw_daily_forecast_data(
            query, units, lang, appid=appid, mode=Mode.XML, cnt=days
        )
        root = parse_xml(answer, self._logger)
        return self._hydrate(lambda: WeatherForecast.from_xml(root, limit=days))

    async def get_weather_history(
        self,
        query: Any,
        start: datetime,
        end_or_count: Union[datetime, int] = 1,
        history_type: Union[HistoryType, str] = HistoryType.HOUR,
        units: Union[Units, str] = DEFAULT_UNITS,
        lang: str = DEFAULT_LANGUAGE,
        *,
        appid: str = "",
    ) -> WeatherHistory:
        """Get historical weather records.

        Args:
            query: Place, see get_weather().
            start: Beginning of the period. Naive datetimes are taken as UTC.
            end_or_count: End of the period as a datetime, or the number of
                records as a positive int. Defaults to 1.
            history_type: Granularity, "tick", "hour" or "day".
            units: Unit system. Defaults to imperial.
            lang: Language of descriptions. Defaults to "en".
            appid: Per-call API key overriding the stored one.

        Returns:
            WeatherHistory with the records in provider order.

        Raises:
            OpenWeatherMapValidationError: If history_type or end_or_count
                is invalid. Raised before any request.
            OpenWeatherMapAPIError: If the envelope's status is not 200.

        Example:
            >>> history = await client.get_weather_history(
            ...     "Berlin", datetime(2024, 3, 1), 24, "hour"
            ... )
            >>> for record in history:
            ...     print(record.time, record.temperature.now)
        """
        history_type = to_history_type(history_type)
        place = to_query(query)
        answer = await self.get_raw_weather_history(
            place, start, end_or_count, history_type, units, lang, appid=appid
        )
        document = parse_status_envelope(answer, log=self._logger)
        return self._hydrate(lambda: WeatherHistory.from_json(document, place, units))

    async def get_current_uv_index(self, lat: float, lon: float) -> UVIndex:
        """Get the current UV index at coordinates.

        Raises:
            OpenWeatherMapCredentialError: If no API key is stored.
            OpenWeatherMapValidationError: If lat or lon is not a number.
        """
        answer = await self.get_raw_current_uv_index_data(lat, lon)
        document = parse_json(answer, self._logger)
        return self._hydrate(lambda: UVIndex.from_json(document))

    async def get_uv_index(
        self,
        lat: float,
        lon: float,
        moment: datetime,
        precision: Union[TimePrecision, str] = TimePrecision.DAY,
    ) -> UVIndex:
        """Get the UV index at coordinates for a moment.

        Args:
            lat: Latitude in decimal degrees.
            lon: Longitude in decimal degrees.
            moment: Point in time. Converted to UTC; naive values are taken
                as UTC.
            precision: How much of ``moment`` is sent: "year", "month",
                "day", "hour", "minute" or "second". Defaults to "day".

        Raises:
            OpenWeatherMapCredentialError: If no API key is stored.
            OpenWeatherMapValidationError: If coordinates or precision are
                invalid.

        Example:
            >>> uv = await client.get_uv_index(40.7, -74.0, datetime(2024, 6, 1), "day")
            >>> uv.uv_index
            7.12
        """
        answer = await self.get_raw_uv_index_data(lat, lon, moment, precision)
        document = parse_json(answer, self._logger)
        return self._hydrate(lambda: UVIndex.from_json(document))

    async def get_raw_weather_data(
        self,
        query: Any,
        units: Union[Units, str] = DEFAULT_UNITS,
        lang: str = DEFAULT_LANGUAGE,
        *,
        appid: str = "",
        mode: Union[Mode, str] = Mode.XML,
    ) -> str:
        """Get the current weather body in xml, json or html."""
        url = build_url(WEATHER_URL, encode_query(query), units, lang, mode, appid, self._api_key)
        return await self._resolve(url)

    async def get_raw_data(
        self,
        query: Any,
        units: Union[Units, str] = DEFAULT_UNITS,
        lang: str = DEFAULT_LANGUAGE,
        *,
        appid: str = "",
        mode: Union[Mode, str] = Mode.XML,
    ) -> str:
        """Alias of get_raw_weather_data()."""
        return await self.get_raw_weather_data(query, units, lang, appid=appid, mode=mode)

    async def get_raw_weather_group_data(
        self,
        ids: list[int],
        units: Union[Units, str] = DEFAULT_UNITS,
        lang: str = DEFAULT_LANGUAGE,
        *,
        appid: str = "",
    ) -> str:
        """Get the weather group body. The group endpoint only speaks JSON."""
        url = build_url(
            WEATHER_GROUP_URL, encode_query(ids), units, lang, Mode.JSON, appid, self._api_key
        )
        return await self._resolve(url)

    async def get_raw_hourly_forecast_data(
        self,
        query: Any,
        units: Union[Units, str] = DEFAULT_UNITS,
        lang: str = DEFAULT_LANGUAGE,
        *,
        appid: str = "",
        mode: Union[Mode, str] = Mode.XML,
    ) -> str:
        """Get the three-hourly (5 day) forecast body."""
        url = build_url(
            HOURLY_FORECAST_URL, encode_query(query), units, lang, mode, appid, self._api_key
        )
        return await self._resolve(url)

    async def get_raw_daily_forecast_data(
        self,
        query: Any,
        units: Union[Units, str] = DEFAULT_UNITS,
        lang: str = DEFAULT_LANGUAGE,
        *,
        appid: str = "",
        mode: Union[Mode, str] = Mode.XML,
        cnt: int = MAX_FORECAST_DAYS,
    ) -> str:
        """Get the daily forecast body for ``cnt`` days (at most 16).

        Raises:
            OpenWeatherMapValidationError: If cnt not in [1, 16].
        """
        self._validate_forecast_days(cnt)
        url = build_url(
            DAILY_FORECAST_URL, encode_query(query), units, lang, mode, appid, self._api_key
        )
        return await self._resolve(f"{url}&cnt={cnt}")

    async def get_raw_weather_history(
        self,
        query: Any,
        start: datetime,
        end_or_count: Union[datetime, int] = 1,
        history_type: Union[HistoryType, str] = HistoryType.HOUR,
        units: Union[Units, str] = DEFAULT_UNITS,
        lang: str = DEFAULT_LANGUAGE,
        *,
        appid: str = "",
    ) -> str:
        """Get the weather history body. The history endpoint only speaks JSON.

        Raises:
            OpenWeatherMapValidationError: If history_type or end_or_count
                is invalid.
        """
        history_type = to_history_type(history_type)
        fragment = encode_query(query)
        suffix = history_suffix(start, end_or_count, history_type)
        url = build_url(HISTORY_URL, fragment, units, lang, Mode.JSON, appid, self._api_key)
        return await self._resolve(url + suffix)

    async def get_raw_current_uv_index_data(self, lat: float, lon: float) -> str:
        """Get the current UV index body (JSON).

        Raises:
            OpenWeatherMapCredentialError: If no API key is stored.
            OpenWeatherMapValidationError: If lat or lon is not a number.
        """
        self._validate_uv_request(lat, lon)
        return await self._resolve(build_uv_index_url(lat, lon, self._api_key))

    async def get_raw_uv_index_data(
        self,
        lat: float,
        lon: float,
        moment: datetime,
        precision: Union[TimePrecision, str] = TimePrecision.DAY,
    ) -> str:
        """Get the point-in-time UV index body (JSON).

        Raises:
            OpenWeatherMapCredentialError: If no API key is stored.
            OpenWeatherMapValidationError: If coordinates, moment or
                precision are invalid.
        """
        self._validate_uv_request(lat, lon)
        if not isinstance(moment, datetime):
            raise OpenWeatherMapValidationError(
                f"moment must be a datetime, got {type(moment).__name__}"
            )
        precision = to_precision(precision)
        return await self._resolve(build_uv_index_url(lat, lon, self._api_key, moment, precision))
