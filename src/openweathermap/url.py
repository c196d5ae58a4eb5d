"""Request URL construction for the OpenWeatherMap endpoints.

Every request URL is fully composed here, including the credential. The
composed URL is also the cache key, so two distinct requests never share
a cache entry.

Example:
    >>> build_url(WEATHER_URL, "q=Berlin", Units.METRIC, "de", Mode.XML, "", "k3y")
    'https://api.openweathermap.org/data/2.5/weather?q=Berlin&units=metric&lang=de&mode=xml&APPID=k3y'
"""

import re
from datetime import datetime
from datetime import timezone as dt_timezone
from typing import Any, Optional, Union

from .exceptions import OpenWeatherMapValidationError
from .types import UV_INDEX_URL, HistoryType, Mode, TimePrecision, Units

_PRECISION_FORMATS = {
    TimePrecision.YEAR: "%Y",
    TimePrecision.MONTH: "%Y-%m",
    TimePrecision.DAY: "%Y-%m-%d",
    TimePrecision.HOUR: "%Y-%m-%dT%H",
    TimePrecision.MINUTE: "%Y-%m-%dT%H:%M",
    TimePrecision.SECOND: "%Y-%m-%dT%H:%M:%S",
}

_CREDENTIAL_RE = re.compile(r"(?i)\b(appid=)[^&]*")


def to_units(value: Union[Units, str]) -> Units:
    try:
        return Units(value)
    except ValueError:
        raise OpenWeatherMapValidationError(
            f"units must be one of {[u.value for u in Units]}, got {value!r}"
        ) from None


def to_mode(value: Union[Mode, str]) -> Mode:
    try:
        return Mode(value)
    except ValueError:
        raise OpenWeatherMapValidationError(
            f"mode must be one of {[m.value for m in Mode]}, got {value!r}"
        ) from None


def to_history_type(value: Union[HistoryType, str]) -> HistoryType:
    try:
        return HistoryType(value)
    except ValueError:
        raise OpenWeatherMapValidationError(
            f'history type must be either "tick", "hour" or "day", got {value!r}'
        ) from None


def to_precision(value: Union[TimePrecision, str]) -> TimePrecision:
    try:
        return TimePrecision(value)
    except ValueError:
        raise OpenWeatherMapValidationError(
            f"time precision must be one of {[p.value for p in TimePrecision]}, "
            f"got {value!r}"
        ) from None


def to_utc(moment: datetime) -> datetime:
    """Normalize a datetime to UTC. Naive datetimes are taken as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=dt_timezone.utc)
    return moment.astimezone(dt_timezone.utc)


def unix_seconds(moment: datetime) -> int:
    return int(to_utc(moment).timestamp())


def build_url(
    endpoint: str,
    query_fragment: str,
    units: Union[Units, str],
    lang: str,
    mode: Union[Mode, str],
    appid: str,
    api_key: str,
) -> str:
    """Compose a request URL from an endpoint and its common parameters.

    Args:
        endpoint: Endpoint URL without query string.
        query_fragment: Encoded place, see ``encode_query``.
        units: Unit system.
        lang: Language code.
        mode: Response format.
        appid: Per-call credential. Falls back to ``api_key`` when empty.
        api_key: The client's stored key. May be empty, in which case the
            provider rejects the request.

    Returns:
        The complete request URL.

    Raises:
        OpenWeatherMapValidationError: If units or mode are unknown.
    """
    units = to_units(units)
    mode = to_mode(mode)
    credential = appid or api_key
    return (
        f"{endpoint}?{query_fragment}&units={units.value}&lang={lang}"
        f"&mode={mode.value}&APPID={credential}"
    )


def history_suffix(
    start: datetime,
    end_or_count: Any,
    history_type: Union[HistoryType, str],
) -> str:
    """Build the history-specific parameters appended after the common ones.

    Args:
        start: Beginning of the period.
        end_or_count: Either the end of the period as a datetime, or a
            positive number of records.
        history_type: Period granularity.

    Returns:
        Fragment such as ``"&type=hour&start=1700000000&cnt=24"``.

    Raises:
        OpenWeatherMapValidationError: If the type is unknown or
            ``end_or_count`` is neither a datetime nor a positive int.
    """
    history_type = to_history_type(history_type)
    suffix = f"&type={history_type.value}&start={unix_seconds(start)}"
    if isinstance(end_or_count, datetime):
        return f"{suffix}&end={unix_seconds(end_or_count)}"
    if (
        isinstance(end_or_count, int)
        and not isinstance(end_or_count, bool)
        and end_or_count > 0
    ):
        return f"{suffix}&cnt={end_or_count}"
    raise OpenWeatherMapValidationError(
        f"end_or_count must be either a datetime or a positive integer, got {end_or_count!r}"
    )


def format_uv_moment(moment: datetime, precision: Union[TimePrecision, str]) -> str:
    """Serialize a timestamp for the UV index endpoint.

    Example:
        >>> format_uv_moment(datetime(2024, 3, 5, 14, 30), "hour")
        '2024-03-05T14Z'
    """
    fmt = _PRECISION_FORMATS[to_precision(precision)]
    moment = to_utc(moment)
    # %Y is not zero-padded below year 1000 on every platform
    fmt = fmt.replace("%Y", f"{moment.year:04d}")
    return moment.strftime(fmt) + "Z"


def build_uv_index_url(
    lat: float,
    lon: float,
    api_key: str,
    moment: Optional[datetime] = None,
    precision: Union[TimePrecision, str] = TimePrecision.DAY,
) -> str:
    """Compose a UV index URL, current when ``moment`` is None."""
    if moment is None:
        when = "current"
    else:
        when = format_uv_moment(moment, precision)
    return f"{UV_INDEX_URL}/{lat},{lon}/{when}.json?appid={api_key}"


def redact_url(url: str) -> str:
    """Mask the credential in a URL before it is logged."""
    return _CREDENTIAL_RE.sub(r"\1***", url)
