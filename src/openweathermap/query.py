"""Place specifiers and their query-string encoding.

A place can be addressed by name, by numeric city id (one or several), by
coordinates or by postal code. Each shape is a small frozen value type;
raw Python values are coerced into one of them by ``to_query``.

Raw values are matched in a fixed order, first match wins:

1. mapping with numeric ``lat`` and ``lon``  -> Coordinates
2. list or tuple starting with a number      -> CityIds
3. a single number                           -> CityId
4. text starting with ``zip:``               -> ZipCode
5. any other non-blank text                  -> CityName

Numbers are ints, floats and numeric strings such as ``"2643743"``; a
bool is never a number. Numeric strings therefore address city ids, not
city names.

Example:
    >>> encode_query("London,uk")
    'q=London%2Cuk'
    >>> encode_query({"lat": 51.51, "lon": -0.13})
    'lat=51.51&lon=-0.13'
    >>> encode_query([2643743, 2950159])
    'id=2643743,2950159'
    >>> encode_query("zip:94040,us")
    'zip=94040%2Cus'
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union
from urllib.parse import quote_plus

from .exceptions import OpenWeatherMapQueryError

ZIP_PREFIX = "zip:"

Number = Union[int, float, str]


@dataclass(frozen=True)
class CityName:
    """City name, optionally with a country code (``"London,uk"``)."""

    name: str


@dataclass(frozen=True)
class CityId:
    id: Number


@dataclass(frozen=True)
class CityIds:
    ids: tuple[Number, ...]


@dataclass(frozen=True)
class Coordinates:
    lat: Number
    lon: Number


@dataclass(frozen=True)
class ZipCode:
    """Postal code, optionally qualified with a country code."""

    code: str
    country: Optional[str] = None


Query = Union[CityName, CityId, CityIds, Coordinates, ZipCode]

_QUERY_TYPES = (CityName, CityId, CityIds, Coordinates, ZipCode)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, str) and "_" not in value:
        try:
            return math.isfinite(float(value))
        except ValueError:
            return False
    return False


def _format_number(value: Number) -> str:
    """Render a number for the query string.

    Example:
        >>> _format_number(2643743.0)
        '2643743'
        >>> _format_number(" 51.5")
        '51.5'
    """
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_query(value: Any) -> Query:
    """Coerce a raw place specifier into a Query.

    Args:
        value: A Query variant, a ``{"lat": .., "lon": ..}`` mapping, a list
            of city ids, a single city id, ``"zip:<code>[,<country>]"`` or a
            city name.

    Returns:
        The matching Query variant.

    Raises:
        OpenWeatherMapQueryError: If the value matches no shape.

    Example:
        >>> to_query(2643743)
        CityId(id=2643743)
        >>> to_query("zip:94040,us")
        ZipCode(code='94040', country='us')
    """
    if isinstance(value, _QUERY_TYPES):
        return value

    if (
        isinstance(value, Mapping)
        and _is_number(value.get("lat"))
        and _is_number(value.get("lon"))
    ):
        return Coordinates(lat=value["lat"], lon=value["lon"])

    if isinstance(value, (list, tuple)) and value and _is_number(value[0]):
        if not all(_is_number(item) for item in value):
            raise OpenWeatherMapQueryError(
                f"City id lists must contain only numbers, got {value!r}"
            )
        return CityIds(ids=tuple(value))

    if _is_number(value):
        return CityId(id=value)

    if isinstance(value, str) and value.startswith(ZIP_PREFIX):
        remainder = value[len(ZIP_PREFIX):]
        code, _, country = remainder.partition(",")
        if not code.strip():
            raise OpenWeatherMapQueryError(f"Empty zip code in query {value!r}")
        return ZipCode(code=code, country=country or None)

    if isinstance(value, str) and value.strip():
        return CityName(name=value)

    raise OpenWeatherMapQueryError(
        f"Query has the wrong format: {value!r}. Expected a city name, a city "
        "id, a list of city ids, a {'lat': .., 'lon': ..} mapping or "
        "'zip:<code>[,<country>]'."
    )


def encode_query(value: Any) -> str:
    """Encode a place specifier as a provider query-string fragment.

    Args:
        value: A Query variant or any raw value accepted by ``to_query``.

    Returns:
        The query fragment, e.g. ``"q=Berlin"`` or ``"id=2950159"``.

    Raises:
        OpenWeatherMapQueryError: If the value matches no shape.
    """
    query = to_query(value)

    if isinstance(query, Coordinates):
        return f"lat={_format_number(query.lat)}&lon={_format_number(query.lon)}"
    if isinstance(query, CityIds):
        return "id=" + ",".join(_format_number(i) for i in query.ids)
    if isinstance(query, CityId):
        return f"id={_format_number(query.id)}"
    if isinstance(query, ZipCode):
        code = query.code if query.country is None else f"{query.code},{query.country}"
        return f"zip={quote_plus(code)}"
    if isinstance(query, CityName):
        return f"q={quote_plus(query.name)}"

    raise OpenWeatherMapQueryError(f"Unsupported query type: {type(query).__name__}")
