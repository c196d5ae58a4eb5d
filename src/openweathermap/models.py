"""Pydantic models for OpenWeatherMap responses.

This module defines the domain objects the client returns. Each model
knows how to build itself from an already validated document: an XML
element for the XML endpoints, a decoded JSON object for the JSON ones.

Key model groups:
    1. **Values**: Unit, Temperature, Wind, Weather
    2. **Places**: City, Sun, Location
    3. **Results**: CurrentWeather, Forecast, History, UVIndex
    4. **Sequences**: CurrentWeatherGroup, WeatherForecast, WeatherHistory

Sequences hold every point from construction on and can be iterated any
number of times.

Note:
    All timestamps are timezone-aware and in UTC.

Example:
    Iterating a forecast::

        forecast = await client.get_weather_forecast("Berlin", days=3)
        print(f"{forecast.city.name}, sunrise {forecast.sun.rise}")
        for point in forecast:
            print(f"{point.time_from}: {point.temperature.now}")
"""

import xml.etree.ElementTree as ET
from datetime import datetime, timedelta
from datetime import timezone as dt_timezone
from typing import Any, Iterator, Optional, Union

from pydantic import BaseModel

from .query import CityName, Coordinates, Query
from .types import HOURLY_FORECAST_MAX_DAYS, SLOTS_PER_DAY, Units

ICON_URL = "https://openweathermap.org/img/w/{icon}.png"


def _float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def _int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(float(value))


def _parse_time(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO8601 timestamp, treating naive values as UTC.

    Example:
        >>> _parse_time("2024-03-05T06:12:40")
        datetime.datetime(2024, 3, 5, 6, 12, 40, tzinfo=datetime.timezone.utc)
    """
    if not value:
        return None
    dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if dt.tzinfo is None:
        return dt.replace(tzinfo=dt_timezone.utc)
    return dt.astimezone(dt_timezone.utc)


def _from_unix(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(int(value), tz=dt_timezone.utc)


def _attr(parent: Optional[ET.Element], path: str, name: str) -> Optional[str]:
    if parent is None:
        return None
    element = parent.find(path)
    if element is None:
        return None
    return element.get(name)


def _text(parent: Optional[ET.Element], path: str) -> Optional[str]:
    if parent is None:
        return None
    element = parent.find(path)
    if element is None or element.text is None:
        return None
    return element.text.strip() or None


def _temperature_unit(units: Union[Units, str]) -> str:
    return "fahrenheit" if Units(units) == Units.IMPERIAL else "celsius"


def _speed_unit(units: Union[Units, str]) -> str:
    return "mph" if Units(units) == Units.IMPERIAL else "m/s"


class Unit(BaseModel):
    """A measured value with its unit and an optional description.

    Attributes:
        value: Numeric value, None when the provider sent none.
        unit: Unit label as sent by the provider (e.g. "hPa", "%").
        description: Human-readable label (e.g. "Gentle Breeze").

    Example:
        >>> str(Unit(value=1012, unit="hPa"))
        '1012.0 hPa'
    """

    value: Optional[float] = None
    unit: str = ""
    description: str = ""

    def __str__(self) -> str:
        if self.value is None:
            return ""
        return f"{self.value} {self.unit}".strip()

    @classmethod
    def from_xml(
        cls,
        element: Optional[ET.Element],
        value: str = "value",
        unit: str = "unit",
        description: Optional[str] = None,
    ) -> "Unit":
        if element is None:
            return cls()
        return cls(
            value=_float(element.get(value)),
            unit=element.get(unit) or "",
            description=(element.get(description) or "") if description else "",
        )


class City(BaseModel):
    """A place the provider knows about.

    Attributes:
        id: Provider city id.
        name: City name.
        lat: Latitude in decimal degrees.
        lon: Longitude in decimal degrees.
        country: ISO 3166 country code.
        population: Population, when the provider sends it.
        timezone_offset: Shift from UTC in seconds.
    """

    id: Optional[int] = None
    name: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    country: Optional[str] = None
    population: Optional[int] = None
    timezone_offset: Optional[int] = None


class Sun(BaseModel):
    """Sunrise and sunset, in UTC."""

    rise: Optional[datetime] = None
    set: Optional[datetime] = None


class Location(BaseModel):
    lat: float
    lon: float


class Temperature(BaseModel):
    """Temperature readings.

    Daily forecasts additionally fill the day, morning, evening and night
    parts; ``now`` then holds the day temperature.
    """

    now: Unit = Unit()
    min: Unit = Unit()
    max: Unit = Unit()
    feels_like: Optional[Unit] = None
    day: Optional[Unit] = None
    morning: Optional[Unit] = None
    evening: Optional[Unit] = None
    night: Optional[Unit] = None

    @classmethod
    def from_xml(cls, element: Optional[ET.Element]) -> "Temperature":
        if element is None:
            return cls()
        unit = element.get("unit") or ""

        def part(name: str) -> Optional[Unit]:
            raw = element.get(name)
            if raw is None:
                return None
            return Unit(value=_float(raw), unit=unit)

        day = part("day")
        return cls(
            now=part("value") or day or Unit(unit=unit),
            min=part("min") or Unit(unit=unit),
            max=part("max") or Unit(unit=unit),
            day=day,
            morning=part("morn"),
            evening=part("eve"),
            night=part("night"),
        )

    @classmethod
    def from_json(cls, main: dict[str, Any], units: Union[Units, str]) -> "Temperature":
        unit = _temperature_unit(units)
        feels_like = main.get("feels_like")
        return cls(
            now=Unit(value=_float(main.get("temp")), unit=unit),
            min=Unit(value=_float(main.get("temp_min")), unit=unit),
            max=Unit(value=_float(main.get("temp_max")), unit=unit),
            feels_like=Unit(value=_float(feels_like), unit=unit) if feels_like is not None else None,
        )


class Wind(BaseModel):
    """Wind speed, direction and gusts.

    ``direction.value`` holds degrees, ``direction.unit`` the compass code
    (e.g. "WSW") and ``direction.description`` its name.
    """

    speed: Unit = Unit()
    direction: Optional[Unit] = None
    gusts: Optional[Unit] = None

    @classmethod
    def from_json(cls, wind: dict[str, Any], units: Union[Units, str]) -> "Wind":
        unit = _speed_unit(units)
        deg = wind.get("deg")
        gust = wind.get("gust")
        return cls(
            speed=Unit(value=_float(wind.get("speed")), unit=unit),
            direction=Unit(value=_float(deg)) if deg is not None else None,
            gusts=Unit(value=_float(gust), unit=unit) if gust is not None else None,
        )


class Weather(BaseModel):
    """Weather condition as classified by the provider."""

    id: Optional[int] = None
    description: str = ""
    icon: str = ""

    @property
    def icon_url(self) -> str:
        return ICON_URL.format(icon=self.icon)

    @classmethod
    def from_json(cls, items: Optional[list[dict[str, Any]]]) -> "Weather":
        if not items:
            return cls()
        item = items[0]
        return cls(
            id=_int(item.get("id")),
            description=item.get("description") or "",
            icon=item.get("icon") or "",
        )


def _precipitation_from_json(data: dict[str, Any]) -> Unit:
    for kind in ("rain", "snow"):
        amounts = data.get(kind)
        if amounts:
            period, value = next(iter(amounts.items()))
            return Unit(value=_float(value), unit=period, description=kind)
    return Unit(value=0.0, description="no")


class CurrentWeather(BaseModel):
    """Current weather at one place.

    Attributes:
        city: The place, including coordinates and country.
        sun: Sunrise and sunset of the day.
        temperature: Current, minimum and maximum temperature.
        humidity: Relative humidity.
        pressure: Atmospheric pressure.
        wind: Wind speed and direction.
        clouds: Cloud cover, description holds the condition name.
        visibility: Visibility in meters.
        precipitation: Precipitation amount, description holds its kind.
        weather: Condition id, description and icon.
        last_update: When the provider last updated the data.

    Example:
        >>> weather = await client.get_weather("Berlin", units="metric")
        >>> print(f"{weather.city.name}: {weather.temperature.now}")
        Berlin: 12.3 celsius
    """

    city: City
    sun: Sun = Sun()
    temperature: Temperature = Temperature()
    humidity: Unit = Unit()
    pressure: Unit = Unit()
    wind: Wind = Wind()
    clouds: Unit = Unit()
    visibility: Unit = Unit()
    precipitation: Unit = Unit()
    weather: Weather = Weather()
    last_update: Optional[datetime] = None

    @classmethod
    def from_xml(cls, root: ET.Element, units: Union[Units, str]) -> "CurrentWeather":
        """Build from the root of a ``mode=xml`` current weather document."""
        city = root.find("city")
        temperature = Temperature.from_xml(root.find("temperature"))
        feels_like = root.find("feels_like")
        if feels_like is not None:
            temperature.feels_like = Unit.from_xml(feels_like)

        direction = root.find("wind/direction")
        gusts = root.find("wind/gusts")
        precipitation = root.find("precipitation")

        return cls(
            city=City(
                id=_int(city.get("id")) if city is not None else None,
                name=city.get("name") if city is not None else None,
                lat=_float(_attr(city, "coord", "lat")),
                lon=_float(_attr(city, "coord", "lon")),
                country=_text(city, "country"),
                timezone_offset=_int(_text(city, "timezone")),
            ),
            sun=Sun(
                rise=_parse_time(_attr(city, "sun", "rise")),
                set=_parse_time(_attr(city, "sun", "set")),
            ),
            temperature=temperature,
            humidity=Unit.from_xml(root.find("humidity")),
            pressure=Unit.from_xml(root.find("pressure")),
            wind=Wind(
                speed=Unit.from_xml(root.find("wind/speed"), description="name"),
                direction=Unit.from_xml(direction, unit="code", description="name")
                if direction is not None
                else None,
                gusts=Unit.from_xml(gusts) if gusts is not None and gusts.get("value") else None,
            ),
            clouds=Unit.from_xml(root.find("clouds"), description="name"),
            visibility=Unit.from_xml(root.find("visibility")),
            precipitation=Unit(
                value=_float(precipitation.get("value")) or 0.0,
                unit=precipitation.get("unit") or "",
                description=precipitation.get("mode") or "",
            )
            if precipitation is not None
            else Unit(),
            weather=Weather(
                id=_int(_attr(root, "weather", "number")),
                description=_attr(root, "weather", "value") or "",
                icon=_attr(root, "weather", "icon") or "",
            ),
            last_update=_parse_time(_attr(root, "lastupdate", "value")),
        )

    @classmethod
    def from_json(cls, data: dict[str, Any], units: Union[Units, str]) -> "CurrentWeather":
        """Build from one decoded JSON current weather object."""
        coord = data.get("coord") or {}
        sys = data.get("sys") or {}
        main = data.get("main") or {}
        weather = Weather.from_json(data.get("weather"))
        clouds = data.get("clouds") or {}

        return cls(
            city=City(
                id=_int(data.get("id")),
                name=data.get("name"),
                lat=_float(coord.get("lat")),
                lon=_float(coord.get("lon")),
                country=sys.get("country"),
                timezone_offset=_int(data.get("timezone")),
            ),
            sun=Sun(rise=_from_unix(sys.get("sunrise")), set=_from_unix(sys.get("sunset"))),
            temperature=Temperature.from_json(main, units),
            humidity=Unit(value=_float(main.get("humidity")), unit="%"),
            pressure=Unit(value=_float(main.get("pressure")), unit="hPa"),
            wind=Wind.from_json(data.get("wind") or {}, units),
            clouds=Unit(value=_float(clouds.get("all")), unit="%", description=weather.description),
            visibility=Unit(value=_float(data.get("visibility")), unit="m"),
            precipitation=_precipitation_from_json(data),
            weather=weather,
            last_update=_from_unix(data.get("dt")),
        )


class CurrentWeatherGroup(BaseModel):
    """Current weather for several cities, in the order the provider sent them.

    Example:
        >>> group = await client.get_weather_group([2950159, 2643743])
        >>> for weather in group:
        ...     print(weather.city.name, weather.temperature.now)
    """

    weathers: list[CurrentWeather] = []

    def __iter__(self) -> Iterator[CurrentWeather]:  # type: ignore[override]
        return iter(self.weathers)

    def __len__(self) -> int:
        return len(self.weathers)

    def __getitem__(self, index: int) -> CurrentWeather:
        return self.weathers[index]

    @classmethod
    def from_json(cls, data: dict[str, Any], units: Union[Units, str]) -> "CurrentWeatherGroup":
        return cls(
            weathers=[CurrentWeather.from_json(item, units) for item in data.get("list") or []]
        )


class Forecast(BaseModel):
    """One forecast point, three-hourly or daily.

    Attributes:
        time_from: Start of the forecast period.
        time_to: End of the forecast period.
        city: Place of the forecast, shared by all points.
        sun: Sunrise and sunset, shared by all points.
        temperature: Temperatures, with day parts for daily points.
        humidity: Relative humidity.
        pressure: Atmospheric pressure.
        wind: Wind speed and direction.
        clouds: Cloud cover, description holds the condition name.
        precipitation: Amount, description holds rain or snow.
        weather: Condition id, description and icon.
    """

    time_from: Optional[datetime] = None
    time_to: Optional[datetime] = None
    city: Optional[City] = None
    sun: Optional[Sun] = None
    temperature: Temperature = Temperature()
    humidity: Unit = Unit()
    pressure: Unit = Unit()
    wind: Wind = Wind()
    clouds: Unit = Unit()
    precipitation: Unit = Unit()
    weather: Weather = Weather()

    @classmethod
    def from_xml(
        cls,
        element: ET.Element,
        city: Optional[City] = None,
        sun: Optional[Sun] = None,
    ) -> "Forecast":
        """Build from a ``<time>`` element of a forecast document.

        Daily documents use ``<time day="YYYY-MM-DD">``, three-hourly ones
        ``<time from=".." to="..">``.
        """
        day = element.get("day")
        if day:
            time_from = _parse_time(day)
            time_to = time_from + timedelta(days=1) if time_from else None
        else:
            time_from = _parse_time(element.get("from"))
            time_to = _parse_time(element.get("to"))

        direction = element.find("windDirection")
        gusts = element.find("windGust")
        precipitation = element.find("precipitation")

        return cls(
            time_from=time_from,
            time_to=time_to,
            city=city,
            sun=sun,
            temperature=Temperature.from_xml(element.find("temperature")),
            humidity=Unit.from_xml(element.find("humidity")),
            pressure=Unit.from_xml(element.find("pressure")),
            wind=Wind(
                speed=Unit.from_xml(element.find("windSpeed"), value="mps", description="name"),
                direction=Unit.from_xml(direction, value="deg", unit="code", description="name")
                if direction is not None
                else None,
                gusts=Unit.from_xml(gusts, value="gust") if gusts is not None else None,
            ),
            clouds=Unit.from_xml(element.find("clouds"), value="all", description="value"),
            precipitation=Unit(
                value=_float(precipitation.get("value")) or 0.0,
                unit=precipitation.get("unit") or "",
                description=precipitation.get("type") or "",
            )
            if precipitation is not None
            else Unit(),
            weather=Weather(
                id=_int(_attr(element, "symbol", "number")),
                description=_attr(element, "symbol", "name") or "",
                icon=_attr(element, "symbol", "var") or "",
            ),
        )


def forecast_limit(days: int) -> int:
    """Number of points kept for a forecast horizon of ``days``.

    Horizons served by the three-hourly endpoint keep eight points per day,
    longer ones come from the daily endpoint and keep one point per day.

    Example:
        >>> forecast_limit(3)
        24
        >>> forecast_limit(10)
        10
    """
    if days <= HOURLY_FORECAST_MAX_DAYS:
        return days * SLOTS_PER_DAY
    return days


class WeatherForecast(BaseModel):
    """Ordered forecast points for one place.

    Attributes:
        city: The forecast's place.
        sun: Sunrise and sunset of the first day.
        last_update: When the provider last updated the forecast.
        forecasts: The points, at most ``limit`` of them.

    Example:
        >>> forecast = await client.get_weather_forecast("Berlin", days=2)
        >>> len(forecast) <= 16
        True
        >>> for point in forecast:
        ...     print(point.time_from, point.weather.description)
    """

    city: City = City()
    sun: Sun = Sun()
    last_update: Optional[datetime] = None
    forecasts: list[Forecast] = []

    def __iter__(self) -> Iterator[Forecast]:  # type: ignore[override]
        return iter(self.forecasts)

    def __len__(self) -> int:
        return len(self.forecasts)

    def __getitem__(self, index: int) -> Forecast:
        return self.forecasts[index]

    @classmethod
    def from_xml(cls, root: ET.Element, limit: int) -> "WeatherForecast":
        """Build from the root of a ``mode=xml`` forecast document.

        Args:
            root: Document root.
            limit: Maximum number of points kept, in document order.
        """
        location = root.find("location")
        city = City(
            id=_int(_attr(location, "location", "geobaseid")),
            name=_text(location, "name"),
            lat=_float(_attr(location, "location", "latitude")),
            lon=_float(_attr(location, "location", "longitude")),
            country=_text(location, "country"),
            timezone_offset=_int(_text(location, "timezone")),
        )
        sun = Sun(
            rise=_parse_time(_attr(root, "sun", "rise")),
            set=_parse_time(_attr(root, "sun", "set")),
        )

        forecasts = [
            Forecast.from_xml(element, city=city, sun=sun)
            for element in root.findall("forecast/time")[:limit]
        ]

        return cls(
            city=city,
            sun=sun,
            last_update=_parse_time(_text(root, "meta/lastupdate")),
            forecasts=forecasts,
        )


class History(BaseModel):
    """One historical weather record."""

    time: Optional[datetime] = None
    city: Optional[City] = None
    temperature: Temperature = Temperature()
    humidity: Unit = Unit()
    pressure: Unit = Unit()
    wind: Wind = Wind()
    clouds: Unit = Unit()
    precipitation: Optional[Unit] = None
    weather: Weather = Weather()

    @classmethod
    def from_json(
        cls,
        data: dict[str, Any],
        units: Union[Units, str],
        city: Optional[City] = None,
    ) -> "History":
        main = data.get("main") or {}
        rain = data.get("rain")
        precipitation = None
        if rain:
            period, value = next(iter(rain.items()))
            precipitation = Unit(value=_float(value), unit=period, description="rain")

        return cls(
            time=_from_unix(data.get("dt")),
            city=city,
            temperature=Temperature.from_json(main, units),
            humidity=Unit(value=_float(main.get("humidity")), unit="%"),
            pressure=Unit(value=_float(main.get("pressure")), unit="hPa"),
            wind=Wind.from_json(data.get("wind") or {}, units),
            clouds=Unit(value=_float((data.get("clouds") or {}).get("all")), unit="%"),
            precipitation=precipitation,
            weather=Weather.from_json(data.get("weather")),
        )


class WeatherHistory(BaseModel):
    """Ordered historical weather records for one place.

    The provider does not echo the place name or coordinates, so they are
    taken from the query the history was requested with.
    """

    city: City = City()
    calctime: Optional[float] = None
    histories: list[History] = []

    def __iter__(self) -> Iterator[History]:  # type: ignore[override]
        return iter(self.histories)

    def __len__(self) -> int:
        return len(self.histories)

    def __getitem__(self, index: int) -> History:
        return self.histories[index]

    @classmethod
    def from_json(
        cls,
        data: dict[str, Any],
        query: Query,
        units: Union[Units, str],
    ) -> "WeatherHistory":
        records = data.get("list") or []
        first_city = (records[0].get("city") or {}) if records else {}

        city = City(
            id=_int(data.get("city_id")),
            name=query.name if isinstance(query, CityName) else None,
            lat=float(query.lat) if isinstance(query, Coordinates) else None,
            lon=float(query.lon) if isinstance(query, Coordinates) else None,
            country=first_city.get("country"),
            population=_int(first_city.get("population")),
        )

        return cls(
            city=city,
            calctime=_float(data.get("calctime")),
            histories=[History.from_json(record, units, city=city) for record in records],
        )


class UVIndex(BaseModel):
    """UV index at a place and moment.

    Example:
        >>> uv = await client.get_current_uv_index(40.7, -74.0)
        >>> print(f"UV index {uv.uv_index} at {uv.time}")
    """

    time: Optional[datetime] = None
    location: Location
    uv_index: float

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "UVIndex":
        location = data.get("location") or {}
        return cls(
            time=_parse_time(data.get("time")),
            location=Location(lat=location["latitude"], lon=location["longitude"]),
            uv_index=float(data["data"]),
        )
