"""DataFrame conversion utilities for OpenWeatherMap results.

This module converts the sequence results of the client (forecasts,
histories, weather groups) to pandas DataFrames with one row per point.

Requirements:
    pandas >= 2.0 must be installed. Install with:
        pip install pandas
    Or install openweathermap-py with pandas extra:
        pip install openweathermap-py[pandas]

Functions:
    to_dataframe: Convert a sequence result to a pandas DataFrame

Example:
    Basic usage::

        from openweathermap import OpenWeatherMapClient, Units
        from openweathermap.dataframe import to_dataframe

        async with OpenWeatherMapClient(api_key="...") as client:
            forecast = await client.get_weather_forecast(
                "Berlin", units=Units.METRIC, days=5
            )
            df = to_dataframe(forecast)
            print(df[["time", "temperature", "description"]].head())
"""

from typing import Any, Union

from .models import (
    CurrentWeather,
    CurrentWeatherGroup,
    Forecast,
    History,
    WeatherForecast,
    WeatherHistory,
)


def _check_pandas() -> None:
    """Check if pandas is installed and raise informative error if not."""
    try:
        import pandas  # noqa: F401
    except ImportError as e:
        raise ImportError(
            "pandas is required for DataFrame conversion. "
            "Install it with: pip install pandas"
        ) from e


def _row(point: Union[Forecast, History, CurrentWeather]) -> dict[str, Any]:
    if isinstance(point, Forecast):
        time = point.time_from
    elif isinstance(point, History):
        time = point.time
    else:
        time = point.last_update

    direction = point.wind.direction
    return {
        "time": time,
        "city": point.city.name if point.city else None,
        "temperature": point.temperature.now.value,
        "temperature_min": point.temperature.min.value,
        "temperature_max": point.temperature.max.value,
        "humidity": point.humidity.value,
        "pressure": point.pressure.value,
        "wind_speed": point.wind.speed.value,
        "wind_direction": direction.value if direction else None,
        "clouds": point.clouds.value,
        "precipitation": point.precipitation.value if point.precipitation else None,
        "weather_id": point.weather.id,
        "description": point.weather.description,
    }


def to_dataframe(
    result: Union[WeatherForecast, WeatherHistory, CurrentWeatherGroup],
) -> "pd.DataFrame":
    """Convert a sequence result to a pandas DataFrame.

    Args:
        result: WeatherForecast, WeatherHistory or CurrentWeatherGroup.

    Returns:
        pandas DataFrame with one row per point. The 'time' column holds
        UTC timestamps (forecast period start, record time, or last update
        for weather groups).

    Raises:
        ImportError: If pandas is not installed.
        ValueError: If the result type is not supported.

    Example:
        >>> df = to_dataframe(forecast)
        >>> list(df.columns)[:3]
        ['time', 'city', 'temperature']
    """
    _check_pandas()
    import pandas as pd

    if not isinstance(result, (WeatherForecast, WeatherHistory, CurrentWeatherGroup)):
        raise ValueError(
            f"Unsupported result type: {type(result).__name__}. "
            "Expected WeatherForecast, WeatherHistory or CurrentWeatherGroup."
        )

    df = pd.DataFrame([_row(point) for point in result])
    if not df.empty:
        df["time"] = pd.to_datetime(df["time"], utc=True)
    return df


__all__ = ["to_dataframe"]
