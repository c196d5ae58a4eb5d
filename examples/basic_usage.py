"""Basic usage examples for OpenWeatherMap client."""

import asyncio
import os
from datetime import datetime, timedelta, timezone

from openweathermap import MemoryCache, OpenWeatherMapClient, Units

API_KEY = os.environ.get("OWM_API_KEY", "")


async def current_example() -> None:
    """Get current weather."""
    async with OpenWeatherMapClient(api_key=API_KEY) as client:
        weather = await client.get_weather("Berlin,de", units=Units.METRIC)

        print("=== Current Weather ===")
        print(f"Location: {weather.city.name} ({weather.city.lat}, {weather.city.lon})")
        print(f"Temperature: {weather.temperature.now}")
        print(f"Humidity: {weather.humidity}")
        print(f"Wind: {weather.wind.speed}")
        print(f"Pressure: {weather.pressure}")
        print(f"Conditions: {weather.weather.description}")


async def forecast_example() -> None:
    """Get a 3 day three-hourly and a 10 day daily forecast."""
    async with OpenWeatherMapClient(api_key=API_KEY) as client:
        forecast = await client.get_weather_forecast(
            {"lat": 52.52, "lon": 13.41}, units=Units.METRIC, days=3
        )

        print("\n=== 3-Day Forecast ===")
        for point in forecast:
            print(f"{point.time_from}: {point.temperature.now}, {point.weather.description}")

        daily = await client.get_weather_forecast("Berlin,de", units=Units.METRIC, days=10)

        print("\n=== 10-Day Forecast ===")
        for day in daily:
            print(f"{day.time_from:%Y-%m-%d}: {day.temperature.min} - {day.temperature.max}")


async def cache_example() -> None:
    """Serve a repeated request from the cache."""
    async with OpenWeatherMapClient(
        api_key=API_KEY, cache=MemoryCache(), ttl_seconds=300
    ) as client:
        await client.get_weather(2950159)
        await client.get_weather(2950159)

        print("\n=== Caching ===")
        print(f"Second call served from cache: {client.was_cached}")


async def uv_index_example() -> None:
    """Get the UV index now and yesterday."""
    async with OpenWeatherMapClient(api_key=API_KEY) as client:
        current = await client.get_current_uv_index(52.52, 13.41)
        yesterday = datetime.now(timezone.utc) - timedelta(days=1)
        past = await client.get_uv_index(52.52, 13.41, yesterday, "day")

        print("\n=== UV Index ===")
        print(f"Now: {current.uv_index}")
        print(f"Yesterday: {past.uv_index}")


async def dataframe_example() -> None:
    """Convert a forecast to pandas DataFrame."""
    try:
        from openweathermap.dataframe import to_dataframe
    except ImportError:
        print("\n=== DataFrame Example ===")
        print("Install pandas: pip install openweathermap-py[pandas]")
        return

    async with OpenWeatherMapClient(api_key=API_KEY) as client:
        forecast = await client.get_weather_forecast("Berlin,de", units=Units.METRIC, days=5)

        df = to_dataframe(forecast)

        print("\n=== DataFrame Example ===")
        print(f"Shape: {df.shape}")
        print(df.head())


async def main() -> None:
    """Run all examples."""
    await current_example()
    await forecast_example()
    await cache_example()
    await uv_index_example()
    await dataframe_example()


if __name__ == "__main__":
    asyncio.run(main())
