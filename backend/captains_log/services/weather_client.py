"""Open-Meteo forecast client."""

import logging
from dataclasses import asdict, dataclass
from datetime import date

import httpx

from captains_log.config import settings

logger = logging.getLogger(__name__)

# WMO weather interpretation codes
WEATHER_CODES = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snow",
    73: "Moderate snow",
    75: "Heavy snow",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}

DAILY_FIELDS = "weather_code,temperature_2m_max,temperature_2m_min,precipitation_probability_max"


@dataclass
class DailyForecast:
    date: str
    weather_code: int | None
    description: str
    temperature_max: float | None
    temperature_min: float | None
    precipitation_probability: int | None

    def to_dict(self) -> dict:
        return asdict(self)


def describe(code: int | None) -> str:
    if code is None:
        return "Unknown"
    return WEATHER_CODES.get(code, "Unknown")


class WeatherClient:
    """Daily forecasts from Open-Meteo. No API key required."""

    def __init__(self):
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=settings.weather_base_url,
                timeout=15.0,
            )
        return self._client

    async def fetch_daily_forecast(
        self,
        latitude: float,
        longitude: float,
        start: date,
        end: date,
    ) -> list[DailyForecast] | None:
        """Forecast for each day in ``start..end``. None when the service fails."""
        try:
            client = await self._get_client()
            resp = await client.get(
                "/forecast",
                params={
                    "latitude": latitude,
                    "longitude": longitude,
                    "daily": DAILY_FIELDS,
                    "timezone": "auto",
                    "start_date": start.isoformat(),
                    "end_date": end.isoformat(),
                },
            )
            resp.raise_for_status()
            return self._parse(resp.json())
        except Exception as e:
            logger.error(f"Open-Meteo request failed for ({latitude}, {longitude}): {e}")
            return None

    @staticmethod
    def _parse(data: dict) -> list[DailyForecast]:
        daily = data.get("daily") or {}
        days = daily.get("time", [])

        def column(name: str) -> list:
            values = daily.get(name) or []
            return values + [None] * (len(days) - len(values))

        codes = column("weather_code")
        highs = column("temperature_2m_max")
        lows = column("temperature_2m_min")
        rain = column("precipitation_probability_max")
        return [
            DailyForecast(
                date=day,
                weather_code=codes[i],
                description=describe(codes[i]),
                temperature_max=highs[i],
                temperature_min=lows[i],
                precipitation_probability=rain[i],
            )
            for i, day in enumerate(days)
        ]

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None


weather_client = WeatherClient()
