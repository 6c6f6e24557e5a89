"""
Per-city weather lookups against the public Open-Meteo forecast API.
"""
import json
import urllib.error
import urllib.parse
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .config import FETCH_TIMEOUT, MAX_WORKERS, WEATHER_API_URL, WEATHER_TIMEZONE
from .exceptions import FetchError, ParseError
from .logger import logger
from .models import WeatherData
from .static_data import CITY_COORDINATES


class WeatherFetcher:
    """Looks up today's forecast for each city, one request per city."""

    def __init__(self, coordinates: Mapping[str, Tuple[float, float]] = CITY_COORDINATES,
                 timeout: float = FETCH_TIMEOUT, max_workers: int = MAX_WORKERS):
        self.coordinates = coordinates
        self.timeout = timeout
        self.max_workers = max_workers

    def _build_url(self, latitude: float, longitude: float) -> str:
        query = urllib.parse.urlencode({
            'latitude': latitude,
            'longitude': longitude,
            'daily': 'temperature_2m_max,temperature_2m_min,precipitation_probability_max',
            'current': 'relative_humidity_2m',
            'timezone': WEATHER_TIMEZONE,
        })
        return f"{WEATHER_API_URL}?{query}"

    def _request(self, url: str) -> Dict:
        """
        GET a forecast and decode its JSON body.

        Raises:
            FetchError: On network, HTTP or decoding failure
        """
        try:
            with urllib.request.urlopen(url, timeout=self.timeout) as response:
                return json.loads(response.read().decode('utf-8'))
        except urllib.error.URLError as e:
            raise FetchError(f"Network error: {e}")
        except ValueError as e:
            raise FetchError(f"Invalid weather response: {e}")
        except Exception as e:
            raise FetchError(f"Unexpected error fetching weather: {e}")

    def fetch_city(self, city: str) -> WeatherData:
        """
        Fetch today's forecast for one city.

        Raises:
            FetchError: If the city is unknown or the request fails
            ParseError: If the response lacks the forecast fields
        """
        coords = self.coordinates.get(city)
        if coords is None:
            raise FetchError(f"No coordinates for {city}")

        data = self._request(self._build_url(*coords))
        try:
            daily = data['daily']
            return WeatherData(
                city=city,
                temp_max=round(daily['temperature_2m_max'][0]),
                temp_min=round(daily['temperature_2m_min'][0]),
                humidity=round(data['current']['relative_humidity_2m']),
                rain_chance=round(daily['precipitation_probability_max'][0]),
            )
        except (KeyError, IndexError, TypeError) as e:
            raise ParseError(f"Incomplete forecast for {city}: {e}")

    def _fetch_or_none(self, city: str) -> Optional[WeatherData]:
        try:
            return self.fetch_city(city)
        except (FetchError, ParseError) as e:
            logger.warning(f"Weather lookup failed for {city}: {e}")
            return None

    def fetch_all(self, cities: Sequence[str]) -> List[WeatherData]:
        """Fetch every city in parallel, dropping the ones that fail."""
        if not cities:
            return []

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(cities)),
                                thread_name_prefix="WeatherFetch") as pool:
            results = list(pool.map(self._fetch_or_none, cities))

        weather = [item for item in results if item is not None]
        logger.info(f"Weather fallback returned {len(weather)}/{len(cities)} cities")
        return weather
