"""
Primary/fallback source chains for each data category.

A chain tries its sources in order and settles on the first one that
returns a non-empty value. Anything a source raises, and any empty
result, moves the chain on to the next source; when every source has
failed the chain returns its static default. ``fetch()`` never raises.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Sequence, Tuple

from .ai_client import AIClient
from .config import FINANCE_KEYS, NEWS_UNAVAILABLE_TEXT
from .exceptions import ParseError, TickerError
from .feed_fetcher import FeedFetcher
from .logger import logger
from .models import (
    ForexData, FuelPrices, GoldPrices, StockData, WeatherData,
    parse_entries, parse_list, parse_strings,
)
from .prompts import FINANCE_PROMPT, NEWS_PROMPT, weather_prompt
from .static_data import (
    CITIES_FOR_WEATHER, FALLBACK_FOREX, FALLBACK_FUEL, FALLBACK_GOLD,
    FALLBACK_VIETNAM_STOCKS, FALLBACK_WORLD_STOCKS,
)
from .utils import describe_failure
from .weather import WeatherFetcher

DEFAULT_SOURCE = 'default'

Source = Tuple[str, Callable[[], Any]]


@dataclass(frozen=True)
class CategoryResult:
    """Outcome of one chain run."""
    value: Any
    source: str
    errors: Tuple[str, ...] = ()

    @property
    def is_default(self) -> bool:
        return self.source == DEFAULT_SOURCE


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    try:
        return len(value) == 0
    except TypeError:
        return False


class FallbackFetchChain:
    """Ordered sources for one category, ending at a static default."""

    def __init__(self, name: str, sources: Sequence[Source], default: Callable[[], Any]):
        self.name = name
        self.sources = list(sources)
        self.default = default

    @property
    def source_names(self) -> List[str]:
        return [source_name for source_name, _ in self.sources]

    def fetch(self, skip: Iterable[str] = ()) -> CategoryResult:
        """
        Run the chain.

        Args:
            skip: Names of sources to leave out of this run

        Returns:
            CategoryResult from the first source with data, or the default
        """
        skipped = set(skip)
        errors = []

        for source_name, source in self.sources:
            if source_name in skipped:
                continue
            try:
                value = source()
            except TickerError as e:
                errors.append(f"{source_name}: {describe_failure(e)}")
                logger.warning(f"[{self.name}] source '{source_name}' failed: {describe_failure(e)}")
                continue
            except Exception as e:
                errors.append(f"{source_name}: {describe_failure(e)}")
                logger.exception(f"[{self.name}] unexpected error in source '{source_name}'")
                continue

            if _is_empty(value):
                errors.append(f"{source_name}: no data")
                logger.warning(f"[{self.name}] source '{source_name}' returned no data")
                continue

            logger.info(f"[{self.name}] loaded from '{source_name}'")
            return CategoryResult(value=value, source=source_name, errors=tuple(errors))

        logger.warning(f"[{self.name}] all sources failed, using default")
        return CategoryResult(value=self.default(), source=DEFAULT_SOURCE, errors=tuple(errors))


# ============================================================================
# NEWS
# ============================================================================

def news_default() -> Tuple[str, ...]:
    return (NEWS_UNAVAILABLE_TEXT,)


def build_news_chain(ai_client: AIClient, feed_fetcher: FeedFetcher) -> FallbackFetchChain:
    """AI summaries first, then the merged syndication feeds."""

    def ai_news() -> Tuple[str, ...]:
        payload = ai_client.generate_json(NEWS_PROMPT, web_search=True)
        if not isinstance(payload, list):
            raise ParseError("news summaries were not a list")
        return tuple(parse_strings(payload))

    def feed_news() -> Tuple[str, ...]:
        return tuple(feed_fetcher.fetch_all())

    return FallbackFetchChain(
        'news',
        [('ai', ai_news), ('feeds', feed_news)],
        default=news_default,
    )


# ============================================================================
# WEATHER
# ============================================================================

def build_weather_chain(ai_client: AIClient, weather_fetcher: WeatherFetcher,
                        cities: Sequence[str] = CITIES_FOR_WEATHER) -> FallbackFetchChain:
    """One AI query for every city, then one public lookup per city."""

    def ai_weather() -> Tuple[WeatherData, ...]:
        payload = ai_client.generate_json(weather_prompt(cities), web_search=True)
        return tuple(parse_entries(payload, WeatherData.from_dict))

    def public_weather() -> Tuple[WeatherData, ...]:
        return tuple(weather_fetcher.fetch_all(cities))

    return FallbackFetchChain(
        'weather',
        [('ai', ai_weather), ('open-meteo', public_weather)],
        default=lambda: None,
    )


# ============================================================================
# FINANCE (stocks, forex, gold, fuel)
# ============================================================================

def _stock_list(items: Any) -> Tuple[StockData, ...]:
    return parse_list(items, StockData.from_dict)


def _forex_list(items: Any) -> Tuple[ForexData, ...]:
    return parse_list(items, ForexData.from_dict)


# data key -> (payload field, parser)
FINANCE_FIELDS = {
    'stocks-vn': ('vietnamStocks', _stock_list),
    'stocks-world': ('worldStocks', _stock_list),
    'forex': ('forex', _forex_list),
    'gold': ('goldPrices', GoldPrices.from_dict),
    'fuel': ('fuelPrices', FuelPrices.from_dict),
}

FINANCE_DEFAULTS = {
    'stocks-vn': FALLBACK_VIETNAM_STOCKS,
    'stocks-world': FALLBACK_WORLD_STOCKS,
    'forex': FALLBACK_FOREX,
    'gold': FALLBACK_GOLD,
    'fuel': FALLBACK_FUEL,
}


def finance_default() -> Dict[str, Any]:
    return dict(FINANCE_DEFAULTS)


def parse_finance(payload: Any) -> Dict[str, Any]:
    """
    Parse the combined finance payload key by key.

    Keys that are missing or unusable take their static default.

    Raises:
        ParseError: If the payload is not an object or no key is usable
    """
    if not isinstance(payload, dict):
        raise ParseError("finance payload was not an object")

    data = {}
    for key in FINANCE_KEYS:
        field, parser = FINANCE_FIELDS[key]
        try:
            data[key] = parser(payload.get(field))
        except ParseError as e:
            logger.info(f"[finance] '{field}' unusable ({e}), using default")
            data[key] = FINANCE_DEFAULTS[key]

    if not any(data[key] is not FINANCE_DEFAULTS[key] for key in FINANCE_KEYS):
        raise ParseError("no usable finance data in response")
    return data


def defaulted_keys(data: Dict[str, Any]) -> List[str]:
    """Finance keys currently holding their static default."""
    return [key for key in FINANCE_KEYS if data.get(key) is FINANCE_DEFAULTS[key]]


def build_finance_chain(ai_client: AIClient) -> FallbackFetchChain:
    """One combined AI query, then the static defaults."""

    def ai_finance() -> Dict[str, Any]:
        return parse_finance(ai_client.generate_json(FINANCE_PROMPT, web_search=True))

    return FallbackFetchChain('finance', [('ai', ai_finance)], default=finance_default)
