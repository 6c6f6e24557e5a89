"""
Dataset types shown in the bottom info bar.

Every dataset is a frozen dataclass held in tuples so a snapshot can be
shared between the fetch threads and the control thread without copying.
The ``from_dict`` constructors accept the camelCase field names used by
the upstream JSON payloads and raise ParseError on anything unusable.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Tuple, TypeVar

from .exceptions import ParseError
from .logger import logger

T = TypeVar('T')


def _number(data: Dict[str, Any], key: str) -> float:
    value = data.get(key)
    if isinstance(value, bool) or value is None:
        raise ParseError(f"missing numeric field '{key}'")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ParseError(f"field '{key}' is not a number: {value!r}")


def _text(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ParseError(f"missing text field '{key}'")
    return value.strip()


def _mapping(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ParseError(f"expected an object, got {type(data).__name__}")
    return data


@dataclass(frozen=True)
class WeatherData:
    city: str
    temp_min: float
    temp_max: float
    humidity: float
    rain_chance: float

    @classmethod
    def from_dict(cls, data: Any) -> 'WeatherData':
        data = _mapping(data)
        return cls(
            city=_text(data, 'city'),
            temp_min=_number(data, 'tempMin'),
            temp_max=_number(data, 'tempMax'),
            humidity=_number(data, 'humidity'),
            rain_chance=_number(data, 'rainChance'),
        )


@dataclass(frozen=True)
class StockData:
    index: str
    value: float
    change: float
    percent_change: float

    @classmethod
    def from_dict(cls, data: Any) -> 'StockData':
        data = _mapping(data)
        return cls(
            index=_text(data, 'index'),
            value=_number(data, 'value'),
            change=_number(data, 'change'),
            percent_change=_number(data, 'percentChange'),
        )


@dataclass(frozen=True)
class ForexData:
    code: str
    buy: float
    sell: float

    @classmethod
    def from_dict(cls, data: Any) -> 'ForexData':
        data = _mapping(data)
        return cls(code=_text(data, 'code'), buy=_number(data, 'buy'), sell=_number(data, 'sell'))


@dataclass(frozen=True)
class GoldData:
    name: str
    buy: float
    sell: float

    @classmethod
    def from_dict(cls, data: Any) -> 'GoldData':
        data = _mapping(data)
        return cls(name=_text(data, 'name'), buy=_number(data, 'buy'), sell=_number(data, 'sell'))


@dataclass(frozen=True)
class PriceData:
    """A named single-price quote (world gold, fuel)."""
    name: str
    price: float

    @classmethod
    def from_dict(cls, data: Any) -> 'PriceData':
        data = _mapping(data)
        return cls(name=_text(data, 'name'), price=_number(data, 'price'))


@dataclass(frozen=True)
class GoldPrices:
    domestic: Tuple[GoldData, ...]
    world: Tuple[PriceData, ...]

    @classmethod
    def from_dict(cls, data: Any) -> 'GoldPrices':
        data = _mapping(data)
        return cls(
            domestic=parse_list(data.get('domestic'), GoldData.from_dict),
            world=parse_list(data.get('world'), PriceData.from_dict),
        )


@dataclass(frozen=True)
class FuelPrices:
    domestic: Tuple[PriceData, ...]
    world: Tuple[PriceData, ...]

    @classmethod
    def from_dict(cls, data: Any) -> 'FuelPrices':
        data = _mapping(data)
        return cls(
            domestic=parse_list(data.get('domestic'), PriceData.from_dict),
            world=parse_list(data.get('world'), PriceData.from_dict),
        )


def parse_list(items: Any, parser: Callable[[Any], T]) -> Tuple[T, ...]:
    """Parse a non-empty list; any bad entry rejects the whole list."""
    if not isinstance(items, list) or not items:
        raise ParseError("expected a non-empty list")
    return tuple(parser(item) for item in items)


def parse_entries(items: Any, parser: Callable[[Any], T]) -> List[T]:
    """Parse a list keeping the usable entries and logging the rest."""
    if not isinstance(items, list):
        raise ParseError(f"expected a list, got {type(items).__name__}")

    parsed = []
    for item in items:
        try:
            parsed.append(parser(item))
        except ParseError as e:
            logger.warning(f"Dropping unusable entry: {e}")
    return parsed


def parse_strings(items: Iterable[Any]) -> List[str]:
    """Keep the non-blank strings of a decoded JSON list."""
    return [item.strip() for item in items if isinstance(item, str) and item.strip()]
