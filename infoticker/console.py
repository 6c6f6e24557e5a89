"""
Plain-text rendering of a ticker snapshot, for running in a terminal.
"""
import sys
import threading
from typing import Callable, Optional, TextIO

from .config import BREAKING_DEFAULT_TITLE, NBSP
from .logger import logger
from .models import ForexData, FuelPrices, GoldPrices, StockData
from .session import TickerSnapshot
from .utils import format_clock

CATEGORY_LABELS = {
    'weather': 'THỜI TIẾT',
    'stocks': 'CHỨNG KHOÁN',
    'forex': 'TỶ GIÁ',
    'gold': 'GIÁ VÀNG',
    'fuel': 'GIÁ XĂNG DẦU',
}

NEWS_WIDTH = 90


def _fmt(value: float) -> str:
    return f"{value:,.2f}" if value % 1 else f"{value:,.0f}"


def _stocks(items) -> str:
    parts = []
    for item in items or ():
        if not isinstance(item, StockData):
            continue
        sign = '+' if item.change >= 0 else ''
        parts.append(f"{item.index} {_fmt(item.value)} ({sign}{item.percent_change:.2f}%)")
    return "  ".join(parts)


def render_info_bar(snapshot: TickerSnapshot) -> str:
    """Text of the bottom info bar for the active category and view."""
    category = snapshot.active_category
    if not snapshot.bar_visible or category is None:
        return ""

    data = snapshot.category_data
    view = snapshot.active_sub_view.get(category)
    label = CATEGORY_LABELS.get(category, category.upper())

    if category == 'weather':
        city = snapshot.current_city_weather
        if city is None:
            return label
        body = (f"{city.city} {city.temp_min:.0f}-{city.temp_max:.0f}°C "
                f"ẩm {city.humidity:.0f}% mưa {city.rain_chance:.0f}%")
    elif category == 'stocks':
        key = 'stocks-vn' if view == 'vietnam' else 'stocks-world'
        body = _stocks(data.get(key))
    elif category == 'forex':
        body = "  ".join(
            f"{item.code} {_fmt(item.buy)}/{_fmt(item.sell)}"
            for item in data.get('forex') or () if isinstance(item, ForexData)
        )
    elif category == 'gold':
        gold = data.get('gold')
        if not isinstance(gold, GoldPrices):
            body = ""
        elif view == 'domestic':
            body = "  ".join(f"{g.name} {_fmt(g.buy)}/{_fmt(g.sell)}" for g in gold.domestic)
        else:
            body = "  ".join(f"{g.name} ${_fmt(g.price)}" for g in gold.world)
    elif category == 'fuel':
        fuel = data.get('fuel')
        if not isinstance(fuel, FuelPrices):
            body = ""
        else:
            items = fuel.domestic if view == 'domestic' else fuel.world
            body = "  ".join(f"{f.name} {_fmt(f.price)}" for f in items)
    else:
        body = ""

    return f"{label}: {body}"


def render_line(snapshot: TickerSnapshot) -> str:
    """One status line: clock, news strip and info bar."""
    if snapshot.configuration_error:
        return f"[{format_clock()}] {snapshot.configuration_error}"

    news = snapshot.news_string.replace(NBSP, ' ').strip()
    news = " ".join(news.split())
    if len(news) > NEWS_WIDTH:
        news = news[:NEWS_WIDTH - 1] + "…"

    prefix = ""
    if snapshot.is_breaking_mode:
        prefix = f"<{snapshot.breaking_title or BREAKING_DEFAULT_TITLE}> "

    line = f"[{format_clock()}] {prefix}{news or '...'}"
    bar = render_info_bar(snapshot)
    if bar:
        line += f" | {bar}"
    if snapshot.manual_loading:
        line += " | (đang tải tin nóng...)"
    if snapshot.manual_error:
        line += f" | {snapshot.manual_error}"
    return line


class ConsoleRenderer:
    """Prints the status line whenever it changes."""

    def __init__(self, snapshot_source: Callable[[], TickerSnapshot], out: TextIO = sys.stdout):
        self.snapshot_source = snapshot_source
        self.out = out
        self._last: Optional[str] = None

    def refresh(self):
        line = render_line(self.snapshot_source())
        if line != self._last:
            self._last = line
            print(line, file=self.out, flush=True)


def start_command_reader(post: Callable[[str], None], stop_event: threading.Event,
                         stream: TextIO = sys.stdin) -> threading.Thread:
    """Read operator commands from ``stream`` on a daemon thread."""

    def read_loop():
        for line in stream:
            if stop_event.is_set():
                break
            if line.strip().lower() in ('q', 'quit', 'exit'):
                stop_event.set()
                break
            post(line)
        logger.debug("Command reader stopped")

    thread = threading.Thread(target=read_loop, daemon=True, name="CommandReader")
    thread.start()
    return thread
