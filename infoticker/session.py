"""
Session state owned by the control thread, and the read-only snapshot
handed to whatever renders the ticker.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from .animation import AnimationGate
from .config import CATEGORY_KEYS, ROTATION_SOURCES, SUB_VIEWS
from .key_pool import KeyRotationPool
from .models import WeatherData
from .utils import format_news_string


def primary_sub_views() -> Dict[str, str]:
    return {category: views[0] for category, views in SUB_VIEWS.items()}


@dataclass(frozen=True)
class TickerSnapshot:
    """Everything a renderer needs for one frame."""
    news_string: str
    news_items: Tuple[str, ...]
    news_error: Optional[str]
    category_data: Mapping[str, Any]
    active_category: Optional[str]
    active_sub_view: Mapping[str, str]
    active_item_index: int
    current_city_weather: Optional[WeatherData]
    main_state: str
    bar_state: str
    bar_visible: bool
    is_breaking_mode: bool
    breaking_title: Optional[str]
    manual_panel_open: bool
    manual_loading: bool
    manual_error: Optional[str]
    configuration_error: Optional[str]
    key_cursor: int


class Session:
    """
    Mutable ticker state.

    Only the control thread mutates a session. Datasets are replaced
    whole, never edited in place, so a snapshot taken at any point is
    internally consistent.
    """

    def __init__(self, scheduler, key_pool: KeyRotationPool):
        self.key_pool = key_pool

        # News strip
        self.news_items: Tuple[str, ...] = ()
        self.news_error: Optional[str] = None
        self.is_breaking_mode = False
        self.breaking_title: Optional[str] = None
        # Bumped on every news mode change; older news results are stale
        self.news_generation = 0

        # Bottom info bar
        self.category_data: Dict[str, Any] = {key: None for key in CATEGORY_KEYS}
        self.active_category: Optional[str] = None
        self.active_sub_view = primary_sub_views()
        self.active_item_index = 0
        self.bar_visible = False

        # Transition gates
        self.main_animation = AnimationGate('main', scheduler)
        self.bar_animation = AnimationGate('bar', scheduler)

        # Operator request surface
        self.manual_panel_open = False
        self.manual_loading = False
        self.manual_error: Optional[str] = None

        self.configuration_error: Optional[str] = None

    @property
    def manual_topic_active(self) -> bool:
        """True while an operator topic owns the news strip."""
        return self.manual_loading or self.breaking_title is not None

    def set_news(self, items, error: Optional[str] = None):
        self.news_items = tuple(items)
        self.news_error = error

    def set_category(self, key: str, value: Any):
        if key not in self.category_data:
            raise KeyError(f"Unknown category key: {key}")
        self.category_data[key] = value

    def has_data(self, category: str) -> bool:
        """Whether a rotation category has any loaded data."""
        return any(self.category_data[key] is not None for key in ROTATION_SOURCES[category])

    def current_city_weather(self) -> Optional[WeatherData]:
        if self.active_category != 'weather':
            return None
        cities = self.category_data['weather'] or ()
        if not 0 <= self.active_item_index < len(cities):
            return None
        return cities[self.active_item_index]

    def reset_sub_views(self):
        self.active_sub_view = primary_sub_views()

    def snapshot(self) -> TickerSnapshot:
        return TickerSnapshot(
            news_string=format_news_string(self.news_items, self.news_error),
            news_items=self.news_items,
            news_error=self.news_error,
            category_data=MappingProxyType(dict(self.category_data)),
            active_category=self.active_category,
            active_sub_view=MappingProxyType(dict(self.active_sub_view)),
            active_item_index=self.active_item_index,
            current_city_weather=self.current_city_weather(),
            main_state=self.main_animation.state,
            bar_state=self.bar_animation.state,
            bar_visible=self.bar_visible,
            is_breaking_mode=self.is_breaking_mode,
            breaking_title=self.breaking_title,
            manual_panel_open=self.manual_panel_open,
            manual_loading=self.manual_loading,
            manual_error=self.manual_error,
            configuration_error=self.configuration_error,
            key_cursor=self.key_pool.cursor,
        )
