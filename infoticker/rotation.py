"""
Bottom info bar rotation.

Decides which category is shown, which sub-view of a two-view category
is shown and which weather city is shown. Only categories with loaded
data take part in the rotation. The timers driving the rotation belong
to the active category and are rebuilt whenever it changes.
"""
from typing import List, Optional

from .config import (
    CATEGORY_DWELL_MS, INFO_BAR_ORDER, SUB_VIEW_MS, SUB_VIEWS, WEATHER_CITY_MS,
)
from .logger import logger
from .session import Session
from .timers import TimerRegistry

ROTATION_TIMERS = ('city', 'dwell', 'sub_view')


class RotationScheduler:
    """Timer-driven rotation over the categories that currently have data."""

    def __init__(self, session: Session, scheduler,
                 city_ms: int = WEATHER_CITY_MS,
                 dwell_ms: int = CATEGORY_DWELL_MS,
                 sub_view_ms: int = SUB_VIEW_MS):
        self.session = session
        self.city_ms = city_ms
        self.dwell_ms = dwell_ms
        self.sub_view_ms = sub_view_ms
        self._timers = TimerRegistry(scheduler)
        self._armed_for: Optional[str] = None
        self._revealing = False

    @property
    def active_timers(self) -> List[str]:
        return self._timers.names()

    def available_categories(self) -> List[str]:
        """Rotation categories with data, in display order."""
        return [category for category in INFO_BAR_ORDER if self.session.has_data(category)]

    def on_data_changed(self):
        """Re-check the rotation after any category dataset was replaced."""
        session = self.session
        available = self.available_categories()

        if not available:
            if session.active_category is not None:
                logger.info("No category data left, rotation stopped")
            self.stop()
            session.active_category = None
            return

        if session.active_category not in available:
            previous = session.active_category
            session.active_category = self._next_after(previous, available)
            session.active_item_index = 0
            session.reset_sub_views()
            if previous is not None:
                logger.info(f"Category '{previous}' lost its data, showing '{session.active_category}'")

        if session.active_category == 'weather':
            cities = session.category_data['weather'] or ()
            if session.active_item_index >= len(cities):
                session.active_item_index = 0

        if self._armed_for != session.active_category:
            self._arm(session.active_category)

        if not session.bar_visible:
            self._reveal()

    def advance(self) -> bool:
        """
        Move to the next available category through the bar gate.

        Returns:
            False if the request was dropped because a bar transition is
            already in flight; the next timer tick will ask again
        """
        if not self.available_categories():
            return False

        accepted = self.session.bar_animation.trigger(self._advance_category)
        if not accepted:
            logger.debug("Category advance dropped, bar transition in flight")
        return accepted

    def stop(self):
        self._timers.cancel_all()
        self._armed_for = None
        self._revealing = False

    def _next_after(self, current: Optional[str], available: List[str]) -> str:
        if current not in INFO_BAR_ORDER:
            return available[0]
        start = INFO_BAR_ORDER.index(current)
        for offset in range(1, len(INFO_BAR_ORDER) + 1):
            candidate = INFO_BAR_ORDER[(start + offset) % len(INFO_BAR_ORDER)]
            if candidate in available:
                return candidate
        return available[0]

    def _arm(self, category: str):
        for name in ROTATION_TIMERS:
            self._timers.cancel(name)
        self._armed_for = category

        if category == 'weather':
            self._timers.set_interval('city', self.city_ms, self._next_city)
        else:
            self._timers.set_interval('dwell', self.dwell_ms, self.advance)

        if category in SUB_VIEWS:
            self._timers.set_interval('sub_view', self.sub_view_ms, self._toggle_sub_view)

        logger.debug(f"Rotation timers armed for '{category}'")

    def _advance_category(self):
        session = self.session
        available = self.available_categories()
        if not available:
            return

        session.active_category = self._next_after(session.active_category, available)
        session.active_item_index = 0
        session.reset_sub_views()
        self._arm(session.active_category)
        logger.debug(f"Info bar now showing '{session.active_category}'")

    def _next_city(self):
        cities = self.session.category_data['weather'] or ()
        next_index = self.session.active_item_index + 1
        if next_index >= len(cities):
            self.session.active_item_index = 0
            self.advance()
        else:
            self.session.active_item_index = next_index

    def _toggle_sub_view(self):
        category = self.session.active_category
        views = SUB_VIEWS.get(category)
        if not views:
            return
        current = self.session.active_sub_view.get(category, views[0])
        toggled = views[1] if current == views[0] else views[0]
        self.session.active_sub_view = {**self.session.active_sub_view, category: toggled}

    def _reveal(self):
        """Initial transition that brings the info bar into view."""
        if self.session.bar_visible or self._revealing:
            return
        if self.session.bar_animation.trigger(self._show_bar):
            self._revealing = True
        else:
            self._timers.set_timeout('reveal', self.session.bar_animation.phase_ms, self._reveal)

    def _show_bar(self):
        self.session.bar_visible = True
        self._revealing = False
