"""
Tests for the bottom info bar rotation.
"""
import pytest

from conftest import make_weather
from infoticker.animation import FLIPPING
from infoticker.rotation import RotationScheduler
from infoticker.static_data import FALLBACK_FOREX, FALLBACK_GOLD, FALLBACK_VIETNAM_STOCKS


@pytest.fixture
def rotation(session, scheduler):
    return RotationScheduler(session, scheduler, city_ms=3000, dwell_ms=10000, sub_view_ms=7000)


def load(session, rotation, data):
    for key, value in data.items():
        session.set_category(key, value)
    rotation.on_data_changed()


def test_no_rotation_without_data(session, rotation, scheduler):
    rotation.on_data_changed()
    scheduler.advance(60000)
    assert session.active_category is None
    assert rotation.active_timers == []
    assert not session.bar_visible


def test_first_load_reveals_bar(session, rotation, scheduler):
    load(session, rotation, {'forex': FALLBACK_FOREX})

    assert session.active_category == 'forex'
    assert not session.bar_visible
    assert session.bar_animation.state == FLIPPING

    scheduler.advance(300)
    assert session.bar_visible
    scheduler.advance(300)
    assert session.bar_animation.is_idle


def test_reveal_retries_while_bar_gate_busy(session, rotation, scheduler):
    session.bar_animation.trigger(lambda: None)
    load(session, rotation, {'forex': FALLBACK_FOREX})

    scheduler.advance(300)
    assert not session.bar_visible

    scheduler.advance(900)
    assert session.bar_visible


def test_weather_cities_rotate_then_wrap_to_next_category(session, rotation, scheduler):
    load(session, rotation, {
        'weather': make_weather('Hà Nội', 'Huế', 'Vinh'),
        'forex': FALLBACK_FOREX,
    })
    assert session.active_category == 'weather'
    assert rotation.active_timers == ['city']

    scheduler.advance(3000)
    assert session.active_item_index == 1
    scheduler.advance(3000)
    assert session.active_item_index == 2
    assert session.current_city_weather().city == 'Vinh'

    scheduler.advance(3000)
    assert session.active_item_index == 0
    assert session.active_category == 'weather'
    assert session.bar_animation.state == FLIPPING

    scheduler.advance(300)
    assert session.active_category == 'forex'
    assert rotation.active_timers == ['dwell']


def test_non_weather_categories_dwell(session, rotation, scheduler):
    load(session, rotation, {'forex': FALLBACK_FOREX, 'gold': FALLBACK_GOLD})
    assert session.active_category == 'forex'

    scheduler.advance(10000)
    assert session.active_category == 'forex'
    scheduler.advance(300)
    assert session.active_category == 'gold'

    scheduler.advance(10300)
    assert session.active_category == 'forex'


def test_sub_view_toggles_and_resets_on_category_change(session, rotation, scheduler):
    load(session, rotation, {'stocks-vn': FALLBACK_VIETNAM_STOCKS, 'forex': FALLBACK_FOREX})
    assert session.active_category == 'stocks'
    assert session.active_sub_view['stocks'] == 'vietnam'
    assert rotation.active_timers == ['dwell', 'sub_view']

    scheduler.advance(7000)
    assert session.active_sub_view['stocks'] == 'world'

    scheduler.advance(3300)
    assert session.active_category == 'forex'
    assert session.active_sub_view['stocks'] == 'vietnam'
    assert rotation.active_timers == ['dwell']


def test_advance_dropped_while_bar_gate_busy(session, rotation, scheduler):
    load(session, rotation, {'forex': FALLBACK_FOREX, 'gold': FALLBACK_GOLD})

    scheduler.advance(9900)
    assert session.bar_animation.trigger(lambda: None)
    assert not rotation.advance()

    scheduler.advance(700)
    assert session.active_category == 'forex'

    scheduler.advance(9700)
    assert session.active_category == 'gold'


def test_category_without_data_is_skipped(session, rotation, scheduler):
    load(session, rotation, {'weather': make_weather('Huế'), 'gold': FALLBACK_GOLD})

    scheduler.advance(3300)
    assert session.active_category == 'gold'
    assert rotation.available_categories() == ['weather', 'gold']


def test_losing_active_category_moves_on(session, rotation, scheduler):
    load(session, rotation, {'forex': FALLBACK_FOREX, 'gold': FALLBACK_GOLD})
    assert session.active_category == 'forex'

    load(session, rotation, {'forex': None})

    assert session.active_category == 'gold'
    assert rotation.active_timers == ['dwell', 'sub_view']


def test_removing_last_category_stops_rotation(session, rotation, scheduler):
    load(session, rotation, {'weather': make_weather('Hà Nội', 'Huế')})
    scheduler.advance(1000)

    load(session, rotation, {'weather': None})

    assert session.active_category is None
    assert rotation.active_timers == []
    assert not rotation.advance()
    scheduler.advance(60000)
    assert session.active_category is None


def test_shrinking_weather_list_resets_city_index(session, rotation, scheduler):
    load(session, rotation, {'weather': make_weather('Hà Nội', 'Huế', 'Vinh')})
    scheduler.advance(6000)
    assert session.active_item_index == 2

    load(session, rotation, {'weather': make_weather('Hà Nội')})
    assert session.active_item_index == 0
