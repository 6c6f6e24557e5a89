"""
Tests for the terminal rendering of snapshots.
"""
import io

from conftest import make_weather
from infoticker.config import CONFIG_ERROR_TEXT
from infoticker.console import ConsoleRenderer, render_info_bar, render_line
from infoticker.static_data import FALLBACK_FOREX


def test_info_bar_hidden_until_revealed(session):
    session.set_category('forex', FALLBACK_FOREX)
    session.active_category = 'forex'
    assert render_info_bar(session.snapshot()) == ""

    session.bar_visible = True
    bar = render_info_bar(session.snapshot())
    assert bar.startswith("TỶ GIÁ: ")
    assert FALLBACK_FOREX[0].code in bar


def test_info_bar_shows_current_city(session):
    session.set_category('weather', make_weather('Hà Nội', 'Huế'))
    session.active_category = 'weather'
    session.active_item_index = 1
    session.bar_visible = True

    assert render_info_bar(session.snapshot()) == "THỜI TIẾT: Huế 24-31°C ẩm 80% mưa 40%"


def test_line_shows_breaking_title_and_manual_state(session):
    session.is_breaking_mode = True
    session.breaking_title = "BÃO SỐ 5"
    session.set_news(["Gió mạnh cấp 12"])
    session.manual_error = "Lỗi: Connection Error. Thử lại."

    line = render_line(session.snapshot())

    assert "<BÃO SỐ 5> Gió mạnh cấp 12" in line
    assert line.endswith("| Lỗi: Connection Error. Thử lại.")


def test_line_shows_configuration_error(session):
    session.configuration_error = CONFIG_ERROR_TEXT
    assert render_line(session.snapshot()).endswith(CONFIG_ERROR_TEXT)


def test_renderer_prints_only_changes(session):
    out = io.StringIO()
    session.set_news(["Tin 1"])
    renderer = ConsoleRenderer(session.snapshot, out)

    renderer.refresh()
    renderer.refresh()
    assert out.getvalue().count("\n") <= 2
    assert "Tin 1" in out.getvalue()
