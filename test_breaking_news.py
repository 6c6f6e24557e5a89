"""
Tests for the breaking news override.
"""
import pytest

from conftest import DeferredExecutor, FakeAIClient, StubFeedFetcher, as_json, drain
from infoticker.breaking_news import BreakingNewsController, parse_topic_news
from infoticker.exceptions import FetchError, ManualRequestError
from infoticker.fetch_chain import build_finance_chain, build_news_chain, build_weather_chain
from infoticker.orchestrator import BackgroundDataOrchestrator
from infoticker.prompts import NEWS_PROMPT, topic_prompt

TOPIC = "Bão số 5"
SUMMARIES = [f"Tóm tắt {i}" for i in range(1, 6)]
REPLY = as_json({"title": "Bão Số 5 Đổ Bộ", "summaries": SUMMARIES})


@pytest.fixture
def make_controller(session, updates, executor, scheduler):
    def factory(responses=None, on_mode_changed=None):
        ai = FakeAIClient(responses)
        controller = BreakingNewsController(session, ai, updates, executor, scheduler,
                                            on_mode_changed=on_mode_changed)
        return controller, ai
    return factory


def test_request_topic_enters_breaking_mode(session, updates, scheduler, make_controller):
    controller, ai = make_controller({topic_prompt(TOPIC, 5): REPLY})
    session.set_news(["Tin cũ"])
    session.manual_panel_open = True

    assert controller.request_topic(TOPIC, 5) is not None
    assert session.manual_loading
    assert not session.manual_panel_open

    drain(updates, controller.apply)
    assert session.main_animation.state == 'flipping'
    assert not session.is_breaking_mode

    scheduler.advance(300)
    assert session.is_breaking_mode
    assert session.breaking_title == "BÃO SỐ 5 ĐỔ BỘ"
    assert list(session.news_items) == SUMMARIES
    assert not session.manual_loading
    assert session.manual_error is None

    scheduler.advance(300)
    assert session.main_animation.is_idle


@pytest.mark.parametrize("was_breaking", [False, True])
def test_request_topic_failure_keeps_mode(session, updates, scheduler, make_controller, was_breaking):
    controller, _ = make_controller({topic_prompt(TOPIC, 5): FetchError("Connection Error")})
    session.is_breaking_mode = was_breaking
    session.set_news(["Tin cũ"])

    controller.request_topic(TOPIC, 5)
    drain(updates, controller.apply)
    scheduler.advance(1000)

    assert session.is_breaking_mode is was_breaking
    assert session.breaking_title is None
    assert session.manual_error
    assert not session.manual_loading
    assert session.news_items == ("Tin cũ",)


def test_request_topic_rejects_empty_summaries(session, updates, make_controller):
    reply = as_json({"title": "Tiêu đề", "summaries": []})
    controller, _ = make_controller({topic_prompt(TOPIC, 3): reply})

    controller.request_topic(TOPIC, 3)
    drain(updates, controller.apply)

    assert "summaries" in session.manual_error
    assert not session.is_breaking_mode


def test_request_topic_clamps_count(session, updates, make_controller):
    controller, ai = make_controller()

    controller.request_topic(TOPIC, 80)
    drain(updates, controller.apply)
    controller.request_topic(TOPIC, 0)
    drain(updates, controller.apply)

    assert ai.prompts == [topic_prompt(TOPIC, 50), topic_prompt(TOPIC, 1)]


def test_request_topic_requires_topic(session, make_controller):
    controller, ai = make_controller()
    assert controller.request_topic("   ", 5) is None
    assert session.manual_error
    assert not session.manual_loading
    assert ai.prompts == []


def test_request_ignored_while_loading(session, make_controller):
    controller, ai = make_controller()
    session.manual_loading = True
    assert controller.request_topic(TOPIC, 5) is None
    assert ai.prompts == []


def test_topic_waits_for_news_strip_transition(session, updates, scheduler, make_controller):
    controller, _ = make_controller({topic_prompt(TOPIC, 5): REPLY})
    assert controller.toggle_breaking_mode()

    controller.request_topic(TOPIC, 5)
    drain(updates, controller.apply)
    scheduler.advance(600)
    assert session.breaking_title is None

    scheduler.advance(600)
    assert session.breaking_title == "BÃO SỐ 5 ĐỔ BỘ"
    assert session.is_breaking_mode


def test_toggle_flips_mode_at_midpoint(session, scheduler, make_controller):
    completed = []
    controller, _ = make_controller(on_mode_changed=lambda: completed.append(True))
    session.set_news(["Tin cũ"], None)

    assert controller.toggle_breaking_mode()
    assert not controller.toggle_breaking_mode()

    scheduler.advance(300)
    assert session.is_breaking_mode
    assert session.news_items == ()
    assert session.breaking_title is None
    assert completed == []

    scheduler.advance(300)
    assert completed == [True]

    session.breaking_title = "BÃO SỐ 5"
    controller.toggle_breaking_mode()
    scheduler.advance(600)
    assert not session.is_breaking_mode
    assert session.breaking_title is None


def test_ordinary_refresh_suspended_during_manual_topic(session, updates, executor, scheduler):
    ai = FakeAIClient({topic_prompt(TOPIC, 5): REPLY})
    feeds = StubFeedFetcher(["Tin thường"])
    orchestrator = BackgroundDataOrchestrator(
        session,
        news_chain=build_news_chain(ai, feeds),
        weather_chain=build_weather_chain(ai, None, ()),
        finance_chain=build_finance_chain(ai),
        update_queue=updates,
        executor=executor,
    )
    controller = BreakingNewsController(session, ai, updates, executor, scheduler)

    controller.request_topic(TOPIC, 5)
    assert orchestrator.refresh_news() is None

    drain(updates, controller.apply)
    scheduler.advance(600)
    assert orchestrator.refresh_news() is None
    assert feeds.calls == 0
    assert list(session.news_items) == SUMMARIES


def test_parse_topic_news():
    news = parse_topic_news({"title": " Tiêu đề ", "summaries": ["a", "", 3, "b"]})
    assert news.title == "Tiêu đề"
    assert news.summaries == ("a", "b")

    with pytest.raises(ManualRequestError):
        parse_topic_news({"summaries": ["a"]})
    with pytest.raises(ManualRequestError):
        parse_topic_news(["a"])


def test_failed_topic_after_toggle_refills_news_strip(session, updates, scheduler):
    ai = FakeAIClient({
        topic_prompt(TOPIC, 3): FetchError("boom"),
        NEWS_PROMPT: as_json(["Tin AI"]),
    })
    runner = DeferredExecutor()
    orchestrator = BackgroundDataOrchestrator(
        session,
        news_chain=build_news_chain(ai, StubFeedFetcher(["Tin thường"])),
        weather_chain=build_weather_chain(ai, None, ()),
        finance_chain=build_finance_chain(ai),
        update_queue=updates,
        executor=runner,
        scheduler=scheduler,
    )
    controller = BreakingNewsController(session, ai, updates, runner, scheduler,
                                        on_mode_changed=orchestrator.refresh_news)
    session.set_news(["Tin cũ"])

    controller.toggle_breaking_mode()
    controller.request_topic(TOPIC, 3)
    scheduler.advance(600)
    assert session.news_items == ()
    assert len(runner.jobs) == 1

    runner.run_all()
    drain(updates, controller.apply)
    assert session.manual_error
    assert len(runner.jobs) == 1

    runner.run_all()
    drain(updates, orchestrator.apply)
    assert session.is_breaking_mode
    assert session.news_items == ("Tin AI",)
