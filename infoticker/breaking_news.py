"""
Breaking news override.

Operators can flip the news strip into breaking mode, or ask for a topic
to be summarised; a topic takes over the news strip and suspends the
ordinary news refresh until breaking mode is switched off again.
"""
import queue
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from .ai_client import AIClient
from .config import MANUAL_MAX_COUNT, MANUAL_MIN_COUNT
from .exceptions import ManualRequestError, TickerError
from .logger import logger
from .models import parse_strings
from .prompts import topic_prompt
from .session import Session
from .utils import clamp, describe_failure

MANUAL_RESULT = 'manual'
MANUAL_ERROR = 'manual_error'


@dataclass(frozen=True)
class TopicNews:
    title: str
    summaries: Tuple[str, ...]


def parse_topic_news(payload: Any) -> TopicNews:
    """
    Validate the AI reply to a topic request.

    Raises:
        ManualRequestError: If the title or the summaries are missing
    """
    if not isinstance(payload, dict):
        raise ManualRequestError("AI did not return a JSON object")

    title = payload.get('title')
    summaries = payload.get('summaries')
    if not isinstance(title, str) or not title.strip():
        raise ManualRequestError("AI returned no title")
    if not isinstance(summaries, list):
        raise ManualRequestError("AI returned no summaries")

    items = parse_strings(summaries)
    if not items:
        raise ManualRequestError("AI returned no summaries")
    return TopicNews(title=title.strip(), summaries=tuple(items))


def manual_error_message(reason: str) -> str:
    return f"Lỗi: {reason}. Thử lại."


class BreakingNewsController:
    """Handles the operator switch and operator topic requests."""

    def __init__(self, session: Session, ai_client: AIClient,
                 update_queue: queue.Queue, executor: Executor, scheduler,
                 on_mode_changed: Optional[Callable[[], None]] = None):
        self.session = session
        self.ai_client = ai_client
        self.update_queue = update_queue
        self.executor = executor
        self._scheduler = scheduler
        self._on_mode_changed = on_mode_changed

    def open_panel(self):
        self.session.manual_panel_open = True

    def close_panel(self):
        self.session.manual_panel_open = False

    def toggle_breaking_mode(self) -> bool:
        """
        Flip breaking mode through the news strip gate.

        Returns:
            False if a news strip transition is already in flight
        """
        return self.session.main_animation.trigger(self._flip_mode, self._on_mode_changed)

    def _flip_mode(self):
        session = self.session
        if session.is_breaking_mode:
            session.breaking_title = None
        session.is_breaking_mode = not session.is_breaking_mode
        session.news_generation += 1
        session.set_news(())
        logger.info(f"Breaking mode {'on' if session.is_breaking_mode else 'off'}")

    def request_topic(self, topic: str, count: int) -> Optional[Future]:
        """
        Ask the AI source for breaking news about ``topic``.

        Args:
            topic: Subject to summarise
            count: Number of summaries, clamped to the allowed range

        Returns:
            Future of the background request, or None if rejected
        """
        topic = (topic or "").strip()
        if not topic:
            self.session.manual_error = manual_error_message("chủ đề trống")
            return None
        if self.session.manual_loading:
            logger.warning("Topic request ignored, another request is loading")
            return None

        count = clamp(int(count), MANUAL_MIN_COUNT, MANUAL_MAX_COUNT)
        self.session.manual_loading = True
        self.session.manual_error = None
        self.session.manual_panel_open = False
        logger.info(f"Requesting {count} breaking news items about '{topic}'")
        return self.executor.submit(self._topic_job, topic, count)

    def _topic_job(self, topic: str, count: int):
        try:
            payload = self.ai_client.generate_json(topic_prompt(topic, count), web_search=True)
            news = parse_topic_news(payload)
        except TickerError as e:
            logger.warning(f"Topic request for '{topic}' failed: {describe_failure(e)}")
            self.update_queue.put((MANUAL_ERROR, describe_failure(e)))
            return
        except Exception as e:
            logger.exception(f"Unexpected error requesting topic '{topic}'")
            self.update_queue.put((MANUAL_ERROR, describe_failure(e)))
            return
        self.update_queue.put((MANUAL_RESULT, news))

    def apply(self, msg_type: str, data: Any):
        """Apply a queued topic result on the control thread."""
        if msg_type == MANUAL_RESULT:
            self._show(data)
        elif msg_type == MANUAL_ERROR:
            self._fail(data)
        else:
            logger.warning(f"Unknown manual update type: {msg_type}")

    def _fail(self, reason: str):
        session = self.session
        session.manual_loading = False
        session.manual_error = manual_error_message(reason)
        # A toggle during the request cleared the strip and skipped its refresh
        if not session.news_items and session.news_error is None and self._on_mode_changed:
            self._on_mode_changed()

    def _show(self, news: TopicNews):
        if not self.session.main_animation.trigger(lambda: self._enter_breaking(news)):
            # Retry once the transition in flight has moved on
            self._scheduler.after(self.session.main_animation.phase_ms, self._show, news)

    def _enter_breaking(self, news: TopicNews):
        session = self.session
        session.is_breaking_mode = True
        session.news_generation += 1
        session.breaking_title = news.title.upper()
        session.set_news(news.summaries)
        session.manual_loading = False
        logger.info(f"Breaking news '{session.breaking_title}' with {len(news.summaries)} items")
