"""
Wiring of the ticker core and the update pump that applies background
results on the control thread.
"""
import queue
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any, Iterable, Optional

from .ai_client import AIClient
from .breaking_news import MANUAL_ERROR, MANUAL_RESULT, BreakingNewsController
from .config import (
    API_KEYS, CONFIG_ERROR_TEXT, MANUAL_DEFAULT_COUNT, MAX_WORKERS,
    REFRESH_MINUTES, UPDATE_POLL_MS,
)
from .feed_fetcher import FeedFetcher
from .fetch_chain import build_finance_chain, build_news_chain, build_weather_chain
from .key_pool import KeyRotationPool
from .logger import logger
from .orchestrator import CATEGORY_UPDATE, NEWS_UPDATE, BackgroundDataOrchestrator
from .rotation import RotationScheduler
from .session import Session, TickerSnapshot
from .timers import TickScheduler, TimerRegistry
from .weather import WeatherFetcher

COMMAND = 'command'
MAX_UPDATES_PER_POLL = 20


class TickerApp:
    """Owns the session and every component acting on it."""

    def __init__(self, api_keys: Optional[Iterable[str]] = None,
                 scheduler=None,
                 executor: Optional[Executor] = None,
                 ai_client: Optional[AIClient] = None,
                 feed_fetcher: Optional[FeedFetcher] = None,
                 weather_fetcher: Optional[WeatherFetcher] = None,
                 key_cursor: int = 0):
        self.scheduler = scheduler or TickScheduler()
        self.update_queue: queue.Queue = queue.Queue()
        self.key_pool = KeyRotationPool(API_KEYS if api_keys is None else api_keys, key_cursor)
        self.session = Session(self.scheduler, self.key_pool)

        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(
            max_workers=MAX_WORKERS, thread_name_prefix="TickerFetch"
        )
        self.ai_client = ai_client or AIClient(self.key_pool)

        self.orchestrator = BackgroundDataOrchestrator(
            self.session,
            news_chain=build_news_chain(self.ai_client, feed_fetcher or FeedFetcher()),
            weather_chain=build_weather_chain(self.ai_client, weather_fetcher or WeatherFetcher()),
            finance_chain=build_finance_chain(self.ai_client),
            update_queue=self.update_queue,
            executor=self.executor,
            scheduler=self.scheduler,
        )
        self.rotation = RotationScheduler(self.session, self.scheduler)
        self.breaking = BreakingNewsController(
            self.session, self.ai_client, self.update_queue, self.executor, self.scheduler,
            on_mode_changed=self.orchestrator.refresh_news,
        )

        self._timers = TimerRegistry(self.scheduler)
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> bool:
        """
        Start refreshing and applying data.

        Returns:
            False if the ticker cannot run for lack of credentials
        """
        if not len(self.key_pool):
            self.session.configuration_error = CONFIG_ERROR_TEXT
            self.session.set_news((), CONFIG_ERROR_TEXT)
            logger.critical("No API keys configured, ticker core not started")
            return False

        self._running = True
        logger.info(f"Ticker core started with {len(self.key_pool)} API key(s)")
        self.orchestrator.run_cycle()
        self._timers.set_interval('refresh', REFRESH_MINUTES * 60 * 1000, self.orchestrator.run_cycle)
        self._timers.set_interval('updates', UPDATE_POLL_MS, self.check_updates)
        return True

    def stop(self):
        """Stop all timers and the fetch workers."""
        logger.info("Stopping ticker core...")
        self._running = False
        self._timers.cancel_all()
        self.rotation.stop()
        self.orchestrator.cancel()
        if self._owns_executor:
            self.executor.shutdown(wait=False)

    def snapshot(self) -> TickerSnapshot:
        return self.session.snapshot()

    def check_updates(self) -> int:
        """Apply pending background results; returns how many were applied."""
        processed = 0
        while processed < MAX_UPDATES_PER_POLL:
            try:
                msg_type, data = self.update_queue.get_nowait()
            except queue.Empty:
                break
            processed += 1
            try:
                self.dispatch(msg_type, data)
            except Exception:
                logger.exception(f"Error applying '{msg_type}' update")
        return processed

    def dispatch(self, msg_type: str, data: Any):
        if msg_type in (NEWS_UPDATE, CATEGORY_UPDATE):
            if self.orchestrator.apply(msg_type, data):
                self.rotation.on_data_changed()
        elif msg_type in (MANUAL_RESULT, MANUAL_ERROR):
            self.breaking.apply(msg_type, data)
        elif msg_type == COMMAND:
            self.handle_command(data)
        else:
            logger.warning(f"Unknown update type: {msg_type}")

    def handle_command(self, line: str):
        """
        Run an operator command.

        Commands:
            b                 toggle breaking mode
            t [count] topic   request breaking news about a topic
            r                 refresh now
        """
        parts = line.strip().split(maxsplit=1)
        if not parts:
            return
        name, rest = parts[0].lower(), parts[1] if len(parts) > 1 else ""

        if name == 'b':
            if not self.breaking.toggle_breaking_mode():
                logger.info("Breaking mode toggle ignored, transition in flight")
        elif name == 't':
            count, topic = parse_topic_command(rest)
            self.breaking.request_topic(topic, count)
        elif name == 'r':
            self.orchestrator.run_cycle()
        else:
            logger.warning(f"Unknown command: {line.strip()}")


def parse_topic_command(text: str):
    """Split ``"[count] topic"`` into ``(count, topic)``."""
    head, _, tail = text.strip().partition(' ')
    if head.isdigit():
        return int(head), tail.strip()
    return MANUAL_DEFAULT_COUNT, text.strip()
