"""
Background refresh of news and category data.

Fetch jobs run on an executor and hand their results back through the
update queue as ``(msg_type, data)`` tuples. The control thread applies
them to the session with ``apply``, one whole dataset at a time.
"""
import queue
from concurrent.futures import Executor, Future
from typing import Any, Dict, List, NamedTuple, Optional

from .config import NEWS_LOADING_TEXT
from .fetch_chain import CategoryResult, FallbackFetchChain, defaulted_keys
from .logger import logger
from .session import Session
from .timers import TimerRegistry

NEWS_UPDATE = 'news'
CATEGORY_UPDATE = 'category'


class NewsUpdate(NamedTuple):
    """A news result tagged with the news generation it was fetched for."""
    generation: int
    result: CategoryResult


class BackgroundDataOrchestrator:
    """Runs the fetch chains and merges their results into the session."""

    def __init__(self, session: Session, news_chain: FallbackFetchChain,
                 weather_chain: FallbackFetchChain, finance_chain: FallbackFetchChain,
                 update_queue: queue.Queue, executor: Executor, scheduler=None):
        self.session = session
        self.news_chain = news_chain
        self.weather_chain = weather_chain
        self.finance_chain = finance_chain
        self.update_queue = update_queue
        self.executor = executor
        self._timers = TimerRegistry(scheduler) if scheduler is not None else None

    def run_cycle(self) -> List[Future]:
        """Start one refresh of the news and of every category."""
        futures = []
        news = self.refresh_news()
        if news is not None:
            futures.append(news)
        futures.extend(self.refresh_background())
        return futures

    def refresh_news(self) -> Optional[Future]:
        """
        Start an ordinary news refresh.

        Skipped while an operator topic owns the news strip. While the strip
        is mid-transition the refresh is retried once the transition is over.
        """
        if self.session.manual_topic_active:
            logger.info("News refresh skipped, manual topic active")
            return None
        gate = self.session.main_animation
        if not gate.is_idle:
            if self._timers is not None:
                logger.debug("News strip transition in flight, retrying news refresh")
                self._timers.set_timeout('news_retry', gate.duration_ms, self.refresh_news)
            else:
                logger.debug("News refresh skipped, news strip transition in flight")
            return None

        if self._timers is not None:
            self._timers.cancel('news_retry')
        # AI summaries are only used while breaking mode is on
        skip = () if self.session.is_breaking_mode else ('ai',)
        return self._submit('news', self._news_job, skip, self.session.news_generation)

    def refresh_background(self) -> List[Future]:
        """Start the weather and finance refreshes as independent jobs."""
        return [
            self._submit('weather', self._weather_job),
            self._submit('finance', self._finance_job),
        ]

    def cancel(self):
        """Drop any pending news retry."""
        if self._timers is not None:
            self._timers.cancel_all()

    def _submit(self, name: str, job, *args) -> Future:
        logger.debug(f"Starting {name} refresh")
        return self.executor.submit(self._guarded, name, job, *args)

    def _guarded(self, name: str, job, *args):
        # Chains never raise; this only catches a broken queue or a bug
        try:
            job(*args)
        except Exception:
            logger.exception(f"{name} refresh job failed")

    def _news_job(self, skip, generation: int):
        result = self.news_chain.fetch(skip=skip)
        self.update_queue.put((NEWS_UPDATE, NewsUpdate(generation, result)))

    def _weather_job(self):
        result = self.weather_chain.fetch()
        self.update_queue.put((CATEGORY_UPDATE, {'weather': result.value}))

    def _finance_job(self):
        result = self.finance_chain.fetch()
        defaulted = defaulted_keys(result.value)
        if defaulted:
            logger.info(f"Finance defaults in use for: {', '.join(defaulted)}")
        self.update_queue.put((CATEGORY_UPDATE, dict(result.value)))

    def apply(self, msg_type: str, data: Any) -> bool:
        """
        Apply one queued fetch result to the session.

        Returns:
            True if category data changed
        """
        if msg_type == NEWS_UPDATE:
            self._apply_news(data)
            return False
        if msg_type == CATEGORY_UPDATE:
            self._apply_categories(data)
            return True
        logger.warning(f"Unknown update type: {msg_type}")
        return False

    def _apply_news(self, update: NewsUpdate):
        if self.session.manual_topic_active:
            logger.info("Discarding ordinary news, manual topic active")
            return
        if update.generation != self.session.news_generation:
            logger.info(f"Discarding news from '{update.result.source}', fetched before a mode change")
            return
        result = update.result
        error = NEWS_LOADING_TEXT if result.is_default else None
        self.session.set_news(result.value, error)
        logger.info(f"News updated: {len(result.value)} items from '{result.source}'")

    def _apply_categories(self, data: Dict[str, Any]):
        for key, value in data.items():
            self.session.set_category(key, value)
            if value is None:
                logger.warning(f"No data for '{key}'")
