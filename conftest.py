"""
Shared fixtures for the ticker tests.
"""
import os

# Console logging only; no log files from test runs
os.environ.setdefault('TICKER_DEBUG', 'true')

import json
import queue
from concurrent.futures import Executor, Future

import pytest

from infoticker.ai_client import AIClient
from infoticker.exceptions import FetchError
from infoticker.key_pool import KeyRotationPool
from infoticker.models import WeatherData
from infoticker.session import Session
from infoticker.timers import TickScheduler


class ImmediateExecutor(Executor):
    """Runs submitted work inline and returns a finished future."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


class DeferredExecutor(Executor):
    """Holds submitted work until a test runs it, in any order."""

    def __init__(self):
        self.jobs = []

    def submit(self, fn, *args, **kwargs):
        future = Future()
        self.jobs.append((future, fn, args, kwargs))
        return future

    def run(self, index=0):
        future, fn, args, kwargs = self.jobs.pop(index)
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future

    def run_all(self):
        while self.jobs:
            self.run()


class FakeAIClient(AIClient):
    """
    AIClient with scripted replies.

    ``responses`` maps a prompt to reply text, or to an exception to raise.
    Prompts without a reply raise FetchError. A credential is drawn for
    every call, as the real client does.
    """

    def __init__(self, responses=None, keys=('test-key',)):
        super().__init__(KeyRotationPool(keys))
        self.responses = dict(responses or {})
        self.prompts = []

    def generate(self, prompt, web_search=False, json_mode=False):
        self.key_pool.next()
        self.prompts.append(prompt)
        reply = self.responses.get(prompt)
        if reply is None:
            raise FetchError("no scripted reply")
        if isinstance(reply, BaseException):
            raise reply
        return reply


class StubFeedFetcher:
    def __init__(self, items=None, error=None):
        self.items = list(items or [])
        self.error = error
        self.calls = 0

    def fetch_all(self):
        self.calls += 1
        if self.error:
            raise self.error
        return list(self.items)


class StubWeatherFetcher:
    def __init__(self, weather=None):
        self.weather = list(weather or [])
        self.calls = 0

    def fetch_all(self, cities):
        self.calls += 1
        return list(self.weather)


def as_json(value) -> str:
    return json.dumps(value, ensure_ascii=False)


def make_weather(*cities):
    return tuple(WeatherData(city, 24, 31, 80, 40) for city in cities)


def drain(update_queue, handler):
    """Feed every queued update to ``handler(msg_type, data)``."""
    count = 0
    while True:
        try:
            msg_type, data = update_queue.get_nowait()
        except queue.Empty:
            return count
        handler(msg_type, data)
        count += 1


@pytest.fixture
def scheduler():
    return TickScheduler()


@pytest.fixture
def executor():
    return ImmediateExecutor()


@pytest.fixture
def updates():
    return queue.Queue()


@pytest.fixture
def session(scheduler):
    return Session(scheduler, KeyRotationPool(['key-a', 'key-b']))
