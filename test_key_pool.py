"""
Tests for the API key rotation pool.
"""
import threading
from collections import Counter

import pytest

from infoticker.exceptions import ConfigurationError
from infoticker.key_pool import KeyRotationPool


def test_round_robin_sequence():
    """Three keys called seven times cycle in order."""
    keys = ['k0', 'k1', 'k2']
    pool = KeyRotationPool(keys)

    indices = [keys.index(pool.next()) for _ in range(7)]

    assert indices == [0, 1, 2, 0, 1, 2, 0]
    assert pool.cursor == 1


def test_cursor_seed():
    pool = KeyRotationPool(['k0', 'k1', 'k2'], cursor=2)
    assert pool.next() == 'k2'
    assert pool.next() == 'k0'


def test_cursor_seed_wraps():
    pool = KeyRotationPool(['k0', 'k1', 'k2'], cursor=5)
    assert pool.cursor == 2


def test_empty_pool_reports_no_credentials():
    pool = KeyRotationPool([])
    assert len(pool) == 0
    with pytest.raises(ConfigurationError):
        pool.next()


def test_concurrent_calls_spread_evenly():
    keys = ['a', 'b', 'c', 'd']
    pool = KeyRotationPool(keys)
    seen = Counter()
    lock = threading.Lock()

    def worker():
        for _ in range(50):
            key = pool.next()
            with lock:
                seen[key] += 1

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert seen == {key: 100 for key in keys}
