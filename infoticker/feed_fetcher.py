"""
Syndication feed fetching with SSL verification, used as the ordinary
news source and as the fallback when the AI news query fails.
"""
import ssl
import urllib.error
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

import feedparser

from .config import FEED_URLS, FETCH_TIMEOUT, MAX_HEADLINES
from .exceptions import FetchError, ParseError
from .logger import logger
from .utils import extract_text, unique_in_order


class FeedFetcher:
    """Fetches every configured feed and merges their entry descriptions."""

    def __init__(self, feed_urls: Optional[Sequence[str]] = None,
                 timeout: float = FETCH_TIMEOUT, max_items: int = MAX_HEADLINES):
        self.feed_urls = list(feed_urls if feed_urls is not None else FEED_URLS)
        self.timeout = timeout
        self.max_items = max_items
        self._ssl_verify_failed = False

    def _create_ssl_context(self) -> ssl.SSLContext:
        """Create a secure SSL context."""
        context = ssl.create_default_context()

        if self._ssl_verify_failed:
            # If SSL verification failed before, disable it with a warning
            logger.warning("SSL verification disabled due to previous failures. This is less secure.")
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        else:
            context.check_hostname = True
            context.verify_mode = ssl.CERT_REQUIRED

        return context

    def _fetch_feed(self, feed_url: str) -> bytes:
        """
        Fetch the raw feed data from a specific URL.

        Args:
            feed_url: The URL to fetch the feed from

        Returns:
            Raw feed data as bytes

        Raises:
            FetchError: If fetching fails
        """
        try:
            logger.debug(f"Fetching feed from {feed_url}")

            request = urllib.request.Request(
                feed_url,
                headers={
                    'User-Agent': 'InfoTicker/1.0',
                    'Accept': 'application/rss+xml, application/xml, text/xml, */*',
                    'Cache-Control': 'no-cache'
                }
            )

            with urllib.request.urlopen(
                request,
                timeout=self.timeout,
                context=self._create_ssl_context()
            ) as response:
                feed_data = response.read()
                logger.debug(f"Fetched {len(feed_data)} bytes from {feed_url}")
                return feed_data

        except urllib.error.URLError as e:
            if "certificate verify failed" in str(e).lower() and not self._ssl_verify_failed:
                logger.warning("SSL certificate verification failed. Retrying without verification...")
                self._ssl_verify_failed = True
                return self._fetch_feed(feed_url)
            raise FetchError(f"Network error: {e}")
        except Exception as e:
            raise FetchError(f"Unexpected error fetching feed: {e}")

    def _parse_feed(self, feed_data: bytes) -> List[str]:
        """
        Extract the readable description text of every feed entry.

        Raises:
            ParseError: If the feed has no entries
        """
        feed = feedparser.parse(feed_data)

        if not getattr(feed, 'entries', None):
            raise ParseError("No entries found in feed")

        descriptions = []
        for entry in feed.entries:
            text = extract_text(entry.get('description') or entry.get('summary'))
            if text:
                descriptions.append(text)

        logger.debug(f"Parsed {len(descriptions)} descriptions from {len(feed.entries)} entries")
        return descriptions

    def _fetch_one(self, feed_url: str) -> List[str]:
        """Fetch and parse one feed; a failing feed contributes nothing."""
        try:
            return self._parse_feed(self._fetch_feed(feed_url))
        except (FetchError, ParseError) as e:
            logger.warning(f"Failed to fetch {feed_url}: {e}")
        except Exception as e:
            logger.error(f"Unexpected error fetching {feed_url}: {e}")
        return []

    def fetch_all(self) -> List[str]:
        """
        Fetch all feeds in parallel and merge their descriptions.

        Returns:
            Unique descriptions in feed order, first occurrence kept

        Raises:
            FetchError: If no feed produced any item
        """
        if not self.feed_urls:
            raise FetchError("No feeds configured")

        with ThreadPoolExecutor(max_workers=len(self.feed_urls),
                                thread_name_prefix="FeedFetch") as pool:
            results = list(pool.map(self._fetch_one, self.feed_urls))

        merged = unique_in_order([text for feed_items in results for text in feed_items])
        if not merged:
            raise FetchError("No news items found in any feed")

        logger.info(f"Merged {len(merged)} unique items from {len(self.feed_urls)} feeds")
        return merged[:self.max_items]
