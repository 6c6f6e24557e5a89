"""
Configuration settings for the information ticker.
"""
import os
from pathlib import Path
from typing import List, Optional


def parse_api_keys(raw: Optional[str]) -> List[str]:
    """Split a comma-separated key list, dropping blanks."""
    if not raw:
        return []
    return [key.strip() for key in raw.split(',') if key.strip()]


# ============================================================================
# CREDENTIALS & AI SOURCE
# ============================================================================
# Keys are rotated round-robin across upstream calls. Supply several to
# spread rate-limit exposure:
#   TICKER_API_KEYS="key-one,key-two,key-three"
# ============================================================================
API_KEYS = parse_api_keys(
    os.environ.get('TICKER_API_KEYS') or os.environ.get('GEMINI_API_KEY')
)

AI_MODEL = os.environ.get('TICKER_AI_MODEL', 'gemini/gemini-2.5-flash')
AI_TIMEOUT = 60             # Seconds per AI request

# ============================================================================
# NEWS FEED CONFIGURATION
# ============================================================================
# Fallback syndication feeds for the ordinary news ticker. Every feed is
# fetched concurrently, a failing feed contributes nothing, and identical
# descriptions across feeds are shown once.
# ============================================================================
FEED_URLS = [
    "https://baotintuc.vn/tin-moi-nhat.rss",
    "https://baotintuc.vn/thoi-su.rss",
    "https://baotintuc.vn/the-gioi.rss",
    "https://baotintuc.vn/kinh-te.rss",
]

REFRESH_MINUTES = 60        # How often news and background data refresh
MAX_HEADLINES = 60          # Maximum items kept from the merged feeds
FETCH_TIMEOUT = 30          # Timeout for each HTTP request in seconds
MAX_WORKERS = 8             # Fetch worker threads

# Public weather service used when the AI weather query fails
WEATHER_API_URL = "https://api.open-meteo.com/v1/forecast"
WEATHER_TIMEZONE = "Asia/Ho_Chi_Minh"

# ============================================================================
# CATEGORIES
# ============================================================================
# Data keys held by the session, and the bottom bar rotation built on them.
# A rotation category is shown while any of its data keys has data.
CATEGORY_KEYS = ('weather', 'stocks-vn', 'stocks-world', 'forex', 'gold', 'fuel')
FINANCE_KEYS = ('stocks-vn', 'stocks-world', 'forex', 'gold', 'fuel')

INFO_BAR_ORDER = ('weather', 'stocks', 'forex', 'gold', 'fuel')
ROTATION_SOURCES = {
    'weather': ('weather',),
    'stocks': ('stocks-vn', 'stocks-world'),
    'forex': ('forex',),
    'gold': ('gold',),
    'fuel': ('fuel',),
}

# Two-view categories; the first view is the primary one
SUB_VIEWS = {
    'stocks': ('vietnam', 'world'),
    'gold': ('domestic', 'world'),
    'fuel': ('domestic', 'world'),
}

# ============================================================================
# ROTATION & ANIMATION TIMING (milliseconds)
# ============================================================================
FLIP_PHASE_MS = 300         # Each half of a flip transition
WEATHER_CITY_MS = 3000      # One weather city per tick
CATEGORY_DWELL_MS = 10000   # Dwell on a non-weather category
SUB_VIEW_MS = 7000          # Domestic/world toggle inside a category
UPDATE_POLL_MS = 100        # How often fetch results are applied

# Breaking news requests
MANUAL_MIN_COUNT = 1
MANUAL_MAX_COUNT = 50
MANUAL_DEFAULT_COUNT = 5

# ============================================================================
# DISPLAY SETTINGS
# ============================================================================
NBSP = "\u00a0"
BULLET = f"{NBSP * 2}●{NBSP * 2}"   # Separator between news items
ITEM_PADDING = NBSP * 5
BREAKING_DEFAULT_TITLE = "BREAKING NEWS"

NEWS_LOADING_TEXT = "Đang cập nhật..."
NEWS_UNAVAILABLE_TEXT = "Không thể tải tin tức vào lúc này. Vui lòng thử lại sau."
CONFIG_ERROR_TEXT = "Chưa cấu hình API key. Đặt biến môi trường TICKER_API_KEYS."

LOCAL_TZ = "Asia/Ho_Chi_Minh"
TIME_FMT = "%H:%M:%S"

# ============================================================================
# DEBUG & LOGGING
# ============================================================================
DEBUG = os.environ.get('TICKER_DEBUG', 'False').lower() == 'true'

# Paths
PROJECT_ROOT = Path(__file__).parent.parent
LOG_DIR = Path(os.environ.get('TICKER_LOG_DIR', PROJECT_ROOT / 'logs'))
