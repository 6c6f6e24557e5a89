"""
Custom exceptions for the information ticker.
"""


class TickerError(Exception):
    """Base exception for the ticker application."""
    pass


class ConfigurationError(TickerError):
    """No usable configuration, e.g. no API credentials."""
    pass


class FetchError(TickerError):
    """Error fetching data from an upstream source."""
    pass


class ParseError(TickerError):
    """Upstream payload was missing or malformed."""
    pass


class ManualRequestError(TickerError):
    """Operator-submitted breaking news topic could not be served."""
    pass
