"""
InfoTicker - rotating news, weather and market ticker with a breaking
news override.
"""

__version__ = "1.0.0"

# Only import when used as a package
__all__ = ['TickerApp', 'Session', 'KeyRotationPool', 'logger', 'setup_logger']


def __getattr__(name):
    """Lazy import to avoid circular dependencies."""
    if name == 'TickerApp':
        from .app import TickerApp
        return TickerApp
    elif name == 'Session':
        from .session import Session
        return Session
    elif name == 'KeyRotationPool':
        from .key_pool import KeyRotationPool
        return KeyRotationPool
    elif name == 'logger':
        from .logger import logger
        return logger
    elif name == 'setup_logger':
        from .logger import setup_logger
        return setup_logger
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
