"""
Main entry point for the information ticker.
"""
import signal
import sys
import threading

from .app import COMMAND, TickerApp
from .console import ConsoleRenderer, start_command_reader
from .logger import logger

RENDER_INTERVAL_MS = 1000


def main() -> int:
    """Main application entry point."""
    logger.info("Starting information ticker")

    stop_event = threading.Event()

    def signal_handler(signum, frame):
        """Handle interrupt signals gracefully."""
        logger.info(f"Received signal {signum}")
        stop_event.set()

    # Set up signal handlers for graceful shutdown
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    app = TickerApp()
    renderer = ConsoleRenderer(app.snapshot)

    if not app.start():
        renderer.refresh()
        return 1

    def render_loop():
        renderer.refresh()
        app.scheduler.after(RENDER_INTERVAL_MS, render_loop)

    render_loop()
    start_command_reader(lambda line: app.update_queue.put((COMMAND, line)), stop_event)
    logger.info("Commands: b = toggle breaking mode, t [count] <topic> = breaking topic, r = refresh, q = quit")

    try:
        app.scheduler.run(stop_event)
    except Exception:
        logger.exception("Fatal error in main")
        raise
    finally:
        app.stop()
        logger.info("Application ended")
    return 0


if __name__ == "__main__":
    sys.exit(main())
