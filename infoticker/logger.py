"""
Logging for the ticker core and its fetch workers.
"""
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import DEBUG, LOG_DIR

# Client libraries that log every request at INFO
NOISY_LOGGERS = ('LiteLLM', 'litellm', 'httpx', 'httpcore', 'urllib3')


def setup_logger(name: str = "infoticker", debug: bool = DEBUG,
                 log_dir: Optional[Path] = LOG_DIR) -> logging.Logger:
    """
    Configure the ticker logger.

    Worker threads log through the same logger, so the thread name is part
    of every record. A dated log file is written only outside debug mode.
    """
    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.propagate = False

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(
        '[%(asctime)s] %(levelname)-8s %(threadName)s: %(message)s',
        datefmt='%H:%M:%S'
    ))
    logger.addHandler(console_handler)

    if not debug and log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"infoticker_{datetime.now():%Y%m%d}.log"
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(threadName)s - %(levelname)s - %(message)s'
        ))
        logger.addHandler(file_handler)

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.DEBUG if debug else logging.WARNING)

    return logger


logger = setup_logger()
