"""Logging setup: console plus rotating files.

Besides the usual app.log and error.log, provider attempts and recovery
decisions go to generation.log so fallback behaviour can be analysed
without wading through request logs.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

GENERATION_LOGGERS = ("launchpact.llm.orchestrator", "launchpact.services.recovery")
NOISY_LOGGERS = ("httpx", "httpcore", "LiteLLM", "openai", "asyncio", "watchfiles")


def _rotating(path: Path, level: int, formatter: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(level: str = "INFO", log_dir: Optional[str] = None) -> None:
    """
    Configure console and file logging for the service.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for log files (defaults to $LOG_DIR or ./logs)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    log_path = Path(log_dir or os.environ.get("LOG_DIR", "logs"))
    log_path.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(log_level)
    console.setFormatter(formatter)
    root_logger.addHandler(console)

    root_logger.addHandler(_rotating(log_path / "app.log", log_level, formatter))
    root_logger.addHandler(_rotating(log_path / "error.log", logging.ERROR, formatter))

    # Also propagates to the root handlers; this file only adds a focused view
    generation = _rotating(log_path / "generation.log", log_level, formatter)
    for name in GENERATION_LOGGERS:
        gen_logger = logging.getLogger(name)
        for handler in list(gen_logger.handlers):
            if isinstance(handler, RotatingFileHandler):
                gen_logger.removeHandler(handler)
                handler.close()
        gen_logger.addHandler(generation)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.info(f"Logging initialized - Level: {level}, Log directory: {log_path.absolute()}")
