"""Loguru setup: console, rotating file and Slack alerts for ERROR records.

Stdlib loggers (uvicorn, httpx, fastapi) are routed into Loguru so every
line shares one format and one set of sinks.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Iterable, Optional

import httpx
from loguru import logger

from leaseboost.core.config import Settings, settings

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra[name]}:{function}:{line} | {message}"
LOG_DIR = Path("logs")
LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
LEVEL_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}

# Stdlib loggers taken over from their own handlers
ROUTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi")

# httpx logs request URLs at INFO, and provider keys travel in query strings
QUIET_LOGGERS = {"httpx": logging.WARNING, "httpcore": logging.WARNING}

_configured = False


class InterceptHandler(logging.Handler):
    """Forward stdlib log records to Loguru, keeping the caller's frame."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_name == "emit":
            frame = frame.f_back
            depth += 1

        logger.bind(name=record.name).opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


class SlackSink:
    """Posts ERROR records to an incoming webhook; delivery failures are dropped."""

    def __init__(self, webhook_url: str, timeout: float = 5.0):
        self.webhook_url = webhook_url
        self.timeout = timeout

    def __call__(self, message: Any) -> None:
        record = message.record
        component = record["extra"].get("name", "leaseboost")
        text = f"[{record['level'].name}] {component}:{record['function']}:{record['line']}\n{record['message']}"
        try:
            httpx.post(self.webhook_url, json={"text": text}, timeout=self.timeout)
        except httpx.HTTPError:
            # logging here would feed the failure back into this sink
            pass


def resolve_level(raw: Optional[str]) -> str:
    level = (raw or "INFO").strip().upper()
    level = LEVEL_ALIASES.get(level, level)
    return level if level in LOG_LEVELS else "INFO"


def _route_stdlib(names: Iterable[str]) -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in names:
        stdlib_logger = logging.getLogger(name)
        stdlib_logger.handlers = [InterceptHandler()]
        stdlib_logger.propagate = False
    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def configure_logging(config: Settings = settings, log_dir: Path = LOG_DIR) -> None:
    """Install sinks once per process."""
    global _configured
    if _configured:
        return
    _configured = True

    level = resolve_level(config.effective_log_level)
    log_dir.mkdir(exist_ok=True)

    logger.remove()
    logger.configure(extra={"name": "leaseboost"})
    logger.add(sys.stdout, level=level, format=LOG_FORMAT, backtrace=False, diagnose=False)
    logger.add(
        log_dir / "app.log",
        level=level,
        format=LOG_FORMAT,
        rotation="10 MB",
        retention="14 days",
        enqueue=True,
        backtrace=False,
        # tracebacks would otherwise print local variables, API keys included
        diagnose=False,
    )
    if config.SLACK_WEBHOOK_URL:
        logger.add(SlackSink(config.SLACK_WEBHOOK_URL), level="ERROR", enqueue=True)

    _route_stdlib(ROUTED_LOGGERS)


def get_logger(name: str) -> logger.__class__:
    return logger.bind(name=name)


configure_logging()
