# app/core/logger.py
from __future__ import annotations

"""
ReelVault — Logging (Loguru)
----------------------------
Configured once, on import from `app.main`, from the `LOG_*` settings:

- stdout sink, readable lines by default or one JSON object per line (`LOG_JSON`)
- optional rotating file sink `LOG_DIR/reelvault.log` (`LOG_TO_FILE`, `LOG_ROTATION`)
- `request_id` bound by RequestIDMiddleware appears on every record
- services log through `logging.getLogger(__name__)`; the `app`, `uvicorn`,
  `fastapi` and `starlette` loggers are routed into Loguru
"""

import json
import logging
import sys
from typing import Any, Dict

from loguru import logger

from app.core.config import settings

LOG_FILE_NAME = "reelvault.log"
ROUTED_LOGGERS = ("uvicorn", "uvicorn.error", "fastapi", "starlette", "app")

_LINE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level> | rid={extra[request_id]}\n{exception}"
)


def _line_format(record) -> str:
    record["extra"].setdefault("request_id", "-")
    return _LINE_FORMAT


def _json_format(record) -> str:
    entry: Dict[str, Any] = {
        "time": record["time"].isoformat(),
        "level": record["level"].name,
        "logger": record["name"],
        "line": record["line"],
        "message": record["message"],
        "request_id": record["extra"].get("request_id"),
    }
    entry.update((k, v) for k, v in record["extra"].items() if k not in entry and k != "json")
    if record["exception"] is not None:
        entry["exception"] = repr(record["exception"].value)
    record["extra"]["json"] = json.dumps(entry, ensure_ascii=False, default=str)
    return "{extra[json]}\n"


class InterceptHandler(logging.Handler):
    """Forward stdlib records to Loguru, attributed to the original caller."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1
        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging() -> None:
    level = settings.LOG_LEVEL.upper()
    fmt = _json_format if settings.LOG_JSON else _line_format

    logger.remove()
    logger.add(sys.stdout, level=level, format=fmt, enqueue=True, backtrace=False, diagnose=False)
    if settings.LOG_TO_FILE:
        settings.LOG_DIR.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(settings.LOG_DIR / LOG_FILE_NAME),
            rotation=settings.LOG_ROTATION,
            level=level,
            format=fmt,
            enqueue=True,
        )

    for name in ROUTED_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.setLevel(level)
        std_logger.propagate = False


setup_logging()
