"""Structured logging configuration helpers."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, cast

import structlog
from rich.console import Console
from rich.logging import RichHandler
from structlog.stdlib import BoundLogger

LOG_FILE_NAME = "report_by_exception.jsonl"
PAYLOAD_PREVIEW_CHARS = 200

_RUN_ID = "unknown"


def configure_logging(
    *,
    run_id: str,
    environment: str,
    log_level: str,
    log_dir: Path = Path("logs"),
) -> None:
    """Configure structlog for development console or production JSON output."""

    global _RUN_ID
    _RUN_ID = run_id

    level = getattr(logging, log_level.upper(), logging.INFO)

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        preview_payload,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)

    if environment == "development":
        formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(),
            foreign_pre_chain=cast(Any, shared_processors),
        )
        # stdout carries forwarded messages in replay mode, keep diagnostics on stderr
        handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_path=False,
        )
        handler.setFormatter(formatter)
    else:
        log_dir.mkdir(parents=True, exist_ok=True)
        formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=cast(Any, shared_processors),
        )
        handler = logging.FileHandler(log_dir / LOG_FILE_NAME, encoding="utf-8")
        handler.setFormatter(formatter)

    root_logger.addHandler(handler)

    structlog.configure(
        processors=cast(
            Any,
            [
                *shared_processors,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
        ),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(run_id=run_id)


def get_logger(module_name: str, *, stream_id: str | None = None) -> BoundLogger:
    """Get a logger bound with module and run context."""

    logger = structlog.get_logger(module_name).bind(module=module_name, run_id=_RUN_ID)
    if stream_id is not None:
        logger = logger.bind(stream_id=stream_id)
    return cast(BoundLogger, logger)


def preview_payload(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Keep JSON-safe, short payloads as they are and render the rest as a clipped repr."""

    if "payload" not in event_dict:
        return event_dict

    payload = event_dict["payload"]
    try:
        rendered = json.dumps(payload)
    except (TypeError, ValueError, RecursionError):
        rendered = None
    if rendered is not None and len(rendered) <= PAYLOAD_PREVIEW_CHARS:
        return event_dict

    text = rendered if rendered is not None else _safe_repr(payload)
    if len(text) > PAYLOAD_PREVIEW_CHARS:
        text = text[:PAYLOAD_PREVIEW_CHARS] + "..."
    event_dict["payload"] = text
    return event_dict


def _safe_repr(value: Any) -> str:
    try:
        return repr(value)
    except Exception:  # noqa: BLE001
        return f"<unrepresentable {type(value).__name__}>"
