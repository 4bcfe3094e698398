from __future__ import annotations

import logging
import sys
from typing import Any, Literal

import orjson
import structlog

LogFormat = Literal["json", "console"]


def _orjson_dumps(obj: Any, default: Any) -> str:
    return orjson.dumps(obj, default=default).decode("utf-8")


def _shared_processors() -> list[Any]:
    return [
        # run_id / component / algorithm bound on the run's worker thread
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]


def _renderer(fmt: LogFormat) -> list[Any]:
    if fmt == "console":
        # ConsoleRenderer formats exceptions itself
        return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]
    return [
        structlog.processors.dict_tracebacks,
        structlog.processors.JSONRenderer(serializer=_orjson_dumps),
    ]


def configure_logging(*, level: str = "INFO", fmt: LogFormat = "json") -> None:
    """
    Configure structlog (and stdlib logging) for the process.

    Call once at startup, before the first session is created. Loggers are
    cached on first use, so later calls do not affect loggers already in use.

    fmt="json" writes one orjson-encoded object per line (the default, for
    collection). fmt="console" is for watching a run in a terminal.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    structlog.configure(
        processors=_shared_processors() + _renderer(fmt),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )

    # Third-party stdlib loggers share stdout
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s %(name)s %(message)s",
        stream=sys.stdout,
    )


def bind_context(**values: Any) -> None:
    """
    Bind key/values to every log entry of the calling thread's context.

    The session binds run_id, component and algorithm on the worker thread,
    so engine debug logs can be attributed to a run.
    """
    structlog.contextvars.bind_contextvars(**values)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
