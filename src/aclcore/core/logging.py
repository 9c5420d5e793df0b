"""Structured logging for aclcore.

structlog is configured once per process. ACL operations bind their
request ID and calling account through LoggingContext, so every entry
written while an operation runs carries both.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from aclcore.core.config import Settings, get_settings


def add_logger_name(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Record the emitting logger, falling back to 'aclcore' for PrintLogger."""
    event_dict["logger"] = getattr(logger, "name", None) or "aclcore"
    return event_dict


def rename_message_field(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Expose structlog's 'event' key as 'message' for log collectors."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the stdlib root logger.

    Development or ``log_format="console"`` renders colored console lines;
    anything else renders one JSON object per line.

    Args:
        settings: Settings to use. Loaded from the environment when omitted.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level)
    console = settings.is_development or settings.log_format == "console"

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        # structlog.stdlib.add_logger_name needs a stdlib logger
        add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        rename_message_field,
    ]
    if console:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=not console,
    )

    # sqlalchemy and alembic log through the stdlib
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.db_echo else logging.WARNING
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, named 'aclcore' unless ``name`` is given."""
    return structlog.get_logger(name or "aclcore")


class LoggingContext:
    """Bind key-value pairs to every log entry written inside a block.

    Example:
        with LoggingContext(request_id=ctx.request_id, caller_id=str(ctx.caller.id)):
            logger.info("Granted permissions to acl role", role_id=role_id)
    """

    def __init__(self, **kwargs: str) -> None:
        self.context = kwargs
        self._bound = False

    def __enter__(self) -> "LoggingContext":
        structlog.contextvars.bind_contextvars(**self.context)
        self._bound = True
        return self

    def __exit__(self, *args: Any) -> None:
        if self._bound:
            structlog.contextvars.unbind_contextvars(*self.context)
            self._bound = False


def clear_context() -> None:
    """Drop every bound context variable."""
    structlog.contextvars.clear_contextvars()
