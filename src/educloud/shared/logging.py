"""
Structured logging using structlog with:
- JSON/console switchable format
- Correlation ID per outbound API request
- PII redaction (emails, bearer tokens) outside local/dev
- Security event helper for login/logout/forced logout

"""

from __future__ import annotations

import datetime
import logging
import logging.config
import re
import sys
import uuid
from typing import Any, Dict, Iterable, Optional

import structlog

from educloud.config import Settings, get_settings

# ---------------------------------------------------------------------
# PII redaction
# ---------------------------------------------------------------------


class PIIRedactionProcessor:
    """
    Masks personal data inside event_dict, recursively. Enabled outside dev.
    Email addresses keep their domain; bearer tokens are dropped entirely.
    """
    P_EMAIL = re.compile(r"\b([A-Za-z0-9._%+-]+)@([A-Za-z0-9.-]+\.[A-Za-z]{2,})\b")
    P_BEARER = re.compile(r"(?i)\bbearer\s+[A-Za-z0-9._~+/=-]+")

    def __call__(self, logger, method_name, event_dict):
        return self._redact(event_dict)

    def _redact(self, value: Any) -> Any:
        if isinstance(value, dict):
            return {k: self._redact(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._redact(v) for v in value]
        if isinstance(value, str):
            return self._redact_str(value)
        return value

    def _redact_str(self, s: str) -> str:
        s = self.P_EMAIL.sub(lambda m: f"***@{m.group(2)}", s)
        s = self.P_BEARER.sub("Bearer ***REDACTED***", s)
        return s


def _passthrough(logger, method_name, event_dict):
    return event_dict


# Keys whose values are credentials. Masked in every environment.
SECRET_KEYS = frozenset({"token", "password", "temp_password", "tempPassword", "authorization", "Authorization"})


def mask_secrets(logger, method_name, event_dict):
    return _mask(event_dict)


def _mask(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: "***" if k in SECRET_KEYS and v else _mask(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_mask(v) for v in value]
    return value


# ---------------------------------------------------------------------
# Context processors
# ---------------------------------------------------------------------


class CorrelationIdProcessor:
    """Attach correlation_id from structlog contextvars into each event."""
    def __call__(self, logger, method_name, event_dict):
        ctx = structlog.contextvars.get_contextvars()
        cid = ctx.get("correlation_id")
        if cid:
            event_dict["correlation_id"] = cid
        return event_dict


def add_timestamp(logger, method_name, event_dict):
    # UTC ISO8601 Z
    now = datetime.datetime.now(datetime.timezone.utc)
    event_dict["timestamp"] = now.strftime("%Y-%m-%dT%H:%M:%SZ")
    return event_dict


# ---------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """Generate/bind a correlation_id if not provided; returns the id."""
    cid = correlation_id or str(uuid.uuid4())
    structlog.contextvars.bind_contextvars(correlation_id=cid)
    return cid


def clear_correlation_id() -> None:
    structlog.contextvars.unbind_contextvars("correlation_id")


# ---------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------

def _ensure_log_format(settings: Settings) -> str:
    """
    Determine output format:
      - If settings has LOG_FORMAT, use it ("json"|"console").
      - Else default: "console" for dev, "json" for staging/prod.
    """
    fmt = (settings.LOG_FORMAT or "").lower()
    if fmt in ("json", "console"):
        return fmt
    return "console" if settings.is_dev else "json"


def _level_name_to_int(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Idempotent structured logging configuration."""
    settings = settings or get_settings()
    log_format = _ensure_log_format(settings)
    is_prod_like = settings.is_prod or settings.is_staging

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
                "datefmt": "%Y-%m-%dT%H:%M:%S",
            },
            "console": {
                "format": "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json" if log_format == "json" else "console",
                "stream": sys.stdout,
            },
        },
        "root": {
            "level": _level_name_to_int(settings.LOG_LEVEL),
            "handlers": ["console"],
        },
        "loggers": {
            # Quiet noisy libs, but keep errors
            "httpx": {"level": "WARNING", "handlers": ["console"], "propagate": False},
            "httpcore": {"level": "WARNING", "handlers": ["console"], "propagate": False},
            "uvicorn.access": {"level": "WARNING", "handlers": ["console"], "propagate": False},
        },
    }
    logging.config.dictConfig(logging_config)

    processors: Iterable[Any] = [
        structlog.contextvars.merge_contextvars,
        add_timestamp,
        CorrelationIdProcessor(),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        mask_secrets,
        # Emails stay readable in dev
        (PIIRedactionProcessor() if is_prod_like else _passthrough),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        (structlog.processors.JSONRenderer() if log_format == "json" else structlog.dev.ConsoleRenderer()),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.clear_contextvars()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


security_logger = structlog.get_logger("security")


def log_security_event(
    event_type: str,
    *,
    domain: Optional[str] = None,
    user_id: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    **kwargs: Any,
) -> None:
    """Log security-relevant events (login, logout, forced logout)."""
    security_logger.info(
        "Security event",
        event_type=event_type,
        domain=domain,
        user_id=user_id,
        details=details or {},
        **kwargs,
    )
