from __future__ import annotations

import contextvars
import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from gestion_clinica.app.common.log_redaction import redact_text, redact_value

_RUN_ID: contextvars.ContextVar[str] = contextvars.ContextVar("run_id", default="-")
_FATAL_KEY = "is_fatal_crash"
_SOFT_KEY = "is_soft_exception"


class _ContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = _RUN_ID.get()
        return True


class _FatalCrashFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return bool(getattr(record, _FATAL_KEY, False) or record.levelno >= logging.CRITICAL)


class _ExcludeCrashFilter(logging.Filter):
    """Deja fuera de la consola lo que ya se informa al usuario o va a crash_fatal.log."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not bool(getattr(record, _SOFT_KEY, False) or getattr(record, _FATAL_KEY, False))


class _StructuredFormatter(logging.Formatter):
    def __init__(self, *, json_mode: bool) -> None:
        super().__init__()
        self._json_mode = json_mode

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": redact_text(record.getMessage()),
            "run_id": getattr(record, "run_id", "-"),
            "func": record.funcName,
            "line": record.lineno,
        }
        operacion = getattr(record, "operacion", None)
        if operacion is not None:
            payload["operacion"] = operacion
        if record.exc_info:
            payload["traceback"] = redact_text(self.formatException(record.exc_info))
        if self._json_mode:
            return json.dumps(payload, ensure_ascii=False)
        return " ".join(f"{key}={value}" for key, value in payload.items())


class ContextLoggerAdapter(logging.LoggerAdapter):
    def process(self, msg: Any, kwargs: dict[str, Any]) -> tuple[Any, dict[str, Any]]:
        extra = kwargs.get("extra", {})
        kwargs["extra"] = redact_value({"run_id": _RUN_ID.get(), **extra})
        return redact_value(msg), kwargs


def configure_logging(app_name: str, log_dir: Path, level: str = "INFO", json: bool = True) -> None:
    """
    Configura el logger raíz:
    - stderr (WARNING+): lo operativo, sin errores ya mostrados al usuario ni crashes.
    - app.log: todo lo operativo, incluidos los errores de operación.
    - crash_fatal.log: excepciones no controladas (nivel CRITICAL).
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = _StructuredFormatter(json_mode=json)
    context_filter = _ContextFilter()

    console = logging.StreamHandler(stream=sys.__stderr__)
    console.setLevel(logging.WARNING)
    console.setFormatter(formatter)
    console.addFilter(context_filter)
    console.addFilter(_ExcludeCrashFilter())

    app_file = RotatingFileHandler(log_dir / "app.log", maxBytes=2_000_000, backupCount=5, encoding="utf-8")
    app_file.setFormatter(formatter)
    app_file.addFilter(context_filter)

    fatal_file = RotatingFileHandler(log_dir / "crash_fatal.log", maxBytes=1_000_000, backupCount=3, encoding="utf-8")
    fatal_file.setFormatter(formatter)
    fatal_file.addFilter(context_filter)
    fatal_file.addFilter(_FatalCrashFilter())

    root_logger.addHandler(console)
    root_logger.addHandler(app_file)
    root_logger.addHandler(fatal_file)
    logging.captureWarnings(True)
    get_logger(__name__).info("logging_configured app=%s", app_name)


def get_logger(name: str) -> logging.LoggerAdapter:
    return ContextLoggerAdapter(logging.getLogger(name), {})


def set_run_context(run_id: str) -> None:
    _RUN_ID.set(run_id)


def log_soft_exception(logger: logging.LoggerAdapter, exc: Exception, operacion: str) -> None:
    """Registra un error de operación que la consola informa al usuario sin cortar el menú."""
    logger.error(
        "soft_exception",
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={"operacion": operacion, _SOFT_KEY: True},
    )
