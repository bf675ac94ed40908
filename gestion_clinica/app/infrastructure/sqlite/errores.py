from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Iterator

from gestion_clinica.app.bootstrap_logging import get_logger
from gestion_clinica.app.domain.exceptions import StorageError


LOGGER = get_logger(__name__)


@contextmanager
def errores_sql(operacion: str) -> Iterator[None]:
    """Traduce sqlite3.Error a StorageError (registrando el fallo) conservando la causa."""
    try:
        yield
    except sqlite3.IntegrityError as exc:
        LOGGER.error("integridad_violada error=%s", exc, extra={"operacion": operacion})
        raise StorageError(f"Violación de integridad en {operacion}: {exc}") from exc
    except sqlite3.Error as exc:
        LOGGER.error("error_sql error=%s", exc, extra={"operacion": operacion})
        raise StorageError(f"Error SQL en {operacion}: {exc}") from exc
