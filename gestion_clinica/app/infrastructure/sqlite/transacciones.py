# infrastructure/sqlite/transacciones.py
"""
Unidad de trabajo sobre una conexión SQLite.

Ciclo de vida:
    OPEN (autocommit off) -> pasos del llamador -> COMMIT
                                  |
                                  v
                              ROLLBACK -> StorageError("Error transaccional al ...")
    En cualquier caso: restaurar autocommit y cerrar la conexión (best effort).

La conexión se entrega ya abierta; el bloque `with` pasa a ser su dueño y la
cierra al salir.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Iterator

from gestion_clinica.app.bootstrap_logging import get_logger
from gestion_clinica.app.domain.exceptions import StorageError
from gestion_clinica.app.infrastructure.sqlite.proveedor_conexion_sqlite import (
    desactivar_autocommit,
    restaurar_autocommit,
)


LOGGER = get_logger(__name__)


@contextmanager
def transaccion(con: sqlite3.Connection, operacion: str) -> Iterator[sqlite3.Connection]:
    """
    Ejecuta el cuerpo del `with` en una única transacción.

    - Éxito: commit.
    - Cualquier excepción: rollback y se relanza como StorageError conservando la causa.
    """
    try:
        desactivar_autocommit(con)
        yield con
        con.commit()
        LOGGER.info("transaccion_confirmada", extra={"operacion": operacion})
    except Exception as exc:
        _rollback(con, operacion)
        raise StorageError(f"Error transaccional al {operacion}: {exc}") from exc
    finally:
        _cerrar(con, operacion)


def _rollback(con: sqlite3.Connection, operacion: str) -> None:
    try:
        con.rollback()
    except sqlite3.Error as exc:
        LOGGER.warning("rollback_fallido error=%s", exc, extra={"operacion": operacion})
        return
    LOGGER.warning("transaccion_revertida", extra={"operacion": operacion})


def _cerrar(con: sqlite3.Connection, operacion: str) -> None:
    try:
        restaurar_autocommit(con)
    except sqlite3.Error as exc:
        LOGGER.warning("restaurar_autocommit_fallido error=%s", exc, extra={"operacion": operacion})
    try:
        con.close()
    except sqlite3.Error as exc:
        LOGGER.warning("cierre_conexion_fallido error=%s", exc, extra={"operacion": operacion})
