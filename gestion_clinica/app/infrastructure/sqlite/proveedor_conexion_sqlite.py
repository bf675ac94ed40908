from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator

from gestion_clinica.app.bootstrap_logging import get_logger
from gestion_clinica.app.domain.exceptions import StorageError
from gestion_clinica.app.infrastructure.config_db import ConfiguracionDB, cargar_configuracion


LOGGER = get_logger(__name__)

CargadorConfiguracion = Callable[[], ConfiguracionDB]


def _es_ruta_especial(raw_path: str) -> bool:
    return raw_path == ":memory:" or raw_path.startswith("file:")


class ProveedorConexionSqlite:
    """
    Entrega una conexión SQLite nueva en cada llamada.

    - Relee la configuración en cada apertura (sin caché ni pool).
    - Las conexiones nacen en modo autocommit (isolation_level=None).
    - Quien abre la conexión es responsable de cerrarla.
    """

    def __init__(self, cargador: CargadorConfiguracion = cargar_configuracion) -> None:
        self._cargador = cargador

    def abrir(self) -> sqlite3.Connection:
        config = self._cargador()
        raw_path = config.ruta_sqlite()
        if not _es_ruta_especial(raw_path):
            Path(raw_path).expanduser().parent.mkdir(parents=True, exist_ok=True)
        try:
            con = sqlite3.connect(raw_path, isolation_level=None, uri=raw_path.startswith("file:"))
            con.row_factory = sqlite3.Row
            con.execute("PRAGMA foreign_keys = ON;")
        except sqlite3.Error as exc:
            LOGGER.error("sqlite_conexion_fallida path=%s error=%s", raw_path, exc)
            raise StorageError(f"No se pudo abrir la base de datos: {exc}") from exc
        LOGGER.debug("sqlite_conexion_abierta path=%s", raw_path)
        return con

    @contextmanager
    def sesion(self) -> Iterator[sqlite3.Connection]:
        """Abre una conexión autogestionada y la cierra en cualquier salida."""
        con = self.abrir()
        try:
            yield con
        finally:
            con.close()


def desactivar_autocommit(con: sqlite3.Connection) -> None:
    """A partir de aquí el driver abre la transacción antes del primer DML."""
    con.isolation_level = "DEFERRED"


def restaurar_autocommit(con: sqlite3.Connection) -> None:
    con.isolation_level = None
