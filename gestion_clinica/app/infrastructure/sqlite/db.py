# infrastructure/sqlite/db.py
"""
Bootstrap del esquema SQLite.

Responsabilidades:
- Localizar schema.sql junto a este módulo.
- Aplicarlo sobre una conexión del proveedor (idempotente: CREATE IF NOT EXISTS).

Notas:
- No hay migraciones: el esquema se crea si falta y nada más.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from gestion_clinica.app.bootstrap_logging import get_logger
from gestion_clinica.app.domain.exceptions import StorageError
from gestion_clinica.app.infrastructure.sqlite.proveedor_conexion_sqlite import ProveedorConexionSqlite


LOGGER = get_logger(__name__)


def schema_path() -> Path:
    return Path(__file__).resolve().parent / "schema.sql"


def apply_schema(con: sqlite3.Connection, path: Path | None = None) -> None:
    """
    Aplica el schema desde un archivo .sql.

    Requisitos:
    - El schema debe ser idempotente (CREATE TABLE IF NOT EXISTS...).
    """
    path = path or schema_path()
    if not path.exists():
        raise FileNotFoundError(f"No existe schema.sql en: {path}")
    con.executescript(path.read_text(encoding="utf-8"))


def bootstrap_database(proveedor: ProveedorConexionSqlite) -> None:
    """Abre una conexión, aplica el esquema y la cierra."""
    with proveedor.sesion() as con:
        try:
            apply_schema(con)
        except sqlite3.Error as exc:
            LOGGER.error("schema_fallido error=%s", exc)
            raise StorageError(f"No se pudo aplicar el esquema: {exc}") from exc
    LOGGER.info("schema_aplicado path=%s", schema_path())
