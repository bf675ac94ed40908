from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from gestion_clinica.app.domain.exceptions import StorageError
from gestion_clinica.app.infrastructure.sqlite.db import apply_schema, bootstrap_database, schema_path


def _indices(con: sqlite3.Connection) -> set[str]:
    rows = con.execute("SELECT name FROM sqlite_master WHERE type = 'index' AND name LIKE 'ux_%'").fetchall()
    return {row["name"] for row in rows}


def test_schema_sql_se_distribuye_junto_al_modulo() -> None:
    assert schema_path().name == "schema.sql"
    assert schema_path().exists()


def test_bootstrap_es_idempotente(proveedor, db_connection) -> None:
    bootstrap_database(proveedor)

    assert _indices(db_connection) == {"ux_paciente_dni_activo", "ux_hc_paciente_activo", "ux_hc_nro_historia_activo"}


def test_apply_schema_sin_archivo(tmp_path: Path) -> None:
    con = sqlite3.connect(":memory:")
    try:
        with pytest.raises(FileNotFoundError):
            apply_schema(con, tmp_path / "no_existe.sql")
    finally:
        con.close()


def test_bootstrap_con_sql_invalido_lanza_storage_error(proveedor, monkeypatch, tmp_path: Path) -> None:
    roto = tmp_path / "roto.sql"
    roto.write_text("CREATE TABLA rota;", encoding="utf-8")
    monkeypatch.setattr("gestion_clinica.app.infrastructure.sqlite.db.schema_path", lambda: roto)

    with pytest.raises(StorageError, match="No se pudo aplicar el esquema"):
        bootstrap_database(proveedor)


def test_dni_unico_solo_entre_activos(db_connection) -> None:
    db_connection.execute("INSERT INTO paciente (nombre, apellido, dni) VALUES ('A', 'B', '1')")
    with pytest.raises(sqlite3.IntegrityError):
        db_connection.execute("INSERT INTO paciente (nombre, apellido, dni) VALUES ('C', 'D', '1')")

    db_connection.execute("UPDATE paciente SET eliminado = 1 WHERE dni = '1'")
    db_connection.execute("INSERT INTO paciente (nombre, apellido, dni) VALUES ('C', 'D', '1')")


def test_historia_exige_paciente_existente(db_connection) -> None:
    with pytest.raises(sqlite3.IntegrityError):
        db_connection.execute("INSERT INTO historia_clinica (nro_historia, paciente_id) VALUES ('HC-1', 999)")


def test_historia_rechaza_grupo_fuera_de_catalogo(db_connection) -> None:
    db_connection.execute("INSERT INTO paciente (id, nombre, apellido, dni) VALUES (1, 'A', 'B', '1')")
    with pytest.raises(sqlite3.IntegrityError):
        db_connection.execute(
            "INSERT INTO historia_clinica (nro_historia, grupo_sanguineo, paciente_id) VALUES ('HC-1', 'C+', 1)"
        )


def test_una_sola_historia_activa_por_paciente(db_connection) -> None:
    db_connection.execute("INSERT INTO paciente (id, nombre, apellido, dni) VALUES (1, 'A', 'B', '1')")
    db_connection.execute("INSERT INTO historia_clinica (nro_historia, paciente_id) VALUES ('HC-1', 1)")
    with pytest.raises(sqlite3.IntegrityError):
        db_connection.execute("INSERT INTO historia_clinica (nro_historia, paciente_id) VALUES ('HC-2', 1)")
