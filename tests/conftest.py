from __future__ import annotations

import difflib
import pprint
import sqlite3
from datetime import date
from pathlib import Path
from typing import Any, Callable, Iterator

import pytest

from gestion_clinica.app.container import AppContainer, build_container
from gestion_clinica.app.domain.enums import GrupoSanguineo
from gestion_clinica.app.domain.modelos import HistoriaClinica, Paciente
from gestion_clinica.app.infrastructure.config_db import ENV_PROPERTIES_PATH
from gestion_clinica.app.infrastructure.sqlite.db import bootstrap_database
from gestion_clinica.app.infrastructure.sqlite.proveedor_conexion_sqlite import ProveedorConexionSqlite


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "clinica_test.db"


@pytest.fixture()
def db_properties(tmp_path: Path, db_path: Path, monkeypatch) -> Path:
    path = tmp_path / "db.properties"
    path.write_text(
        "# base de pruebas\n"
        f"db.url=jdbc:sqlite:{db_path.as_posix()}\n"
        "db.user=test\n"
        "db.password=secreto\n",
        encoding="utf-8",
    )
    monkeypatch.setenv(ENV_PROPERTIES_PATH, str(path))
    return path


@pytest.fixture()
def proveedor(db_properties: Path) -> ProveedorConexionSqlite:
    proveedor = ProveedorConexionSqlite()
    bootstrap_database(proveedor)
    return proveedor


@pytest.fixture()
def container(proveedor: ProveedorConexionSqlite) -> AppContainer:
    return build_container(proveedor)


@pytest.fixture()
def db_connection(proveedor: ProveedorConexionSqlite) -> Iterator[sqlite3.Connection]:
    """Conexión directa en autocommit para sembrar e inspeccionar la base."""
    with proveedor.sesion() as con:
        yield con


@pytest.fixture()
def contar_filas(db_connection: sqlite3.Connection) -> Callable[..., int]:
    def _contar(tabla: str, *, activos: bool | None = None) -> int:
        sql = f"SELECT COUNT(*) AS n FROM {tabla}"
        if activos is not None:
            sql += f" WHERE eliminado = {0 if activos else 1}"
        return int(db_connection.execute(sql).fetchone()["n"])

    return _contar


@pytest.fixture()
def nuevo_paciente() -> Callable[..., Paciente]:
    def _nuevo(
        *,
        nombre: str = "Ana",
        apellido: str = "Lopez",
        dni: str = "30111222",
        nro_historia: str | None = "HC-001",
        grupo: GrupoSanguineo | None = GrupoSanguineo.A_POSITIVO,
    ) -> Paciente:
        historia = None
        if nro_historia is not None:
            historia = HistoriaClinica(nro_historia=nro_historia, grupo_sanguineo=grupo)
        return Paciente(
            nombre=nombre,
            apellido=apellido,
            dni=dni,
            fecha_nacimiento=date(1990, 5, 17),
            historia_clinica=historia,
        )

    return _nuevo


@pytest.fixture()
def assert_expected_actual():
    def _assert(expected: Any, actual: Any, *, message: str) -> None:
        expected_str = pprint.pformat(expected, width=120)
        actual_str = pprint.pformat(actual, width=120)
        diff = "\n".join(
            difflib.unified_diff(
                expected_str.splitlines(),
                actual_str.splitlines(),
                fromfile="expected",
                tofile="actual",
                lineterm="",
            )
        )
        assert expected == actual, (
            f"{message}\nExpected:\n{expected_str}\nActual:\n{actual_str}\nDiff:\n{diff}"
        )

    return _assert
