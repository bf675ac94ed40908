# infrastructure/sqlite/repos_pacientes.py
"""
Repositorio SQLite para Pacientes.

Responsabilidades:
- CRUD de pacientes con baja lógica.
- Lecturas enriquecidas: el paciente vuelve con su historia clínica activa
  en una sola consulta (LEFT JOIN).
- Conversión fila <-> modelo de dominio.

Cada operación admite dos formas:
- Autogestionada (`con=None`): abre y cierra su propia conexión en autocommit.
- Participante (`con=<conexión>`): usa la conexión del llamador y no hace
  commit, rollback ni close.

No contiene:
- Validaciones de negocio (viven en PacienteService).
- Gestión de transacciones.
"""

from __future__ import annotations

import sqlite3
from contextlib import closing
from typing import List, Optional

from gestion_clinica.app.bootstrap_logging import get_logger
from gestion_clinica.app.domain.modelos import Paciente
from gestion_clinica.app.infrastructure.sqlite.errores import errores_sql
from gestion_clinica.app.infrastructure.sqlite.mapping import PACIENTE_CON_HISTORIA_SELECT, fecha_to_db, row_to_paciente
from gestion_clinica.app.infrastructure.sqlite.proveedor_conexion_sqlite import ProveedorConexionSqlite


LOGGER = get_logger(__name__)


class PacientesRepository:
    """
    Repositorio de acceso a datos para pacientes.
    """

    def __init__(self, proveedor: ProveedorConexionSqlite) -> None:
        self._proveedor = proveedor

    # --------------------------------------------------------------
    # CRUD
    # --------------------------------------------------------------

    def create(self, paciente: Paciente, con: Optional[sqlite3.Connection] = None) -> Paciente:
        """
        Inserta el paciente y le asigna el id generado.
        """
        if con is None:
            with self._proveedor.sesion() as propia:
                return self.create(paciente, propia)

        with errores_sql("paciente.create"), closing(
            con.execute(
                "INSERT INTO paciente (eliminado,nombre,apellido,dni,fecha_nacimiento) VALUES (?,?,?,?,?)",
                (
                    int(paciente.eliminado),
                    paciente.nombre,
                    paciente.apellido,
                    paciente.dni,
                    fecha_to_db(paciente.fecha_nacimiento),
                ),
            )
        ) as cur:
            paciente.id = int(cur.lastrowid)
        LOGGER.debug("paciente_creado id=%s", paciente.id)
        return paciente

    def read(self, paciente_id: int, con: Optional[sqlite3.Connection] = None) -> Optional[Paciente]:
        """
        Paciente activo por id, con su historia clínica.
        """
        if con is None:
            with self._proveedor.sesion() as propia:
                return self.read(paciente_id, propia)

        sql = PACIENTE_CON_HISTORIA_SELECT + "WHERE p.id = ? AND p.eliminado = 0"
        with errores_sql("paciente.read"), closing(con.execute(sql, (paciente_id,))) as cur:
            row = cur.fetchone()
            return row_to_paciente(row) if row else None

    def read_all(self, con: Optional[sqlite3.Connection] = None) -> List[Paciente]:
        """
        Pacientes activos, del más reciente al más antiguo.
        """
        if con is None:
            with self._proveedor.sesion() as propia:
                return self.read_all(propia)

        sql = PACIENTE_CON_HISTORIA_SELECT + "WHERE p.eliminado = 0 ORDER BY p.id DESC"
        with errores_sql("paciente.read_all"), closing(con.execute(sql)) as cur:
            return [row_to_paciente(r) for r in cur.fetchall()]

    def update(self, paciente: Paciente, con: Optional[sqlite3.Connection] = None) -> None:
        """
        Actualiza un paciente existente. Si el id no existe no hace nada.
        """
        if con is None:
            with self._proveedor.sesion() as propia:
                self.update(paciente, propia)
                return

        with errores_sql("paciente.update"), closing(
            con.execute(
                "UPDATE paciente SET eliminado=?, nombre=?, apellido=?, dni=?, fecha_nacimiento=? WHERE id=?",
                (
                    int(paciente.eliminado),
                    paciente.nombre,
                    paciente.apellido,
                    paciente.dni,
                    fecha_to_db(paciente.fecha_nacimiento),
                    paciente.id,
                ),
            )
        ) as cur:
            if cur.rowcount == 0:
                LOGGER.warning("update_sin_filas tabla=paciente id=%s", paciente.id)

    def delete(self, paciente_id: int, con: Optional[sqlite3.Connection] = None) -> None:
        """
        Borrado lógico: marca el paciente como eliminado.
        """
        if con is None:
            with self._proveedor.sesion() as propia:
                self.delete(paciente_id, propia)
                return

        with errores_sql("paciente.delete"):
            con.execute("UPDATE paciente SET eliminado=1 WHERE id=?", (paciente_id,)).close()

    # --------------------------------------------------------------
    # Búsqueda
    # --------------------------------------------------------------

    def find_by_dni(self, dni: str, con: Optional[sqlite3.Connection] = None) -> Optional[Paciente]:
        """
        Paciente activo con ese DNI (a lo sumo uno), con su historia clínica.
        """
        if con is None:
            with self._proveedor.sesion() as propia:
                return self.find_by_dni(dni, propia)

        sql = PACIENTE_CON_HISTORIA_SELECT + "WHERE p.dni = ? AND p.eliminado = 0"
        with errores_sql("paciente.find_by_dni"), closing(con.execute(sql, (dni,))) as cur:
            row = cur.fetchone()
            return row_to_paciente(row) if row else None
