# infrastructure/sqlite/repos_historias_clinicas.py
"""
Repositorio SQLite para Historias Clínicas.

Particularidades frente a PacientesRepository:
- Solo se puede crear una historia indicando el paciente dueño
  (`create(h, con, paciente_id=...)`); sin paciente_id la llamada falla con
  ContractError antes de tocar la base.
- `delete_by_paciente_id` exige afectar una fila activa: si no hay ninguna,
  lanza StorageError para que la transacción que lo contiene haga rollback.
"""

from __future__ import annotations

import sqlite3
from contextlib import closing
from typing import List, Optional

from gestion_clinica.app.bootstrap_logging import get_logger
from gestion_clinica.app.domain.exceptions import ContractError, StorageError
from gestion_clinica.app.domain.modelos import HistoriaClinica
from gestion_clinica.app.infrastructure.sqlite.errores import errores_sql
from gestion_clinica.app.infrastructure.sqlite.mapping import fecha_to_db, grupo_to_db, row_to_historia
from gestion_clinica.app.infrastructure.sqlite.proveedor_conexion_sqlite import ProveedorConexionSqlite


LOGGER = get_logger(__name__)


class HistoriasClinicasRepository:
    def __init__(self, proveedor: ProveedorConexionSqlite) -> None:
        self._proveedor = proveedor

    # --------------------------------------------------------------
    # CRUD
    # --------------------------------------------------------------

    def create(
        self,
        historia: HistoriaClinica,
        con: Optional[sqlite3.Connection] = None,
        paciente_id: Optional[int] = None,
    ) -> HistoriaClinica:
        """
        Inserta la historia vinculada a `paciente_id` y le asigna el id generado.
        """
        if paciente_id is None:
            raise ContractError("use the pacienteId variant")
        if con is None:
            with self._proveedor.sesion() as propia:
                return self.create(historia, propia, paciente_id)

        sql = (
            "INSERT INTO historia_clinica (eliminado,nro_historia,grupo_sanguineo,antecedentes,"
            "medicacion_actual,observaciones,fecha_apertura,paciente_id) VALUES (?,?,?,?,?,?,?,?)"
        )
        with errores_sql("historia_clinica.create"), closing(
            con.execute(
                sql,
                (
                    int(historia.eliminado),
                    historia.nro_historia,
                    grupo_to_db(historia.grupo_sanguineo),
                    historia.antecedentes,
                    historia.medicacion_actual,
                    historia.observaciones,
                    fecha_to_db(historia.fecha_apertura),
                    paciente_id,
                ),
            )
        ) as cur:
            historia.id = int(cur.lastrowid)
        LOGGER.debug("historia_creada id=%s paciente_id=%s", historia.id, paciente_id)
        return historia

    def read(self, historia_id: int, con: Optional[sqlite3.Connection] = None) -> Optional[HistoriaClinica]:
        if con is None:
            with self._proveedor.sesion() as propia:
                return self.read(historia_id, propia)

        with errores_sql("historia_clinica.read"), closing(
            con.execute("SELECT * FROM historia_clinica WHERE id=? AND eliminado=0", (historia_id,))
        ) as cur:
            row = cur.fetchone()
            return row_to_historia(row) if row else None

    def read_all(self, con: Optional[sqlite3.Connection] = None) -> List[HistoriaClinica]:
        if con is None:
            with self._proveedor.sesion() as propia:
                return self.read_all(propia)

        with errores_sql("historia_clinica.read_all"), closing(
            con.execute("SELECT * FROM historia_clinica WHERE eliminado=0 ORDER BY id DESC")
        ) as cur:
            return [row_to_historia(r) for r in cur.fetchall()]

    def update(
        self,
        historia: HistoriaClinica,
        con: Optional[sqlite3.Connection] = None,
        paciente_id: Optional[int] = None,
    ) -> None:
        """
        Actualiza todos los campos editables. Si el id no existe no hace nada.

        Con `paciente_id` la historia debe ser la activa de ese paciente; si no
        coincide ninguna fila se lanza StorageError (la transacción del llamador
        hace rollback).
        """
        if con is None:
            with self._proveedor.sesion() as propia:
                self.update(historia, propia, paciente_id)
                return

        sql = (
            "UPDATE historia_clinica SET eliminado=?, nro_historia=?, grupo_sanguineo=?, antecedentes=?, "
            "medicacion_actual=?, observaciones=?, fecha_apertura=? WHERE id=?"
        )
        filtro: tuple = ()
        if paciente_id is not None:
            sql += " AND paciente_id=? AND eliminado=0"
            filtro = (paciente_id,)
        with errores_sql("historia_clinica.update"), closing(
            con.execute(
                sql,
                (
                    int(historia.eliminado),
                    historia.nro_historia,
                    grupo_to_db(historia.grupo_sanguineo),
                    historia.antecedentes,
                    historia.medicacion_actual,
                    historia.observaciones,
                    fecha_to_db(historia.fecha_apertura),
                    historia.id,
                    *filtro,
                ),
            )
        ) as cur:
            afectadas = cur.rowcount
        if afectadas == 0 and paciente_id is not None:
            raise StorageError(
                f"Error de integridad: La Historia Clínica ID {historia.id} no es la activa del paciente ID: {paciente_id}"
            )
        if afectadas == 0:
            LOGGER.warning("update_sin_filas tabla=historia_clinica id=%s", historia.id)

    def delete(self, historia_id: int, con: Optional[sqlite3.Connection] = None) -> None:
        """
        Borrado lógico por id.
        """
        if con is None:
            with self._proveedor.sesion() as propia:
                self.delete(historia_id, propia)
                return

        with errores_sql("historia_clinica.delete"):
            con.execute("UPDATE historia_clinica SET eliminado=1 WHERE id=?", (historia_id,)).close()

    # --------------------------------------------------------------
    # Por paciente
    # --------------------------------------------------------------

    def delete_by_paciente_id(self, paciente_id: int, con: sqlite3.Connection) -> None:
        """
        Baja lógica de la historia activa del paciente.

        Cero filas afectadas significa que el paciente no tiene historia activa:
        se lanza StorageError para forzar el rollback del llamador.
        """
        with errores_sql("historia_clinica.delete_by_paciente_id"), closing(
            con.execute(
                "UPDATE historia_clinica SET eliminado=1 WHERE paciente_id=? AND eliminado=0",
                (paciente_id,),
            )
        ) as cur:
            afectadas = cur.rowcount
        if afectadas == 0:
            raise StorageError(
                f"Error de integridad: No se encontró Historia Clínica activa para el paciente ID: {paciente_id}"
            )

    def find_by_paciente_id(
        self,
        paciente_id: int,
        con: Optional[sqlite3.Connection] = None,
    ) -> Optional[HistoriaClinica]:
        """
        Historia activa del paciente, o None.
        """
        if con is None:
            with self._proveedor.sesion() as propia:
                return self.find_by_paciente_id(paciente_id, propia)

        with errores_sql("historia_clinica.find_by_paciente_id"), closing(
            con.execute(
                "SELECT * FROM historia_clinica WHERE paciente_id=? AND eliminado=0",
                (paciente_id,),
            )
        ) as cur:
            row = cur.fetchone()
            return row_to_historia(row) if row else None
