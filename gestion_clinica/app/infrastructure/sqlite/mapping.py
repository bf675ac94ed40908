from __future__ import annotations

import sqlite3
from datetime import date
from typing import Optional

from gestion_clinica.app.domain.enums import GrupoSanguineo
from gestion_clinica.app.domain.exceptions import StorageError, ValidationError
from gestion_clinica.app.domain.modelos import HistoriaClinica, Paciente


# Columnas de la historia en el LEFT JOIN; id y eliminado van con alias para no pisar los del paciente.
PACIENTE_CON_HISTORIA_SELECT = (
    "SELECT p.*, "
    "hc.id AS hc_id, hc.eliminado AS hc_eliminado, hc.nro_historia, "
    "hc.grupo_sanguineo, hc.antecedentes, hc.medicacion_actual, "
    "hc.observaciones, hc.fecha_apertura "
    "FROM paciente p "
    "LEFT JOIN historia_clinica hc ON p.id = hc.paciente_id AND hc.eliminado = 0 "
)


def fecha_to_db(valor: Optional[date]) -> Optional[str]:
    return valor.isoformat() if valor else None


def fecha_from_db(valor: Optional[str]) -> Optional[date]:
    if not valor:
        return None
    try:
        return date.fromisoformat(valor)
    except ValueError as exc:
        raise StorageError(f"Fecha inválida en la base: {valor!r}") from exc


def grupo_to_db(grupo: Optional[GrupoSanguineo]) -> Optional[str]:
    return grupo.db() if grupo is not None else None


def grupo_from_db(token: Optional[str]) -> Optional[GrupoSanguineo]:
    try:
        return GrupoSanguineo.from_db(token)
    except ValidationError as exc:
        raise StorageError(f"Grupo sanguíneo desconocido en la base: {token!r}") from exc


def row_to_historia(row: sqlite3.Row) -> HistoriaClinica:
    return HistoriaClinica(
        id=row["id"],
        eliminado=bool(row["eliminado"]),
        nro_historia=row["nro_historia"],
        grupo_sanguineo=grupo_from_db(row["grupo_sanguineo"]),
        antecedentes=row["antecedentes"],
        medicacion_actual=row["medicacion_actual"],
        observaciones=row["observaciones"],
        fecha_apertura=fecha_from_db(row["fecha_apertura"]),
    )


def row_to_paciente(row: sqlite3.Row) -> Paciente:
    """
    Convierte una fila del LEFT JOIN en un Paciente enriquecido.

    La historia solo se adjunta si hc_id > 0; un paciente sin historia activa
    (estado inválido, pero tolerado) vuelve con historia_clinica=None.
    """
    paciente = Paciente(
        id=row["id"],
        eliminado=bool(row["eliminado"]),
        nombre=row["nombre"],
        apellido=row["apellido"],
        dni=row["dni"],
        fecha_nacimiento=fecha_from_db(row["fecha_nacimiento"]),
    )
    hc_id = row["hc_id"] or 0
    if hc_id > 0:
        paciente.historia_clinica = HistoriaClinica(
            id=hc_id,
            eliminado=bool(row["hc_eliminado"]),
            nro_historia=row["nro_historia"],
            grupo_sanguineo=grupo_from_db(row["grupo_sanguineo"]),
            antecedentes=row["antecedentes"],
            medicacion_actual=row["medicacion_actual"],
            observaciones=row["observaciones"],
            fecha_apertura=fecha_from_db(row["fecha_apertura"]),
        )
    return paciente
