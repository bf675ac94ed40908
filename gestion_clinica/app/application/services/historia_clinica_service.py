# application/services/historia_clinica_service.py
"""
Servicio de Historias Clínicas.

Reglas:
- Validación previa a toda mutación: historia no nula, nro_historia no vacío;
  en actualizaciones, id positivo y sin marca de baja.
- Una historia no se crea nunca sola: `insertar` sin conexión ni paciente
  lanza ContractError tras validar.

Transacciones:
- Este servicio no abre transacciones. Con `con` participa en la del
  llamador (PacienteService); sin `con` delega en la forma autogestionada
  del repositorio (autocommit).
"""

from __future__ import annotations

import sqlite3
from datetime import date
from typing import List, Optional

from gestion_clinica.app.domain.exceptions import ContractError, ValidationError
from gestion_clinica.app.domain.modelos import HistoriaClinica
from gestion_clinica.app.infrastructure.sqlite.repos_historias_clinicas import HistoriasClinicasRepository


class HistoriaClinicaService:
    def __init__(self, repo: HistoriasClinicasRepository) -> None:
        self._repo = repo

    def insertar(
        self,
        historia: Optional[HistoriaClinica],
        con: Optional[sqlite3.Connection] = None,
        paciente_id: Optional[int] = None,
    ) -> HistoriaClinica:
        """
        Inserta la historia dentro de la transacción activa `con`, vinculada a `paciente_id`.

        La fecha de apertura la fija el servicio (fecha local de hoy).
        """
        validado = self._validar(historia)
        if con is None or paciente_id is None:
            raise ContractError(
                "No se puede crear una Historia Clínica sin un Paciente asociado. Use el método transaccional."
            )
        if paciente_id <= 0:
            raise ValidationError("El ID de Paciente debe ser mayor a 0.")
        validado.fecha_apertura = date.today()
        return self._repo.create(validado, con, paciente_id)

    def actualizar(
        self,
        historia: Optional[HistoriaClinica],
        con: Optional[sqlite3.Connection] = None,
        paciente_id: Optional[int] = None,
    ) -> None:
        """
        Actualiza la historia. Con `paciente_id` solo se acepta la historia activa de ese paciente.

        La baja lógica no pasa por aquí: una historia marcada como eliminada se rechaza.
        """
        validado = self._validar(historia)
        if validado.id is None or validado.id <= 0:
            raise ValidationError("El ID de la Historia Clínica es inválido para actualizar.")
        if validado.eliminado:
            raise ValidationError("La baja de una Historia Clínica solo se hace al eliminar su Paciente.")
        self._repo.update(validado, con, paciente_id)

    def eliminar(self, historia_id: int) -> None:
        if historia_id <= 0:
            raise ValidationError("El ID debe ser mayor a 0.")
        self._repo.delete(historia_id)

    def eliminar_por_paciente_id(self, paciente_id: int, con: sqlite3.Connection) -> None:
        """Baja lógica de la historia del paciente dentro de la transacción `con`."""
        if paciente_id <= 0:
            raise ValidationError("El ID de Paciente debe ser mayor a 0.")
        self._repo.delete_by_paciente_id(paciente_id, con)

    def get_by_id(self, historia_id: int) -> Optional[HistoriaClinica]:
        return self._repo.read(historia_id)

    def get_all(self) -> List[HistoriaClinica]:
        return self._repo.read_all()

    @staticmethod
    def _validar(historia: Optional[HistoriaClinica]) -> HistoriaClinica:
        if historia is None:
            raise ValidationError("La Historia Clínica no puede ser nula.")
        if not (historia.nro_historia or "").strip():
            raise ValidationError("El Nro. de Historia es obligatorio.")
        return historia
