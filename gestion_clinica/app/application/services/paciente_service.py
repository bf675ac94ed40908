# application/services/paciente_service.py
"""
Servicio de Pacientes: orquestador de la relación 1:1 Paciente <-> Historia Clínica.

Reglas:
- Un paciente sin historia clínica no es un estado válido: insertar/actualizar
  exigen `historia_clinica`.
- Validaciones antes de abrir cualquier conexión.

Transacciones compuestas (insertar, actualizar, eliminar):
- Una conexión propia por llamada, autocommit desactivado.
- Dos pasos (paciente + historia) dentro de `transaccion(...)`: commit si
  ambos terminan, rollback ante cualquier excepción, que se relanza como
  StorageError("Error transaccional al ...") con la causa original.
- Orden de pasos:
  - insertar: paciente primero (su id es la FK de la historia).
  - actualizar: paciente, luego historia (que debe ser la activa del mismo
    paciente). La baja no se hace actualizando: `eliminado=True` se rechaza.
  - eliminar: historia primero; si no hay historia activa falla y nada cambia.

Lecturas: delegan en el repositorio (paciente enriquecido con su historia).
"""

from __future__ import annotations

from typing import List, Optional

from gestion_clinica.app.application.services.historia_clinica_service import HistoriaClinicaService
from gestion_clinica.app.bootstrap_logging import get_logger
from gestion_clinica.app.domain.exceptions import ValidationError
from gestion_clinica.app.domain.modelos import Paciente
from gestion_clinica.app.infrastructure.sqlite.proveedor_conexion_sqlite import ProveedorConexionSqlite
from gestion_clinica.app.infrastructure.sqlite.repos_pacientes import PacientesRepository
from gestion_clinica.app.infrastructure.sqlite.transacciones import transaccion


LOGGER = get_logger(__name__)


def _en_blanco(value: Optional[str]) -> bool:
    return not (value or "").strip()


class PacienteService:
    def __init__(
        self,
        proveedor: ProveedorConexionSqlite,
        repo: PacientesRepository,
        hc_service: HistoriaClinicaService,
    ) -> None:
        self._proveedor = proveedor
        self._repo = repo
        self._hc_service = hc_service

    # --------------------------------------------------------------
    # Transacciones compuestas
    # --------------------------------------------------------------

    def insertar(self, paciente: Optional[Paciente]) -> Paciente:
        """
        Inserta paciente + historia clínica de forma atómica y devuelve el paciente con ids asignados.
        """
        paciente = self._validar(paciente)

        with transaccion(self._proveedor.abrir(), "insertar") as con:
            self._repo.create(paciente, con)
            self._hc_service.insertar(paciente.historia_clinica, con, paciente.id)

        LOGGER.info("paciente_insertado id=%s", paciente.id)
        return paciente

    def actualizar(self, paciente: Optional[Paciente]) -> None:
        if paciente is not None and paciente.id is None:
            raise ValidationError("Id requerido.")
        paciente = self._validar(paciente)
        if paciente.eliminado or paciente.historia_clinica.eliminado:
            raise ValidationError("La baja lógica solo se hace con eliminar.")

        with transaccion(self._proveedor.abrir(), "actualizar") as con:
            self._repo.update(paciente, con)
            self._hc_service.actualizar(paciente.historia_clinica, con, paciente.id)

        LOGGER.info("paciente_actualizado id=%s", paciente.id)

    def eliminar(self, paciente_id: int) -> None:
        if paciente_id <= 0:
            raise ValidationError("El ID de Paciente es inválido.")

        with transaccion(self._proveedor.abrir(), "eliminar") as con:
            self._hc_service.eliminar_por_paciente_id(paciente_id, con)
            self._repo.delete(paciente_id, con)

        LOGGER.info("paciente_eliminado id=%s", paciente_id)

    # --------------------------------------------------------------
    # Lecturas
    # --------------------------------------------------------------

    def get_by_id(self, paciente_id: int) -> Optional[Paciente]:
        return self._repo.read(paciente_id)

    def get_all(self) -> List[Paciente]:
        return self._repo.read_all()

    def find_by_dni(self, dni: str) -> Optional[Paciente]:
        return self._repo.find_by_dni(dni.strip())

    # --------------------------------------------------------------
    # Interno
    # --------------------------------------------------------------

    @staticmethod
    def _validar(paciente: Optional[Paciente]) -> Paciente:
        if paciente is None:
            raise ValidationError("Paciente nulo.")
        if _en_blanco(paciente.nombre):
            raise ValidationError("Nombre obligatorio.")
        if _en_blanco(paciente.apellido):
            raise ValidationError("Apellido obligatorio.")
        if _en_blanco(paciente.dni):
            raise ValidationError("DNI obligatorio.")
        if paciente.historia_clinica is None:
            raise ValidationError("Historia clínica obligatoria (Relación 1-1).")
        return paciente
