from __future__ import annotations

from dataclasses import dataclass

from gestion_clinica.app.application.services.historia_clinica_service import HistoriaClinicaService
from gestion_clinica.app.application.services.paciente_service import PacienteService
from gestion_clinica.app.infrastructure.sqlite.proveedor_conexion_sqlite import ProveedorConexionSqlite
from gestion_clinica.app.infrastructure.sqlite.repos_historias_clinicas import HistoriasClinicasRepository
from gestion_clinica.app.infrastructure.sqlite.repos_pacientes import PacientesRepository


@dataclass(slots=True)
class AppContainer:
    proveedor: ProveedorConexionSqlite

    pacientes_repo: PacientesRepository
    historias_repo: HistoriasClinicasRepository

    historia_clinica_service: HistoriaClinicaService
    paciente_service: PacienteService


def build_container(proveedor: ProveedorConexionSqlite | None = None) -> AppContainer:
    proveedor = proveedor or ProveedorConexionSqlite()
    pacientes_repo = PacientesRepository(proveedor)
    historias_repo = HistoriasClinicasRepository(proveedor)
    hc_service = HistoriaClinicaService(historias_repo)
    return AppContainer(
        proveedor=proveedor,
        pacientes_repo=pacientes_repo,
        historias_repo=historias_repo,
        historia_clinica_service=hc_service,
        paciente_service=PacienteService(proveedor, pacientes_repo, hc_service),
    )
