from __future__ import annotations

from datetime import date

import pytest

from gestion_clinica.app.domain.enums import GrupoSanguineo
from gestion_clinica.app.domain.exceptions import ContractError, StorageError
from gestion_clinica.app.domain.modelos import HistoriaClinica, Paciente


@pytest.fixture()
def paciente_id(container) -> int:
    return container.pacientes_repo.create(Paciente(nombre="Ana", apellido="Lopez", dni="30111222")).id


def test_crear_sin_paciente_id_viola_el_contrato(container, proveedor, contar_filas) -> None:
    historia = HistoriaClinica(nro_historia="HC-001")

    with pytest.raises(ContractError, match="use the pacienteId variant"):
        container.historias_repo.create(historia)
    with proveedor.sesion() as con:
        with pytest.raises(StorageError, match="use the pacienteId variant"):
            container.historias_repo.create(historia, con)

    assert contar_filas("historia_clinica") == 0


def test_crud_historia(container, paciente_id: int, db_connection) -> None:
    repo = container.historias_repo
    historia = HistoriaClinica(
        nro_historia="HC-001",
        grupo_sanguineo=GrupoSanguineo.B_NEGATIVO,
        antecedentes="Asma",
        medicacion_actual="Salbutamol",
        observaciones=None,
        fecha_apertura=date(2024, 3, 1),
    )

    repo.create(historia, paciente_id=paciente_id)
    assert historia.id is not None and historia.id > 0
    fk = db_connection.execute("SELECT paciente_id FROM historia_clinica WHERE id = ?", (historia.id,)).fetchone()[0]
    assert fk == paciente_id

    leida = repo.read(historia.id)
    assert leida == historia

    leida.grupo_sanguineo = None
    leida.observaciones = "Control anual"
    repo.update(leida)
    assert repo.read(historia.id) == leida
    assert db_connection.execute(
        "SELECT grupo_sanguineo FROM historia_clinica WHERE id = ?", (historia.id,)
    ).fetchone()[0] is None

    assert repo.find_by_paciente_id(paciente_id) == leida
    assert [h.id for h in repo.read_all()] == [historia.id]

    repo.delete(historia.id)
    assert repo.read_all() == []
    assert repo.find_by_paciente_id(paciente_id) is None
    assert repo.read(historia.id) is None
    assert db_connection.execute(
        "SELECT eliminado FROM historia_clinica WHERE id = ?", (historia.id,)
    ).fetchone()[0] == 1


def test_read_all_ordena_por_id_desc(container, db_connection) -> None:
    ids = []
    for dni, nro in (("1", "HC-1"), ("2", "HC-2")):
        pid = container.pacientes_repo.create(Paciente(nombre="A", apellido="B", dni=dni)).id
        ids.append(container.historias_repo.create(HistoriaClinica(nro_historia=nro), paciente_id=pid).id)

    assert [h.id for h in container.historias_repo.read_all()] == list(reversed(ids))


def test_delete_by_paciente_id_marca_la_historia(container, paciente_id: int, proveedor) -> None:
    container.historias_repo.create(HistoriaClinica(nro_historia="HC-001"), paciente_id=paciente_id)

    with proveedor.sesion() as con:
        container.historias_repo.delete_by_paciente_id(paciente_id, con)

    assert container.historias_repo.find_by_paciente_id(paciente_id) is None


def test_delete_by_paciente_id_sin_historia_activa_falla(container, paciente_id: int, proveedor) -> None:
    with proveedor.sesion() as con:
        with pytest.raises(StorageError, match="No se encontró Historia Clínica activa"):
            container.historias_repo.delete_by_paciente_id(paciente_id, con)


def test_delete_by_paciente_id_con_historia_ya_eliminada_falla(container, paciente_id: int, proveedor) -> None:
    historia = container.historias_repo.create(HistoriaClinica(nro_historia="HC-001"), paciente_id=paciente_id)
    container.historias_repo.delete(historia.id)

    with proveedor.sesion() as con:
        with pytest.raises(StorageError, match="No se encontró Historia Clínica activa"):
            container.historias_repo.delete_by_paciente_id(paciente_id, con)


def test_fk_a_paciente_inexistente_es_error_de_almacenamiento(container) -> None:
    with pytest.raises(StorageError, match="FOREIGN KEY"):
        container.historias_repo.create(HistoriaClinica(nro_historia="HC-404"), paciente_id=404)


def test_update_con_paciente_exige_que_la_historia_sea_suya(container, paciente_id: int, proveedor) -> None:
    otro_id = container.pacientes_repo.create(Paciente(nombre="Juan", apellido="Perez", dni="20111222")).id
    ajena = container.historias_repo.create(HistoriaClinica(nro_historia="HC-002"), paciente_id=otro_id)
    ajena.observaciones = "escrita por otro paciente"

    with proveedor.sesion() as con:
        with pytest.raises(StorageError, match="no es la activa del paciente"):
            container.historias_repo.update(ajena, con, paciente_id)

    assert container.historias_repo.read(ajena.id).observaciones is None


def test_update_con_paciente_propio(container, paciente_id: int, proveedor) -> None:
    historia = container.historias_repo.create(HistoriaClinica(nro_historia="HC-001"), paciente_id=paciente_id)
    historia.antecedentes = "Asma"

    with proveedor.sesion() as con:
        container.historias_repo.update(historia, con, paciente_id)

    assert container.historias_repo.read(historia.id).antecedentes == "Asma"
