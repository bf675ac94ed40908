# consola/menu.py
"""
Menú interactivo de consola.

- Pide datos, construye modelos y llama a los servicios.
- Un error en una opción se informa y el menú sigue; nunca termina el proceso.
- Fin de la entrada (EOF) en cualquier pregunta cierra el menú sin error.
- Entrada y salida inyectables (input_fn / salida / errores) para poder probarlo.
"""

from __future__ import annotations

import sys
from datetime import date
from typing import Callable, Optional, TextIO

from gestion_clinica.app.application.services.historia_clinica_service import HistoriaClinicaService
from gestion_clinica.app.application.services.paciente_service import PacienteService
from gestion_clinica.app.bootstrap_logging import get_logger, log_soft_exception
from gestion_clinica.app.consola import vistas
from gestion_clinica.app.domain.enums import GrupoSanguineo
from gestion_clinica.app.domain.exceptions import DomainError
from gestion_clinica.app.domain.modelos import HistoriaClinica, Paciente


LOGGER = get_logger(__name__)

InputFn = Callable[[str], str]


def _opcional(valor: str) -> Optional[str]:
    valor = valor.strip()
    return valor or None


def _fecha_opcional(valor: str) -> Optional[date]:
    valor = valor.strip()
    return date.fromisoformat(valor) if valor else None


class MenuConsola:
    def __init__(
        self,
        paciente_service: PacienteService,
        hc_service: HistoriaClinicaService,
        *,
        input_fn: InputFn = input,
        salida: TextIO | None = None,
        errores: TextIO | None = None,
    ) -> None:
        self._pacientes = paciente_service
        self._historias = hc_service
        self._input = input_fn
        self._salida = salida or sys.stdout
        self._errores = errores or sys.stderr

    # --------------------------------------------------------------
    # Bucle principal
    # --------------------------------------------------------------

    def start(self) -> None:
        acciones = {
            1: self.crear_paciente,
            2: self.listar_pacientes,
            3: self.buscar_paciente_por_dni,
            4: self.actualizar_paciente,
            5: self.actualizar_historia_clinica,
            6: self.listar_historias_clinicas,
            7: self.eliminar_paciente,
        }
        while True:
            self._print(vistas.MENU_PRINCIPAL)
            try:
                opcion = int(self._input(" ➤ Ingrese una opción: "))
            except ValueError:
                self._error("Entrada inválida. Por favor, ingrese un número.")
                continue
            except EOFError:
                return
            if opcion == 0:
                self._print("Saliendo del sistema...")
                return
            accion = acciones.get(opcion)
            if accion is None:
                self._print("Opción no válida. Intente de nuevo.")
                continue
            try:
                accion()
            except EOFError:
                return

    # --------------------------------------------------------------
    # Opciones
    # --------------------------------------------------------------

    def crear_paciente(self) -> None:
        try:
            self._print("== Alta Paciente ==")
            nombre = self._input("Nombre: ")
            apellido = self._input("Apellido: ")
            dni = self._input("DNI: ")
            fecha_nacimiento = _fecha_opcional(self._input("Fecha nacimiento (YYYY-MM-DD, opcional): "))

            self._print("== Historia Clínica (Obligatoria) ==")
            nro = self._input("Nro historia: ")
            grupo = GrupoSanguineo.from_db(self._input("Grupo sanguíneo (A+,A-,B+,B-,AB+,AB-,O+,O- o vacío): "))
            antecedentes = _opcional(self._input("Antecedentes (opcional): "))
            medicacion = _opcional(self._input("Medicación actual (opcional): "))
            observaciones = _opcional(self._input("Observaciones (opcional): "))

            paciente = Paciente(
                nombre=nombre.strip(),
                apellido=apellido.strip(),
                dni=dni.strip(),
                fecha_nacimiento=fecha_nacimiento,
                historia_clinica=HistoriaClinica(
                    nro_historia=nro.strip(),
                    grupo_sanguineo=grupo,
                    antecedentes=antecedentes,
                    medicacion_actual=medicacion,
                    observaciones=observaciones,
                ),
            )
            self._pacientes.insertar(paciente)
            self._print("¡Paciente creado exitosamente!")
            self._print(str(paciente))
        except (DomainError, ValueError) as exc:
            self._fallo("crear_paciente", "Error al crear paciente", exc)

    def listar_pacientes(self) -> None:
        try:
            pacientes = self._pacientes.get_all()
        except DomainError as exc:
            self._fallo("listar_pacientes", "Error al listar pacientes", exc)
            return
        if not pacientes:
            self._print("⚠ No hay pacientes registrados.")
            return
        self._print(vistas.tabla_pacientes(pacientes))

    def buscar_paciente_por_dni(self) -> None:
        try:
            dni = self._input("Ingrese DNI a buscar: ")
            paciente = self._pacientes.find_by_dni(dni)
        except DomainError as exc:
            self._fallo("buscar_paciente_por_dni", "Error al buscar paciente", exc)
            return
        if paciente is None:
            self._print(f"\n⚠ No se encontró ningún paciente con DNI: {dni}")
            return
        self._print(vistas.ficha_paciente(paciente))

    def actualizar_paciente(self) -> None:
        try:
            paciente = self._pedir_paciente("Ingrese el ID del Paciente a actualizar: ")
            if paciente is None:
                return
            self._print(f"Editando Paciente: {paciente}")
            self._print("(Presione ENTER para mantener el valor actual)")

            nombre = self._input(f"Nuevo Nombre [{paciente.nombre}]: ").strip()
            if nombre:
                paciente.nombre = nombre
            apellido = self._input(f"Nuevo Apellido [{paciente.apellido}]: ").strip()
            if apellido:
                paciente.apellido = apellido
            dni = self._input(f"Nuevo DNI [{paciente.dni}]: ").strip()
            if dni:
                paciente.dni = dni
            actual = paciente.fecha_nacimiento.isoformat() if paciente.fecha_nacimiento else "N/A"
            fecha = _fecha_opcional(self._input(f"Nueva Fecha Nacimiento (YYYY-MM-DD) [{actual}]: "))
            if fecha is not None:
                paciente.fecha_nacimiento = fecha

            self._pacientes.actualizar(paciente)
            self._print("¡Paciente actualizado con éxito!")
        except (DomainError, ValueError) as exc:
            self._fallo("actualizar_paciente", "Error al actualizar el Paciente", exc)

    def actualizar_historia_clinica(self) -> None:
        try:
            paciente = self._pedir_paciente("Ingrese el ID del Paciente cuya Historia Clínica desea actualizar: ")
            if paciente is None:
                return
            historia = paciente.historia_clinica
            if historia is None:
                self._print("Este paciente no tiene Historia Clínica (¡Error de datos!).")
                return
            self._print(f"Editando Historia Clínica: {historia.brief()}")

            grupo = GrupoSanguineo.from_db(self._input("Nuevo grupo (A+,A-,etc. o vacío para dejar): "))
            if grupo is not None:
                historia.grupo_sanguineo = grupo
            observaciones = _opcional(self._input("Nuevas observaciones (o vacío para dejar): "))
            if observaciones is not None:
                historia.observaciones = observaciones

            self._historias.actualizar(historia, paciente_id=paciente.id)
            self._print("¡Historia Clínica actualizada con éxito!")
        except (DomainError, ValueError) as exc:
            self._fallo("actualizar_historia_clinica", "Error al actualizar la Historia Clínica", exc)

    def listar_historias_clinicas(self) -> None:
        try:
            historias = self._historias.get_all()
        except DomainError as exc:
            self._fallo("listar_historias_clinicas", "Error al listar historias", exc)
            return
        if not historias:
            self._print("⚠ No hay historias clínicas registradas.")
            return
        self._print(vistas.listado_historias(historias))

    def eliminar_paciente(self) -> None:
        try:
            paciente_id = self._pedir_id("Ingrese el ID del Paciente a eliminar (Baja Lógica): ")
            if paciente_id is None:
                return
            self._pacientes.eliminar(paciente_id)
            self._print(f"Paciente (ID: {paciente_id}) eliminado con éxito (baja lógica).")
        except DomainError as exc:
            self._fallo("eliminar_paciente", "Error al eliminar paciente", exc)

    # --------------------------------------------------------------
    # Interno
    # --------------------------------------------------------------

    def _pedir_id(self, prompt: str) -> Optional[int]:
        try:
            return int(self._input(prompt))
        except ValueError:
            self._error("Error: Ingrese un ID numérico válido.")
            return None

    def _pedir_paciente(self, prompt: str) -> Optional[Paciente]:
        paciente_id = self._pedir_id(prompt)
        if paciente_id is None:
            return None
        paciente = self._pacientes.get_by_id(paciente_id)
        if paciente is None:
            self._print("No se encontró un Paciente con ese ID.")
        return paciente

    def _fallo(self, operacion: str, prefijo: str, exc: Exception) -> None:
        log_soft_exception(LOGGER, exc, operacion)
        self._error(f"{prefijo}: {exc}")

    def _print(self, texto: str) -> None:
        print(texto, file=self._salida)

    def _error(self, texto: str) -> None:
        print(texto, file=self._errores)
