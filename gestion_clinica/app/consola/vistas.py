# consola/vistas.py
"""
Render de texto para la consola: solo formatea, no pide datos ni llama servicios.
"""

from __future__ import annotations

from typing import List

from gestion_clinica.app.domain.modelos import HistoriaClinica, Paciente


MENU_PRINCIPAL = """
╔════════════════════════════════════════════════════╗
║           SISTEMA DE GESTIÓN DE CLÍNICA            ║
╠════════════════════════════════════════════════════╣
║ 1. Crear Paciente (con Historia Clínica)           ║
║ 2. Listar todos los Pacientes                      ║
║ 3. Buscar Paciente por DNI                         ║
║ 4. Actualizar Paciente                             ║
║ 5. Actualizar Historia Clínica de un Paciente      ║
║ 6. Listar todas las Historias Clínicas             ║
║ 7. Eliminar Paciente (Baja Lógica)                 ║
╠════════════════════════════════════════════════════╣
║ 0. Salir                                           ║
╚════════════════════════════════════════════════════╝"""

_LINEA_TABLA = "+------+------------+-----------------+-----------------+--------------+-------+"
_FILA_TABLA = "| {:<4} | {:<10} | {:<15} | {:<15} | {:<12} | {:<5} |"


def tabla_pacientes(pacientes: List[Paciente]) -> str:
    lineas = [
        "",
        "=== LISTADO DE PACIENTES ===",
        _LINEA_TABLA,
        _FILA_TABLA.format("ID", "DNI", "NOMBRE", "APELLIDO", "NRO HC", "GRUPO"),
        _LINEA_TABLA,
    ]
    for p in pacientes:
        hc = p.historia_clinica
        nro_hc = hc.nro_historia if hc is not None else "S/D"
        grupo = hc.grupo_sanguineo.db() if hc is not None and hc.grupo_sanguineo else "-"
        lineas.append(_FILA_TABLA.format(p.id, p.dni, p.nombre, p.apellido, nro_hc, grupo))
    lineas.append(_LINEA_TABLA)
    return "\n".join(lineas)


def ficha_paciente(p: Paciente) -> str:
    h = p.historia_clinica
    lineas = [
        "",
        "════════════ FICHA DEL PACIENTE ════════════",
        f" {'Nombre Completo':<20}: {p.nombre_completo()}",
        f" {'DNI':<20}: {p.dni}",
        f" {'Fecha Nacimiento':<20}: {p.fecha_nacimiento or 'No registrada'}",
        "────────────────────────────────────────────",
        " DATOS CLÍNICOS",
    ]
    if h is not None:
        lineas += [
            f" {'Nro. Historia':<20}: {h.nro_historia}",
            f" {'Grupo Sanguíneo':<20}: {h.grupo_sanguineo.db() if h.grupo_sanguineo else 'N/A'}",
            f" {'Observaciones':<20}: {h.observaciones or '-'}",
        ]
    else:
        lineas.append(" (Sin Historia Clínica asociada)")
    lineas.append("════════════════════════════════════════════")
    return "\n".join(lineas)


def _o_defecto(valor: str | None, defecto: str) -> str:
    return valor if valor and valor.strip() else defecto


def listado_historias(historias: List[HistoriaClinica]) -> str:
    separador = "─" * 60
    lineas = ["", f"════════════ LISTADO DE HISTORIAS CLÍNICAS (Cantidad: {len(historias)}) ════════════"]
    for h in historias:
        grupo = h.grupo_sanguineo.db() if h.grupo_sanguineo else "No def."
        fecha = h.fecha_apertura.isoformat() if h.fecha_apertura else "-"
        lineas += [
            separador,
            f" ID: {h.id:<4} | Nro HC: {_o_defecto(h.nro_historia, 'S/D'):<10} | Grupo: {grupo:<5} | Fecha: {fecha}",
            separador,
            " • Antecedentes:",
            "   " + _o_defecto(h.antecedentes, "Ninguno"),
            "",
            " • Medicación Actual:",
            "   " + _o_defecto(h.medicacion_actual, "Ninguna"),
            "",
            " • Observaciones:",
            "   " + _o_defecto(h.observaciones, "Sin observaciones"),
            "",
        ]
    lineas.append("═" * 60)
    return "\n".join(lineas)
