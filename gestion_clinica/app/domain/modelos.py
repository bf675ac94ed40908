# domain/modelos.py
"""
Modelos de dominio.

Características:
- Datos + helpers con significado de dominio.
- Sin dependencia de SQLite/SQL ni de la consola.

Decisiones de persistencia:
- Tablas: paciente, historia_clinica.
- La relación Paciente -> HistoriaClinica es 1:1 unidireccional: el paciente
  conoce su historia; la historia no guarda referencia al paciente en memoria
  (la clave foránea paciente_id vive solo en la base).
- No hay borrado físico: `eliminado = True` es la baja lógica.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Dict, Optional

from gestion_clinica.app.domain.enums import GrupoSanguineo


@dataclass(slots=True)
class Base:
    """Atributos comunes a toda entidad persistida."""

    id: Optional[int] = None
    eliminado: bool = False


@dataclass(slots=True)
class HistoriaClinica(Base):
    """Historia clínica (tabla SQL: historia_clinica)."""

    nro_historia: str = ""
    grupo_sanguineo: Optional[GrupoSanguineo] = None
    antecedentes: Optional[str] = None
    medicacion_actual: Optional[str] = None
    observaciones: Optional[str] = None
    fecha_apertura: Optional[date] = None

    def brief(self) -> str:
        """Resumen de una línea para listados y mensajes."""
        grupo = self.grupo_sanguineo.db() if self.grupo_sanguineo else None
        return f"HC{{id={self.id}, nro='{self.nro_historia}', grupo={grupo}}}"

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["grupo_sanguineo"] = self.grupo_sanguineo.db() if self.grupo_sanguineo else None
        if self.fecha_apertura is not None:
            d["fecha_apertura"] = self.fecha_apertura.isoformat()
        return d


@dataclass(slots=True)
class Paciente(Base):
    """Paciente (tabla SQL: paciente). Dueño exclusivo de su HistoriaClinica."""

    nombre: str = ""
    apellido: str = ""
    dni: str = ""
    fecha_nacimiento: Optional[date] = None
    historia_clinica: Optional[HistoriaClinica] = None

    def nombre_completo(self) -> str:
        return f"{self.nombre} {self.apellido}".strip()

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "id": self.id,
            "eliminado": self.eliminado,
            "nombre": self.nombre,
            "apellido": self.apellido,
            "dni": self.dni,
            "fecha_nacimiento": self.fecha_nacimiento.isoformat() if self.fecha_nacimiento else None,
        }
        d["historia_clinica"] = self.historia_clinica.to_dict() if self.historia_clinica else None
        return d

    def __str__(self) -> str:
        hc = self.historia_clinica.brief() if self.historia_clinica is not None else "null"
        return (
            f"Paciente{{id={self.id}, dni='{self.dni}', nombre='{self.nombre}', "
            f"apellido='{self.apellido}', hc={hc}}}"
        )
