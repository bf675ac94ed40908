# domain/enums.py
from __future__ import annotations

from enum import Enum
from typing import Optional

from gestion_clinica.app.domain.exceptions import ValidationError


class GrupoSanguineo(str, Enum):
    """Grupo sanguíneo; el valor es exactamente el token guardado en la base."""

    A_POSITIVO = "A+"
    A_NEGATIVO = "A-"
    B_POSITIVO = "B+"
    B_NEGATIVO = "B-"
    AB_POSITIVO = "AB+"
    AB_NEGATIVO = "AB-"
    O_POSITIVO = "O+"
    O_NEGATIVO = "O-"

    def db(self) -> str:
        return self.value

    @classmethod
    def from_db(cls, token: Optional[str]) -> Optional["GrupoSanguineo"]:
        """
        Traduce el token de la base a la enumeración.

        - None o vacío -> None (grupo no informado).
        - Token desconocido -> ValidationError.
        """
        if token is None:
            return None
        normalizado = token.strip().upper()
        if not normalizado:
            return None
        try:
            return cls(normalizado)
        except ValueError as exc:
            raise ValidationError(f"Grupo sanguíneo inválido: {token}") from exc
