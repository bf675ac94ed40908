# domain/exceptions.py
"""
Excepciones del dominio.

Propósito:
- Distinguir errores de reglas de negocio (validación) de errores técnicos (DB/configuración).
- Permitir que la consola traduzca errores a mensajes para el usuario sin cortar el menú.
"""


class DomainError(Exception):
    """Error base de la aplicación."""


class ValidationError(DomainError):
    """Entidad en estado inválido detectada antes de cualquier acceso a la base."""


class StorageError(DomainError):
    """Fallo reportado por la capa de datos (conexión, SQL, clave duplicada, fila ausente)."""


class ContractError(StorageError):
    """Uso prohibido de la API (p. ej., crear una historia clínica sin paciente)."""


class ConfigurationError(DomainError):
    """db.properties ausente o ilegible."""
