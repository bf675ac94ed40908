# infrastructure/config_db.py
"""
Carga de parámetros de conexión desde `db.properties`.

Formato (estilo .properties):
    db.url=jdbc:sqlite:data/clinica.db
    db.user=clinica
    db.password=secreto

Orden de búsqueda del archivo:
- Ruta explícita (argumento).
- Variable de entorno GESTION_CLINICA_DB_PROPERTIES.
- Directorio de trabajo actual.
- Recursos del paquete (gestion_clinica/app/resources/).
"""

from __future__ import annotations

import configparser
from dataclasses import dataclass
from os import getenv
from pathlib import Path
from typing import Iterator, Optional

from gestion_clinica.app.domain.exceptions import ConfigurationError


PROPERTIES_FILENAME = "db.properties"
ENV_PROPERTIES_PATH = "GESTION_CLINICA_DB_PROPERTIES"

_SECTION = "db"
_URL_PREFIXES = ("jdbc:sqlite:", "sqlite:///", "sqlite:")


@dataclass(frozen=True)
class ConfiguracionDB:
    """Parámetros de conexión; inmutable una vez cargado."""

    url: str
    user: Optional[str] = None
    password: Optional[str] = None

    def ruta_sqlite(self) -> str:
        """Ruta de archivo SQLite a partir de db.url (acepta jdbc:sqlite:, sqlite:/// o ruta directa)."""
        for prefix in _URL_PREFIXES:
            if self.url.startswith(prefix):
                return self.url[len(prefix):]
        return self.url


def resources_dir() -> Path:
    return Path(__file__).resolve().parents[1] / "resources"


def _candidatos(explicit_path: str | Path | None) -> Iterator[Path]:
    if explicit_path:
        yield Path(explicit_path)
        return
    configured = getenv(ENV_PROPERTIES_PATH)
    if configured:
        yield Path(configured)
        return
    yield Path.cwd() / PROPERTIES_FILENAME
    yield resources_dir() / PROPERTIES_FILENAME


def localizar_properties(explicit_path: str | Path | None = None) -> Path:
    for candidato in _candidatos(explicit_path):
        if candidato.is_file():
            return candidato
    raise ConfigurationError(f"No se encontró el archivo {PROPERTIES_FILENAME}")


def cargar_configuracion(explicit_path: str | Path | None = None) -> ConfiguracionDB:
    """Lee y valida db.properties; cualquier fallo es ConfigurationError."""
    path = localizar_properties(explicit_path)
    parser = configparser.ConfigParser(
        comment_prefixes=("#", "!"),
        interpolation=None,
    )
    # Las claves llevan puntos y mayúsculas/minúsculas se respetan.
    parser.optionxform = str  # type: ignore[assignment]
    try:
        text = path.read_text(encoding="utf-8")
        parser.read_string(f"[{_SECTION}]\n{text}", source=str(path))
    except (OSError, UnicodeDecodeError, configparser.Error) as exc:
        raise ConfigurationError(f"No se pudo leer {path}: {exc}") from exc

    seccion = parser[_SECTION]
    url = (seccion.get("db.url") or "").strip()
    if not url:
        raise ConfigurationError(f"Falta la clave db.url en {path}")
    return ConfiguracionDB(
        url=url,
        user=(seccion.get("db.user") or "").strip() or None,
        password=seccion.get("db.password"),
    )
