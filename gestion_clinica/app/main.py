from __future__ import annotations

import argparse
import uuid
from functools import partial
from pathlib import Path
from typing import Sequence

from gestion_clinica.app.bootstrap_logging import configure_logging, get_logger, set_run_context
from gestion_clinica.app.consola.menu import MenuConsola
from gestion_clinica.app.container import build_container
from gestion_clinica.app.crash_handler import install_global_exception_hook
from gestion_clinica.app.infrastructure.config_db import cargar_configuracion
from gestion_clinica.app.infrastructure.sqlite.db import bootstrap_database
from gestion_clinica.app.infrastructure.sqlite.proveedor_conexion_sqlite import ProveedorConexionSqlite


LOGGER = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Gestión de pacientes e historias clínicas (consola).")
    parser.add_argument("--properties", type=str, default=None, help="Ruta a db.properties.")
    parser.add_argument("--log-dir", type=str, default="./logs")
    parser.add_argument("--log-level", type=str, default="INFO")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging("gestion-clinica", Path(args.log_dir), level=args.log_level, json=True)
    set_run_context(uuid.uuid4().hex[:8])
    install_global_exception_hook(LOGGER)

    proveedor = ProveedorConexionSqlite(partial(cargar_configuracion, args.properties))
    container = build_container(proveedor)
    bootstrap_database(container.proveedor)

    MenuConsola(container.paciente_service, container.historia_clinica_service).start()
    LOGGER.info("app_finalizada")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
