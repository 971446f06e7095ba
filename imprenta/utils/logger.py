"""
logger.py — Logging para Imprenta usando Rich + archivo.

Dual output:
- Rich console: colores para el operador en la terminal
- Archivo rotativo: ~/.imprenta/logs/imprenta.log (o IMPRENTA_LOG_DIR)

El log de archivo NO va dentro del blog: ensuciaría el working tree
que estamos a punto de commitear.

Uso:
    from imprenta.utils.logger import get_logger, console
    logger = get_logger("imprenta.publishing")
    logger.info("Moviendo borrador...")
    logger.success("Publicado")
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

# En pytest no escribimos logs a disco
_in_pytest = "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ

imprenta_theme = Theme({
    "info": "cyan",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
})

# Consola global — se usa en todo el proyecto
console = Console(theme=imprenta_theme)

# ================================================================
# File logging setup
# ================================================================

_file_logger: logging.Logger | None = None


def _log_dir() -> Path:
    custom = os.environ.get("IMPRENTA_LOG_DIR")
    if custom:
        return Path(custom).expanduser()
    return Path.home() / ".imprenta" / "logs"


def _setup_file_logger() -> logging.Logger:
    """Configura el logger de archivo con rotacion."""
    global _file_logger
    if _file_logger is not None:
        return _file_logger

    if _in_pytest:
        _file_logger = logging.getLogger("imprenta.null")
        _file_logger.addHandler(logging.NullHandler())
        return _file_logger

    _file_logger = logging.getLogger("imprenta.file")
    _file_logger.setLevel(logging.DEBUG)
    _file_logger.propagate = False

    if not _file_logger.handlers:
        try:
            log_dir = _log_dir()
            log_dir.mkdir(parents=True, exist_ok=True)
            handler: logging.Handler = RotatingFileHandler(
                log_dir / "imprenta.log",
                maxBytes=5 * 1024 * 1024,  # 5 MB
                backupCount=5,
                encoding="utf-8",
            )
        except OSError:
            # Sin permisos en $HOME: seguimos solo con la consola
            handler = logging.NullHandler()
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        _file_logger.addHandler(handler)

    return _file_logger


class ImprentaLogger:
    """
    Logger que escribe con Rich en la terminal y en el archivo rotativo.

    Cada módulo crea su propio logger con un nombre para identificar
    de dónde viene cada mensaje.

    Args:
        name: Nombre del módulo (ej: "imprenta.publishing")
    """

    def __init__(self, name: str):
        self._name = name
        self._file = _setup_file_logger()

    def info(self, message: str) -> None:
        """Mensaje informativo (cyan)."""
        console.print(f"[info]{escape(message)}[/info]", soft_wrap=True)
        self._file.info(f"[{self._name}] {message}")

    def success(self, message: str) -> None:
        """Mensaje de éxito (verde)."""
        console.print(f"[success]{escape(message)}[/success]", soft_wrap=True)
        self._file.info(f"[{self._name}] OK: {message}")

    def warning(self, message: str) -> None:
        """Mensaje de advertencia (amarillo)."""
        console.print(f"[warning]{escape(message)}[/warning]", soft_wrap=True)
        self._file.warning(f"[{self._name}] {message}")

    def error(self, message: str) -> None:
        """Mensaje de error (rojo)."""
        console.print(f"[error]{escape(message)}[/error]", soft_wrap=True)
        self._file.error(f"[{self._name}] {message}")

    def debug(self, message: str) -> None:
        """Solo al archivo; la terminal queda limpia."""
        self._file.debug(f"[{self._name}] {message}")


def get_logger(name: str = "imprenta") -> ImprentaLogger:
    """
    Obtiene un logger para el módulo especificado.

    Ejemplo:
        logger = get_logger("imprenta.git")
        logger.info("Abriendo repositorio...")
    """
    return ImprentaLogger(name)
