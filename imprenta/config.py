"""
config.py — Carga y gestiona la configuración de Imprenta.

Se encarga de:
1. Cargar config.yaml (estructura del blog, opciones de Git)
2. Cargar .env (rutas locales que no se suben al repo)
3. Resolver variables de entorno en los valores de config
4. Resolver las rutas de las colecciones (borradores y publicados)

Ejemplo de config.yaml:

    blog:
      root: ${BLOG_REPO_PATH}
      drafts_dir: drafts
      articles_dir: articles
      drafts_meta_dir: meta/drafts
      articles_meta_dir: meta/articles
      meta_extension: .yaml
    git:
      remote: origin
      default_branch: main
      commit_template: "Publishing '{slug}'"
      push: false

Uso:
    from imprenta.config import load_config
    config = load_config()
    print(config.blog.root_path)
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv


# ============================================================
# Dataclasses de configuración
# ============================================================

@dataclass
class BlogConfig:
    """Estructura del blog dentro del working tree."""
    root: str = ""
    drafts_dir: str = "drafts"
    articles_dir: str = "articles"
    drafts_meta_dir: str = "meta/drafts"
    articles_meta_dir: str = "meta/articles"
    content_extension: str = ".md"
    meta_extension: str = ".yaml"

    @property
    def root_path(self) -> Path:
        """Raíz del blog; el directorio actual si no está configurada."""
        return Path(self.root).expanduser() if self.root else Path.cwd()


@dataclass
class GitConfig:
    """Configuración de Git."""
    remote: str = "origin"
    default_branch: str = "main"
    commit_template: str = "Publishing '{slug}'"
    push: bool = False

    def commit_message(self, slug: str) -> str:
        return self.commit_template.format(slug=slug)


@dataclass
class AppConfig:
    """Configuración completa de la aplicación."""
    blog: BlogConfig = field(default_factory=BlogConfig)
    git: GitConfig = field(default_factory=GitConfig)

    # Directorio donde se encontró config.yaml (None si no hubo archivo)
    source: Path | None = None


# ============================================================
# Funciones de carga
# ============================================================

def _resolve_env_vars(value: str) -> str:
    """
    Resuelve variables de entorno en un string.

    Ejemplo:
        "${BLOG_REPO_PATH}" → "/home/user/blog"

    Si la variable no existe se deja el placeholder tal cual.
    """
    patron = re.compile(r"\$\{(\w+)\}")

    def reemplazar(match: re.Match) -> str:
        return os.environ.get(match.group(1), match.group(0))

    return patron.sub(reemplazar, value)


def _resolve_env_recursive(data: Any) -> Any:
    """Resuelve ${VARIABLE} recursivamente en dicts y listas del YAML."""
    if isinstance(data, str):
        return _resolve_env_vars(data)
    elif isinstance(data, dict):
        return {k: _resolve_env_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_recursive(item) for item in data]
    return data


def _dict_to_dataclass(data: dict, cls: type) -> Any:
    """
    Convierte un diccionario a una dataclass, ignorando keys desconocidas.

    Un config.yaml con campos de más no debe romper la carga.
    """
    campos_validos = {f.name for f in cls.__dataclass_fields__.values()}
    datos_filtrados = {k: v for k, v in data.items() if k in campos_validos}
    return cls(**datos_filtrados)


def _find_config_dir(start: Path | None = None) -> Path:
    """
    Encuentra el directorio donde está config.yaml.

    Busca hacia arriba desde `start` (o el directorio actual) para que
    la herramienta funcione desde cualquier subdirectorio del blog.
    """
    current = (start or Path.cwd()).resolve()
    for parent in [current] + list(current.parents):
        if (parent / "config.yaml").exists():
            return parent
    return current


def load_config(
    config_path: Path | None = None,
    root: str | Path | None = None,
) -> AppConfig:
    """
    Carga la configuración completa de Imprenta.

    Pasos:
    1. Carga .env junto a config.yaml
    2. Lee config.yaml (si no existe, valores por defecto)
    3. Resuelve ${VARIABLES}
    4. Convierte cada sección a su dataclass
    5. Aplica IMPRENTA_ROOT y el override `root`

    Args:
        config_path: Ruta explícita a config.yaml.
        root: Raíz del blog (opción --root del CLI). Tiene prioridad
              sobre config.yaml y sobre IMPRENTA_ROOT.

    Returns:
        AppConfig listo para usar.
    """
    start = Path(root).expanduser() if root else None
    proyecto_dir = _find_config_dir(start)

    env_path = proyecto_dir / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    if config_path is None:
        config_path = proyecto_dir / "config.yaml"

    raw_config: dict = {}
    source = None
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f) or {}
        source = config_path.parent

    config_resuelto = _resolve_env_recursive(raw_config)

    app_config = AppConfig(
        blog=_dict_to_dataclass(config_resuelto.get("blog") or {}, BlogConfig),
        git=_dict_to_dataclass(config_resuelto.get("git") or {}, GitConfig),
        source=source,
    )

    # Un placeholder sin resolver equivale a no tener valor
    if app_config.blog.root.startswith("${"):
        app_config.blog.root = ""

    if root:
        app_config.blog.root = str(root)
    elif not app_config.blog.root:
        if os.environ.get("IMPRENTA_ROOT"):
            app_config.blog.root = os.environ["IMPRENTA_ROOT"]
        elif source is not None:
            app_config.blog.root = str(source)

    return app_config
