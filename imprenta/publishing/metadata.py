"""
metadata.py — Lectura de los descriptores de borradores.

El descriptor de un borrador suele ser YAML:

    title: "Postgres Queues"
    published_at: 2017-11-20
    tags: [postgres, queues]

Otras extensiones (por ejemplo `.rb` en blogs heredados) se tratan
como opacas: se mueven igual pero no se leen.

Uso:
    from imprenta.publishing.metadata import list_drafts
    for draft in list_drafts(store, collections):
        print(draft.slug, draft.title)
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from imprenta.publishing.artifacts import ArtifactStore, Collection
from imprenta.utils.logger import get_logger
from imprenta.utils.validators import validate_metadata, validate_slug

logger = get_logger("imprenta.metadata")

YAML_EXTENSIONS = (".yaml", ".yml")


def is_yaml(path: Path) -> bool:
    return Path(path).suffix.lower() in YAML_EXTENSIONS


def load_metadata(path: Path) -> dict[str, Any]:
    """
    Parsea el descriptor de un artefacto.

    Returns:
        El dict del YAML, o {} si el descriptor no es YAML.

    Raises:
        yaml.YAMLError: Si el YAML está mal formado.
        ValueError: Si el YAML no es un mapeo.
    """
    if not is_yaml(path):
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path.name}: metadata must be a mapping")
    return data


def check_metadata(path: Path) -> tuple[bool, str]:
    """
    load_metadata + validate_metadata en un solo paso.

    Los descriptores opacos siempre son válidos.
    """
    if not is_yaml(path):
        return True, ""
    try:
        data = load_metadata(path)
    except (yaml.YAMLError, ValueError) as e:
        return False, f"Unreadable metadata: {e}"
    return validate_metadata(data)


@dataclass
class DraftSummary:
    """
    Estado de un slug en las colecciones de borradores.

    Un borrador completo tiene contenido y metadata. Los incompletos
    se listan igual para que el autor los vea.
    """
    slug: str
    has_content: bool
    has_metadata: bool
    title: str = ""
    problem: str = ""

    @property
    def complete(self) -> bool:
        return self.has_content and self.has_metadata


def list_drafts(
    store: ArtifactStore,
    drafts: Collection,
    drafts_meta: Collection,
) -> list[DraftSummary]:
    """Todos los slugs presentes en cualquiera de las dos colecciones de borradores."""
    con_contenido = set(store.slugs(drafts))
    con_metadata = set(store.slugs(drafts_meta))

    resumenes = []
    for slug in sorted(con_contenido | con_metadata):
        resumen = DraftSummary(
            slug=slug,
            has_content=slug in con_contenido,
            has_metadata=slug in con_metadata,
        )
        slug_valido, error_slug = validate_slug(slug)
        if not slug_valido:
            # publish lo rechazaría; no se lee nada
            resumen.problem = f"invalid slug: {error_slug}"
        elif resumen.has_metadata:
            ruta = store.path_for(slug, drafts_meta)
            valido, error = check_metadata(ruta)
            if valido and is_yaml(ruta):
                resumen.title = str(load_metadata(ruta).get("title", ""))
            elif not valido:
                resumen.problem = error
        resumenes.append(resumen)

    logger.debug(f"{len(resumenes)} drafts found")
    return resumenes
