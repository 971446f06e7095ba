"""
validators.py -- Validacion de slugs y metadata de borradores.

Dos tipos de validacion:
1. Slug: que sea un identificador seguro para usar como nombre de archivo
2. Metadata: que el descriptor YAML de un borrador tenga lo minimo

Cada funcion retorna una tupla (es_valido, mensaje_de_error).
Si es_valido es True, el mensaje sera una cadena vacia.

El slug llega directo de la linea de comandos y se concatena a rutas
del working tree. Un slug como "../secrets" moveria archivos fuera de
las colecciones del blog, asi que se rechaza antes de tocar el disco.

Uso:
    from imprenta.utils.validators import validate_slug, validate_metadata

    valido, error = validate_slug("postgres-queues")
    valido, error = validate_metadata({"title": "Postgres Queues"})
"""

from __future__ import annotations

import datetime as dt
import re
from typing import Any


# =====================================================================
# Constantes de validacion
# =====================================================================

# Segmentos alfanumericos en minusculas separados por UN guion o guion bajo.
# Validos: "foo", "postgres-queues", "rate_limiting", "2017-retrospective"
# Invalidos: "../secrets", "a/b", "Foo", "hola--mundo", "-foo"
SLUG_PATTERN: re.Pattern[str] = re.compile(r"^[a-z0-9]+(?:[-_][a-z0-9]+)*$")

MAX_SLUG_LENGTH: int = 100

MAX_TITLE_LENGTH: int = 200


# =====================================================================
# Validacion de slug
# =====================================================================

def validate_slug(slug: str) -> tuple[bool, str]:
    """
    Valida que un slug sea apto para nombre de archivo dentro de una
    coleccion del blog.

    Reglas:
    - Solo letras minusculas (a-z), numeros (0-9), guiones y guiones bajos
    - No puede empezar ni terminar con separador
    - Sin separadores consecutivos
    - Sin separadores de ruta ni puntos (bloquea "../x" y "a/b")
    - Maximo 100 caracteres, no vacio

    Args:
        slug: El slug a validar (ej: "postgres-queues").

    Returns:
        Tupla (es_valido, mensaje_de_error).
    """
    if not isinstance(slug, str):
        return False, "The slug must be a string"

    if not slug:
        return False, "The slug cannot be empty"

    if len(slug) > MAX_SLUG_LENGTH:
        return False, (
            f"The slug is too long ({len(slug)} chars, "
            f"max {MAX_SLUG_LENGTH})"
        )

    if not SLUG_PATTERN.match(slug):
        # Mensaje especifico segun el problema
        if "/" in slug or "\\" in slug or ".." in slug:
            return False, (
                f"The slug looks like a path: '{slug}'. "
                "Slugs name a file inside a collection, not a location."
            )
        if slug != slug.lower():
            return False, f"The slug contains uppercase letters: '{slug}'"
        if re.search(r"[-_]{2,}", slug):
            return False, f"The slug contains consecutive separators: '{slug}'"
        if slug[0] in "-_" or slug[-1] in "-_":
            return False, f"The slug starts or ends with a separator: '{slug}'"
        chars_invalidos = "".join(sorted(set(re.findall(r"[^a-z0-9_-]", slug))))
        return False, (
            f"The slug contains invalid characters: {chars_invalidos!r}. "
            "Only a-z, 0-9, '-' and '_' are allowed."
        )

    return True, ""


# =====================================================================
# Validacion de metadata
# =====================================================================

def _is_iso_date(value: Any) -> bool:
    # PyYAML ya convierte fechas sin comillas a date/datetime
    if isinstance(value, (dt.date, dt.datetime)):
        return True
    if not isinstance(value, str):
        return False
    try:
        dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return False
    return True


def validate_metadata(data: dict[str, Any]) -> tuple[bool, str]:
    """
    Valida el descriptor de un borrador antes de publicarlo.

    Verifica:
    - Que `title` exista y sea texto no vacio de longitud razonable
    - Que `tags`, si existe, sea una lista de textos no vacios
    - Que `published_at`, si existe, sea una fecha ISO 8601

    La publicacion no se bloquea por esto; el Publisher solo advierte.

    Args:
        data: Diccionario parseado del YAML del borrador.

    Returns:
        Tupla (es_valido, mensaje_de_error).
    """
    if not isinstance(data, dict):
        return False, "Metadata must be a mapping, not " + type(data).__name__

    if "title" not in data:
        return False, "Missing required field: 'title'"

    titulo = data["title"]
    if not isinstance(titulo, str) or not titulo.strip():
        return False, "The title cannot be empty"
    if len(titulo) > MAX_TITLE_LENGTH:
        return False, (
            f"The title is too long ({len(titulo)} chars, "
            f"max {MAX_TITLE_LENGTH})"
        )

    if "tags" in data:
        tags = data["tags"]
        if not isinstance(tags, list):
            return False, "Tags must be a list"
        for tag in tags:
            if not isinstance(tag, str) or not tag.strip():
                return False, f"Invalid tag: {tag!r}. Each tag must be non-empty text"

    if "published_at" in data and not _is_iso_date(data["published_at"]):
        return False, (
            f"Invalid published_at: {data['published_at']!r}. "
            "Expected an ISO 8601 date (YYYY-MM-DD or YYYY-MM-DDTHH:MM:SS)"
        )

    return True, ""
