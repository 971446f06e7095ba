"""
artifacts.py — Los archivos de un borrador y dónde viven.

Cada borrador tiene dos artefactos identificados por el mismo slug:

    drafts/<slug>.md              ← contenido (markdown)
    meta/drafts/<slug>.yaml       ← metadata (título, fecha, tags)

Al publicarse pasan a las colecciones paralelas:

    articles/<slug>.md
    meta/articles/<slug>.yaml

ArtifactStore trata las cuatro colecciones igual: encontrar un
artefacto por slug y reubicarlo de una colección a otra. La lógica de
mover no se duplica por tipo de artefacto.

Uso:
    from imprenta.publishing.artifacts import ArtifactStore, collections_from_config
    cols = collections_from_config(config.blog)
    store = ArtifactStore(config.blog.root_path, git)
    store.relocate("foo", cols["drafts_meta"], cols["articles_meta"])
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from imprenta.config import BlogConfig
from imprenta.publishing.git_ops import GitOperations
from imprenta.utils.logger import get_logger

logger = get_logger("imprenta.artifacts")


# ============================================================
# Errores
# ============================================================

class ArtifactError(Exception):
    """Base de los errores del almacén de artefactos."""


class ArtifactNotFoundError(ArtifactError):
    """El slug no tiene artefacto en la colección pedida."""

    def __init__(self, slug: str, collection: Collection, path: Path):
        self.slug = slug
        self.collection = collection
        self.path = path
        super().__init__(f"No {collection.name} artifact for '{slug}': {path}")


class ArtifactExistsError(ArtifactError):
    """El destino de una reubicación ya existe."""

    def __init__(self, slug: str, collection: Collection, path: Path):
        self.slug = slug
        self.collection = collection
        self.path = path
        super().__init__(
            f"'{slug}' already exists in {collection.name}: {path}"
        )


class InvalidSlugError(ArtifactError, ValueError):
    """El slug resolvería a una ruta fuera de su colección."""


# ============================================================
# Modelos
# ============================================================

@dataclass(frozen=True)
class Collection:
    """
    Un directorio del blog que guarda artefactos de un tipo.

    Attributes:
        name: Nombre lógico (ej: "drafts_meta")
        directory: Ruta relativa a la raíz del blog
        extension: Extensión de los archivos, con punto (ej: ".md")
    """
    name: str
    directory: str
    extension: str

    def filename(self, slug: str) -> str:
        return f"{slug}{self.extension}"


@dataclass(frozen=True)
class Artifact:
    """Un archivo existente de un slug dentro de una colección."""
    slug: str
    collection: Collection
    path: Path


def collections_from_config(blog: BlogConfig) -> dict[str, Collection]:
    """Las cuatro colecciones del blog según config.yaml."""
    return {
        "drafts": Collection("drafts", blog.drafts_dir, blog.content_extension),
        "articles": Collection("articles", blog.articles_dir, blog.content_extension),
        "drafts_meta": Collection("drafts_meta", blog.drafts_meta_dir, blog.meta_extension),
        "articles_meta": Collection(
            "articles_meta", blog.articles_meta_dir, blog.meta_extension
        ),
    }


# ============================================================
# Almacén
# ============================================================

class ArtifactStore:
    """
    Encuentra y reubica artefactos por slug.

    Si recibe un GitOperations, los archivos versionados se mueven con
    `git mv` (la historia los sigue) y los no versionados se renombran
    en disco y se agregan al índice. Sin Git, solo se renombran.

    Args:
        root: Raíz del blog (working tree)
        git: Operaciones Git sobre esa raíz, opcional
    """

    def __init__(self, root: str | Path, git: GitOperations | None = None):
        self._root = Path(root).expanduser().resolve()
        self._git = git

    @property
    def root(self) -> Path:
        return self._root

    def relative(self, path: Path) -> Path:
        """Ruta relativa a la raíz del blog (para logs y para git)."""
        return Path(path).relative_to(self._root)

    def path_for(self, slug: str, collection: Collection) -> Path:
        """
        Ruta absoluta del artefacto de `slug` en `collection`.

        Raises:
            InvalidSlugError: Si el slug está vacío, contiene separadores
                de ruta o resuelve fuera del directorio de la colección.
        """
        if not slug or "/" in slug or "\\" in slug or slug in (".", ".."):
            raise InvalidSlugError(f"Invalid slug: {slug!r}")

        directorio = (self._root / collection.directory).resolve()
        ruta = directorio / collection.filename(slug)
        if ruta.resolve().parent != directorio:
            raise InvalidSlugError(
                f"Slug {slug!r} escapes the {collection.name} collection"
            )
        return ruta

    def exists(self, slug: str, collection: Collection) -> bool:
        return self.path_for(slug, collection).is_file()

    def find(self, slug: str, collection: Collection) -> Artifact:
        """
        Busca el artefacto de un slug.

        Raises:
            ArtifactNotFoundError: Si el archivo no existe.
        """
        ruta = self.path_for(slug, collection)
        if not ruta.is_file():
            raise ArtifactNotFoundError(slug, collection, self.relative(ruta))
        return Artifact(slug=slug, collection=collection, path=ruta)

    def slugs(self, collection: Collection) -> list[str]:
        """
        Slugs presentes en una colección, ordenados.

        Se omiten los nombres que path_for no acepta (como `...yaml`,
        que daría el slug `..`).
        """
        directorio = self._root / collection.directory
        if not directorio.is_dir():
            return []
        encontrados = []
        for p in directorio.iterdir():
            if not p.is_file() or not p.name.endswith(collection.extension):
                continue
            slug = p.name[: -len(collection.extension)]
            try:
                self.path_for(slug, collection)
            except InvalidSlugError:
                logger.debug(f"Skipping {p.name} in {collection.directory}")
                continue
            encontrados.append(slug)
        return sorted(encontrados)

    def relocate(self, slug: str, source: Collection, target: Collection) -> Artifact:
        """
        Mueve el artefacto de `slug` de `source` a `target`.

        Crea el directorio destino si hace falta. Nunca sobrescribe.

        Returns:
            El artefacto en su nueva ubicación.

        Raises:
            ArtifactNotFoundError: Si no hay artefacto en `source`.
            ArtifactExistsError: Si ya hay uno en `target`.
            git.GitCommandError / OSError: Si falla el movimiento.
        """
        origen = self.find(slug, source)
        destino = self.path_for(slug, target)
        if destino.exists():
            raise ArtifactExistsError(slug, target, self.relative(destino))

        destino.parent.mkdir(parents=True, exist_ok=True)
        origen_rel = self.relative(origen.path)
        destino_rel = self.relative(destino)

        if self._git is not None and self._git.is_tracked(origen_rel):
            self._git.move(origen_rel, destino_rel)
        else:
            origen.path.rename(destino)
            if self._git is not None:
                self._git.add(destino_rel)

        logger.debug(f"Moved {origen_rel.as_posix()} -> {destino_rel.as_posix()}")
        return Artifact(slug=slug, collection=target, path=destino)
