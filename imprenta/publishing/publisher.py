"""
publisher.py — Convierte un borrador en artículo publicado.

Orden de operaciones:

    Precondiciones (si fallan, NADA cambia en disco):
        1. El slug es válido
        2. Existe la metadata del borrador
        3. Existe el contenido del borrador
        4. No existe ya un artículo publicado con ese slug
        5. git.commit_template se puede formatear con el slug

    Secuencia (sin rollback):
        6. Mover metadata a publicados
        7. Mover contenido a publicados
        8. Commit "Publishing '<slug>'"
        9. Push (opcional)

Si algo falla a partir del paso 6, el resultado lista los movimientos
que sí ocurrieron para que el operador termine a mano. No hay
transacción compensatoria.

Uso:
    from imprenta.publishing.publisher import Publisher
    publisher = Publisher.from_config(config)
    result = publisher.publish("postgres-queues")
    if not result.ok:
        print(result.message)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import git as gitpython

from imprenta.config import AppConfig
from imprenta.publishing.artifacts import (
    ArtifactError,
    ArtifactStore,
    collections_from_config,
)
from imprenta.publishing.git_ops import GitOperations
from imprenta.publishing.metadata import check_metadata
from imprenta.utils.logger import get_logger
from imprenta.utils.validators import validate_slug

logger = get_logger("imprenta.publisher")


class PublishStatus(Enum):
    """
    Resultado de una publicación.

    PUBLISHED         → Movido y commiteado
    PLANNED           → Dry-run: precondiciones OK, nada se movió
    INVALID_SLUG      → El slug no es un nombre de archivo seguro
    NOT_FOUND         → Falta algún artefacto del borrador
    ALREADY_PUBLISHED → Ya hay un artículo con ese slug
    INVALID_CONFIG    → git.commit_template no se puede formatear
    STORAGE_ERROR     → Falló Git o el disco a mitad del proceso
    """
    PUBLISHED = "published"
    PLANNED = "planned"
    INVALID_SLUG = "invalid_slug"
    NOT_FOUND = "not_found"
    ALREADY_PUBLISHED = "already_published"
    INVALID_CONFIG = "invalid_config"
    STORAGE_ERROR = "storage_error"


@dataclass
class PublishResult:
    """
    Resultado estructurado de Publisher.publish().

    Campos:
        status: Qué pasó
        slug: El slug pedido
        message: Texto para el operador
        moves: Movimientos (origen, destino) hechos o planeados
        commit_message: Mensaje del commit, hecho o planeado
        commit_sha: Hash del commit si se creó
        pushed: Si se hizo push
    """
    status: PublishStatus
    slug: str
    message: str = ""
    moves: list[tuple[Path, Path]] = field(default_factory=list)
    commit_message: str = ""
    commit_sha: str = ""
    pushed: bool = False

    @property
    def ok(self) -> bool:
        return self.status in (PublishStatus.PUBLISHED, PublishStatus.PLANNED)


class Publisher:
    """
    Publica borradores: verifica, mueve ambos artefactos y commitea.

    Args:
        config: Configuración de la app
        store: Almacén de artefactos sobre la raíz del blog
        git: Operaciones Git sobre la misma raíz
    """

    def __init__(self, config: AppConfig, store: ArtifactStore, git: GitOperations):
        self._config = config
        self._store = store
        self._git = git
        self._cols = collections_from_config(config.blog)

    @classmethod
    def from_config(cls, config: AppConfig) -> Publisher:
        git = GitOperations(config.blog.root_path)
        store = ArtifactStore(config.blog.root_path, git)
        return cls(config, store, git)

    def _planned_moves(self, slug: str) -> list[tuple[Path, Path]]:
        s = self._store
        c = self._cols
        return [
            (
                s.relative(s.path_for(slug, c["drafts_meta"])),
                s.relative(s.path_for(slug, c["articles_meta"])),
            ),
            (
                s.relative(s.path_for(slug, c["drafts"])),
                s.relative(s.path_for(slug, c["articles"])),
            ),
        ]

    def check(self, slug: str) -> PublishResult | None:
        """
        Evalúa las precondiciones sin tocar el disco.

        Returns:
            None si se puede publicar, o el PublishResult del fallo.
        """
        valido, error = validate_slug(slug)
        if not valido:
            return PublishResult(PublishStatus.INVALID_SLUG, slug, error)

        c = self._cols
        try:
            if not self._store.exists(slug, c["drafts_meta"]):
                return PublishResult(
                    PublishStatus.NOT_FOUND, slug, f"No such draft: {slug}"
                )
            if not self._store.exists(slug, c["drafts"]):
                falta = self._store.relative(self._store.path_for(slug, c["drafts"]))
                return PublishResult(
                    PublishStatus.NOT_FOUND,
                    slug,
                    f"Draft '{slug}' has no content file: {falta.as_posix()}",
                )
            for nombre in ("articles_meta", "articles"):
                if self._store.exists(slug, c[nombre]):
                    ruta = self._store.relative(self._store.path_for(slug, c[nombre]))
                    return PublishResult(
                        PublishStatus.ALREADY_PUBLISHED,
                        slug,
                        f"'{slug}' is already published: {ruta.as_posix()}",
                    )
        except ArtifactError as e:
            return PublishResult(PublishStatus.INVALID_SLUG, slug, str(e))

        return None

    def publish(self, slug: str, dry_run: bool = False, push: bool | None = None) -> PublishResult:
        """
        Publica el borrador `slug`.

        Args:
            slug: Identificador del borrador.
            dry_run: Solo verifica y devuelve los movimientos planeados.
            push: Hace push tras el commit. None usa git.push de config.

        Returns:
            PublishResult con el estado final.

        Raises:
            FileNotFoundError: Si la raíz del blog no existe.
            git.InvalidGitRepositoryError: Si la raíz no es un repo Git.
        """
        self._git.verify()

        fallo = self.check(slug)
        if fallo is not None:
            logger.debug(f"publish {slug}: {fallo.status.value}")
            return fallo

        c = self._cols
        meta_path = self._store.path_for(slug, c["drafts_meta"])
        valido, error = check_metadata(meta_path)
        if not valido:
            logger.warning(f"{slug}: {error}")

        try:
            mensaje = self._config.git.commit_message(slug)
        except (KeyError, ValueError, IndexError) as e:
            return PublishResult(
                PublishStatus.INVALID_CONFIG,
                slug,
                f"Invalid git.commit_template {self._config.git.commit_template!r}: {e!r}",
            )

        planeados = self._planned_moves(slug)
        if dry_run:
            return PublishResult(
                PublishStatus.PLANNED,
                slug,
                f"Would publish '{slug}'",
                moves=planeados,
                commit_message=mensaje,
            )

        if push is None:
            push = self._config.git.push

        hechos: list[tuple[Path, Path]] = []
        resultado = PublishResult(
            PublishStatus.PUBLISHED, slug, moves=hechos, commit_message=mensaje
        )
        try:
            self._store.relocate(slug, c["drafts_meta"], c["articles_meta"])
            hechos.append(planeados[0])
            self._store.relocate(slug, c["drafts"], c["articles"])
            hechos.append(planeados[1])

            resultado.commit_sha = self._git.commit_with_message_file(mensaje)

            if push:
                self._git.push(self._config.git.remote, self._config.git.default_branch)
                resultado.pushed = True
        except (gitpython.GitCommandError, OSError, ArtifactError, RuntimeError) as e:
            resultado.status = PublishStatus.STORAGE_ERROR
            resultado.message = _describe_partial_failure(slug, e, resultado)
            logger.error(resultado.message)
            return resultado

        resultado.message = f"Published '{slug}' ({resultado.commit_sha[:7]})"
        logger.success(resultado.message)
        return resultado


def _describe_partial_failure(slug: str, error: Exception, result: PublishResult) -> str:
    """Mensaje para el operador con lo que quedó a medias."""
    lineas = [f"Publishing '{slug}' failed: {error}"]
    if result.commit_sha:
        lineas.append(f"Commit {result.commit_sha[:7]} was created but not pushed.")
    elif result.moves:
        movidos = ", ".join(f"{src.as_posix()} -> {dst.as_posix()}" for src, dst in result.moves)
        lineas.append(f"Already moved (not committed): {movidos}")
    else:
        lineas.append("Nothing was moved.")
    return "\n".join(lineas)
