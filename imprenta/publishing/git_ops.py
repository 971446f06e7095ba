"""
git_ops.py — Imprenta habla con Git.

Este archivo maneja las operaciones Git que necesita la publicación
de un borrador. Usa GitPython para interactuar con el working tree.

Flujo de una publicación:
    1. git mv <borrador metadata> <publicado metadata>
    2. git mv <borrador contenido> <publicado contenido>
    3. git commit -F <archivo temporal con "Publishing '<slug>'">
    4. (opcional) git push <remote> <branch>

Los pasos 1-3 no son transaccionales: si el 2 falla, el 1 ya ocurrió.
Git solo garantiza atomicidad del commit.

Uso:
    from imprenta.publishing.git_ops import GitOperations
    git = GitOperations(repo_path)
    git.move(Path("drafts/foo.md"), Path("articles/foo.md"))
    sha = git.commit_with_message_file("Publishing 'foo'")
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import git as gitpython

from imprenta.utils.logger import get_logger

logger = get_logger("imprenta.git")


class GitOperations:
    """
    Gestiona las operaciones Git sobre el working tree del blog.

    Todas las rutas que recibe son relativas a la raíz del repo o
    absolutas dentro de ella.

    Args:
        repo_path: Ruta al repositorio local del blog
    """

    def __init__(self, repo_path: str | Path):
        self._repo_path = Path(repo_path).expanduser().resolve()
        self._repo: gitpython.Repo | None = None

    @property
    def repo_path(self) -> Path:
        return self._repo_path

    def _get_repo(self) -> gitpython.Repo:
        """
        Obtiene o abre el repositorio Git.

        Raises:
            git.InvalidGitRepositoryError: Si la ruta no es un repo Git.
            FileNotFoundError: Si la ruta no existe.
        """
        if self._repo is None:
            if not self._repo_path.exists():
                raise FileNotFoundError(
                    f"Blog repository not found: {self._repo_path}\n"
                    "Check blog.root in config.yaml or IMPRENTA_ROOT."
                )
            self._repo = gitpython.Repo(self._repo_path)
        return self._repo

    def verify(self) -> None:
        """Abre el repo para fallar antes de mover nada."""
        self._get_repo()

    def _rel(self, path: Path) -> str:
        """Ruta relativa al repo en formato POSIX, como la espera git."""
        path = Path(path)
        if path.is_absolute():
            path = path.relative_to(self._repo_path)
        return path.as_posix()

    def is_tracked(self, path: Path) -> bool:
        """True si git conoce el archivo (está en el índice)."""
        repo = self._get_repo()
        try:
            repo.git.ls_files("--error-unmatch", "--", self._rel(path))
        except gitpython.GitCommandError:
            return False
        return True

    def is_dirty(self) -> bool:
        return self._get_repo().is_dirty(untracked_files=True)

    def move(self, source: Path, target: Path) -> None:
        """
        git mv: mueve un archivo versionado preservando su historia.

        Raises:
            git.GitCommandError: Si git rechaza el movimiento.
        """
        repo = self._get_repo()
        repo.git.mv("--", self._rel(source), self._rel(target))
        logger.debug(f"git mv {self._rel(source)} {self._rel(target)}")

    def add(self, path: Path) -> None:
        """git add de un solo archivo."""
        repo = self._get_repo()
        repo.git.add("--", self._rel(path))
        logger.debug(f"git add {self._rel(path)}")

    def commit_with_message_file(self, message: str) -> str:
        """
        Hace commit de lo que esté en el índice leyendo el mensaje
        desde un archivo temporal (git commit -F).

        El archivo se borra aunque el commit falle.

        Args:
            message: Mensaje del commit.

        Returns:
            Hash del commit creado.

        Raises:
            git.GitCommandError: Si git commit falla (índice vacío, hooks...).
        """
        repo = self._get_repo()

        fd, ruta_mensaje = tempfile.mkstemp(prefix="imprenta-", suffix=".txt")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(message + "\n")
            repo.git.commit("-F", ruta_mensaje)
        finally:
            os.unlink(ruta_mensaje)

        sha = repo.head.commit.hexsha
        logger.debug(f"Commit created: {sha[:7]} {message}")
        return sha

    def push(self, remote: str, branch: str) -> None:
        """
        Empuja la rama al remoto configurado.

        Raises:
            RuntimeError: Si el remoto no existe o git push falla.
        """
        repo = self._get_repo()
        try:
            origin = repo.remote(remote)
            for info in origin.push(branch):
                if info.flags & gitpython.PushInfo.ERROR:
                    raise gitpython.GitCommandError(
                        ["git", "push", remote, branch], 1, info.summary
                    )
            logger.success(f"Pushed to {remote}/{branch}")
        except (ValueError, gitpython.GitCommandError) as e:
            logger.error(f"git push failed: {e}")
            raise RuntimeError(f"git push failed: {e}") from e
