"""
conftest.py — Fixtures compartidas: un blog de prueba dentro de un repo Git real.
"""

from __future__ import annotations

from pathlib import Path

import git
import pytest

from imprenta.config import AppConfig, BlogConfig


def write_draft(
    root: Path,
    slug: str,
    title: str = "A Draft",
    meta_extension: str = ".yaml",
    content: bool = True,
    metadata: bool = True,
) -> None:
    """Crea los artefactos de un borrador en las colecciones por defecto."""
    if content:
        ruta = root / "drafts" / f"{slug}.md"
        ruta.parent.mkdir(parents=True, exist_ok=True)
        ruta.write_text(f"# {title}\n\nBody of {slug}.\n", encoding="utf-8")
    if metadata:
        ruta = root / "meta" / "drafts" / f"{slug}{meta_extension}"
        ruta.parent.mkdir(parents=True, exist_ok=True)
        if meta_extension in (".yaml", ".yml"):
            ruta.write_text(f'title: "{title}"\ntags: [test]\n', encoding="utf-8")
        else:
            ruta.write_text(f'title "{title}"\n', encoding="utf-8")


def commit_all(repo: git.Repo, message: str = "Add drafts") -> None:
    repo.git.add("-A")
    repo.git.commit("-m", message)


def tree_snapshot(root: Path) -> set[str]:
    """Archivos del working tree (sin .git), relativos a la raíz."""
    return {
        p.relative_to(root).as_posix()
        for p in root.rglob("*")
        if p.is_file() and ".git" not in p.relative_to(root).parts
    }


@pytest.fixture
def blog_repo(tmp_path) -> git.Repo:
    """Repo Git vacío con identidad configurada y un commit inicial."""
    repo = git.Repo.init(tmp_path)
    with repo.config_writer() as cw:
        cw.set_value("user", "name", "Test Author")
        cw.set_value("user", "email", "author@example.com")
        cw.set_value("commit", "gpgsign", "false")
    (tmp_path / "README.md").write_text("blog\n", encoding="utf-8")
    commit_all(repo, "Initial commit")
    return repo


@pytest.fixture
def blog_root(blog_repo) -> Path:
    return Path(blog_repo.working_tree_dir)


@pytest.fixture
def app_config(blog_root) -> AppConfig:
    return AppConfig(blog=BlogConfig(root=str(blog_root)))
