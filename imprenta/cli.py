"""
cli.py — Punto de entrada de Imprenta.

Este archivo maneja todos los comandos CLI usando Click.

Comandos disponibles:
    publish <slug>                     → Publica un borrador (script propio)
    imprenta publish <slug>            → Igual, como subcomando
    imprenta publish <slug> --dry-run  → Solo muestra lo que haría
    imprenta drafts                    → Lista los borradores pendientes
    imprenta config --show             → Muestra configuración
    imprenta config --validate         → Valida configuración
    imprenta health                    → Verifica el repo del blog

Códigos de salida:
    0 → Publicado (o dry-run OK)
    1 → Cualquier fallo; "No such draft: <slug>" si falta la metadata

Uso desde código (testing):
    from click.testing import CliRunner
    from imprenta.cli import main
    CliRunner().invoke(main, ["publish", "foo"])
"""

from __future__ import annotations

import sys

import click
import git as gitpython
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from imprenta import __version__
from imprenta.config import AppConfig, load_config
from imprenta.publishing.artifacts import ArtifactStore, collections_from_config
from imprenta.publishing.git_ops import GitOperations
from imprenta.publishing.metadata import list_drafts
from imprenta.publishing.publisher import Publisher, PublishStatus
from imprenta.utils.logger import get_logger, console as rich_console

logger = get_logger("imprenta.cli")

root_option = click.option(
    "--root", "-r",
    type=click.Path(file_okay=False),
    default=None,
    help="Raíz del blog (por defecto blog.root de config.yaml o el directorio actual)",
)


@click.group()
@click.version_option(version=__version__, prog_name="imprenta")
def main():
    """Imprenta — publica borradores de un blog versionado con Git."""
    pass


@click.command()
@click.argument("slug")
@root_option
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Verifica y muestra los movimientos, NO toca el repo",
)
@click.option(
    "--push/--no-push",
    default=None,
    help="Hace push tras el commit (por defecto git.push de config.yaml)",
)
def publish(slug: str, root: str | None, dry_run: bool, push: bool | None):
    """Publica el borrador SLUG: mueve contenido y metadata y hace commit."""
    try:
        config = load_config(root=root)
        publisher = Publisher.from_config(config)
        result = publisher.publish(slug, dry_run=dry_run, push=push)
    except FileNotFoundError as e:
        logger.error(str(e))
        sys.exit(1)
    except gitpython.InvalidGitRepositoryError as e:
        logger.error(f"Not a git repository: {e}")
        sys.exit(1)

    if dry_run and result.ok:
        for origen, destino in result.moves:
            logger.info(f"{origen.as_posix()} -> {destino.as_posix()}")
        logger.info(f"Commit: {result.commit_message}")
        return

    if not result.ok:
        # STORAGE_ERROR ya fue registrado por el Publisher
        if result.status is not PublishStatus.STORAGE_ERROR:
            logger.error(result.message)
        sys.exit(1)


main.add_command(publish)


@main.command()
@root_option
def drafts(root: str | None):
    """Lista los borradores pendientes de publicar."""
    config = load_config(root=root)
    cols = collections_from_config(config.blog)
    store = ArtifactStore(config.blog.root_path)

    resumenes = list_drafts(store, cols["drafts"], cols["drafts_meta"])
    if not resumenes:
        logger.info("No drafts")
        return

    tabla = Table(title="Drafts")
    tabla.add_column("Slug", style="cyan")
    tabla.add_column("Title")
    tabla.add_column("Status")

    for resumen in resumenes:
        if resumen.problem:
            estado = f"[yellow]{escape(resumen.problem)}[/yellow]"
        elif not resumen.has_metadata:
            estado = "[red]missing metadata[/red]"
        elif not resumen.has_content:
            estado = "[red]missing content[/red]"
        else:
            estado = "[green]ready[/green]"
        tabla.add_row(escape(resumen.slug), escape(resumen.title), estado)

    rich_console.print(tabla)


@main.command()
@root_option
@click.option("--show", is_flag=True, help="Muestra la configuración actual")
@click.option("--validate", is_flag=True, help="Valida la configuración")
def config(root: str | None, show: bool, validate: bool):
    """Gestiona la configuración de Imprenta."""
    cfg = load_config(root=root)

    if show:
        tabla = Table(title="imprenta configuration")
        tabla.add_column("Setting", style="cyan")
        tabla.add_column("Value", style="green")

        tabla.add_row("config.yaml", str(cfg.source or "(defaults)"))
        tabla.add_row("Blog root", str(cfg.blog.root_path))
        tabla.add_row("Drafts", cfg.blog.drafts_dir)
        tabla.add_row("Articles", cfg.blog.articles_dir)
        tabla.add_row("Drafts metadata", cfg.blog.drafts_meta_dir)
        tabla.add_row("Articles metadata", cfg.blog.articles_meta_dir)
        tabla.add_row("Content extension", cfg.blog.content_extension)
        tabla.add_row("Metadata extension", cfg.blog.meta_extension)
        tabla.add_row("Commit message", escape(cfg.git.commit_template))
        tabla.add_row("Push", f"{cfg.git.remote}/{cfg.git.default_branch}" if cfg.git.push else "no")

        rich_console.print(tabla)

    if validate:
        if not _validate_config(cfg):
            sys.exit(1)


@main.command()
@root_option
def health(root: str | None):
    """Verifica que el repo del blog esté listo para publicar."""
    cfg = load_config(root=root)
    raiz = cfg.blog.root_path
    errores = []

    # 1. La raíz existe y es un repo
    if not raiz.exists():
        errores.append(f"Blog root does not exist: {raiz}")
    else:
        git = GitOperations(raiz)
        try:
            if git.is_dirty():
                logger.warning("Working tree has uncommitted changes")
            else:
                logger.success(f"Git repository: {raiz}")
        except gitpython.InvalidGitRepositoryError:
            errores.append(f"Not a git repository: {raiz}")

        # 2. Directorios de borradores
        for directorio in (cfg.blog.drafts_dir, cfg.blog.drafts_meta_dir):
            if (raiz / directorio).is_dir():
                logger.success(f"Directory: {directorio}")
            else:
                logger.warning(f"Directory missing: {directorio}")

    if errores:
        rich_console.print(
            Panel(
                "\n".join(escape(e) for e in errores),
                title="Problems found",
                border_style="red",
            )
        )
        sys.exit(1)

    rich_console.print(Panel("Ready to publish", title="Health", border_style="green"))


# ============================================================
# Funciones auxiliares (privadas)
# ============================================================

def _validate_config(cfg: AppConfig) -> bool:
    """Valida la configuración y muestra resultado."""
    problemas = []

    if "{slug}" not in cfg.git.commit_template:
        problemas.append("git.commit_template must contain {slug}")
    try:
        cfg.git.commit_message("x")
    except (KeyError, ValueError, IndexError) as e:
        problemas.append(f"git.commit_template cannot be formatted: {e!r}")
    for nombre in ("content_extension", "meta_extension"):
        if not getattr(cfg.blog, nombre).startswith("."):
            problemas.append(f"blog.{nombre} must start with '.'")

    dirs = [
        cfg.blog.drafts_dir, cfg.blog.articles_dir,
        cfg.blog.drafts_meta_dir, cfg.blog.articles_meta_dir,
    ]
    if len(set(dirs)) != len(dirs):
        problemas.append("Draft and article directories must all be different")

    if problemas:
        for p in problemas:
            logger.error(p)
        return False

    logger.success("Configuration is valid")
    return True


if __name__ == "__main__":
    main()
