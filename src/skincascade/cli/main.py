"""skincascade CLI entry point."""
from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from typing import Iterator

import click

from skincascade.config import SkinConfig
from skincascade.errors import SkinError
from skincascade.model.skin import IECondition, Media, Role, Skin
from skincascade.service import SkinService

_ROLE_CHOICE = click.Choice([r.value for r in Role])
_MEDIA_CHOICE = click.Choice([m.value for m in Media])
_IE_CHOICE = click.Choice([c.value for c in IECondition])


def _store_options(fn):
    fn = click.option(
        "--environment",
        default="development",
        envvar="SKINCASCADE_ENV",
        help="Deployment environment; staging and production build caches on import",
    )(fn)
    fn = click.option(
        "--public-root",
        default="public",
        envvar="SKINCASCADE_PUBLIC_ROOT",
        type=click.Path(file_okay=False),
        help="Directory served as the site root",
    )(fn)
    fn = click.option(
        "--db", default="skins.db", envvar="SKINCASCADE_DB", help="Database path"
    )(fn)
    return fn


@contextmanager
def _open_service(db: str, public_root: str, environment: str) -> Iterator[SkinService]:
    """Yield an initialized service; skin and filesystem errors end the command with status 1."""
    service = SkinService(
        SkinConfig(db_path=db, public_root=public_root, environment=environment)
    )
    service.initialize()
    try:
        yield service
    except (SkinError, OSError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    finally:
        service.close()


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log progress")
def cli(verbose: bool) -> None:
    """skincascade: layered stylesheet skins and their file caches."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@_store_options
def init(db: str, public_root: str, environment: str) -> None:
    """Create the database and the Default skin."""
    with _open_service(db, public_root, environment) as service:
        skin = service.default_skin()
    click.echo(f"Initialized {db} (default skin {skin.id})")


@cli.command()
@click.option("--title", required=True, help="Unique skin title")
@click.option("--css", default="", help="Literal CSS")
@click.option(
    "--css-file",
    type=click.File("r", encoding="utf-8"),
    default=None,
    help="Read literal CSS from a file",
)
@click.option("--role", type=_ROLE_CHOICE, default=None, help="Skin role")
@click.option("--media", "media", type=_MEDIA_CHOICE, multiple=True, help="Media type (repeatable)")
@click.option("--ie-condition", type=_IE_CHOICE, default=None, help="Legacy IE condition")
@click.option("--parent", "parents", type=int, multiple=True, help="Parent skin id, in order (repeatable)")
@_store_options
def create(
    title: str,
    css: str,
    css_file,
    role: str | None,
    media: tuple[str, ...],
    ie_condition: str | None,
    parents: tuple[int, ...],
    db: str,
    public_root: str,
    environment: str,
) -> None:
    """Create a skin."""
    if css_file is not None:
        css = css_file.read()
    with _open_service(db, public_root, environment) as service:
        for parent_id in parents:
            service.get_skin(parent_id)
        skin = service.create_skin(
            Skin(title=title, css=css, role=role, media=media, ie_condition=ie_condition)
        )
        if parents:
            service.set_parents(skin.id, parents)
    click.echo(f"Skin created: {skin.id}")


@cli.command()
@click.option("--child", required=True, type=int, help="Child skin id")
@click.option("--parent", required=True, type=int, help="Parent skin id")
@click.option("--position", type=int, default=None, help="Position among the child's parents")
@_store_options
def link(child: int, parent: int, position: int | None, db: str, public_root: str, environment: str) -> None:
    """Add a parent to a skin."""
    with _open_service(db, public_root, environment) as service:
        added = service.add_parent(child, parent, position)
    click.echo(f"Linked {parent} under {child} at position {added.position}")


@cli.command()
@click.argument("skin_id", type=int)
@click.option("--role", "roles", type=_ROLE_CHOICE, multiple=True, help="Role to include (repeatable)")
@_store_options
def style(skin_id: int, roles: tuple[str, ...], db: str, public_root: str, environment: str) -> None:
    """Print the markup for a skin."""
    with _open_service(db, public_root, environment) as service:
        markup = service.style(skin_id, roles) if roles else service.style(skin_id)
    click.echo(markup)


@cli.command()
@click.argument("skin_id", type=int)
@_store_options
def cache(skin_id: int, db: str, public_root: str, environment: str) -> None:
    """Write a skin's cascade to cache files."""
    with _open_service(db, public_root, environment) as service:
        skin = service.cache_skin(skin_id)
        segments = service.file_cache.segments(skin)
    click.echo(f"Cached skin {skin_id} in {len(segments)} file(s)")


@cli.command("clear-cache")
@click.argument("skin_id", type=int)
@_store_options
def clear_cache(skin_id: int, db: str, public_root: str, environment: str) -> None:
    """Remove a skin's cache files."""
    with _open_service(db, public_root, environment) as service:
        service.clear_cache(skin_id)
    click.echo(f"Cleared cache for skin {skin_id}")


@cli.command()
@_store_options
def rebuild(db: str, public_root: str, environment: str) -> None:
    """Rebuild the cache files of every cached skin."""
    with _open_service(db, public_root, environment) as service:
        rebuilt = service.rebuild_cached()
    click.echo(f"Rebuilt {len(rebuilt)} cached skin(s)")


@cli.command("import-site")
@_store_options
def import_site(db: str, public_root: str, environment: str) -> None:
    """Import the versioned site skins under <public-root>/stylesheets/site."""
    with _open_service(db, public_root, environment) as service:
        umbrellas = service.import_site_skins()
    for skin in umbrellas:
        click.echo(f"Imported {skin.title} ({skin.id})")


@cli.command("list")
@_store_options
def list_skins(db: str, public_root: str, environment: str) -> None:
    """List all skins."""
    with _open_service(db, public_root, environment) as service:
        skins = service.list_skins()
    for skin in skins:
        flag = " [cached]" if skin.cached else ""
        click.echo(f"{skin.id}\t{skin.effective_role}\t{skin.title}{flag}")


@cli.command("set-default")
@click.argument("skin_id", type=int)
@_store_options
def set_default(skin_id: int, db: str, public_root: str, environment: str) -> None:
    """Make a skin the site-wide default."""
    with _open_service(db, public_root, environment) as service:
        service.set_default_skin(skin_id)
    click.echo(f"Default skin set to {skin_id}")
