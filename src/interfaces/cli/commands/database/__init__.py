"""Database management CLI commands."""

import asyncio

import click

from src.interfaces.cli.base import BaseCommand, with_error_handling


@click.group()
def database():
    """Database management commands."""
    pass


@database.command()
@with_error_handling
def init():
    """Create every table that does not exist yet.

    For PostgreSQL deployments prefer ``alembic upgrade head``.
    """
    url = asyncio.run(_run_init())
    BaseCommand.success(f"Database initialized: {url}")


async def _run_init() -> str:
    from src.infrastructure.di.container import get_container, init_container

    try:
        container = get_container()
    except RuntimeError:
        container = init_container()

    try:
        await container.database.create_all()
        return container.database.url
    finally:
        await container.database.dispose()
