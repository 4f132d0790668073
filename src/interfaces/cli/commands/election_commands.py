"""Election aggregate CLI commands."""

import asyncio
import json
import mimetypes

from pathlib import Path
from typing import Any, TextIO

import click

from src.application.dtos.election_dto import (
    DeleteElectionInputDto,
    GetElectionInputDto,
)
from src.domain.value_objects.media_upload import MediaUpload
from src.interfaces.cli.base import BaseCommand, with_error_handling


def _container() -> Any:
    from src.infrastructure.di.container import get_container, init_container

    try:
        return get_container()
    except RuntimeError:
        return init_container()


def read_upload(path: str) -> MediaUpload:
    """Load a file as a MediaUpload, guessing its content type."""
    file_path = Path(path)
    content_type, _ = mimetypes.guess_type(file_path.name)
    return MediaUpload(
        filename=file_path.name,
        content=file_path.read_bytes(),
        content_type=content_type or "application/octet-stream",
    )


def _dump(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


@click.group()
def elections():
    """Create, show and delete election aggregates."""
    pass


@elections.command()
@click.argument("payload_json", type=click.File("r"))
@click.option(
    "--topic-image", type=click.Path(exists=True, dir_okay=False), default=None
)
@click.option("--logo", type=click.Path(exists=True, dir_okay=False), default=None)
@click.option(
    "--question-image",
    "question_images",
    type=click.Path(exists=True, dir_okay=False),
    multiple=True,
    help="Image whose name contains the question's id (repeatable)",
)
@click.option(
    "--answer-image",
    "answer_images",
    type=click.Path(exists=True, dir_okay=False),
    multiple=True,
    help="Image whose name contains the answer's id (repeatable)",
)
@with_error_handling
def create(
    payload_json: TextIO,
    topic_image: str | None,
    logo: str | None,
    question_images: tuple[str, ...],
    answer_images: tuple[str, ...],
):
    """Create an election from PAYLOAD_JSON ("-" reads stdin)."""
    payload = payload_json.read()
    files: dict[str, Any] = {
        "questionImages": [read_upload(p) for p in question_images],
        "answerImages": [read_upload(p) for p in answer_images],
    }
    if topic_image:
        files["topicImage"] = read_upload(topic_image)
    if logo:
        files["logoBranding"] = read_upload(logo)

    result = asyncio.run(_run_create(payload, files))
    click.echo(_dump(result.to_dict()))
    if not result.success:
        BaseCommand.error(result.error_message or "Creation failed", exit_code=1)
    for failure in result.optional_failures:
        BaseCommand.warning(f"Optional {failure.feature} failed: {failure.message}")


async def _run_create(payload: str, files: dict[str, Any]) -> Any:
    container = _container()
    try:
        usecase = container.create_election_usecase()
        return await usecase.execute(payload, files)
    finally:
        await container.database.dispose()


@elections.command()
@click.argument("election_id", type=int)
@with_error_handling
def show(election_id: int):
    """Print the nested election ELECTION_ID as JSON."""
    result = asyncio.run(_run_show(election_id))
    if not result.success:
        BaseCommand.error(result.error_message or "Read failed", exit_code=1)
    if not result.found or result.election is None:
        BaseCommand.error(f"Election {election_id} not found", exit_code=1)
    click.echo(_dump(result.election.to_dict()))


async def _run_show(election_id: int) -> Any:
    container = _container()
    try:
        usecase = container.manage_elections_usecase()
        return await usecase.get_election(GetElectionInputDto(id=election_id))
    finally:
        await container.database.dispose()


@elections.command()
@click.argument("election_id", type=int)
@with_error_handling
def delete(election_id: int):
    """Delete election ELECTION_ID with its questions, answers and media."""
    result = asyncio.run(_run_delete(election_id))
    if not result.success:
        BaseCommand.error(result.error_message or "Delete failed", exit_code=1)
    BaseCommand.success(
        f"Deleted election {election_id} ({result.deleted_assets} stored assets)"
    )


async def _run_delete(election_id: int) -> Any:
    container = _container()
    try:
        usecase = container.manage_elections_usecase()
        return await usecase.delete_election(DeleteElectionInputDto(id=election_id))
    finally:
        await container.database.dispose()
