"""Shared helpers for CLI commands."""

import functools
import sys

from collections.abc import Callable
from typing import Any

import click

from src.common.logging import get_logger
from src.domain.exceptions import DomainException
from src.infrastructure.exceptions import InfrastructureError


logger = get_logger(__name__)


class BaseCommand:
    """Output helpers shared by command implementations."""

    @staticmethod
    def success(message: str) -> None:
        click.secho(message, fg="green", err=True)

    @staticmethod
    def warning(message: str) -> None:
        click.secho(message, fg="yellow", err=True)

    @staticmethod
    def error(message: str, exit_code: int | None = None) -> None:
        click.secho(message, fg="red", err=True)
        if exit_code is not None:
            sys.exit(exit_code)


def with_error_handling(func: Callable[..., Any]) -> Callable[..., Any]:
    """Report domain and infrastructure errors as a message and exit code 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (DomainException, InfrastructureError) as e:
            logger.error(f"Command {func.__name__} failed: {e}")
            BaseCommand.error(f"Error: {e}", exit_code=1)
        except OSError as e:
            BaseCommand.error(f"Error: {e}", exit_code=1)

    return wrapper
