"""ballotforge command line entry point."""

import click

from src.common.logging import setup_logging
from src.infrastructure.config.settings import get_settings
from src.interfaces.cli.commands.database import database
from src.interfaces.cli.commands.election_commands import elections


@click.group()
@click.option(
    "--log-level",
    default=None,
    help="Override LOG_LEVEL (DEBUG, INFO, WARNING, ...)",
)
@click.option("--json-logs", is_flag=True, default=False, help="Log JSON lines")
def ballotforge(log_level: str | None, json_logs: bool):
    """Election aggregate management."""
    settings = get_settings()
    setup_logging(
        log_level=log_level or settings.log_level,
        json_logs=json_logs or settings.log_json,
        sql_echo=settings.sql_echo,
    )


ballotforge.add_command(database)
ballotforge.add_command(elections)


def main() -> None:
    ballotforge()


if __name__ == "__main__":
    main()
