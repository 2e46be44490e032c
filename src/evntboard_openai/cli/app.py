"""Main CLI application."""

from pathlib import Path
from typing import Annotated

import typer

from evntboard_openai.cli.console import config_table, console, error, success

app = typer.Typer(
    name="evntboard-openai",
    help="OpenAI module for the EVNTBOARD hub",
    no_args_is_help=True,
)


EnvFileOption = Annotated[
    Path | None,
    typer.Option(
        "--env-file",
        "-e",
        help="Path to a .env file (default: .env in the current directory)",
    ),
]


@app.command()
def run(
    env_file: EnvFileOption = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            "-l",
            help="Log level (default: $LOG_LEVEL or INFO)",
        ),
    ] = None,
    rich: Annotated[
        bool,
        typer.Option(
            "--rich/--plain",
            help="Colorful log output",
        ),
    ] = False,
) -> None:
    """Connect to the hub and serve RPC methods until disconnected."""
    import asyncio
    import logging

    from websockets.exceptions import InvalidHandshake, InvalidURI

    from evntboard_openai.config import ConfigError, load_config
    from evntboard_openai.hub import HubModule
    from evntboard_openai.logging import configure_logging

    try:
        config = load_config(env_file)
    except ConfigError as e:
        error(str(e))
        raise typer.Exit(1) from None

    configure_logging(log_level or config.log_level, use_rich=rich)
    logger = logging.getLogger(__name__)

    module = HubModule(config)
    try:
        asyncio.run(module.run())
    except (OSError, InvalidURI, InvalidHandshake) as e:
        logger.error("hub_connection_failed", extra={"error": str(e)})
        raise typer.Exit(1) from None
    except KeyboardInterrupt:
        logger.info("interrupted")


@app.command()
def config(env_file: EnvFileOption = None) -> None:
    """Validate the environment and show the resulting configuration."""
    from evntboard_openai.config import ConfigError, load_config

    try:
        config_obj = load_config(env_file)
    except ConfigError as e:
        error(f"Configuration validation failed: {e}")
        raise typer.Exit(1) from None

    console.print(config_table(config_obj))
    success("Configuration is valid")


if __name__ == "__main__":
    app()
