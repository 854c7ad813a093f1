import logging

from dotenv import load_dotenv
from rich import print
from rich.logging import RichHandler

load_dotenv()

import click
import uvicorn

from vectorsearch.config import ServerSettings
from vectorsearch.errors import ConfigurationError


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )


@click.group()
def cli():
    """Main command group for the vector search relay."""
    pass


@cli.command()
@click.option(
    "--port",
    default=None,
    type=int,
    help="FastAPI Port (defaults to the PORT setting, 8000)",
)
@click.option(
    "--host",
    default=None,
    help="FastAPI Host (defaults to the HOST setting, 0.0.0.0)",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="FastAPI Reload (watch for file changes and auto-restart)",
)
def start(port, host, reload):
    """
    Run the FastAPI application.
    """
    try:
        server = ServerSettings.from_env()
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc

    host = host or server.HOST
    port = port or server.PORT

    configure_logging(server.LOG_LEVEL)
    print(f"\n[bold green]Vector search relay listening on {host}:{port}[/bold green]\n")

    uvicorn.run(
        "vectorsearch.api.app:app",
        host=host,
        port=port,
        reload=reload,
        log_config=None,
    )


if __name__ == "__main__":
    cli()
