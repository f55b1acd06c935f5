"""Command line entry point: `notecache -h HOST -p PORT -c CACHE_DIR`."""

from typing import Optional

import typer
import uvicorn
from pydantic import ValidationError

from notecache.config import Settings
from notecache.main import create_app

app = typer.Typer(
    name="notecache",
    help="NoteCache - plain-text notes served over HTTP from a cache directory",
    add_completion=False,
)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Server host"),
    port: Optional[str] = typer.Option(None, "--port", "-p", help="Server port"),
    cache: Optional[str] = typer.Option(None, "--cache", "-c", help="Cache directory"),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level"),
):
    """Start the note server."""
    if not host:
        typer.echo("Please, specify the server address", err=True)
        raise typer.Exit(code=1)
    if not port:
        typer.echo("Please, specify the server port", err=True)
        raise typer.Exit(code=1)
    if not cache:
        typer.echo(
            "Please, specify the path to the directory that will contain cached files",
            err=True,
        )
        raise typer.Exit(code=1)

    try:
        settings = Settings(host=host, port=port, cache_dir=cache, log_level=log_level)
    except ValidationError as e:
        typer.echo(f"Invalid configuration:\n{e}", err=True)
        raise typer.Exit(code=1)

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


def main():
    app()


if __name__ == "__main__":
    main()
