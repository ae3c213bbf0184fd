from __future__ import annotations

import json
from pathlib import Path

import typer

from .app import run as app_run
from .config import Settings
from .data.store import DatasetStore

app = typer.Typer(help="Realtime sculpture guide")


def _open_store(data_path: Path | None) -> DatasetStore:
    path = data_path or Settings().sculpture_data_path
    store = DatasetStore(path)
    if not store.load():
        typer.echo(f"Could not load sculpture data from {path}", err=True)
        raise typer.Exit(code=2)
    return store


@app.command()
def serve(
    host: str | None = typer.Option(None, help="Interface to bind"),
    port: int | None = typer.Option(None, help="HTTP port"),
    backend: str | None = typer.Option(None, help="Upstream backend: openai or azure"),
    data_path: Path | None = typer.Option(None, help="Path to the sculpture JSON file"),
    verbose: bool = typer.Option(False, help="Print effective settings"),
) -> None:
    """Run the HTTP and WebSocket server."""
    overrides: dict[str, object] = {}
    if host is not None:
        overrides["host"] = host
    if port is not None:
        overrides["port"] = port
    if backend is not None:
        overrides["backend"] = backend
    if data_path is not None:
        overrides["sculpture_data_path"] = data_path
    settings = Settings(**overrides)
    if verbose:
        typer.echo(settings.model_dump_json(indent=2, exclude={"openai_api_key", "azure_openai_api_key"}))
    app_run(settings=settings)


@app.command()
def lookup(
    name: str = typer.Argument(..., help="Sculpture name, exact or partial"),
    data_path: Path | None = typer.Option(None, help="Path to the sculpture JSON file"),
) -> None:
    """Print the best matching sculpture record."""
    sculpture = _open_store(data_path).get_by_name(name)
    if sculpture is None:
        typer.echo("Sculpture not found", err=True)
        raise typer.Exit(code=1)
    typer.echo(sculpture.model_dump_json(indent=2, exclude_none=True))


@app.command()
def search(
    name: str | None = typer.Option(None, help="Name contains"),
    artist: str | None = typer.Option(None, help="Artist contains"),
    location: str | None = typer.Option(None, help="Location contains"),
    year: str | None = typer.Option(None, help="Year contains"),
    data_path: Path | None = typer.Option(None, help="Path to the sculpture JSON file"),
) -> None:
    """Print sculptures matching every given field."""
    results = _open_store(data_path).search(name=name, artist=artist, location=location, year=year)
    typer.echo(json.dumps([s.model_dump(exclude_none=True) for s in results], indent=2, ensure_ascii=False))


if __name__ == "__main__":  # pragma: no cover
    app()
