"""Typer CLI for generating and resolving cache file locations."""
import random
from typing import Optional

import orjson
import typer

from . import cache
from .config import build_default_config, load_settings
from .controller import FileSystemCacheController
from .schema import CacheLocationConfig
from .utils import setup_logging

app = typer.Typer(add_completion=False)


def _fail(message: str):
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


@app.command()
def generate(
    identifier: Optional[str] = typer.Option(None, help="Identifier used as the cache file name."),
    fallback: bool = typer.Option(False, help="Use a random fallback file name."),
    seed: Optional[int] = typer.Option(None, help="Seed for fallback names (reproducible output)."),
):
    """Print the relative cache path without touching the filesystem."""
    if fallback and identifier is not None:
        _fail("--identifier and --fallback are mutually exclusive")
    try:
        config = CacheLocationConfig.fallback() if fallback else CacheLocationConfig(identifier=identifier)
    except ValueError:
        _fail("pass --identifier or --fallback")
    rng = random.Random(seed) if seed is not None else None
    typer.echo(cache.generate_path(config, rng))


@app.command()
def resolve(
    identifier: Optional[str] = typer.Option(None, help="Identifier used as the cache file name."),
    fallback: bool = typer.Option(False, help="Pick a random unused fallback file."),
    root: Optional[str] = typer.Option(None, help="Storage root the relative path is resolved against."),
    max_attempts: Optional[int] = typer.Option(None, help="Maximum fallback lookups before giving up."),
    config_file: Optional[str] = typer.Option(None, help="Settings YAML with a 'cache' section."),
    log_level: str = typer.Option("WARNING", help="Logging level."),
):
    """Resolve the cache file on disk and print the result as JSON."""
    if fallback and identifier is not None:
        _fail("--identifier and --fallback are mutually exclusive")
    setup_logging(log_level)
    try:
        settings = load_settings(config_file)
        if fallback:
            config = CacheLocationConfig.fallback()
        elif identifier is not None:
            config = CacheLocationConfig(identifier=identifier)
        else:
            config = build_default_config(settings)
        controller = FileSystemCacheController(root or settings.storage_root)
        location = cache.resolve_cache_location(
            config,
            controller,
            max_attempts=max_attempts if max_attempts is not None else settings.max_attempts,
        )
    except (cache.CacheLocationError, ValueError, OSError) as e:
        _fail(str(e))
    typer.echo(orjson.dumps(location.model_dump(), option=orjson.OPT_INDENT_2).decode("utf-8"))


def main():  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
