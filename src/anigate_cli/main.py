"""CLI entrypoint using typer."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from uuid import uuid4

import structlog
import typer
from pydantic import BaseModel
from rich.console import Console

from anigate_core.config.settings import Settings
from anigate_core.exceptions import AnigateError
from anigate_core.keys import cache_key
from anigate_infra.cache.factory import create_cache_client
from anigate_service.gateway import Gateway
from anigate_service.observability import (
    bind_request_context,
    clear_request_context,
    configure_logging,
)
from anigate_service.providers import BaseProvider, available_providers

app = typer.Typer(
    name="anigate",
    help="Cached gateway to anime metadata providers",
)
console = Console()
logger = structlog.get_logger()

VERSION = "0.1.0"


def _load_settings(*, verbose: bool = False, no_cache: bool = False) -> Settings:
    """Load settings from env/.env and apply CLI overrides."""
    settings = Settings()
    if verbose:
        settings.log_level = "DEBUG"
    if no_cache:
        settings.cache_backend = "none"
    configure_logging(settings)
    return settings


def _run_operation(
    settings: Settings,
    provider: str,
    call: Callable[[BaseProvider], Awaitable[BaseModel]],
) -> None:
    """Run one provider call through a fresh gateway and print it as JSON."""

    async def _go() -> BaseModel:
        async with Gateway.from_settings(settings) as gateway:
            return await call(gateway.provider(provider))

    bind_request_context(provider=provider)
    try:
        result = asyncio.run(_go())
    except (AnigateError, ValueError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    finally:
        clear_request_context()
    console.print_json(result.model_dump_json())


@app.command()
def search(
    provider: str = typer.Argument(..., help="Provider name, see `anigate providers`"),
    query: str = typer.Argument(..., help="Search text"),
    page: int = typer.Option(1, "--page", min=1, help="Result page"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Bypass the cache backend"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Search a provider's catalog."""
    settings = _load_settings(verbose=verbose, no_cache=no_cache)
    _run_operation(settings, provider, lambda p: p.search(query, page))


@app.command()
def info(
    provider: str = typer.Argument(..., help="Provider name"),
    anime_id: str = typer.Argument(..., help="Provider-specific anime id"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Bypass the cache backend"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Show the detail record for one anime."""
    settings = _load_settings(verbose=verbose, no_cache=no_cache)
    _run_operation(settings, provider, lambda p: p.info(anime_id))


@app.command()
def episodes(
    provider: str = typer.Argument(..., help="Provider name"),
    anime_id: str = typer.Argument(..., help="Provider-specific anime id"),
    page: int = typer.Option(1, "--page", min=1, help="Episode list page"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Bypass the cache backend"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """List one page of an anime's episodes."""
    settings = _load_settings(verbose=verbose, no_cache=no_cache)
    _run_operation(settings, provider, lambda p: p.episodes(anime_id, page))


@app.command("recent-episodes")
def recent_episodes(
    provider: str = typer.Argument(..., help="Provider name"),
    page: int = typer.Option(1, "--page", min=1, help="Result page"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Bypass the cache backend"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """List recently released episodes."""
    settings = _load_settings(verbose=verbose, no_cache=no_cache)
    _run_operation(settings, provider, lambda p: p.recent_episodes(page))


@app.command("cache-check")
def cache_check(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable debug logging"),
) -> None:
    """Write, read back and delete a probe key on the configured backend."""
    settings = _load_settings(verbose=verbose)
    try:
        ok = asyncio.run(_probe_cache(settings))
    except Exception as exc:
        logger.error("cache_check_failed", backend=settings.cache_backend, error=str(exc))
        console.print(f"[red]Cache backend '{settings.cache_backend}' failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    if ok is None:
        console.print("[yellow]No cache backend configured; providers are called directly[/yellow]")
        raise typer.Exit(code=1)
    if not ok:
        console.print(f"[red]Cache backend '{settings.cache_backend}' returned a wrong value[/red]")
        raise typer.Exit(code=1)
    console.print(f"[bold green]Cache backend '{settings.cache_backend}' OK[/bold green]")


async def _probe_cache(settings: Settings) -> bool | None:
    """Round-trip a probe key; None when caching is disabled."""
    client = create_cache_client(settings)
    if client is None:
        return None
    probe = cache_key("anigate", "cache-check", uuid4().hex)
    try:
        await client.set(probe, "ok", ttl_seconds=60)
        ok = await client.get(probe) == "ok"
        await client.delete(probe)
        return ok
    finally:
        await client.close()


@app.command()
def providers() -> None:
    """List available providers."""
    for name in available_providers():
        console.print(name)


@app.command()
def version() -> None:
    """Show version."""
    console.print(f"anigate v{VERSION}")


if __name__ == "__main__":
    app()
