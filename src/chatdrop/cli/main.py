"""chatdrop CLI — run the services and peek at their state.

Usage:
    chatdrop chat                     # Run the chat relay (PORT or 3000)
    chatdrop uploads --port 3001      # Run the upload broadcaster
    chatdrop history                  # Print the chat history as JSON
    chatdrop files                    # List uploaded files
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import json
import os
import sys
from typing import Optional

import click
import httpx

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_URL = "http://localhost:3000"


def _base_url(url: Optional[str]) -> str:
    return (url or os.environ.get("CHATDROP_URL", DEFAULT_URL)).rstrip("/")


def _client(url: Optional[str]) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at a running service."""
    return httpx.AsyncClient(base_url=_base_url(url), timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str, ensure_ascii=False)


async def _get_json(url: Optional[str], path: str):
    async with _client(url) as c:
        try:
            r = await c.get(path)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            click.secho(
                f"Error: {path} returned {e.response.status_code}", fg="red", err=True
            )
            sys.exit(1)
        except httpx.TransportError as e:
            click.secho(
                f"Error: cannot reach {_base_url(url)} ({e})", fg="red", err=True
            )
            sys.exit(1)
        return r.json()


def _serve(app_path: str, host: Optional[str], port: Optional[int]):
    import uvicorn

    from chatdrop.config import settings

    uvicorn.run(
        app_path,
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="chatdrop", prog_name="chatdrop")
def main():
    """chatdrop — chat relay and upload broadcaster."""


@main.command()
@click.option("--host", help="Interface to bind (default CHATDROP_HOST or 0.0.0.0)")
@click.option("--port", "-p", type=int, help="Port (default PORT or 3000)")
def chat(host: Optional[str], port: Optional[int]):
    """Run the chat relay."""
    _serve("chatdrop.main:chat_app", host, port)


@main.command()
@click.option("--host", help="Interface to bind (default CHATDROP_HOST or 0.0.0.0)")
@click.option("--port", "-p", type=int, help="Port (default PORT or 3000)")
def uploads(host: Optional[str], port: Optional[int]):
    """Run the upload broadcaster."""
    _serve("chatdrop.main:upload_app", host, port)


@main.command()
@click.option("--url", "-u", help="Chat relay base URL (or set CHATDROP_URL)")
def history(url: Optional[str]):
    """Print the chat history, oldest first."""
    messages = _run(_get_json(url, "/messages"))
    click.echo(_pretty_json(messages))


@main.command()
@click.option("--url", "-u", help="Upload service base URL (or set CHATDROP_URL)")
def files(url: Optional[str]):
    """List files stored by the upload broadcaster."""
    entries = _run(_get_json(url, "/files"))
    if not entries:
        click.echo("No files uploaded.")
        return

    click.secho(f"Files ({len(entries)}):", bold=True)
    for entry in entries:
        click.echo(f"  {entry['name']:40s}  {entry['path']}")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    main()
