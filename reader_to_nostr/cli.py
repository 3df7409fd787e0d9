"""
Command-line interface for reader-to-nostr.

Uses Typer to provide commands for extracting an article, managing the
signing key and relay list, adjusting reader preferences and publishing
the current article. Supports loading .env files for key configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import NoReturn

from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table
import typer

from .config import AppConfig, get_secret_key, load_config
from .core.errors import ReaderToNostrError, StaleArticle
from .core.session import ArticleStore
from .logging_utils import setup_logging
from .markdown import article_body
from .nostr.keys import KeyManager
from .nostr.relays import RelaySetManager
from .preferences import FONT_STEP, change_font_size, load_preferences, set_theme, toggle_theme
from .runner import build_storage, run_extract, run_publish
from .storage import JsonStateStore

app = typer.Typer(add_completion=False, help="Share readable web articles on Nostr.")
relays_app = typer.Typer(add_completion=False, help="Manage the relay list.")
prefs_app = typer.Typer(add_completion=False, help="Reader display preferences.")
app.add_typer(relays_app, name="relays")
app.add_typer(prefs_app, name="prefs")

console = Console()


@dataclass
class CliState:
    cfg: AppConfig
    storage: JsonStateStore
    logger: logging.Logger


def _state(ctx: typer.Context) -> CliState:
    return ctx.obj


def _fail(message: str) -> NoReturn:
    console.print(f"[red]{message}[/red]")
    raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(None, "--config", "-c", help="YAML config file."),
    state_file: Path | None = typer.Option(None, "--state", help="Override the state file location."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_file: bool | None = typer.Option(None, "--log-file/--no-log-file", help="Enable or disable file logging."),
):
    """Load configuration, state and logging for every command."""
    load_dotenv()

    cfg = load_config(str(config) if config else None)
    if state_file is not None:
        cfg.storage.path = str(state_file)
    if log_level:
        cfg.logging.level = log_level
    if log_file is not None:
        cfg.logging.file = log_file

    logger = setup_logging(cfg.logging)
    ctx.obj = CliState(cfg=cfg, storage=build_storage(cfg), logger=logger)


@app.command()
def extract(ctx: typer.Context, source: str = typer.Argument(..., help="URL or saved HTML file.")):
    """Extract the readable article from a page and make it current."""
    state = _state(ctx)
    article = run_extract(source, state.cfg, state.storage, state.logger)
    if not article.extracted_successfully:
        _fail(article.error_detail or "Could not extract readable content from the page")
    console.print(f"[green]Extracted:[/green] {article.title}")
    if article.byline:
        console.print(f"By {article.byline}")
    console.print(f"{len(article.text_content)} characters from {article.source_url}")


@app.command()
def show(ctx: typer.Context):
    """Display the current article as it will be shared."""
    state = _state(ctx)
    try:
        article = ArticleStore(state.storage).load()
    except StaleArticle as exc:
        _fail(str(exc))
    if article is None:
        _fail("No article extracted yet. Run `reader-to-nostr extract <url>` first.")
    if not article.extracted_successfully or not article.has_content:
        _fail(article.error_detail or "Could not extract readable content from the page")

    prefs = load_preferences(state.storage)
    console.rule(f"[bold]{article.title or 'Untitled'}")
    if article.byline:
        console.print(f"By {article.byline}")
    console.print(article.source_url, style="dim")
    body = article_body(article)
    if not body:
        _fail("No readable content found on this page")
    console.print(Markdown(body, code_theme="monokai" if prefs.theme == "dark" else "default"))


@app.command()
def login(
    ctx: typer.Context,
    key: str | None = typer.Option(None, "--key", "-k", help="nsec or hex private key (or set NOSTR_SECRET_KEY)."),
):
    """Store a signing key."""
    state = _state(ctx)
    value = key or get_secret_key(state.cfg.storage)
    if not value:
        value = typer.prompt("nsec or private key", hide_input=True)
    try:
        identity = KeyManager(state.storage, state.logger).login(value)
    except ReaderToNostrError as exc:
        _fail(f"Invalid nsec or private key format ({exc})")
    console.print(f"[green]Logged in[/green] as npub: {KeyManager.display_identity(identity.public_key_hex)}")


@app.command()
def logout(ctx: typer.Context):
    """Remove the stored signing key."""
    state = _state(ctx)
    KeyManager(state.storage, state.logger).logout()
    console.print("Logged out")


@app.command()
def whoami(ctx: typer.Context):
    """Show the public identity of the stored key."""
    state = _state(ctx)
    identity = KeyManager(state.storage, state.logger).restore()
    if identity is None:
        _fail("Not logged in")
    console.print(f"npub: {KeyManager.display_identity(identity.public_key_hex)}")


@app.command()
def publish(ctx: typer.Context):
    """Sign the current article and post it to every relay."""
    state = _state(ctx)
    try:
        event, report = run_publish(state.cfg, state.storage, state.logger)
    except ReaderToNostrError as exc:
        _fail(f"Error posting to Nostr: {exc}")

    table = Table(title=f"Event {event.id[:16]}")
    table.add_column("Relay")
    table.add_column("Result")
    table.add_column("Detail")
    for outcome in report.outcomes:
        result = "[green]ok[/green]" if outcome.ok else "[red]failed[/red]"
        table.add_row(outcome.endpoint, result, outcome.detail or "")
    console.print(table)

    summary = f"Posted to {report.success_count}/{report.total} relays successfully!"
    if report.failure_count:
        summary += f" ({report.failure_count} failed)"
    console.print(summary)
    if report.success_count == 0:
        raise typer.Exit(code=1)


@relays_app.command("list")
def relays_list(ctx: typer.Context):
    """List relays in publish order."""
    state = _state(ctx)
    manager = RelaySetManager(state.storage, state.cfg.publish.default_relays)
    for position, relay in enumerate(manager.list(), start=1):
        console.print(f"{position}. {relay}")


@relays_app.command("add")
def relays_add(ctx: typer.Context, url: str = typer.Argument(..., help="ws:// or wss:// relay URL.")):
    """Append a relay."""
    state = _state(ctx)
    manager = RelaySetManager(state.storage, state.cfg.publish.default_relays)
    try:
        relays = manager.add(url)
    except ReaderToNostrError as exc:
        _fail(str(exc))
    console.print(f"Added {url.strip()} ({len(relays)} relays)")


@relays_app.command("remove")
def relays_remove(ctx: typer.Context, position: int = typer.Argument(..., help="Position shown by `relays list`.")):
    """Remove a relay by its list position."""
    state = _state(ctx)
    manager = RelaySetManager(state.storage, state.cfg.publish.default_relays)
    try:
        relays = manager.remove(position - 1)
    except IndexError:
        _fail(f"No relay at position {position}")
    console.print(f"Removed relay {position} ({len(relays)} relays left)")


@prefs_app.command("show")
def prefs_show(ctx: typer.Context):
    """Print the current theme and font size."""
    prefs = load_preferences(_state(ctx).storage)
    console.print(f"theme: {prefs.theme}")
    console.print(f"font size: {prefs.font_size}px")


@prefs_app.command("theme")
def prefs_theme(
    ctx: typer.Context,
    value: str | None = typer.Argument(None, help="light or dark; toggles when omitted."),
):
    """Set or toggle the color theme."""
    storage = _state(ctx).storage
    try:
        prefs = set_theme(storage, value) if value else toggle_theme(storage)
    except ValueError as exc:
        _fail(str(exc))
    console.print(f"theme: {prefs.theme}")


@prefs_app.command("font")
def prefs_font(
    ctx: typer.Context,
    larger: bool = typer.Option(True, "--larger/--smaller", help="Grow or shrink the font by one step."),
):
    """Change the font size by one step, within 12-28px."""
    delta = FONT_STEP if larger else -FONT_STEP
    prefs = change_font_size(_state(ctx).storage, delta)
    console.print(f"font size: {prefs.font_size}px")


if __name__ == "__main__":
    app()
