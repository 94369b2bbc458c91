"""Command-line interface for drplayer-dashboard."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import get_config
from .exceptions import PortUnavailableError, StorageError
from .skip import JsonFileStore, SkipSettings, SkipSettingsStore, simulate_playback

console = Console()


def _settings_store(settings_file: Optional[Path]) -> SkipSettingsStore:
    resolved = get_config().get_settings_file(settings_file)
    return SkipSettingsStore(JsonFileStore(resolved))


def _print_settings(settings: SkipSettings) -> None:
    table = Table(title="Skip Settings")
    table.add_column("Segment", style="cyan")
    table.add_column("Enabled")
    table.add_column("Seconds", style="green", justify="right")

    for name, enabled, seconds in (
        ("Intro", settings.intro_enabled, settings.intro_seconds),
        ("Outro", settings.outro_enabled, settings.outro_seconds),
    ):
        table.add_row(name, "[green]Yes[/green]" if enabled else "[dim]No[/dim]", f"{seconds:g}")

    console.print(table)


settings_file_option = click.option(
    "--settings-file",
    "-s",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Skip settings file (default: from config or ~/.local/share/drplayer-dashboard)",
)


@click.group()
@click.version_option(version=__version__)
def main():
    """DrPlayer Dashboard.

    Serves the bundled player apps and manages intro/outro skip settings.
    """
    pass


# =============================================================================
# Server
# =============================================================================


@main.command()
@click.option(
    "--apps-dir",
    "-a",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the bundled apps (default: from config or ./apps)",
)
@click.option("--host", type=str, default=None, help="Bind address (default: 0.0.0.0)")
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port, or first port tried when auto-selecting (default: 9978)",
)
@click.option(
    "--spa-app",
    "spa_apps",
    multiple=True,
    help="Single-page app served with index fallback (repeatable, default: drplayer)",
)
@click.option(
    "--no-auto-port",
    is_flag=True,
    help="Fail instead of trying the next port when --port is taken",
)
@click.option("--no-settings-ui", is_flag=True, help="Do not mount the settings page")
@click.option(
    "--strict",
    is_flag=True,
    help="Refuse to start when an app's index.html is missing",
)
@settings_file_option
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def serve(
    apps_dir: Optional[Path],
    host: Optional[str],
    port: Optional[int],
    spa_apps: tuple[str, ...],
    no_auto_port: bool,
    no_settings_ui: bool,
    strict: bool,
    settings_file: Optional[Path],
    verbose: bool,
):
    """Serve the landing page, health check and bundled apps.

    Examples:

        # Serve ./apps on the first free port from 9978
        drplayer-dashboard serve

        # Serve a custom directory on a fixed port
        drplayer-dashboard serve --apps-dir /opt/drplayer/apps --port 8080 --no-auto-port
    """
    from .logging import get_logger, setup_logging
    from .server import run_server, validate_apps

    setup_logging(verbose=verbose)
    log = get_logger("serve")

    user_config = get_config()
    resolved_apps_dir = user_config.get_apps_dir(apps_dir)
    resolved_spa_apps = list(spa_apps) or user_config.spa_apps
    resolved_host = host or user_config.host
    resolved_port = port if port is not None else user_config.port

    console.print(f"[bold]Apps directory:[/bold] {resolved_apps_dir}")
    problems = validate_apps(resolved_apps_dir, resolved_spa_apps)
    for problem in problems:
        console.print(f"[red]Error:[/red] {problem}")
    if problems and strict:
        raise SystemExit(1)

    try:
        run_server(
            apps_dir=resolved_apps_dir,
            settings_file=user_config.get_settings_file(settings_file),
            spa_apps=resolved_spa_apps,
            host=resolved_host,
            port=resolved_port,
            auto_port=not no_auto_port,
            settings_ui=not no_settings_ui,
        )
    except PortUnavailableError as e:
        log.error(str(e))
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)


# =============================================================================
# Skip Settings Commands
# =============================================================================


@main.group()
def skip():
    """Intro/outro skip settings."""
    pass


@skip.command(name="show")
@settings_file_option
def skip_show(settings_file: Optional[Path]):
    """Show the stored skip settings."""
    _print_settings(_settings_store(settings_file).load())


@skip.command(name="set")
@click.option("--intro/--no-intro", default=None, help="Enable or disable intro skipping")
@click.option("--intro-seconds", type=click.FloatRange(min=0), default=None, help="Intro length")
@click.option("--outro/--no-outro", default=None, help="Enable or disable outro skipping")
@click.option("--outro-seconds", type=click.FloatRange(min=0), default=None, help="Outro length")
@settings_file_option
def skip_set(
    intro: Optional[bool],
    intro_seconds: Optional[float],
    outro: Optional[bool],
    outro_seconds: Optional[float],
    settings_file: Optional[Path],
):
    """Update skip settings; options not given keep their stored value.

    Examples:

        drplayer-dashboard skip set --intro --intro-seconds 85

        drplayer-dashboard skip set --no-outro
    """
    store = _settings_store(settings_file)
    current = store.load()
    updated = SkipSettings(
        intro_enabled=current.intro_enabled if intro is None else intro,
        outro_enabled=current.outro_enabled if outro is None else outro,
        intro_seconds=current.intro_seconds if intro_seconds is None else intro_seconds,
        outro_seconds=current.outro_seconds if outro_seconds is None else outro_seconds,
    )

    try:
        store.save(updated)
    except StorageError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    console.print("[green]Saved.[/green]")
    _print_settings(updated)


@skip.command(name="reset")
@settings_file_option
def skip_reset(settings_file: Optional[Path]):
    """Restore default skip settings."""
    store = _settings_store(settings_file)
    try:
        store.save(SkipSettings())
    except StorageError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    console.print("[green]Skip settings reset to defaults.[/green]")
    _print_settings(SkipSettings())


@skip.command(name="simulate")
@click.option("--duration", "-d", type=click.FloatRange(min=0, min_open=True), required=True,
              help="Media duration in seconds")
@click.option("--start", type=click.FloatRange(min=0), default=0.0, help="Starting position")
@click.option("--step", type=click.FloatRange(min=0.2), default=0.25,
              help="Seconds between time updates")
@settings_file_option
def skip_simulate(duration: float, start: float, step: float, settings_file: Optional[Path]):
    """Dry-run the stored settings against a simulated playback."""
    settings = _settings_store(settings_file).load()
    _print_settings(settings)

    events = simulate_playback(settings, duration=duration, start=start, step=step)
    if not events:
        console.print("[dim]No skips would happen.[/dim]")
        return

    table = Table(title=f"Skips over {duration:g}s of playback")
    table.add_column("Wall time", justify="right")
    table.add_column("From", style="yellow", justify="right")
    table.add_column("To", style="green", justify="right")
    for event in events:
        table.add_row(
            f"{event.at_ms / 1000:.2f}s",
            f"{event.from_seconds:.2f}s",
            f"{event.to_seconds:.2f}s",
        )
    console.print(table)


if __name__ == "__main__":
    main()
