"""topdisk CLI - live per-disk I/O dashboard for storage pools."""

from __future__ import annotations

import json
import sys
from dataclasses import replace

import click

from topdisk.utils.logging import setup_logging

_SORT_CHOICES = ["name", "used", "await", "util", "read", "write", "discard", "tps"]


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--json-output", is_flag=True, help="Output (and logs) in JSON format")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, writable=True),
    envvar="TOPDISK_LOG_FILE",
    default=None,
    help="Write logs to this file instead of stderr",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool, json_output: bool, log_file: str | None) -> None:
    """topdisk - live per-disk I/O statistics for a storage pool."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["json_output"] = json_output
    # Without a log file, stderr shares the terminal with the dashboard.
    level = "DEBUG" if debug else ("INFO" if log_file else "WARNING")
    setup_logging(level=level, json_output=json_output, log_file=log_file)


def _feed_options(func):
    func = click.option("--pace", type=int, default=0, help="Replay: pause between sample rounds in ms")(func)
    func = click.option("--rounds", type=int, default=0, help="procfs: sampling rounds (0=until quit)")(func)
    func = click.option(
        "--replay",
        type=click.Path(allow_dash=True),
        default=None,
        help="Replay a JSON-lines stats recording ('-' for stdin)",
    )(func)
    func = click.option(
        "--interval",
        type=int,
        default=1000,
        envvar="TOPDISK_INTERVAL_MS",
        show_default=True,
        help="Nominal sampling interval in ms used for rates",
    )(func)
    func = click.option(
        "--count",
        type=int,
        default=10,
        envvar="TOPDISK_COUNT",
        show_default=True,
        help="Maximum number of disks shown",
    )(func)
    return func


def _make_feed(replay: str | None, pace: int, interval: int, rounds: int):
    """Helper to create a stats feed from CLI options."""
    from topdisk.feeds import ProcDiskstatsFeed, ReplayFeed

    if replay:
        return ReplayFeed(replay, pace_ms=pace)
    return ProcDiskstatsFeed(interval_ms=interval, rounds=rounds)


def _make_config(count: int, interval: int):
    from topdisk.config import DashboardConfig
    from topdisk.exceptions import ConfigError

    try:
        return DashboardConfig.build(count=count, interval_ms=interval)
    except ConfigError as exc:
        raise click.BadParameter(str(exc)) from exc


@cli.command()
@_feed_options
@click.option("--plain", is_flag=True, help="Write plain text frames instead of a live table")
@click.option("--no-keys", is_flag=True, help="Do not read keyboard input")
def top(
    count: int,
    interval: int,
    replay: str | None,
    rounds: int,
    pace: int,
    plain: bool,
    no_keys: bool,
) -> None:
    """Show live disk I/O for one pool.

    Keys: left/right switch pool; u, t, r, w, A, U sort by used, tps,
    read, write, await, util; q or esc quits.
    """
    from topdisk.core.dashboard import Dashboard
    from topdisk.exceptions import TopDiskError
    from topdisk.ui.keyboard import TerminalKeys
    from topdisk.ui.terminal import LiveSurface, TextSurface

    config = _make_config(count, interval)
    feed = _make_feed(replay, pace, interval, rounds)

    # Replaying from stdin leaves no terminal to read keys from.
    use_keys = not no_keys and replay != "-" and sys.stdin.isatty()
    keys = TerminalKeys() if use_keys else None
    surface = TextSurface(sys.stdout) if plain or not sys.stdout.isatty() else LiveSurface()

    try:
        with surface:
            # Nothing can end a keyless session once the feed runs dry.
            Dashboard(feed, config, surface=surface, keys=keys, stop_on_feed_end=keys is None).run()
    except KeyboardInterrupt:
        pass
    except TopDiskError as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command()
@_feed_options
@click.option("--pool", type=int, default=0, show_default=True, help="Pool index (0-based)")
@click.option("--sort", "sort_by", type=click.Choice(_SORT_CHOICES), default="name", show_default=True)
@click.pass_context
def snapshot(
    ctx: click.Context,
    count: int,
    interval: int,
    replay: str | None,
    rounds: int,
    pace: int,
    pool: int,
    sort_by: str,
) -> None:
    """Collect samples until the feed finishes and print one pool."""
    from topdisk.core.dashboard import Dashboard
    from topdisk.core.renderer import render
    from topdisk.core.view_state import SortKey
    from topdisk.exceptions import TopDiskError

    config = _make_config(count, interval)
    # Two rounds are needed for any rate to be non-zero.
    feed = _make_feed(replay, pace, interval, rounds or 2)

    try:
        state = Dashboard(feed, config, stop_on_feed_end=True).run()
    except TopDiskError as exc:
        raise click.ClickException(str(exc)) from exc

    if not 0 <= pool <= state.view.max_pool:
        raise click.BadParameter(f"pool must be between 0 and {state.view.max_pool}", param_hint="--pool")

    state = replace(state, view=replace(state.view, pool=pool, sort_key=SortKey(sort_by)))
    frame = render(state, config.interval_ms)

    if ctx.obj.get("json_output"):
        click.echo(json.dumps([m.model_dump() for m in frame.metrics], indent=2))
    else:
        if not frame.rows:
            click.echo("No samples for this pool.")
            return
        click.echo(frame.to_text(), nl=False)


if __name__ == "__main__":
    cli()
