"""CLI entry point for toneguard."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path

import click

from toneguard import __version__
from toneguard.config import Config, ConfigError, load_config
from toneguard.exceptions import ToneGuardError
from toneguard.reporting import (
    render_analysis,
    render_benchmarks,
    render_history,
    render_quick_scores,
    render_rewrite,
    render_trend,
)
from toneguard.scoring.models import AXES, ToneScoreVector
from toneguard.scoring.quick import quick_scores
from toneguard.scoring.trends import rank_benchmarks
from toneguard.service.base import CONTENT_MEDIUMS

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _read_text(text: str) -> str:
    """Return the argument, or stdin when it is '-'."""
    if text == "-":
        return click.get_text_stream("stdin").read()
    return text


def _parse_assignments(values: tuple[str, ...]) -> dict[str, int]:
    """Parse repeated axis=value options."""
    parsed: dict[str, int] = {}
    for item in values:
        axis, sep, raw = item.partition("=")
        axis = axis.strip()
        if not sep or axis not in AXES:
            raise click.BadParameter(
                f"expected axis=value with axis one of: {', '.join(AXES)}",
                param_hint=repr(item),
            )
        try:
            parsed[axis] = int(raw)
        except ValueError as e:
            raise click.BadParameter(f"{raw!r} is not an integer") from e
    return parsed


def _run(coro):
    """Run a coroutine, turning toneguard errors into a clean exit."""
    try:
        return asyncio.run(coro)
    except ToneGuardError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _store(config: Config):
    from toneguard.state.store import ToneStore

    return ToneStore(config.database_path)


async def _open_session(config: Config):
    from toneguard.session import ToneSession

    session = ToneSession.from_config(config)
    await session.initialize()
    return session


@click.group()
@click.version_option(version=__version__, prog_name="toneguard")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to toneguard.toml configuration file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None) -> None:
    """toneguard: tone analysis and diplomatic rewrites."""
    ctx.ensure_object(dict)
    try:
        config = load_config(config_path)
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    logging.basicConfig(level=config.logging.level, format=_LOG_FORMAT)
    ctx.obj["config"] = config


def _context_options(func):
    func = click.option(
        "--medium", "content_medium", default=None,
        type=click.Choice(CONTENT_MEDIUMS, case_sensitive=False),
        help="Content medium.",
    )(func)
    func = click.option("--audience", "-a", default=None, help="Target audience.")(func)
    func = click.option("--language", "-l", default=None, help="Language code.")(func)
    return func


# --- Service commands ---


@cli.command()
@click.argument("text")
@_context_options
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON.")
@click.pass_context
def analyze(
    ctx: click.Context,
    text: str,
    language: str | None,
    audience: str | None,
    content_medium: str | None,
    as_json: bool,
) -> None:
    """Score TEXT on every tone axis ('-' reads stdin)."""
    config: Config = ctx.obj["config"]
    body = _read_text(text)

    async def _analyze():
        session = await _open_session(config)
        try:
            return await session.analyze(
                body, language=language, audience=audience, content_medium=content_medium,
            )
        finally:
            await session.close()

    record = _run(_analyze())
    if as_json:
        click.echo(json.dumps(record.to_dict(), indent=2))
    else:
        click.echo(render_analysis(record), nl=False)


@cli.command()
@click.argument("text")
@_context_options
@click.option(
    "--target", "-t", "targets", multiple=True,
    help="Target score as axis=value; repeatable. Without targets the "
         "default goals are used.",
)
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON.")
@click.pass_context
def rewrite(
    ctx: click.Context,
    text: str,
    language: str | None,
    audience: str | None,
    content_medium: str | None,
    targets: tuple[str, ...],
    as_json: bool,
) -> None:
    """Analyze TEXT, then rewrite it diplomatically ('-' reads stdin)."""
    config: Config = ctx.obj["config"]
    body = _read_text(text)
    adjustments = _parse_assignments(targets)

    async def _rewrite():
        session = await _open_session(config)
        try:
            record = await session.analyze(
                body, language=language, audience=audience, content_medium=content_medium,
            )
            if adjustments:
                for axis, value in adjustments.items():
                    session.adjust(axis, value)
                result = await session.manual_rewrite()
            else:
                result = await session.auto_rewrite()
            return record, result
        finally:
            await session.close()

    record, result = _run(_rewrite())
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        click.echo(render_rewrite(result, record.scores), nl=False)


# --- Local commands ---


@cli.command()
@click.argument("text")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON.")
def quick(text: str, as_json: bool) -> None:
    """Instant heuristic scores for TEXT, without calling the service."""
    scores = quick_scores(_read_text(text))
    if as_json:
        click.echo(json.dumps([s.to_dict() for s in scores], indent=2))
    else:
        click.echo(render_quick_scores(scores), nl=False)


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Print JSON lines.")
@click.pass_context
def watch(ctx: click.Context, as_json: bool) -> None:
    """Live scores for text typed on stdin, debounced like an editor."""
    from toneguard.scoring.debounce import AsyncioScheduler, LiveToneMonitor

    config: Config = ctx.obj["config"]
    stream = click.get_text_stream("stdin")

    def _show(scores) -> None:
        if as_json:
            click.echo(json.dumps([s.to_dict() for s in scores]))
        else:
            click.echo(render_quick_scores(scores), nl=False)

    async def _watch() -> None:
        loop = asyncio.get_running_loop()
        monitor = LiveToneMonitor(
            _show,
            scheduler=AsyncioScheduler(loop),
            delay_ms=config.live.debounce_ms,
            min_chars=config.live.min_chars,
        )
        text = ""
        while True:
            line = await loop.run_in_executor(None, stream.readline)
            if not line:
                break
            text += line
            monitor.update(text)
        monitor.flush()

    _run(_watch())


@cli.command()
@click.option("--limit", "-n", default=None, type=int, help="Number of records.")
@click.pass_context
def history(ctx: click.Context, limit: int | None) -> None:
    """Show the most recent analyses, newest first."""
    config: Config = ctx.obj["config"]
    store = _store(config)

    async def _history():
        await store.initialize()
        return await store.query_recent(limit or config.history.recent_limit)

    click.echo(render_history(_run(_history())), nl=False)


@cli.command()
@click.option("--limit", "-n", default=None, type=int, help="Number of records.")
@click.pass_context
def trend(ctx: click.Context, limit: int | None) -> None:
    """Summarize recent analyses and their direction."""
    from toneguard.scoring.trends import summarize_history

    config: Config = ctx.obj["config"]
    store = _store(config)

    async def _trend():
        await store.initialize()
        return await store.query_recent(limit or config.history.recent_limit)

    click.echo(render_trend(summarize_history(_run(_trend()))), nl=False)


@cli.command()
@click.option(
    "--score", "-s", "scores", multiple=True,
    help="Score as axis=value; repeatable. Defaults to the latest analysis.",
)
@click.pass_context
def benchmarks(ctx: click.Context, scores: tuple[str, ...]) -> None:
    """Rank benchmark communicators against a set of scores."""
    config: Config = ctx.obj["config"]
    values = _parse_assignments(scores)
    store = _store(config)

    async def _load():
        await store.initialize()
        await store.seed_default_benchmarks(config.history.benchmark_catalog or None)
        profiles = await store.list_benchmarks()
        latest = await store.query_recent(1)
        return profiles, latest

    profiles, latest = _run(_load())
    if values:
        vector = ToneScoreVector(**values)
    elif latest:
        vector = latest[0].scores
    else:
        click.echo("No scores given and no analyses recorded yet.", err=True)
        sys.exit(1)
    click.echo(render_benchmarks(rank_benchmarks(vector, profiles)), nl=False)


@cli.command("seed-benchmarks")
@click.option(
    "--catalog",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="YAML benchmark catalog. Defaults to the packaged catalog.",
)
@click.pass_context
def seed_benchmarks(ctx: click.Context, catalog: Path | None) -> None:
    """Load (or refresh) benchmark profiles from a catalog."""
    from toneguard.state.store import load_benchmark_catalog

    config: Config = ctx.obj["config"]
    store = _store(config)

    async def _seed():
        await store.initialize()
        return await store.add_benchmarks(
            load_benchmark_catalog(catalog or config.history.benchmark_catalog or None)
        )

    written = _run(_seed())
    click.echo(f"Loaded {written} benchmark profile(s) into {store.path}")


# --- Server ---


@cli.command()
@click.option("--host", default=None, help="Override server host.")
@click.option("--port", default=None, type=int, help="Override server port.")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None) -> None:
    """Start the toneguard API server."""
    config: Config = ctx.obj["config"]
    actual_host = host if host is not None else config.server.host
    actual_port = port if port is not None else config.server.port

    click.echo(f"Starting toneguard server on {actual_host}:{actual_port}")

    import uvicorn

    from toneguard.api.server import create_app

    try:
        app = create_app(config)
        uvicorn.run(
            app, host=actual_host, port=actual_port,
            log_level=config.logging.level.lower(),
        )
    except Exception as e:
        click.echo(f"Server failed to start: {e}", err=True)
        sys.exit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
