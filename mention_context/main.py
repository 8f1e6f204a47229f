"""mention-context CLI - inspect and optimize serialized contexts."""

import json
import logging
from datetime import UTC
from datetime import datetime
from pathlib import Path

import click
from pydantic import ValidationError
from rich.table import Table

from .console import console
from .console import err_console
from .errors import SettingsError
from .logging_setup import init_json_logging
from .metadata import refresh_metadata
from .models import ResolvedContext
from .optimization import ContextOptimizer
from .optimization import OptimizationStrategy
from .settings import EngineSettings
from .settings import OptimizationDefaults
from .settings import SettingsManager

logger = logging.getLogger(__name__)


def load_context(path: Path, settings: EngineSettings) -> ResolvedContext:
    """Read a serialized context, recomputing its metadata.

    A document without ``metadata`` is accepted; it is derived anyway.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise click.ClickException(f"Cannot read context from {path}: {e}") from e

    if not isinstance(data, dict):
        raise click.ClickException(f"{path} does not contain a context object")
    data.setdefault("metadata", {"generated_at": datetime.now(UTC).isoformat()})

    try:
        context = ResolvedContext.model_validate(data)
    except ValidationError as e:
        raise click.ClickException(f"Invalid context in {path}: {e}") from e
    return refresh_metadata(context, settings.estimator(), settings.lines_per_minute)


def _summary_table(title: str, contexts: dict[str, ResolvedContext]) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="green")
    for label in contexts:
        table.add_column(label, justify="right")

    rows = [
        ("Files", lambda c: c.metadata.file_count),
        ("Symbols", lambda c: c.metadata.symbol_count),
        ("Diagnostics", lambda c: c.metadata.diagnostic_count),
        ("Est. tokens", lambda c: c.metadata.token_count),
        ("Reading time (min)", lambda c: c.metadata.estimated_reading_time_minutes),
        ("Truncated files", lambda c: sum(1 for f in c.files if f.truncated)),
    ]
    for name, value in rows:
        table.add_row(name, *(str(value(c)) for c in contexts.values()))
    return table


def _largest_files_table(context: ResolvedContext, estimator, limit: int = 10) -> Table:
    table = Table(title="Largest Files (Est. Tokens)", show_header=True, header_style="bold cyan")
    table.add_column("Rank", justify="right")
    table.add_column("Tokens", justify="right")
    table.add_column("Language")
    table.add_column("File Path", style="green")

    ranked = sorted(context.files, key=lambda f: estimator.estimate(f.content), reverse=True)
    for rank, entry in enumerate(ranked[:limit], start=1):
        path = entry.path
        if entry.line_range is not None:
            path = f"{path}:{entry.line_range[0]}-{entry.line_range[1]}"
        table.add_row(str(rank), str(estimator.estimate(entry.content)), entry.language, path)
    return table


@click.group()
@click.option("--settings-dir", type=click.Path(file_okay=False, path_type=Path), help="Project settings directory")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Write JSONL logs to this file")
@click.option("--log-level", default=None, help="Log level for --log-file (default: INFO)")
@click.pass_context
def cli(ctx: click.Context, settings_dir: Path | None, log_file: str | None, log_level: str | None):
    """Inspect and optimize resolved mention contexts."""
    if log_file:
        init_json_logging(log_file, log_level)

    manager = SettingsManager(settings_dir=settings_dir)
    try:
        engine = manager.get_engine_settings()
        defaults = manager.get_optimization_defaults()
    except SettingsError as e:
        raise click.ClickException(str(e)) from e

    ctx.obj = {"engine": engine, "defaults": defaults}


@cli.command()
@click.argument("context_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--top", default=10, show_default=True, help="Number of largest files to list")
@click.pass_obj
def stats(obj: dict, context_file: Path, top: int):
    """Show statistics for a serialized context."""
    engine: EngineSettings = obj["engine"]
    context = load_context(context_file, engine)

    console.print(_summary_table(f"Context: {context_file.name}", {"Value": context}))
    if context.files:
        console.print(_largest_files_table(context, engine.estimator(), top))
    if context.warnings:
        console.print(f"[yellow]{len(context.warnings)} resolution warnings[/yellow]")
        for warning in context.warnings:
            subject = warning.token.describe() if warning.token else "context"
            console.print(f"  [dim]{subject}[/dim]: {warning.reason}")


@cli.command()
@click.argument("context_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--max-tokens", "-m", type=int, default=None, help="Token budget (default: from settings)")
@click.option("--truncate/--no-truncate", default=None, help="Truncate large files before dropping them")
@click.option("--preserve-symbols/--drop-symbols", default=None, help="Keep all symbols regardless of budget")
@click.option("--recent/--no-recent", default=None, help="Rank recently modified files higher")
@click.option("--metadata/--no-metadata", "include_metadata", default=None, help="Keep per-file metadata")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write result here")
@click.pass_obj
def optimize(
    obj: dict,
    context_file: Path,
    max_tokens: int | None,
    truncate: bool | None,
    preserve_symbols: bool | None,
    recent: bool | None,
    include_metadata: bool | None,
    output: Path | None,
):
    """Shrink a serialized context to fit a token budget."""
    engine: EngineSettings = obj["engine"]
    defaults: OptimizationDefaults = obj["defaults"]
    context = load_context(context_file, engine)

    try:
        strategy = OptimizationStrategy(
            max_tokens=max_tokens if max_tokens is not None else defaults.max_context_tokens,
            truncate_content=defaults.truncate_content if truncate is None else truncate,
            preserve_symbols=defaults.preserve_symbols if preserve_symbols is None else preserve_symbols,
            prioritize_recent_files=defaults.prioritize_recent_files if recent is None else recent,
            include_file_metadata=defaults.include_file_metadata if include_metadata is None else include_metadata,
        )
    except ValidationError as e:
        raise click.BadParameter(str(e), param_hint="--max-tokens") from e

    optimized = ContextOptimizer(engine).optimize(context, strategy)
    payload = optimized.model_dump_json(indent=2)

    if output:
        output.write_text(payload + "\n", encoding="utf-8")
        err_console.print(f"[green]✓[/green] Optimized context written to {output}")
    else:
        click.echo(payload)

    err_console.print(_summary_table("Optimization", {"Before": context, "After": optimized}))
    dropped = len(context.files) - len(optimized.files)
    if dropped:
        total = len(context.files)
        err_console.print(f"[yellow]Dropped {dropped} of {total} files to fit {strategy.max_tokens} tokens[/yellow]")


def main():
    cli()


if __name__ == "__main__":
    main()
