"""plogconverter CLI: Typer application with convert and init commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from plogconverter import __version__

app = typer.Typer(
    name="plogconverter",
    help="Convert static-analysis logs into filtered reports.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


# ── convert ───────────────────────────────────────────────────────────────────


@app.command()
def convert(
    logs: Optional[List[Path]] = typer.Argument(None, help="Input logs (.plog, .json or raw analyzer output)"),
    render_types: Optional[List[str]] = typer.Option(None, "--render-types", "-t", help="Comma separated render types, e.g. Html,Txt,Totals"),
    output_dir: Optional[str] = typer.Option(None, "--output-dir", "-o", help="Output directory for the generated files"),
    src_root: Optional[str] = typer.Option(None, "--src-root", "-r", help="Root path that replaces the |?| marker"),
    path_mode: Optional[str] = typer.Option(None, "--path-mode", "-R", help="absolute | relative"),
    analyzer: Optional[List[str]] = typer.Option(None, "--analyzer", "-a", help="Analyzer level filter, e.g. GA:1,2;64:1"),
    excluded_codes: Optional[List[str]] = typer.Option(None, "--excluded-codes", "-d", help="Comma separated error codes to disable"),
    settings: Optional[str] = typer.Option(None, "--settings", "-s", help="Settings file with extra disabled codes"),
    name_template: Optional[str] = typer.Option(None, "--name-template", "-n", help="Base name for output files"),
    error_code_mapping: Optional[List[str]] = typer.Option(None, "--error-code-mapping", "-m", help="CWE,MISRA,OWASP,AUTOSAR"),
    diff_log: Optional[str] = typer.Option(None, "--diff", help="Report only differences against this log"),
    indicate_warnings: bool = typer.Option(False, "--indicate-warnings", "-w", help="Exit with code 2 when any report is non-empty"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .plogconverter.toml"),
    summary: bool = typer.Option(True, "--summary/--no-summary", help="Print a summary table"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Convert one or more logs into the requested report formats."""
    from plogconverter import pipeline
    from plogconverter.config import ConfigError, load_config
    from plogconverter.decoding import LogDecodeError
    from plogconverter.render import RenderLogger, RunStatus
    from plogconverter.render import terminal
    from plogconverter.render.dispatcher import root_cause

    configure_logging(verbose)
    paths = list(logs or [])

    # --- Load config, apply CLI overrides, validate ---
    try:
        cfg = load_config(Path.cwd(), config)
        if render_types:
            cfg.output.render_types = list(render_types)
        if output_dir is not None:
            cfg.output.output_dir = output_dir
        if src_root is not None:
            cfg.output.src_root = src_root
        if path_mode is not None:
            cfg.output.path_mode = path_mode
        if analyzer:
            cfg.filter.analyzers = list(analyzer)
        if excluded_codes:
            cfg.filter.disabled_codes.extend(
                c.strip() for item in excluded_codes for c in item.split(",") if c.strip()
            )
        if settings is not None:
            cfg.input.settings = settings
        if name_template is not None:
            cfg.output.name_template = name_template
        if error_code_mapping:
            cfg.mapping.error_codes = list(error_code_mapping)
        if diff_log is not None:
            cfg.input.diff = diff_log
        if indicate_warnings:
            cfg.output.indicate_warnings = True
        options = cfg.freeze()
        pipeline.check_logs(paths)
    except ConfigError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=int(RunStatus.BAD_ARGUMENTS)) from exc

    for warning in options.warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")

    if verbose:
        targets = ", ".join(t.value for t in options.render_targets) or "all"
        console.print(f"[dim]Logs: {len(paths)}  Targets: {targets}[/dim]")

    # --- Run ---
    try:
        result = pipeline.convert(paths, options, render_logger=RenderLogger())
    except LogDecodeError as exc:
        console.print(f"[bold red]Log error:[/bold red] {exc}")
        raise typer.Exit(code=int(RunStatus.GENERAL_FAILURE)) from exc
    except OSError as exc:
        console.print(f"[bold red]I/O error:[/bold red] {exc}")
        raise typer.Exit(code=int(RunStatus.GENERAL_FAILURE)) from exc
    except Exception as exc:
        # raw batch decoders may raise anything; report the innermost cause
        cause = root_cause(exc)
        logger.debug("Conversion failed", exc_info=exc)
        console.print(f"[bold red]Conversion failed:[/bold red] {cause}")
        raise typer.Exit(code=int(RunStatus.GENERAL_FAILURE)) from exc

    if summary:
        terminal.render(result.dispatch, total_records=len(result.records), console=console)

    raise typer.Exit(code=int(result.status))


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    directory: Path = typer.Option(Path("."), "--dir", help="Directory to write the config into"),
) -> None:
    """Generate a starter .plogconverter.toml."""
    from plogconverter.config.defaults import DEFAULT_TOML
    from plogconverter.config.loader import CONFIG_FILE_NAME

    config_path = directory / CONFIG_FILE_NAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILE_NAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"plogconverter {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """plogconverter: convert and filter static-analysis logs."""
