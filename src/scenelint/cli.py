"""scenelint CLI - typer application entry point."""

from __future__ import annotations

import atexit
import json
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from scenelint.config import DEFAULT_CONTENT_PATH, ConfigError, load_validator_config
from scenelint.graph import analyze_reachability, build_scene_index
from scenelint.observability import close_file_logging, configure_logging, get_logger
from scenelint.validation import (
    ContentLoader,
    FatalValidationError,
    load_manifest,
    load_scenes,
    validate_content,
)

if TYPE_CHECKING:
    from scenelint.config import ValidatorConfig
    from scenelint.graph import ReachabilityReport
    from scenelint.validation import ValidationResult

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="scenelint",
    help="scenelint: Integrity checks for branching narrative content.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()
log = get_logger(__name__)

ContentPathOption = Annotated[
    Path,
    typer.Option(
        "--content-path",
        "-c",
        help="Content root directory (manifest.json, scenes/).",
        envvar="SCENELINT_CONTENT_PATH",
    ),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Print the result as JSON on stdout."),
]


@app.callback()
def main(
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity: -v for INFO, -vv for DEBUG.",
        ),
    ] = 0,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Also write every log event to this file as JSON lines.",
        ),
    ] = None,
) -> None:
    """scenelint: Integrity checks for branching narrative content."""
    configure_logging(verbosity=verbose, log_file=log_file)
    if log_file is not None:
        atexit.register(close_file_logging)


def _fail(message: str, *, as_json: bool) -> None:
    """Report a fatal error and exit with status 1."""
    if as_json:
        typer.echo(json.dumps({"passed": False, "fatal": message}, indent=2))
    else:
        console.print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True)
    raise typer.Exit(1)


def _print_result(result: ValidationResult, config: ValidatorConfig) -> None:
    console.print(f"Content: [cyan]{escape(str(config.content_path))}[/cyan]", soft_wrap=True)
    console.print(f"  Files validated: [bold]{result.file_count}[/bold]")
    console.print(f"  Declared scenes: [bold]{len(result.scene_index)}[/bold]")
    console.print(f"  Referenced scenes: [bold]{len(result.referenced_scenes)}[/bold]")
    console.print()

    if result.errors:
        console.print(f"[red]Errors ({len(result.errors)}):[/red]")
        for error in result.errors:
            console.print(f"  [red]•[/red] {escape(error)}", soft_wrap=True)
        console.print()

    if result.warnings:
        console.print(f"[yellow]Warnings ({len(result.warnings)}):[/yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]•[/yellow] {escape(warning)}", soft_wrap=True)
        console.print()

    if not result.passed:
        console.print("[red]✗[/red] Validation failed")
    elif result.has_warnings:
        console.print("[yellow]✓[/yellow] Validation passed with warnings")
    else:
        console.print("[green]✓[/green] Validation passed")


@app.command()
def validate(
    content_path: ContentPathOption = DEFAULT_CONTENT_PATH,
    fail_on_warnings: Annotated[
        bool,
        typer.Option("--fail-on-warnings", help="Exit with status 1 if there are warnings."),
    ] = False,
    as_json: JsonOption = False,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Warn about scene index keys that differ from entry ids."),
    ] = False,
    schemas_path: Annotated[
        Path | None,
        typer.Option(
            "--schemas-path",
            help="Directory with <name>-schema.json files (default: content or bundled).",
        ),
    ] = None,
) -> None:
    """Validate content structure and scene references."""
    try:
        config = load_validator_config(content_path)
    except ConfigError as e:
        _fail(str(e), as_json=as_json)
        return

    config.fail_on_warnings = fail_on_warnings or config.fail_on_warnings
    config.strict = strict or config.strict
    if schemas_path is not None:
        config.schemas_path = schemas_path

    log.info("validate_started", content_path=str(content_path))
    try:
        result = validate_content(config)
    except FatalValidationError as e:
        _fail(str(e), as_json=as_json)
        return

    if as_json:
        typer.echo(result.to_json())
    else:
        _print_result(result, config)

    if not result.passed or (config.fail_on_warnings and result.has_warnings):
        raise typer.Exit(1)


def _print_reachability(report: ReachabilityReport, load_failures: list[str]) -> None:
    console.print(f"Starting scene: [cyan]{escape(report.starting_scene or '-')}[/cyan]")
    console.print(
        f"  Reachable: [bold]{len(report.reachable)}[/bold] of {report.total_scenes} declared"
    )
    if report.exempt:
        console.print(f"  Exempt: {escape(', '.join(report.exempt))}")
    console.print()

    if report.unreachable:
        table = Table(title="Unreachable scenes")
        table.add_column("Scene", style="cyan")
        table.add_column("Reason")
        table.add_column("Linked from", style="dim")
        for scene in report.unreachable:
            table.add_row(
                escape(scene.scene_id),
                str(scene.reason),
                escape(", ".join(scene.from_scenes)) or "-",
            )
        console.print(table)
        console.print()

    if report.cycles:
        console.print(f"[dim]Cycles ({len(report.cycles)}):[/dim]")
        for cycle in report.cycles:
            console.print(f"  [dim]•[/dim] {escape(' -> '.join([*cycle, cycle[0]]))}")
        console.print()

    for failure in load_failures:
        console.print(f"  [yellow]•[/yellow] {escape(failure)}", soft_wrap=True)

    if report.starting_scene is None:
        console.print("[red]✗[/red] No starting scene declared")
    elif report.unreachable:
        console.print(f"[red]✗[/red] {len(report.unreachable)} scene(s) unreachable")
    else:
        console.print("[green]✓[/green] All declared scenes are reachable")


@app.command()
def reachability(
    content_path: ContentPathOption = DEFAULT_CONTENT_PATH,
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", min=1, help="Stop traversal after this many transitions."),
    ] = None,
    no_goto: Annotated[
        bool,
        typer.Option("--no-goto", help="Follow choice targets only, not goto effects."),
    ] = False,
    as_json: JsonOption = False,
) -> None:
    """Check that every declared scene is reachable from the starting scene."""
    try:
        config = load_validator_config(content_path)
    except ConfigError as e:
        _fail(str(e), as_json=as_json)
        return

    loader = ContentLoader(content_path, config.scenes_dir)
    try:
        manifest = load_manifest(loader)
    except FatalValidationError as e:
        _fail(str(e), as_json=as_json)
        return

    scene_index = build_scene_index(manifest)
    loaded = load_scenes(loader)
    starting_scene = manifest.get("startingScene") if isinstance(manifest, dict) else None
    if not isinstance(starting_scene, str):
        starting_scene = None

    report = analyze_reachability(
        scene_index,
        starting_scene,
        loaded.scenes,
        max_depth=max_depth or config.max_depth,
        include_effects=not no_goto,
    )
    load_failures = [
        f"Failed to load {loader.relative_name(path)}: {reason}" for path, reason in loaded.failures
    ]

    if as_json:
        data = report.to_dict()
        data["loadErrors"] = load_failures
        typer.echo(json.dumps(data, indent=2))
    else:
        _print_reachability(report, load_failures)

    if not report.valid:
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    from scenelint import __version__

    console.print(f"scenelint v{__version__}")
