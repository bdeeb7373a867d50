"""apidesc CLI - API description converter.

This module provides the command-line interface for apidesc, converting
old-format description files and inspecting type inference results.
"""

from __future__ import annotations

import json
import logging
import traceback
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="apidesc",
    help="Convert API description parameter strings to typed parameter tables",
    no_args_is_help=True,
)

# Rich console for formatted output
console = Console()
err_console = Console(stderr=True)

# Global verbose flag
_verbose: bool = False


def set_verbose(verbose: bool) -> None:
    """Set global verbose mode."""
    global _verbose
    _verbose = verbose


def is_verbose() -> bool:
    """Check if verbose mode is enabled."""
    return _verbose


def print_exception(e: Exception) -> None:
    """Print exception details in verbose mode."""
    if _verbose:
        err_console.print("\n[dim]--- Traceback (verbose mode) ---[/dim]")
        err_console.print(f"[dim]{traceback.format_exc()}[/dim]")


def configure_logging(verbose: bool) -> None:
    """Configure stdlib logging on stderr."""
    from apidesc.core.config import get_config

    level = "DEBUG" if verbose else get_config().log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output with full tracebacks"),
    ] = False,
) -> None:
    """apidesc CLI - API description converter."""
    set_verbose(verbose)
    configure_logging(verbose)


def load_classes(auto_api: Optional[Path]) -> dict[str, Any]:
    """Load AutoAPI classes with error handling.

    An explicitly given directory must load; a missing default directory only
    disables the known-class rule.
    """
    from apidesc.core.config import get_config
    from apidesc.services.loader import LoaderError, load_known_classes

    auto_api_dir = auto_api or get_config().auto_api_dir
    if auto_api is None and not auto_api_dir.is_dir():
        err_console.print(
            f"[yellow]Warning:[/yellow] AutoAPI directory not found: {auto_api_dir}, "
            "class names will not be recognized"
        )
        return {}

    try:
        return load_known_classes(auto_api_dir)
    except LoaderError as e:
        err_console.print(f"[red]Error:[/red] Failed to load AutoAPI: {e.message}")
        if e.details:
            err_console.print(f"  {e.details}")
        print_exception(e)
        raise typer.Exit(1)


AutoApiOption = Annotated[
    Optional[Path],
    typer.Option(
        "--auto-api",
        "-a",
        help="AutoAPI directory (defaults to APIDESC_AUTO_API_DIR or ./AutoAPI)",
        exists=True,
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
    ),
]


@app.command()
def convert(
    files: Annotated[
        Optional[list[Path]],
        typer.Argument(help="Description files to convert (defaults to the configured list)"),
    ] = None,
    auto_api: AutoApiOption = None,
    suffix: Annotated[
        Optional[str],
        typer.Option("--suffix", "-s", help="Suffix of the output files (default .new)"),
    ] = None,
    self_test: Annotated[
        bool,
        typer.Option("--self-test/--no-self-test", help="Parse each written file back"),
    ] = True,
    report_unknown: Annotated[
        bool,
        typer.Option("--report-unknown", "-u", help="List parameters whose type was not inferred"),
    ] = False,
) -> None:
    """Convert description files, writing the result next to each input.

    Example:
        apidesc convert Desc/Classes/Geometry.lua --auto-api AutoAPI
    """
    from apidesc.cli._tables import build_unknown_params_table
    from apidesc.core.config import get_config
    from apidesc.services.convert_service import ConvertService

    config = get_config()
    if suffix:
        config = config.model_copy(update={"output_suffix": suffix})
    sources = files or [Path(name) for name in config.desc_files]

    known_classes = load_classes(auto_api)
    service = ConvertService(known_classes, config=config)

    failed = 0
    for source in sources:
        result = service.convert_file(source, self_test=self_test)
        if not result.success:
            failed += 1
            err_console.print(f"[red]✗[/red] {source}")
            for error in result.errors:
                err_console.print(f"  - {error}")
            continue

        stats = result.stats
        console.print(f"[green]✓[/green] {source} -> {result.output}")
        if stats is not None:
            console.print(
                f"  Classes: {stats.classes}  Functions: {stats.functions}  "
                f"Signatures: {stats.signatures}  Params converted: {stats.params_converted}"
            )
            if stats.unknown_params:
                console.print(f"  [yellow]Unknown parameter types: {len(stats.unknown_params)}[/yellow]")
                if report_unknown:
                    console.print(build_unknown_params_table(stats.unknown_params))
        if not result.self_tested:
            console.print("  [dim]Self-test skipped[/dim]")

    if failed:
        err_console.print(f"[red]Error:[/red] {failed} of {len(sources)} files failed")
        raise typer.Exit(1)


@app.command()
def infer(
    descriptions: Annotated[
        list[str],
        typer.Argument(help="Parameter descriptions, e.g. 'BlockX' or '[{{cPlayer|Player}}]'"),
    ],
    auto_api: AutoApiOption = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output machine-readable JSON"),
    ] = False,
) -> None:
    """Show the name and type inferred for parameter descriptions.

    Each argument may itself be a comma-separated parameter string.

    Example:
        apidesc infer "BlockX, BlockY, BlockZ" "[IsForced]"
    """
    from apidesc.cli._tables import build_inference_table
    from apidesc.inference.converter import SignatureConverter
    from apidesc.inference.tokenizer import split_param_string

    converter = SignatureConverter(load_classes(auto_api))
    rows = [
        (token, spec)
        for description in descriptions
        for token, spec in zip(
            split_param_string(description), converter.parse_param_string(description)
        )
    ]

    if json_output:
        typer.echo(json.dumps([spec.to_table() for _, spec in rows], ensure_ascii=False, indent=2))
        return

    if not rows:
        console.print("[yellow]No parameters found[/yellow]")
        return
    console.print(build_inference_table(rows))


if __name__ == "__main__":
    app()
