"""Main command: scan targets and print the dependency graph."""

import json
from pathlib import Path
from typing import Optional

import typer

from ..api import AnalysisResult, analyze, make_relativizer
from ..exceptions import ImportAtlasError
from ..logging_config import setup_logging
from ..scanning.models import Reference
from . import app
from ._common import console, resolve_config


@app.command()
def main(
    targets: Optional[list[Path]] = typer.Argument(
        None,
        help="Files and/or directories to scan",
        show_default=False,
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Print the flat list of references instead of the graph",
    ),
    summary: bool = typer.Option(
        False,
        "--summary",
        help="Print how often each specifier is referenced",
    ),
    include_dts: bool = typer.Option(
        False,
        "--include-dts",
        help="Also scan TypeScript declaration files (*.d.ts)",
    ),
    extensions: Optional[str] = typer.Option(
        None,
        "--extensions",
        help="Comma-separated file extensions to scan (default: .ts,.tsx,.js,.jsx)",
    ),
    ignore: Optional[str] = typer.Option(
        None,
        "--ignore",
        help="Comma-separated directory names to skip, added to the defaults",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "-o",
        "--output",
        help="Write the graph JSON to this file instead of stdout",
        dir_okay=False,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also append log records to this file",
        dir_okay=False,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Extract imports, re-exports, require() and import() calls from
    JavaScript/TypeScript sources and build their dependency graph.

    [bold cyan]Examples:[/bold cyan]

      import-atlas src

      import-atlas src --summary

      import-atlas src lib/entry.ts --json

      import-atlas . --extensions .ts,.tsx --ignore fixtures -o deps.json
    """
    from .. import __version__

    if version:
        console.print(f"[bold cyan]Import Atlas[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)

    if not targets:
        console.print("[red]Error:[/red] at least one file or directory is required")
        console.print("Usage: import-atlas <file|dir> [...more] [OPTIONS]  (see --help)")
        raise typer.Exit(1)

    logger = setup_logging(verbose=verbose, quiet=quiet, log_file=_log_path(log_file))

    try:
        settings = resolve_config(
            config=config,
            extensions=extensions,
            ignore=ignore,
            include_dts=include_dts,
            verbose=verbose,
            quiet=quiet,
        )
        # Config files and IMPORT_ATLAS_VERBOSITY may set the level too
        logger = setup_logging(
            verbose=settings.verbosity == "verbose",
            quiet=settings.verbosity == "quiet",
            log_file=_log_path(log_file),
        )

        cwd = Path.cwd()
        result = analyze(targets, config=settings, cwd=cwd)

        if result.files_scanned == 0:
            console.print("[yellow]No files found.[/yellow] Check your extensions!")
            raise typer.Exit(0)

        if not result.references:
            console.print("[yellow]No imports found.[/yellow]")
            raise typer.Exit(0)

        if json_output:
            _output_references(result, cwd)
        elif summary:
            _output_summary(result.references)
        else:
            _output_graph(result, output)

    except typer.Exit:
        raise

    except ImportAtlasError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        logger.info("Scan interrupted by user")
        console.print("\n[yellow]Scan interrupted[/yellow]")
        raise typer.Exit(130)

    except Exception as e:
        logger.exception("Unexpected error during scan")
        console.print(f"[red]Unexpected error:[/red] {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)


def _log_path(log_file: Optional[Path]) -> Optional[str]:
    return str(log_file) if log_file is not None else None


def specifier_counts(references: list[Reference]) -> list[tuple[str, int]]:
    """Specifiers by descending reference count; ties keep first-seen order."""
    counts: dict[str, int] = {}
    for ref in references:
        counts[ref.specifier] = counts.get(ref.specifier, 0) + 1
    return sorted(counts.items(), key=lambda item: -item[1])


def _output_references(result: AnalysisResult, cwd: Path) -> None:
    """Flat reference list, paths relative to the working directory."""
    to_relative = make_relativizer(cwd)
    records = [ref.to_dict(file=to_relative(ref.file)) for ref in result.references]
    print(json.dumps(records, indent=2, ensure_ascii=False))


def _output_summary(references: list[Reference]) -> None:
    for specifier, count in specifier_counts(references):
        print(f"{count:>5}  {specifier}")


def _output_graph(result: AnalysisResult, output: Optional[Path]) -> None:
    text = result.graph.to_json()
    if output is None:
        print(text)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    console.print(f"Graph written to: [green]{output.resolve()}[/green]")
