"""CLI interface for sqzunpack using Typer."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from sqzunpack import __version__
from sqzunpack.core.errors import SqzError

app = typer.Typer(
    name="sqzunpack",
    help="Unpacker for SQZ and DIET compressed game resources.",
    add_completion=False,
)
console = Console()

_verbose = False
_quiet = False


def _print(msg: str, *, verbose_only: bool = False) -> None:
    """Print respecting --verbose/--quiet flags. Errors bypass --quiet."""
    if _quiet:
        return
    if verbose_only and not _verbose:
        return
    console.print(msg)


def _error(msg: str) -> None:
    console.print(f"[red]Error:[/red] {msg}")


def _format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    return f"{size / 1024:.1f} KiB"


def version_callback(value: bool) -> None:
    if value:
        console.print(f"sqzunpack {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Show extra info (formats, retries, decoder events).",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Only show errors.",
    ),
) -> None:
    """sqzunpack: Decompress SQZ/DIET packed resources of DOS games."""
    global _verbose, _quiet
    _verbose = verbose
    _quiet = quiet
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
            force=True,
        )


@app.command()
def unpack(
    file: Path = typer.Argument(..., help="Packed resource file."),
    output: Path | None = typer.Option(
        None, "--output", "-o",
        help="Output path (default: <name>.bin next to the input).",
    ),
    alt_lzw: bool = typer.Option(
        False, "--alt-lzw", envvar="SQZUNPACK_ALT_LZW",
        help="Use swapped LZW clear/end codes.",
    ),
    retry_alt_lzw: bool = typer.Option(
        False, "--retry-alt-lzw", envvar="SQZUNPACK_RETRY_ALT_LZW",
        help="Retry failed LZW files with the alternate codes.",
    ),
) -> None:
    """Decompress a single packed resource."""
    from sqzunpack.pipeline import default_output_path, unpack_file

    if not file.exists():
        _error(f"File not found: {file}")
        raise typer.Exit(1)

    out = output if output is not None else default_output_path(file)
    try:
        result = unpack_file(file, out, alt_lzw=alt_lzw, retry_alt_lzw=retry_alt_lzw)
    except (SqzError, OSError) as e:
        _error(f"{file.name}: {e}")
        raise typer.Exit(1) from e

    compression = result.compression.value if result.compression else "?"
    _print(
        f"Unpacked [cyan]{file.name}[/cyan] ({compression}) → "
        f"[green]{out}[/green] ({_format_size(len(result.data))})"
    )
    if result.alt_lzw and not alt_lzw:
        _print("[yellow]Decoded with alternate LZW codes[/yellow]")


@app.command()
def info(
    files: list[Path] = typer.Argument(..., help="Packed resource files."),
) -> None:
    """Show the header of packed resources without decoding them."""
    from sqzunpack.core.unpacker import inspect

    table = Table(title="Packed resources")
    table.add_column("File")
    table.add_column("Format")
    table.add_column("Type", style="dim")
    table.add_column("Packed", justify="right")
    table.add_column("Unpacked", justify="right")

    failed = False
    for file in files:
        try:
            res = inspect(file)
        except SqzError as e:
            _error(f"{file.name}: {e}")
            failed = True
            continue
        table.add_row(
            file.name,
            res.compression.value,
            f"0x{res.format_type:02X}" if res.format_type is not None else "",
            str(res.compressed_size),
            str(res.payload_size),
        )

    console.print(table)
    if failed:
        raise typer.Exit(1)


@app.command()
def batch(
    directory: Path = typer.Argument(
        ..., help="Directory containing packed resources.",
    ),
    pattern: str = typer.Option(
        "*.SQZ", "--pattern", "-p", help="File glob pattern.",
    ),
    output_dir: Path | None = typer.Option(
        None, "--output-dir", "-O",
        help="Output directory (default: next to each input).",
    ),
    alt_lzw: bool = typer.Option(
        False, "--alt-lzw", envvar="SQZUNPACK_ALT_LZW",
        help="Use swapped LZW clear/end codes.",
    ),
    retry_alt_lzw: bool = typer.Option(
        False, "--retry-alt-lzw", envvar="SQZUNPACK_RETRY_ALT_LZW",
        help="Retry failed LZW files with the alternate codes.",
    ),
    report: Path | None = typer.Option(
        None, "--report", "-r", help="Save report (JSON/MD/CSV by extension).",
    ),
) -> None:
    """Decompress all matching files in a directory."""
    from sqzunpack.pipeline import batch_unpack, find_resources
    from sqzunpack.reporting.formatters import save_report
    from sqzunpack.reporting.report import UnpackReport

    if not directory.is_dir():
        _error(f"Not a directory: {directory}")
        raise typer.Exit(1)

    files = find_resources(directory, pattern)
    if not files:
        _print(f"[yellow]No files matching '{pattern}' in {directory}[/yellow]")
        raise typer.Exit()

    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)

    _print(f"Found [green]{len(files)}[/green] files matching '{pattern}'\n")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
        disable=_quiet,
    ) as progress:
        task = progress.add_task("Unpacking", total=len(files))

        def on_progress(current: int, total: int, message: str) -> None:
            progress.update(task, completed=current, description=f"Unpacking {message}")

        result = batch_unpack(
            files,
            output_dir=output_dir,
            alt_lzw=alt_lzw,
            retry_alt_lzw=retry_alt_lzw,
            progress_callback=on_progress,
        )

    retried = sum(1 for r in result.results if r.ok and r.alt_lzw and not alt_lzw)

    if not _quiet:
        summary = Table(title="Batch Summary")
        summary.add_column("Metric", style="bold")
        summary.add_column("Count", justify="right")
        summary.add_row("Unpacked", f"[green]{result.success_count}[/green]")
        summary.add_row("Alternate LZW", f"[yellow]{retried}[/yellow]")
        summary.add_row("Errors", f"[red]{result.error_count}[/red]")
        summary.add_row("Total", str(len(files)))
        summary.add_row("Bytes written", _format_size(result.total_bytes))
        console.print(summary)
        _print(f"Elapsed: {result.elapsed_seconds:.2f}s", verbose_only=True)

    if result.errors:
        err_table = Table(title="Errors")
        err_table.add_column("File", style="red")
        err_table.add_column("Error")
        for fname, err_msg in result.errors:
            err_table.add_row(fname, err_msg)
        console.print(err_table)

    if report is not None:
        rpt = UnpackReport(
            source_dir=str(directory),
            output_dir=str(output_dir) if output_dir is not None else "",
            pattern=pattern,
        )
        rpt.add_batch(result)
        rpt.finish()
        save_report(rpt, report)
        _print(f"Report saved: [cyan]{report}[/cyan]")

    if result.error_count:
        raise typer.Exit(1)
