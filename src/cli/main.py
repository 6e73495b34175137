"""geosite-d2 command line.

Commands:
- `build`   download every list in the source file and write geosite.dat
- `inspect` summarize an existing geosite.dat
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from adapters.geosite_encoder import decode_entries
from cli.ui_components import build_inspect_table, build_report_table, print_banner
from core.config import AppSettings
from core.domain.domain_type import DomainType
from core.errors import BatchFetchError, GeositeError
from core.log_setup import configure_logging
from core.services.build_pipeline import run_build

app = typer.Typer(
    no_args_is_help=True,
    help="Build a v2ray geosite.dat routing database from remote domain lists.",
)

_console = Console()

log = logging.getLogger(__name__)


@app.callback()
def main(
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="More logging (repeatable)."),
    quiet: int = typer.Option(0, "--quiet", "-q", count=True, help="Less logging (repeatable)."),
) -> None:
    configure_logging(verbose, quiet)


@app.command()
def build(
    urlfile: Optional[Path] = typer.Option(None, "--urlfile", help="File with `LABEL,URL` lines."),
    outputname: Optional[str] = typer.Option(None, "--outputname", help="Name of the generated file."),
    outputdir: Optional[Path] = typer.Option(None, "--outputdir", help="Output directory."),
    domain_type: Optional[DomainType] = typer.Option(
        None, "--domain-type", help="Rule kind written for every domain."
    ),
    banner: bool = typer.Option(True, "--banner/--no-banner", help="Show the banner."),
) -> None:
    """Download every configured list and write the GeoSite database."""

    overrides = {
        "url_file": urlfile,
        "output_name": outputname,
        "output_dir": outputdir,
        "domain_type": domain_type,
    }
    try:
        settings = AppSettings().model_copy(update={k: v for k, v in overrides.items() if v is not None})
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        _console.print(f"[red]Error:[/red] invalid settings: {escape(problems)}")
        raise typer.Exit(code=1) from exc

    if banner:
        print_banner(_console)

    try:
        report = run_build(settings)
    except BatchFetchError as exc:
        _console.print(f"[red]Build aborted:[/red] {len(exc.errors)} source(s) failed")
        for err in exc.errors:
            _console.print(f"  - {escape(str(err))}")
        raise typer.Exit(code=1) from exc
    except GeositeError as exc:
        _console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    _console.print(build_report_table(report))
    _console.print(f"[green]generated {escape(settings.output_name)}[/green]")
    log.debug("output written to %s", report.output_path)


@app.command()
def inspect(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="geosite.dat file."),
    domains: bool = typer.Option(False, "--domains", help="Also list every domain."),
) -> None:
    """Summarize the groups stored in a GeoSite database."""

    try:
        entries = decode_entries(path.read_bytes())
    except GeositeError as exc:
        _console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    _console.print(build_inspect_table(entries))
    if domains:
        for label, values in entries:
            _console.print(f"[bold cyan]{escape(label)}[/bold cyan]")
            for kind, value in values:
                _console.print(f"  {kind.label()}:{escape(value)}")


def run() -> None:
    app()
