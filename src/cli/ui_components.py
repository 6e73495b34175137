"""Rich components for the CLI.

Kept apart from the commands so tables and panels can be reused.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.domain_type import DomainType
from core.domain.models import BuildReport


def print_banner(console: Console) -> None:
    """Print the welcome banner (skipped in quiet mode)."""

    title = Text("GEOSITE-D2", style="bold cyan")
    subtitle = Text("Domain lists • Validation • geosite.dat", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_report_table(report: BuildReport) -> Table:
    """One row per group of a finished build."""

    table = Table(title="GeoSite groups")
    table.add_column("Label", style="cyan", no_wrap=True)
    table.add_column("Domains", style="white", justify="right")
    for label, count in report.groups.items():
        table.add_row(label, str(count))
    table.caption = f"{report.domain_count} domain(s), {len(report.warnings)} line(s) skipped"
    return table


def build_inspect_table(entries: list[tuple[str, list[tuple[DomainType, str]]]]) -> Table:
    """Summary of a decoded geosite file."""

    table = Table(title="GeoSite file")
    table.add_column("Label", style="cyan", no_wrap=True)
    table.add_column("Domains", style="white", justify="right")
    table.add_column("Rule kinds", style="magenta")
    for label, domains in entries:
        kinds = sorted({kind.label() for kind, _ in domains})
        table.add_row(label, str(len(domains)), ", ".join(kinds) or "-")
    return table
