# backend/app/features/ssl_check/reporting/console.py
"""Rich terminal UI for CLI output."""

from typing import List, Tuple

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..models import Grade, SslReport

# Global console instance
console = Console()

GRADE_COLORS = {
    Grade.A_PLUS: "bold green",
    Grade.A: "green",
    Grade.B: "cyan",
    Grade.C: "yellow",
    Grade.D: "orange1",
    Grade.F: "bold red",
    Grade.NOT_APPLICABLE: "dim",
}


def _grade_display(grade: Grade) -> str:
    style = GRADE_COLORS.get(grade, "white")
    return f"[{style}]{grade.value}[/{style}]"


def show_progress(message: str) -> None:
    """Show a progress message in the terminal."""
    if "[FAIL]" in message or "[ERROR]" in message:
        console.print(f"[bold red]{message}[/bold red]")
    elif "[PASS]" in message:
        console.print(f"[dim green]{message}[/dim green]")
    else:
        console.print(f"[cyan]{message}[/cyan]")


def show_results_table(results: List[Tuple[str, SslReport]]) -> None:
    """Display one row per checked domain."""
    table = Table(title="SSL Check Results", show_header=True, header_style="bold cyan")

    table.add_column("Domain", style="cyan")
    table.add_column("Valid", justify="center", width=7)
    table.add_column("Grade", justify="center", width=7)
    table.add_column("Issuer")
    table.add_column("Issues", justify="center", width=8)

    for domain, report in results:
        valid = "[green]yes[/green]" if report.is_valid else "[bold red]no[/bold red]"
        issues = len(report.vulnerabilities or [])
        issues_display = f"[bold red]{issues}[/bold red]" if issues else "[dim]0[/dim]"
        table.add_row(
            escape(domain),
            valid,
            _grade_display(report.grade),
            escape(report.issuer) if report.issuer else "[dim]-[/dim]",
            issues_display,
        )

    console.print()
    console.print(table)


def show_report(domain: str, report: SslReport) -> None:
    """Show findings and recommendations for one domain."""
    lines = [f"Grade: {_grade_display(report.grade)}"]
    if report.error_message:
        lines.append(f"[red]{escape(report.error_message)}[/red]")
    if report.is_valid:
        lines.append(f"Issuer: {escape(report.issuer or '')}")
        if report.expires_at:
            lines.append(f"Expires (estimate): {report.expires_at:%Y-%m-%d}")
    elif report.domain_exists is not None:
        lines.append(f"Domain exists: {'yes' if report.domain_exists else 'no'}")

    if report.vulnerabilities:
        lines.append("")
        lines.append("[bold red]Findings[/bold red]")
        lines.extend(f"  [red]• {escape(v)}[/red]" for v in report.vulnerabilities)

    lines.append("")
    lines.append("[bold]Recommendations[/bold]")
    lines.extend(f"  [cyan]→ {escape(r)}[/cyan]" for r in report.recommendations)

    border = "green" if report.is_valid and not report.vulnerabilities else (
        "yellow" if report.is_valid else "red"
    )
    console.print(
        Panel("\n".join(lines), border_style=border, title=f"[bold]{escape(domain)}[/bold]", title_align="left")
    )


def show_error(message: str) -> None:
    """Display an error message without stack trace."""
    console.print(f"\n[bold red][ERROR][/bold red] {escape(message)}\n")
