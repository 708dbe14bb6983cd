# backend/app/cli.py
"""Typer CLI application for the SSL grader."""

import asyncio
import json
from typing import List, Tuple

import typer
from rich.progress import Progress, SpinnerColumn, TextColumn

from backend.app.core import logs, settings
from backend.app.features.ssl_check.models import SslReport
from backend.app.features.ssl_check.reporting import (
    console,
    show_error,
    show_progress,
    show_report,
    show_results_table,
)
from backend.app.features.ssl_check.schemas import normalize_domain
from backend.app.features.ssl_check.services import SslCheckService

app = typer.Typer(
    name="sslgrade",
    help="SSL Grader - Grade the HTTPS security headers of a domain",
    add_completion=False,
    no_args_is_help=True,
)


@app.command()
def check(
    domains: List[str] = typer.Argument(
        ...,
        help="Domains or URLs to check (e.g., example.com https://example.org/login)",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print raw JSON reports instead of tables",
    ),
) -> None:
    """
    Check one or more domains, one after another.

    Example usage:

        sslgrade check example.com

        sslgrade check https://example.com/login example.org --json
    """
    try:
        cleaned = [d for d in (normalize_domain(raw) for raw in domains) if d]
        if not cleaned:
            show_error("Domain is required")
            raise typer.Exit(1)

        limit = settings.MAX_BULK_DOMAINS
        if len(cleaned) > limit:
            if not as_json:
                console.print(
                    f"[yellow]Only the first {limit} of {len(cleaned)} domains will be checked[/yellow]"
                )
            cleaned = cleaned[:limit]

        results = asyncio.run(_run_checks(cleaned, quiet=as_json))

        if as_json:
            typer.echo(
                json.dumps(
                    [{"domain": d, **r.to_payload()} for d, r in results],
                    indent=2,
                )
            )
        else:
            show_results_table(results)
            console.print()
            for domain, report in results:
                show_report(domain, report)

        if any(not r.is_valid for _, r in results):
            raise typer.Exit(1)

    except typer.Exit:
        raise
    except Exception as e:
        logs.error("CLI check failed", "cli", exception=e)
        show_error(str(e))
        raise typer.Exit(1)


async def _run_checks(domains: List[str], quiet: bool = False) -> List[Tuple[str, SslReport]]:
    """Run checks sequentially with a spinner."""
    service = SslCheckService()
    results: List[Tuple[str, SslReport]] = []

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
        disable=quiet,
    ) as progress:
        task = progress.add_task("Starting...", total=None)
        for domain in domains:
            progress.update(task, description=f"Checking {domain}...")
            report = await service.check(domain)
            results.append((domain, report))
            if not quiet:
                status = "PASS" if report.is_valid else "FAIL"
                show_progress(f"[{status}] {domain}: {report.grade.value}")

    return results


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("backend.app.main:app", host=host, port=port, reload=reload)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"SSL Grader v{settings.APP_VERSION}")


@app.command()
def info() -> None:
    """Show configuration information."""
    console.print()
    console.print("[bold]Configuration[/bold]")
    console.print()
    console.print(f"  App Name:      {settings.APP_NAME}")
    console.print(f"  Version:       {settings.APP_VERSION}")
    console.print(f"  Environment:   {settings.ENVIRONMENT}")
    console.print(f"  HTTPS timeout: {settings.HTTPS_TIMEOUT}s")
    console.print(f"  HTTP timeout:  {settings.HTTP_FALLBACK_TIMEOUT}s")
    console.print(f"  AI model:      {settings.AI_MODEL}")
    console.print(f"  AI key set:    {'yes' if settings.AI_API_KEY else 'no'}")
    console.print()


if __name__ == "__main__":
    app()
