"""CLI — One-off scans against the scanning API.

Exit codes: 0 safe, 1 unsafe content detected, 2 the scan itself failed.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.table import Table

from promptshield.scan.models import ScanResponse

if TYPE_CHECKING:
    from promptshield.scan.client import ScanClient

app = typer.Typer(help="Scan text or images for prompt injection.")
console = Console()

EXIT_UNSAFE = 1
EXIT_SCAN_FAILED = 2


def _client(base_url: str | None, api_key: str | None) -> ScanClient:
    from promptshield.scan.client import ScanClient

    return ScanClient(base_url=base_url, api_key=api_key)


def _report(result: ScanResponse, json_output: bool) -> None:
    if json_output:
        console.print_json(json.dumps(result.model_dump(mode="json")))
    else:
        status = "[green]safe[/green]" if result.is_safe else "[red]UNSAFE[/red]"
        console.print(f"Verdict: {status}  (request {result.request_id or '-'})")

        if result.categories:
            table = Table(title="Detected categories")
            table.add_column("Category", style="cyan")
            table.add_column("Confidence")
            for c in result.categories:
                table.add_row(str(getattr(c.code, "value", c.code)),
                              str(getattr(c.confidence, "value", c.confidence)))
            console.print(table)

    if not result.is_safe:
        raise typer.Exit(EXIT_UNSAFE)


@app.command("text")
def scan_text(
    text: str = typer.Argument(help="Text to scan. Use '-' to read stdin."),
    base_url: str | None = typer.Option(None, "--base-url", help="Override the API base URL."),
    api_key: str | None = typer.Option(None, "--api-key", envvar="PROMPTSHIELD_SCAN__API_KEY"),
    json_output: bool = typer.Option(False, "--json", help="Output the raw verdict as JSON."),
) -> None:
    """Scan a piece of text."""
    if text == "-":
        text = typer.get_text_stream("stdin").read()

    try:
        with _client(base_url, api_key) as client:
            result = client.scan_text(text)
    except Exception as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(EXIT_SCAN_FAILED)

    _report(result, json_output)


@app.command("image")
def scan_image(
    path: Path = typer.Argument(help="Image file (PNG, JPEG, GIF or WebP).", exists=True, dir_okay=False),
    base_url: str | None = typer.Option(None, "--base-url", help="Override the API base URL."),
    api_key: str | None = typer.Option(None, "--api-key", envvar="PROMPTSHIELD_SCAN__API_KEY"),
    json_output: bool = typer.Option(False, "--json", help="Output the raw verdict as JSON."),
) -> None:
    """Scan an image file."""
    try:
        with _client(base_url, api_key) as client:
            result = client.scan_image(path.read_bytes())
    except Exception as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(EXIT_SCAN_FAILED)

    _report(result, json_output)
