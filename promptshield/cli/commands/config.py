"""CLI — Configuration inspection."""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.syntax import Syntax

app = typer.Typer(help="Inspect the effective configuration.")
console = Console()


def _mask(secret: str | None) -> str | None:
    if not secret:
        return secret
    return secret[:4] + "…" if len(secret) > 8 else "****"


@app.command("show")
def show_config(
    config_file: Path | None = typer.Option(None, "--config", "-c", help="Extra YAML config file."),
) -> None:
    """Print the effective settings (API key masked)."""
    from promptshield.config import Settings

    settings = Settings.load(config_file=config_file)
    data = settings.model_dump(mode="json")
    data["scan"]["api_key"] = _mask(settings.scan.api_key)

    console.print(Syntax(json.dumps(data, indent=2), "json"))
