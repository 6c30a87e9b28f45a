"""promptshield CLI — Entry point.

Usage:
    promptshield scan text "<text>"
    promptshield scan image <file.png>
    promptshield config show
"""

from __future__ import annotations

import typer

from promptshield.cli.commands import config, scan

app = typer.Typer(
    name="promptshield",
    help="promptshield — prompt-injection scanning for MCP clients.",
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)

app.add_typer(scan.app, name="scan")
app.add_typer(config.app, name="config")


@app.callback()
def main_callback(
    log_level: str | None = typer.Option(None, "--log-level", help="Enable logging at this level."),
) -> None:
    if log_level:
        from promptshield.logging import configure_logging

        configure_logging(level=log_level)


if __name__ == "__main__":
    app()
