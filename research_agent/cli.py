import logging
from typing import Optional

import typer
import uvicorn
from rich.console import Console
from rich.logging import RichHandler

from research_agent.config import Settings

app = typer.Typer()
console = Console()


@app.callback()
def main():
    """Research agent for the OpenServ platform."""


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Interface to bind"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to listen on (default: $PORT or 7378)"),
):
    """Start the agent server."""
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )
    for key in settings.missing_keys():
        console.print(f"[bold yellow]Warning:[/] {key} is not set")

    from research_agent.api.server import app as server_app, init_state
    init_state(settings)

    port = port or settings.port
    console.print(f"[bold green]Research Agent[/] listening on [cyan]{host}:{port}[/]")
    uvicorn.run(server_app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    app()
