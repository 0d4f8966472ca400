"""CLI entry point for appgen."""

import asyncio
import logging

import click
import uvicorn

from .backends import get_collaborators
from .config import get_public_url
from .controller import IterationController
from .core import MODE_QUERY
from .export import artifact_url, format_usage

COMMANDS = ":prev, :next, :prompt, :share, :quit"


@click.group()
@click.option("--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """Generate HTML apps from a description and refine them with feedback."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.option("--port", default=8080, help="Port to serve on.")
@click.option("--host", default="127.0.0.1", help="Host to bind to.")
def serve(port: int, host: str):
    """Start the web interface."""
    click.echo(f"Starting appgen on http://{host}:{port}")
    uvicorn.run("appgen.server:app", host=host, port=port, reload=False)


@main.command()
def chat():
    """Iterate on an app from the terminal."""
    generator, store = get_collaborators()
    controller = IterationController(generator, store)
    click.echo(f"Session {controller.session_id}. Commands: {COMMANDS}")

    while True:
        label = "Describe your app" if controller.mode == MODE_QUERY else "Feedback"
        line = click.prompt(label, default="", show_default=False)
        command = line.strip()

        if not command:
            continue
        elif command == ":quit":
            break
        elif command in (":prev", ":next"):
            entry = controller.navigate("previous" if command == ":prev" else "next")
            if entry is None:
                click.echo("No further versions in that direction.")
            else:
                _echo_version(controller)
        elif command == ":prompt":
            click.echo(controller.prompt())
        elif command == ":share":
            reference = controller.share_reference()
            if reference is None:
                click.echo("Nothing to share yet.")
            else:
                click.echo(artifact_url(get_public_url(), *reference))
        else:
            outcome = asyncio.run(controller.submit(line))
            if outcome.status == "ok":
                _echo_version(controller)
                if not outcome.persisted:
                    click.echo("Warning: this version could not be saved.", err=True)
            elif outcome.status == "rejected":
                click.echo(f"Rejected: {outcome.error} (category: {outcome.category})", err=True)
            elif outcome.status == "failed":
                click.echo(f"Error: {outcome.error}", err=True)


def _echo_version(controller: IterationController) -> None:
    """Print the displayed version with its position and usage."""
    entry = controller.history.current()
    header = f"── Version {controller.history.index + 1}/{len(controller.history)}"
    summary = format_usage(entry.usage)
    if summary:
        header += f" ({summary})"
    click.echo(header)
    click.echo(controller.current_html)
