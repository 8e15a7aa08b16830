"""tinysh command line entry point."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from loguru import logger

from tinysh.config import get_settings, load_search_path
from tinysh.core import ExecutionContext
from tinysh.errors import PathFileError
from tinysh.render import create_cli_renderer
from tinysh.shell import Shell

app = typer.Typer(
    name="tinysh",
    help="A tiny UNIX shell.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.command()
def main(
    path: Optional[Path] = typer.Option(  # noqa: B008
        None, "--path", "-p", help="File listing executable search prefixes, one per line"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Trace process creation and descriptor wiring"),
) -> None:
    """Start the interactive shell."""
    settings = get_settings(path_file=path, verbose=verbose or None)
    renderer = create_cli_renderer()

    try:
        search_path = load_search_path(settings.path_file)
    except PathFileError as exc:
        logger.error("{}", exc)
        search_path = ()
    if search_path:
        renderer.info(f"Obtaining path from the following file: {settings.path_file}")

    context = ExecutionContext.from_settings(settings, search_path)
    renderer.welcome(search_path, context.verbose)

    status = Shell(context, renderer, prompt=settings.prompt).run()
    if status != 0:
        raise typer.Exit(status)


if __name__ == "__main__":
    app()
