"""CLI renderer for tinysh."""

import sys
from typing import Optional

from prompt_toolkit import PromptSession
from rich.console import Console
from rich.markup import escape


class Renderer:
    """Terminal output with Rich and line input with prompt_toolkit."""

    def __init__(self, console: Optional[Console] = None, interactive: Optional[bool] = None) -> None:
        self.console: Console = console or Console(highlight=False, soft_wrap=True)
        self._interactive = sys.stdin.isatty() if interactive is None else interactive
        self._prompt_session: Optional[PromptSession[str]] = None

    def info(self, message: str) -> None:
        """Render an info message."""
        self.console.print(message, markup=False)

    def error(self, message: str) -> None:
        """Render an error message."""
        self.console.print(f"[bold red]Error:[/bold red] {escape(message)}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]{escape(message)}[/yellow]")

    def welcome(self, search_path: tuple[str, ...], verbose: bool) -> None:
        """Render the startup banner."""
        if verbose:
            self.info("Running in verbose mode.")
        if search_path:
            self.info("Using the path defined in the provided path file.")
        else:
            self.info("Using the path defined by your environment.")

    def command_status(self, succeeded: bool) -> None:
        """Render the verbose per-command summary."""
        if succeeded:
            self.console.print("\n[green]Previous command was successful.[/green]\n")
        else:
            self.console.print("\n[red]Previous command failed.[/red]\n")

    def get_user_input(self, prompt: str) -> str:
        """Prompt user for input.

        Raises:
            EOFError: At end of input
        """
        if self._interactive:
            if self._prompt_session is None:
                self._prompt_session = PromptSession()
            return self._prompt_session.prompt(prompt)
        self.console.print(prompt, end="", markup=False)
        line = sys.stdin.readline()
        if not line:
            raise EOFError
        return line


def create_cli_renderer() -> Renderer:
    """Create and return a Renderer instance."""
    return Renderer()
