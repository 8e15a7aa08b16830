"""Interactive read-eval loop and builtins."""

from __future__ import annotations

import os
from collections.abc import Callable

from loguru import logger

from tinysh.core import Classification, DispatchStatus, ExecutionContext, classify, dispatch
from tinysh.render import Renderer

EXIT_COMMANDS = frozenset({"exit", "quit"})

HELP_TEXT = """\
Builtins:
  exit, quit     leave the shell
  verbose        trace process creation and descriptor wiring
  brief          stop tracing
  cd [dir]       change directory, HOME when no directory is given
  pwd            print the working directory
  help           show this message

Anything else runs as a program. One special feature is allowed per command:
  cmd > file     write the output of cmd to file, truncating it
  cmd >> file    append the output of cmd to file
  cmd | other    pipe the output of cmd into other"""


def tokenize(line: str) -> list[str]:
    """Split a command line on whitespace; there is no quoting."""
    return line.split()


class Shell:
    """The tinysh interactive loop."""

    def __init__(self, context: ExecutionContext, renderer: Renderer, prompt: str = "tinysh> ") -> None:
        self.context = context
        self.renderer = renderer
        self.prompt = prompt
        self.exit_requested = False
        self._builtins: dict[str, Callable[[list[str]], DispatchStatus]] = {
            "verbose": self._verbose,
            "brief": self._brief,
            "cd": self._cd,
            "pwd": self._pwd,
            "help": self._help,
        }

    def run(self) -> int:
        """Read and execute lines until exit or end of input.

        Returns:
            0 after a user-initiated exit, 1 if input could not be read
        """
        while not self.exit_requested:
            try:
                line = self.renderer.get_user_input(self.prompt)
            except EOFError:
                if self.context.verbose:
                    self.renderer.info("\nEncountered end of input. Exiting now...\n")
                break
            except KeyboardInterrupt:
                self.renderer.info("")
                break
            except OSError as exc:
                logger.error("Error reading user commands from standard input: {}", exc.strerror)
                return 1
            self.execute_line(line)

        self.renderer.info("Exiting now. Thanks for using tinysh!")
        return 0

    def execute_line(self, line: str) -> DispatchStatus | None:
        """Execute one input line; None when there was nothing to do."""
        tokens = tokenize(line)
        if not tokens:
            return None
        if tokens[0] in EXIT_COMMANDS:
            self.exit_requested = True
            return DispatchStatus.SUCCESS

        if self.context.verbose:
            self.renderer.info("")
        builtin = self._builtins.get(tokens[0])
        status = builtin(tokens) if builtin is not None else dispatch(tokens, self.context)

        if status is DispatchStatus.INTERRUPTED:
            self.renderer.warning("Command was interrupted by the user.")
        if self.context.verbose:
            self.renderer.command_status(status is DispatchStatus.SUCCESS)
        return status

    def _verbose(self, _tokens: list[str]) -> DispatchStatus:
        self.context = self.context.with_verbose(True)
        return DispatchStatus.SUCCESS

    def _brief(self, _tokens: list[str]) -> DispatchStatus:
        self.context = self.context.with_verbose(False)
        return DispatchStatus.SUCCESS

    def _cd(self, tokens: list[str]) -> DispatchStatus:
        if len(tokens) > 2:
            self.renderer.error("Too many arguments.\nUsage: cd [dir]")
            return DispatchStatus.FAILURE
        if len(tokens) == 1:
            target = os.environ.get("HOME")
            if target is None:
                self.renderer.error("There is no HOME variable defined in your environment.")
                return DispatchStatus.FAILURE
        else:
            target = tokens[1]
        try:
            os.chdir(target)
        except OSError as exc:
            self.renderer.error(f"cd: {target}: {exc.strerror}")
            return DispatchStatus.FAILURE
        if self.context.verbose:
            self.renderer.info(f"Changed current directory to: {os.getcwd()}")
        return DispatchStatus.SUCCESS

    def _pwd(self, tokens: list[str]) -> DispatchStatus:
        if len(tokens) > 1:
            if classify(tokens) is Classification.PLAIN:
                self.renderer.error("pwd should not have any arguments.")
                return DispatchStatus.FAILURE
            return dispatch(tokens, self.context)
        try:
            cwd = os.getcwd()
        except OSError as exc:
            self.renderer.error(f"Getting the current working directory failed: {exc.strerror}")
            return DispatchStatus.FAILURE
        self.renderer.info(cwd)
        return DispatchStatus.SUCCESS

    def _help(self, _tokens: list[str]) -> DispatchStatus:
        self.renderer.info(HELP_TEXT)
        return DispatchStatus.SUCCESS
