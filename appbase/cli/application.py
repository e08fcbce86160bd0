"""
Application Scaffold
====================

Command tree assembly and logging bootstrap for appbase command-line tools.

Usage:
    app = Application("example", "short help", "long description", "1.0.0")
    app.register_commands([secure.command])
    sys.exit(app.run())

Global flags (before the command name):
    -l/--log            enable logging (off by default)
    --loglevel LEVEL    error (default), warn, info or debug
    --logformat FORMAT  json (default) or text
    --logtarget TARGET  console (default) or a log file path

Each flag falls back to its APPBASE_* environment variable when omitted.
"""

from __future__ import annotations

import argparse
import contextlib
import logging
import sys
from dataclasses import dataclass, field, replace
from typing import Callable, Iterable, Optional, TextIO

from appbase.core.config import ConfigurationError, LoggingConfig
from appbase.core.exceptions import SecureDataError
from appbase.core.logging import configure_logging

RunFunc = Callable[["CommandContext", argparse.Namespace], Optional[int]]
ConfigureFunc = Callable[[argparse.ArgumentParser], None]


@dataclass
class CommandContext:
    """Everything a command needs, passed explicitly instead of via globals."""

    app_name: str
    logging_config: LoggingConfig
    logger: logging.Logger
    stdout: TextIO
    stderr: TextIO

    def echo(self, text: str = "") -> None:
        print(text, file=self.stdout)


@dataclass
class Command:
    """
    One node of the command tree.

    Attributes:
        name: Command name on the command line
        help: One-line help shown by the parent command
        description: Longer help text for the command itself
        run: Called with the context and parsed arguments; a group
            command without one prints its help
        configure: Adds the command's own arguments to its parser
        subcommands: Child commands
        log_target: Forces this command's log target, overriding --logtarget
    """

    name: str
    help: str = ""
    description: str = ""
    run: Optional[RunFunc] = None
    configure: Optional[ConfigureFunc] = None
    subcommands: list[Command] = field(default_factory=list)
    log_target: Optional[str] = None

    def initialize(self, subparsers: argparse._SubParsersAction) -> argparse.ArgumentParser:
        """Create this command's parser, and its children's, under ``subparsers``."""
        parser = subparsers.add_parser(
            self.name,
            help=self.help,
            description=self.description or self.help,
        )
        if self.configure is not None:
            self.configure(parser)
        parser.set_defaults(_command=self, _parser=parser)

        if self.subcommands:
            children = parser.add_subparsers(title="commands", metavar="COMMAND")
            for sub in self.subcommands:
                sub.initialize(children)
        return parser


class Application:
    """Root command with logging flags and registered sub-commands."""

    def __init__(
        self,
        name: str,
        short: str,
        long: str = "",
        version: str = "",
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ) -> None:
        self.name = name
        self._stdout = stdout
        self._stderr = stderr

        self.parser = argparse.ArgumentParser(prog=name, description=long or short)
        if version:
            self.parser.add_argument(
                "--version", action="version", version=f"%(prog)s {version}"
            )
        self.parser.add_argument(
            "-l", "--log", action="store_true", default=None, help="enable logging"
        )
        self.parser.add_argument("--loglevel", default=None, help="log level (default: error)")
        self.parser.add_argument("--logformat", default=None, help="[text|json] (default: json)")
        self.parser.add_argument(
            "--logtarget", default=None, help="[console|<file>] (default: console)"
        )
        self._subparsers = self.parser.add_subparsers(title="commands", metavar="COMMAND")

    @property
    def stdout(self) -> TextIO:
        return self._stdout or sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr or sys.stderr

    def register_commands(self, commands: Iterable[Command]) -> None:
        for command in commands:
            command.initialize(self._subparsers)

    def logging_config(self, args: argparse.Namespace, command: Optional[Command] = None) -> LoggingConfig:
        """
        Build the logging configuration from flags, environment and command.

        Raises:
            ConfigurationError: If a value is invalid
        """
        config = LoggingConfig.from_env()
        overrides = {}
        if args.log is not None:
            overrides["enabled"] = args.log
        if args.loglevel is not None:
            overrides["level"] = args.loglevel
        if args.logformat is not None:
            overrides["format"] = args.logformat
        if args.logtarget is not None:
            overrides["target"] = args.logtarget
        if overrides:
            config = replace(config, **overrides)
        if command is not None:
            config = config.with_target(command.log_target)
        return config

    def run(self, argv: Optional[list[str]] = None) -> int:
        """
        Parse arguments and execute the selected command.

        Returns:
            Process exit status
        """
        try:
            # argparse writes usage, errors and --version to sys.stdout/sys.stderr
            with contextlib.redirect_stdout(self.stdout), contextlib.redirect_stderr(self.stderr):
                args = self.parser.parse_args(argv)
        except SystemExit as e:
            if e.code is None or isinstance(e.code, int):
                return e.code or 0
            return 1

        command: Optional[Command] = getattr(args, "_command", None)
        if command is None:
            self.parser.print_usage(self.stderr)
            print(f"{self.name}: error: a command is required", file=self.stderr)
            return 2

        try:
            logging_config = self.logging_config(args, command)
            logger = configure_logging(logging_config, stream=self.stderr)
        except ConfigurationError as e:
            print(f"{self.name}: error: {e}", file=self.stderr)
            return 1

        if command.run is None:
            args._parser.print_help(self.stdout)
            return 0

        ctx = CommandContext(
            app_name=self.name,
            logging_config=logging_config,
            logger=logger,
            stdout=self.stdout,
            stderr=self.stderr,
        )
        try:
            result = command.run(ctx, args)
        except (SecureDataError, ConfigurationError) as e:
            logger.error(
                "application terminated unexpectedly (application=%s, error=%s)",
                self.name, str(e),
            )
            print(f"Error: {e}", file=self.stderr)
            return 1

        return int(result or 0)
