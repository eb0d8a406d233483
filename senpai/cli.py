#!/usr/bin/env python3
# PYTHON_ARGCOMPLETE_OK

import argparse
import argcomplete
import json
import logging
import os
import sys

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from .ai import EmptyStructuredOutputError, Failure, TaskKind, dispatch, format_reply
from .config import ConfigStore
from .console import OutputSink, get_user_input


_available_commands: List["Command"] = []
_config_store: Optional[ConfigStore] = None

DEBUG_ENV = "SENPAI_DEBUG"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Argument(ABC):
    def __init__(self, help: str, kwargs: Optional[dict] = None):
        self.help = help
        self.kwargs = kwargs if kwargs is not None else {}

    @abstractmethod
    def add_to_parser(self, parser: argparse.ArgumentParser):
        pass


class OptionalArg(Argument):
    def __init__(
        self,
        short_option: Optional[str],
        long_option: str,
        help: str,
        kwargs: Optional[dict] = None,
    ):
        super().__init__(help=help, kwargs=kwargs)
        self.short_option = short_option
        self.long_option = long_option

    def add_to_parser(self, parser: argparse.ArgumentParser):
        flags = [flag for flag in (self.short_option, self.long_option) if flag]
        parser.add_argument(*flags, help=self.help, **self.kwargs)


class PositionalArg(Argument):
    def __init__(self, name: str, help: str, kwargs: Optional[dict] = None):
        super().__init__(help=help, kwargs=kwargs)
        self.name = name

    def add_to_parser(self, parser: argparse.ArgumentParser):
        parser.add_argument(self.name, help=self.help, **self.kwargs)


@dataclass
class Command:
    name: str
    func: Callable
    help: str
    description: str
    args: List[Argument]
    aliases: List[str] = field(default_factory=list)


def _get_config_store() -> ConfigStore:
    global _config_store
    if _config_store is None:
        _config_store = ConfigStore()
    return _config_store


def command(args: List[Argument], aliases: Sequence[str] = ()):
    def decorator(func):
        if not func.__name__.startswith("handle_"):
            raise ValueError("Command handler must start with 'handle_'.")

        if not func.__doc__:
            raise ValueError(
                f"Command handler '{func.__name__}' must have a docstring for its help text."
            )

        # handle_decode_err -> decode-err
        command_name = "-".join(func.__name__.split("_")[1:])
        # Use the first line of the docstring as the help text and
        # the full docstring for the detailed description.
        help_text = func.__doc__.strip().split("\n")[0]
        _available_commands.append(
            Command(command_name, func, help_text, func.__doc__, args, list(aliases))
        )
        return func

    return decorator


def _input_arg(help: str) -> PositionalArg:
    return PositionalArg(name="input", help=help, kwargs={"nargs": "*"})


def _run_task(kind: TaskKind, words: List[str], prompt_message: str, status_message: str):
    """Collects the input, sends it to the configured provider and prints the result."""
    user_input = " ".join(words).strip() or get_user_input(prompt_message)
    sink = OutputSink()

    sink.status(status_message)
    response = dispatch(kind, user_input, _get_config_store().provider_config())
    if not response.ok:
        sink.fail(response)
        sys.exit(1)

    try:
        rendered = format_reply(response.text, kind)
    except EmptyStructuredOutputError as e:
        sink.fail(
            Failure(
                kind=e.kind,
                message=str(e),
                provider_id=response.provider_id,
                model=response.model,
            )
        )
        sys.exit(1)

    sink.emit(rendered)


##############################################################################


@command([_input_arg("The task to generate shell commands for.")], aliases=["gen"])
def handle_generate(args):
    """Generate a terminal command based on a natural language task description."""
    _run_task(TaskKind.GENERATE, args.input, "Enter the task:", "Generating command...")


@command([_input_arg("The shell command you wish to understand.")], aliases=["exp"])
def handle_explain(args):
    """Explain what a specific terminal command does, part by part."""
    _run_task(TaskKind.EXPLAIN, args.input, "Enter the command to explain:", "Explaining command...")


@command([_input_arg("The command you want to learn.")])
def handle_teach(args):
    """Provide a structured tutorial on how to use a given command."""
    _run_task(TaskKind.TEACH, args.input, "Enter the command:", "Creating tutorial...")


@command([_input_arg("The command to show examples for.")], aliases=["ex"])
def handle_examples(args):
    """Show usage examples of the given terminal command."""
    _run_task(TaskKind.EXAMPLES, args.input, "Enter the command:", "Finding examples...")


@command([_input_arg("The command to improve.")], aliases=["imp"])
def handle_improve(args):
    """Suggest improved or more efficient alternatives to the given command."""
    _run_task(TaskKind.IMPROVE, args.input, "Enter the command:", "Analyzing for improvements...")


@command([_input_arg("The command to convert.")], aliases=["conv"])
def handle_convert(args):
    """Convert the given command to equivalent syntax for different shells or operating systems."""
    _run_task(TaskKind.CONVERT, args.input, "Enter the command:", "Converting command...")


@command([_input_arg("The error message to decode.")], aliases=["err"])
def handle_decode_err(args):
    """Explain an error message and suggest possible fixes."""
    _run_task(
        TaskKind.DIAGNOSE_ERROR, args.input, "Enter the error message:", "Analyzing error..."
    )


@command([_input_arg("The broken command to fix.")])
def handle_fix(args):
    """Fix a broken or incorrect command and suggest possible intended variations."""
    _run_task(TaskKind.FIX, args.input, "Enter the command to fix:", "Fixing command...")


@command(
    [
        OptionalArg(
            short_option=None,
            long_option="--set",
            help="Set a configuration value, e.g. --set provider ollama.",
            kwargs={"nargs": 2, "metavar": ("KEY", "VALUE")},
        ),
        OptionalArg(
            short_option=None,
            long_option="--get",
            help="Print the value of a configuration key.",
            kwargs={"metavar": "KEY"},
        ),
        OptionalArg(
            short_option=None,
            long_option="--show",
            help="Show the whole configuration.",
            kwargs={"action": "store_true"},
        ),
        OptionalArg(
            short_option=None,
            long_option="--validate",
            help="Check that the active provider is fully configured.",
            kwargs={"action": "store_true"},
        ),
        OptionalArg(
            short_option=None,
            long_option="--reset",
            help="Restore the default configuration.",
            kwargs={"action": "store_true"},
        ),
    ]
)
def handle_config(args):
    """Manage CLI configuration settings.
    The configuration lives in ~/.config/senpai/config.json (or $SENPAI_CONFIG_DIR).
    """
    store = _get_config_store()

    if args.set:
        key, value = args.set
        store.set(key, value)
        print(f"Configuration updated: {key} = {value}")
    elif args.get:
        value = store.get(args.get)
        if value is None:
            print(f"Configuration key '{args.get}' not found")
        else:
            print(f"{args.get} = {value}")
    elif args.show:
        print("Current configuration:")
        print(json.dumps(store.get_all(), indent=2))
    elif args.validate:
        if store.validate():
            print("Configuration is valid")
        else:
            print("Configuration is invalid")
            print("Set the missing values with: senpai config --set <key> <value>")
            sys.exit(1)
    elif args.reset:
        store.reset()
        print(f"Configuration reset to defaults in {store.config_path}")
    else:
        print("Use one of --set, --get, --show, --validate or --reset. See: senpai config --help")


##############################################################################


def _configure_logging(verbose: bool):
    level = logging.DEBUG if verbose or os.getenv(DEBUG_ENV) else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def run_cli(argv: Optional[List[str]] = None):
    """
    Parses the command line, sets up logging and runs the selected command.
    Any error reaching this level is printed to stderr and exits with status 1.

    Args:
        argv: The arguments without the program name. Defaults to `sys.argv[1:]`.
    """
    parser = argparse.ArgumentParser(
        prog="senpai",
        description="A CLI tool to generate, explain, convert, and improve terminal commands using AI.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug information to stderr."
    )
    subparsers = parser.add_subparsers(
        dest="command", help="Sub-commands", required=True
    )

    # Sort commands alphabetically for consistent --help output.
    _available_commands.sort(key=lambda cmd: cmd.name)

    for command in _available_commands:
        subparser = subparsers.add_parser(
            command.name,
            aliases=command.aliases,
            help=command.help,
            description=command.description,
        )
        for arg in command.args:
            arg.add_to_parser(subparser)
        subparser.set_defaults(func=command.func)

    # Enable argument auto-completion.
    argcomplete.autocomplete(parser)

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    try:
        args.func(args)
    except (KeyboardInterrupt, EOFError):
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def main():
    """The main entry point for the command-line interface, called by the `senpai` script."""
    run_cli()


if __name__ == "__main__":
    main()
