from typing import Optional

import pyperclip
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from .ai.errors import EmptyInputError
from .ai.providers import Failure
from .ai.renderer import RenderedOutput


def get_user_input(message: str, console: Optional[Console] = None) -> str:
    """Asks the user for input and returns it trimmed. Empty answers are an error."""
    answer = Prompt.ask(f"[bright_cyan]{escape(message)}[/]", console=console or Console())
    value = (answer or "").strip()
    if not value:
        raise EmptyInputError("Input cannot be empty.")
    return value


class OutputSink:
    """Writes rendered results to the terminal and a plain copy to the clipboard."""

    def __init__(self, console: Optional[Console] = None, err_console: Optional[Console] = None):
        self.console = console or Console(highlight=False)
        self.err_console = err_console or Console(stderr=True, highlight=False)

    def status(self, message: str):
        self.err_console.print(f"[dim]{escape(message)}[/dim]")

    def emit(self, rendered: RenderedOutput, copy: bool = True):
        self.console.print(rendered.display, soft_wrap=True)
        if copy:
            self.copy_to_clipboard(rendered.plain)

    def copy_to_clipboard(self, text: str) -> bool:
        # Best effort: headless sessions often have no clipboard at all.
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            self.err_console.print(f"[yellow]Warning: Could not copy to clipboard: {escape(str(e))}[/]")
            return False

        self.err_console.print("[dim]Output copied to clipboard.[/dim]")
        return True

    def fail(self, failure: Failure):
        self.error(failure.describe())

    def error(self, message: str):
        self.err_console.print(f"[bold red]Error:[/] {escape(message)}")
