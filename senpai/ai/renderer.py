from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Sequence, Union

from rich.cells import cell_len
from rich.markup import escape

from .errors import EmptyStructuredOutputError
from .parser import ParsedRecord, max_label_width, parse
from .prompts import TaskKind


# Columns between the longest label and the content.
LABEL_GUTTER = 2
PLAIN_SEPARATOR = ": "


@dataclass(frozen=True)
class RenderedOutput:
    """
    `display` is rich console markup for the terminal; `plain` has no styling and is what
    gets copied to the clipboard.
    """

    display: str
    plain: str


@dataclass(frozen=True)
class Style:
    label: str
    content: str


STYLES: Mapping[TaskKind, Style] = MappingProxyType(
    {
        TaskKind.GENERATE: Style(label="green", content="cyan"),
        TaskKind.EXPLAIN: Style(label="green", content="grey62"),
        TaskKind.TEACH: Style(label="cyan", content="white"),
        TaskKind.EXAMPLES: Style(label="yellow", content="grey62"),
        TaskKind.IMPROVE: Style(label="blue", content="grey62"),
        TaskKind.CONVERT: Style(label="magenta", content="white"),
        TaskKind.FIX: Style(label="green", content="grey62"),
        TaskKind.DIAGNOSE_ERROR: Style(label="bold red", content="white"),
    }
)


def _styled(text: str, style: str) -> str:
    return f"[{style}]{escape(text)}[/{style}]"


def _pad(text: str, width: int) -> str:
    return text + " " * max(width - cell_len(text), 0)


def render_records(records: Sequence[ParsedRecord], style: Style) -> RenderedOutput:
    """Lays out one record per line, every label padded to the same column."""
    if not records:
        raise EmptyStructuredOutputError("There is nothing to display.")

    width = max_label_width(records) + LABEL_GUTTER
    display = "\n".join(
        _styled(_pad(record.label, width), style.label) + _styled(record.content, style.content)
        for record in records
    )
    plain = "\n".join(f"{record.label}{PLAIN_SEPARATOR}{record.content}" for record in records)
    return RenderedOutput(display=display, plain=plain)


def render_commands(commands: Sequence[str], style: Style) -> RenderedOutput:
    """Lays out generated commands as a numbered list."""
    if not commands:
        raise EmptyStructuredOutputError("There is nothing to display.")

    display = "\n".join(
        f"{_styled(f'{index}.', style.label)} {_styled(command, style.content)}"
        for index, command in enumerate(commands, start=1)
    )
    return RenderedOutput(display=display, plain="\n".join(commands))


def render(
    parsed: Union[Sequence[ParsedRecord], Sequence[str]], kind: TaskKind
) -> RenderedOutput:
    """
    Renders parsed output for the given task: a numbered command list for `GENERATE`,
    aligned label/content lines for everything else.
    """
    style = STYLES[kind]
    if kind == TaskKind.GENERATE:
        return render_commands(parsed, style)
    return render_records(parsed, style)


def format_reply(raw: str, kind: TaskKind) -> RenderedOutput:
    """Parses a raw model reply with the grammar of `kind` and renders it."""
    return render(parse(raw, kind), kind)
