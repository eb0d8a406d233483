"""
Parsing of the plain-text replies the prompts ask the model for.

Label/content replies look like::

    rsync ||| command to sync files
    ---
    -a ||| archive mode

while `generate` replies are a single line of comma-separated commands.
"""

import re
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from rich.cells import cell_len

from .errors import EmptyStructuredOutputError
from .prompts import FIELD_SEPARATOR, TaskKind


# A line holding only the record separator, surrounding whitespace (and a CRLF ending) allowed.
_RECORD_SEPARATOR_LINE = re.compile(r"^[ \t]*---[ \t\r]*$", re.MULTILINE)


@dataclass(frozen=True)
class ParsedRecord:
    label: str
    content: str


ParsedResponse = Tuple[ParsedRecord, ...]


def _parse_chunk(chunk: str):
    label, separator, content = chunk.partition(FIELD_SEPARATOR)
    if not separator:
        return None

    label, content = label.strip(), content.strip()
    if not label or not content:
        return None
    return ParsedRecord(label=label, content=content)


def parse(raw: str, kind: Optional[TaskKind] = None) -> Union[ParsedResponse, Tuple[str, ...]]:
    """
    Splits a label/content reply into records, in the order they appear.
    A `GENERATE` reply is handed to `parse_list` instead.

    Chunks without a `|||` or with an empty side are dropped. Only the first `|||` of a
    chunk splits it, so content may contain pipes of its own.

    Raises:
        EmptyStructuredOutputError: if no valid record is left.
    """
    if kind == TaskKind.GENERATE:
        return parse_list(raw)

    records = []
    for chunk in _RECORD_SEPARATOR_LINE.split(raw or ""):
        record = _parse_chunk(chunk.strip())
        if record:
            records.append(record)

    if not records:
        raise EmptyStructuredOutputError("The AI reply did not contain any usable entries.")
    return tuple(records)


def parse_list(raw: str) -> Tuple[str, ...]:
    """
    Splits a `generate` reply into its commands.

    Raises:
        EmptyStructuredOutputError: if the reply holds no command.
    """
    commands = tuple(cmd.strip() for cmd in (raw or "").split(","))
    commands = tuple(cmd for cmd in commands if cmd)
    if not commands:
        raise EmptyStructuredOutputError("The AI reply did not contain any command.")
    return commands


def max_label_width(records: Sequence[ParsedRecord]) -> int:
    """Width of the longest label in terminal cells, so wide characters count double."""
    return max((cell_len(record.label) for record in records), default=0)
