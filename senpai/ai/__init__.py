"""
The `ai` package provides the core of the command-line assistant: the prompt templates,
the provider gateway and the parsing and rendering of structured replies.
"""

from .errors import ErrorKind, SenpaiError, EmptyStructuredOutputError, EmptyInputError
from .gateway import dispatch
from .parser import ParsedRecord, parse, parse_list
from .prompts import TaskKind, lookup
from .providers import Failure, ProviderConfig, Success
from .renderer import RenderedOutput, format_reply, render


__all__ = [
    "EmptyInputError",
    "EmptyStructuredOutputError",
    "ErrorKind",
    "Failure",
    "ParsedRecord",
    "ProviderConfig",
    "RenderedOutput",
    "SenpaiError",
    "Success",
    "TaskKind",
    "dispatch",
    "format_reply",
    "lookup",
    "parse",
    "parse_list",
    "render",
]
