from enum import Enum


class ErrorKind(str, Enum):
    """Every way a request can fail, from input validation to unusable output."""

    INVALID_REQUEST = "InvalidRequest"
    MISSING_CREDENTIAL = "MissingCredential"
    MISSING_MODEL = "MissingModel"
    UNAUTHORIZED = "Unauthorized"
    FORBIDDEN = "Forbidden"
    RATE_LIMITED = "RateLimited"
    UNREACHABLE = "Unreachable"
    TIMEOUT = "Timeout"
    UPSTREAM_ERROR = "UpstreamError"
    EMPTY_REPLY = "EmptyReply"
    EMPTY_STRUCTURED_OUTPUT = "EmptyStructuredOutput"
    INTERNAL_ERROR = "InternalError"


class SenpaiError(Exception):
    kind: ErrorKind = ErrorKind.INTERNAL_ERROR


class EmptyStructuredOutputError(SenpaiError):
    """The model replied, but nothing in the reply matched the expected format."""

    kind = ErrorKind.EMPTY_STRUCTURED_OUTPUT


class EmptyInputError(SenpaiError):
    kind = ErrorKind.INVALID_REQUEST


class ConfigError(SenpaiError):
    kind = ErrorKind.INVALID_REQUEST
