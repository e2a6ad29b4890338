"""
Exception hierarchy for rdf-quadstore.

Parse failures, unsupported formats and remote retrieval failures are
distinct branches so callers can tell a malformed document apart from a
document that could not be fetched.
"""
from typing import Optional


class QuadstoreError(Exception):
    """Base class for all rdf-quadstore errors."""


class UnsupportedFormatError(QuadstoreError, ValueError):
    """No parser or serializer is registered for a format identifier."""

    def __init__(self, identifier: str, operation: str = "parse"):
        self.identifier = identifier
        self.operation = operation
        super().__init__(f"Format {identifier!r} is not supported for {operation}")


class ParseError(QuadstoreError, ValueError):
    """A document (or part of one) could not be parsed."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class TurtleSyntaxError(ParseError):
    """The Turtle grammar parser rejected its input."""


class TriGSyntaxError(ParseError):
    """TriG input uses a construct outside the supported block subset."""


class JSONLDSyntaxError(ParseError):
    """JSON-LD input is not valid JSON or could not be expanded to RDF."""


class RemoteFetchError(QuadstoreError):
    """A remote document could not be retrieved."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Could not fetch {url}: {reason}")


class RemoteStatusError(RemoteFetchError):
    """The remote server answered with a non-success HTTP status."""

    def __init__(self, url: str, status: int):
        self.status = status
        super().__init__(url, f"HTTP {status}")
