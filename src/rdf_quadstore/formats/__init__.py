"""
RDF Format Parsers and Serializers.

Supports:
- Turtle (.ttl), parse only
- N-Quads (.nq), the flat default serialization
- TriG (.trig) block subset with named graphs
- JSON-LD (.jsonld) graph-keyed shape

Format identifiers are resolved through resolve_format(), which accepts MIME
types (with or without parameters) and short names. An identifier with no
registered parser or serializer raises UnsupportedFormatError.
"""

from pathlib import Path
from typing import Optional, Union

from rdf_quadstore.errors import UnsupportedFormatError
from rdf_quadstore.formats.turtle import TurtleParser, ParsedDocument, DroppedGroup, parse_turtle, read_source
from rdf_quadstore.formats.nquads import NQuadsParser, NQuadsSerializer, parse_nquads, serialize_nquads
from rdf_quadstore.formats.trig import TriGParser, TriGSerializer, parse_trig, serialize_trig
from rdf_quadstore.formats.jsonld import JSONLDParser, JSONLDSerializer, parse_jsonld, serialize_jsonld

TURTLE = "turtle"
TRIG = "trig"
JSONLD = "json-ld"
NQUADS = "nquads"

FORMAT_ALIASES = {
    "text/turtle": TURTLE,
    "application/x-turtle": TURTLE,
    "turtle": TURTLE,
    "ttl": TURTLE,
    "application/trig": TRIG,
    "trig": TRIG,
    "application/ld+json": JSONLD,
    "json-ld": JSONLD,
    "jsonld": JSONLD,
    "application/n-quads": NQUADS,
    "application/nquads": NQUADS,
    "nquads": NQUADS,
    "n-quads": NQUADS,
    "nq": NQUADS,
}

FORMAT_EXTENSIONS = {
    ".ttl": TURTLE,
    ".turtle": TURTLE,
    ".trig": TRIG,
    ".jsonld": JSONLD,
    ".nq": NQUADS,
    ".nquads": NQUADS,
}

PARSE_FORMATS = frozenset({TURTLE, TRIG, JSONLD, NQUADS})
SERIALIZE_FORMATS = frozenset({TRIG, JSONLD, NQUADS})

MIME_TYPES = {
    TURTLE: "text/turtle",
    TRIG: "application/trig",
    JSONLD: "application/ld+json",
    NQUADS: "application/n-quads",
}


def resolve_format(identifier: str, operation: str = "parse") -> str:
    """
    Map a format identifier to a registered format name.

    Args:
        identifier: MIME type (parameters allowed) or short name, any case
        operation: "parse" or "serialize"

    Returns:
        One of TURTLE, TRIG, JSONLD, NQUADS

    Raises:
        UnsupportedFormatError: nothing is registered for the identifier
    """
    if not identifier:
        raise UnsupportedFormatError(str(identifier), operation)
    normalized = identifier.split(";", 1)[0].strip().lower()
    name = FORMAT_ALIASES.get(normalized)
    supported = PARSE_FORMATS if operation == "parse" else SERIALIZE_FORMATS
    if name is None or name not in supported:
        raise UnsupportedFormatError(identifier, operation)
    return name


def guess_format(path: Union[str, Path]) -> Optional[str]:
    """Guess a format name from a file extension, or None if unknown."""
    return FORMAT_EXTENSIONS.get(Path(path).suffix.lower())


__all__ = [
    # Registry
    "TURTLE",
    "TRIG",
    "JSONLD",
    "NQUADS",
    "MIME_TYPES",
    "PARSE_FORMATS",
    "SERIALIZE_FORMATS",
    "resolve_format",
    "guess_format",
    # Core types
    "ParsedDocument",
    "DroppedGroup",
    "read_source",
    # Turtle
    "TurtleParser",
    "parse_turtle",
    # N-Quads
    "NQuadsParser",
    "NQuadsSerializer",
    "parse_nquads",
    "serialize_nquads",
    # TriG
    "TriGParser",
    "TriGSerializer",
    "parse_trig",
    "serialize_trig",
    # JSON-LD
    "JSONLDParser",
    "JSONLDSerializer",
    "parse_jsonld",
    "serialize_jsonld",
]
