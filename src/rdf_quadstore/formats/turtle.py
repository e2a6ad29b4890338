"""
Turtle Parser.

Turtle grammar is delegated to pyoxigraph's Rust parser. This module
converts pyoxigraph terms into rdf_quadstore terms and defines the parse
result types shared by the other format modules.

Reference: https://www.w3.org/TR/turtle/
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Iterable, List, Optional, Union

from pyoxigraph import BlankNode as OxBlankNode
from pyoxigraph import DefaultGraph as OxDefaultGraph
from pyoxigraph import Literal as OxLiteral
from pyoxigraph import NamedNode as OxNamedNode
from pyoxigraph import RdfFormat
from pyoxigraph import parse as oxigraph_parse

from rdf_quadstore.errors import TurtleSyntaxError
from rdf_quadstore.models import Quad, Triple
from rdf_quadstore.terms import XSD_STRING, BlankNode, Literal, Resource, Term

logger = logging.getLogger(__name__)

Source = Union[str, bytes, Path, IO]


@dataclass
class DroppedGroup:
    """A TriG statement group that failed to parse and was skipped."""
    line_number: int
    text: str
    error: str


@dataclass
class ParsedDocument:
    """Result of parsing a document into quads."""
    quads: List[Quad] = field(default_factory=list)
    dropped: List[DroppedGroup] = field(default_factory=list)
    ignored_directives: List[str] = field(default_factory=list)

    @property
    def triples(self) -> List[Triple]:
        """All statements with graph information discarded."""
        return [q.triple for q in self.quads]

    def __len__(self) -> int:
        return len(self.quads)


def read_source(source: Source) -> str:
    """
    Read a document source into text.

    Accepts a string, UTF-8 bytes, a file path, or a text/binary
    file-like object.
    """
    if isinstance(source, Path):
        return source.read_text(encoding="utf-8")
    if isinstance(source, (bytes, bytearray)):
        return bytes(source).decode("utf-8")
    if isinstance(source, str):
        return source
    data = source.read()
    if isinstance(data, bytes):
        return data.decode("utf-8")
    return data


def from_oxigraph(term) -> Term:
    """Convert a pyoxigraph term into an rdf_quadstore term."""
    if isinstance(term, OxNamedNode):
        return Resource(term.value)
    if isinstance(term, OxBlankNode):
        return BlankNode(term.value)
    if isinstance(term, OxLiteral):
        if term.language:
            return Literal(term.value, language=term.language)
        datatype = term.datatype
        if datatype is None or datatype.value == XSD_STRING:
            return Literal(term.value)
        return Literal(term.value, datatype=Resource(datatype.value))
    raise TurtleSyntaxError(f"Unsupported term: {term}")


def from_oxigraph_graph(graph_name) -> Optional[Term]:
    """Convert a pyoxigraph graph name; the default graph becomes None."""
    if graph_name is None or isinstance(graph_name, OxDefaultGraph):
        return None
    return from_oxigraph(graph_name)


def oxigraph_quads(text: str, rdf_format, base_iri: Optional[str] = None) -> List:
    """
    Run the pyoxigraph parser to completion.

    Parse errors surface while iterating, so the whole result is
    materialized inside the error boundary.
    """
    try:
        return list(oxigraph_parse(text, rdf_format, base_iri=base_iri or None))
    except (SyntaxError, ValueError) as e:
        raise TurtleSyntaxError(str(e)) from e


class TurtleParser:
    """
    Parser for Turtle documents.

    Every statement is placed in the default graph. Relative IRIs are
    resolved against base_iri; without a base they are a parse error.
    RDF-star quoted triples are rejected.
    """

    def __init__(self, base_iri: str = ""):
        self.base_iri = base_iri

    def parse(self, source: Source) -> ParsedDocument:
        text = read_source(source)
        triples = self.parse_triples(text)
        logger.debug(f"Parsed {len(triples)} Turtle triples")
        return ParsedDocument(quads=[Quad.from_triple(t) for t in triples])

    def parse_triples(self, text: str) -> List[Triple]:
        """Parse Turtle text into a list of triples."""
        return list(self._convert(oxigraph_quads(text, RdfFormat.TURTLE, self.base_iri)))

    def _convert(self, quads: Iterable) -> Iterable[Triple]:
        for quad in quads:
            yield Triple(
                from_oxigraph(quad.subject),
                from_oxigraph(quad.predicate),
                from_oxigraph(quad.object),
            )


def parse_turtle(source: Source, base_iri: str = "") -> List[Triple]:
    """
    Parse Turtle content into triples.

    Args:
        source: Turtle content as string, bytes, file path, or file-like object
        base_iri: Base IRI for relative reference resolution

    Returns:
        List of Triple objects

    Raises:
        TurtleSyntaxError: the content is not valid Turtle
    """
    return TurtleParser(base_iri).parse_triples(read_source(source))
