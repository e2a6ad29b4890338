"""
N-Quads Parser and Serializer.

N-Quads extends N-Triples with a fourth element: the graph name.
Each line contains: subject predicate object [graph] .

The serializer is the flat default dump of a dataset. Parsing is
delegated to pyoxigraph.

Reference: https://www.w3.org/TR/n-quads/
"""

import logging
from typing import IO, Iterable

from pyoxigraph import RdfFormat

from rdf_quadstore.formats.turtle import (
    ParsedDocument,
    Source,
    from_oxigraph,
    from_oxigraph_graph,
    oxigraph_quads,
    read_source,
)
from rdf_quadstore.models import Quad

logger = logging.getLogger(__name__)


class NQuadsParser:
    """Parser for N-Quads; graph-less lines go to the default graph."""

    def parse(self, source: Source) -> ParsedDocument:
        text = read_source(source)
        quads = [
            Quad(
                from_oxigraph(q.subject),
                from_oxigraph(q.predicate),
                from_oxigraph(q.object),
                from_oxigraph_graph(q.graph_name),
            )
            for q in oxigraph_quads(text, RdfFormat.N_QUADS)
        ]
        logger.debug(f"Parsed {len(quads)} N-Quads statements")
        return ParsedDocument(quads=quads)


class NQuadsSerializer:
    """Writes one `S P O [G] .` line per quad; the graph is omitted for the default graph."""

    def serialize(self, quads: Iterable[Quad], sink: IO[str]) -> int:
        count = 0
        for quad in quads:
            sink.write(f"{quad}\n")
            count += 1
        return count


def parse_nquads(source: Source) -> ParsedDocument:
    """
    Parse N-Quads content.

    Args:
        source: N-Quads content as string, bytes, file path, or file-like object

    Returns:
        ParsedDocument with quads
    """
    return NQuadsParser().parse(source)


def serialize_nquads(quads: Iterable[Quad]) -> str:
    """Serialize quads to an N-Quads string."""
    return "".join(f"{quad}\n" for quad in quads)
