"""
rdf-quadstore: an in-memory multi-graph RDF dataset.

Terms, triples, quads, graphs and datasets, with TriG, JSON-LD, Turtle and
N-Quads conversion that keeps the default graph distinct from named graphs.
"""

__version__ = "0.1.0"

from rdf_quadstore.terms import (
    Term,
    TermKind,
    Resource,
    Literal,
    BlankNode,
    resource,
    literal,
    blank_node,
)
from rdf_quadstore.models import Triple, Quad, group_by_graph
from rdf_quadstore.graph import Graph
from rdf_quadstore.dataset import Dataset, ParseReport
from rdf_quadstore.config import DatasetConfig, FetchConfig, ParserConfig, ConfigValidationError
from rdf_quadstore.errors import (
    QuadstoreError,
    UnsupportedFormatError,
    ParseError,
    TurtleSyntaxError,
    TriGSyntaxError,
    JSONLDSyntaxError,
    RemoteFetchError,
    RemoteStatusError,
)

__all__ = [
    # Terms
    "Term",
    "TermKind",
    "Resource",
    "Literal",
    "BlankNode",
    "resource",
    "literal",
    "blank_node",
    # Statements
    "Triple",
    "Quad",
    "group_by_graph",
    # Containers
    "Graph",
    "Dataset",
    "ParseReport",
    # Configuration
    "DatasetConfig",
    "FetchConfig",
    "ParserConfig",
    "ConfigValidationError",
    # Errors
    "QuadstoreError",
    "UnsupportedFormatError",
    "ParseError",
    "TurtleSyntaxError",
    "TriGSyntaxError",
    "JSONLDSyntaxError",
    "RemoteFetchError",
    "RemoteStatusError",
]
