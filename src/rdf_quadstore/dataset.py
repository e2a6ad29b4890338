"""
Dataset: an in-memory, multi-graph RDF quad store.

Key design:
- Quads are stored in an insertion-ordered dict keyed by the quad value,
  so value-equal quads built separately collapse to one entry
- The default graph is graph=None; it is never matched by a query naming
  a graph, and a named graph is never matched by a default-graph query
- Queries return materialized lists; mutating the dataset afterwards does
  not affect a result already returned
- Parsing and serialization go through the format registry in
  rdf_quadstore.formats

Thread-safety: NOT thread-safe. Use external synchronization for concurrent access.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from io import StringIO
from pathlib import Path
from typing import IO, Dict, Iterator, List, Optional, Union
from urllib.parse import urlparse

import polars as pl

from rdf_quadstore import formats
from rdf_quadstore.config import DatasetConfig
from rdf_quadstore.fetch import fetch_document
from rdf_quadstore.formats.turtle import DroppedGroup, Source
from rdf_quadstore.graph import Graph
from rdf_quadstore.models import Quad
from rdf_quadstore.terms import Resource, Term

logger = logging.getLogger(__name__)


@dataclass
class ParseReport:
    """Outcome of Dataset.parse()."""
    format: str
    parsed: int = 0
    added: int = 0
    dropped: List[DroppedGroup] = field(default_factory=list)
    ignored_directives: List[str] = field(default_factory=list)

    @property
    def dropped_count(self) -> int:
        return len(self.dropped)


class Dataset:
    """
    A deduplicated collection of quads spanning all graphs.

    Example:
        ds = Dataset("https://example.org/dataset")
        g = Resource("https://example.org/graph1")
        ds.add_quad(Resource("https://example.org/a"), Resource("https://example.org/b"),
                    Literal("c"), g)
        ds.one(g=g)
    """

    def __init__(self, base_iri: str = "", config: Optional[DatasetConfig] = None):
        """
        Create an empty dataset.

        Args:
            base_iri: Base IRI, used for relative reference resolution and as
                the dataset's own term; overrides config.base_iri when given
            config: Parser and fetch settings
        """
        self._config = config or DatasetConfig()
        self._base_iri = base_iri or self._config.base_iri
        self._term = Resource(self._base_iri)
        self._quads: Dict[Quad, None] = {}

    @property
    def base_iri(self) -> str:
        return self._base_iri

    @property
    def term(self) -> Resource:
        """The dataset's own term, a Resource for its base IRI."""
        return self._term

    @property
    def config(self) -> DatasetConfig:
        return self._config

    # ========== Insertion and removal ==========

    def add(self, quad: Quad) -> bool:
        """Insert a quad. Returns True if no value-equal quad was present."""
        if quad in self._quads:
            return False
        self._quads[quad] = None
        return True

    def add_quad(self, subject: Term, predicate: Term, object: Term, graph: Optional[Term] = None) -> bool:
        return self.add(Quad(subject, predicate, object, graph))

    def add_triple(self, subject: Term, predicate: Term, object: Term) -> bool:
        """Insert a statement into the default graph."""
        return self.add(Quad(subject, predicate, object))

    def remove(self, quad: Quad) -> bool:
        """Remove a quad by value. Returns False if it was not present."""
        if quad not in self._quads:
            return False
        del self._quads[quad]
        return True

    def clear(self) -> None:
        self._quads.clear()

    def merge(self, other: "Dataset") -> "Dataset":
        """
        Insert every quad of another dataset.

        Value-equal quads are not double counted. Returns self.
        """
        before = len(self._quads)
        for quad in other.quads():
            self.add(quad)
        logger.debug(f"Merged {len(self._quads) - before} new quads ({len(other)} offered)")
        return self

    # ========== Queries ==========

    def quads(self) -> List[Quad]:
        """Snapshot of all quads in insertion order."""
        return list(self._quads)

    def one(
        self,
        s: Optional[Term] = None,
        p: Optional[Term] = None,
        o: Optional[Term] = None,
        g: Optional[Term] = None,
    ) -> Optional[Quad]:
        """
        Return the first quad matching a pattern, or None.

        s, p and o are wildcards when None. g=None selects the default
        graph only; a concrete g selects only that graph.
        """
        for quad in self._quads:
            if quad.matches(s, p, o, g):
                return quad
        return None

    def all(
        self,
        s: Optional[Term] = None,
        p: Optional[Term] = None,
        o: Optional[Term] = None,
        g: Optional[Term] = None,
    ) -> List[Quad]:
        """Return every quad matching a pattern, same rules as one()."""
        return [quad for quad in self._quads if quad.matches(s, p, o, g)]

    def get_graph(self, graph: Optional[Term]) -> Graph:
        """Project the triples of one graph (None for the default graph)."""
        result = Graph(self._base_iri)
        for quad in self._quads:
            if quad.graph == graph:
                result.add(quad.triple)
        return result

    def get_default_graph(self) -> Graph:
        return self.get_graph(None)

    def get_named_graphs(self) -> List[Term]:
        """Distinct named graph terms, in first-seen order."""
        names: Dict[Term, None] = {}
        for quad in self._quads:
            if quad.graph is not None:
                names.setdefault(quad.graph, None)
        return list(names)

    def to_dataframe(self) -> pl.DataFrame:
        """
        Columnar view of the dataset.

        One row per quad with canonical term encodings in the subject,
        predicate, object and graph columns; graph is null for the
        default graph.
        """
        quads = list(self._quads)
        return pl.DataFrame(
            {
                "subject": [str(q.subject) for q in quads],
                "predicate": [str(q.predicate) for q in quads],
                "object": [str(q.object) for q in quads],
                "graph": [str(q.graph) if q.graph is not None else None for q in quads],
            },
            schema={
                "subject": pl.Utf8,
                "predicate": pl.Utf8,
                "object": pl.Utf8,
                "graph": pl.Utf8,
            },
        )

    # ========== Parsing and serialization ==========

    def parse(self, source: Source, format: str) -> ParseReport:
        """
        Parse a document into the dataset.

        Args:
            source: Content as string, bytes, file path, or file-like object
            format: Format identifier (MIME type or short name)

        Returns:
            ParseReport with counts and any dropped TriG statement groups

        Raises:
            UnsupportedFormatError: no parser for the format
            ParseError: the document (TriG: its block structure) is invalid;
                nothing is inserted in that case
        """
        name = formats.resolve_format(format, "parse")
        document = self._parser(name).parse(source)

        added = 0
        for quad in document.quads:
            if self.add(quad):
                added += 1

        report = ParseReport(
            format=name,
            parsed=len(document.quads),
            added=added,
            dropped=document.dropped,
            ignored_directives=document.ignored_directives,
        )
        if report.dropped:
            logger.warning(f"Parsed {name} with {report.dropped_count} dropped statement groups")
        logger.debug(f"Parsed {report.parsed} {name} statements, {added} new")
        return report

    def _parser(self, name: str):
        parser_config = self._config.parser
        if name == formats.TURTLE:
            return formats.TurtleParser(self._base_iri)
        if name == formats.TRIG:
            return formats.TriGParser(self._base_iri, strict=parser_config.trig_strict)
        if name == formats.JSONLD:
            return formats.JSONLDParser(preserve_graphs=parser_config.jsonld_preserve_graphs)
        return formats.NQuadsParser()

    def serialize(
        self,
        destination: Union[None, str, Path, IO[str]] = None,
        format: str = formats.NQUADS,
    ) -> Optional[str]:
        """
        Serialize the dataset.

        Args:
            destination: Text file-like object or path; None returns a string
            format: Format identifier (MIME type or short name)

        Returns:
            The serialized text when destination is None, otherwise None

        Raises:
            UnsupportedFormatError: no serializer for the format
        """
        name = formats.resolve_format(format, "serialize")
        if name == formats.TRIG:
            serializer = formats.TriGSerializer()
        elif name == formats.JSONLD:
            serializer = formats.JSONLDSerializer()
        else:
            serializer = formats.NQuadsSerializer()

        quads = self.quads()
        if destination is None:
            buffer = StringIO()
            serializer.serialize(quads, buffer)
            return buffer.getvalue()
        if isinstance(destination, (str, Path)):
            with open(destination, "w", encoding="utf-8") as f:
                serializer.serialize(quads, f)
        else:
            serializer.serialize(quads, destination)
        logger.debug(f"Serialized {len(quads)} quads as {name}")
        return None

    def load_uri(self, uri: str) -> ParseReport:
        """
        Fetch a remote document and parse it by its Content-Type.

        The document URL becomes the base IRI if the dataset has none.

        Raises:
            RemoteFetchError: the document could not be retrieved
            UnsupportedFormatError: the Content-Type has no parser
            ParseError: the document is invalid
        """
        document = fetch_document(uri, self._config.fetch)
        if not self._base_iri:
            self._base_iri = document.url
            self._term = Resource(document.url)
        content_type = document.content_type or formats.guess_format(urlparse(document.url).path) or ""
        logger.info(f"Loading {document.url} into dataset {self._base_iri}")
        return self.parse(document.content, content_type)

    # ========== Protocol ==========

    def __len__(self) -> int:
        return len(self._quads)

    def __iter__(self) -> Iterator[Quad]:
        return iter(list(self._quads))

    def __contains__(self, quad: object) -> bool:
        return quad in self._quads

    def __str__(self) -> str:
        """Flat dump: one `S P O [G] .` line per quad."""
        return formats.serialize_nquads(self._quads)

    def __repr__(self) -> str:
        return f"Dataset(base_iri={self._base_iri!r}, quads={len(self._quads)})"
