"""
JSON-LD Parser and Serializer.

The serializer folds quads into subject-grouped, graph-keyed JSON:

{
  "@graph": [
    {"@id": "http://example.org/alice", "http://xmlns.com/foaf/0.1/name": {"@value": "Alice"}}
  ],
  "http://example.org/graph1": {
    "@graph": [
      {"@id": "http://example.org/bob", "http://xmlns.com/foaf/0.1/name": {"@value": "Bob"}}
    ]
  }
}

Parsing delegates expansion to PyLD. By default every statement read from
JSON-LD lands in the default graph, so named-graph membership does not
survive a JSON-LD round trip; preserve_graphs=True keeps it. Blank nodes
are scoped to one parse call and get fresh identifiers.

Reference: https://www.w3.org/TR/json-ld11/
"""

import json
import logging
from typing import IO, Any, Dict, Iterable, List, Optional

from pyld import jsonld

from rdf_quadstore.errors import JSONLDSyntaxError
from rdf_quadstore.formats.turtle import ParsedDocument, Source, read_source
from rdf_quadstore.models import Quad, Triple, group_by_graph
from rdf_quadstore.terms import (
    RDF_LANGSTRING,
    XSD_STRING,
    BlankNode,
    Literal,
    Resource,
    Term,
    blank_node,
)

logger = logging.getLogger(__name__)

GRAPH_KEY = "@graph"
DEFAULT_GRAPH_NAME = "@default"


def node_id(term: Term) -> str:
    """The @id form of a resource or blank node."""
    if isinstance(term, Resource):
        return term.uri
    if isinstance(term, BlankNode):
        return f"_:{term.id}"
    return str(term)


def node_value(term: Term) -> Dict[str, str]:
    """The JSON-LD object form of a term in object position."""
    if isinstance(term, Literal):
        value = {"@value": term.value}
        if term.language:
            value["@language"] = term.language
        if term.datatype is not None:
            value["@type"] = term.datatype.uri
        return value
    return {"@id": node_id(term)}


class JSONLDSerializer:
    """
    Serializer for the graph-keyed JSON-LD shape.

    Subjects, predicates and repeated values keep first-seen order.
    """

    def __init__(self, indent: Optional[int] = 2):
        self.indent = indent

    def to_document(self, quads: Iterable[Quad]) -> Dict[str, Any]:
        """Build the JSON-LD document as a dict."""
        document: Dict[str, Any] = {}
        for graph, triples in group_by_graph(quads).items():
            nodes = self._subject_nodes(triples)
            if graph is None:
                document[GRAPH_KEY] = nodes
            else:
                document[node_id(graph)] = {GRAPH_KEY: nodes}
        return document

    def serialize(self, quads: Iterable[Quad], sink: IO[str]) -> int:
        quads = list(quads)
        json.dump(self.to_document(quads), sink, indent=self.indent, ensure_ascii=False)
        sink.write("\n")
        return len(quads)

    def _subject_nodes(self, triples: List[Triple]) -> List[Dict[str, Any]]:
        """Group triples by subject into JSON-LD node objects."""
        by_subject: Dict[Term, Dict[str, Any]] = {}

        for triple in triples:
            node = by_subject.get(triple.subject)
            if node is None:
                node = {"@id": node_id(triple.subject)}
                by_subject[triple.subject] = node

            key = node_id(triple.predicate)
            value = node_value(triple.object)

            # Handle multiple values for same predicate
            if key in node:
                if isinstance(node[key], list):
                    node[key].append(value)
                else:
                    node[key] = [node[key], value]
            else:
                node[key] = value

        return list(by_subject.values())


class JSONLDParser:
    """
    Parser for JSON-LD documents.

    Documents in the graph-keyed shape written by JSONLDSerializer are
    restated as standard named-graph JSON-LD before expansion; anything
    else is handed to PyLD unchanged.
    """

    def __init__(self, preserve_graphs: bool = False):
        self.preserve_graphs = preserve_graphs

    def parse(self, source: Source) -> ParsedDocument:
        """
        Parse JSON-LD content.

        Args:
            source: JSON-LD content as string, bytes, file path, or file-like object

        Returns:
            ParsedDocument with quads

        Raises:
            JSONLDSyntaxError: invalid JSON, or PyLD failed to expand the document
        """
        text = read_source(source)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise JSONLDSyntaxError(f"Invalid JSON: {e}") from e

        if is_graph_keyed(data):
            data = restate_graph_keyed(data)

        try:
            dataset = jsonld.to_rdf(data, {"base": "", "produceGeneralizedRdf": False})
        except jsonld.JsonLdError as e:
            raise JSONLDSyntaxError(f"JSON-LD expansion failed: {e}") from e

        # PyLD relabels blank nodes _:b0, _:b1, ... on every call, so each
        # parse gets fresh identifiers
        bnodes: Dict[str, BlankNode] = {}
        quads = []
        for graph_name, triples in dataset.items():
            graph = None
            if self.preserve_graphs and graph_name != DEFAULT_GRAPH_NAME:
                graph = self._convert_node(graph_name, bnodes)
            for triple in triples:
                quads.append(Quad(
                    self._convert(triple["subject"], bnodes),
                    self._convert(triple["predicate"], bnodes),
                    self._convert(triple["object"], bnodes),
                    graph,
                ))

        logger.debug(f"Parsed {len(quads)} JSON-LD statements from {len(dataset)} graphs")
        return ParsedDocument(quads=quads)

    @staticmethod
    def _convert_node(value: str, bnodes: Dict[str, BlankNode]) -> Term:
        if value.startswith("_:"):
            node = bnodes.get(value)
            if node is None:
                node = blank_node()
                bnodes[value] = node
            return node
        return Resource(value)

    def _convert(self, node: Dict[str, str], bnodes: Dict[str, BlankNode]) -> Term:
        """Convert a PyLD RDF term dict into an rdf_quadstore term."""
        kind = node["type"]
        value = node["value"]
        if kind == "IRI":
            return Resource(value)
        if kind == "blank node":
            return self._convert_node(value, bnodes)
        language = node.get("language")
        if language:
            return Literal(value, language=language)
        datatype = node.get("datatype")
        if datatype in (None, XSD_STRING, RDF_LANGSTRING):
            return Literal(value)
        return Literal(value, datatype=Resource(datatype))


def is_graph_keyed(data: Any) -> bool:
    """
    True if data has the shape JSONLDSerializer writes.

    That is a top-level object without @context whose keys are @graph,
    holding a list, or graph identifiers, each holding an object with
    nothing but a @graph list.
    """
    if not isinstance(data, dict) or not data or "@context" in data:
        return False
    for key, value in data.items():
        if key == GRAPH_KEY:
            if not isinstance(value, list):
                return False
        elif key.startswith("@"):
            return False
        elif not (isinstance(value, dict) and list(value) == [GRAPH_KEY]
                  and isinstance(value[GRAPH_KEY], list)):
            return False
    return True


def restate_graph_keyed(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Rewrite the graph-keyed shape as a standard JSON-LD node array."""
    nodes: List[Dict[str, Any]] = list(data.get(GRAPH_KEY, []))
    for key, value in data.items():
        if key != GRAPH_KEY:
            nodes.append({"@id": key, GRAPH_KEY: value[GRAPH_KEY]})
    return nodes


def parse_jsonld(source: Source, preserve_graphs: bool = False) -> ParsedDocument:
    """
    Parse JSON-LD content.

    Args:
        source: JSON-LD content
        preserve_graphs: Keep named-graph membership instead of collapsing
            every statement into the default graph

    Returns:
        ParsedDocument with quads
    """
    return JSONLDParser(preserve_graphs=preserve_graphs).parse(source)


def serialize_jsonld(quads: Iterable[Quad]) -> str:
    """Serialize quads to a JSON-LD string."""
    return json.dumps(JSONLDSerializer().to_document(quads), indent=2, ensure_ascii=False)
