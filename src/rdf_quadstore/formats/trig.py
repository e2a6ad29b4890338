"""
TriG Parser and Serializer.

TriG extends Turtle with graph blocks:

    {
        <http://example.org/s> <http://example.org/p> "default graph" .
    }

    <http://example.org/graph1> {
        <http://example.org/s1> <http://example.org/p1> <http://example.org/o1> .
    }

The parser is a line-oriented block scanner: it finds the graph blocks
itself and hands each statement group inside a block to the Turtle parser.
Supported subset:

- default graph blocks `{ ... }` and statements outside any block
- named graph blocks labelled `<iri>` or `_:label`, optionally after `GRAPH`
- statements spanning several lines, each group ending with `.`

Prefix and base directives are recognized but not expanded, so prefixed
names inside blocks do not parse. Other constructs (prefixed or `[]` graph
labels, nested blocks, stray braces) raise TriGSyntaxError.

Reference: https://www.w3.org/TR/trig/
"""

import logging
import re
from io import StringIO
from typing import IO, Iterable, List, Optional
from urllib.parse import urljoin

from rdf_quadstore.errors import TriGSyntaxError, TurtleSyntaxError
from rdf_quadstore.formats.turtle import (
    DroppedGroup,
    ParsedDocument,
    Source,
    TurtleParser,
    read_source,
)
from rdf_quadstore.models import Quad, group_by_graph
from rdf_quadstore.terms import BlankNode, Resource, Term

logger = logging.getLogger(__name__)


class TriGParser:
    """
    Parser for the TriG block subset described in the module docstring.

    A statement group that the Turtle parser rejects is dropped, recorded
    in ParsedDocument.dropped and logged; parsing carries on with the next
    group. With strict=True the first such group raises instead.
    """

    GRAPH_LABEL = re.compile(
        r'^(?:GRAPH\s+)?(?:<([^<>"{}|^`\\\s]*)>|_:([A-Za-z0-9_][A-Za-z0-9_.\-]*))$',
        re.IGNORECASE,
    )
    DIRECTIVE = re.compile(r'^(?:@prefix|@base)\b|^(?:PREFIX|BASE)\s', re.IGNORECASE)

    def __init__(self, base_iri: str = "", strict: bool = False):
        self.base_iri = base_iri
        self.strict = strict
        self._turtle = TurtleParser(base_iri)
        self._result = ParsedDocument()
        self._current_graph: Optional[Term] = None
        self._pending: List[str] = []
        self._pending_line = 0

    def parse(self, source: Source) -> ParsedDocument:
        """
        Parse TriG content.

        Args:
            source: TriG content as string, bytes, file path, or file-like object

        Returns:
            ParsedDocument with quads, dropped groups and ignored directives
        """
        self._result = ParsedDocument()
        self._current_graph = None
        self._pending = []
        self._pending_line = 0

        self._parse_trig(read_source(source))

        result = self._result
        logger.debug(
            f"Parsed {len(result.quads)} TriG quads, "
            f"dropped {len(result.dropped)} statement groups"
        )
        return result

    def _parse_trig(self, text: str):
        inside_block = False

        # Split on '\n' only: literals may hold other line separators raw
        for line_number, raw in enumerate(text.split('\n'), 1):
            line = strip_comment(raw.strip())

            if not line:
                continue

            if self.DIRECTIVE.match(line):
                logger.warning(f"Ignoring TriG directive at line {line_number}: {line}")
                self._result.ignored_directives.append(line)
                continue

            open_idx = find_unquoted(line, '{')
            if open_idx >= 0:
                if inside_block:
                    raise TriGSyntaxError("Nested graph blocks are not supported", line_number)
                # Statements pending outside a block belong to the default graph
                self._flush()
                self._current_graph = self._graph_label(line[:open_idx].strip(), line_number)
                inside_block = True
                line = line[open_idx + 1:].strip()

            closing = False
            close_idx = find_unquoted(line, '}')
            if close_idx >= 0:
                if not inside_block:
                    raise TriGSyntaxError("Unexpected '}' outside a graph block", line_number)
                if line[close_idx + 1:].strip():
                    raise TriGSyntaxError("Unexpected content after '}'", line_number)
                line = line[:close_idx].strip()
                closing = True

            if line:
                if not self._pending:
                    self._pending_line = line_number
                self._pending.append(line)
                if line.endswith('.'):
                    self._flush()

            if closing:
                self._flush()
                inside_block = False
                self._current_graph = None

        if inside_block:
            raise TriGSyntaxError("Unterminated graph block at end of input")
        self._flush()

    def _graph_label(self, label: str, line_number: int) -> Optional[Term]:
        """Turn the text before '{' into a graph term; empty means default graph."""
        if not label:
            return None
        match = self.GRAPH_LABEL.match(label)
        if not match:
            raise TriGSyntaxError(f"Unsupported graph label: {label}", line_number)
        iri, bnode = match.groups()
        if bnode is not None:
            return BlankNode(bnode)
        if self.base_iri:
            iri = urljoin(self.base_iri, iri)
        return Resource(iri)

    def _flush(self):
        """Parse the pending statement group into the current graph."""
        if not self._pending:
            return
        content = '\n'.join(self._pending)
        line_number = self._pending_line
        self._pending = []

        try:
            triples = self._turtle.parse_triples(content)
        except TurtleSyntaxError as e:
            if self.strict:
                raise TriGSyntaxError(f"Invalid statement group: {e}", line_number) from e
            logger.warning(f"Dropping TriG statement group at line {line_number}: {e}")
            self._result.dropped.append(DroppedGroup(line_number, content, str(e)))
            return

        graph = self._current_graph
        self._result.quads.extend(Quad.from_triple(t, graph) for t in triples)


def find_unquoted(line: str, char: str) -> int:
    """
    Index of the first `char` outside string literals and IRIs, or -1.

    Handles double and single quoted strings with backslash escapes and
    `<...>` IRI references. An unquoted `#` starts a comment and ends the
    search.
    """
    i = 0
    n = len(line)
    while i < n:
        c = line[i]
        if c == char:
            return i
        if c == '#':
            return -1
        if c in ('"', "'"):
            i += 1
            while i < n and line[i] != c:
                if line[i] == '\\':
                    i += 1
                i += 1
        elif c == '<':
            end = line.find('>', i + 1)
            if end < 0:
                return -1
            i = end
        i += 1
    return -1


def strip_comment(line: str) -> str:
    """Remove a trailing `#` comment outside string literals and IRIs."""
    idx = find_unquoted(line, '#')
    if idx < 0:
        return line
    return line[:idx].rstrip()


class TriGSerializer:
    """
    Serializer for TriG format.

    Outputs the default graph block first, then one block per named graph
    in first-seen order. Every statement is written as one `S P O .` line.
    """

    def __init__(self, indent: str = "  "):
        self.indent = indent

    def serialize(self, quads: Iterable[Quad], sink: IO[str]) -> int:
        """
        Write quads as TriG.

        Returns:
            Number of statements written
        """
        blocks = []
        count = 0
        for graph, triples in group_by_graph(quads).items():
            header = "{" if graph is None else f"{graph} {{"
            lines = [header]
            for triple in triples:
                lines.append(f"{self.indent}{triple}")
            lines.append("}")
            blocks.append('\n'.join(lines) + '\n')
            count += len(triples)

        sink.write('\n'.join(blocks))
        return count


def parse_trig(source: Source, base_iri: str = "", strict: bool = False) -> ParsedDocument:
    """
    Parse TriG content.

    Args:
        source: TriG content as string, bytes, file path, or file-like object
        base_iri: Base IRI for relative reference resolution
        strict: Raise on the first statement group that fails to parse

    Returns:
        ParsedDocument with quads
    """
    return TriGParser(base_iri, strict=strict).parse(source)


def serialize_trig(quads: Iterable[Quad]) -> str:
    """Serialize quads to a TriG string."""
    buffer = StringIO()
    TriGSerializer().serialize(quads, buffer)
    return buffer.getvalue()
