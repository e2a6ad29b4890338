"""
Statement models: Triple and Quad.

Both are immutable value objects. Two statements built from equal terms
are equal and hash alike, which is what lets the Graph and Dataset
containers deduplicate by value rather than by object identity.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from rdf_quadstore.terms import Term


def _require_term(name: str, value) -> None:
    if value is None:
        raise TypeError(f"{name} is required")
    if not isinstance(value, Term):
        raise TypeError(f"{name} must be a Term, got {type(value).__name__}")


@dataclass(frozen=True, slots=True)
class Triple:
    """A subject-predicate-object statement in the default graph."""
    subject: Term
    predicate: Term
    object: Term

    def __post_init__(self):
        _require_term("subject", self.subject)
        _require_term("predicate", self.predicate)
        _require_term("object", self.object)

    def __str__(self) -> str:
        return f"{self.subject} {self.predicate} {self.object} ."


@dataclass(frozen=True, slots=True)
class Quad:
    """
    A triple plus a graph term.

    graph=None denotes the default graph. It is its own equivalence class:
    a default-graph quad never equals a named-graph quad with the same triple.
    """
    subject: Term
    predicate: Term
    object: Term
    graph: Optional[Term] = None

    def __post_init__(self):
        _require_term("subject", self.subject)
        _require_term("predicate", self.predicate)
        _require_term("object", self.object)
        if self.graph is not None:
            _require_term("graph", self.graph)

    @classmethod
    def from_triple(cls, triple: Triple, graph: Optional[Term] = None) -> "Quad":
        return cls(triple.subject, triple.predicate, triple.object, graph)

    @property
    def triple(self) -> Triple:
        return Triple(self.subject, self.predicate, self.object)

    def to_triple(self) -> Triple:
        """Drop the graph component."""
        return self.triple

    @property
    def in_default_graph(self) -> bool:
        return self.graph is None

    def matches(
        self,
        subject: Optional[Term] = None,
        predicate: Optional[Term] = None,
        object: Optional[Term] = None,
        graph: Optional[Term] = None,
    ) -> bool:
        """
        Test this quad against a pattern.

        None is a wildcard for subject, predicate and object. For graph,
        None selects the default graph only.
        """
        if subject is not None and self.subject != subject:
            return False
        if predicate is not None and self.predicate != predicate:
            return False
        if object is not None and self.object != object:
            return False
        return self.graph == graph

    def __str__(self) -> str:
        if self.graph is not None:
            return f"{self.subject} {self.predicate} {self.object} {self.graph} ."
        return f"{self.subject} {self.predicate} {self.object} ."


def group_by_graph(quads: Iterable[Quad]) -> Dict[Optional[Term], List[Triple]]:
    """
    Partition quads into per-graph triple lists.

    The default graph (key None) comes first when present; named graphs
    follow in the order they were first seen. Triples keep their order.
    """
    groups: Dict[Optional[Term], List[Triple]] = {}
    for quad in quads:
        groups.setdefault(quad.graph, []).append(quad.triple)
    if None in groups:
        default = groups.pop(None)
        groups = {None: default, **groups}
    return groups
