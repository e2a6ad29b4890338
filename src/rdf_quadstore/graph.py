"""
Graph: a deduplicated set of triples scoped to one graph identity.

Graphs are views produced on demand by Dataset.get_graph(); they copy the
matching triples and do not write back to the dataset.
"""
from __future__ import annotations

from typing import Dict, Iterator, List, Optional

from rdf_quadstore.models import Triple
from rdf_quadstore.terms import Resource, Term


class Graph:
    """
    A set of triples with a base IRI label.

    Triples are kept in insertion order and deduplicated by value.
    """

    def __init__(self, base_iri: str = ""):
        self._base_iri = base_iri
        self._term = Resource(base_iri)
        self._triples: Dict[Triple, None] = {}

    @property
    def base_iri(self) -> str:
        return self._base_iri

    @property
    def term(self) -> Resource:
        return self._term

    def add(self, triple: Triple) -> bool:
        """Insert a triple. Returns True if it was not already present."""
        if triple in self._triples:
            return False
        self._triples[triple] = None
        return True

    def add_triple(self, subject: Term, predicate: Term, object: Term) -> bool:
        return self.add(Triple(subject, predicate, object))

    def remove(self, triple: Triple) -> bool:
        """Remove a triple by value. Returns False if it was not present."""
        if triple not in self._triples:
            return False
        del self._triples[triple]
        return True

    def triples(self) -> List[Triple]:
        return list(self._triples)

    def one(
        self,
        subject: Optional[Term] = None,
        predicate: Optional[Term] = None,
        object: Optional[Term] = None,
    ) -> Optional[Triple]:
        """First triple matching the pattern (None is a wildcard), or None."""
        for triple in self._triples:
            if _matches(triple, subject, predicate, object):
                return triple
        return None

    def all(
        self,
        subject: Optional[Term] = None,
        predicate: Optional[Term] = None,
        object: Optional[Term] = None,
    ) -> List[Triple]:
        return [t for t in self._triples if _matches(t, subject, predicate, object)]

    def __len__(self) -> int:
        return len(self._triples)

    def __iter__(self) -> Iterator[Triple]:
        return iter(list(self._triples))

    def __contains__(self, triple: object) -> bool:
        return triple in self._triples

    def __str__(self) -> str:
        return "".join(f"{triple}\n" for triple in self._triples)

    def __repr__(self) -> str:
        return f"Graph(base_iri={self._base_iri!r}, triples={len(self._triples)})"


def _matches(triple: Triple, subject, predicate, object) -> bool:
    if subject is not None and triple.subject != subject:
        return False
    if predicate is not None and triple.predicate != predicate:
        return False
    if object is not None and triple.object != object:
        return False
    return True
