"""
RDF term model.

Three immutable variants share the Term base class:

- Resource: an IRI-identified node
- Literal: a lexical value with an optional language tag or datatype
- BlankNode: an anonymous node with a local identifier

Equality is structural and variant-specific: a Resource never equals a
BlankNode or Literal even when their text happens to coincide. Every term
has a canonical N-Triples encoding (str(term)) and a variant-tagged key
(term.key) that is safe to use wherever terms must be grouped or sorted.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple


XSD_STRING = "http://www.w3.org/2001/XMLSchema#string"
RDF_LANGSTRING = "http://www.w3.org/1999/02/22-rdf-syntax-ns#langString"

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}


class TermKind(IntEnum):
    """RDF term kind, used as the tag of Term.key."""
    RESOURCE = 0
    LITERAL = 1
    BLANK_NODE = 2


def escape_literal(value: str) -> str:
    """Escape a lexical form for use inside a double-quoted string."""
    return "".join(_ESCAPES.get(ch, ch) for ch in value)


class Term:
    """Base class of the RDF term variants."""

    __slots__ = ()

    @property
    def kind(self) -> TermKind:
        raise NotImplementedError

    @property
    def key(self) -> Tuple:
        """Variant-tagged identity tuple."""
        raise NotImplementedError

    def n3(self) -> str:
        """Canonical N-Triples encoding."""
        raise NotImplementedError

    def __str__(self) -> str:
        return self.n3()


@dataclass(frozen=True, slots=True)
class Resource(Term):
    """An IRI-identified resource."""
    uri: str

    @property
    def kind(self) -> TermKind:
        return TermKind.RESOURCE

    @property
    def key(self) -> Tuple:
        return (TermKind.RESOURCE, self.uri)

    def n3(self) -> str:
        return f"<{self.uri}>"


@dataclass(frozen=True, slots=True)
class BlankNode(Term):
    """An anonymous node, identified only within its document or dataset."""
    id: str

    @property
    def kind(self) -> TermKind:
        return TermKind.BLANK_NODE

    @property
    def key(self) -> Tuple:
        return (TermKind.BLANK_NODE, self.id)

    def n3(self) -> str:
        return f"_:{self.id}"


@dataclass(frozen=True, slots=True)
class Literal(Term):
    """
    A literal value.

    Attributes:
        value: Lexical form
        language: Language tag (stored lowercased), mutually exclusive with datatype
        datatype: Datatype resource, mutually exclusive with language
    """
    value: str
    language: Optional[str] = None
    datatype: Optional[Resource] = None

    def __post_init__(self):
        # Language tags compare case-insensitively; store them lowercased
        if self.language == "":
            object.__setattr__(self, "language", None)
        elif self.language is not None:
            object.__setattr__(self, "language", self.language.lower())
        if self.language and self.datatype is not None:
            raise ValueError("A literal cannot have both a language tag and a datatype")
        if self.datatype is not None and not isinstance(self.datatype, Resource):
            raise TypeError(f"Literal datatype must be a Resource, got {type(self.datatype).__name__}")

    @property
    def kind(self) -> TermKind:
        return TermKind.LITERAL

    @property
    def key(self) -> Tuple:
        datatype = self.datatype.uri if self.datatype is not None else None
        return (TermKind.LITERAL, self.value, self.language, datatype)

    def n3(self) -> str:
        text = f'"{escape_literal(self.value)}"'
        if self.language:
            return f"{text}@{self.language}"
        if self.datatype is not None:
            return f"{text}^^{self.datatype.n3()}"
        return text


def resource(uri: str) -> Resource:
    """Create a Resource term."""
    return Resource(uri)


def literal(
    value: str,
    language: Optional[str] = None,
    datatype: Optional[str | Resource] = None,
) -> Literal:
    """Create a Literal; datatype may be given as an IRI string."""
    if isinstance(datatype, str):
        datatype = Resource(datatype)
    return Literal(value, language=language, datatype=datatype)


def blank_node(id: Optional[str] = None) -> BlankNode:
    """Create a BlankNode, generating a fresh identifier when none is given."""
    if id is None:
        id = f"n{uuid.uuid4().hex}"
    elif id.startswith("_:"):
        id = id[2:]
    return BlankNode(id)
