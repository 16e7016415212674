"""
RDF terms produced by the RDF/XML parser.

All graph nodes handed to a store are one of:
- IRI terms (resolved references)
- Literal terms (lexical value, optional language tag or datatype)
- Blank nodes (labels local to one store)
- Collections (ordered member lists from rdf:parseType="Collection")

IRIs, literals and blank nodes are immutable value objects. Collections are
mutable until closed, since the parser appends members as it meets them.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional

from rdfxml_starbase.exceptions import CollectionClosedError


# =============================================================================
# Term Identity
# =============================================================================

class TermKind(IntEnum):
    """RDF term kind enumeration."""
    IRI = 0
    LITERAL = 1
    BNODE = 2
    COLLECTION = 3


_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def escape_literal(value: str) -> str:
    """Escape a lexical form for N-Triples output."""
    return "".join(_ESCAPES.get(ch, ch) for ch in value)


# =============================================================================
# Term Representation
# =============================================================================

@dataclass(frozen=True, slots=True)
class Term:
    """
    An IRI, literal or blank node.

    Attributes:
        kind: The type of term (IRI, LITERAL, BNODE)
        lex: Lexical form (IRI string, literal value, bnode label)
        datatype: Datatype IRI term (typed literals only)
        lang: Language tag (language-tagged literals only)
    """
    kind: TermKind
    lex: str
    datatype: Optional["Term"] = None
    lang: Optional[str] = None

    @classmethod
    def iri(cls, value: str) -> "Term":
        """Create an IRI term."""
        return cls(kind=TermKind.IRI, lex=value)

    @classmethod
    def literal(
        cls,
        value: str,
        lang: Optional[str] = None,
        datatype: Optional["Term"] = None,
    ) -> "Term":
        """
        Create a literal term.

        A datatype wins over a language tag; an empty language tag means
        no language.
        """
        if datatype is not None:
            return cls(kind=TermKind.LITERAL, lex=value, datatype=datatype)
        return cls(kind=TermKind.LITERAL, lex=value, lang=lang or None)

    @classmethod
    def bnode(cls, label: str) -> "Term":
        """Create a blank node term."""
        return cls(kind=TermKind.BNODE, lex=label)

    @property
    def is_iri(self) -> bool:
        return self.kind == TermKind.IRI

    @property
    def is_literal(self) -> bool:
        return self.kind == TermKind.LITERAL

    @property
    def is_bnode(self) -> bool:
        return self.kind == TermKind.BNODE

    def n3(self) -> str:
        """Render the term in N-Triples syntax."""
        if self.kind == TermKind.IRI:
            return f"<{self.lex}>"
        if self.kind == TermKind.BNODE:
            return f"_:{self.lex}"
        text = f'"{escape_literal(self.lex)}"'
        if self.datatype is not None:
            return f"{text}^^{self.datatype.n3()}"
        if self.lang:
            return f"{text}@{self.lang}"
        return text

    def __str__(self) -> str:
        return self.lex


@dataclass(eq=False)
class Collection:
    """
    An ordered RDF collection.

    Members are positional; no predicate links a collection to its members.
    Once closed, the member list is sealed.
    """
    label: str
    members: List[object] = field(default_factory=list)
    closed: bool = False

    @property
    def kind(self) -> TermKind:
        return TermKind.COLLECTION

    @property
    def lex(self) -> str:
        return self.label

    def append(self, term) -> None:
        """Append a member term."""
        if self.closed:
            raise CollectionClosedError(f"Collection {self.label} is closed")
        self.members.append(term)

    def close(self) -> None:
        """Seal the collection; further appends fail."""
        self.closed = True

    def __len__(self) -> int:
        return len(self.members)

    def __iter__(self):
        return iter(self.members)

    def n3(self) -> str:
        """Render as an N3 list, e.g. ``( <a> <b> )``."""
        if not self.members:
            return "()"
        return "( " + " ".join(m.n3() for m in self.members) + " )"
