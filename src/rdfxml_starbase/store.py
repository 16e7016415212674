"""
In-memory statement store used as the parser's sink.

Provides:
- Term factories (sym, literal, bnode, collection)
- Ordered statement accumulation (emission order is preserved)
- Namespace prefix bindings, unique per prefix
- A Polars DataFrame view of the accumulated statements

The store does not deduplicate; adding the same statement twice records it
twice.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Union

import polars as pl

from rdfxml_starbase.exceptions import DuplicatePrefixError
from rdfxml_starbase.terms import Collection, Term, TermKind

logger = logging.getLogger(__name__)


Node = Union[Term, Collection]


@dataclass(frozen=True)
class Statement:
    """One recorded statement plus its (opaque) context."""
    subject: Node
    predicate: Term
    object: Node
    context: Any = None

    def as_tuple(self) -> tuple:
        return (self.subject, self.predicate, self.object)


class StatementStore:
    """
    Accumulates statements for one or more parses.

    Example:
        store = StatementStore()
        RDFXMLParser(store).parse_string(text, "http://example.org/")
        for st in store:
            print(st.subject, st.predicate, st.object)
    """

    def __init__(self):
        self.statements: List[Statement] = []
        self.namespaces: Dict[str, str] = {}
        self.collections: List[Collection] = []
        self._bnode_count = 0

    # ========== Term factories ==========

    def sym(self, uri: str) -> Term:
        """Create an IRI term."""
        return Term.iri(uri)

    def literal(
        self,
        value: str,
        lang: Optional[str] = None,
        datatype: Optional[Term] = None,
    ) -> Term:
        """Create a literal term."""
        return Term.literal(value, lang=lang, datatype=datatype)

    def bnode(self, id: Optional[str] = None) -> Term:
        """
        Create a blank node.

        Labels are minted sequentially when no id is given. The store does
        not intern by id: two calls with the same id give equal terms only
        because the labels match.
        """
        if id is None:
            id = f"b{self._bnode_count}"
            self._bnode_count += 1
        return Term.bnode(id)

    def collection(self) -> Collection:
        """Create a new, open collection."""
        coll = Collection(label=f"l{len(self.collections)}")
        self.collections.append(coll)
        return coll

    # ========== Statements ==========

    def add(self, subject: Node, predicate: Term, obj: Node, why: Any = None) -> None:
        """Record one statement."""
        self.statements.append(Statement(subject, predicate, obj, why))

    def set_prefix_for_uri(self, prefix: str, uri: str) -> None:
        """
        Bind a namespace prefix.

        Raises:
            DuplicatePrefixError: If the prefix is already bound, even to
                the same URI
        """
        if prefix in self.namespaces:
            raise DuplicatePrefixError(prefix)
        logger.debug(f"Binding prefix {prefix}: <{uri}>")
        self.namespaces[prefix] = uri

    def clear(self) -> None:
        """Drop all statements and collections, keeping prefix bindings."""
        self.statements = []
        self.collections = []

    def __len__(self) -> int:
        return len(self.statements)

    def __iter__(self) -> Iterator[Statement]:
        return iter(self.statements)

    def triples(self) -> List[tuple]:
        """Return the statements as (subject, predicate, object) tuples."""
        return [st.as_tuple() for st in self.statements]

    # ========== Columnar view ==========

    def to_dataframe(self) -> pl.DataFrame:
        """
        Materialize the statements as a Polars DataFrame.

        Columns: subject, predicate, object, object_kind, lang, datatype,
        context. Terms are rendered in N-Triples syntax except the object
        column, which holds the lexical form.
        """
        rows: Dict[str, list] = {
            "subject": [],
            "predicate": [],
            "object": [],
            "object_kind": [],
            "lang": [],
            "datatype": [],
            "context": [],
        }
        for st in self.statements:
            obj = st.object
            rows["subject"].append(st.subject.n3())
            rows["predicate"].append(st.predicate.lex)
            if isinstance(obj, Collection):
                rows["object"].append(obj.n3())
                rows["lang"].append(None)
                rows["datatype"].append(None)
            else:
                rows["object"].append(obj.lex)
                rows["lang"].append(obj.lang)
                rows["datatype"].append(obj.datatype.lex if obj.datatype is not None else None)
            rows["object_kind"].append(TermKind(obj.kind).name.lower())
            rows["context"].append(None if st.context is None else str(st.context))
        return pl.DataFrame(rows, schema={name: pl.Utf8 for name in rows})
