"""
N-Triples and N-Quads output for parsed statements.

Collections have no triple encoding of their own in the store, so they are
written in N3 list syntax, e.g. ``_:b0 <http://example.org/p> ( <a> <b> ) .``
"""

from typing import Iterable, Union

from rdfxml_starbase.store import Statement, StatementStore


class NTriplesSerializer:
    """Serializer for N-Triples output."""

    def serialize(self, statements: Union[StatementStore, Iterable[Statement]]) -> str:
        """
        Serialize statements, one per line, in emission order.

        Args:
            statements: A store or any iterable of statements

        Returns:
            N-Triples formatted string
        """
        return "\n".join(self._format_statement(st) for st in statements)

    def _format_statement(self, st: Statement) -> str:
        return f"{st.subject.n3()} {st.predicate.n3()} {st.object.n3()} ."


class NQuadsSerializer(NTriplesSerializer):
    """
    Serializer for N-Quads output.

    The statement context becomes the graph label when it is an IRI string.
    """

    def _format_statement(self, st: Statement) -> str:
        graph = st.context
        if graph is None:
            return super()._format_statement(st)
        label = graph.n3() if hasattr(graph, "n3") else f"<{graph}>"
        return f"{st.subject.n3()} {st.predicate.n3()} {st.object.n3()} {label} ."


def serialize_ntriples(statements: Union[StatementStore, Iterable[Statement]]) -> str:
    """Serialize statements to N-Triples."""
    return NTriplesSerializer().serialize(statements)


def serialize_nquads(statements: Union[StatementStore, Iterable[Statement]]) -> str:
    """Serialize statements to N-Quads, using each context as graph label."""
    return NQuadsSerializer().serialize(statements)
