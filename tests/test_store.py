"""Tests for the statement store and terms."""
import polars as pl
import pytest

from rdfxml_starbase.exceptions import CollectionClosedError, DuplicatePrefixError
from rdfxml_starbase.store import Statement, StatementStore
from rdfxml_starbase.terms import Collection, Term, TermKind

from conftest import EX, XSD


# ========== Term Tests ==========

class TestTerm:
    def test_iri(self):
        term = Term.iri("http://example.org/a")
        assert term.is_iri
        assert term.n3() == "<http://example.org/a>"

    def test_literal_with_lang(self):
        term = Term.literal("chat", lang="fr")
        assert term.is_literal
        assert term.lang == "fr"
        assert term.n3() == '"chat"@fr'

    def test_empty_lang_means_no_lang(self):
        assert Term.literal("x", lang="").lang is None

    def test_datatype_wins_over_lang(self):
        term = Term.literal("1", lang="en", datatype=Term.iri(XSD + "integer"))
        assert term.lang is None
        assert term.n3() == f'"1"^^<{XSD}integer>'

    def test_literal_escaping(self):
        assert Term.literal('say "hi"\n').n3() == '"say \\"hi\\"\\n"'

    def test_bnode(self):
        assert Term.bnode("b3").n3() == "_:b3"

    def test_value_equality(self):
        assert Term.iri("http://x/") == Term.iri("http://x/")
        assert Term.literal("a") != Term.literal("a", lang="en")


class TestCollection:
    def test_append_and_close(self):
        coll = Collection(label="l0")
        coll.append(Term.iri("http://x/a"))
        coll.append(Term.iri("http://x/b"))
        coll.close()
        assert coll.closed
        assert len(coll) == 2
        assert coll.kind == TermKind.COLLECTION
        assert coll.n3() == "( <http://x/a> <http://x/b> )"

    def test_append_after_close_raises(self):
        coll = Collection(label="l0")
        coll.close()
        with pytest.raises(CollectionClosedError):
            coll.append(Term.iri("http://x/a"))

    def test_empty_collection_n3(self):
        assert Collection(label="l0").n3() == "()"


# ========== StatementStore Tests ==========

class TestStatementStore:
    def test_bnodes_are_sequential(self, store):
        assert store.bnode() == Term.bnode("b0")
        assert store.bnode() == Term.bnode("b1")

    def test_bnode_with_id(self, store):
        assert store.bnode("x").lex == "x"

    def test_collections_are_distinct(self, store):
        first = store.collection()
        second = store.collection()
        assert first is not second
        assert store.collections == [first, second]

    def test_add_preserves_order(self, store):
        s, p = store.sym(EX + "s"), store.sym(EX + "p")
        store.add(s, p, store.literal("2"))
        store.add(s, p, store.literal("1"), "ctx")
        assert [st.object.lex for st in store] == ["2", "1"]
        assert store.statements[1].context == "ctx"
        assert len(store) == 2

    def test_no_deduplication(self, store):
        s, p, o = store.sym(EX + "s"), store.sym(EX + "p"), store.sym(EX + "o")
        store.add(s, p, o)
        store.add(s, p, o)
        assert store.triples() == [(s, p, o), (s, p, o)]

    def test_prefix_binding(self, store):
        store.set_prefix_for_uri("ex", EX)
        assert store.namespaces == {"ex": EX}

    def test_duplicate_prefix_raises(self, store):
        store.set_prefix_for_uri("ex", EX)
        with pytest.raises(DuplicatePrefixError):
            store.set_prefix_for_uri("ex", "http://other.org/")

    def test_duplicate_prefix_same_uri_raises(self, store):
        store.set_prefix_for_uri("ex", EX)
        with pytest.raises(DuplicatePrefixError) as exc_info:
            store.set_prefix_for_uri("ex", EX)
        assert exc_info.value.prefix == "ex"

    def test_clear_keeps_prefixes(self, store):
        store.set_prefix_for_uri("ex", EX)
        store.add(store.sym(EX + "s"), store.sym(EX + "p"), store.sym(EX + "o"))
        store.clear()
        assert len(store) == 0
        assert store.namespaces == {"ex": EX}


class TestDataFrameView:
    def test_columns_and_values(self, store):
        s = store.sym(EX + "s")
        store.add(s, store.sym(EX + "name"), store.literal("Ann", lang="en"))
        store.add(s, store.sym(EX + "age"), store.literal("3", datatype=store.sym(XSD + "int")), "g")
        store.add(s, store.sym(EX + "knows"), store.bnode())

        df = store.to_dataframe()
        assert isinstance(df, pl.DataFrame)
        assert df.columns == ["subject", "predicate", "object", "object_kind", "lang", "datatype", "context"]
        assert df.height == 3
        assert df["subject"].to_list() == [f"<{EX}s>"] * 3
        assert df["object_kind"].to_list() == ["literal", "literal", "bnode"]
        assert df["lang"].to_list() == ["en", None, None]
        assert df["datatype"].to_list() == [None, XSD + "int", None]
        assert df["context"].to_list() == [None, "g", None]

    def test_empty_store(self, store):
        assert store.to_dataframe().height == 0

    def test_collection_object(self, store):
        coll = store.collection()
        coll.append(store.sym(EX + "a"))
        store.add(store.sym(EX + "s"), store.sym(EX + "list"), coll)
        row = store.to_dataframe().row(0, named=True)
        assert row["object"] == f"( <{EX}a> )"
        assert row["object_kind"] == "collection"


def test_statement_as_tuple():
    st = Statement(Term.iri("s"), Term.iri("p"), Term.iri("o"))
    assert st.as_tuple() == (Term.iri("s"), Term.iri("p"), Term.iri("o"))
