"""Shared fixtures for the RDF/XML parser tests."""
import pytest

from rdfxml_starbase.store import StatementStore


RDF = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
EX = "http://example.org/ns#"
XSD = "http://www.w3.org/2001/XMLSchema#"


def rdf_document(body: str, extra_ns: str = "") -> str:
    """Wrap ``body`` in an rdf:RDF element declaring rdf: and ex:."""
    return f'<rdf:RDF xmlns:rdf="{RDF}" xmlns:ex="{EX}"{extra_ns}>{body}</rdf:RDF>'


@pytest.fixture
def store():
    return StatementStore()
