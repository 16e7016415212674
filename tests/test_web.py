"""Tests for the HTTP parse router."""
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from rdfxml_starbase.web import create_app, create_parse_router

from conftest import EX, rdf_document


DOC = rdf_document(
    '<rdf:Description rdf:about="http://example.org/s"><ex:a xml:lang="en">1</ex:a></rdf:Description>'
)


@pytest.fixture
def client():
    app = FastAPI()
    app.include_router(create_parse_router())
    return TestClient(app)


class TestParseEndpoint:
    def test_parse_returns_records(self, client):
        r = client.post("/parse", json={"data": DOC, "base": "http://example.org/doc"})
        assert r.status_code == 200
        data = r.json()
        assert data["statement_count"] == 1
        record = data["statements"][0]
        assert record["subject"] == "<http://example.org/s>"
        assert record["predicate"] == EX + "a"
        assert record["object"] == "1"
        assert record["lang"] == "en"
        assert data["namespaces"]["ex"] == EX

    def test_parse_error_is_422(self, client):
        bad = rdf_document('<rdf:Description rdf:about="http://x/" rdf:ID="x"/>')
        r = client.post("/parse", json={"data": bad})
        assert r.status_code == 422
        assert r.json()["detail"].startswith("AmbiguousNodeIdError")

    def test_malformed_xml_is_422(self, client):
        r = client.post("/parse", json={"data": "<rdf:RDF"})
        assert r.status_code == 422

    def test_context(self, client):
        r = client.post("/parse", json={"data": DOC, "context": "http://example.org/g"})
        assert r.json()["statements"][0]["context"] == "http://example.org/g"


class TestTextEndpoint:
    def test_ntriples(self, client):
        r = client.post("/parse/text", json={"data": DOC})
        assert r.status_code == 200
        assert r.text == f'<http://example.org/s> <{EX}a> "1"@en .'

    def test_unsupported_format(self, client):
        r = client.post("/parse/text", json={"data": DOC, "format": "turtle"})
        assert r.status_code == 400


def test_create_app():
    client = TestClient(create_app())
    r = client.post("/parse", json={"data": DOC})
    assert r.status_code == 200
