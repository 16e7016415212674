"""
HTTP API for the RDF/XML parser.

Provides a FastAPI router with:
- POST /parse: parse an RDF/XML payload, return statements as records
- POST /parse/text: parse and return N-Triples or N-Quads text
"""

from typing import Any, Optional

from fastapi import APIRouter, FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field
import polars as pl

from rdfxml_starbase import __version__
from rdfxml_starbase.exceptions import RDFXMLError
from rdfxml_starbase.parser import RDFXMLParser
from rdfxml_starbase.serializers import serialize_nquads, serialize_ntriples
from rdfxml_starbase.store import StatementStore


# =============================================================================
# Pydantic Models
# =============================================================================

class ParseRequest(BaseModel):
    """RDF/XML parse request."""
    data: str = Field(..., description="RDF/XML document")
    base: str = Field(default="", description="Base URI for relative references")
    reify: bool = Field(default=False, description="Reify statements whose property element has rdf:ID")
    context: Optional[str] = Field(None, description="Graph IRI attached to every statement")


class TextParseRequest(ParseRequest):
    """Parse request returning serialized text."""
    format: str = Field(default="ntriples", description="ntriples or nquads")


class ParseResponse(BaseModel):
    """Parsed statements."""
    statement_count: int
    statements: list[dict[str, Any]]
    namespaces: dict[str, str]


def dataframe_to_records(df: pl.DataFrame) -> list[dict]:
    """Convert Polars DataFrame to list of dicts for JSON serialization."""
    return [dict(row) for row in df.iter_rows(named=True)]


def _parse(request: ParseRequest) -> StatementStore:
    store = StatementStore()
    try:
        RDFXMLParser(store, reify=request.reify).parse_string(
            request.data, request.base, request.context
        )
    except RDFXMLError as e:
        raise HTTPException(status_code=422, detail=f"{type(e).__name__}: {e}")
    return store


def create_parse_router() -> APIRouter:
    """Create the router exposing the parser."""
    router = APIRouter(tags=["rdfxml"])

    @router.post("/parse", response_model=ParseResponse)
    async def parse(request: ParseRequest):
        store = _parse(request)
        return ParseResponse(
            statement_count=len(store),
            statements=dataframe_to_records(store.to_dataframe()),
            namespaces=store.namespaces,
        )

    @router.post("/parse/text", response_class=PlainTextResponse)
    async def parse_text(request: TextParseRequest):
        if request.format not in ("ntriples", "nquads"):
            raise HTTPException(status_code=400, detail=f"Unsupported format: {request.format}")
        store = _parse(request)
        if request.format == "nquads":
            return serialize_nquads(store)
        return serialize_ntriples(store)

    return router


def create_app() -> FastAPI:
    """Standalone application serving the parse router."""
    app = FastAPI(title="rdfxml-starbase", version=__version__)
    app.include_router(create_parse_router())
    return app
