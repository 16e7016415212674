"""
rdfxml-starbase: RDF/XML to statements.

Walks an RDF/XML document tree and emits subject-predicate-object statements
into a store, resolving relative references, blank node identity,
containers, collections and (optionally) reification.
"""

__version__ = "0.1.0"

from rdfxml_starbase.exceptions import (
    RDFXMLError,
    XMLSyntaxError,
    NoRootElementError,
    MissingNamespaceError,
    AmbiguousNodeIdError,
    InvalidBaseError,
    DuplicatePrefixError,
    CollectionClosedError,
    ConfigValidationError,
)
from rdfxml_starbase.uris import RDF_NS, RDFS_NS, XML_NS, join_uri
from rdfxml_starbase.terms import Term, TermKind, Collection
from rdfxml_starbase.store import Statement, StatementStore
from rdfxml_starbase.xmltree import NodeKind, XmlNode, parse_xml, from_element
from rdfxml_starbase.frame import Frame, FrameRole, ParseState
from rdfxml_starbase.parser import RDFXMLParser, parse_rdfxml, qualified_name
from rdfxml_starbase.serializers import NTriplesSerializer, NQuadsSerializer, serialize_ntriples, serialize_nquads
from rdfxml_starbase.config import ParserConfig

__all__ = [
    # Errors
    "RDFXMLError",
    "XMLSyntaxError",
    "NoRootElementError",
    "MissingNamespaceError",
    "AmbiguousNodeIdError",
    "InvalidBaseError",
    "DuplicatePrefixError",
    "CollectionClosedError",
    "ConfigValidationError",
    # URIs
    "RDF_NS",
    "RDFS_NS",
    "XML_NS",
    "join_uri",
    # Terms and store
    "Term",
    "TermKind",
    "Collection",
    "Statement",
    "StatementStore",
    # XML tree
    "NodeKind",
    "XmlNode",
    "parse_xml",
    "from_element",
    # Parser
    "Frame",
    "FrameRole",
    "ParseState",
    "RDFXMLParser",
    "parse_rdfxml",
    "qualified_name",
    # Output
    "NTriplesSerializer",
    "NQuadsSerializer",
    "serialize_ntriples",
    "serialize_nquads",
    "ParserConfig",
    # Web API (requires fastapi)
    "create_parse_router",
    "create_app",
]


# Lazy import for the optional FastAPI router
def __getattr__(name):
    if name in ("create_parse_router", "create_app"):
        from rdfxml_starbase.web import create_parse_router, create_app
        return {
            "create_parse_router": create_parse_router,
            "create_app": create_app,
        }[name]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
