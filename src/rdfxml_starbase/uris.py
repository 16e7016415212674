"""
URI joining for RDF/XML.

Implements the small legacy join algorithm used by RDF/XML parsers of the
Tabulator lineage rather than full RFC 3986 resolution. Results for
unusual inputs (a leading ``../``, ``./`` inside a segment name) are kept
exactly as that algorithm produces them, since changing them would change
the identity of the IRIs a document yields.
"""

import re

from rdfxml_starbase.exceptions import InvalidBaseError


RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
RDFS_NS = "http://www.w3.org/2000/01/rdf-schema#"
XML_NS = "http://www.w3.org/XML/1998/namespace"
XMLNS_NS = "http://www.w3.org/2000/xmlns/"

RDF_TYPE = RDF_NS + "type"
RDF_XML_LITERAL = RDF_NS + "XMLLiteral"

_PARENT_SEGMENT = re.compile(r"[^/]*/\.\./")
_TRAILING_DOT = re.compile(r"/\.$")


def rdf(local: str) -> str:
    """Build an IRI in the RDF syntax namespace."""
    return RDF_NS + local


def join_uri(given: str, base: str) -> str:
    """
    Resolve ``given`` against ``base``.

    Args:
        given: A possibly relative reference
        base: The base URI (may be empty)

    Returns:
        The joined URI string

    Raises:
        InvalidBaseError: If the base has no scheme and is needed
    """
    base_hash = base.find("#")
    if base_hash > 0:
        base = base[:base_hash]
    if not given:
        return base  # before the filename is chopped off
    if given.startswith("#"):
        return base + given
    if ":" in given:
        return given  # absolute reference overrides the base
    if base == "":
        return given

    base_colon = base.find(":")
    if base_colon < 0:
        raise InvalidBaseError(base)
    scheme = base[:base_colon + 1]  # e.g. "http:"
    if given.startswith("//"):
        return scheme + given

    if base.find("//", base_colon) == base_colon + 1:
        # Authority present, path starts after the host part
        base_single = base.find("/", base_colon + 3)
        remainder = len(base) - base_colon - 3
    else:
        base_single = base.find("/", base_colon + 1)
        remainder = len(base) - base_colon - 1

    if base_single < 0:
        if remainder > 0:
            return base + "/" + given
        return scheme + given

    if given.startswith("/"):
        return base[:base_single] + given

    path = base[base_single:]
    last_slash = path.rfind("/")
    if last_slash < len(path) - 1:
        path = path[:last_slash + 1]  # drop the trailing filename

    path = path + given
    while _PARENT_SEGMENT.search(path):
        path = _PARENT_SEGMENT.sub("", path, count=1)
    path = path.replace("./", "")
    path = _TRAILING_DOT.sub("/", path)
    return base[:base_single] + path
