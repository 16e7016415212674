"""
RDF/XML Parser.

Walks an XML tree and turns it into statements on a ``StatementStore``.

RDF/XML alternates node elements and property elements ("striped"
syntax). The walk keeps one ``Frame`` per tree position and descends with an
explicit loop rather than recursion: each iteration classifies the current
element (literal text, node element, or property element), then advances a
per-frame child cursor or retires frames until it finds the next child to
visit.

Example:
    store = StatementStore()
    parser = RDFXMLParser(store)
    parser.parse_string('''
        <rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
                 xmlns:ex="http://example.org/">
            <rdf:Description rdf:about="http://example.org/alice">
                <ex:name>Alice</ex:name>
            </rdf:Description>
        </rdf:RDF>
    ''', base="http://example.org/doc")
"""

import logging
import time
from pathlib import Path
from io import StringIO
from typing import Any, Optional, Tuple, Union
import xml.etree.ElementTree as ET

from rdfxml_starbase.exceptions import (
    AmbiguousNodeIdError,
    MissingNamespaceError,
    NoRootElementError,
)
from rdfxml_starbase.frame import Frame, FrameRole, ParseState
from rdfxml_starbase.store import StatementStore
from rdfxml_starbase.uris import RDF_NS, RDF_TYPE, RDF_XML_LITERAL, XML_NS, join_uri
from rdfxml_starbase.xmltree import AttrKey, NodeKind, XmlNode, from_element, parse_xml

logger = logging.getLogger(__name__)


RDF_ROOT = RDF_NS + "RDF"
RDF_DESCRIPTION = RDF_NS + "Description"

ABOUT = (RDF_NS, "about")
ID = (RDF_NS, "ID")
NODE_ID = (RDF_NS, "nodeID")
RESOURCE = (RDF_NS, "resource")
DATATYPE = (RDF_NS, "datatype")
PARSE_TYPE = (RDF_NS, "parseType")
TYPE = (RDF_NS, "type")

XML_BASE = (XML_NS, "base")
XML_LANG = (XML_NS, "lang")

Source = Union[str, bytes, Path, StringIO, XmlNode, ET.Element, ET.ElementTree]


# =============================================================================
# Namespace / attribute classification
# =============================================================================

def qualified_name(node: XmlNode, base: str = "") -> str:
    """
    Namespace URI + local name of an element.

    Raises:
        MissingNamespaceError: If the element has no namespace
    """
    if node.namespace is None:
        raise MissingNamespaceError(
            f"RDF/XML syntax error: No namespace for {node.local_name} in {base}"
        )
    return node.namespace + node.local_name


def attribute_name(key: AttrKey, base: str = "") -> str:
    """Namespace URI + local name of an attribute key."""
    namespace, local = key
    if namespace is None:
        raise MissingNamespaceError(
            f"RDF/XML syntax error: No namespace for attribute {local} in {base}"
        )
    return namespace + local


def is_reserved_attribute(key: AttrKey) -> bool:
    """True for ``xml:*`` attributes and unqualified names starting with xml."""
    namespace, local = key
    return namespace == XML_NS or (namespace is None and local.startswith("xml"))


# =============================================================================
# Parser
# =============================================================================

class RDFXMLParser:
    """
    Parser for RDF/XML documents.

    State of one parse (blank node table, context token) lives in a
    ``ParseState`` created afresh by every ``parse`` call, so blank node
    identities never leak between runs. One parser instance must not run two
    parses at the same time.
    """

    def __init__(self, store: Optional[StatementStore] = None, reify: bool = False):
        """
        Args:
            store: Statement sink (a new StatementStore when omitted)
            reify: Reify statements whose property element carries rdf:ID
        """
        self.store = store if store is not None else StatementStore()
        self.reify = reify
        self._state: Optional[ParseState] = None

    @property
    def why(self) -> Any:
        """Context token of the current (or last) parse."""
        return self._state.why if self._state is not None else None

    @property
    def bnodes(self) -> dict:
        """Blank nodes interned by rdf:nodeID in the current (or last) parse."""
        return self._state.bnodes if self._state is not None else {}

    def parse(self, document: Union[XmlNode, ET.Element, ET.ElementTree],
              base: str = "", why: Any = None) -> bool:
        """
        Parse an XML tree into the store.

        Args:
            document: Document or element node
            base: Base URI for relative references
            why: Context token attached to every statement

        Returns:
            True on success; every failure raises
        """
        if isinstance(document, (ET.Element, ET.ElementTree)):
            document = from_element(document)

        self._state = ParseState(store=self.store, base=base, why=why, reify=self.reify)
        root = self._find_root(document, base)

        logger.debug(f"Parsing RDF/XML (base={base!r}, reify={self.reify})")
        started = time.perf_counter()
        before = len(self.store)

        self._walk(self._build_frame(Frame(self._state), root))

        logger.info(
            f"Parsed {len(self.store) - before} statements from {base or '<no base>'} "
            f"in {time.perf_counter() - started:.3f}s"
        )
        return True

    def parse_string(self, text: Union[str, bytes], base: str = "", why: Any = None) -> bool:
        """Build the XML tree for ``text`` and parse it."""
        return self.parse(parse_xml(text), base, why)

    def parse_file(self, path: Union[str, Path], base: Optional[str] = None,
                   why: Any = None) -> bool:
        """
        Parse an RDF/XML file.

        The base defaults to the file's ``file://`` URI.
        """
        path = Path(path)
        if base is None:
            base = path.resolve().as_uri()
        return self.parse(parse_xml(path), base, why)

    # ========== Tree walk ==========

    def _find_root(self, document: XmlNode, base: str) -> XmlNode:
        if document.kind == NodeKind.DOCUMENT:
            root = document.document_element()
            if root is not None:
                return root
        elif document.kind == NodeKind.ELEMENT:
            return document
        raise NoRootElementError(f"RDFParser: can't find root in {base}. Halting.")

    def _build_frame(self, parent: Frame, element: Optional[XmlNode] = None) -> Frame:
        """
        Create a child frame, applying the element's xml:* attributes.

        Strips xml:base, xml:lang and every other reserved ``xml`` attribute
        from the element's working attributes and registers its ``xmlns:``
        declarations with the store.
        """
        state = self._state
        frame = Frame(state, parent, element)
        if element is None or not element.is_element:
            return frame

        attrs = state.attributes_of(element)
        base = attrs.pop(XML_BASE, None)
        if base is not None:
            frame.base = join_uri(base, frame.base)
        lang = attrs.pop(XML_LANG, None)
        if lang is not None:
            frame.lang = lang
        for key in [k for k in attrs if is_reserved_attribute(k)]:
            del attrs[key]

        if element not in state.declared:
            state.declared.add(element)
            for prefix, uri in element.namespaces.items():
                if not prefix:
                    continue  # default namespace
                if state.base:
                    uri = join_uri(uri, state.base)
                self.store.set_prefix_for_uri(prefix, uri)
        return frame

    def _walk(self, frame: Frame) -> None:
        dig = True  # whether the next iteration descends into children

        while frame.parent is not None:
            dom = frame.element

            if dom.is_text:
                frame.add_literal(dom.value)
            elif qualified_name(dom, frame.base) != RDF_ROOT:
                if frame.parent.collection:
                    # Collection member: an unnamed arc slot, then the node
                    frame.add_collection_arc()
                    frame = self._build_frame(frame, frame.element)
                    frame.parent.element = None
                if frame.parent.role in (None, FrameRole.ARC):
                    self._node_element(frame, dom)
                else:
                    frame, dig = self._property_element(frame, dom)

            # Find the next child to visit, retiring exhausted frames
            dom = frame.element
            while frame.parent is not None:
                while dom is None:
                    frame = frame.parent
                    dom = frame.element
                children = dom.children
                if not dig or frame.last_child >= len(children):
                    frame.terminate()
                    frame = frame.parent
                    dom = frame.element
                    dig = True
                    continue
                candidate = children[frame.last_child]
                frame.last_child += 1
                if candidate.is_element or (candidate.is_text and len(children) == 1):
                    frame = self._build_frame(frame, candidate)
                    break

    def _node_element(self, frame: Frame, dom: XmlNode) -> None:
        """Classify ``dom`` as a node element."""
        state = self._state
        store = self.store
        attrs = state.attributes_of(dom)

        about = attrs.get(ABOUT)
        rdfid = attrs.get(ID)
        if about is not None and rdfid is not None:
            raise AmbiguousNodeIdError(
                f"RDFParser: {dom.name} has both rdf:ID and rdf:about. Halting. "
                "Only one of these properties may be specified on a node."
            )
        if about is not None:
            frame.add_node(about)
            del attrs[ABOUT]
        elif rdfid is not None:
            frame.add_node("#" + rdfid)
            del attrs[ID]
        else:
            frame.add_bnode(attrs.pop(NODE_ID, None))

        # Typed node elements
        name = qualified_name(dom, frame.base)
        if name != RDF_DESCRIPTION:
            rdftype = name
        else:
            rdftype = attrs.pop(TYPE, None)
        if rdftype is not None:
            store.add(frame.node, store.sym(RDF_TYPE),
                      store.sym(join_uri(rdftype, frame.base)), state.why)

        # Property attributes
        for key, value in attrs.items():
            if key[0] == RDF_NS:
                continue
            store.add(frame.node, store.sym(attribute_name(key, frame.base)),
                      store.literal(value, frame.lang), state.why)

    def _property_element(self, frame: Frame, dom: XmlNode) -> Tuple[Frame, bool]:
        """
        Classify ``dom`` as a property element.

        Returns:
            The frame the walk continues from, and whether to descend into
            its children
        """
        state = self._state
        attrs = state.attributes_of(dom)
        frame.add_arc(qualified_name(dom, frame.base))

        if state.reify:
            rdfid = attrs.pop(ID, None)
            if rdfid is not None:
                frame.rdfid = rdfid

        datatype = attrs.pop(DATATYPE, None)
        if datatype:
            frame.datatype = datatype

        parse_type = attrs.pop(PARSE_TYPE, None)
        if parse_type == "Literal":
            frame.datatype = RDF_XML_LITERAL
            frame = self._build_frame(frame)
            frame.add_literal(dom.inner_xml())
            return frame, False

        if parse_type == "Resource":
            frame = self._build_frame(frame, frame.element)
            frame.parent.element = None
            frame.add_bnode()
        elif parse_type == "Collection":
            frame = self._build_frame(frame, frame.element)
            frame.parent.element = None
            frame.add_collection()
        elif attrs:
            # Empty property element with resource or property attributes
            resource = attrs.pop(RESOURCE, None)
            frame = self._build_frame(frame)
            if resource is not None:
                frame.add_node(resource)
            else:
                frame.add_bnode(attrs.pop(NODE_ID, None))
            for key, value in list(attrs.items()):
                uri = attribute_name(key, frame.base)
                arc = self._build_frame(frame)
                arc.add_arc(uri)
                if uri == RDF_TYPE:
                    self._build_frame(arc).add_node(value)
                else:
                    self._build_frame(arc).add_literal(value)
            # Content of a property element with attributes is not read
            return frame, False
        elif not dom.children:
            self._build_frame(frame).add_literal("")
        return frame, True


def parse_rdfxml(
    source: Source,
    base: str = "",
    why: Any = None,
    reify: bool = False,
    store: Optional[StatementStore] = None,
) -> StatementStore:
    """
    Parse RDF/XML content into a store.

    Args:
        source: Markup (string/bytes/StringIO), file path, or an XML tree
        base: Base URI (defaults to the file URI for paths)
        why: Context token attached to every statement
        reify: Reify statements whose property element carries rdf:ID
        store: Store to add to (a new one when omitted)

    Returns:
        The store holding the parsed statements
    """
    parser = RDFXMLParser(store, reify=reify)
    if isinstance(source, Path):
        parser.parse_file(source, base or None, why)
    elif isinstance(source, (str, bytes, StringIO)):
        parser.parse(parse_xml(source), base, why)
    else:
        parser.parse(source, base, why)
    return parser.store
