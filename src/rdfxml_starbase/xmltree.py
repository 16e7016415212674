"""
Generic XML tree consumed by the RDF/XML parser.

ElementTree folds character data into ``text``/``tail`` and drops namespace
declarations, while the RDF/XML algorithm walks a DOM-shaped tree: ordered
child nodes (elements, text, comments), attributes addressed by namespace,
and the ``xmlns:`` declarations made on each element. This module provides
that shape:

- ``XmlNode``: a DOM-like node
- ``parse_xml``: build a document from markup via ``ElementTree.XMLParser``
- ``from_element``: adapt an existing ``ElementTree.Element``

Both builders are iterative, so document depth is not bound by the
interpreter's recursion limit.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from io import StringIO
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union
from xml.sax.saxutils import escape, quoteattr
import xml.etree.ElementTree as ET

from rdfxml_starbase.exceptions import XMLSyntaxError
from rdfxml_starbase.uris import XML_NS


AttrKey = Tuple[Optional[str], str]


class NodeKind(IntEnum):
    """Node types, numbered as in DOM Level 2."""
    ELEMENT = 1
    TEXT = 3
    CDATA = 4
    PROCESSING_INSTRUCTION = 7
    COMMENT = 8
    DOCUMENT = 9


def split_clark(name: str) -> AttrKey:
    """Split ``{namespace}local`` into ``(namespace, local)``."""
    if name.startswith("{"):
        namespace, _, local = name[1:].partition("}")
        return namespace, local
    return None, name


@dataclass(eq=False)
class XmlNode:
    """
    One node of the XML tree.

    Attributes:
        kind: Node type
        namespace: Namespace URI (elements only, None when unqualified)
        local_name: Local name (elements) or target (processing instructions)
        attributes: ``(namespace, local) -> value`` in document order
        namespaces: Prefix declarations made on this element
        nsmap: All prefixes in scope at this element
        children: Child nodes in document order
        value: Character data (text, CDATA, comments, PIs)
    """
    kind: NodeKind
    namespace: Optional[str] = None
    local_name: str = ""
    attributes: Dict[AttrKey, str] = field(default_factory=dict)
    namespaces: Dict[str, str] = field(default_factory=dict)
    nsmap: Dict[str, str] = field(default_factory=dict)
    children: List["XmlNode"] = field(default_factory=list)
    value: str = ""

    @classmethod
    def element(
        cls,
        namespace: Optional[str],
        local_name: str,
        attributes: Optional[Dict[AttrKey, str]] = None,
        children: Optional[List["XmlNode"]] = None,
    ) -> "XmlNode":
        return cls(
            kind=NodeKind.ELEMENT,
            namespace=namespace,
            local_name=local_name,
            attributes=dict(attributes or {}),
            children=list(children or []),
        )

    @classmethod
    def text(cls, value: str) -> "XmlNode":
        return cls(kind=NodeKind.TEXT, value=value)

    @classmethod
    def cdata(cls, value: str) -> "XmlNode":
        return cls(kind=NodeKind.CDATA, value=value)

    @classmethod
    def document(cls, children: Optional[List["XmlNode"]] = None) -> "XmlNode":
        return cls(kind=NodeKind.DOCUMENT, children=list(children or []))

    @property
    def is_element(self) -> bool:
        return self.kind == NodeKind.ELEMENT

    @property
    def is_text(self) -> bool:
        """True for text and CDATA nodes."""
        return self.kind in (NodeKind.TEXT, NodeKind.CDATA)

    @property
    def name(self) -> str:
        """Display name: ``prefix:local`` when a prefix is known."""
        if self.namespace is None:
            return self.local_name
        for prefix, uri in self.nsmap.items():
            if uri == self.namespace and prefix:
                return f"{prefix}:{self.local_name}"
        return f"{{{self.namespace}}}{self.local_name}"

    def document_element(self) -> Optional["XmlNode"]:
        """First element child (the root element of a document)."""
        for child in self.children:
            if child.is_element:
                return child
        return None

    def inner_xml(self) -> str:
        """Serialize this node's children as markup."""
        parts: List[str] = []
        for child in self.children:
            _write(child, parts, top=True)
        return "".join(parts)

    def __repr__(self) -> str:
        if self.kind == NodeKind.ELEMENT:
            return f"<XmlNode element {self.name}>"
        return f"<XmlNode {self.kind.name.lower()} {self.value!r}>"


# =============================================================================
# Serialization (used for rdf:parseType="Literal")
# =============================================================================

def _lookup_prefix(namespace: str, scopes: List[Dict[str, str]], is_attr: bool) -> Optional[str]:
    for scope in scopes:
        for prefix, uri in scope.items():
            if uri == namespace and (prefix or not is_attr):
                return prefix
    return None


def _qname(namespace: Optional[str], local: str, node: XmlNode,
           declared: Dict[str, str], is_attr: bool) -> str:
    if namespace is None:
        return local
    if namespace == XML_NS:
        return f"xml:{local}"
    prefix = _lookup_prefix(namespace, [declared, node.nsmap], is_attr)
    if prefix is None:
        n = len(declared)
        prefix = f"ns{n}"
        while prefix in declared or prefix in node.nsmap:
            n += 1
            prefix = f"ns{n}"
        declared[prefix] = namespace
    elif prefix not in declared and node.nsmap.get(prefix) != namespace:
        declared[prefix] = namespace
    return f"{prefix}:{local}" if prefix else local


def _used_namespaces(node: XmlNode) -> List[str]:
    used: List[str] = []
    stack = [node]
    while stack:
        current = stack.pop()
        if not current.is_element:
            continue
        for ns in [current.namespace] + [key[0] for key in current.attributes]:
            if ns is not None and ns != XML_NS and ns not in used:
                used.append(ns)
        stack.extend(reversed(current.children))
    return used


def _open_tag(node: XmlNode, top: bool) -> Tuple[str, str]:
    """Start tag (without its closing bracket) and qualified tag name."""
    declared = dict(node.namespaces)
    if top:
        # The literal is detached from its ancestors, so in-scope
        # bindings it relies on must be declared on the top element.
        for ns in _used_namespaces(node):
            prefix = _lookup_prefix(ns, [declared, node.nsmap], is_attr=False)
            if prefix is not None and prefix not in declared:
                declared[prefix] = ns

    tag = _qname(node.namespace, node.local_name, node, declared, is_attr=False)
    attrs = [
        f" {_qname(ns, local, node, declared, is_attr=True)}={quoteattr(value)}"
        for (ns, local), value in node.attributes.items()
    ]
    decls = [
        f" xmlns:{prefix}={quoteattr(uri)}" if prefix else f" xmlns={quoteattr(uri)}"
        for prefix, uri in declared.items()
    ]
    return f"<{tag}{''.join(decls)}{''.join(attrs)}", tag


def _write(node: XmlNode, parts: List[str], top: bool) -> None:
    # Work items are nodes to write or closing tags (plain strings)
    stack: List[Union[Tuple[XmlNode, bool], str]] = [(node, top)]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
            continue
        current, is_top = item
        if current.kind == NodeKind.TEXT:
            parts.append(escape(current.value))
        elif current.kind == NodeKind.CDATA:
            parts.append(f"<![CDATA[{current.value}]]>")
        elif current.kind == NodeKind.COMMENT:
            parts.append(f"<!--{current.value}-->")
        elif current.kind == NodeKind.PROCESSING_INSTRUCTION:
            body = f"{current.local_name} {current.value}".rstrip()
            parts.append(f"<?{body}?>")
        else:
            start, tag = _open_tag(current, is_top)
            if not current.children:
                parts.append(start + "/>")
                continue
            parts.append(start + ">")
            stack.append(f"</{tag}>")
            stack.extend((child, False) for child in reversed(current.children))


# =============================================================================
# Tree builders
# =============================================================================

class _TreeBuilder:
    """``XMLParser`` target that builds ``XmlNode`` documents."""

    def __init__(self):
        self.document = XmlNode.document()
        self._stack: List[XmlNode] = [self.document]
        self._pending_ns: Dict[str, str] = {}

    def start_ns(self, prefix: str, uri: str) -> None:
        self._pending_ns[prefix or ""] = uri

    def end_ns(self, prefix: str) -> None:
        pass

    def start(self, tag: str, attrib: Dict[str, str]) -> None:
        parent = self._stack[-1]
        namespace, local = split_clark(tag)
        node = XmlNode.element(namespace, local, {split_clark(k): v for k, v in attrib.items()})
        if self._pending_ns:
            node.namespaces = self._pending_ns
            node.nsmap = {**parent.nsmap, **self._pending_ns}
            self._pending_ns = {}
        else:
            node.nsmap = parent.nsmap
        parent.children.append(node)
        self._stack.append(node)

    def end(self, tag: str) -> None:
        self._stack.pop()

    def data(self, data: str) -> None:
        siblings = self._stack[-1].children
        if siblings and siblings[-1].kind == NodeKind.TEXT:
            siblings[-1].value += data
        else:
            siblings.append(XmlNode.text(data))

    def comment(self, text: str) -> None:
        self._stack[-1].children.append(XmlNode(kind=NodeKind.COMMENT, value=text))

    def pi(self, target: str, text: Optional[str] = None) -> None:
        self._stack[-1].children.append(
            XmlNode(kind=NodeKind.PROCESSING_INSTRUCTION, local_name=target, value=text or "")
        )

    def close(self) -> XmlNode:
        return self.document


def parse_xml(source: Union[str, bytes, Path, StringIO]) -> XmlNode:
    """
    Build a document node from markup.

    Args:
        source: XML content as string/bytes, file path, or StringIO

    Returns:
        XmlNode of kind DOCUMENT

    Raises:
        XMLSyntaxError: If the markup is not well-formed
    """
    if isinstance(source, Path):
        text = source.read_bytes()
    elif isinstance(source, StringIO):
        text = source.read()
    else:
        text = source

    parser = ET.XMLParser(target=_TreeBuilder())
    try:
        parser.feed(text)
        return parser.close()
    except ET.ParseError as e:
        raise XMLSyntaxError(f"Invalid XML: {e}") from e


def from_element(element: Union[ET.Element, ET.ElementTree]) -> XmlNode:
    """
    Adapt an ElementTree element into an ``XmlNode`` tree.

    ``text`` and ``tail`` become text children. ElementTree does not keep
    namespace declarations, so the adapted tree declares none.
    """
    if isinstance(element, ET.ElementTree):
        element = element.getroot()

    def convert(elem: ET.Element) -> XmlNode:
        if elem.tag is ET.Comment:
            return XmlNode(kind=NodeKind.COMMENT, value=elem.text or "")
        if elem.tag is ET.ProcessingInstruction:
            target, _, text = (elem.text or "").partition(" ")
            return XmlNode(kind=NodeKind.PROCESSING_INSTRUCTION, local_name=target, value=text)
        namespace, local = split_clark(elem.tag)
        return XmlNode.element(namespace, local, {split_clark(k): v for k, v in elem.attrib.items()})

    root = convert(element)
    stack = [(element, root)]
    while stack:
        elem, node = stack.pop()
        if not node.is_element:
            continue
        if elem.text:
            node.children.append(XmlNode.text(elem.text))
        for child in elem:
            child_node = convert(child)
            node.children.append(child_node)
            stack.append((child, child_node))
            if child.tail:
                node.children.append(XmlNode.text(child.tail))
    return root
