"""
Parsing frames for the RDF/XML traversal.

A frame is the parsing context of one position in the XML tree. It inherits
base URI and language from its parent frame, takes one of two roles (a graph
NODE or an ARC between nodes) and emits a statement as soon as a NODE frame
sits under an ARC frame that sits under another NODE frame.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

from rdfxml_starbase.store import StatementStore
from rdfxml_starbase.terms import Collection, Term
from rdfxml_starbase.uris import RDF_NS, join_uri, rdf
from rdfxml_starbase.xmltree import AttrKey, XmlNode


class FrameRole(Enum):
    """Structural role of a frame."""
    NODE = "node"
    ARC = "arc"


@dataclass
class ParseState:
    """
    State owned by a single parse invocation.

    Attributes:
        store: Statement sink
        base: Document base URI
        why: Context token passed through to every statement
        reify: Whether rdf:ID on property elements reifies the statement
        bnodes: Blank nodes interned by rdf:nodeID
        attributes: Working copies of element attributes; the parser removes
            attributes it has consumed from these copies, never from the
            caller's tree
        declared: Elements whose namespace declarations were registered
    """
    store: StatementStore
    base: str = ""
    why: Any = None
    reify: bool = False
    bnodes: Dict[str, Term] = field(default_factory=dict)
    attributes: Dict[XmlNode, Dict[AttrKey, str]] = field(default_factory=dict)
    declared: set = field(default_factory=set)

    def attributes_of(self, element: XmlNode) -> Dict[AttrKey, str]:
        """Mutable working copy of ``element``'s attributes."""
        attrs = self.attributes.get(element)
        if attrs is None:
            attrs = self.attributes[element] = dict(element.attributes)
        return attrs


class Frame:
    """
    Parsing context for one tree position.

    ``base`` and ``lang`` are copied from the parent at construction and only
    overridden by this frame's own ``xml:base``/``xml:lang``. ``datatype``,
    ``rdfid`` and ``list_index`` are read by child frames: a literal takes
    its parent arc's datatype, a statement is reified when its parent arc
    has an ``rdfid``, and ``rdf:li`` arcs number themselves from their
    parent node's ``list_index``.
    """

    def __init__(self, state: ParseState, parent: Optional["Frame"] = None,
                 element: Optional[XmlNode] = None):
        self.state = state
        self.store = state.store
        self.parent = parent
        self.element = element
        self.last_child = 0
        self.base = parent.base if parent is not None else state.base
        self.lang = parent.lang if parent is not None else ""
        self.node: Optional[Union[Term, Collection]] = None
        self.role: Optional[FrameRole] = None
        self.list_index = 1
        self.rdfid: Optional[str] = None
        self.datatype: Optional[str] = None
        self.collection = False

    def __repr__(self) -> str:
        role = self.role.value if self.role else "unset"
        return f"<Frame {role} {self.node!r}>"

    def terminate(self) -> None:
        """Retire the frame, sealing its collection if it has one."""
        if self.collection:
            self.node.close()

    def add_symbol(self, role: FrameRole, uri: str) -> None:
        """Resolve ``uri`` against the frame's base and take ``role``."""
        self.node = self.store.sym(join_uri(uri, self.base))
        self.role = role

    def is_triple_to_load(self) -> bool:
        """True when this frame completes a NODE -> ARC -> NODE pattern."""
        return (
            self.parent is not None
            and self.parent.parent is not None
            and self.role == FrameRole.NODE
            and self.parent.role == FrameRole.ARC
            and self.parent.parent.role == FrameRole.NODE
        )

    def load_triple(self) -> None:
        """Emit the statement this frame completes, reifying it if asked."""
        arc = self.parent
        subject = arc.parent
        why = self.state.why
        if subject.collection:
            subject.node.append(self.node)
        else:
            self.store.add(subject.node, arc.node, self.node, why)

        if arc.rdfid is not None:
            sym = self.store.sym
            statement = sym(join_uri("#" + arc.rdfid, self.base))
            self.store.add(statement, sym(rdf("type")), sym(rdf("Statement")), why)
            self.store.add(statement, sym(rdf("subject")), subject.node, why)
            self.store.add(statement, sym(rdf("predicate")), arc.node, why)
            self.store.add(statement, sym(rdf("object")), self.node, why)

    def _emit(self) -> None:
        if self.is_triple_to_load():
            self.load_triple()

    def add_node(self, uri: str) -> None:
        """Become a NODE for the resource ``uri``."""
        self.add_symbol(FrameRole.NODE, uri)
        self._emit()

    def add_collection(self) -> None:
        """Become a NODE holding a new, open collection."""
        self.role = FrameRole.NODE
        self.node = self.store.collection()
        self.collection = True
        self._emit()

    def add_collection_arc(self) -> None:
        """Become the unnamed ARC of a collection member slot."""
        self.role = FrameRole.ARC

    def add_bnode(self, id: Optional[str] = None) -> None:
        """Become a NODE for a blank node, interned by ``id`` when given."""
        if id is not None:
            bnode = self.state.bnodes.get(id)
            if bnode is None:
                bnode = self.state.bnodes[id] = self.store.bnode()
            self.node = bnode
        else:
            self.node = self.store.bnode()
        self.role = FrameRole.NODE
        self._emit()

    def add_arc(self, uri: str) -> None:
        """Become an ARC; ``rdf:li`` is numbered from the parent's counter."""
        if uri == RDF_NS + "li":
            uri = rdf(f"_{self.parent.list_index}")
            self.parent.list_index += 1
        self.add_symbol(FrameRole.ARC, uri)

    def add_literal(self, value: str) -> None:
        """Become a NODE for a literal typed by the parent arc, else tagged."""
        if self.parent.datatype:
            self.node = self.store.literal(value, None, self.store.sym(self.parent.datatype))
        else:
            self.node = self.store.literal(value, self.lang)
        self.role = FrameRole.NODE
        self._emit()
