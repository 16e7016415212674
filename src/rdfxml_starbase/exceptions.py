"""
Exceptions raised while turning RDF/XML into statements.

Every parse error is fatal to the current parse: the driver never skips
and continues, and statements already handed to the store are not rolled
back.
"""


class RDFXMLError(Exception):
    """Base class for all rdfxml_starbase errors."""


class XMLSyntaxError(RDFXMLError):
    """Raised when markup cannot be turned into an XML tree."""


class NoRootElementError(RDFXMLError):
    """Raised when the input tree has no element to act as the root."""


class MissingNamespaceError(RDFXMLError):
    """Raised when an element or attribute has no namespace URI."""


class AmbiguousNodeIdError(RDFXMLError):
    """Raised when a node element carries both rdf:about and rdf:ID."""


class InvalidBaseError(RDFXMLError):
    """Raised when a relative reference needs a base URI without a scheme."""

    def __init__(self, base: str):
        super().__init__(f"Invalid base URI: {base!r}")
        self.base = base


class DuplicatePrefixError(RDFXMLError):
    """Raised when a namespace prefix is bound twice on one store."""

    def __init__(self, prefix: str):
        super().__init__(f"Can't redefine prefix {prefix!r}")
        self.prefix = prefix


class CollectionClosedError(RDFXMLError):
    """Raised when appending to a collection that has been closed."""


class ConfigValidationError(RDFXMLError):
    """Raised when a parser configuration is invalid."""
