#!/usr/bin/env python3
"""XSD parser adapter.

Parses XSD text into an immutable tree of per-construct dataclasses. Only the
constructs the generator understands are materialized: top-level elements,
named complex types with a sequence or choice content model, and imports.

Children are looked up through child_nodes(): names in ALWAYS_PLURAL (the
constructs that may legally repeat) always come back as tuples, even for a
single occurrence, and every other name as a single node or None.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Union
from xml.etree.ElementTree import Element

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from ....core.exceptions import SchemaNotFoundError, SchemaParseError

# XSD namespace
XS_NS = "http://www.w3.org/2001/XMLSchema"
XS = f"{{{XS_NS}}}"

# Element names that are always materialized as ordered tuples
ALWAYS_PLURAL = frozenset({
    "element",
    "complexType",
    "simpleType",
    "attribute",
    "sequence",
    "choice",
    "import",
})

UNBOUNDED = "unbounded"

logger = logging.getLogger(__name__)

# Start tag of the schema root, with or without a namespace prefix
_SCHEMA_START_TAG = re.compile(r'<(?:[A-Za-z_][\w.-]*:)?schema\b[^>]*>')
_XMLNS_ATTRIBUTE = re.compile(r'xmlns(?::([A-Za-z_][\w.-]*))?\s*=\s*(["\'])(.*?)\2', re.DOTALL)


@dataclass(frozen=True)
class ElementDecl:
    """An xs:element declaration (top-level or inside a content model)."""
    name: str
    type_ref: Optional[str] = None          # Raw type attribute, e.g. "xsd:string" or "tns:tAddress"
    min_occurs: Optional[str] = None        # Raw attribute value, None when absent
    max_occurs: Optional[str] = None        # Raw attribute value, None when absent
    default: Optional[str] = None
    fixed: Optional[str] = None
    documentation: Optional[str] = None

    @property
    def is_required_occurrence(self) -> bool:
        """True when the effective minOccurs is 1."""
        return self.min_occurs is None or self.min_occurs == "1"

    @property
    def is_repeated(self) -> bool:
        """True when maxOccurs allows more than one occurrence."""
        return self.max_occurs is not None and self.max_occurs != "1"


@dataclass(frozen=True)
class Sequence:
    """An xs:sequence; particles keep document order of elements and nested choices."""
    particles: tuple[Union[ElementDecl, "Choice"], ...] = ()

    @property
    def elements(self) -> tuple[ElementDecl, ...]:
        return tuple(p for p in self.particles if isinstance(p, ElementDecl))


@dataclass(frozen=True)
class Choice:
    """An xs:choice; each particle is an alternative (an element or a sequence)."""
    particles: tuple[Union[ElementDecl, Sequence], ...] = ()
    max_occurs: Optional[str] = None

    @property
    def is_unbounded(self) -> bool:
        return self.max_occurs == UNBOUNDED

    def flattened_elements(self) -> tuple[ElementDecl, ...]:
        """All alternative elements, with sequence branches expanded in place."""
        elements = []
        for particle in self.particles:
            if isinstance(particle, Sequence):
                elements.extend(particle.elements)
            else:
                elements.append(particle)
        return tuple(elements)


ContentModel = Union[Sequence, Choice]


@dataclass(frozen=True)
class ComplexType:
    """A named xs:complexType and its content model (None when unsupported/empty)."""
    name: str
    content: Optional[ContentModel] = None


@dataclass(frozen=True)
class ImportDecl:
    """An xs:import declaration."""
    namespace: str
    schema_location: str


@dataclass(frozen=True)
class SchemaDocument:
    """A parsed xs:schema document."""
    target_namespace: Optional[str] = None
    namespaces: dict[str, str] = field(default_factory=dict)  # prefix -> namespace URI
    complex_types: tuple[ComplexType, ...] = ()
    elements: tuple[ElementDecl, ...] = ()
    imports: tuple[ImportDecl, ...] = ()
    source: Optional[str] = None

    def find_complex_type(self, name: str) -> Optional[ComplexType]:
        """Look up a complex type declared in this document by name."""
        for complex_type in self.complex_types:
            if complex_type.name == name:
                return complex_type
        return None

    @property
    def xsd_prefixes(self) -> frozenset[str]:
        """Prefixes bound to the XML Schema namespace (usually xs or xsd)."""
        return frozenset(p for p, uri in self.namespaces.items() if uri == XS_NS and p)

    @property
    def own_prefixes(self) -> frozenset[str]:
        """Prefixes that refer to types declared in this document."""
        prefixes = {"tns"}
        if self.target_namespace:
            prefixes.update(
                p for p, uri in self.namespaces.items() if uri == self.target_namespace and p
            )
        return frozenset(prefixes)


def _local_name(tag: str) -> str:
    return tag.split('}', 1)[1] if tag.startswith('{') else tag


def child_nodes(node: Element, name: str) -> Union[tuple[Element, ...], Optional[Element]]:
    """Direct XSD children of `node` named `name`.

    Names in ALWAYS_PLURAL come back as a tuple, even for zero or one
    occurrence. Any other name yields its first occurrence, or None.
    """
    if name in ALWAYS_PLURAL:
        return tuple(node.findall(f'./{XS}{name}'))
    return node.find(f'./{XS}{name}')


def _documentation(node: Element) -> Optional[str]:
    annotation = child_nodes(node, 'annotation')
    if annotation is None:
        return None
    doc_elem = child_nodes(annotation, 'documentation')
    if doc_elem is None:
        return None
    text = "".join(doc_elem.itertext()).strip()
    return text or None


def _parse_element(node: Element) -> Optional[ElementDecl]:
    name = node.attrib.get('name')
    if not name:
        logger.debug(f"Skipping xs:element without a name attribute: {node.attrib}")
        return None

    return ElementDecl(
        name=name,
        type_ref=node.attrib.get('type') or None,
        min_occurs=node.attrib.get('minOccurs'),
        max_occurs=node.attrib.get('maxOccurs'),
        default=node.attrib.get('default'),
        fixed=node.attrib.get('fixed'),
        documentation=_documentation(node),
    )


def _parse_sequence(node: Element) -> Sequence:
    particles = []
    for child in node:
        if child.tag == f'{XS}element':
            element = _parse_element(child)
            if element is not None:
                particles.append(element)
        elif child.tag == f'{XS}choice':
            particles.append(_parse_choice(child))
        elif child.tag != f'{XS}annotation':
            logger.debug(f"Ignoring unsupported particle '{_local_name(child.tag)}' in xs:sequence")
    return Sequence(particles=tuple(particles))


def _parse_choice(node: Element) -> Choice:
    particles = []
    for child in node:
        if child.tag == f'{XS}element':
            element = _parse_element(child)
            if element is not None:
                particles.append(element)
        elif child.tag == f'{XS}sequence':
            particles.append(_parse_sequence(child))
        elif child.tag != f'{XS}annotation':
            logger.debug(f"Ignoring unsupported particle '{_local_name(child.tag)}' in xs:choice")
    return Choice(particles=tuple(particles), max_occurs=node.attrib.get('maxOccurs'))


def _parse_complex_type(node: Element) -> ComplexType:
    name = node.attrib.get('name', '')

    sequences = child_nodes(node, 'sequence')
    choices = child_nodes(node, 'choice')

    content = None
    if sequences:
        content = _parse_sequence(sequences[0])
    elif choices:
        content = _parse_choice(choices[0])
    else:
        logger.debug(f"Complex type '{name}' has no sequence or choice content model")

    return ComplexType(name=name, content=content)


def extract_namespace_declarations(xsd_text: str) -> dict[str, str]:
    """Extract prefix to URI mappings declared on the schema root start tag.

    ElementTree does not keep xmlns attributes, so they are read from the raw
    text. The default namespace is stored under the empty prefix.
    """
    namespaces = {}

    match = _SCHEMA_START_TAG.search(xsd_text)
    if not match:
        return namespaces

    for prefix, _quote, uri in _XMLNS_ATTRIBUTE.findall(match.group(0)):
        namespaces[prefix or ''] = uri

    return namespaces


def parse_schema(content: Union[str, bytes], source: Optional[str] = None) -> SchemaDocument:
    """Parse XSD content into a SchemaDocument.

    Args:
        content: XSD text or bytes
        source: Optional file path used in error messages

    Returns:
        The parsed schema document

    Raises:
        SchemaParseError: If the content is not well-formed XML
        SchemaNotFoundError: If the root element is not xs:schema
    """
    location = f" in {source}" if source else ""

    raw_text = content.decode('utf-8', errors='replace') if isinstance(content, bytes) else content
    # An XML declaration is only legal at the very start of the document
    xml_input = content.strip()

    try:
        root = ET.fromstring(xml_input)
    except ET.ParseError as e:
        raise SchemaParseError(f"Invalid XSD content{location}: {e}") from e
    except DefusedXmlException as e:
        raise SchemaParseError(f"Forbidden XML construct{location}: {e}") from e

    if root.tag != f'{XS}schema':
        raise SchemaNotFoundError(f"Invalid XSD schema: No XSD schema found{location} (root element: {root.tag})")

    complex_types = tuple(_parse_complex_type(node) for node in child_nodes(root, 'complexType'))
    elements = tuple(
        element for element in (_parse_element(node) for node in child_nodes(root, 'element'))
        if element is not None
    )
    imports = tuple(
        ImportDecl(
            namespace=node.attrib.get('namespace', ''),
            schema_location=node.attrib.get('schemaLocation', ''),
        )
        for node in child_nodes(root, 'import')
    )

    schema = SchemaDocument(
        target_namespace=root.attrib.get('targetNamespace'),
        namespaces=extract_namespace_declarations(raw_text),
        complex_types=complex_types,
        elements=elements,
        imports=imports,
        source=source,
    )

    logger.debug(
        f"Parsed schema{location}: {len(complex_types)} complex types, "
        f"{len(elements)} elements, {len(imports)} imports"
    )
    return schema
