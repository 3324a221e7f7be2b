"""Rendering of profile documents as FHIR Profile XML."""
from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from datetime import datetime
from typing import Any

from ..errors import SerializationFailure
from ..model.profile_document import (
    ElementDefinition,
    ExtensionDefinition,
    ProfileDocument,
    StructureComponent,
)

logger = logging.getLogger(__name__)

FHIR_NS = "http://hl7.org/fhir"

ET.register_namespace("", FHIR_NS)

# Characters outside the XML 1.0 Char production
_INVALID_XML_CHARS = re.compile("[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def _tag(name: str) -> str:
    return f"{{{FHIR_NS}}}{name}"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _add(parent: ET.Element, name: str) -> ET.Element:
    return ET.SubElement(parent, _tag(name))


def _add_value(parent: ET.Element, name: str, value: Any) -> ET.Element | None:
    # FHIR primitives must not be empty
    if value is None or value == "":
        return None
    text = _format_value(value)
    invalid = _INVALID_XML_CHARS.search(text)
    if invalid is not None:
        raise ValueError(f"{name} contains a character not allowed in XML: {invalid.group()!r}")
    element = _add(parent, name)
    element.set("value", text)
    return element


def compose_profile(document: ProfileDocument) -> ET.Element:
    root = ET.Element(_tag("Profile"))
    _add_value(root, "url", document.url)
    _add_value(root, "version", document.version)
    _add_value(root, "name", document.name)
    _add_value(root, "publisher", document.publisher)
    for contact in document.telecom:
        telecom = _add(root, "telecom")
        _add_value(telecom, "system", contact.system)
        _add_value(telecom, "value", contact.value)
    _add_value(root, "description", document.description)
    _add_value(root, "status", document.status)
    _add_value(root, "date", document.date)
    _add_value(root, "requirements", document.requirements)
    _add_value(root, "fhirVersion", document.fhir_version)

    mapping = _add(root, "mapping")
    _add_value(mapping, "identity", document.mapping.identity)
    _add_value(mapping, "name", document.mapping.name)

    for structure in document.structures:
        _compose_structure(root, structure)

    # Extension definitions live on the profile, after all structures
    for extension in document.extension_definitions:
        _compose_extension(root, extension)

    return root


def _compose_structure(parent: ET.Element, structure: StructureComponent) -> None:
    node = _add(parent, "structure")
    _add_value(node, "type", structure.type)
    _add_value(node, "name", structure.name)
    _add_value(node, "publish", structure.publish)
    _add_value(node, "purpose", structure.purpose)

    differential = _add(node, "differential")
    for element in structure.differential:
        _compose_element(differential, element)


def _compose_extension(parent: ET.Element, extension: ExtensionDefinition) -> None:
    node = _add(parent, "extensionDefn")
    _add_value(node, "code", extension.code)
    _add_value(node, "display", extension.display)
    _add_value(node, "contextType", extension.context_type)
    for context in extension.context:
        _add_value(node, "context", context)
    _compose_element(node, extension.element)


def _compose_element(parent: ET.Element, element: ElementDefinition) -> None:
    node = _add(parent, "element")
    _add_value(node, "path", element.path)
    _add_value(node, "name", element.name)

    definition = _add(node, "definition")
    _add_value(definition, "formal", element.formal)
    _add_value(definition, "min", element.min)
    _add_value(definition, "max", element.max)
    for type_ref in element.types:
        type_node = _add(definition, "type")
        _add_value(type_node, "code", type_ref.code)
        _add_value(type_node, "profile", type_ref.profile)
    if element.must_support:
        _add_value(definition, "mustSupport", True)
    if element.binding is not None:
        binding = _add(definition, "binding")
        if element.binding.conformance is not None:
            _add_value(binding, "conformance", element.binding.conformance.value)
        _add_value(binding, "referenceUri", element.binding.reference)
    if element.mapping is not None:
        mapping = _add(definition, "mapping")
        _add_value(mapping, "identity", element.mapping.identity)
        _add_value(mapping, "map", element.mapping.map)


def serialize_profile(document: ProfileDocument, *, pretty: bool = True) -> str:
    """Render a profile document as FHIR XML.

    Raises:
        SerializationFailure: if the document cannot be rendered
    """
    try:
        root = compose_profile(document)
        if pretty:
            ET.indent(root)
        content = ET.tostring(root, encoding="utf-8", xml_declaration=True)

    except (TypeError, ValueError, AttributeError) as e:
        logger.exception("failed to serialize profile '%s'", document.name)
        raise SerializationFailure("Error marshalling profile to XML") from e

    return content.decode("utf-8")
