"""Export of profile documents as FHIR R4B StructureDefinitions.

The profile structure becomes a constraint on its base resource, every local
extension definition becomes an Extension StructureDefinition of its own and
``#<code>`` references are rewritten to the canonical URL of that extension.
"""
from __future__ import annotations

import logging
from typing import Any

from fhir.resources.R4B.structuredefinition import StructureDefinition
from pydantic import ValidationError

from ..consts import EXTENSION_TYPE_CODE
from ..errors import ProfileExportError
from ..model.profile_document import (
    ElementDefinition,
    ExtensionDefinition,
    ProfileDocument,
    StructureComponent,
    TypeReference,
)

logger = logging.getLogger(__name__)

R4B_FHIR_VERSION = "4.3.0"
BASE_DEFINITION_PATH = "http://hl7.org/fhir/StructureDefinition/"

# Local extension contexts mapped onto R4B element contexts
EXTENSION_CONTEXTS = {
    "Any": "Resource",
}


def _put(data: dict[str, Any], key: str, value: Any) -> None:
    if value is None or value == "" or value == []:
        return
    data[key] = value


def extension_url(document: ProfileDocument, code: str) -> str:
    return f"{document.url}/extension/{code}"


def _local_extension_code(type_ref: TypeReference) -> str | None:
    if type_ref.code == EXTENSION_TYPE_CODE and type_ref.profile and type_ref.profile.startswith("#"):
        return type_ref.profile[1:]
    return None


class StructureDefinitionExporter:
    def __init__(self, document: ProfileDocument) -> None:
        if not document.url:
            raise ProfileExportError(
                f"profile '{document.name}' has no url, check the profileRootPath setting"
            )
        self._document = document

    def export(self) -> list[StructureDefinition]:
        definitions = [self._export_structure(s) for s in self._document.structures]
        definitions.extend(
            self._export_extension(e) for e in self._document.extension_definitions
        )
        return definitions

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------
    def _header(self, url: str, name: str) -> dict[str, Any]:
        document = self._document
        data: dict[str, Any] = {
            "resourceType": "StructureDefinition",
            "url": url,
            "name": name,
            "status": document.status,
            "fhirVersion": R4B_FHIR_VERSION,
            "abstract": False,
            "derivation": "constraint",
        }
        _put(data, "version", document.version)
        _put(data, "publisher", document.publisher)
        _put(data, "date", document.date.isoformat())
        _put(
            data,
            "contact",
            [
                {"telecom": [{"system": contact.system, "value": contact.value}]}
                for contact in document.telecom
                if contact.value
            ],
        )
        _put(data, "description", document.description)
        _put(data, "purpose", document.requirements)
        data["mapping"] = [{"identity": document.mapping.identity, "name": document.mapping.name}]
        return data

    def _export_structure(self, structure: StructureComponent) -> StructureDefinition:
        document = self._document
        url = document.url
        if len(document.structures) > 1:
            url = f"{document.url}/{structure.name}"

        data = self._header(url, structure.name)
        data["kind"] = "resource"
        data["type"] = structure.type
        data["baseDefinition"] = BASE_DEFINITION_PATH + structure.type
        data["differential"] = {
            "element": [self._element(element) for element in structure.differential]
        }
        return self._validate(data)

    def _export_extension(self, extension: ExtensionDefinition) -> StructureDefinition:
        url = extension_url(self._document, extension.code)
        element = extension.element

        data = self._header(url, extension.code)
        data["title"] = extension.display
        data["kind"] = "complex-type"
        data["type"] = EXTENSION_TYPE_CODE
        data["baseDefinition"] = BASE_DEFINITION_PATH + EXTENSION_TYPE_CODE
        data["context"] = [
            {"type": "element", "expression": EXTENSION_CONTEXTS.get(context, context)}
            for context in extension.context
        ]

        root: dict[str, Any] = {"id": "Extension", "path": "Extension"}
        _put(root, "short", extension.display)
        _put(root, "definition", element.formal)
        _put(root, "min", element.min)
        _put(root, "max", element.max)

        value: dict[str, Any] = {"id": "Extension.value[x]", "path": "Extension.value[x]"}
        _put(value, "type", [self._type(element, t) for t in element.types])

        data["differential"] = {
            "element": [
                root,
                {"id": "Extension.url", "path": "Extension.url", "fixedUri": url},
                value,
            ]
        }
        return self._validate(data)

    def _validate(self, data: dict[str, Any]) -> StructureDefinition:
        try:
            return StructureDefinition.model_validate(data)
        except ValidationError as e:
            logger.error("invalid StructureDefinition '%s'", data.get("url"))
            logger.error(e.errors())
            raise ProfileExportError(f"failed to export '{data.get('url')}'") from e

    # ------------------------------------------------------------------
    # Elements
    # ------------------------------------------------------------------
    def _element(self, element: ElementDefinition) -> dict[str, Any]:
        data: dict[str, Any] = {"id": element.path, "path": element.path}

        slice_name = next(
            (code for code in map(_local_extension_code, element.types) if code), None
        )
        if slice_name is not None:
            data["id"] = f"{element.path}:{slice_name}"
            data["sliceName"] = slice_name

        _put(data, "definition", element.formal)
        _put(data, "min", element.min)
        _put(data, "max", element.max)
        _put(data, "type", [self._type(element, t) for t in element.types])
        if element.must_support:
            data["mustSupport"] = True

        binding = element.binding
        if binding is not None:
            if binding.conformance is None:
                logger.warning(
                    "binding of '%s' has no conformance, it is not exported", element.path
                )
            else:
                data["binding"] = {
                    "strength": binding.conformance.value,
                    "valueSet": binding.reference,
                }

        if element.mapping is not None:
            data["mapping"] = [{"identity": element.mapping.identity, "map": element.mapping.map}]

        return data

    def _type(self, element: ElementDefinition, type_ref: TypeReference) -> dict[str, Any]:
        if type_ref.code is None:
            raise ProfileExportError(
                f"type of '{element.path}' references '{type_ref.profile}' without a type code"
            )

        data: dict[str, Any] = {"code": type_ref.code}
        local_code = _local_extension_code(type_ref)
        if local_code is not None:
            data["profile"] = [extension_url(self._document, local_code)]
        elif type_ref.profile:
            data["profile"] = [type_ref.profile]
        return data


def export_structure_definitions(document: ProfileDocument) -> list[StructureDefinition]:
    return StructureDefinitionExporter(document).export()


def serialize_structure_definitions(document: ProfileDocument) -> str:
    """Render the R4B export as JSON, a Bundle-less list of StructureDefinitions."""
    definitions = export_structure_definitions(document)
    content = ",\n".join(
        d.model_dump_json(by_alias=True, exclude_none=True, indent=2) for d in definitions
    )
    return f"[\n{content}\n]"
