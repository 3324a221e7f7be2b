from __future__ import annotations

import logging
from dataclasses import dataclass

from ..consts import EXTENSION_TYPE_CODE
from ..model.mapping import PropertyMapping
from ..model.profile_document import ElementDefinition, ExtensionDefinition, TypeReference
from .annotations import bind
from .definer import define_element
from .extension_builder import ExtensionBuilder
from .type_resolver import TypeResolver

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BuiltElement:
    element: ElementDefinition
    extension: ExtensionDefinition | None = None


def element_path(mapping: PropertyMapping) -> str:
    if mapping.extension:
        return mapping.destination_path_prefix + ".extension"
    return mapping.destination_path


def extension_reference(mapping: PropertyMapping) -> TypeReference:
    return TypeReference(code=EXTENSION_TYPE_CODE, profile="#" + mapping.destination_name)


class ElementBuilder:
    """Builds the differential element for one mapped QUICK attribute."""

    def __init__(
        self,
        resolver: TypeResolver,
        extension_builder: ExtensionBuilder | None = None,
    ) -> None:
        self._resolver = resolver
        self._extension_builder = extension_builder or ExtensionBuilder(resolver)

    def build(self, mapping: PropertyMapping) -> BuiltElement:
        extension = None
        types = None

        # The reference to the extension does not override the types of its definition
        if mapping.extension:
            types = [extension_reference(mapping)]
            extension = self._extension_builder.build(mapping)

        element = define_element(
            mapping,
            self._resolver,
            path=element_path(mapping),
            name=mapping.destination_name,
            include_details=True,
            types=types,
            binding=bind(mapping),
            must_support=True,
        )
        logger.debug("built element '%s' (%s..%s)", element.path, element.min, element.max)
        return BuiltElement(element=element, extension=extension)
