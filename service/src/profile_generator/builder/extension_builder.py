from __future__ import annotations

import logging

from ..consts import EXTENSION_CONTEXT, EXTENSION_CONTEXT_TYPE
from ..model.mapping import PropertyMapping
from ..model.profile_document import ExtensionDefinition
from .definer import define_element
from .type_resolver import TypeResolver

logger = logging.getLogger(__name__)


class ExtensionBuilder:
    """Defines the local extension backing an attribute mapped as extension.

    Documentation, cardinality and provenance of the attribute stay on the
    element referencing the extension, so by default the definition only
    carries the attribute's types.
    """

    def __init__(self, resolver: TypeResolver, *, include_details: bool = False) -> None:
        self._resolver = resolver
        self._include_details = include_details

    def build(self, mapping: PropertyMapping) -> ExtensionDefinition:
        name = mapping.destination_name
        element = define_element(
            mapping,
            self._resolver,
            path=name,
            name=name,
            include_details=self._include_details,
        )
        logger.debug("defined extension '%s' with %d type(s)", name, len(element.types))

        # TODO: derive the context from the mapping once extensions on data types are modelled
        return ExtensionDefinition(
            code=name,
            display=name,
            context_type=EXTENSION_CONTEXT_TYPE,
            context=[EXTENSION_CONTEXT],
            element=element,
        )
