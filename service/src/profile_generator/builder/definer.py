from __future__ import annotations

from typing import Any

from ..model.mapping import PropertyMapping
from ..model.profile_document import ElementDefinition, TypeReference
from .annotations import quick_mapping
from .type_resolver import TypeResolver


def define_element(
    mapping: PropertyMapping,
    resolver: TypeResolver,
    *,
    path: str,
    name: str,
    include_details: bool,
    types: list[TypeReference] | None = None,
    **extra: Any,
) -> ElementDefinition:
    """Define an element for a mapping's destination attribute.

    Args:
        mapping: The property mapping the element is defined for
        resolver: Resolves the candidate types of the destination attribute
        path: Element path
        name: Element name
        include_details: Whether documentation, cardinality and the QUICK
            provenance map are copied onto the element
        types: Type references to use instead of the resolved candidate types
        **extra: Further element fields (binding, must_support)

    Returns:
        The element definition
    """
    if types is None:
        types = resolver.resolve_all(mapping.candidate_types)

    fields: dict[str, Any] = {"path": path, "name": name, "types": types}
    if include_details:
        fields["formal"] = mapping.destination.documentation
        fields["min"] = mapping.destination.low
        fields["max"] = mapping.destination.max
        fields["mapping"] = quick_mapping(mapping.source_path)

    fields.update(extra)
    return ElementDefinition(**fields)
