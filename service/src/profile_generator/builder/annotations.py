"""Terminology binding and QUICK provenance annotations for element definitions."""
from __future__ import annotations

import logging

from ..consts import MAP_IDENTITY
from ..model.mapping import PropertyMapping
from ..model.profile_document import Binding, BindingConformance, ElementMapping

logger = logging.getLogger(__name__)


def get_conformance(conformance: str | None) -> BindingConformance | None:
    if conformance is None:
        return None

    try:
        return BindingConformance(conformance.lower())
    except ValueError:
        return None


def bind(mapping: PropertyMapping) -> Binding | None:
    """Build the terminology binding of a mapping, if it declares one.

    An unrecognized conformance still yields a binding that references the
    value set, just without a conformance level.
    """
    binding = mapping.binding
    if binding is None:
        return None

    conformance = get_conformance(binding.conformance)
    if conformance is None:
        logger.warning(
            "unrecognized binding conformance '%s' on '%s', leaving it unset",
            binding.conformance,
            mapping.destination_name,
        )

    return Binding(conformance=conformance, reference=binding.value_set_uri)


def quick_mapping(map_name: str | None) -> ElementMapping | None:
    if map_name is None or not map_name.strip():
        return None

    return ElementMapping(identity=MAP_IDENTITY, map=map_name)
