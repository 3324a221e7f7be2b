"""Builders turning QUICK property mappings into a FHIR profile document."""

from .element_builder import BuiltElement, ElementBuilder
from .extension_builder import ExtensionBuilder
from .profile_assembler import ConfigurationSource, MappingSource, ProfileAssembler
from .type_resolver import TypeClassifier, TypeResolver

__all__ = [
    "BuiltElement",
    "ConfigurationSource",
    "ElementBuilder",
    "ExtensionBuilder",
    "MappingSource",
    "ProfileAssembler",
    "TypeClassifier",
    "TypeResolver",
]
