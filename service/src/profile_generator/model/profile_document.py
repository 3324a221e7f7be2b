"""Profile document produced by the profile assembler.

The shape follows the FHIR Profile resource: a header, one or more
structures holding differential element definitions, and locally defined
extension definitions referenced from ``#<code>`` type profiles.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict

from ..consts import (
    EXTENSION_CONTEXT,
    EXTENSION_CONTEXT_TYPE,
    MAP_IDENTITY,
    PROFILE_STATUS,
)


class BindingConformance(str, Enum):
    REQUIRED = "required"
    PREFERRED = "preferred"
    EXAMPLE = "example"


class TypeReference(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str | None = None
    profile: str | None = None


class Binding(BaseModel):
    model_config = ConfigDict(frozen=True)

    conformance: BindingConformance | None = None
    reference: str


class ElementMapping(BaseModel):
    model_config = ConfigDict(frozen=True)

    identity: str = MAP_IDENTITY
    map: str


class ElementDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    name: str
    formal: str | None = None
    min: int | None = None
    max: str | None = None
    types: list[TypeReference] = []
    must_support: bool = False
    binding: Binding | None = None
    mapping: ElementMapping | None = None


class ExtensionDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    display: str
    context_type: str = EXTENSION_CONTEXT_TYPE
    context: list[str] = [EXTENSION_CONTEXT]
    element: ElementDefinition


class StructureComponent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    name: str
    publish: bool
    purpose: str | None = None
    differential: list[ElementDefinition] = []
    extension_definitions: list[ExtensionDefinition] = []


class Contact(BaseModel):
    model_config = ConfigDict(frozen=True)

    system: str = "url"
    value: str | None = None


class ProfileMapping(BaseModel):
    model_config = ConfigDict(frozen=True)

    identity: str = MAP_IDENTITY
    name: str


class ProfileDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str | None = None
    version: str | None = None
    name: str
    publisher: str | None = None
    telecom: list[Contact] = []
    description: str | None = None
    status: str = PROFILE_STATUS
    requirements: str | None = None
    date: datetime
    fhir_version: str | None = None
    mapping: ProfileMapping
    structures: list[StructureComponent] = []

    @property
    def extension_definitions(self) -> list[ExtensionDefinition]:
        return [ext for structure in self.structures for ext in structure.extension_definitions]
