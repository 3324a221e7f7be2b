"""Input records describing an annotated QUICK class and its property mappings.

A mapping file is read into these models by ``data.mapping_source``. Once
constructed they are frozen; the builders only read them.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..consts import UNBOUNDED


class StructureInfo(BaseModel):
    """Values of the ``profile.fhir.structure.*`` tags of a source class."""

    model_config = ConfigDict(frozen=True)

    type: str
    name: str
    publish: bool = True
    purpose: str | None = None


class SourceClass(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str | None = None
    structure: StructureInfo


class TerminologyBinding(BaseModel):
    model_config = ConfigDict(frozen=True)

    conformance: str
    value_set_uri: str


class SourceAttribute(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner: str
    name: str
    element_source: str | None = None  # overrides the attribute name in provenance maps


class DestinationAttribute(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    path_prefix: str
    low: int = Field(ge=0)
    high: int
    documentation: str | None = None
    types: list[str] = []
    binding: TerminologyBinding | None = None

    @field_validator("high")
    @classmethod
    def _check_high(cls, value: int) -> int:
        if value < 0 and value != UNBOUNDED:
            raise ValueError(f"upper cardinality must be >= 0 or {UNBOUNDED} (unbounded)")
        return value

    @property
    def max(self) -> str:
        return "*" if self.high == UNBOUNDED else str(self.high)


class PropertyMapping(BaseModel):
    """One-to-one mapping of a QUICK attribute onto a FHIR element."""

    model_config = ConfigDict(frozen=True)

    source: SourceAttribute
    destination: DestinationAttribute
    extension: bool = False
    mapped: bool = True

    @property
    def source_path(self) -> str:
        owner = self.source.owner
        attribute = self.source.element_source or self.source.name
        if not owner.strip() and not attribute.strip():
            return ""
        return f"{owner}.{attribute}"

    @property
    def destination_name(self) -> str:
        return self.destination.name

    @property
    def destination_path(self) -> str:
        return self.destination.path

    @property
    def destination_path_prefix(self) -> str:
        return self.destination.path_prefix

    @property
    def candidate_types(self) -> list[str]:
        return self.destination.types

    @property
    def binding(self) -> TerminologyBinding | None:
        return self.destination.binding


class MappingFile(BaseModel):
    source_class: SourceClass
    target_class: str
    mappings: list[PropertyMapping] = []
