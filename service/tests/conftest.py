from datetime import datetime, timezone

import pytest

from profile_generator.data.metadata import ProfileMetadata, ProfileMetadataConfig
from profile_generator.data.type_registry import FhirTypeRegistry
from profile_generator.model.mapping import (
    DestinationAttribute,
    PropertyMapping,
    SourceAttribute,
    SourceClass,
    StructureInfo,
    TerminologyBinding,
)

FIXED_NOW = datetime(2015, 3, 1, 12, 30, tzinfo=timezone.utc)


def make_mapping(
    name: str,
    types: list[str],
    *,
    extension: bool = False,
    mapped: bool = True,
    low: int = 0,
    high: int = 1,
    path_prefix: str = "Condition",
    documentation: str | None = None,
    binding: TerminologyBinding | None = None,
    owner: str = "ConditionOccurrence",
    source_name: str | None = None,
    element_source: str | None = None,
) -> PropertyMapping:
    return PropertyMapping(
        source=SourceAttribute(
            owner=owner,
            name=source_name or name,
            element_source=element_source,
        ),
        destination=DestinationAttribute(
            name=name,
            path=f"{path_prefix}.{name}",
            path_prefix=path_prefix,
            low=low,
            high=high,
            documentation=documentation,
            types=types,
            binding=binding,
        ),
        extension=extension,
        mapped=mapped,
    )


class StubMappingSource:
    def __init__(self, mappings: list[PropertyMapping]) -> None:
        self.mappings = mappings
        self.calls: list[tuple[str, str]] = []

    def load_mappings(self, source_class: SourceClass, target_class: str) -> list[PropertyMapping]:
        self.calls.append((source_class.name, target_class))
        return list(self.mappings)


@pytest.fixture
def mapping_factory():
    return make_mapping


@pytest.fixture
def registry() -> FhirTypeRegistry:
    return FhirTypeRegistry.default()


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


def make_source_class() -> SourceClass:
    return SourceClass(
        name="ConditionOccurrence",
        description="The occurrence of a clinical condition.",
        structure=StructureInfo(
            type="Condition",
            name="ConditionOccurrence",
            publish=True,
            purpose="Records a condition observed for a patient.",
        ),
    )


SHARED_METADATA = {
    "profileRootPath": "http://hl7.org/fhir/Profile/",
    "profileBaseVersion": "0.1.0",
    "profilePublisher": "QUICK working group",
    "profileContact": "http://www.socraticgrid.org",
    "profileFhirVersion": "0.4.0",
}


def make_metadata(
    constrained: str | None = "Condition.relatedItem, Condition.evidence",
    **shared: str | None,
) -> ProfileMetadata:
    """Build metadata for the ConditionOccurrence profile.

    Keyword arguments override shared settings; passing None removes one.
    """
    profile = {
        "profileDescription": "Condition profile for QUICK",
        "profileRequirements": "Supports clinical decision support",
    }
    if constrained is not None:
        profile["constrainModifyingExtensions"] = constrained

    settings = {**SHARED_METADATA, **shared}
    return ProfileMetadata(
        ProfileMetadataConfig(
            shared={k: v for k, v in settings.items() if v is not None},
            profiles={"ConditionOccurrence": profile},
        )
    )


@pytest.fixture
def source_class() -> SourceClass:
    return make_source_class()


@pytest.fixture
def metadata() -> ProfileMetadata:
    return make_metadata()


@pytest.fixture
def stub_mapping_source_cls():
    return StubMappingSource
