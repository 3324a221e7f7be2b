"""Tests for the R4B StructureDefinition export."""

import json

import pytest

from profile_generator.builder.profile_assembler import ProfileAssembler
from profile_generator.errors import ProfileExportError
from profile_generator.model.mapping import TerminologyBinding
from profile_generator.serializers.structure_definition import (
    export_structure_definitions,
    extension_url,
    serialize_structure_definitions,
)

PROFILE_URL = "http://hl7.org/fhir/Profile/Condition-ConditionOccurrence"


@pytest.fixture
def assemble(registry, fixed_clock, source_class, metadata, stub_mapping_source_cls):
    def _assemble(mappings):
        assembler = ProfileAssembler(registry, clock=fixed_clock)
        return assembler.assemble(
            source_class, "Condition", stub_mapping_source_cls(mappings), metadata
        )

    return _assemble


@pytest.fixture
def mappings(mapping_factory):
    return [
        mapping_factory(
            "severity",
            ["CodeableConcept"],
            documentation="Severity of the condition.",
            binding=TerminologyBinding(conformance="Preferred", value_set_uri="http://example.org/vs"),
        ),
        mapping_factory(
            "status",
            ["code"],
            binding=TerminologyBinding(conformance="maybe", value_set_uri="http://example.org/status"),
        ),
        mapping_factory("subject", ["Person"], low=1, high=1),
        mapping_factory("criticality", ["CodeableConcept"], extension=True, high=-1),
    ]


def test_profile_structure_definition(assemble, mappings):
    profile, extension = export_structure_definitions(assemble(mappings))

    assert profile.url == PROFILE_URL
    assert profile.name == "ConditionOccurrence"
    assert profile.status == "draft"
    assert profile.kind == "resource"
    assert profile.type == "Condition"
    assert profile.baseDefinition == "http://hl7.org/fhir/StructureDefinition/Condition"
    assert profile.derivation == "constraint"
    assert profile.purpose == "Supports clinical decision support"
    assert profile.mapping[0].identity == "quick"

    assert extension.url == extension_url(assemble(mappings), "criticality")
    assert extension.type == "Extension"


def test_profile_elements(assemble, mappings):
    profile = export_structure_definitions(assemble(mappings))[0]
    elements = profile.differential.element

    assert [e.id for e in elements] == [
        "Condition",
        "Condition.modifierExtension",
        "Condition.relatedItem.modifierExtension",
        "Condition.evidence.modifierExtension",
        "Condition.severity",
        "Condition.status",
        "Condition.subject",
        "Condition.extension:criticality",
    ]

    severity = elements[4]
    assert severity.definition == "Severity of the condition."
    assert severity.mustSupport is True
    assert severity.binding.strength == "preferred"
    assert severity.binding.valueSet == "http://example.org/vs"
    assert severity.mapping[0].map == "ConditionOccurrence.severity"

    assert elements[5].binding is None

    subject = elements[6]
    assert subject.type[0].code == "Patient"
    assert subject.type[0].profile == ["http://hl7.org/fhir/Profile/Patient"]

    criticality = elements[7]
    assert criticality.sliceName == "criticality"
    assert criticality.max == "*"
    assert criticality.type[0].code == "Extension"
    assert criticality.type[0].profile == [f"{PROFILE_URL}/extension/criticality"]


def test_extension_structure_definition(assemble, mappings):
    extension = export_structure_definitions(assemble(mappings))[1]

    assert extension.kind == "complex-type"
    assert extension.title == "criticality"
    assert extension.context[0].type == "element"
    assert extension.context[0].expression == "Resource"

    url_element = extension.differential.element[1]
    assert url_element.path == "Extension.url"
    assert url_element.fixedUri == f"{PROFILE_URL}/extension/criticality"

    value = extension.differential.element[2]
    assert value.path == "Extension.value[x]"
    assert [t.code for t in value.type] == ["CodeableConcept"]


def test_code_less_type_cannot_be_exported(assemble, mapping_factory):
    document = assemble([mapping_factory("stage", ["ConditionStage"])])

    with pytest.raises(ProfileExportError):
        export_structure_definitions(document)


def test_profile_without_url_cannot_be_exported(assemble, mappings):
    document = assemble(mappings).model_copy(update={"url": None})

    with pytest.raises(ProfileExportError):
        export_structure_definitions(document)


def test_serialized_export_is_a_json_list(assemble, mappings):
    content = serialize_structure_definitions(assemble(mappings))

    data = json.loads(content)
    assert [d["resourceType"] for d in data] == ["StructureDefinition", "StructureDefinition"]
    assert data[0]["url"] == PROFILE_URL
