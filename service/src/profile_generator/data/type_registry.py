"""Registry classifying QUICK type names against FHIR types.

A type name is either a native FHIR data type, a QUICK type profiled onto a
FHIR type, a QUICK class with an equivalent FHIR resource, or unrecognized.
"""
import json
import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

from ..errors import InitializationError

logger = logging.getLogger(__name__)


FHIR_PRIMITIVE_TYPES = [
    "boolean",
    "integer",
    "decimal",
    "base64Binary",
    "instant",
    "string",
    "uri",
    "date",
    "dateTime",
    "time",
    "code",
    "oid",
    "uuid",
    "id",
]

FHIR_COMPLEX_TYPES = [
    "Attachment",
    "Identifier",
    "CodeableConcept",
    "Coding",
    "Quantity",
    "Range",
    "Period",
    "Ratio",
    "SampledData",
    "HumanName",
    "Address",
    "Contact",
    "Schedule",
    "ResourceReference",
    "Extension",
    "Narrative",
    "Age",
    "Count",
    "Distance",
    "Duration",
    "Money",
]

# QUICK data types expressed as profiles on a FHIR data type
QUICK_PROFILED_TYPES = {
    "TimePeriod": "Period",
    "IntervalOfQuantity": "Range",
    "PhysicalQuantity": "Quantity",
    "BodySite": "CodeableConcept",
}

# QUICK classes with an equivalent FHIR resource
QUICK_RESOURCE_EQUIVALENTS = {
    "Patient": "Patient",
    "Person": "Patient",
    "Practitioner": "Practitioner",
    "Organization": "Organization",
    "Location": "Location",
    "Encounter": "Encounter",
    "EncounterEvent": "Encounter",
    "ConditionOccurrence": "Condition",
    "AllergyIntolerance": "AllergyIntolerance",
    "FamilyHistory": "FamilyHistory",
    "Device": "Device",
    "Medication": "Medication",
    "Substance": "Substance",
    "Specimen": "Specimen",
    "ObservationResult": "Observation",
    "ProcedurePerformanceOccurrence": "Procedure",
}


class TypeRegistryConfig(BaseModel):
    native: list[str] = []
    profiled: dict[str, str] = {}
    resources: dict[str, str] = {}
    extend_defaults: bool = True


class FhirTypeRegistry:
    def __init__(
        self,
        native: list[str] | None = None,
        profiled: dict[str, str] | None = None,
        resources: dict[str, str] | None = None,
    ) -> None:
        self.__native = frozenset(native or [])
        self.__profiled = dict(profiled or {})
        self.__resources = dict(resources or {})

    def __str__(self) -> str:
        return (
            f"(native={len(self.__native)}, profiled={len(self.__profiled)}, "
            f"resources={len(self.__resources)})"
        )

    def __repr__(self) -> str:
        return str(self)

    @staticmethod
    def default() -> "FhirTypeRegistry":
        return FhirTypeRegistry(
            native=FHIR_PRIMITIVE_TYPES + FHIR_COMPLEX_TYPES,
            profiled=QUICK_PROFILED_TYPES,
            resources=QUICK_RESOURCE_EQUIVALENTS,
        )

    @staticmethod
    def from_file(file: str | Path) -> "FhirTypeRegistry":
        """Load a registry from a YAML or JSON file.

        Unless ``extend_defaults`` is set to false in the file, its entries
        are added on top of the built-in FHIR and QUICK tables.
        """
        file = Path(file)
        try:
            content = file.read_text(encoding="utf-8")
            if file.suffix.lower() == ".json":
                config = TypeRegistryConfig.model_validate_json(content or "{}")
            else:
                config = TypeRegistryConfig.model_validate(yaml.safe_load(content) or {})

        except (ValidationError, json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
            msg = f"failed to load type registry from {str(file)}"
            logger.error(msg)
            logger.error(e)
            raise InitializationError(msg) from e

        if not config.extend_defaults:
            return FhirTypeRegistry(config.native, config.profiled, config.resources)

        return FhirTypeRegistry(
            native=FHIR_PRIMITIVE_TYPES + FHIR_COMPLEX_TYPES + config.native,
            profiled={**QUICK_PROFILED_TYPES, **config.profiled},
            resources={**QUICK_RESOURCE_EQUIVALENTS, **config.resources},
        )

    def is_native(self, name: str) -> bool:
        return name in self.__native

    def is_profiled(self, name: str) -> bool:
        return name in self.__profiled

    def canonical_resource_for(self, name: str) -> str | None:
        return self.__resources.get(name)

    def canonical_name_for(self, name: str) -> str | None:
        """FHIR type name a profiled QUICK type or class is expressed with."""
        return self.__profiled.get(name) or self.__resources.get(name)
