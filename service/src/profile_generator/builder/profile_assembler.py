"""Assembly of a FHIR profile document from an annotated QUICK class.

The source class is mapped onto one profile structure whose type is the
target FHIR resource. The differential of that structure holds, in order:

1. the root element of the structure,
2. the modifier extension constraints,
3. one element per mapped QUICK attribute, in mapping order.

Attributes mapped as extensions additionally contribute a local extension
definition, referenced from their element through ``#<name>``.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Protocol

from ..consts import (
    CONSTRAIN_MODIFYING_EXTENSIONS,
    HL7_CONTACT,
    MAP_IDENTITY,
    MODIFIER_EXTENSION,
    PROFILE_BASE_VERSION,
    PROFILE_CONTACT,
    PROFILE_DESCRIPTION,
    PROFILE_FHIR_VERSION,
    PROFILE_PUBLISHER,
    PROFILE_REQUIREMENTS,
    PROFILE_ROOT_PATH,
    PROFILE_STATUS,
    ROOT_TYPE_CODE,
)
from ..errors import MappingContractViolation
from ..model.mapping import PropertyMapping, SourceClass
from ..model.profile_document import (
    Contact,
    ElementDefinition,
    ExtensionDefinition,
    ProfileDocument,
    ProfileMapping,
    StructureComponent,
    TypeReference,
)
from .annotations import quick_mapping
from .element_builder import ElementBuilder
from .type_resolver import TypeClassifier, TypeResolver

logger = logging.getLogger(__name__)


class MappingSource(Protocol):
    def load_mappings(
        self, source_class: SourceClass, target_class: str
    ) -> list[PropertyMapping]: ...


class ConfigurationSource(Protocol):
    def shared_property(self, key: str) -> str | None: ...

    def property_for_target(self, target_name: str, key: str) -> str | None: ...


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def required_shared_property(config_source: ConfigurationSource, key: str) -> str:
    value = config_source.shared_property(key)
    if value is None or not value.strip():
        raise MappingContractViolation(f"required profile setting '{key}' is not configured")
    return value


def split_constrained_items(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class ProfileAssembler:
    def __init__(
        self,
        classifier: TypeClassifier,
        *,
        clock: Callable[[], datetime] = utc_now,
        element_builder: ElementBuilder | None = None,
    ) -> None:
        self._clock = clock
        self._element_builder = element_builder or ElementBuilder(TypeResolver(classifier))

    def assemble(
        self,
        source_class: SourceClass,
        target_class: str,
        mapping_source: MappingSource,
        config_source: ConfigurationSource,
    ) -> ProfileDocument:
        mappings = mapping_source.load_mappings(source_class, target_class)
        logger.info(
            "generating profile for '%s' -> '%s' from %d mapping(s)",
            source_class.name,
            target_class,
            len(mappings),
        )

        differential = [self.build_root_element(source_class)]
        differential.extend(self.build_modifier_extension_constraints(source_class, config_source))

        extensions: list[ExtensionDefinition] = []
        for mapping in mappings:
            if not mapping.mapped:
                logger.debug("skipping unmapped attribute '%s'", mapping.source_path)
                continue

            built = self._element_builder.build(mapping)
            differential.append(built.element)
            if built.extension is not None:
                extensions.append(built.extension)

        structure = StructureComponent(
            type=source_class.structure.type,
            name=source_class.structure.name,
            publish=source_class.structure.publish,
            purpose=source_class.structure.purpose,
            differential=differential,
            extension_definitions=extensions,
        )
        return self.build_document(source_class, target_class, config_source, [structure])

    # ------------------------------------------------------------------
    # Header
    # ------------------------------------------------------------------
    def build_document(
        self,
        source_class: SourceClass,
        target_class: str,
        config_source: ConfigurationSource,
        structures: list[StructureComponent],
    ) -> ProfileDocument:
        structure_name = source_class.structure.name
        root_path = required_shared_property(config_source, PROFILE_ROOT_PATH)
        contact = required_shared_property(config_source, PROFILE_CONTACT)

        return ProfileDocument(
            url=f"{root_path}{target_class}-{structure_name}",
            version=config_source.shared_property(PROFILE_BASE_VERSION),
            name=structure_name,
            publisher=config_source.shared_property(PROFILE_PUBLISHER),
            telecom=[
                Contact(system="url", value=contact),
                Contact(system="url", value=HL7_CONTACT),
            ],
            description=config_source.property_for_target(structure_name, PROFILE_DESCRIPTION),
            status=PROFILE_STATUS,
            requirements=config_source.property_for_target(structure_name, PROFILE_REQUIREMENTS),
            date=self._clock(),
            fhir_version=config_source.shared_property(PROFILE_FHIR_VERSION),
            mapping=ProfileMapping(identity=MAP_IDENTITY, name=source_class.name),
            structures=structures,
        )

    # ------------------------------------------------------------------
    # Differential
    # ------------------------------------------------------------------
    def build_root_element(self, source_class: SourceClass) -> ElementDefinition:
        structure = source_class.structure
        return ElementDefinition(
            path=structure.type,
            name=structure.name,
            formal=source_class.description,
            min=1,
            max="1",
            types=[TypeReference(code=ROOT_TYPE_CODE)],
            mapping=quick_mapping(structure.name),
        )

    def build_modifier_extension_constraints(
        self, source_class: SourceClass, config_source: ConfigurationSource
    ) -> list[ElementDefinition]:
        """Constrain out modifier extensions on the structure and the listed items."""
        structure = source_class.structure
        constrained_items = [structure.type]
        listed = config_source.property_for_target(structure.name, CONSTRAIN_MODIFYING_EXTENSIONS)
        for item in split_constrained_items(listed):
            if item in constrained_items:
                logger.warning("'%s' is constrained more than once, ignoring duplicate", item)
                continue
            constrained_items.append(item)
        return [constrain_modifier_extension(item) for item in constrained_items]


def constrain_modifier_extension(constrained_item: str) -> ElementDefinition:
    return ElementDefinition(
        path=f"{constrained_item}.{MODIFIER_EXTENSION}",
        name=MODIFIER_EXTENSION,
        min=0,
        max="0",
    )
