from __future__ import annotations

import logging
from typing import Protocol

from ..consts import QUICK_CORE_PROFILE_PATH
from ..model.profile_document import TypeReference

logger = logging.getLogger(__name__)


class TypeClassifier(Protocol):
    def is_native(self, name: str) -> bool: ...

    def is_profiled(self, name: str) -> bool: ...

    def canonical_resource_for(self, name: str) -> str | None: ...

    def canonical_name_for(self, name: str) -> str | None: ...


class TypeResolver:
    """Turns a QUICK type name into a FHIR type reference.

    Native FHIR types are referenced by code only. Profiled types and QUICK
    classes with a FHIR resource equivalent get the FHIR code plus the core
    profile of that code. Anything else is referenced by a profile named
    after the QUICK type and carries no code.
    """

    def __init__(self, classifier: TypeClassifier, base_path: str = QUICK_CORE_PROFILE_PATH) -> None:
        self._classifier = classifier
        self._base_path = base_path

    @property
    def base_path(self) -> str:
        return self._base_path

    def resolve(self, type_name: str) -> TypeReference:
        if self._classifier.is_native(type_name):
            return TypeReference(code=type_name)

        if (
            self._classifier.is_profiled(type_name)
            or self._classifier.canonical_resource_for(type_name) is not None
        ):
            canonical = (
                self._classifier.canonical_name_for(type_name)
                or self._classifier.canonical_resource_for(type_name)
                or type_name
            )
            return TypeReference(code=canonical, profile=self._base_path + canonical)

        logger.debug("type '%s' is not a known FHIR type, referencing its profile", type_name)
        return TypeReference(profile=self._base_path + type_name)

    def resolve_all(self, type_names: list[str]) -> list[TypeReference]:
        return [self.resolve(name) for name in type_names]
