import json
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..errors import InitializationError, MappingNotFound
from ..model.mapping import MappingFile, PropertyMapping, SourceClass

logger = logging.getLogger(__name__)


class YamlMappingSource:
    """Mapping source backed by a single YAML or JSON mapping file.

    The file describes one annotated QUICK class, the FHIR resource it is
    mapped onto and its property mappings in declaration order.
    """

    def __init__(self, data: MappingFile) -> None:
        self.__data = data
        self.__file: Path | None = None

    def __str__(self) -> str:
        return (
            f"(source={self.__data.source_class.name}, target={self.__data.target_class}, "
            f"mappings={len(self.__data.mappings)})"
        )

    def __repr__(self) -> str:
        return str(self)

    @staticmethod
    def from_file(file: str | Path) -> "YamlMappingSource":
        file = Path(file)
        if not file.exists():
            raise FileNotFoundError(
                f"The file {file} does not exist. Please check the file path and try again."
            )

        try:
            content = file.read_text(encoding="utf-8")
            if file.suffix.lower() == ".json":
                data = MappingFile.model_validate_json(content)
            else:
                data = MappingFile.model_validate(yaml.safe_load(content))

        except ValidationError as e:
            msg = f"failed to load mappings from {str(file)}"
            logger.error(msg)
            logger.error(e.errors())
            raise InitializationError(msg) from e

        except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
            msg = f"failed to parse mapping file {str(file)}"
            logger.error(msg)
            raise InitializationError(msg) from e

        source = YamlMappingSource(data)
        source.__file = file
        logger.debug("loaded %s from '%s'", source, file)
        return source

    @property
    def source_class(self) -> SourceClass:
        return self.__data.source_class

    @property
    def target_class(self) -> str:
        return self.__data.target_class

    def load_mappings(
        self, source_class: SourceClass | str, target_class: str
    ) -> list[PropertyMapping]:
        source_name = source_class if isinstance(source_class, str) else source_class.name

        if source_name != self.__data.source_class.name or target_class != self.__data.target_class:
            raise MappingNotFound(
                f"no mappings from '{source_name}' to '{target_class}' in {self.__file or 'mapping data'}"
            )

        return list(self.__data.mappings)
