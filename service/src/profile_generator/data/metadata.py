import json
import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from ..errors import InitializationError

logger = logging.getLogger(__name__)


class ProfileMetadataConfig(BaseModel):
    # YAML reads unquoted versions such as 0.4 as numbers
    model_config = ConfigDict(coerce_numbers_to_str=True)

    shared: dict[str, str] = {}
    profiles: dict[str, dict[str, str]] = {}


class ProfileMetadata:
    """Shared and per-profile settings used when generating profile headers."""

    def __init__(self, config: ProfileMetadataConfig | None = None) -> None:
        self.__config = config if config is not None else ProfileMetadataConfig()
        self.__file: Path | None = None

    def __str__(self) -> str:
        return f"(file={self.__file}, profiles={list(self.__config.profiles.keys())})"

    def __repr__(self) -> str:
        return str(self)

    @staticmethod
    def from_file(file: str | Path) -> "ProfileMetadata":
        file = Path(file)
        try:
            content = file.read_text(encoding="utf-8")
            if file.suffix.lower() == ".json":
                config = ProfileMetadataConfig.model_validate_json(content or "{}")
            else:
                data = yaml.safe_load(content)
                # an empty file loads as None
                if not isinstance(data, dict):
                    data = {}
                config = ProfileMetadataConfig.model_validate(data)

        except (ValidationError, json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
            msg = f"failed to load profile metadata from {str(file)}"
            logger.error(msg)
            logger.error(e)
            raise InitializationError(msg) from e

        metadata = ProfileMetadata(config)
        metadata.__file = file
        return metadata

    @property
    def profiles(self) -> list[str]:
        return list(self.__config.profiles.keys())

    def shared_property(self, key: str) -> str | None:
        return self.__config.shared.get(key)

    def property_for_target(self, target_name: str, key: str) -> str | None:
        return self.__config.profiles.get(target_name, {}).get(key)
