import logging
from datetime import datetime
from pathlib import Path
from typing import Callable

from .builder.profile_assembler import ProfileAssembler, utc_now
from .data.mapping_source import YamlMappingSource
from .data.metadata import ProfileMetadata
from .data.type_registry import FhirTypeRegistry
from .errors import ProfileGeneratorError
from .model.error import Error as ErrorModel
from .model.profile_document import ProfileDocument
from .serializers.profile_xml import serialize_profile
from .serializers.structure_definition import serialize_structure_definitions

logger = logging.getLogger(__name__)


def serialize_profile_json(document: ProfileDocument) -> str:
    return document.model_dump_json(indent=2, exclude_none=True)


SERIALIZERS: dict[str, Callable[[ProfileDocument], str]] = {
    "xml": serialize_profile,
    "json": serialize_profile_json,
    "r4b": serialize_structure_definitions,
}


def generate_profile(
    mappings_file: str | Path,
    metadata_file: str | Path,
    types_file: str | Path | None = None,
    *,
    clock: Callable[[], datetime] = utc_now,
) -> ProfileDocument:
    mapping_source = YamlMappingSource.from_file(mappings_file)
    metadata = ProfileMetadata.from_file(metadata_file)
    registry = (
        FhirTypeRegistry.from_file(types_file) if types_file is not None else FhirTypeRegistry.default()
    )

    assembler = ProfileAssembler(registry, clock=clock)
    return assembler.assemble(
        mapping_source.source_class,
        mapping_source.target_class,
        mapping_source,
        metadata,
    )


def render(document: ProfileDocument, output_format: str = "xml") -> str:
    serializer = SERIALIZERS.get(output_format)
    if serializer is None:
        raise NotImplementedError(f"output format '{output_format}' is not supported")
    return serializer(document)


def output(
    mappings_file: str | Path,
    metadata_file: str | Path,
    output_format: str = "xml",
    output_file: str | Path | None = None,
    types_file: str | Path | None = None,
) -> str | ErrorModel:
    """Generate a profile and write it to ``output_file``.

    Returns the rendered profile, or an error model if generation failed.
    """
    try:
        document = generate_profile(mappings_file, metadata_file, types_file)
        content = render(document, output_format)
        if output_file is not None:
            output_file = Path(output_file)
            output_file.parent.mkdir(parents=True, exist_ok=True)
            output_file.write_text(content, encoding="utf-8")

    except (ProfileGeneratorError, OSError, NotImplementedError) as e:
        logger.error("profile generation failed: %s", e)
        return ErrorModel.from_except(e)

    if output_file is not None:
        logger.info("wrote profile '%s' to '%s'", document.name, output_file)

    return content
