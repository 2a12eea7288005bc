"""
Code generation entry point.

generate_code() turns the workspace metadata for the configured entities
into a Python package laid out as:

    <output>/entity/<name>.py
    <output>/service/<name>_service.py
    <output>/collection/<name>_collection.py
"""

import logging
from pathlib import Path

from ..core.config_store import CodegenConfig
from ..core.metadata import EntityDefinition
from ..core.models import GenerationError
from ..core.registry import EntityRegistry
from .collection_generator import CollectionGenerator
from .entity_generator import EntityGenerator
from .rendering import render
from .service_generator import ServiceGenerator

logger = logging.getLogger(__name__)

PACKAGE_DESCRIPTIONS = {
    "": "Twenty CRM entities",
    "entity": "Typed Twenty CRM entities",
    "service": "Typed Twenty CRM services",
    "collection": "Typed Twenty CRM collections",
}


def generate_code(config: CodegenConfig, registry: EntityRegistry) -> list[Path]:
    """
    Generate entity, service and collection modules.

    All target files are checked before anything is written, so a run that
    would overwrite files without the ``overwrite`` option writes nothing.

    Args:
        config: Validated generator configuration
        registry: Registry providing the entity definitions

    Returns:
        Paths of the modules written, in generation order

    Raises:
        EntityNotFoundError: If a configured entity is not in the workspace
        GenerationError: If a file exists and overwrite is off, or a file
            cannot be written
        ConfigError: If the output directory cannot be created
        APIError: If the metadata request fails
    """
    definitions = [registry.require_definition(name) for name in config.entities]

    entity_generator = EntityGenerator(config)
    collection_generator = CollectionGenerator(config, entity_generator)
    service_generator = ServiceGenerator(config, entity_generator, collection_generator)

    output_dir = config.ensure_output_directory()

    planned: list[tuple[Path, str]] = []
    for definition in definitions:
        planned.extend(_plan_entity(
            output_dir, config, definition,
            entity_generator, service_generator, collection_generator,
        ))

    if not config.has_option("overwrite"):
        existing = [path for path, _ in planned if path.exists()]
        if existing:
            raise GenerationError(
                f"File already exists (use --overwrite to replace): {existing[0]}"
            )

    subpackages = {""} | {path.parent.name for path, _ in planned}
    for subpackage in sorted(subpackages):
        _write_package_init(output_dir / subpackage if subpackage else output_dir, subpackage)

    written = []
    for path, source in planned:
        _write_file(path, source)
        written.append(path)
        logger.info(f"Generated {path}")

    logger.info(f"Generated {len(written)} files for {len(definitions)} entities")
    return written


def _plan_entity(
    output_dir: Path,
    config: CodegenConfig,
    definition: EntityDefinition,
    entity_generator: EntityGenerator,
    service_generator: ServiceGenerator,
    collection_generator: CollectionGenerator,
) -> list[tuple[Path, str]]:
    planned = [(
        output_dir / "entity" / f"{entity_generator.module_name(definition)}.py",
        entity_generator.generate(definition),
    )]

    if config.option("generate_services", True):
        planned.append((
            output_dir / "service" / f"{service_generator.module_name(definition)}.py",
            service_generator.generate(definition),
        ))

    if config.option("generate_collections", True):
        planned.append((
            output_dir / "collection" / f"{collection_generator.module_name(definition)}.py",
            collection_generator.generate(definition),
        ))

    return planned


def _write_package_init(directory: Path, subpackage: str) -> None:
    """Create the package marker unless the directory already has one."""
    init_path = directory / "__init__.py"
    if init_path.exists():
        return
    _write_file(init_path, render(
        "package_init.py.j2",
        description=PACKAGE_DESCRIPTIONS.get(subpackage, "Twenty CRM code"),
    ))


def _write_file(path: Path, source: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
    except OSError as e:
        raise GenerationError(f"Failed to write file {path}: {e}") from e
