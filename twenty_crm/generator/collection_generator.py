"""Generates typed collection modules."""

from ..core.config_store import CodegenConfig
from ..core.metadata import EntityDefinition
from .entity_generator import EntityGenerator
from .naming import pluralize, snake_case
from .rendering import render


class CollectionGenerator:
    """Renders a typed collection class per entity type."""

    def __init__(self, config: CodegenConfig, entity_generator: EntityGenerator | None = None):
        self.config = config
        self.entity_generator = entity_generator or EntityGenerator(config)

    def class_name(self, definition: EntityDefinition) -> str:
        return f"{self.entity_generator.class_name(definition)}Collection"

    def module_name(self, definition: EntityDefinition) -> str:
        return f"{self.entity_generator.module_name(definition)}_collection"

    def module_path(self, definition: EntityDefinition) -> str:
        return f"{self.config.namespace}.collection.{self.module_name(definition)}"

    def generate(self, definition: EntityDefinition) -> str:
        return render(
            "collection.py.j2",
            class_name=self.entity_generator.class_name(definition),
            collection_class=self.class_name(definition),
            entity_module=self.entity_generator.module_path(definition),
            plural_accessor=pluralize(snake_case(definition.object_name)),
        )
