"""Generates typed service modules."""

from ..core.config_store import CodegenConfig
from ..core.metadata import EntityDefinition
from .collection_generator import CollectionGenerator
from .entity_generator import EntityGenerator
from .rendering import render


class ServiceGenerator:
    """
    Renders a typed wrapper around GenericEntityService per entity type.

    When collections are generated too, list results are returned as the
    typed collection; otherwise as a plain list of entities.
    """

    def __init__(
        self,
        config: CodegenConfig,
        entity_generator: EntityGenerator | None = None,
        collection_generator: CollectionGenerator | None = None,
    ):
        self.config = config
        self.entity_generator = entity_generator or EntityGenerator(config)
        self.collection_generator = collection_generator or CollectionGenerator(
            config, self.entity_generator
        )

    def class_name(self, definition: EntityDefinition) -> str:
        return f"{self.entity_generator.class_name(definition)}Service"

    def module_name(self, definition: EntityDefinition) -> str:
        return f"{self.entity_generator.module_name(definition)}_service"

    def generate(self, definition: EntityDefinition) -> str:
        class_name = self.entity_generator.class_name(definition)
        with_collections = self.config.option("generate_collections", True)

        if with_collections:
            collection_class = self.collection_generator.class_name(definition)
            collection_module = self.collection_generator.module_path(definition)
            result_type = collection_class
        else:
            collection_class = None
            collection_module = None
            result_type = f"list[{class_name}]"

        return render(
            "service.py.j2",
            class_name=class_name,
            object_name=definition.object_name,
            entity_module=self.entity_generator.module_path(definition),
            collection_class=collection_class,
            collection_module=collection_module,
            result_type=result_type,
        )
