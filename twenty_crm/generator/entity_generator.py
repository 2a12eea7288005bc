"""Generates typed entity modules."""

import logging

from ..core.config_store import CodegenConfig
from ..core.metadata import EntityDefinition, FieldMetadata, is_updatable
from .naming import attribute_name, pascal_case, python_type, snake_case, value_class_name
from .rendering import render

logger = logging.getLogger(__name__)


class EntityGenerator:
    """
    Renders one DynamicEntity subclass per entity type.

    Every field gets a property named in snake_case; writable fields also
    get a setter. System and auto-managed fields such as createdAt are
    read-only.
    """

    def __init__(self, config: CodegenConfig):
        self.config = config

    def class_name(self, definition: EntityDefinition) -> str:
        return pascal_case(definition.object_name)

    def module_name(self, definition: EntityDefinition) -> str:
        return snake_case(definition.object_name)

    def module_path(self, definition: EntityDefinition) -> str:
        """Dotted import path of the generated module."""
        return f"{self.config.namespace}.entity.{self.module_name(definition)}"

    def generate(self, definition: EntityDefinition) -> str:
        """
        Render the entity module for a definition.

        Returns:
            Python source code
        """
        fields = []
        value_imports = set()

        for field_name, field_meta in definition.fields.items():
            # id is provided by the base class
            if field_name == "id":
                continue

            fields.append({
                "name": field_name,
                "attr": attribute_name(field_name),
                "hint": python_type(field_meta),
                "writable": is_updatable(field_meta),
                "doc": _field_doc(field_meta),
            })

            value_class = value_class_name(field_meta)
            if value_class:
                value_imports.add(value_class)

        logger.debug(f"Rendering entity {definition.object_name} with {len(fields)} fields")

        return render(
            "entity.py.j2",
            class_name=self.class_name(definition),
            object_name=definition.object_name,
            fields=fields,
            value_imports=sorted(value_imports),
        )


def _field_doc(field_meta: FieldMetadata) -> str:
    """One-line docstring from the field label, safe to embed in triple quotes."""
    text = " ".join((field_meta.label or "").split())
    text = text.replace("\\", "").replace('"', "'")
    if field_meta.is_custom and text:
        text = f"{text} (custom field)"
    return text
