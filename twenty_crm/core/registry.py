"""Entity registry built from workspace metadata."""

import logging
from typing import Any

from .metadata import EntityDefinition, RelationMetadata, field_from_dict
from .models import EntityNotFoundError

logger = logging.getLogger(__name__)


class EntityRegistry:
    """
    Definitions of every object type in a Twenty workspace.

    Discovery runs on first access and is cached until clear_cache().
    Errors from the metadata request propagate to the caller.

    Args:
        metadata_service: MetadataService providing the object listing
    """

    def __init__(self, metadata_service):
        self.metadata_service = metadata_service
        self._definitions: dict[str, EntityDefinition] = {}
        self._discovered = False

    def get_definition(self, object_name: str) -> EntityDefinition | None:
        """
        Retrieve the definition of an entity type.

        Args:
            object_name: Singular object name, e.g. "person"

        Returns:
            The EntityDefinition, or None if the workspace has no such object
        """
        self._ensure_discovered()
        return self._definitions.get(object_name)

    def require_definition(self, object_name: str) -> EntityDefinition:
        """
        Like get_definition(), but raise for unknown objects.

        Raises:
            EntityNotFoundError: If the workspace has no such object
        """
        definition = self.get_definition(object_name)
        if definition is None:
            raise EntityNotFoundError(
                f"Entity '{object_name}' not found in workspace metadata. "
                f"Available: {', '.join(self.entity_names) or 'none'}"
            )
        return definition

    def has_entity(self, object_name: str) -> bool:
        self._ensure_discovered()
        return object_name in self._definitions

    @property
    def entity_names(self) -> list[str]:
        """All singular object names, sorted."""
        self._ensure_discovered()
        return sorted(self._definitions)

    @property
    def definitions(self) -> dict[str, EntityDefinition]:
        self._ensure_discovered()
        return dict(self._definitions)

    def clear_cache(self) -> None:
        """Forget all definitions; the next access rediscovers them."""
        self._definitions = {}
        self._discovered = False
        self.metadata_service.clear_cache()
        logger.debug("Registry reset")

    def _ensure_discovered(self) -> None:
        if not self._discovered:
            self._discover()
            self._discovered = True

    def _discover(self) -> None:
        logger.info("Discovering entities from workspace metadata")

        for object_data in self.metadata_service.list_objects():
            definition = build_entity_definition(object_data)
            if definition is not None:
                self._definitions[definition.object_name] = definition

        logger.info(f"Discovered {len(self._definitions)} entities")


def build_entity_definition(object_data: dict[str, Any]) -> EntityDefinition | None:
    """
    Build an EntityDefinition from one object of the metadata listing.

    Args:
        object_data: Object dictionary from ``metadata/objects``

    Returns:
        The definition, or None if the object has no singular or plural name
    """
    object_name = object_data.get("nameSingular")
    object_name_plural = object_data.get("namePlural")

    if not object_name or not object_name_plural:
        logger.warning(f"Skipping object without names: {object_data.get('id')}")
        return None

    fields = {}
    relations: dict[str, RelationMetadata] = {}

    for field_data in object_data.get("fields") or []:
        field_name = field_data.get("name")
        if not field_name:
            continue

        field_data = {**field_data, "objectMetadataId": object_data.get("id") or ""}
        fields[field_name] = field_from_dict(field_data)

        if fields[field_name].is_relation:
            relation = RelationMetadata.from_field_dict(field_data)
            if relation is not None:
                relations[field_name] = relation

    standard_fields = [name for name, f in fields.items() if not f.is_custom]

    return EntityDefinition(
        object_name=object_name,
        object_name_plural=object_name_plural,
        api_endpoint=f"/{object_name_plural}",
        fields=fields,
        standard_fields=standard_fields,
        relations=relations,
    )
