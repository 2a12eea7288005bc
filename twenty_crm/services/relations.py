"""Loading related records."""

import logging
from typing import Any

from ..client.http_client import TwentyHttpClient
from ..core.metadata import EntityDefinition, RelationMetadata
from ..entities.collection import DynamicEntityCollection
from ..entities.entity import BaseEntity
from ..query.filters import FilterBuilder, SearchOptions
from .generic import GenericEntityService

logger = logging.getLogger(__name__)


class RelationLoader:
    """
    Loads the records on the other side of a relation.

    MANY_TO_ONE and ONE_TO_ONE relations resolve to a single entity looked
    up by id. ONE_TO_MANY and MANY_TO_MANY relations resolve to a
    collection found by filtering the target on its inverse foreign key.

    Args:
        http_client: Authenticated client for the workspace
        registry: EntityRegistry used to resolve target entity types
        limit: Maximum number of records loaded for a to-many relation
    """

    def __init__(self, http_client: TwentyHttpClient, registry, limit: int = 100):
        self.http_client = http_client
        self.registry = registry
        self.limit = limit

    def load_relation(self, entity: BaseEntity, relation: RelationMetadata) -> Any:
        """
        Load one relation of an entity.

        Returns:
            DynamicEntity or None for to-one relations, a
            DynamicEntityCollection for to-many relations

        Raises:
            EntityNotFoundError: If the target entity type is unknown
        """
        target_definition = self.registry.require_definition(relation.target_object_name)
        target_service = GenericEntityService(self.http_client, target_definition)

        if relation.type.returns_single_entity:
            return self._load_single(entity, relation, target_service)
        return self._load_many(entity, relation, target_service)

    def _load_single(
        self,
        entity: BaseEntity,
        relation: RelationMetadata,
        target_service: GenericEntityService,
    ):
        # With depth > 0 the API embeds the related record; otherwise only its id is present
        value = entity.get(relation.name)
        if isinstance(value, BaseEntity):
            target_id = value.id
        elif isinstance(value, dict):
            target_id = value.get("id")
        else:
            target_id = value

        if not target_id:
            return None

        return target_service.get_by_id(target_id)

    def _load_many(
        self,
        entity: BaseEntity,
        relation: RelationMetadata,
        target_service: GenericEntityService,
    ):
        if not entity.id or not relation.target_field_name:
            logger.debug(f"Cannot load '{relation.name}': missing id or inverse field")
            return DynamicEntityCollection(target_service.definition)

        filter = FilterBuilder().equals(f"{relation.target_field_name}Id", entity.id)
        return target_service.find(filter, SearchOptions(limit=self.limit))

    def eager_load(
        self,
        entities: list[BaseEntity],
        relation_names: list[str],
        definition: EntityDefinition,
    ) -> None:
        """
        Load relations for several entities and store them with set_relation().

        Relation names the definition does not know are skipped.
        """
        for relation_name in relation_names:
            relation = definition.get_relation(relation_name)
            if relation is None:
                logger.warning(f"Unknown relation '{relation_name}' on {definition.object_name}")
                continue

            for entity in entities:
                entity.set_relation(relation_name, self.load_relation(entity, relation))
