"""
Generic CRUD service for any Twenty object type.

One GenericEntityService serves one EntityDefinition. Generated
per-entity services wrap it with typed signatures.
"""

import logging
from typing import Any, Protocol

from ..client.http_client import TwentyHttpClient
from ..core.metadata import EntityDefinition, filter_updatable_fields
from ..core.models import APIError
from ..entities.collection import DynamicEntityCollection
from ..entities.entity import BaseEntity, DynamicEntity
from ..query.filters import SearchOptions

logger = logging.getLogger(__name__)

# Responses for these statuses mean "no such record" on get and delete
NOT_FOUND_STATUSES = (400, 404)


class Filter(Protocol):
    def build_filter_string(self) -> str | None: ...

    def has_filters(self) -> bool: ...


class GenericEntityService:
    """
    Find, get, create, update, delete and batch-upsert records of one type.

    Args:
        http_client: Authenticated client for the workspace
        definition: Definition of the entity type
        relation_loader: Optional RelationLoader used when SearchOptions
            asks for relations
    """

    def __init__(
        self,
        http_client: TwentyHttpClient,
        definition: EntityDefinition,
        relation_loader: Any = None,
    ):
        self.http_client = http_client
        self.definition = definition
        self.relation_loader = relation_loader

    def __repr__(self) -> str:
        return f"GenericEntityService({self.definition.object_name!r})"

    def new_entity(self, data: dict[str, Any] | None = None) -> DynamicEntity:
        """Create an unsaved entity of this type."""
        return DynamicEntity(self.definition, data)

    def find(
        self,
        filter: Filter | None = None,
        options: SearchOptions | None = None,
    ) -> DynamicEntityCollection:
        """
        Search for records.

        Args:
            filter: FilterBuilder or CustomFilter; no filter lists all records
            options: Paging, ordering and relations to load

        Returns:
            Collection of matching entities
        """
        options = options or SearchOptions()
        params = options.to_query_params()

        if filter is not None and filter.has_filters():
            params["filter"] = filter.build_filter_string()

        logger.debug(f"Finding {self.definition.object_name_plural} with {params}")

        response = self.http_client.request("GET", self.definition.api_endpoint, params=params)
        collection = self._parse_collection(response)

        logger.debug(f"Found {len(collection)} {self.definition.object_name_plural}")

        if options.with_relations and self.relation_loader is not None:
            self.relation_loader.eager_load(
                collection.entities, options.with_relations, self.definition
            )

        return collection

    def get_by_id(self, entity_id: str) -> DynamicEntity | None:
        """
        Fetch one record.

        Returns:
            The entity, or None if the API reports it missing (404 or 400)

        Raises:
            APIError: For any other failure
        """
        logger.debug(f"Getting {self.definition.object_name} {entity_id}")

        try:
            response = self.http_client.request("GET", self._record_path(entity_id))
        except APIError as e:
            if e.status_code in NOT_FOUND_STATUSES:
                logger.debug(f"{self.definition.object_name} {entity_id} not found")
                return None
            raise

        return self._parse_entity(response)

    def create(self, entity: BaseEntity | dict[str, Any]) -> DynamicEntity:
        """
        Create a record.

        Args:
            entity: Entity (or API-format dict) to create

        Returns:
            The created entity as returned by the API
        """
        data = self._to_api_data(entity)
        logger.debug(f"Creating {self.definition.object_name}")

        response = self.http_client.request("POST", self.definition.api_endpoint, json_body=data)
        created = self._parse_entity(response)

        logger.info(f"Created {self.definition.object_name} {created.id}")
        return created

    def update(self, entity: BaseEntity) -> DynamicEntity:
        """
        Update a record.

        Only writable fields are sent; system and auto-managed fields such
        as createdAt are left out.

        Raises:
            ValueError: If the entity has no id
        """
        entity_id = entity.id
        if not entity_id:
            logger.error(f"Cannot update {self.definition.object_name} without an id")
            raise ValueError("Entity must have an ID to be updated")

        data = filter_updatable_fields(entity.to_dict(), self.definition)
        logger.debug(f"Updating {self.definition.object_name} {entity_id}: {sorted(data)}")

        response = self.http_client.request("PATCH", self._record_path(entity_id), json_body=data)
        return self._parse_entity(response)

    def delete(self, entity_id: str) -> bool:
        """
        Delete a record.

        Returns:
            True if deleted, False if the API reports it missing
        """
        logger.debug(f"Deleting {self.definition.object_name} {entity_id}")

        try:
            self.http_client.request("DELETE", self._record_path(entity_id))
        except APIError as e:
            if e.status_code in NOT_FOUND_STATUSES:
                logger.debug(f"{self.definition.object_name} {entity_id} not found for deletion")
                return False
            raise

        logger.info(f"Deleted {self.definition.object_name} {entity_id}")
        return True

    def batch_upsert(self, entities: list[BaseEntity | dict[str, Any]]) -> DynamicEntityCollection:
        """
        Create or update several records in one request.

        Returns:
            The upserted entities as returned by the API
        """
        data = [self._to_api_data(entity) for entity in entities]
        logger.debug(f"Batch upserting {len(data)} {self.definition.object_name_plural}")

        response = self.http_client.request(
            "POST",
            f"/batch{self.definition.api_endpoint}",
            json_body={"data": data},
        )
        collection = self._parse_collection(response)

        logger.info(f"Batch upserted {len(collection)} {self.definition.object_name_plural}")
        return collection

    def _record_path(self, entity_id: str) -> str:
        return f"{self.definition.api_endpoint}/{entity_id}"

    def _to_api_data(self, entity: BaseEntity | dict[str, Any]) -> dict[str, Any]:
        if isinstance(entity, BaseEntity):
            return entity.to_dict()
        return DynamicEntity(self.definition, entity).to_dict()

    def _parse_collection(self, response: Any) -> DynamicEntityCollection:
        if not isinstance(response, dict):
            raise APIError(
                f"Unable to parse {self.definition.object_name_plural} from API response"
            )

        data = response.get("data")
        if not isinstance(data, dict):
            return DynamicEntityCollection(self.definition)

        data = data.get(self.definition.object_name_plural)
        if not isinstance(data, list):
            return DynamicEntityCollection(self.definition)
        return DynamicEntityCollection.from_list(
            self.definition, [item for item in data if isinstance(item, dict)]
        )

    def _parse_entity(self, response: Any) -> DynamicEntity:
        """
        Read an entity from a single-record response.

        GET returns it under the singular name, POST under createPerson,
        PATCH under updatePerson; older servers return the record as data.
        """
        data = response.get("data") if isinstance(response, dict) else None
        if not isinstance(data, dict):
            raise APIError(
                f"Unable to parse {self.definition.object_name} from API response"
            )

        name = self.definition.object_name
        capitalized = name[:1].upper() + name[1:]

        for key in (name, f"create{capitalized}", f"update{capitalized}"):
            if isinstance(data.get(key), dict):
                return DynamicEntity(self.definition, data[key])

        return DynamicEntity(self.definition, data)
