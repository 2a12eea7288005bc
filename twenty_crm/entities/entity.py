"""
Entities: records of a Twenty CRM object.

An entity keeps the data it was built from in API form and converts
nested fields to value objects on access. Generated entity classes
subclass DynamicEntity and add typed properties on top.
"""

import logging
from typing import Any, Iterator

from ..core.metadata import EntityDefinition, FieldMetadata
from .handlers import FieldHandlerRegistry, default_handler_registry

logger = logging.getLogger(__name__)


class BaseEntity:
    """
    Field storage shared by all entities.

    Subclasses provide metadata lookup and field-name mapping; BaseEntity
    handles access, nested-field conversion and relation storage.

    Entities support the mapping protocol:

        >>> person["jobTitle"] = "CTO"
        >>> "jobTitle" in person
        True
    """

    handler_registry: FieldHandlerRegistry = default_handler_registry

    def __init__(self, data: dict[str, Any] | None = None):
        self._data: dict[str, Any] = dict(data or {})
        self._relations: dict[str, Any] = {}

    # Metadata hooks

    def get_field_metadata(self, field_name: str) -> FieldMetadata | None:
        return None

    def map_field_to_api(self, field_name: str) -> str:
        return field_name

    def map_api_to_field(self, api_field_name: str) -> str:
        return api_field_name

    # Field access

    def get(self, field_name: str, default: Any = None) -> Any:
        """
        Get a field value.

        Looks up the entity field name first, then its API name (``company``
        falls back to ``companyId``). Nested fields with a registered handler
        are returned as value objects.

        Args:
            field_name: Entity or API field name
            default: Returned when the field is missing or null

        Returns:
            The field value
        """
        if field_name in self._data:
            value = self._data[field_name]
        else:
            value = self._data.get(self.map_field_to_api(field_name))

        if value is None:
            return default

        field_meta = self.get_field_metadata(field_name)
        if field_meta is None:
            return value

        if isinstance(value, dict) and self.handler_registry.has_handler(field_meta.type):
            return self.handler_registry.from_api(field_meta.type, value)

        return value

    def set(self, field_name: str, value: Any) -> None:
        """Set a field value, dropping the API-name twin (``companyId`` for ``company``)."""
        api_field_name = self.map_field_to_api(field_name)
        if api_field_name != field_name:
            self._data.pop(api_field_name, None)
        self._data[field_name] = value

    def has(self, field_name: str) -> bool:
        return field_name in self._data

    def unset(self, field_name: str) -> None:
        self._data.pop(field_name, None)

    @property
    def field_names(self) -> list[str]:
        return list(self._data)

    @property
    def raw(self) -> dict[str, Any]:
        """The stored data without any conversion."""
        return dict(self._data)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the entity to API format.

        Field names are mapped to their API names, nested value objects are
        converted by their handlers, and relation values holding a nested
        object are reduced to its id.

        Returns:
            Dictionary ready to send to the API
        """
        result: dict[str, Any] = {}

        for key, value in self._data.items():
            field_name = self.map_api_to_field(key)
            field_meta = self.get_field_metadata(field_name)

            if field_meta is None:
                result[key] = value
                continue

            api_field_name = self.map_field_to_api(field_name)

            if field_meta.is_relation:
                result[api_field_name] = _relation_id(value)
            elif self.handler_registry.has_handler(field_meta.type):
                result[api_field_name] = self.handler_registry.to_api(field_meta.type, value)
            else:
                result[api_field_name] = value

        return result

    @property
    def id(self) -> str | None:
        return self.get("id")

    @id.setter
    def id(self, value: str | None) -> None:
        if value is None:
            self.unset("id")
        else:
            self.set("id", value)

    # Relations

    def get_relation(self, relation_name: str) -> Any:
        """Return a loaded relation (entity or collection), or None."""
        return self._relations.get(relation_name)

    def has_loaded_relation(self, relation_name: str) -> bool:
        return relation_name in self._relations

    def set_relation(self, relation_name: str, value: Any) -> None:
        self._relations[relation_name] = value

    @property
    def loaded_relations(self) -> dict[str, Any]:
        return dict(self._relations)

    # Mapping protocol

    def __getitem__(self, field_name: str) -> Any:
        return self.get(field_name)

    def __setitem__(self, field_name: str, value: Any) -> None:
        self.set(field_name, value)

    def __delitem__(self, field_name: str) -> None:
        self.unset(field_name)

    def __contains__(self, field_name: object) -> bool:
        return field_name in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._data))

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id!r})"


def _relation_id(value: Any) -> Any:
    """Reduce a nested relation object to its id; plain ids pass through."""
    if isinstance(value, BaseEntity):
        return value.id
    if isinstance(value, dict):
        return value.get("id")
    return value


class DynamicEntity(BaseEntity):
    """
    An entity whose fields are described by an EntityDefinition.

    Works for any object type in the workspace, including custom objects,
    without generated code.
    """

    def __init__(self, definition: EntityDefinition, data: dict[str, Any] | None = None):
        super().__init__(data)
        self.definition = definition

    @classmethod
    def from_dict(cls, data: dict[str, Any], definition: EntityDefinition) -> "DynamicEntity":
        return cls(definition, data)

    def get_field_metadata(self, field_name: str) -> FieldMetadata | None:
        return self.definition.get_field(field_name)

    def map_field_to_api(self, field_name: str) -> str:
        return self.definition.map_field_to_api(field_name)

    def map_api_to_field(self, api_field_name: str) -> str:
        return self.definition.map_api_to_field(api_field_name)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.definition.object_name!r}, id={self.id!r})"
