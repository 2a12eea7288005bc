"""Collections of dynamic entities."""

from typing import Any, Iterator

from ..core.metadata import EntityDefinition
from .entity import DynamicEntity


class DynamicEntityCollection:
    """An ordered list of entities of one type, as returned by a search."""

    def __init__(self, definition: EntityDefinition, entities: list[DynamicEntity] | None = None):
        self.definition = definition
        self.entities: list[DynamicEntity] = list(entities or [])

    @classmethod
    def from_list(cls, definition: EntityDefinition, data: list[dict[str, Any]]) -> "DynamicEntityCollection":
        """Build a collection from a list of API records."""
        return cls(definition, [DynamicEntity(definition, item) for item in data])

    def __len__(self) -> int:
        return len(self.entities)

    def __iter__(self) -> Iterator[DynamicEntity]:
        return iter(self.entities)

    def __getitem__(self, index: int) -> DynamicEntity:
        return self.entities[index]

    def __repr__(self) -> str:
        return f"DynamicEntityCollection({self.definition.object_name!r}, size={len(self)})"

    def is_empty(self) -> bool:
        return not self.entities

    def first(self) -> DynamicEntity | None:
        return self.entities[0] if self.entities else None

    def add(self, entity: DynamicEntity) -> None:
        self.entities.append(entity)

    def to_list(self) -> list[dict[str, Any]]:
        """All entities in API format."""
        return [entity.to_dict() for entity in self.entities]
