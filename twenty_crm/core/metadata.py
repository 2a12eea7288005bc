"""
Schema metadata for Twenty CRM objects.

These classes describe the shape of an object type (its fields, their
types and nullability, and the relations to other objects) as reported
by the ``metadata/objects`` endpoint.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from .models import FieldType, RelationType

logger = logging.getLogger(__name__)

# Fields the API sets on its own. They may be reported with isSystem=false
# but are never sent in updates.
AUTO_MANAGED_FIELDS = ("createdAt", "updatedAt", "deletedAt", "createdBy")


@dataclass
class EnumOption:
    """One option of a SELECT or MULTI_SELECT field."""
    value: str
    label: str
    color: str = ""
    position: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EnumOption":
        return cls(
            value=data.get("value") or "",
            label=data.get("label") or "",
            color=data.get("color") or "",
            position=data.get("position") or 0,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "label": self.label,
            "color": self.color,
            "position": self.position,
        }


@dataclass
class FieldMetadata:
    """Metadata for a single field of a CRM object."""
    id: str
    name: str
    type: str
    label: str
    object_metadata_id: str
    is_nullable: bool = True
    description: str | None = None
    icon: str | None = None
    default_value: Any = None
    is_custom: bool = False
    is_active: bool = True
    is_system: bool = False

    @property
    def is_required(self) -> bool:
        """A field is required when it cannot be null."""
        return not self.is_nullable

    @property
    def field_type(self) -> FieldType | None:
        """The type as a FieldType, or None for types this SDK does not know."""
        return FieldType.parse(self.type)

    @property
    def is_relation(self) -> bool:
        return self.type == FieldType.RELATION.value


@dataclass
class SelectField(FieldMetadata):
    """A SELECT or MULTI_SELECT field with its allowed options."""
    options: list[EnumOption] = field(default_factory=list)

    @property
    def valid_values(self) -> list[str]:
        return [option.value for option in self.options]

    @property
    def options_map(self) -> dict[str, str]:
        """Options as a value -> label mapping."""
        return {option.value: option.label for option in self.options}

    def is_valid_value(self, value: str) -> bool:
        return value in self.valid_values

    def label_for_value(self, value: str) -> str | None:
        option = self.option_by_value(value)
        return option.label if option else None

    def option_by_value(self, value: str) -> EnumOption | None:
        for option in self.options:
            if option.value == value:
                return option
        return None


def field_from_dict(data: dict[str, Any]) -> FieldMetadata:
    """
    Build field metadata from an API field payload.

    SELECT and MULTI_SELECT fields become SelectField so their options are
    available for validation; every other type becomes plain FieldMetadata.

    Args:
        data: Field dictionary as returned by the metadata API

    Returns:
        FieldMetadata or SelectField
    """
    field_type = data.get("type") or FieldType.TEXT.value

    common = dict(
        id=data.get("id") or "",
        name=data.get("name") or "",
        type=field_type,
        label=data.get("label") or "",
        object_metadata_id=data.get("objectMetadataId") or "",
        is_nullable=data.get("isNullable", True),
        description=data.get("description"),
        icon=data.get("icon"),
        default_value=data.get("defaultValue"),
        is_custom=data.get("isCustom", False),
        is_active=data.get("isActive", True),
        is_system=data.get("isSystem", False),
    )

    if field_type in (FieldType.SELECT.value, FieldType.MULTI_SELECT.value):
        options = [
            EnumOption.from_dict(option)
            for option in data.get("options") or []
            if isinstance(option, dict)
        ]
        return SelectField(options=options, **common)

    return FieldMetadata(**common)


@dataclass
class RelationMetadata:
    """
    A relation from one object to another.

    For a ``person.company`` relation the source is ``person``, the target is
    ``company`` and the target field (the inverse side) is ``people``.
    """
    name: str
    type: RelationType
    source_object_name: str
    target_object_name: str
    target_field_name: str | None = None
    label: str = ""
    is_nullable: bool = True
    is_custom: bool = False

    @property
    def foreign_key(self) -> str:
        """Name of the id column holding the relation, e.g. ``companyId``."""
        return f"{self.name}Id"

    def is_many_to_one(self) -> bool:
        return self.type is RelationType.MANY_TO_ONE

    def is_one_to_many(self) -> bool:
        return self.type is RelationType.ONE_TO_MANY

    def is_many_to_many(self) -> bool:
        return self.type is RelationType.MANY_TO_MANY

    def is_one_to_one(self) -> bool:
        return self.type is RelationType.ONE_TO_ONE

    @classmethod
    def from_field_dict(cls, data: dict[str, Any]) -> "RelationMetadata | None":
        """
        Build relation metadata from a RELATION field payload.

        Newer Twenty versions describe the relation under ``relation``; older
        ones use ``relationDefinition`` with a ``direction`` key.

        Returns:
            RelationMetadata, or None when the payload carries no usable
            relation description
        """
        relation = data.get("relation") or data.get("relationDefinition")
        if not isinstance(relation, dict):
            return None

        raw_type = relation.get("type") or relation.get("direction")
        try:
            relation_type = RelationType(raw_type)
        except ValueError:
            logger.warning(f"Unknown relation type '{raw_type}' on field '{data.get('name')}'")
            return None

        source = relation.get("sourceObjectMetadata") or {}
        target = relation.get("targetObjectMetadata") or {}
        target_field = relation.get("targetFieldMetadata") or {}

        target_name = target.get("nameSingular")
        if not target_name:
            return None

        return cls(
            name=data.get("name") or "",
            type=relation_type,
            source_object_name=source.get("nameSingular") or "",
            target_object_name=target_name,
            target_field_name=target_field.get("name"),
            label=data.get("label") or "",
            is_nullable=data.get("isNullable", True),
            is_custom=data.get("isCustom", False),
        )


class EntityDefinition:
    """
    Everything needed to work with one entity type (person, company, ...).

    Holds the field metadata, API endpoint and relations, and translates
    between entity field names and API field names. RELATION fields are
    addressed as ``company`` on the entity but sent as ``companyId``.
    """

    def __init__(
        self,
        object_name: str,
        object_name_plural: str,
        api_endpoint: str,
        fields: dict[str, FieldMetadata],
        standard_fields: list[str],
        nested_object_map: dict[str, Any] | None = None,
        relations: dict[str, RelationMetadata] | None = None,
    ):
        self.object_name = object_name
        self.object_name_plural = object_name_plural
        self.api_endpoint = api_endpoint
        self.fields = fields
        self.standard_fields = standard_fields
        self.nested_object_map = nested_object_map or {}
        self.relations = relations or {}

        self._field_to_api: dict[str, str] = {}
        self._api_to_field: dict[str, str] = {}
        for field_name, field_meta in self.fields.items():
            if field_meta.is_relation:
                api_name = f"{field_name}Id"
                self._field_to_api[field_name] = api_name
                self._api_to_field[api_name] = field_name

    def __repr__(self) -> str:
        return f"EntityDefinition({self.object_name!r}, fields={len(self.fields)})"

    def get_field(self, name: str) -> FieldMetadata | None:
        return self.fields.get(name)

    def has_field(self, name: str) -> bool:
        return name in self.fields

    @property
    def field_names(self) -> list[str]:
        return list(self.fields)

    @property
    def required_fields(self) -> dict[str, FieldMetadata]:
        """Fields that cannot be null."""
        return {name: f for name, f in self.fields.items() if f.is_required}

    @property
    def custom_fields(self) -> dict[str, FieldMetadata]:
        """Fields that are not in the standard field list."""
        return {
            name: f for name, f in self.fields.items()
            if name not in self.standard_fields
        }

    def is_standard_field(self, name: str) -> bool:
        return name in self.standard_fields

    def is_custom_field(self, name: str) -> bool:
        return self.has_field(name) and not self.is_standard_field(name)

    def get_relation(self, name: str) -> RelationMetadata | None:
        return self.relations.get(name)

    def has_relation(self, name: str) -> bool:
        return name in self.relations

    @property
    def relation_names(self) -> list[str]:
        return list(self.relations)

    def map_field_to_api(self, field_name: str) -> str:
        """Entity field name -> API field name (``company`` -> ``companyId``)."""
        return self._field_to_api.get(field_name, field_name)

    def map_api_to_field(self, api_field_name: str) -> str:
        """API field name -> entity field name (``companyId`` -> ``company``)."""
        return self._api_to_field.get(api_field_name, api_field_name)


def is_auto_managed(field_name: str) -> bool:
    return field_name in AUTO_MANAGED_FIELDS


def is_updatable(field_meta: FieldMetadata) -> bool:
    """A field can be written when it is neither a system nor an auto-managed field."""
    if field_meta.is_system:
        return False
    return not is_auto_managed(field_meta.name)


def filter_updatable_fields(data: dict[str, Any], definition: EntityDefinition) -> dict[str, Any]:
    """
    Keep only the entries of ``data`` that may be sent in an update.

    Keys may be entity or API field names; ``companyId`` is checked against
    the ``company`` field. Unknown keys are dropped. Relation keys are
    kept only for to-one relations holding a plain id; embedded to-many
    records are never sent.

    Args:
        data: Entity data in API format
        definition: Definition of the entity type

    Returns:
        Filtered copy of ``data``
    """
    filtered = {}

    for key, value in data.items():
        if is_auto_managed(key):
            continue

        field_meta = definition.get_field(definition.map_api_to_field(key))
        if field_meta is None:
            logger.debug(f"Dropping unknown field '{key}' from {definition.object_name} update")
            continue

        if not is_updatable(field_meta):
            continue

        if field_meta.is_relation and not _is_to_one_reference(definition, field_meta.name, value):
            continue

        filtered[key] = value

    return filtered


def _is_to_one_reference(definition: EntityDefinition, field_name: str, value: Any) -> bool:
    relation = definition.get_relation(field_name)
    if relation is None or not relation.type.returns_single_entity:
        return False
    # None clears the relation
    return value is None or isinstance(value, (str, int))
