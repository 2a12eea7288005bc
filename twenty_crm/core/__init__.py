"""Core components: enums, errors, metadata, registry and configuration."""

from .models import (
    FieldType,
    RelationType,
    TwentyCrmError,
    APIError,
    AuthenticationError,
    ConfigError,
    EntityNotFoundError,
    GenerationError,
)
from .metadata import (
    AUTO_MANAGED_FIELDS,
    EnumOption,
    FieldMetadata,
    SelectField,
    RelationMetadata,
    EntityDefinition,
    field_from_dict,
    is_auto_managed,
    is_updatable,
    filter_updatable_fields,
)
from .registry import EntityRegistry, build_entity_definition
from .config_store import CodegenConfig, load_codegen_config, codegen_config_from_options

__all__ = [
    "FieldType",
    "RelationType",
    "TwentyCrmError",
    "APIError",
    "AuthenticationError",
    "ConfigError",
    "EntityNotFoundError",
    "GenerationError",
    "AUTO_MANAGED_FIELDS",
    "EnumOption",
    "FieldMetadata",
    "SelectField",
    "RelationMetadata",
    "EntityDefinition",
    "field_from_dict",
    "is_auto_managed",
    "is_updatable",
    "filter_updatable_fields",
    "EntityRegistry",
    "build_entity_definition",
    "CodegenConfig",
    "load_codegen_config",
    "codegen_config_from_options",
]
