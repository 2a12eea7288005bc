"""Naming and type-hint helpers for generated code."""

import keyword
import re

from ..core.metadata import FieldMetadata
from ..core.models import FieldType
from ..entities.entity import DynamicEntity
from ..entities.handlers import default_handler_registry

# Python types of the plain field types
BASIC_TYPES = {
    FieldType.TEXT.value: "str",
    FieldType.UUID.value: "str",
    FieldType.DATE_TIME.value: "str",
    FieldType.DATE.value: "str",
    FieldType.SELECT.value: "str",
    FieldType.MULTI_SELECT.value: "list[str]",
    FieldType.NUMBER.value: "float",
    FieldType.RATING.value: "int",
    FieldType.BOOLEAN.value: "bool",
}

# Attributes of generated entity classes that fields must not shadow
RESERVED_ATTRIBUTES = frozenset(
    name for name in dir(DynamicEntity) if not name.startswith("__")
) | {"definition", "handler_registry", "from_entity"}

_WORD_BOUNDARY = re.compile(r"[_\-\s]+")


def pascal_case(name: str) -> str:
    """Convert a field or object name to PascalCase (lead_source -> LeadSource)."""
    parts = _WORD_BOUNDARY.split(name)
    return "".join(part[:1].upper() + part[1:] for part in parts if part)


def snake_case(name: str) -> str:
    """Convert a camelCase name to snake_case (linkedinLink -> linkedin_link)."""
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    return _WORD_BOUNDARY.sub("_", name).lower()


def pluralize(name: str) -> str:
    """Naive English plural: company -> companies, business -> businesses, person -> persons."""
    if name.endswith("y"):
        return name[:-1] + "ies"
    if name.endswith("s"):
        return name + "es"
    return name + "s"


def attribute_name(field_name: str) -> str:
    """
    Python attribute name for a field.

    Keywords and names already used by the entity base class get a
    ``_field`` suffix: ``from`` -> ``from_field``, ``raw`` -> ``raw_field``.
    """
    name = snake_case(field_name)
    if not name.isidentifier():
        name = re.sub(r"\W", "_", name)
        if not name[:1].isalpha() and not name.startswith("_"):
            name = f"field_{name}"
    if keyword.iskeyword(name) or name in RESERVED_ATTRIBUTES:
        name = f"{name}_field"
    return name


def python_type(field_meta: FieldMetadata) -> str:
    """
    Type hint for a field, e.g. "str | None" or "PhoneCollection | None".

    Composite types use the value class of their handler; unknown types
    become Any.
    """
    handler_type = default_handler_registry.python_type(field_meta.type)
    if handler_type is not None:
        hint = handler_type.__name__
    else:
        hint = BASIC_TYPES.get(field_meta.type, "Any")

    if hint != "Any" and field_meta.is_nullable:
        hint = f"{hint} | None"
    return hint


def value_class_name(field_meta: FieldMetadata) -> str | None:
    """Name of the value class a field's handler returns, if any."""
    handler_type = default_handler_registry.python_type(field_meta.type)
    if handler_type is None or handler_type.__module__ == "builtins":
        return None
    return handler_type.__name__
