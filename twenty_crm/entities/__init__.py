"""Entities, value objects and field handlers."""

from .values import Address, Currency, Link, LinkCollection, Name, Phone, PhoneCollection
from .handlers import FieldHandlerRegistry, NestedObjectHandler, default_handler_registry
from .entity import BaseEntity, DynamicEntity
from .collection import DynamicEntityCollection

__all__ = [
    "Address",
    "Currency",
    "Link",
    "LinkCollection",
    "Name",
    "Phone",
    "PhoneCollection",
    "FieldHandlerRegistry",
    "NestedObjectHandler",
    "default_handler_registry",
    "BaseEntity",
    "DynamicEntity",
    "DynamicEntityCollection",
]
