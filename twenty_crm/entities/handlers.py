"""
Field handlers for Twenty's nested (composite) field types.

A handler converts the nested dictionary the API returns for a field
into a Python value, and back into the dictionary the API accepts.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from ..core.models import FieldType
from .values import Address, Currency, LinkCollection, Name, PhoneCollection

logger = logging.getLogger(__name__)


class NestedObjectHandler(ABC):
    """Converts one composite field type between API and Python form."""

    @property
    @abstractmethod
    def field_type(self) -> FieldType:
        """The field type this handler is responsible for."""
        pass

    @property
    @abstractmethod
    def python_type(self) -> type:
        """Python type returned by from_api(), used for generated type hints."""
        pass

    @abstractmethod
    def from_api(self, data: dict[str, Any]) -> Any:
        """
        Convert API data to a Python value.

        Args:
            data: Nested field dictionary from the API

        Returns:
            Value object, or None for empty data
        """
        pass

    @abstractmethod
    def to_api(self, value: Any) -> dict[str, Any]:
        """
        Convert a Python value to API data.

        Args:
            value: Value object, raw dict, or None

        Returns:
            Nested field dictionary ({} for None)
        """
        pass


class _ValueObjectHandler(NestedObjectHandler):
    """Handler for types backed by a value object with from_dict/to_dict."""

    value_class: type = object

    @property
    def python_type(self) -> type:
        return self.value_class

    def from_api(self, data: dict[str, Any]) -> Any:
        if not data:
            return None
        return self.value_class.from_dict(data)

    def to_api(self, value: Any) -> dict[str, Any]:
        if value is None:
            return {}
        if isinstance(value, self.value_class):
            return value.to_dict()
        if isinstance(value, dict):
            return value
        return {}


class PhonesFieldHandler(_ValueObjectHandler):
    value_class = PhoneCollection

    @property
    def field_type(self) -> FieldType:
        return FieldType.PHONES


class LinksFieldHandler(_ValueObjectHandler):
    value_class = LinkCollection

    @property
    def field_type(self) -> FieldType:
        return FieldType.LINKS


class NameFieldHandler(_ValueObjectHandler):
    value_class = Name

    @property
    def field_type(self) -> FieldType:
        return FieldType.FULL_NAME


class AddressFieldHandler(_ValueObjectHandler):
    value_class = Address

    @property
    def field_type(self) -> FieldType:
        return FieldType.ADDRESS


class CurrencyFieldHandler(_ValueObjectHandler):
    """
    CURRENCY fields.

    A missing amountMicros means "no amount" and reads as None. Plain
    numbers written to the field are taken as USD amounts.
    """

    value_class = Currency

    @property
    def field_type(self) -> FieldType:
        return FieldType.CURRENCY

    def from_api(self, data: dict[str, Any]) -> Currency | None:
        if not data or data.get("amountMicros") is None:
            return None
        return Currency.from_dict(data)

    def to_api(self, value: Any) -> dict[str, Any]:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return Currency.from_amount(float(value)).to_dict()
        return super().to_api(value)


class EmailsFieldHandler(NestedObjectHandler):
    """
    EMAILS fields, exposed as the primary email address.

    Falls back to the first additional email when no primary is set.
    """

    @property
    def field_type(self) -> FieldType:
        return FieldType.EMAILS

    @property
    def python_type(self) -> type:
        return str

    def from_api(self, data: dict[str, Any]) -> str | None:
        if not data:
            return None

        if data.get("primaryEmail"):
            return data["primaryEmail"]

        additional = data.get("additionalEmails") or []
        if additional:
            return additional[0]

        return None

    def to_api(self, value: Any) -> dict[str, Any]:
        if value is None or value == "":
            return {}
        if isinstance(value, dict):
            return value
        if isinstance(value, str):
            return {"primaryEmail": value}
        return {}


class FieldHandlerRegistry:
    """Looks up the handler for a field type string such as "PHONES"."""

    def __init__(self):
        self._handlers: dict[str, NestedObjectHandler] = {}
        for handler in (
            PhonesFieldHandler(),
            LinksFieldHandler(),
            EmailsFieldHandler(),
            NameFieldHandler(),
            AddressFieldHandler(),
            CurrencyFieldHandler(),
        ):
            self.register(handler)

    def register(self, handler: NestedObjectHandler) -> None:
        """Register a handler, replacing any handler for the same type."""
        if handler.field_type.value in self._handlers:
            logger.debug(f"Replacing field handler for {handler.field_type.value}")
        self._handlers[handler.field_type.value] = handler

    def get_handler(self, field_type: str) -> NestedObjectHandler | None:
        return self._handlers.get(field_type)

    def has_handler(self, field_type: str) -> bool:
        return field_type in self._handlers

    @property
    def handlers(self) -> dict[str, NestedObjectHandler]:
        return dict(self._handlers)

    def python_type(self, field_type: str) -> type | None:
        handler = self.get_handler(field_type)
        return handler.python_type if handler else None

    def from_api(self, field_type: str, data: dict[str, Any]) -> Any:
        """Convert with the registered handler, or return data unchanged."""
        handler = self.get_handler(field_type)
        return handler.from_api(data) if handler else data

    def to_api(self, field_type: str, value: Any) -> dict[str, Any]:
        """Convert with the registered handler; without one only dicts pass through."""
        handler = self.get_handler(field_type)
        if handler is None:
            return value if isinstance(value, dict) else {}
        return handler.to_api(value)


# Handlers hold no state, so one registry serves all entities
default_handler_registry = FieldHandlerRegistry()
