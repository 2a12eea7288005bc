"""Access to the workspace's object metadata."""

import logging
from typing import Any

from ..client.http_client import TwentyHttpClient
from ..core.metadata import FieldMetadata, SelectField, field_from_dict

logger = logging.getLogger(__name__)

METADATA_OBJECTS_PATH = "metadata/objects"


class MetadataService:
    """
    Fetches and caches the ``metadata/objects`` listing.

    The listing is requested once and kept until clear_cache(). Objects
    can be looked up by singular or plural name ("person" or "people").
    """

    def __init__(self, http_client: TwentyHttpClient):
        self.http_client = http_client
        self._objects: list[dict[str, Any]] | None = None
        self._field_cache: dict[str, dict[str, FieldMetadata]] = {}

    def list_objects(self) -> list[dict[str, Any]]:
        """
        Return the raw object metadata of the workspace.

        Raises:
            APIError: If the metadata request fails
        """
        if self._objects is None:
            logger.debug("Fetching object metadata")
            # Metadata endpoints accept no query parameters
            response = self.http_client.request("GET", METADATA_OBJECTS_PATH)
            objects = (response.get("data") or {}).get("objects")
            self._objects = [obj for obj in objects or [] if isinstance(obj, dict)]
            logger.debug(f"Loaded metadata for {len(self._objects)} objects")
        return self._objects

    def get_object(self, object_name: str) -> dict[str, Any] | None:
        """Raw metadata of one object, matched by singular or plural name."""
        for obj in self.list_objects():
            if object_name in (obj.get("nameSingular"), obj.get("namePlural")):
                return obj
        return None

    def get_object_fields(self, object_name: str) -> dict[str, FieldMetadata]:
        """
        Field metadata of one object, keyed by field name.

        Returns:
            The fields, or an empty dict if the object is unknown
        """
        if object_name in self._field_cache:
            return self._field_cache[object_name]

        obj = self.get_object(object_name)
        if obj is None:
            logger.debug(f"No metadata for object '{object_name}'")
            return {}

        fields = {}
        for field_data in obj.get("fields") or []:
            if not field_data.get("name"):
                continue
            field_data = {**field_data, "objectMetadataId": obj.get("id") or ""}
            fields[field_data["name"]] = field_from_dict(field_data)

        self._field_cache[object_name] = fields
        return fields

    def get_field_metadata(self, object_name: str, field_name: str) -> FieldMetadata | None:
        return self.get_object_fields(object_name).get(field_name)

    def get_enum_values(self, object_name: str, field_name: str) -> list[str]:
        """Allowed values of a SELECT field; empty for other fields."""
        field_meta = self.get_field_metadata(object_name, field_name)
        if isinstance(field_meta, SelectField):
            return field_meta.valid_values
        return []

    def is_valid_enum_value(self, object_name: str, field_name: str, value: str) -> bool:
        field_meta = self.get_field_metadata(object_name, field_name)
        if isinstance(field_meta, SelectField):
            return field_meta.is_valid_value(value)
        return False

    def clear_cache(self) -> None:
        self._objects = None
        self._field_cache = {}
        logger.debug("Metadata cache cleared")
