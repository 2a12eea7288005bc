"""Services that talk to the Twenty REST API."""

from .generic import GenericEntityService
from .metadata import MetadataService
from .relations import RelationLoader

__all__ = ["GenericEntityService", "MetadataService", "RelationLoader"]
