"""
Python SDK for the Twenty CRM REST API.

Example:
    >>> from twenty_crm import create_client, FilterBuilder
    >>> with create_client("https://example.twenty.com/rest/", token) as crm:
    ...     people = crm.entity("person").find(FilterBuilder().equals("city", "Berlin"))
"""

from .core.models import (
    TwentyCrmError,
    APIError,
    AuthenticationError,
    ConfigError,
    EntityNotFoundError,
    GenerationError,
)
from .auth import Authentication, BearerTokenAuth
from .client import TwentyCrmClient, TwentyHttpClient, create_client
from .entities import DynamicEntity, DynamicEntityCollection
from .query import CustomFilter, FilterBuilder, SearchOptions
from .services import GenericEntityService, MetadataService, RelationLoader

__version__ = "0.1.0"

__all__ = [
    "TwentyCrmError",
    "APIError",
    "AuthenticationError",
    "ConfigError",
    "EntityNotFoundError",
    "GenerationError",
    "Authentication",
    "BearerTokenAuth",
    "TwentyCrmClient",
    "TwentyHttpClient",
    "create_client",
    "DynamicEntity",
    "DynamicEntityCollection",
    "CustomFilter",
    "FilterBuilder",
    "SearchOptions",
    "GenericEntityService",
    "MetadataService",
    "RelationLoader",
]
