"""
Top-level client for a Twenty workspace.

Ties the HTTP client, metadata, registry and per-entity services
together behind one object.
"""

import logging

from ..auth.bearer import BearerTokenAuth
from ..core.registry import EntityRegistry
from ..services.generic import GenericEntityService
from ..services.metadata import MetadataService
from ..services.relations import RelationLoader
from .http_client import TwentyHttpClient

logger = logging.getLogger(__name__)


class TwentyCrmClient:
    """
    Entry point for working with a Twenty workspace.

    Services are created on first use and reused afterwards.

    Example:
        >>> with create_client("https://example.twenty.com/rest/", token) as crm:
        ...     people = crm.entity("person").find()
    """

    def __init__(self, http_client: TwentyHttpClient):
        self.http_client = http_client
        self._metadata: MetadataService | None = None
        self._registry: EntityRegistry | None = None
        self._relation_loader: RelationLoader | None = None
        self._services: dict[str, GenericEntityService] = {}

    def close(self) -> None:
        self.http_client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    @property
    def metadata(self) -> MetadataService:
        if self._metadata is None:
            self._metadata = MetadataService(self.http_client)
        return self._metadata

    @property
    def registry(self) -> EntityRegistry:
        if self._registry is None:
            self._registry = EntityRegistry(self.metadata)
        return self._registry

    @property
    def relation_loader(self) -> RelationLoader:
        if self._relation_loader is None:
            self._relation_loader = RelationLoader(self.http_client, self.registry)
        return self._relation_loader

    def entity(self, object_name: str) -> GenericEntityService:
        """
        Get the service for one entity type.

        Args:
            object_name: Singular object name, e.g. "person" or "company"

        Returns:
            GenericEntityService for the type

        Raises:
            EntityNotFoundError: If the workspace has no such object
        """
        if object_name not in self._services:
            definition = self.registry.require_definition(object_name)
            self._services[object_name] = GenericEntityService(
                self.http_client, definition, self.relation_loader
            )
            logger.debug(f"Created service for '{object_name}'")
        return self._services[object_name]

    def clear_cache(self) -> None:
        """Forget cached metadata and services."""
        self.registry.clear_cache()
        self._services = {}


def create_client(
    api_url: str,
    api_token: str,
    timeout_seconds: float = 30.0,
) -> TwentyCrmClient:
    """
    Create a client authenticated with an API key.

    Args:
        api_url: REST API root, e.g. "https://example.twenty.com/rest/"
        api_token: Twenty API key
        timeout_seconds: Request timeout in seconds

    Returns:
        Configured TwentyCrmClient

    Raises:
        ConfigError: If the token is empty
    """
    http_client = TwentyHttpClient(
        base_url=api_url,
        auth=BearerTokenAuth(api_token),
        timeout_seconds=timeout_seconds,
    )
    return TwentyCrmClient(http_client)
