"""Bearer token authentication."""

from ..core.models import ConfigError
from .base import Authentication


class BearerTokenAuth(Authentication):
    """
    Authenticates with a Twenty API key sent as a bearer token.

    API keys are created under Settings > APIs & Webhooks in the Twenty
    workspace.
    """

    def __init__(self, token: str):
        """
        Args:
            token: Twenty API key

        Raises:
            ConfigError: If the token is empty
        """
        if not token:
            raise ConfigError("Twenty API token must not be empty")
        self.token = token

    def __repr__(self) -> str:
        return "BearerTokenAuth(token='***')"

    def build_auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}
