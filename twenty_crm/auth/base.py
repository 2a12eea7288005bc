"""Base class for authentication strategies."""

from abc import ABC, abstractmethod


class Authentication(ABC):
    """
    Abstract base class for request authentication.

    The HTTP client asks its authentication for headers on every request,
    so implementations may rotate or refresh credentials between calls.
    """

    @abstractmethod
    def build_auth_headers(self) -> dict[str, str]:
        """
        Build authentication headers for an API request.

        Returns:
            Dictionary of HTTP headers for authentication

        Raises:
            ConfigError: If the credentials are invalid or incomplete
        """
        pass
