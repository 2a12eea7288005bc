"""HTTP transport and the top-level client facade."""

from .http_client import TwentyHttpClient
from .crm_client import TwentyCrmClient, create_client

__all__ = ["TwentyHttpClient", "TwentyCrmClient", "create_client"]
