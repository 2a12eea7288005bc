"""Authentication strategies for the Twenty CRM API."""

from .base import Authentication
from .bearer import BearerTokenAuth

__all__ = ["Authentication", "BearerTokenAuth"]
