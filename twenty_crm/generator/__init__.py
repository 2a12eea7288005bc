"""
Code generation from Twenty CRM metadata.

Produces typed entity, service and collection modules for the objects of
a workspace.
"""

from .builder import generate_code
from .entity_generator import EntityGenerator
from .service_generator import ServiceGenerator
from .collection_generator import CollectionGenerator

__all__ = [
    "generate_code",
    "EntityGenerator",
    "ServiceGenerator",
    "CollectionGenerator",
]
