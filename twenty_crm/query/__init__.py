"""Filter strings and search options for list requests."""

from .filters import CustomFilter, FilterBuilder, SearchOptions, VALID_OPERATORS

__all__ = ["CustomFilter", "FilterBuilder", "SearchOptions", "VALID_OPERATORS"]
