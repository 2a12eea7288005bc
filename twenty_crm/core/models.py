"""Core enums and error types for the Twenty CRM SDK."""

from enum import Enum


class FieldType(Enum):
    """Data type of a field in Twenty CRM object metadata."""
    # Basic types
    TEXT = "TEXT"
    NUMBER = "NUMBER"
    BOOLEAN = "BOOLEAN"
    UUID = "UUID"
    DATE_TIME = "DATE_TIME"
    DATE = "DATE"
    POSITION = "POSITION"

    # Complex types
    SELECT = "SELECT"
    MULTI_SELECT = "MULTI_SELECT"
    RELATION = "RELATION"
    EMAILS = "EMAILS"
    PHONES = "PHONES"
    LINKS = "LINKS"
    FULL_NAME = "FULL_NAME"
    ADDRESS = "ADDRESS"
    CURRENCY = "CURRENCY"
    ACTOR = "ACTOR"
    RATING = "RATING"

    # System types
    TS_VECTOR = "TS_VECTOR"
    RAW_JSON = "RAW_JSON"

    @classmethod
    def parse(cls, value: str | None) -> "FieldType | None":
        """
        Look up a FieldType by its API value.

        Twenty adds field types over time, so unknown values return None
        instead of raising.
        """
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def requires_nested_handler(self) -> bool:
        """True for composite types stored as nested objects."""
        return self in (
            FieldType.EMAILS,
            FieldType.PHONES,
            FieldType.LINKS,
            FieldType.FULL_NAME,
            FieldType.ADDRESS,
            FieldType.CURRENCY,
        )

    @property
    def is_relation(self) -> bool:
        return self is FieldType.RELATION

    @property
    def is_system_type(self) -> bool:
        """True for types that Twenty manages itself."""
        return self in (FieldType.TS_VECTOR, FieldType.ACTOR, FieldType.POSITION)


class RelationType(Enum):
    """Cardinality of a relation between two objects."""
    ONE_TO_MANY = "ONE_TO_MANY"
    MANY_TO_ONE = "MANY_TO_ONE"
    MANY_TO_MANY = "MANY_TO_MANY"
    ONE_TO_ONE = "ONE_TO_ONE"

    @property
    def returns_collection(self) -> bool:
        return self in (RelationType.ONE_TO_MANY, RelationType.MANY_TO_MANY)

    @property
    def returns_single_entity(self) -> bool:
        return self in (RelationType.MANY_TO_ONE, RelationType.ONE_TO_ONE)


class TwentyCrmError(Exception):
    """Base class for all SDK errors."""
    pass


class APIError(TwentyCrmError):
    """Raised when a Twenty CRM API request fails."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class AuthenticationError(APIError):
    """Raised when the API rejects the credentials (HTTP 401)."""
    pass


class ConfigError(TwentyCrmError):
    """Raised when configuration is missing or invalid."""
    pass


class EntityNotFoundError(TwentyCrmError):
    """Raised when an entity type is not known to the workspace."""
    pass


class GenerationError(TwentyCrmError):
    """Raised when code generation cannot write its output."""
    pass
