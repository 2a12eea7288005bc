"""
Filters and search options for Twenty list endpoints.

Twenty filters are strings of the form ``field[op]:value``. Conditions are
joined with commas for AND, and wrapped in ``or(...)`` for OR:

    >>> FilterBuilder().equals("city", "Berlin").greater_than("employees", 10).build_filter_string()
    'city[eq]:"Berlin",employees[gt]:10'
"""

from dataclasses import dataclass, field
from typing import Any

from ..core.metadata import EntityDefinition, SelectField

VALID_OPERATORS = (
    "eq",
    "neq",
    "gt",
    "gte",
    "lt",
    "lte",
    "in",
    "containsAny",
    "is",
    "startsWith",
    "like",
    "ilike",
)

NULL = "NULL"


@dataclass
class CustomFilter:
    """A filter from a ready-made filter string."""
    filter_string: str | None = None

    def build_filter_string(self) -> str | None:
        return self.filter_string

    def has_filters(self) -> bool:
        return bool(self.filter_string and self.filter_string.strip())


class FilterBuilder:
    """
    Fluent builder for Twenty filter strings.

    When built with an EntityDefinition, field names and SELECT values are
    checked against the schema as conditions are added.
    """

    def __init__(self, definition: EntityDefinition | None = None):
        self.definition = definition
        self.conditions: list[tuple[str, str, Any]] = []
        self.logical_operator = "and"

    def where(self, field_name: str, operator: str, value: Any) -> "FilterBuilder":
        """
        Add a condition.

        Args:
            field_name: Field to filter on; dot notation reaches into nested
                fields (``name.firstName``)
            operator: One of VALID_OPERATORS
            value: Value to compare with; a list for ``in``

        Returns:
            self, for chaining

        Raises:
            ValueError: If the operator is unknown, or the field or a SELECT
                value is not valid for the entity
        """
        if operator not in VALID_OPERATORS:
            raise ValueError(
                f"Invalid operator: {operator}. Valid operators: {', '.join(VALID_OPERATORS)}"
            )

        if self.definition is not None:
            self._validate_field(field_name, value)

        self.conditions.append((field_name, operator, value))
        return self

    def equals(self, field_name: str, value: Any) -> "FilterBuilder":
        return self.where(field_name, "eq", value)

    def not_equals(self, field_name: str, value: Any) -> "FilterBuilder":
        return self.where(field_name, "neq", value)

    def greater_than(self, field_name: str, value: Any) -> "FilterBuilder":
        return self.where(field_name, "gt", value)

    def greater_than_or_equals(self, field_name: str, value: Any) -> "FilterBuilder":
        return self.where(field_name, "gte", value)

    def less_than(self, field_name: str, value: Any) -> "FilterBuilder":
        return self.where(field_name, "lt", value)

    def less_than_or_equals(self, field_name: str, value: Any) -> "FilterBuilder":
        return self.where(field_name, "lte", value)

    def in_(self, field_name: str, values: list[Any]) -> "FilterBuilder":
        return self.where(field_name, "in", list(values))

    def contains(self, field_name: str, value: str) -> "FilterBuilder":
        """Case-insensitive substring match; LIKE wildcards in value are escaped."""
        return self.where(field_name, "ilike", f"%{_escape_like(value)}%")

    def like(self, field_name: str, pattern: str) -> "FilterBuilder":
        return self.where(field_name, "like", pattern)

    def ilike(self, field_name: str, pattern: str) -> "FilterBuilder":
        return self.where(field_name, "ilike", pattern)

    def starts_with(self, field_name: str, value: str) -> "FilterBuilder":
        return self.where(field_name, "startsWith", value)

    def is_null(self, field_name: str) -> "FilterBuilder":
        return self.where(field_name, "is", None)

    def is_not_null(self, field_name: str) -> "FilterBuilder":
        return self.where(field_name, "neq", None)

    def set_logical_operator(self, operator: str) -> "FilterBuilder":
        """
        Choose how conditions are combined.

        Raises:
            ValueError: If operator is not "and" or "or"
        """
        operator = operator.lower()
        if operator not in ("and", "or"):
            raise ValueError(f"Invalid logical operator: {operator}. Use 'and' or 'or'.")
        self.logical_operator = operator
        return self

    def use_or(self) -> "FilterBuilder":
        return self.set_logical_operator("or")

    def use_and(self) -> "FilterBuilder":
        return self.set_logical_operator("and")

    def has_filters(self) -> bool:
        return bool(self.conditions)

    def clear(self) -> "FilterBuilder":
        self.conditions = []
        return self

    def build(self) -> CustomFilter:
        return CustomFilter(self.build_filter_string())

    def build_filter_string(self) -> str | None:
        """
        Render the conditions as a Twenty filter string.

        Returns:
            The filter string, or None when there are no conditions
        """
        if not self.conditions:
            return None

        parts = ",".join(_format_condition(*condition) for condition in self.conditions)

        if self.logical_operator == "or":
            return f"or({parts})"
        return parts

    def _validate_field(self, field_name: str, value: Any) -> None:
        base_field = field_name.split(".")[0]

        field_meta = self.definition.get_field(base_field)
        if field_meta is None:
            raise ValueError(
                f"Unknown field: {base_field} for entity {self.definition.object_name}"
            )

        if not isinstance(field_meta, SelectField):
            return

        valid_values = ", ".join(field_meta.valid_values)

        if isinstance(value, str) and not field_meta.is_valid_value(value):
            raise ValueError(
                f"Invalid value '{value}' for SELECT field '{base_field}'. "
                f"Valid values: {valid_values}"
            )

        if isinstance(value, (list, tuple)):
            for item in value:
                if isinstance(item, str) and not field_meta.is_valid_value(item):
                    raise ValueError(
                        f"Invalid value '{item}' in array for SELECT field '{base_field}'. "
                        f"Valid values: {valid_values}"
                    )


def _format_condition(field_name: str, operator: str, value: Any) -> str:
    if operator == "in" and isinstance(value, (list, tuple)):
        items = ",".join(_format_value(item) for item in value)
        return f"{field_name}[in]:[{items}]"

    # NULL checks use the bare keyword
    if value == NULL and operator in ("is", "neq"):
        return f"{field_name}[{operator}]:NULL"

    return f"{field_name}[{operator}]:{_format_value(value)}"


def _format_value(value: Any) -> str:
    if value is None:
        return NULL
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        escaped = value.replace('"', '\\"')
        return f'"{escaped}"'
    return str(value)


def _escape_like(value: str) -> str:
    # Backslash first so the escapes added for % and _ stay single
    value = value.replace("\\", "\\\\")
    value = value.replace("%", "\\%")
    return value.replace("_", "\\_")


@dataclass
class SearchOptions:
    """
    Paging, ordering and depth for list requests.

    ``with_relations`` names relations to load for every returned entity
    after the search.
    """
    limit: int = 20
    order_by: str | None = None
    depth: int | None = None
    starting_after: str | None = None
    ending_before: str | None = None
    with_relations: list[str] = field(default_factory=list)

    def to_query_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {"limit": self.limit}
        if self.order_by is not None:
            params["order_by"] = self.order_by
        if self.depth is not None:
            params["depth"] = self.depth
        if self.starting_after is not None:
            params["starting_after"] = self.starting_after
        if self.ending_before is not None:
            params["ending_before"] = self.ending_before
        return params
