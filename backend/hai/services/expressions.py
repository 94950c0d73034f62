"""
Hai Backend - DynamoDB Expression Builders

Purpose: Build update expressions from typed field assignments and key
conditions from sort-key predicates.

Attribute names are always routed through placeholders because entity
field names are not controlled here and may be DynamoDB reserved words
(date, name, type, message, floor, ...).

Testing:
    expr = build_update_expression([FieldAssignment("name", "Ada")])
    expr.expression  # "SET #attr0 = :val0"
    expr.names       # {"#attr0": "name"}
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from boto3.dynamodb.conditions import Key

from hai.errors import StoreRejected


# boto3 generates "#n{i}" / ":v{i}" for condition objects; these never collide
NAME_PLACEHOLDER = "#attr{}"
VALUE_PLACEHOLDER = ":val{}"


@dataclass(frozen=True)
class FieldAssignment:
    """Set (or, with value None, remove) one top-level attribute"""
    attribute: str
    value: Any


@dataclass
class UpdateExpression:
    """Rendered UpdateExpression with its placeholder maps"""
    expression: str
    names: Dict[str, str] = field(default_factory=dict)
    values: Dict[str, Any] = field(default_factory=dict)


def build_update_expression(assignments: Iterable[FieldAssignment]) -> UpdateExpression:
    """
    Render assignments into a SET/REMOVE update expression

    Later assignments to the same attribute win; DynamoDB rejects an
    expression that touches one path twice.
    """
    merged: Dict[str, Any] = {}
    for assignment in assignments:
        if not assignment.attribute:
            raise StoreRejected("Attribute name must not be empty")
        merged.pop(assignment.attribute, None)
        merged[assignment.attribute] = assignment.value

    if not merged:
        raise StoreRejected("Update requires at least one assignment")

    set_clauses: List[str] = []
    remove_clauses: List[str] = []
    names: Dict[str, str] = {}
    values: Dict[str, Any] = {}

    for index, (attribute, value) in enumerate(merged.items()):
        name_ph = NAME_PLACEHOLDER.format(index)
        names[name_ph] = attribute

        if value is None:
            remove_clauses.append(name_ph)
        else:
            value_ph = VALUE_PLACEHOLDER.format(index)
            values[value_ph] = value
            set_clauses.append(f"{name_ph} = {value_ph}")

    parts = []
    if set_clauses:
        parts.append("SET " + ", ".join(set_clauses))
    if remove_clauses:
        parts.append("REMOVE " + ", ".join(remove_clauses))

    return UpdateExpression(expression=" ".join(parts), names=names, values=values)


@dataclass(frozen=True)
class SortCondition:
    """Predicate on an index sort key"""
    operator: str
    value: Any
    upper: Optional[Any] = None

    @classmethod
    def equals(cls, value: Any) -> "SortCondition":
        return cls("eq", value)

    @classmethod
    def begins_with(cls, prefix: str) -> "SortCondition":
        return cls("begins_with", prefix)

    @classmethod
    def between(cls, low: Any, high: Any) -> "SortCondition":
        """Inclusive on both ends"""
        return cls("between", low, high)

    @classmethod
    def less_than(cls, value: Any) -> "SortCondition":
        return cls("lt", value)

    def to_key_condition(self, attribute: str):
        """Convert to a boto3 Key condition on the given sort key attribute"""
        key = Key(attribute)
        if self.operator == "between":
            return key.between(self.value, self.upper)
        if self.operator in ("eq", "begins_with", "lt"):
            return getattr(key, self.operator)(self.value)
        raise StoreRejected(f"Unsupported sort key operator: {self.operator}")
