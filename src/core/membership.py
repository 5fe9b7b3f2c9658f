"""Circle membership predicates - Pure functions.

A membership links a user to a circle. Records written before the `status`
field existed have no status at all and must still count as active, so the
only inactive state is an explicit ``status == "left"``.

Query predicates are plain dicts in document-store form:

    {"userId": "u1", "circleId": "c1", "status": {"$ne": "left"}}

`$ne` here means "present and different, OR absent". Stores whose native
inequality drops documents missing the field (Firestore's ``!=`` does) must not
receive `$ne` clauses directly; use `split_query` and evaluate the residual
with `matches_query`.
"""

from typing import Any

from src.core.errors import UnsupportedOperatorError


STATUS_LEFT = "left"

# Operators that can be handed to a store as plain equality filters
PUSHDOWN_OPERATORS = frozenset({"$eq"})

_MISSING = object()


def active_membership_query(user_id: str, circle_id: str) -> dict[str, Any]:
    """Build the filter selecting a user's active membership in a circle.

    Pure function. Inputs are not validated; an impossible id simply matches
    nothing downstream.

    Args:
        user_id: Member's user ID
        circle_id: Circle ID

    Returns:
        Query predicate requiring both ids and a status other than 'left'
    """
    return {
        "userId": user_id,
        "circleId": circle_id,
        "status": {"$ne": STATUS_LEFT},
    }


def active_circle_members_query(circle_id: str) -> dict[str, Any]:
    """Build the filter selecting every active membership of a circle.

    Pure function.
    """
    return {
        "circleId": circle_id,
        "status": {"$ne": STATUS_LEFT},
    }


def is_active_membership(document: dict[str, Any]) -> bool:
    """Check whether a membership document is active.

    Pure function. Missing or null status counts as active.
    """
    return document.get("status") != STATUS_LEFT


def _in_range(operator: str, value: Any, operand: Any) -> bool:
    """Ordered comparison; values that cannot be ordered do not match."""
    try:
        if operator == "$gte":
            return value >= operand
        return value <= operand
    except TypeError:
        return False


def _matches_clause(value: Any, clause: Any) -> bool:
    """Evaluate a single field clause against a field value.

    `value` is `_MISSING` when the document lacks the field.
    """
    if not isinstance(clause, dict):
        return value is not _MISSING and value == clause

    present = value is not _MISSING

    for operator, operand in clause.items():
        if operator == "$eq":
            if not (present and value == operand):
                return False
        elif operator == "$ne":
            if present and value == operand:
                return False
        elif operator == "$in":
            if not (present and value in operand):
                return False
        elif operator == "$nin":
            if present and value in operand:
                return False
        elif operator in ("$gte", "$lte"):
            if not present or value is None or not _in_range(operator, value, operand):
                return False
        else:
            raise UnsupportedOperatorError(operator)

    return True


def matches_query(document: dict[str, Any], query: dict[str, Any]) -> bool:
    """Evaluate a query predicate against a single document.

    Pure function. Semantics follow the document store the predicates are
    written for: `$ne` and `$nin` are satisfied by absent fields, every other
    operator requires the field to be present.

    Args:
        document: Document as a plain dict
        query: Query predicate (field -> literal or operator dict)

    Returns:
        True if every clause matches

    Raises:
        UnsupportedOperatorError: If a clause uses an unknown operator
    """
    for field_name, clause in query.items():
        value = document.get(field_name, _MISSING)
        if not _matches_clause(value, clause):
            return False
    return True


def split_query(
    query: dict[str, Any],
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split a predicate into store-native equality and in-process residual.

    Pure function.

    Plain literals and `{"$eq": x}` clauses become pushdown equality filters.
    Everything else, including every `$ne`, is left for `matches_query` so the
    not-equal-or-absent rule is evaluated here rather than by the store.

    Args:
        query: Query predicate

    Returns:
        Tuple of (pushdown equality filters, residual predicate)
    """
    pushdown: dict[str, Any] = {}
    residual: dict[str, Any] = {}

    for field_name, clause in query.items():
        if not isinstance(clause, dict):
            pushdown[field_name] = clause
        elif set(clause) <= PUSHDOWN_OPERATORS:
            pushdown[field_name] = clause["$eq"]
        else:
            residual[field_name] = clause

    return pushdown, residual


def filter_active_memberships(
    documents: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Keep only active membership documents.

    Pure function.
    """
    return [d for d in documents if is_active_membership(d)]
