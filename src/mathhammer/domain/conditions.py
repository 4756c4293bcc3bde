"""Condition evaluation.

Conditions are AND-ed: a mechanic applies only when every one of its
conditions holds.  Evaluation never raises; unknown operators, missing
attributes and unknown states all resolve to "does not apply".
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from mathhammer.domain import state as resolver
from mathhammer.domain.enums import Operator, Perspective, coerce
from mathhammer.domain.models import Condition, ConditionValue, GameContext, Mechanic

_PRESENCE_OPERATORS = frozenset({Operator.EQUALS, Operator.INCLUDES})
_ABSENCE_OPERATORS = frozenset({Operator.NOT_EQUALS, Operator.NOT_INCLUDES})


@dataclass(frozen=True, slots=True)
class Evaluation:
    applied: bool
    reason: str


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _strict_equals(actual: object, expected: object) -> bool:
    # True must not equal 1 here
    if isinstance(actual, bool) != isinstance(expected, bool):
        return False
    return actual == expected


def _contains(actual: object, expected: object) -> bool:
    if isinstance(actual, list | tuple | frozenset | set):
        return any(_strict_equals(item, expected) for item in actual)
    if isinstance(actual, str) and isinstance(expected, str):
        return expected in actual
    return _strict_equals(actual, expected)


def compare_values(
    actual: ConditionValue | bool,
    operator: Operator | str,
    expected: ConditionValue,
) -> bool:
    """Compare ``actual`` against ``expected`` with ``operator``."""

    op = coerce(Operator, operator)

    if actual is None:
        if op is Operator.EQUALS:
            return expected is None
        if op is Operator.NOT_EQUALS:
            return expected is not None
        return False

    if op is Operator.EQUALS:
        return _strict_equals(actual, expected)
    if op is Operator.NOT_EQUALS:
        return not _strict_equals(actual, expected)
    if op is Operator.INCLUDES:
        return _contains(actual, expected)
    if op is Operator.NOT_INCLUDES:
        return not _contains(actual, expected)

    if not (_is_number(actual) and _is_number(expected)):
        return False
    if op is Operator.GREATER_THAN:
        return actual > expected
    if op is Operator.GREATER_THAN_OR_EQUAL:
        return actual >= expected
    if op is Operator.LESS_THAN:
        return actual < expected
    if op is Operator.LESS_THAN_OR_EQUAL:
        return actual <= expected
    return False


def _membership(has_any: bool, operator: Operator | str) -> bool:
    op = coerce(Operator, operator)
    if op in _ABSENCE_OPERATORS:
        return not has_any
    if op in _PRESENCE_OPERATORS or isinstance(op, Operator):
        return has_any
    return False


def evaluate(condition: Condition, context: GameContext, perspective: Perspective) -> bool:
    """Evaluate a single condition from ``perspective``."""

    operator = condition.operator or Operator.EQUALS

    if condition.state:
        has_state = resolver.check_state(condition.entity, condition.state, context, perspective)
        return compare_values(has_state, operator, condition.value)

    if condition.keywords:
        has_any = resolver.has_any_keyword(
            condition.entity, condition.keywords, context, perspective
        )
        return _membership(has_any, operator)

    if condition.abilities:
        has_any = resolver.has_any_ability(
            condition.entity, condition.abilities, context, perspective
        )
        return _membership(has_any, operator)

    if condition.attribute:
        actual = resolver.get_attribute_value(
            condition.entity, condition.attribute, context, perspective
        )
        return compare_values(actual, operator, condition.value)

    return True


def evaluate_mechanic(mechanic: Mechanic, context: GameContext, perspective: Perspective) -> bool:
    """True when every condition of ``mechanic`` holds."""

    return all(evaluate(condition, context, perspective) for condition in mechanic.conditions)


def _format_value(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list | tuple | frozenset | set):
        return "[" + ",".join(str(item) for item in value) + "]"
    return str(value)


def describe_condition(condition: Condition) -> str:
    """Deterministic one-line description of a condition."""

    parts = [str(condition.entity)]
    if condition.state:
        parts.append(f"state={condition.state}")
    if condition.attribute:
        parts.append(f"attr={condition.attribute}")
    if condition.keywords:
        parts.append(f"keywords=[{','.join(condition.keywords)}]")
    if condition.abilities:
        parts.append(f"abilities=[{','.join(condition.abilities)}]")
    parts.append(str(condition.operator or Operator.EQUALS))
    parts.append(_format_value(condition.value))
    return " ".join(parts)


def evaluate_with_reason(
    mechanic: Mechanic, context: GameContext, perspective: Perspective
) -> Evaluation:
    """Evaluate ``mechanic`` and explain the first failing condition, if any."""

    if not mechanic.conditions:
        return Evaluation(applied=True, reason="No conditions")

    for index, condition in enumerate(mechanic.conditions, start=1):
        if not evaluate(condition, context, perspective):
            return Evaluation(
                applied=False,
                reason=f"Condition {index} failed: {describe_condition(condition)}",
            )
    return Evaluation(applied=True, reason="All conditions met")


def filter_applicable(
    mechanics: Sequence[Mechanic], context: GameContext, perspective: Perspective
) -> list[Mechanic]:
    return [mechanic for mechanic in mechanics if evaluate_mechanic(mechanic, context, perspective)]


def applicable_indices(
    mechanics: Sequence[Mechanic], context: GameContext, perspective: Perspective
) -> frozenset[int]:
    """Positions of the mechanics that apply; a stable identifier for each."""

    return frozenset(
        index
        for index, mechanic in enumerate(mechanics)
        if evaluate_mechanic(mechanic, context, perspective)
    )
