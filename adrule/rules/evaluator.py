"""ADRULE — Condition Evaluator.

Dry-run evaluation of rule groups against one campaign's metrics snapshot.

- Missing metric or unparseable threshold → the condition fails.
- ``equal`` / ``not_equal`` compare with an absolute epsilon.
- Empty groups are skipped; a rule with no non-empty group never matches.
- Mode ``all``: every group must pass (how the automation worker runs rules).
  Mode ``connectors``: groups fold left-to-right with each group's ``type``.
"""

import operator as op
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from adrule.config import settings
from adrule.core.formatting import parse_number
from adrule.core.metric_registry import get_metric
from adrule.core.vocabulary import LogicalOperator, Operator, normalize_operator
from adrule.models.evaluation_models import (
    ConditionOutcome,
    EvaluationResult,
    GroupOutcome,
)
from adrule.models.rule_models import Condition, ConditionGroup
from adrule.core.logging import get_logger

logger = get_logger("rules.evaluator")

EVALUATION_MODES = ("all", "connectors")

_ORDERED: Dict[str, Callable[[float, float], bool]] = {
    Operator.GREATER_THAN.value: op.gt,
    Operator.LESS_THAN.value: op.lt,
    Operator.GREATER_EQUAL.value: op.ge,
    Operator.LESS_EQUAL.value: op.le,
}


def _compare(operator: str, actual: float, expected: float, epsilon: float) -> Optional[bool]:
    if operator in _ORDERED:
        return _ORDERED[operator](actual, expected)
    if operator == Operator.EQUAL.value:
        return abs(actual - expected) < epsilon
    if operator == Operator.NOT_EQUAL.value:
        return abs(actual - expected) >= epsilon
    return None


def evaluate_condition(
    condition: Condition,
    metrics: Mapping[str, float],
    epsilon: Optional[float] = None,
) -> ConditionOutcome:
    epsilon = settings.equality_epsilon if epsilon is None else epsilon
    operator = normalize_operator(condition.operator)
    outcome = {
        "condition_id": condition.id,
        "metric": condition.metric,
        "operator": operator,
    }

    if get_metric(condition.metric) is None:
        logger.warning(f"Unknown metric: {condition.metric}")
    actual = parse_number(metrics.get(condition.metric))
    if actual is None:
        return ConditionOutcome(**outcome, passed=False, reason="missing_metric")

    expected = parse_number(condition.value) if condition.value else None
    if expected is None:
        logger.warning(f"Invalid condition value: {condition.value!r}")
        return ConditionOutcome(
            **outcome, actual=actual, passed=False, reason="invalid_value"
        )

    passed = _compare(operator, actual, expected, epsilon)
    if passed is None:
        logger.warning(f"Unknown operator: {condition.operator}")
        return ConditionOutcome(
            **outcome,
            actual=actual,
            expected=expected,
            passed=False,
            reason="unknown_operator",
        )

    return ConditionOutcome(**outcome, actual=actual, expected=expected, passed=passed)


def evaluate_group(
    group: ConditionGroup,
    metrics: Mapping[str, float],
    epsilon: Optional[float] = None,
) -> GroupOutcome:
    outcomes = [evaluate_condition(c, metrics, epsilon) for c in group.conditions]
    if group.logical_operator == LogicalOperator.AND.value:
        passed = all(o.passed for o in outcomes)
    else:
        passed = any(o.passed for o in outcomes)
    return GroupOutcome(
        group_id=group.id,
        logical_operator=group.logical_operator,
        passed=passed,
        conditions=outcomes,
    )


def evaluate_rule_groups(
    groups: Optional[Sequence[ConditionGroup]],
    metrics: Mapping[str, float],
    mode: Optional[str] = None,
    epsilon: Optional[float] = None,
) -> EvaluationResult:
    """Evaluate all groups against ``metrics``."""
    mode = mode or settings.group_evaluation_mode
    if mode not in EVALUATION_MODES:
        raise ValueError(f"Unknown evaluation mode '{mode}'")

    surviving = [g for g in (groups or []) if g.conditions]
    if not surviving:
        logger.warning("No condition groups provided")
        return EvaluationResult(matched=False, mode=mode)

    outcomes: List[GroupOutcome] = []
    matched = True
    for idx, group in enumerate(surviving):
        outcome = evaluate_group(group, metrics, epsilon)
        if idx == 0:
            matched = outcome.passed
        elif mode == "all":
            matched = matched and outcome.passed
        else:
            outcome.connector = (
                LogicalOperator.AND.value
                if group.type == LogicalOperator.AND.value
                else LogicalOperator.OR.value
            )
            if outcome.connector == LogicalOperator.AND.value:
                matched = matched and outcome.passed
            else:
                matched = matched or outcome.passed
        outcomes.append(outcome)

    passed_groups = sum(1 for o in outcomes if o.passed)
    logger.info(
        f"Conditions {'met' if matched else 'not met'}: "
        f"{passed_groups}/{len(outcomes)} group(s) passed ({mode} mode)"
    )
    return EvaluationResult(matched=matched, mode=mode, groups=outcomes)
