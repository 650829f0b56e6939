"""ADRULE — Rule Validation.

Precondition checks for builder edits and the readiness check run before a
rule is sent to the backend. Checks return error messages; they never raise.
"""

from typing import Dict, List

from adrule.config import settings
from adrule.core.formatting import format_interval, parse_number
from adrule.core.vocabulary import (
    ADJUSTABLE_BUDGET_ACTIONS,
    ActionType,
    CATEGORIES,
    LogicalOperator,
)
from adrule.models.rule_models import Action, Condition, Rule

# Wizard step each readiness error belongs to
STEP_FIELDS: Dict[str, int] = {
    "actions": 1,
    "timeRange": 2,
    "customInterval": 2,
    "conditions": 3,
    "targets": 4,
    "ruleName": 5,
    "category": 5,
}


def validate_condition(condition: Condition) -> List[str]:
    """A condition needs a metric, an operator and a numeric value."""
    if not condition.is_complete:
        return [
            f"{field} is required"
            for field in ("metric", "operator", "value")
            if not getattr(condition, field)
        ]
    if parse_number(condition.value) is None:
        return [f"value '{condition.value}' is not a number"]
    return []


def validate_action(action: Action) -> List[str]:
    """Type-specific payload checks for an action."""
    errors: List[str] = []
    if not action.type:
        return ["action type is required"]

    if action.type in ADJUSTABLE_BUDGET_ACTIONS:
        if action.adjustment_type == "percentage":
            if action.percentage is None:
                errors.append("percentage is required")
        elif action.adjustment_type == "amount":
            if not action.amount:
                errors.append("amount is required")
        elif action.amount and action.percentage is not None:
            errors.append("set either amount or percentage, not both")
        elif not action.amount and action.percentage is None:
            errors.append("amount or percentage is required")
        if action.amount and parse_number(action.amount.replace(".", "")) is None:
            errors.append(f"amount '{action.amount}' is not a number")

    elif action.type == ActionType.SET_BUDGET.value:
        if not action.amount:
            errors.append("amount is required")
        elif parse_number(action.amount.replace(".", "")) is None:
            errors.append(f"amount '{action.amount}' is not a number")

    return errors


def is_logical_operator(value: str) -> bool:
    return value in (LogicalOperator.AND.value, LogicalOperator.OR.value)


def validate_rule_for_save(rule: Rule) -> Dict[str, str]:
    """Everything that keeps ``rule`` from being saved, keyed by field."""
    errors: Dict[str, str] = {}

    if not rule.actions:
        errors["actions"] = "At least one action is required"

    if rule.execution_mode == "specific" and rule.time_range is not None:
        start, end = rule.time_range
        if not start or not end:
            errors["timeRange"] = "Waktu mulai dan selesai harus diisi"

    if (
        rule.custom_interval is not None
        and rule.custom_interval < settings.min_interval_seconds
    ):
        errors["customInterval"] = (
            f"Interval minimal adalah {format_interval(settings.min_interval_seconds)}"
        )

    if not any(group.conditions for group in rule.rule_groups):
        errors["conditions"] = "At least one condition is required"

    if not rule.usernames:
        errors["targets"] = "At least one account must be selected"

    if not rule.name.strip():
        errors["ruleName"] = "Rule name is required"

    if not rule.category:
        errors["category"] = "Category is required"
    elif rule.category not in CATEGORIES:
        errors["category"] = f"Unknown category '{rule.category}'"

    return errors
