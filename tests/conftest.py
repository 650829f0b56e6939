"""Shared fixtures for rule compiler tests."""

import pytest

from adrule.models.rule_models import Action, Condition, ConditionGroup


def cond(metric: str, operator: str, value: str, **kwargs) -> Condition:
    return Condition(metric=metric, operator=operator, value=value, **kwargs)


def group(*conditions: Condition, type: str = "AND", logical: str = "AND", id: str | None = None) -> ConditionGroup:
    kwargs = {"id": id} if id else {}
    return ConditionGroup(
        type=type, logical_operator=logical, conditions=list(conditions), **kwargs
    )


@pytest.fixture
def roas_group() -> ConditionGroup:
    return group(cond("broad_roi", "less_than", "3"), type="IF", id="g1")


@pytest.fixture
def spend_click_group() -> ConditionGroup:
    return group(
        cond("cost", "greater_than", "500000"),
        cond("click", "less_than", "100"),
        logical="AND",
        id="g2",
    )


@pytest.fixture
def add_budget_action() -> Action:
    return Action(type="add_budget", amount="50000")
