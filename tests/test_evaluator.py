"""
Tests for dry-run condition evaluation.

Run with: pytest tests/test_evaluator.py -v
"""

import pytest

from adrule.rules.evaluator import evaluate_condition, evaluate_rule_groups

from conftest import cond, group


class TestConditions:
    @pytest.mark.parametrize(
        "operator, value, expected",
        [
            ("greater_than", "2", True),
            ("less_than", "2", False),
            ("greater_equal", "2.5", True),
            ("less_equal", "2.5", True),
            ("equal", "2.505", True),
            ("not_equal", "2.505", False),
            ("not_equal", "3", True),
            (">", "2", True),
            ("<=", "2", False),
        ],
    )
    def test_operators(self, operator, value, expected):
        outcome = evaluate_condition(cond("broad_roi", operator, value), {"broad_roi": 2.5})
        assert outcome.passed is expected

    def test_missing_metric_fails(self):
        outcome = evaluate_condition(cond("click", "greater_than", "1"), {})
        assert not outcome.passed
        assert outcome.reason == "missing_metric"

    def test_invalid_value_fails(self):
        outcome = evaluate_condition(cond("click", "greater_than", "abc"), {"click": 5})
        assert outcome.reason == "invalid_value"

    def test_unknown_operator_fails(self):
        outcome = evaluate_condition(cond("click", "between", "1"), {"click": 5})
        assert outcome.reason == "unknown_operator"
        assert not outcome.passed


class TestGroups:
    def test_and_group(self, spend_click_group):
        metrics = {"cost": 600000, "click": 50}
        assert evaluate_rule_groups([spend_click_group], metrics).matched
        metrics["click"] = 150
        assert not evaluate_rule_groups([spend_click_group], metrics).matched

    def test_or_group(self):
        g = group(cond("click", "greater_than", "100"), cond("view", "greater_than", "100"), logical="OR")
        assert evaluate_rule_groups([g], {"click": 5, "view": 500}).matched

    def test_no_conditions_never_match(self):
        result = evaluate_rule_groups([group(type="IF")], {"click": 1})
        assert not result.matched
        assert result.groups == []

    def test_all_mode_requires_every_group(self, roas_group):
        second = group(cond("click", "greater_than", "10"), type="OR")
        result = evaluate_rule_groups([roas_group, second], {"broad_roi": 2, "click": 1}, mode="all")
        assert not result.matched
        assert [g.passed for g in result.groups] == [True, False]

    def test_connectors_mode_uses_group_types(self, roas_group):
        second = group(cond("click", "greater_than", "10"), type="OR")
        result = evaluate_rule_groups(
            [roas_group, second], {"broad_roi": 2, "click": 1}, mode="connectors"
        )
        assert result.matched
        assert result.groups[1].connector == "OR"

    def test_unknown_mode(self, roas_group):
        with pytest.raises(ValueError):
            evaluate_rule_groups([roas_group], {}, mode="any")
