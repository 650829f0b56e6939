"""ADRULE — Evaluation Output Models."""

from typing import List, Optional

from pydantic import BaseModel


class ConditionOutcome(BaseModel):
    """Result of one comparison."""

    condition_id: str
    metric: str
    operator: str
    expected: Optional[float] = None
    actual: Optional[float] = None
    passed: bool
    reason: str = ""  # Why it failed without comparing: "missing_metric" | ...


class GroupOutcome(BaseModel):
    group_id: str
    logical_operator: str
    connector: Optional[str] = None  # How it joined the previous group
    passed: bool
    conditions: List[ConditionOutcome] = []


class EvaluationResult(BaseModel):
    """Whether a rule's conditions hold for one metrics snapshot."""

    matched: bool
    mode: str
    groups: List[GroupOutcome] = []
