"""ADRULE — Rule Document Models.

The automation rule as it is round-tripped with the rules backend. Field names
are snake_case in Python and camelCase on the wire.
"""

import uuid
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from adrule.core.vocabulary import FIRST_GROUP_TYPE

# Backend-owned fields; read for display, never written back
TELEMETRY_FIELDS = frozenset(
    {
        "triggers",
        "success_rate",
        "error_count",
        "last_run",
        "last_check",
        "next_check",
    }
)

RANGE_MARKER = "RANGE"


def new_id() -> str:
    return uuid.uuid4().hex


class WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "coerce_numbers_to_str": True,
    }

    def to_wire(self, **kwargs) -> dict:
        return self.model_dump(by_alias=True, mode="json", **kwargs)


# ─────────────────────────────────────────────
# CONDITIONS
# ─────────────────────────────────────────────


class Condition(WireModel):
    """One metric comparison: ``metric operator value``."""

    id: str = Field(default_factory=new_id)
    metric: str = ""
    operator: str = ""
    value: str = ""
    """Kept as entered so edits round-trip; parsed only when formatting/evaluating."""
    group_type: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.metric and self.operator and self.value)


class ConditionGroup(WireModel):
    """Conditions joined by ``logical_operator``.

    ``type`` joins this group to the one before it; the first group carries
    the ``IF`` marker.
    """

    id: str = Field(default_factory=lambda: f"group-{new_id()}")
    type: str = "AND"
    logical_operator: str = "AND"
    conditions: List[Condition] = Field(default_factory=list)

    @classmethod
    def first(cls, **kwargs) -> "ConditionGroup":
        return cls(type=FIRST_GROUP_TYPE, **kwargs)


# ─────────────────────────────────────────────
# ACTIONS
# ─────────────────────────────────────────────


class Action(WireModel):
    """An effect applied when the conditions hold."""

    id: str = Field(default_factory=new_id)
    type: str = ""
    label: Optional[str] = None
    adjustment_type: Optional[Literal["amount", "percentage"]] = None
    amount: Optional[str] = None
    """Digits, possibly with ``.`` thousands separators."""
    percentage: Optional[float] = Field(default=None, ge=0, le=100)
    message: Optional[str] = None
    """May embed ``{ruleName}``, ``{time}`` and ``{action}`` placeholders."""

    @field_validator("adjustment_type", "amount", "percentage", "message", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


# ─────────────────────────────────────────────
# CAMPAIGNS
# ─────────────────────────────────────────────


class Campaign(BaseModel):
    """Campaign row from the backend's campaign listing."""

    model_config = {"coerce_numbers_to_str": True}

    id: str
    title: str = ""
    account_username: Optional[str] = None
    account_id: Optional[str] = None
    state: str = ""


# ─────────────────────────────────────────────
# RULE
# ─────────────────────────────────────────────


class Rule(WireModel):
    """Automation rule document."""

    id: Optional[str] = None
    name: str = ""
    description: str = ""
    category: str = ""
    priority: Literal["low", "medium", "high"] = "medium"
    status: Literal["active", "paused", "error", "draft"] = "draft"

    # ── Schedule ──
    execution_mode: Literal["continuous", "specific", "interval"] = "continuous"
    selected_times: List[str] = Field(default_factory=list)
    selected_days: List[str] = Field(default_factory=list)
    selected_dates: List[str] = Field(default_factory=list)
    date_time_map: Dict[str, List[str]] = Field(default_factory=dict)
    selected_interval: Optional[str] = "15 menit"
    custom_interval: Optional[int] = None
    """Seconds."""

    # ── Logic ──
    rule_groups: List[ConditionGroup] = Field(default_factory=list)
    actions: List[Action] = Field(default_factory=list)
    telegram_notification: Optional[bool] = None

    # ── Targets ──
    usernames: List[str] = Field(default_factory=list)
    campaign_ids: List[str] = Field(default_factory=list)
    campaign_assignments: Dict[str, List[str]] = Field(default_factory=dict)

    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    # ── Telemetry (backend-owned) ──
    triggers: Optional[int] = None
    success_rate: Optional[float] = None
    error_count: Optional[int] = None
    last_run: Optional[str] = None
    last_check: Optional[str] = None
    next_check: Optional[str] = None

    @field_validator("custom_interval", mode="before")
    @classmethod
    def _parse_interval(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        if isinstance(v, str):
            return int(float(v))
        return v

    @property
    def time_range(self) -> Optional[tuple[str, str]]:
        """``(start, end)`` when times are stored as ``["RANGE", start, end]``."""
        if self.selected_times and self.selected_times[0] == RANGE_MARKER:
            start = self.selected_times[1] if len(self.selected_times) > 1 else ""
            end = self.selected_times[2] if len(self.selected_times) > 2 else ""
            return start, end
        return None
