"""ADRULE — Rule Builder Stores.

In-memory state of one rule-editing session: the ordered condition groups
and the action list. Every mutation checks its preconditions and returns a
:class:`MutationResult`; rejected edits leave the store untouched.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from adrule.config import settings
from adrule.core.vocabulary import FIRST_GROUP_TYPE
from adrule.models.rule_models import Action, Condition, ConditionGroup
from adrule.rules.validation import (
    is_logical_operator,
    validate_action,
    validate_condition,
)
from adrule.core.logging import get_logger

logger = get_logger("rules.store")

EDITABLE_CONDITION_FIELDS = frozenset({"metric", "operator", "value"})


@dataclass(frozen=True)
class MutationResult:
    accepted: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.accepted


ACCEPTED = MutationResult(accepted=True)


def _reject(reason: str) -> MutationResult:
    logger.debug(f"Rejected edit: {reason}")
    return MutationResult(accepted=False, reason=reason)


# ─────────────────────────────────────────────
# CONDITION GROUPS
# ─────────────────────────────────────────────


class RuleGroupStore:
    """Ordered condition groups; there is always at least one."""

    def __init__(self, groups: Optional[Iterable[ConditionGroup]] = None) -> None:
        self._groups: List[ConditionGroup] = [
            g.model_copy(deep=True) for g in (groups or [])
        ]
        if not self._groups:
            self._groups.append(ConditionGroup.first())
        self._active_group_id = self._groups[0].id

    # ── Reads ──

    @property
    def groups(self) -> List[ConditionGroup]:
        """Snapshot of the groups; editing it does not touch the store."""
        return [g.model_copy(deep=True) for g in self._groups]

    @property
    def active_group_id(self) -> str:
        return self._active_group_id

    @property
    def has_conditions(self) -> bool:
        return any(g.conditions for g in self._groups)

    def get_group(self, group_id: str) -> Optional[ConditionGroup]:
        group = self._find(group_id)
        return group.model_copy(deep=True) if group else None

    def _find(self, group_id: str) -> Optional[ConditionGroup]:
        return next((g for g in self._groups if g.id == group_id), None)

    # ── Group Edits ──

    def set_active_group(self, group_id: str) -> MutationResult:
        if self._find(group_id) is None:
            return _reject(f"unknown group '{group_id}'")
        self._active_group_id = group_id
        return ACCEPTED

    def add_group(self) -> ConditionGroup:
        """Append an empty AND group and make it the editing target."""
        group = ConditionGroup(type="AND", logical_operator="AND")
        self._groups.append(group)
        self._active_group_id = group.id
        return group.model_copy(deep=True)

    def remove_group(self, group_id: str) -> MutationResult:
        if len(self._groups) <= 1:
            return _reject("the last group cannot be removed")
        group = self._find(group_id)
        if group is None:
            return _reject(f"unknown group '{group_id}'")

        self._groups.remove(group)
        if self._active_group_id == group_id:
            self._active_group_id = self._groups[0].id
        return ACCEPTED

    def set_group_logical_operator(self, group_id: str, operator: str) -> MutationResult:
        group = self._find(group_id)
        if group is None:
            return _reject(f"unknown group '{group_id}'")
        if not is_logical_operator(operator):
            return _reject(f"logical operator must be AND or OR, got '{operator}'")
        group.logical_operator = operator
        return ACCEPTED

    def set_group_combinator(self, group_id: str, group_type: str) -> MutationResult:
        group = self._find(group_id)
        if group is None:
            return _reject(f"unknown group '{group_id}'")
        if not (is_logical_operator(group_type) or group_type == FIRST_GROUP_TYPE):
            return _reject(f"group type must be AND, OR or IF, got '{group_type}'")
        group.type = group_type
        return ACCEPTED

    # ── Condition Edits ──

    def add_condition(self, group_id: str, condition: Condition) -> MutationResult:
        group = self._find(group_id)
        if group is None:
            return _reject(f"unknown group '{group_id}'")
        errors = validate_condition(condition)
        if errors:
            return _reject("; ".join(errors))
        if any(c.id == condition.id for g in self._groups for c in g.conditions):
            return _reject(f"duplicate condition id '{condition.id}'")

        group.conditions.append(
            condition.model_copy(update={"group_type": group.logical_operator})
        )
        return ACCEPTED

    def update_condition(
        self, group_id: str, condition_id: str, patch: Dict[str, Any]
    ) -> MutationResult:
        """Edit metric/operator/value in place; the id never changes."""
        group = self._find(group_id)
        if group is None:
            return _reject(f"unknown group '{group_id}'")
        idx = next(
            (i for i, c in enumerate(group.conditions) if c.id == condition_id), None
        )
        if idx is None:
            return _reject(f"unknown condition '{condition_id}'")
        illegal = set(patch) - EDITABLE_CONDITION_FIELDS
        if illegal:
            return _reject(f"fields not editable: {', '.join(sorted(illegal))}")

        updated = group.conditions[idx].model_copy(
            update={k: str(v) for k, v in patch.items()}
        )
        errors = validate_condition(updated)
        if errors:
            return _reject("; ".join(errors))
        group.conditions[idx] = updated
        return ACCEPTED

    def remove_condition(self, group_id: str, index: int) -> MutationResult:
        group = self._find(group_id)
        if group is None:
            return _reject(f"unknown group '{group_id}'")
        if not 0 <= index < len(group.conditions):
            return _reject(f"no condition at index {index}")
        del group.conditions[index]
        return ACCEPTED


# ─────────────────────────────────────────────
# ACTIONS
# ─────────────────────────────────────────────


class ActionStore:
    """Actions of the rule being edited, capped at ``max_actions``."""

    def __init__(
        self,
        actions: Optional[Iterable[Action]] = None,
        max_actions: Optional[int] = None,
    ) -> None:
        self._actions: List[Action] = [a.model_copy(deep=True) for a in (actions or [])]
        self.max_actions = (
            settings.max_actions_per_rule if max_actions is None else max_actions
        )

    @property
    def actions(self) -> List[Action]:
        return [a.model_copy(deep=True) for a in self._actions]

    @property
    def can_add(self) -> bool:
        return self.max_actions <= 0 or len(self._actions) < self.max_actions

    def add_action(self, action: Action) -> MutationResult:
        if not self.can_add:
            return _reject(f"a rule can have at most {self.max_actions} action(s)")
        errors = validate_action(action)
        if errors:
            return _reject("; ".join(errors))
        if any(a.id == action.id for a in self._actions):
            return _reject(f"duplicate action id '{action.id}'")
        self._actions.append(action.model_copy(deep=True))
        return ACCEPTED

    def update_action(self, action_id: str, patch: Dict[str, Any]) -> MutationResult:
        idx = next((i for i, a in enumerate(self._actions) if a.id == action_id), None)
        if idx is None:
            return _reject(f"unknown action '{action_id}'")
        if "id" in patch:
            return _reject("fields not editable: id")

        data = self._actions[idx].model_dump()
        data.update(patch)
        try:
            updated = Action.model_validate(data)
        except ValueError as e:
            return _reject(str(e))
        errors = validate_action(updated)
        if errors:
            return _reject("; ".join(errors))
        self._actions[idx] = updated
        return ACCEPTED

    def remove_action(self, action_id: str) -> MutationResult:
        before = len(self._actions)
        self._actions = [a for a in self._actions if a.id != action_id]
        if len(self._actions) == before:
            return _reject(f"unknown action '{action_id}'")
        return ACCEPTED
