"""ADRULE — Rule Vocabulary.

Static lookup tables shared by the builder, the compilers and the evaluator:
comparison operators, action types, group connectors, categories and
priorities. Tables are read-only mappings.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Tuple


class Operator(str, Enum):
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    GREATER_EQUAL = "greater_equal"
    LESS_EQUAL = "less_equal"
    EQUAL = "equal"
    NOT_EQUAL = "not_equal"


class LogicalOperator(str, Enum):
    AND = "AND"
    OR = "OR"


class ActionType(str, Enum):
    ADD_BUDGET = "add_budget"
    REDUCE_BUDGET = "reduce_budget"
    SUBTRACT_BUDGET = "subtract_budget"  # Legacy alias of reduce_budget
    SET_BUDGET = "set_budget"
    START_CAMPAIGN = "start_campaign"
    PAUSE_CAMPAIGN = "pause_campaign"
    DUPLICATE_CAMPAIGN = "duplicate_campaign"
    TELEGRAM_NOTIFICATION = "telegram_notification"


# First group in a rule carries this marker instead of a combinator
FIRST_GROUP_TYPE = "IF"

# ── Operators ──

OPERATOR_PHRASES: Mapping[str, str] = MappingProxyType(
    {
        Operator.GREATER_THAN.value: "lebih dari",
        Operator.LESS_THAN.value: "kurang dari",
        Operator.GREATER_EQUAL.value: "lebih dari atau sama dengan",
        Operator.LESS_EQUAL.value: "kurang dari atau sama dengan",
        Operator.EQUAL.value: "sama dengan",
        Operator.NOT_EQUAL.value: "tidak sama dengan",
    }
)

# Builder dropdown labels
OPERATOR_LABELS: Mapping[str, str] = MappingProxyType(
    {
        Operator.GREATER_THAN.value: "Lebih dari (>)",
        Operator.LESS_THAN.value: "Kurang dari (<)",
        Operator.GREATER_EQUAL.value: "Lebih dari atau sama dengan (>=)",
        Operator.LESS_EQUAL.value: "Kurang dari atau sama dengan (<=)",
        Operator.EQUAL.value: "Sama dengan (=)",
        Operator.NOT_EQUAL.value: "Tidak sama dengan (!=)",
    }
)

# Symbolic forms stored by older rule documents
OPERATOR_SYMBOLS: Mapping[str, str] = MappingProxyType(
    {
        ">": Operator.GREATER_THAN.value,
        "<": Operator.LESS_THAN.value,
        ">=": Operator.GREATER_EQUAL.value,
        "<=": Operator.LESS_EQUAL.value,
        "=": Operator.EQUAL.value,
        "!=": Operator.NOT_EQUAL.value,
    }
)

# ── Actions ──

ACTION_LABELS: Mapping[str, str] = MappingProxyType(
    {
        ActionType.ADD_BUDGET.value: "Tambah Budget",
        ActionType.REDUCE_BUDGET.value: "Kurangi Budget",
        ActionType.SUBTRACT_BUDGET.value: "Kurangi Budget",
        ActionType.SET_BUDGET.value: "Set Budget",
        ActionType.START_CAMPAIGN.value: "Mulai Iklan",
        ActionType.PAUSE_CAMPAIGN.value: "Pause Iklan",
        ActionType.DUPLICATE_CAMPAIGN.value: "Duplikat Iklan",
        ActionType.TELEGRAM_NOTIFICATION.value: "Notifikasi Telegram",
    }
)

BUDGET_ACTIONS = frozenset(
    {
        ActionType.ADD_BUDGET.value,
        ActionType.REDUCE_BUDGET.value,
        ActionType.SUBTRACT_BUDGET.value,
        ActionType.SET_BUDGET.value,
    }
)

# Budget actions that accept a percentage instead of a fixed amount
ADJUSTABLE_BUDGET_ACTIONS = frozenset(
    {
        ActionType.ADD_BUDGET.value,
        ActionType.REDUCE_BUDGET.value,
        ActionType.SUBTRACT_BUDGET.value,
    }
)

CAMPAIGN_ACTIONS = frozenset(
    {
        ActionType.START_CAMPAIGN.value,
        ActionType.PAUSE_CAMPAIGN.value,
        ActionType.DUPLICATE_CAMPAIGN.value,
    }
)

UNKNOWN_ACTION_LABEL = "Aksi Tidak Dikenal"
EMPTY_MESSAGE_LABEL = "Pesan kosong"

# Placeholders a notification message may embed
MESSAGE_PLACEHOLDERS: Tuple[str, ...] = ("{ruleName}", "{time}", "{action}")

# ── Connectors & Headings ──

CONNECTOR_WORDS: Mapping[str, str] = MappingProxyType(
    {LogicalOperator.AND.value: "DAN", LogicalOperator.OR.value: "ATAU"}
)

CONDITION_HEADING = "JIKA"
ACTION_HEADING = "MAKA"
NO_CONDITIONS_TEXT = "tidak ada kondisi yang ditetapkan"
NO_ACTIONS_TEXT = "tidak ada aksi yang dikonfigurasi"

# ── Rule Metadata ──

CATEGORIES: Tuple[str, ...] = (
    "General",
    "Budget Management",
    "Performance",
    "Scaling",
    "Scheduling",
)

PRIORITIES: Tuple[str, ...] = ("low", "medium", "high")
STATUSES: Tuple[str, ...] = ("active", "paused", "error", "draft")
EXECUTION_MODES: Tuple[str, ...] = ("continuous", "specific", "interval")

INTERVAL_OPTIONS: Tuple[str, ...] = (
    "10 menit",
    "15 menit",
    "30 menit",
    "1 jam",
    "2 jam",
    "6 jam",
    "12 jam",
)


def operator_phrase(operator: str) -> str:
    """Indonesian phrase for ``operator``; unknown operators pass through."""
    return OPERATOR_PHRASES.get(operator, operator)


def connector_word(logical_operator: str) -> str:
    """``DAN`` for AND, ``ATAU`` for anything else."""
    if logical_operator == LogicalOperator.AND.value:
        return CONNECTOR_WORDS[LogicalOperator.AND.value]
    return CONNECTOR_WORDS[LogicalOperator.OR.value]


def normalize_operator(operator: str) -> str:
    """Map symbolic operators to their named form."""
    return OPERATOR_SYMBOLS.get(operator, operator)
