"""ADRULE — Action Expression Compiler.

Turns a rule's actions into the MAKA clause, one line per action:

    MAKA
     Tambah Budget Rp 50.000;
     Notifikasi Telegram: "ROAS turun"

Campaign start/pause lines carry no target information of their own; the
number of selected campaigns can be supplied by the caller and is shown as
``(N iklan)``.
"""

from typing import List, Optional, Sequence

from adrule.core.formatting import format_amount, format_percentage
from adrule.core.vocabulary import (
    ACTION_HEADING,
    ACTION_LABELS,
    ADJUSTABLE_BUDGET_ACTIONS,
    ActionType,
    EMPTY_MESSAGE_LABEL,
    NO_ACTIONS_TEXT,
    UNKNOWN_ACTION_LABEL,
)
from adrule.models.expression_models import (
    CompiledClause,
    ExpressionLine,
    Token,
    TokenKind,
)
from adrule.models.rule_models import Action
from adrule.core.logging import get_logger

logger = get_logger("compiler.actions")

ACTION_LINE_SEPARATOR = ";\n"

_COUNTED_CAMPAIGN_ACTIONS = frozenset(
    {ActionType.START_CAMPAIGN.value, ActionType.PAUSE_CAMPAIGN.value}
)


def _label(action: Action) -> Token:
    text = ACTION_LABELS.get(action.type) or action.label or action.type
    return Token(kind=TokenKind.ACTION, text=text or UNKNOWN_ACTION_LABEL)


def _payload(text: str) -> Token:
    return Token(kind=TokenKind.PAYLOAD, text=text)


def _wants_percentage(action: Action) -> bool:
    if action.adjustment_type == "percentage":
        return True
    return action.adjustment_type is None and action.amount is None


def compile_action(
    action: Action, campaign_count: Optional[int] = None
) -> ExpressionLine:
    """Compile a single action into one line."""
    tokens: List[Token] = [_label(action)]

    if action.type in ADJUSTABLE_BUDGET_ACTIONS:
        if _wants_percentage(action) and action.percentage:
            tokens.append(_payload(format_percentage(action.percentage)))
        elif action.amount:
            tokens.append(_payload(format_amount(action.amount)))

    elif action.type == ActionType.SET_BUDGET.value:
        if action.amount is not None:
            tokens.append(_payload(format_amount(action.amount)))

    elif action.type in _COUNTED_CAMPAIGN_ACTIONS:
        if campaign_count is not None:
            tokens.append(_payload(f"({campaign_count} iklan)"))

    elif action.type == ActionType.TELEGRAM_NOTIFICATION.value:
        message = action.message if action.message and action.message.strip() else None
        tokens = [Token(kind=TokenKind.ACTION, text=f"{tokens[0].text}:")]
        tokens.append(_payload(f'"{message or EMPTY_MESSAGE_LABEL}"'))

    return ExpressionLine(tokens=tokens)


def compile_actions(
    actions: Optional[Sequence[Action]], campaign_count: Optional[int] = None
) -> CompiledClause:
    """Compile actions into the MAKA clause."""
    if not actions:
        return CompiledClause(heading=ACTION_HEADING, fallback=NO_ACTIONS_TEXT)

    lines = [compile_action(a, campaign_count) for a in actions]
    logger.debug(f"Compiled {len(lines)} action(s)")
    return CompiledClause(
        heading=ACTION_HEADING,
        lines=lines,
        line_separator=ACTION_LINE_SEPARATOR,
    )
