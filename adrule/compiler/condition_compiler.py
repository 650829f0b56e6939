"""ADRULE — Condition Expression Compiler.

Turns rule groups into the JIKA clause:

    JIKA
     (Spend lebih dari Rp 500.000 DAN Klik kurang dari 100)
     ATAU
     ROAS kurang dari 3

- Groups without conditions are skipped entirely.
- A group with more than one condition is wrapped in parentheses.
- The connector between two groups comes from the *second* group's ``type``.
- Numeric values >= the currency threshold render as Rupiah, whatever the metric.

Never raises: unknown metrics/operators pass through and a missing or empty
group list yields the fallback sentence.
"""

from typing import List, Optional, Sequence

from adrule.config import settings
from adrule.core.formatting import format_condition_value
from adrule.core.metric_registry import metric_label
from adrule.core.vocabulary import (
    CONDITION_HEADING,
    NO_CONDITIONS_TEXT,
    connector_word,
    operator_phrase,
)
from adrule.models.expression_models import (
    CompiledClause,
    ExpressionLine,
    Token,
    TokenKind,
)
from adrule.models.rule_models import Condition, ConditionGroup
from adrule.core.logging import get_logger

logger = get_logger("compiler.conditions")


def compile_condition(
    condition: Condition, currency_threshold: Optional[float] = None
) -> List[Token]:
    """``metric-label operator-phrase formatted-value`` tokens."""
    threshold = (
        settings.currency_threshold if currency_threshold is None else currency_threshold
    )
    return [
        Token(kind=TokenKind.METRIC, text=metric_label(condition.metric)),
        Token(kind=TokenKind.OPERATOR, text=operator_phrase(condition.operator)),
        Token(
            kind=TokenKind.VALUE,
            text=format_condition_value(condition.value, threshold),
        ),
    ]


def compile_group(
    group: ConditionGroup, currency_threshold: Optional[float] = None
) -> ExpressionLine:
    """One line for a non-empty group."""
    connector = connector_word(group.logical_operator)
    tokens: List[Token] = []
    for idx, condition in enumerate(group.conditions):
        if idx > 0:
            tokens.append(Token(kind=TokenKind.CONNECTOR, text=connector))
        tokens.extend(compile_condition(condition, currency_threshold))

    if len(group.conditions) > 1:
        tokens.insert(0, Token(kind=TokenKind.GROUP_OPEN, text="("))
        tokens.append(Token(kind=TokenKind.GROUP_CLOSE, text=")"))
    return ExpressionLine(tokens=tokens)


def compile_conditions(
    groups: Optional[Sequence[ConditionGroup]],
    currency_threshold: Optional[float] = None,
) -> CompiledClause:
    """Compile rule groups into the JIKA clause."""
    surviving = [g for g in (groups or []) if g.conditions]

    if not surviving:
        return CompiledClause(
            heading=CONDITION_HEADING,
            fallback=NO_CONDITIONS_TEXT,
            inline_fallback=True,
        )

    lines: List[ExpressionLine] = []
    for idx, group in enumerate(surviving):
        if idx > 0:
            # Look-ahead: the incoming group decides how it joins the previous one
            lines.append(
                ExpressionLine(
                    tokens=[
                        Token(
                            kind=TokenKind.GROUP_CONNECTOR,
                            text=connector_word(group.type),
                        )
                    ]
                )
            )
        lines.append(compile_group(group, currency_threshold))

    logger.debug(
        f"Compiled {len(surviving)} condition group(s) "
        f"({len(groups or []) - len(surviving)} empty skipped)"
    )
    return CompiledClause(heading=CONDITION_HEADING, lines=lines)
