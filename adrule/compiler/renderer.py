"""ADRULE — Plain-Text Rendering.

Renders compiled clauses as the text persisted with a rule and shown in
previews. Body lines are indented by one space under their heading.
"""

from typing import Optional, Sequence

from adrule.compiler.action_compiler import compile_actions
from adrule.compiler.condition_compiler import compile_conditions
from adrule.models.expression_models import CompiledClause, RuleSummary
from adrule.models.rule_models import Action, ConditionGroup, Rule

LINE_INDENT = " "
CLAUSE_SEPARATOR = "\n\n"


def render_text(clause: CompiledClause) -> str:
    if clause.is_empty:
        joiner = " " if clause.inline_fallback else f"\n{LINE_INDENT}"
        return f"{clause.heading}{joiner}{clause.fallback}"

    body = clause.line_separator.join(LINE_INDENT + line.text for line in clause.lines)
    return f"{clause.heading}\n{body}"


def summarize(
    groups: Optional[Sequence[ConditionGroup]],
    actions: Optional[Sequence[Action]],
    campaign_count: Optional[int] = None,
    currency_threshold: Optional[float] = None,
) -> RuleSummary:
    """Compile and render both clauses from scratch."""
    conditions = compile_conditions(groups, currency_threshold)
    action_clause = compile_actions(actions, campaign_count)
    conditions_text = render_text(conditions)
    actions_text = render_text(action_clause)
    return RuleSummary(
        conditions=conditions,
        actions=action_clause,
        conditions_text=conditions_text,
        actions_text=actions_text,
        text=f"{conditions_text}{CLAUSE_SEPARATOR}{actions_text}",
    )


def summarize_rule(rule: Rule, campaign_count: Optional[int] = None) -> RuleSummary:
    """Summary for a full rule document.

    Without an explicit ``campaign_count`` the rule's own campaign selection is
    used when it has one.
    """
    if campaign_count is None and rule.campaign_ids:
        campaign_count = len(rule.campaign_ids)
    return summarize(rule.rule_groups, rule.actions, campaign_count)
