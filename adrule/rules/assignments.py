"""ADRULE — Campaign Assignments.

Groups the selected campaign ids by the account that owns them. Ownership is
looked up in the campaign listing fetched at save time, so the mapping is
rebuilt on every save.
"""

from typing import Dict, Iterable, List, Sequence

from adrule.models.rule_models import Campaign, Rule
from adrule.core.logging import get_logger

logger = get_logger("rules.assignments")

SELECTABLE_STATES = frozenset({"ongoing", "paused"})


def selectable_campaigns(campaigns: Iterable[Campaign]) -> List[Campaign]:
    """Campaigns a rule may target; duplicates by id are dropped."""
    seen: set[str] = set()
    result: List[Campaign] = []
    for campaign in campaigns:
        if campaign.state not in SELECTABLE_STATES or campaign.id in seen:
            continue
        seen.add(campaign.id)
        result.append(campaign)
    return result


def build_campaign_assignments(
    campaign_ids: Sequence[str], campaigns: Iterable[Campaign]
) -> Dict[str, List[str]]:
    """``{username: [campaign_id, ...]}`` in selection order.

    Campaigns missing from the listing, or without an owning account, are
    left out.
    """
    owners = {c.id: c.account_username for c in campaigns}
    assignments: Dict[str, List[str]] = {}
    unowned = 0

    for campaign_id in campaign_ids:
        username = owners.get(campaign_id)
        if not username:
            unowned += 1
            continue
        assignments.setdefault(username, []).append(campaign_id)

    if unowned:
        logger.warning(f"{unowned} selected campaign(s) have no known owning account")
    return assignments


def with_assignments(rule: Rule, campaigns: Iterable[Campaign]) -> Rule:
    """Copy of ``rule`` with ``campaign_assignments`` recomputed."""
    return rule.model_copy(
        update={
            "campaign_assignments": build_campaign_assignments(
                rule.campaign_ids, campaigns
            )
        }
    )
