"""ADRULE — Rules Backend Endpoints.

Rule CRUD, status toggling and the campaign listing, on top of
:class:`RulesAPIClient`. Saving recomputes the campaign assignments from a
fresh campaign listing.
"""

from datetime import date
from typing import List, Optional, Sequence

from adrule.config import settings
from adrule.connectors.rules_api.client import RulesAPIClient, RulesAPIError
from adrule.connectors.rules_api.transformer import (
    from_backend_document,
    parse_campaigns,
    parse_rules,
    to_backend_document,
)
from adrule.models.rule_models import Campaign, Rule
from adrule.rules.assignments import selectable_campaigns, with_assignments
from adrule.core.logging import bind, get_logger

logger = get_logger("rules_api.endpoints")

TOGGLEABLE_STATUSES = ("active", "paused")


class RuleEndpoints:
    """Rule operations against the backend."""

    def __init__(self, client: RulesAPIClient):
        self.client = client
        self.rules_path = settings.rules_api_rules_path.rstrip("/")
        self.campaigns_path = settings.rules_api_campaigns_path

    def _rule_path(self, rule_id: str) -> str:
        return f"{self.rules_path}/{rule_id}"

    # ── Reads ──

    async def list_rules(self) -> List[Rule]:
        data = await self.client.request("GET", self.rules_path)
        rules = parse_rules(data)
        logger.info(f"Fetched {len(rules)} rules")
        return rules

    async def get_rule(self, rule_id: str) -> Rule:
        data = await self.client.request("GET", self._rule_path(rule_id))
        return from_backend_document(data)

    async def list_campaigns(
        self, usernames: Sequence[str], day: Optional[date] = None
    ) -> List[Campaign]:
        """Selectable campaigns of ``usernames`` for ``day`` (default today)."""
        if not usernames:
            return []
        day_str = (day or date.today()).isoformat()
        data = await self.client.request(
            "GET",
            self.campaigns_path,
            params={
                "start_time": day_str,
                "end_time": day_str,
                "account_ids": ",".join(usernames),
            },
        )
        return selectable_campaigns(parse_campaigns(data))

    # ── Writes ──

    async def save_rule(self, rule: Rule, is_update: bool = False) -> Rule:
        """Create (POST) or update (PUT) a rule.

        Campaign ownership is re-read from the backend so the assignments
        reflect the current campaign list.
        """
        if is_update and not rule.id:
            raise RulesAPIError("Cannot update a rule without an id", 400)

        campaigns = await self.list_campaigns(rule.usernames)
        document = to_backend_document(with_assignments(rule, campaigns), is_update)
        log = bind(logger, rule_id=document["id"])

        if is_update:
            data = await self.client.request(
                "PUT", self._rule_path(document["id"]), json=document
            )
        else:
            data = await self.client.request("POST", self.rules_path, json=document)

        log.info(f"Rule {'updated' if is_update else 'created'}: {rule.name}")
        if isinstance(data, dict) and data:
            return from_backend_document({**document, **data})
        return from_backend_document(document)

    async def delete_rule(self, rule_id: str) -> None:
        await self.client.request("DELETE", self._rule_path(rule_id))
        bind(logger, rule_id=rule_id).info("Rule deleted")

    async def set_status(self, rule_id: str, status: str) -> Optional[dict]:
        """Toggle active/paused. May raise :class:`RuleLimitError`."""
        if status not in TOGGLEABLE_STATUSES:
            raise RulesAPIError(f"Status must be one of {TOGGLEABLE_STATUSES}", 400)
        data = await self.client.request(
            "PATCH", self._rule_path(rule_id), json={"status": status}
        )
        bind(logger, rule_id=rule_id).info(f"Rule status set to {status}")
        return data
