"""ADRULE — Rule ↔ Backend Document Transformer.

Builds the JSON document the backend stores for a rule and parses the
documents it returns. Backend-owned telemetry is dropped on the way out.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List

from pydantic import ValidationError

from adrule.compiler.renderer import summarize_rule
from adrule.connectors.rules_api.client import RulesAPIError
from adrule.models.rule_models import TELEMETRY_FIELDS, Campaign, Rule, new_id
from adrule.core.logging import get_logger

logger = get_logger("rules_api.transformer")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def to_backend_document(rule: Rule, is_update: bool = False) -> Dict[str, Any]:
    """Wire document for POST/PUT, including the rendered rule summary."""
    now = _now_iso()
    stamped = rule.model_copy(
        update={
            "id": rule.id or new_id(),
            "status": rule.status if is_update else "draft",
            "created_at": rule.created_at or now,
            "updated_at": now,
        }
    )
    document = stamped.to_wire(exclude=set(TELEMETRY_FIELDS))
    document["summary"] = summarize_rule(stamped).text
    return document


def _validate_document(payload: Dict[str, Any]) -> Rule:
    # Older documents list actions under actionsDetail
    if not payload.get("actions") and payload.get("actionsDetail"):
        payload = {**payload, "actions": payload["actionsDetail"]}
    return Rule.model_validate(payload)


def from_backend_document(payload: Any) -> Rule:
    """Parse one rule returned by the backend.

    A missing or malformed document raises :class:`RulesAPIError` with status
    502.
    """
    if not isinstance(payload, dict):
        raise RulesAPIError("Backend returned no rule document", 502)
    try:
        return _validate_document(payload)
    except ValidationError as e:
        raise RulesAPIError(
            f"Backend returned a malformed rule document: {e.error_count()} error(s)",
            502,
            [{"loc": list(err["loc"]), "msg": err["msg"]} for err in e.errors()],
        ) from e


def parse_rules(payload: Any) -> List[Rule]:
    """Parse a rule listing, skipping documents that fail validation."""
    rules: List[Rule] = []
    for item in payload or []:
        if not isinstance(item, dict):
            logger.warning(f"Skipping non-object rule entry: {type(item).__name__}")
            continue
        try:
            rules.append(_validate_document(item))
        except ValidationError as e:
            logger.warning(
                f"Skipping malformed rule document: {e.error_count()} error(s)",
                extra={"rule_id": item.get("id")},
            )
    return rules


def parse_campaigns(payload: Any) -> List[Campaign]:
    """Parse the campaign listing used for target assignment.

    Rows without a usable id are skipped like malformed rule documents.
    """
    campaigns: List[Campaign] = []
    for item in payload or []:
        try:
            campaigns.append(Campaign.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping malformed campaign row: {e.error_count()} error(s)")
    return campaigns
