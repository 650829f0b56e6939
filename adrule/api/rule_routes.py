"""ADRULE — Rule API Routes."""

from typing import Any, AsyncIterator, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from adrule.compiler.renderer import summarize
from adrule.connectors.rules_api.client import (
    RuleLimitError,
    RulesAPIClient,
    RulesAPIError,
)
from adrule.connectors.rules_api.endpoints import RuleEndpoints
from adrule.config import settings
from adrule.core.formatting import format_interval
from adrule.core.metric_registry import METRICS, MetricUnit, metrics_by_unit
from adrule.core.vocabulary import (
    ACTION_LABELS,
    BUDGET_ACTIONS,
    CAMPAIGN_ACTIONS,
    CATEGORIES,
    EXECUTION_MODES,
    INTERVAL_OPTIONS,
    MESSAGE_PLACEHOLDERS,
    OPERATOR_LABELS,
    PRIORITIES,
    STATUSES,
)
from adrule.models.evaluation_models import EvaluationResult
from adrule.models.expression_models import Token
from adrule.models.rule_models import Action, ConditionGroup, Rule, WireModel
from adrule.rules.evaluator import evaluate_rule_groups
from adrule.rules.validation import STEP_FIELDS, validate_rule_for_save
from adrule.core.logging import get_logger

logger = get_logger("api.rules")

router = APIRouter(prefix="/rules", tags=["Rules"])


async def get_rule_endpoints() -> AsyncIterator[RuleEndpoints]:
    """Yield backend endpoints, closing the client afterwards."""
    client = RulesAPIClient()
    try:
        yield RuleEndpoints(client)
    finally:
        await client.close()


def _backend_failure(e: RulesAPIError, action: str) -> HTTPException:
    if isinstance(e, RuleLimitError):
        return HTTPException(
            status_code=403,
            detail={
                "error": e.user_message,
                "usage": e.usage,
                "limit": e.limit,
            },
        )
    logger.error(f"{action} failed: {e}", extra={"status_code": e.status_code})
    status = e.status_code if 400 <= e.status_code < 500 else 502
    return HTTPException(
        status_code=status, detail={"error": str(e), "details": e.details}
    )


# ── Request / Response Models ──


class PreviewRequest(WireModel):
    """Request body for POST /rules/preview."""

    rule_groups: Optional[List[ConditionGroup]] = None
    actions: List[Action] = Field(default_factory=list)
    campaign_count: Optional[int] = None


class PreviewTokens(BaseModel):
    conditions: List[Token]
    actions: List[Token]


class PreviewResponse(BaseModel):
    """Response for POST /rules/preview."""

    status: str = "success"
    conditions: str
    actions: str
    summary: str
    tokens: PreviewTokens


class EvaluateRequest(WireModel):
    """Request body for POST /rules/evaluate."""

    rule_groups: Optional[List[ConditionGroup]] = None
    metrics: Dict[str, Any] = Field(default_factory=dict)
    mode: Optional[Literal["all", "connectors"]] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "ruleGroups": [
                        {
                            "id": "g1",
                            "type": "IF",
                            "logicalOperator": "AND",
                            "conditions": [
                                {"metric": "broad_roi", "operator": "less_than", "value": "3"}
                            ],
                        }
                    ],
                    "metrics": {"broad_roi": 2.4},
                }
            ]
        }
    }


class StatusRequest(BaseModel):
    status: Literal["active", "paused"]


# ── Compiler Endpoints ──


def _action_group(action_type: str) -> str:
    if action_type in BUDGET_ACTIONS:
        return "budget"
    if action_type in CAMPAIGN_ACTIONS:
        return "campaign"
    return "notification"



@router.get("/vocabulary")
async def get_vocabulary():
    """Lookup tables the rule builder renders its dropdowns from."""
    return {
        "metrics": [m.to_dict() for m in METRICS.values()],
        "operators": [{"value": k, "label": v} for k, v in OPERATOR_LABELS.items()],
        "actions": [
            {"value": k, "label": v, "group": _action_group(k)}
            for k, v in ACTION_LABELS.items()
        ],
        "currencyMetrics": [m.key for m in metrics_by_unit(MetricUnit.CURRENCY)],
        "messagePlaceholders": list(MESSAGE_PLACEHOLDERS),
        "categories": list(CATEGORIES),
        "priorities": list(PRIORITIES),
        "statuses": list(STATUSES),
        "executionModes": list(EXECUTION_MODES),
        "intervals": list(INTERVAL_OPTIONS),
        "minCustomInterval": {
            "seconds": settings.min_interval_seconds,
            "label": format_interval(settings.min_interval_seconds),
        },
    }


@router.post("/preview", response_model=PreviewResponse)
async def preview_rule(request: PreviewRequest):
    """Render the JIKA ... MAKA summary for a rule under construction."""
    summary = summarize(request.rule_groups, request.actions, request.campaign_count)
    return PreviewResponse(
        conditions=summary.conditions_text,
        actions=summary.actions_text,
        summary=summary.text,
        tokens=PreviewTokens(
            conditions=summary.conditions.tokens(),
            actions=summary.actions.tokens(),
        ),
    )


@router.post("/evaluate", response_model=EvaluationResult)
async def evaluate_rule(request: EvaluateRequest):
    """Check a rule's conditions against one metrics snapshot."""
    return evaluate_rule_groups(request.rule_groups, request.metrics, mode=request.mode)


# ── Backend-Backed Endpoints ──


@router.get("", response_model=List[Rule])
async def list_rules(endpoints: RuleEndpoints = Depends(get_rule_endpoints)):
    try:
        return await endpoints.list_rules()
    except RulesAPIError as e:
        raise _backend_failure(e, "Listing rules")


@router.get("/{rule_id}", response_model=Rule)
async def get_rule(rule_id: str, endpoints: RuleEndpoints = Depends(get_rule_endpoints)):
    try:
        return await endpoints.get_rule(rule_id)
    except RulesAPIError as e:
        raise _backend_failure(e, f"Fetching rule {rule_id}")


async def _save(rule: Rule, endpoints: RuleEndpoints, is_update: bool) -> Rule:
    errors = validate_rule_for_save(rule)
    if errors:
        # The builder jumps back to the earliest step with an error
        step = min(STEP_FIELDS[field] for field in errors)
        raise HTTPException(status_code=422, detail={"errors": errors, "step": step})
    try:
        return await endpoints.save_rule(rule, is_update=is_update)
    except RulesAPIError as e:
        raise _backend_failure(e, "Saving rule")


@router.post("", response_model=Rule, status_code=201)
async def create_rule(rule: Rule, endpoints: RuleEndpoints = Depends(get_rule_endpoints)):
    """Validate and create a rule on the backend (status ``draft``)."""
    return await _save(rule, endpoints, is_update=False)


@router.put("/{rule_id}", response_model=Rule)
async def update_rule(
    rule_id: str, rule: Rule, endpoints: RuleEndpoints = Depends(get_rule_endpoints)
):
    return await _save(rule.model_copy(update={"id": rule_id}), endpoints, is_update=True)


@router.delete("/{rule_id}", status_code=204)
async def delete_rule(rule_id: str, endpoints: RuleEndpoints = Depends(get_rule_endpoints)):
    try:
        await endpoints.delete_rule(rule_id)
    except RulesAPIError as e:
        raise _backend_failure(e, f"Deleting rule {rule_id}")


@router.patch("/{rule_id}/status")
async def set_rule_status(
    rule_id: str,
    request: StatusRequest,
    endpoints: RuleEndpoints = Depends(get_rule_endpoints),
):
    """Activate or pause a rule. 403 when the plan's active-rule limit is reached."""
    try:
        data = await endpoints.set_status(rule_id, request.status)
    except RulesAPIError as e:
        raise _backend_failure(e, f"Updating status of rule {rule_id}")
    return {"status": "success", "id": rule_id, "ruleStatus": request.status, "data": data}
