"""
Tests for the rules backend client and endpoints, against a stubbed transport.

Run with: pytest tests/test_rules_client.py -v
"""

import json

import httpx
import pytest

from adrule.connectors.rules_api import client as client_module
from adrule.connectors.rules_api.client import RuleLimitError, RulesAPIClient, RulesAPIError
from adrule.connectors.rules_api.endpoints import RuleEndpoints
from adrule.connectors.rules_api.transformer import (
    from_backend_document,
    parse_campaigns,
    parse_rules,
    to_backend_document,
)
from adrule.models.rule_models import Action, Condition, Rule
from adrule.rules.group_store import RuleGroupStore

BASE_URL = "http://backend.test/api"

CAMPAIGNS = [
    {"id": 111, "title": "Sepatu", "account_username": "toko1", "state": "ongoing"},
    {"id": 222, "title": "Tas", "account_username": "toko2", "state": "paused"},
    {"id": 333, "title": "Lama", "account_username": "toko1", "state": "ended"},
]


@pytest.fixture(autouse=True)
def no_backoff(monkeypatch):
    monkeypatch.setattr(client_module, "RETRY_BASE_DELAY", 0)


def make_client(handler, max_retries: int = 3) -> RulesAPIClient:
    return RulesAPIClient(
        base_url=BASE_URL,
        token="secret",
        max_retries=max_retries,
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture
def rule(roas_group) -> Rule:
    return Rule(
        name="Scale winners",
        category="Scaling",
        rule_groups=[roas_group],
        actions=[Action(type="add_budget", amount="50000")],
        usernames=["toko1", "toko2"],
        campaign_ids=["111", "222"],
        triggers=12,
    )


class TestClient:
    @pytest.mark.asyncio
    async def test_unwraps_envelope_and_sends_token(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("authorization")
            seen["path"] = request.url.path
            return httpx.Response(200, json={"success": True, "data": [{"id": "r1"}]})

        async with make_client(handler) as client:
            data = await client.request("GET", "/automation-rules")

        assert data == [{"id": "r1"}]
        assert seen == {"auth": "Bearer secret", "path": "/api/automation-rules"}

    @pytest.mark.asyncio
    async def test_retries_server_errors(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) < 3:
                return httpx.Response(503, json={"error": "busy"})
            return httpx.Response(200, json={"success": True, "data": {"ok": True}})

        async with make_client(handler) as client:
            assert await client.request("GET", "/automation-rules") == {"ok": True}
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self):
        def handler(request):
            return httpx.Response(500, json={"success": False, "error": "boom"})

        async with make_client(handler, max_retries=2) as client:
            with pytest.raises(RulesAPIError) as exc:
                await client.request("GET", "/automation-rules")
        assert exc.value.status_code == 500
        assert str(exc.value) == "boom"

    @pytest.mark.asyncio
    async def test_client_errors_are_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(404, json={"success": False, "error": "Rule not found"})

        async with make_client(handler) as client:
            with pytest.raises(RulesAPIError) as exc:
                await client.request("GET", "/automation-rules/x")
        assert exc.value.status_code == 404
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_limit_rejection(self):
        def handler(request):
            return httpx.Response(
                403, json={"success": False, "error": "Batas tercapai", "usage": 5, "limit": -1}
            )

        async with make_client(handler) as client:
            with pytest.raises(RuleLimitError) as exc:
                await client.request("PATCH", "/automation-rules/r1", json={"status": "active"})
        assert (exc.value.usage, exc.value.limit) == (5, -1)
        assert "Usage: 5/Unlimited" in exc.value.user_message

    @pytest.mark.asyncio
    async def test_unsuccessful_envelope_on_2xx(self):
        def handler(request):
            return httpx.Response(200, json={"success": False, "error": "Invalid", "details": ["name"]})

        async with make_client(handler) as client:
            with pytest.raises(RulesAPIError) as exc:
                await client.request("POST", "/automation-rules", json={})
        assert exc.value.details == ["name"]

    @pytest.mark.asyncio
    async def test_connection_failure(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        async with make_client(handler, max_retries=2) as client:
            with pytest.raises(RulesAPIError, match="Connection failed"):
                await client.request("GET", "/automation-rules")


class TestEndpoints:
    @pytest.mark.asyncio
    async def test_create_recomputes_assignments_and_drops_telemetry(self, rule):
        posted = {}

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/api/campaigns/shopee":
                posted["account_ids"] = request.url.params["account_ids"]
                return httpx.Response(200, json={"success": True, "data": CAMPAIGNS})
            body = json.loads(request.content)
            posted["method"] = request.method
            posted["body"] = body
            return httpx.Response(201, json={"success": True, "data": {"id": body["id"]}})

        async with make_client(handler) as client:
            saved = await RuleEndpoints(client).save_rule(rule)

        body = posted["body"]
        assert posted["method"] == "POST"
        assert posted["account_ids"] == "toko1,toko2"
        assert body["campaignAssignments"] == {"toko1": ["111"], "toko2": ["222"]}
        assert body["status"] == "draft"
        assert "triggers" not in body
        assert body["summary"] == (
            "JIKA\n ROAS kurang dari 3\n\nMAKA\n Tambah Budget Rp 50.000"
        )
        assert saved.id == body["id"]
        assert saved.created_at and saved.updated_at

    @pytest.mark.asyncio
    async def test_update_keeps_status_and_uses_put(self, rule):
        methods = []

        def handler(request):
            if request.url.path.endswith("/campaigns/shopee"):
                return httpx.Response(200, json={"success": True, "data": []})
            methods.append((request.method, request.url.path))
            return httpx.Response(200, json={"success": True})

        existing = rule.model_copy(update={"id": "r9", "status": "active"})
        async with make_client(handler) as client:
            saved = await RuleEndpoints(client).save_rule(existing, is_update=True)

        assert methods == [("PUT", "/api/automation-rules/r9")]
        assert saved.status == "active"

    @pytest.mark.asyncio
    async def test_update_without_id(self, rule):
        async with make_client(lambda r: httpx.Response(200)) as client:
            with pytest.raises(RulesAPIError):
                await RuleEndpoints(client).save_rule(rule, is_update=True)

    @pytest.mark.asyncio
    async def test_list_rules_skips_malformed_documents(self):
        def handler(request):
            return httpx.Response(
                200,
                json={
                    "success": True,
                    "data": [
                        {"id": "r1", "name": "ok", "actionsDetail": [{"type": "pause_campaign"}]},
                        {"id": "r2", "priority": "urgent"},
                    ],
                },
            )

        async with make_client(handler) as client:
            rules = await RuleEndpoints(client).list_rules()

        assert [r.id for r in rules] == ["r1"]
        assert rules[0].actions[0].type == "pause_campaign"

    @pytest.mark.asyncio
    async def test_set_status_rejects_other_states(self):
        async with make_client(lambda r: httpx.Response(200)) as client:
            with pytest.raises(RulesAPIError):
                await RuleEndpoints(client).set_status("r1", "error")

    @pytest.mark.asyncio
    async def test_delete(self):
        seen = []

        def handler(request):
            seen.append((request.method, request.url.path))
            return httpx.Response(204)

        async with make_client(handler) as client:
            await RuleEndpoints(client).delete_rule("r1")
        assert seen == [("DELETE", "/api/automation-rules/r1")]


class TestTransformer:
    def test_missing_document_is_backend_failure(self):
        with pytest.raises(RulesAPIError) as exc:
            from_backend_document(None)
        assert exc.value.status_code == 502

    def test_invalid_document_lists_field_errors(self):
        with pytest.raises(RulesAPIError) as exc:
            from_backend_document({"id": "r1", "priority": "urgent"})
        assert exc.value.status_code == 502
        assert exc.value.details[0]["loc"] == ["priority"]

    def test_listing_skips_non_objects(self):
        rules = parse_rules([{"id": "r1"}, "garbage", None])
        assert [r.id for r in rules] == ["r1"]

    def test_campaign_rows_without_id_are_skipped(self):
        campaigns = parse_campaigns([{"title": "no id"}, {"id": 5, "state": "ongoing"}])
        assert [c.id for c in campaigns] == ["5"]

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        async with make_client(lambda r: httpx.Response(200, text="oops")) as api:
            with pytest.raises(RulesAPIError) as exc:
                await api.request("GET", "/automation-rules")
        assert exc.value.status_code == 502

    def test_document_keeps_condition_group_type(self):
        store = RuleGroupStore()
        gid = store.active_group_id
        store.set_group_logical_operator(gid, "OR")
        store.add_condition(gid, Condition(metric="cpc", operator="less_than", value="500"))

        document = to_backend_document(Rule(name="Cheap clicks", rule_groups=store.groups))
        condition = document["ruleGroups"][0]["conditions"][0]
        assert condition["groupType"] == "OR"
