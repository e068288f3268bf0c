"""Test the admin review endpoints: pending list and validate/reject."""
from sqlalchemy import select

from nimbiwe.models import Validation
from tests.helpers import entry_payload, run


def audit_rows(api, entry_id: str) -> list:
    async def _rows():
        async with api.factory() as session:
            result = await session.execute(select(Validation).where(Validation.price_entry_id == entry_id))
            return list(result.scalars().all())

    return run(_rows())


def submit(api, **overrides) -> str:
    response = api.client.post("/sync/entries", json=[entry_payload(api.refs, **overrides)], headers=api.agent_headers)
    assert response.status_code == 201
    return response.json()[0]["id"]


class TestPendingList:
    def test_lists_pending_with_display_data(self, api) -> None:
        entry_id = submit(api)

        response = api.client.get("/admin/entries", headers=api.admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["page"] == 1
        assert body["limit"] == 10
        assert body["total"] == 1
        [entry] = body["entries"]
        assert entry["id"] == entry_id
        assert entry["status"] == "pending"
        assert entry["product"]["name"] == "Tomate"
        assert entry["market"]["name"] == "Marché Dantokpa"
        assert entry["agent"]["phone"] == "+22900000000"

    def test_paging_parameters(self, api) -> None:
        ids = [submit(api, priceValue=1000 + i) for i in range(3)]

        body = api.client.get("/admin/entries?page=2&limit=2", headers=api.admin_headers).json()

        assert body["total"] == 3
        assert [e["id"] for e in body["entries"]] == [ids[0]]

    def test_invalid_page_is_400(self, api) -> None:
        response = api.client.get("/admin/entries?page=0", headers=api.admin_headers)

        assert response.status_code == 400

    def test_agent_role_is_forbidden(self, api) -> None:
        response = api.client.get("/admin/entries", headers=api.agent_headers)

        assert response.status_code == 403

    def test_requires_authentication(self, api) -> None:
        response = api.client.get("/admin/entries")

        assert response.status_code == 401


class TestValidateEndpoint:
    def test_reject_is_terminal_and_audited(self, api) -> None:
        entry_id = submit(api)

        response = api.client.post(
            f"/admin/entries/{entry_id}/validate",
            json={"decision": "rejected", "reason": "Prix aberrant"},
            headers=api.admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["id"] == entry_id
        assert response.json()["status"] == "rejected"

        [audit] = audit_rows(api, entry_id)
        assert audit.decision.value == "rejected"
        assert audit.reason == "Prix aberrant"
        assert audit.admin_id == api.refs.admin_id

        pending = api.client.get("/admin/entries", headers=api.admin_headers).json()
        assert entry_id not in [e["id"] for e in pending["entries"]]

    def test_validate_without_reason(self, api) -> None:
        entry_id = submit(api)

        response = api.client.post(
            f"/admin/entries/{entry_id}/validate",
            json={"decision": "validated"},
            headers=api.admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["status"] == "validated"

    def test_replayed_submission_reflects_rejection(self, api) -> None:
        entry = entry_payload(api.refs, clientId="replay-after-review")
        entry_id = api.client.post("/sync/entries", json=[entry], headers=api.agent_headers).json()[0]["id"]
        api.client.post(
            f"/admin/entries/{entry_id}/validate",
            json={"decision": "rejected"},
            headers=api.admin_headers,
        )

        replay = api.client.post("/sync/entries", json=[entry], headers=api.agent_headers).json()[0]

        assert replay["status"] == "rejected"
        assert replay["id"] == entry_id

    def test_unknown_entry_is_404(self, api) -> None:
        response = api.client.post(
            "/admin/entries/00000000-0000-0000-0000-000000000000/validate",
            json={"decision": "validated"},
            headers=api.admin_headers,
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Entry not found"

    def test_unknown_decision_is_400(self, api) -> None:
        entry_id = submit(api)

        response = api.client.post(
            f"/admin/entries/{entry_id}/validate",
            json={"decision": "pending"},
            headers=api.admin_headers,
        )

        assert response.status_code == 400

    def test_agent_role_is_forbidden(self, api) -> None:
        entry_id = submit(api)

        response = api.client.post(
            f"/admin/entries/{entry_id}/validate",
            json={"decision": "validated"},
            headers=api.agent_headers,
        )

        assert response.status_code == 403
        assert audit_rows(api, entry_id) == []
