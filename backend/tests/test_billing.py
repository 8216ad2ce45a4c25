# tests/test_billing.py
"""
Billing tests
Tests: webhook signature, subscription events, usage report
"""

import json

from fastapi import status

from rentdesk.services.billing_service import sign_payload, verify_signature
from conftest import WEBHOOK_SECRET, property_payload


async def post_event(client, event: dict, secret: str = WEBHOOK_SECRET):
    body = json.dumps(event).encode()
    return await client.post(
        "/api/v1/billing/webhook",
        content=body,
        headers={"X-Signature": sign_payload(body, secret), "Content-Type": "application/json"},
    )


class TestSignature:

    def test_verify_signature(self):
        body = b'{"type": "subscription.updated"}'
        assert verify_signature(body, sign_payload(body, "s3cret"), "s3cret")
        assert not verify_signature(body, sign_payload(body, "other"), "s3cret")
        assert not verify_signature(body, None, "s3cret")

    async def test_bad_signature_rejected(self, client, test_account):
        response = await post_event(client, {
            "type": "subscription.updated",
            "data": {"account_id": test_account["id"], "plan": "enterprise"},
        }, secret="wrong-secret")
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Invalid signature"


class TestSubscriptionEvents:

    async def test_upgrade_sets_plan_and_limits(self, client, auth_headers, test_account):
        response = await post_event(client, {
            "type": "subscription.updated",
            "data": {
                "account_id": test_account["id"],
                "plan": "basic",
                "status": "active",
                "current_period_end": "2030-01-01T00:00:00",
                "subscription_id": "sub_123",
            },
        })
        assert response.status_code == status.HTTP_200_OK

        account = (await client.get("/api/v1/auth/me", headers=auth_headers)).json()
        assert account["subscription"]["plan"] == "basic"
        assert account["subscription"]["status"] == "active"
        assert account["subscription"]["billing_subscription_id"] == "sub_123"
        assert account["limits"] == {"tenants": 100, "properties": 25, "users": 3, "storage": 1024}

    async def test_upgrade_lifts_quota(self, client, auth_headers, test_account):
        for i in range(5):
            await client.post("/api/v1/properties", json=property_payload(name=f"House {i}"), headers=auth_headers)

        await post_event(client, {
            "type": "subscription.created",
            "data": {"account_id": test_account["id"], "plan": "professional"},
        })

        response = await client.post(
            "/api/v1/properties", json=property_payload(name="House 5"), headers=auth_headers
        )
        assert response.status_code == status.HTTP_201_CREATED

    async def test_cancel_downgrades_to_free(self, client, auth_headers, test_account):
        await post_event(client, {
            "type": "subscription.created",
            "data": {"account_id": test_account["id"], "plan": "enterprise"},
        })
        await post_event(client, {
            "type": "subscription.deleted",
            "data": {"account_id": test_account["id"]},
        })

        account = (await client.get("/api/v1/auth/me", headers=auth_headers)).json()
        assert account["subscription"]["plan"] == "free"
        assert account["subscription"]["status"] == "canceled"
        assert account["limits"]["properties"] == 5

    async def test_unknown_event_type(self, client, test_account):
        response = await post_event(client, {
            "type": "invoice.paid",
            "data": {"account_id": test_account["id"]},
        })
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_unknown_account(self, client):
        response = await post_event(client, {
            "type": "subscription.updated",
            "data": {"account_id": "missing", "plan": "basic"},
        })
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestUsage:

    async def test_usage_report(self, client, auth_headers):
        await client.post("/api/v1/properties", json=property_payload(), headers=auth_headers)

        response = await client.get("/api/v1/billing/usage", headers=auth_headers)
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["plan"] == "free"
        assert data["status"] == "trialing"
        assert data["usage"]["properties"] == {"current": 1, "max": 5, "percentage": 20}
        assert data["usage"]["tenants"] == {"current": 0, "max": 10, "percentage": 0}
