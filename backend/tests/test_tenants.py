# tests/test_tenants.py
"""
Tenant (renter) API tests
Tests: validation, per-account email uniqueness, quota, soft delete,
property linking, audit trail
"""

import pytest
from fastapi import status

from conftest import property_payload, tenant_payload


async def create_tenant(client, headers, **overrides):
    response = await client.post("/api/v1/tenants", json=tenant_payload(**overrides), headers=headers)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


class TestTenantCreate:

    async def test_create_tenant(self, client, auth_headers, test_account):
        """Test tenant creation with valid data"""
        data = await create_tenant(client, auth_headers)

        assert data["company_id"] == test_account["id"]
        assert data["status"] == "active"
        assert data["rent_amount"] == 1500
        assert data["audit_trail"][0]["action"] == "created"

    async def test_requires_authentication(self, client):
        response = await client.post("/api/v1/tenants", json=tenant_payload())
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    @pytest.mark.parametrize("field", ["name", "email"])
    async def test_missing_required_field(self, client, auth_headers, field):
        payload = tenant_payload()
        del payload[field]
        response = await client.post("/api/v1/tenants", json=payload, headers=auth_headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.parametrize("overrides", [
        {"name": "J"},
        {"email": "not-an-email"},
        {"phone": "12"},
        {"rent_amount": -1},
        {"rent_due_day": 0},
        {"rent_due_day": 32},
        {"lease_start": "2024-06-01", "lease_end": "2024-05-01"},
        {"status": "deleted"},
    ])
    async def test_invalid_input_rejected(self, client, auth_headers, overrides):
        response = await client.post(
            "/api/v1/tenants", json=tenant_payload(**overrides), headers=auth_headers
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    async def test_markup_stripped(self, client, auth_headers):
        data = await create_tenant(client, auth_headers, name="<b>Jane</b> Renter ", notes="<script>x</script>ok")
        assert data["name"] == "Jane Renter"
        assert "<" not in data["notes"]

    async def test_email_normalized(self, client, auth_headers):
        data = await create_tenant(client, auth_headers, email="  Jane@Example.COM ")
        assert data["email"] == "jane@example.com"

    async def test_duplicate_email_same_account(self, client, auth_headers):
        await create_tenant(client, auth_headers)
        response = await client.post(
            "/api/v1/tenants", json=tenant_payload(email="JANE@example.com"), headers=auth_headers
        )
        assert response.status_code == status.HTTP_409_CONFLICT
        assert "already exists" in response.json()["detail"]

    async def test_same_email_other_account(self, client, auth_headers, register):
        """Email uniqueness is per account"""
        await create_tenant(client, auth_headers)
        _, other_headers = await register(email="second@example.com")

        await create_tenant(client, other_headers)

    async def test_email_of_deleted_tenant_reusable(self, client, auth_headers):
        first = await create_tenant(client, auth_headers)
        await client.delete(f"/api/v1/tenants/{first['id']}", headers=auth_headers)

        await create_tenant(client, auth_headers)

    async def test_unknown_property(self, client, auth_headers):
        response = await client.post(
            "/api/v1/tenants", json=tenant_payload(property_id="missing"), headers=auth_headers
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_store_timeout_is_generic_500(self, client, auth_headers, monkeypatch):
        """A store failure surfaces as an opaque upstream error, nothing is created"""
        from sqlalchemy.exc import OperationalError

        from rentdesk.db.repositories.tenant_repository import TenantRepository

        async def timed_out(self, *args, **kwargs):
            raise OperationalError("SELECT tenants", {}, Exception("canceling statement due to statement timeout"))

        monkeypatch.setattr(TenantRepository, "find_by_email", timed_out)
        response = await client.post("/api/v1/tenants", json=tenant_payload(), headers=auth_headers)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"detail": "Upstream service unavailable"}

        monkeypatch.undo()
        response = await client.get("/api/v1/tenants/count", headers=auth_headers)
        assert response.json()["current"] == 0

    async def test_quota_enforced(self, client, auth_headers):
        """Free plan: 10 tenants, the 11th is refused"""
        for i in range(10):
            await create_tenant(client, auth_headers, email=f"t{i}@example.com")

        response = await client.post(
            "/api/v1/tenants", json=tenant_payload(email="t10@example.com"), headers=auth_headers
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["detail"] == "Free plan limited to 10 tenants. Please upgrade."

    async def test_deleted_tenants_free_quota(self, client, auth_headers):
        created = [await create_tenant(client, auth_headers, email=f"t{i}@example.com") for i in range(10)]
        await client.delete(f"/api/v1/tenants/{created[0]['id']}", headers=auth_headers)

        await create_tenant(client, auth_headers, email="t10@example.com")

        response = await client.get("/api/v1/tenants/count", headers=auth_headers)
        assert response.json() == {"current": 10, "max": 10, "percentage": 100}


class TestTenantReadUpdate:

    async def test_list_scoped_and_filtered(self, client, auth_headers, register):
        await create_tenant(client, auth_headers)
        await create_tenant(client, auth_headers, email="p@example.com", status="pending")
        _, other_headers = await register(email="second@example.com")
        await create_tenant(client, other_headers, email="other@example.com")

        response = await client.get("/api/v1/tenants", headers=auth_headers)
        data = response.json()
        assert data["pagination"] == {"page": 1, "limit": 20, "total": 2, "pages": 1}
        assert {t["email"] for t in data["items"]} == {"jane@example.com", "p@example.com"}

        response = await client.get("/api/v1/tenants?status=pending", headers=auth_headers)
        assert [t["email"] for t in response.json()["items"]] == ["p@example.com"]

    async def test_pagination(self, client, auth_headers):
        for i in range(3):
            await create_tenant(client, auth_headers, email=f"t{i}@example.com")

        response = await client.get("/api/v1/tenants?page=2&limit=2", headers=auth_headers)
        data = response.json()
        assert len(data["items"]) == 1
        assert data["pagination"]["pages"] == 2

    async def test_other_account_cannot_read(self, client, auth_headers, register):
        tenant = await create_tenant(client, auth_headers)
        _, other_headers = await register(email="second@example.com")

        response = await client.get(f"/api/v1/tenants/{tenant['id']}", headers=other_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    async def test_partial_update(self, client, auth_headers):
        tenant = await create_tenant(client, auth_headers)

        response = await client.put(
            f"/api/v1/tenants/{tenant['id']}", json={"rent_amount": 1600}, headers=auth_headers
        )
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["rent_amount"] == 1600
        assert data["name"] == tenant["name"]
        assert data["audit_trail"][-1]["action"] == "updated"
        assert data["audit_trail"][-1]["changes"]["rent_amount"] == {"from": 1500, "to": 1600}
        assert data["audit_trail"][0] == tenant["audit_trail"][0]

    async def test_update_duplicate_email(self, client, auth_headers):
        await create_tenant(client, auth_headers)
        other = await create_tenant(client, auth_headers, email="other@example.com")

        response = await client.put(
            f"/api/v1/tenants/{other['id']}", json={"email": "jane@example.com"}, headers=auth_headers
        )
        assert response.status_code == status.HTTP_409_CONFLICT

    async def test_update_keeps_own_email(self, client, auth_headers):
        tenant = await create_tenant(client, auth_headers)
        response = await client.put(
            f"/api/v1/tenants/{tenant['id']}",
            json={"email": "jane@example.com", "notes": "Prefers email"},
            headers=auth_headers,
        )
        assert response.status_code == status.HTTP_200_OK

    async def test_update_lease_end_before_stored_start(self, client, auth_headers):
        tenant = await create_tenant(client, auth_headers)
        response = await client.put(
            f"/api/v1/tenants/{tenant['id']}", json={"lease_end": "2023-06-01"}, headers=auth_headers
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestTenantDelete:

    async def test_soft_delete(self, client, auth_headers):
        tenant = await create_tenant(client, auth_headers)

        response = await client.delete(f"/api/v1/tenants/{tenant['id']}", headers=auth_headers)
        assert response.status_code == status.HTTP_200_OK

        response = await client.get(f"/api/v1/tenants/{tenant['id']}", headers=auth_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

        response = await client.get("/api/v1/tenants", headers=auth_headers)
        assert response.json()["pagination"]["total"] == 0

    async def test_soft_delete_keeps_row_and_audit(self, client, auth_headers, db_session):
        from rentdesk.db.repositories.tenant_repository import TenantRepository
        from rentdesk.db.models.tenant import DeletedTenant

        tenant = await create_tenant(client, auth_headers)
        await client.delete(f"/api/v1/tenants/{tenant['id']}", headers=auth_headers)

        row = await TenantRepository(db_session).get_owned(
            tenant["id"], tenant["company_id"], include_deleted=True
        )
        assert row.status == "deleted"
        assert isinstance(row.state, DeletedTenant)
        assert row.deleted_at is not None
        assert [entry["action"] for entry in row.audit_trail] == ["created", "deleted"]

    async def test_delete_unlinks_property(self, client, auth_headers):
        prop = (await client.post("/api/v1/properties", json=property_payload(), headers=auth_headers)).json()
        tenant = await create_tenant(client, auth_headers, property_id=prop["id"])

        response = await client.get(f"/api/v1/properties/{prop['id']}", headers=auth_headers)
        assert response.json()["tenants"] == [tenant["id"]]

        await client.delete(f"/api/v1/tenants/{tenant['id']}", headers=auth_headers)
        response = await client.get(f"/api/v1/properties/{prop['id']}", headers=auth_headers)
        assert response.json()["tenants"] == []

    async def test_move_between_properties(self, client, auth_headers):
        first = (await client.post("/api/v1/properties", json=property_payload(), headers=auth_headers)).json()
        second = (await client.post(
            "/api/v1/properties", json=property_payload(name="Oak House"), headers=auth_headers
        )).json()
        tenant = await create_tenant(client, auth_headers, property_id=first["id"])

        response = await client.put(
            f"/api/v1/tenants/{tenant['id']}", json={"property_id": second["id"]}, headers=auth_headers
        )
        assert response.json()["property_id"] == second["id"]

        first_now = (await client.get(f"/api/v1/properties/{first['id']}", headers=auth_headers)).json()
        second_now = (await client.get(f"/api/v1/properties/{second['id']}", headers=auth_headers)).json()
        assert first_now["tenants"] == []
        assert second_now["tenants"] == [tenant["id"]]

    async def test_stats_counter_follows_create_and_delete(self, client, auth_headers):
        tenant = await create_tenant(client, auth_headers)
        cached = (await client.get("/api/v1/dashboard/stats/cached", headers=auth_headers)).json()
        assert cached["total_tenants"] == 1

        await client.delete(f"/api/v1/tenants/{tenant['id']}", headers=auth_headers)
        cached = (await client.get("/api/v1/dashboard/stats/cached", headers=auth_headers)).json()
        assert cached["total_tenants"] == 0
