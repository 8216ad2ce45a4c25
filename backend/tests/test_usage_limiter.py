# tests/test_usage_limiter.py
"""
Plan limit tests
Tests: limit resolution, allow/deny decisions, counter-backed reservations
"""

import pytest

from rentdesk.core.exceptions import QuotaExceededError
from rentdesk.db.repositories.account_repository import AccountRepository
from rentdesk.services.usage_limiter import QuotaGuard, can_create, resolve_limit, usage_report


class TestLimitDecision:
    """Pure decision logic"""

    def test_missing_limit_uses_default(self):
        assert resolve_limit({}, "properties") == 5
        assert resolve_limit(None, "tenants") == 10

    def test_zero_or_negative_limit_uses_default(self):
        assert resolve_limit({"properties": 0}, "properties") == 5
        assert resolve_limit({"tenants": -3}, "tenants") == 10

    def test_stored_limit_wins(self):
        assert resolve_limit({"properties": 25}, "properties") == 25

    def test_below_limit_allowed(self):
        decision = can_create("free", 4, 5, "properties")
        assert decision.allowed
        assert decision.reason is None

    def test_at_limit_denied_with_message(self):
        decision = can_create("free", 5, 5, "properties")
        assert not decision.allowed
        assert decision.reason == "Free plan limited to 5 properties. Please upgrade."

    def test_paid_plans_are_checked_too(self):
        decision = can_create("professional", 100, 100, "properties")
        assert not decision.allowed
        assert "Professional plan limited to 100 properties" in decision.reason

    def test_usage_report(self):
        assert usage_report(3, 10) == {"current": 3, "max": 10, "percentage": 30}
        assert usage_report(0, 0)["percentage"] == 0


class TestQuotaGuard:
    """Reservations against the per-account counters"""

    async def test_fifth_allowed_sixth_denied(self, db_session, test_account):
        account = await AccountRepository(db_session).get(test_account["id"])
        guard = QuotaGuard(db_session)

        for expected in range(1, 6):
            decision = await guard.reserve(account, "properties")
            assert decision.allowed
            assert decision.current == expected

        with pytest.raises(QuotaExceededError) as exc_info:
            await guard.reserve(account, "properties")
        assert exc_info.value.message == "Free plan limited to 5 properties. Please upgrade."
        assert exc_info.value.status_code == 403

    async def test_release_frees_a_slot(self, db_session, test_account):
        account = await AccountRepository(db_session).get(test_account["id"])
        guard = QuotaGuard(db_session)
        account.limits = {**account.limits, "properties": 1}

        await guard.reserve(account, "properties")
        with pytest.raises(QuotaExceededError):
            await guard.reserve(account, "properties")

        await guard.release(account.id, "properties")
        decision = await guard.reserve(account, "properties")
        assert decision.allowed

    async def test_release_never_goes_negative(self, db_session, test_account):
        guard = QuotaGuard(db_session)
        await guard.release(test_account["id"], "tenants")
        assert await guard.current_usage(test_account["id"], "tenants") == 0

    async def test_missing_counter_seeded_from_live_count(self, db_session, client, auth_headers, test_account):
        from conftest import tenant_payload

        for i in range(2):
            response = await client.post(
                "/api/v1/tenants",
                json=tenant_payload(email=f"t{i}@example.com"),
                headers=auth_headers,
            )
            assert response.status_code == 201

        guard = QuotaGuard(db_session)
        counter = await guard.usage_repo.get(test_account["id"], "tenants")
        await db_session.delete(counter)
        await db_session.flush()

        assert await guard.current_usage(test_account["id"], "tenants") == 2

    async def test_seed_lost_to_concurrent_request(self, db_session, test_account, monkeypatch):
        """A counter seeded by another request between read and insert is re-read, not duplicated"""
        guard = QuotaGuard(db_session)
        real_used = guard.usage_repo.used
        reads = []

        async def used_after_race(account_id, resource):
            reads.append(resource)
            if len(reads) == 1:
                return None
            return await real_used(account_id, resource)

        monkeypatch.setattr(guard.usage_repo, "used", used_after_race)
        await guard.usage_repo.release(test_account["id"], "properties")

        assert await guard.current_usage(test_account["id"], "properties") == 0
        assert len(reads) == 2

        decision = await guard.reserve(await AccountRepository(db_session).get(test_account["id"]), "properties")
        assert decision.allowed
        assert decision.current == 1
