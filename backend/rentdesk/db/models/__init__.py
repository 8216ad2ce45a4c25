# backend/rentdesk/db/models/__init__.py
from rentdesk.db.models.account import Account
from rentdesk.db.models.property import Property
from rentdesk.db.models.tenant import Tenant, LiveTenant, DeletedTenant
from rentdesk.db.models.usage import AccountUsage

__all__ = ["Account", "Property", "Tenant", "LiveTenant", "DeletedTenant", "AccountUsage"]
