# scripts/seed-data.py
"""Seed database with a demo account, properties and tenants"""
import asyncio
import sys
from datetime import date, timedelta
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from rentdesk.core.config import settings
from rentdesk.db.database import Database
from rentdesk.schemas.account import RegisterRequest
from rentdesk.schemas.property import PropertyCreate
from rentdesk.schemas.tenant import TenantCreate
from rentdesk.services.account_service import AccountService
from rentdesk.services.aggregator import DashboardAggregator
from rentdesk.services.property_service import PropertyService
from rentdesk.services.tenant_service import TenantService


async def seed_data():
    """Seed database with demo data"""
    database = Database(settings.DATABASE_URL, settings)
    await database.create_all()
    today = date.today()

    async with database.session() as session:
        account, _ = await AccountService(session).register(RegisterRequest(
            email="demo@rentdesk.io",
            password="Demo1234!",
            name="Demo Manager",
            company_name="Demo Properties LLC",
        ))
        print(f"Created account: {account.email}")

        properties = PropertyService(session)
        house = await properties.create(account, PropertyCreate(
            name="Maple Street House",
            property_type="house",
            address={"street": "12 Maple St", "city": "Springfield", "state": "IL", "zip_code": "62701"},
            details={"bedrooms": 3, "bathrooms": 2},
            financial={"market_rent": 1800},
        ))
        block = await properties.create(account, PropertyCreate(
            name="Riverside Apartments",
            property_structure="multi_unit",
            address={"street": "400 River Rd", "city": "Springfield", "state": "IL", "zip_code": "62702"},
            details={"units": [
                {"unit_number": "1A", "status": "occupied", "monthly_rent": 1200},
                {"unit_number": "1B", "status": "available", "monthly_rent": 1150},
                {"unit_number": "2A", "status": "occupied", "monthly_rent": 1300},
            ]},
        ))
        print(f"Created properties: {house.name}, {block.name}")

        tenants = TenantService(session)
        for name, email, prop, rent, due_day, lease_days, status in [
            ("Alice Walker", "alice@example.com", house, 1800, today.day, 200, "active"),
            ("Bob Stone", "bob@example.com", block, 1200, 1, 10, "active"),
            ("Carol Diaz", "carol@example.com", block, 1300, 15, 25, "active"),
            ("Dan Price", "dan@example.com", None, 900, 5, None, "pending"),
        ]:
            tenant = await tenants.create(account, TenantCreate(
                name=name,
                email=email,
                property_id=prop.id if prop else None,
                rent_amount=rent,
                rent_due_day=min(due_day, 28),
                lease_start=today - timedelta(days=180),
                lease_end=today + timedelta(days=lease_days) if lease_days else None,
                status=status,
            ))
            print(f"Created tenant: {tenant.name}")

        await DashboardAggregator(session).refresh_stats(account.id)

    await database.dispose()
    print("\nLogin credentials:")
    print("Email: demo@rentdesk.io")
    print("Password: Demo1234!")


if __name__ == "__main__":
    asyncio.run(seed_data())
