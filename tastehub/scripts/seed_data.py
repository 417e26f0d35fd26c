# tastehub/scripts/seed_data.py
import asyncio
import logging

from tastehub.core.db import init_db, close_db
from tastehub.models.food import FoodItem
from tastehub.models.user import User

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
log = logging.getLogger("seed_data")


async def seed():
    # One admin (the chat's primary admin) and one customer
    admin, _ = await User.get_or_create(email="admin@tastehub.com", defaults={"name": "TasteHub Admin", "role": "admin"})
    customer, _ = await User.get_or_create(email="customer@tastehub.com", defaults={"name": "Demo Customer"})
    log.info(f"Users: {admin.email} ({admin.role}), {customer.email} ({customer.role})")

    # Listings owned by the admin
    f1, _ = await FoodItem.get_or_create(
        food_name="Paneer Wrap",
        defaults={"price": "149.00", "category": "Wraps", "added_by_email": admin.email, "added_by_name": admin.name},
    )
    f2, _ = await FoodItem.get_or_create(
        food_name="Chili Paneer Rice",
        defaults={"price": "199.00", "category": "Rice", "added_by_email": admin.email, "added_by_name": admin.name},
    )

    # If existing, reset stock (idempotent)
    f1.quantity = 50
    f2.quantity = 30
    await f1.save(); await f2.save()

    log.info(f"Foods seeded: {f1.id}, {f2.id}")


async def main():
    await init_db()
    await seed()
    await close_db()

if __name__ == "__main__":
    asyncio.run(main())
