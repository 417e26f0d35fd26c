import pytest
import pytest_asyncio
from decimal import Decimal

from tastehub.core.db import init_db, close_db
from tastehub.models.food import FoodItem
from tastehub.models.user import User


class StaticDirectory:
    """Admin directory returning a fixed pool."""
    def __init__(self, *emails):
        self.emails = list(emails)

    async def admin_emails(self):
        return list(self.emails)


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory SQLite store for each test."""
    await init_db("sqlite://:memory:")
    yield
    await close_db()


@pytest_asyncio.fixture
async def food(db):
    return await FoodItem.create(
        food_name="Paneer Wrap",
        food_image="https://img.example/wrap.png",
        price=Decimal("149.00"),
        quantity=5,
        added_by_email="owner@x.com",
        added_by_name="Owner",
    )


@pytest_asyncio.fixture
async def admins(db):
    await User.create(email="admin@x.com", name="Admin", role="admin")
    await User.create(email="admin2@x.com", name="Second Admin", role="admin")
    await User.create(email="cust@x.com", name="Customer", role="customer")


@pytest.fixture
def directory():
    return StaticDirectory("admin@x.com", "admin2@x.com")


@pytest.fixture
def purchase_request():
    """Factory for a valid purchase body; keyword arguments override fields."""
    def make(food_id, **overrides):
        data = {
            "food_id": str(food_id),
            "quantity": 1,
            "buyer_name": "Buyer",
            "buyer_email": "b@x.com",
            "delivery_address": "12 Baker Street",
            "contact_number": "555-0100",
        }
        data.update(overrides)
        return data
    return make
