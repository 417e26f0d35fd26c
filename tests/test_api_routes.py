import pytest
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from fastapi.testclient import TestClient
from unittest.mock import patch, AsyncMock
from uuid import uuid4

from tastehub.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from tastehub.main import app
from tastehub.services.admin_directory import get_admin_directory


NOW = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


class PoolDirectory:
    async def admin_emails(self):
        return ["admin@x.com"]


@pytest.fixture
def client():
    app.dependency_overrides[get_admin_directory] = PoolDirectory
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_purchase(**overrides):
    fields = dict(
        id=uuid4(), food_id=uuid4(), food_name="Paneer Wrap", food_image=None,
        price=Decimal("149.00"), quantity=2, total_price=Decimal("298.00"),
        buyer_name="Buyer", buyer_email="b@x.com", buyer_photo=None,
        delivery_address="12 Baker Street", contact_number="555-0100",
        special_instructions="", payment_method="card", status="pending",
        created_at=NOW, updated_at=NOW,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def make_message(**overrides):
    fields = dict(
        id=uuid4(), sender_email="cust@x.com", sender_name="Customer",
        receiver_email="admin@x.com", text="hi", file=None, is_admin=False,
        is_read=False, timestamp=NOW, read_at=None,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


PURCHASE_BODY = {
    "foodId": str(uuid4()),
    "quantity": 2,
    "buyerEmail": "b@x.com",
    "deliveryAddress": "12 Baker Street",
    "contactNumber": "555-0100",
}


class TestPurchaseRoutes:
    def test_create_purchase_success(self, client):
        """Test purchase creation returns 201 with the stored record"""
        with patch('tastehub.api.v1.purchases.create_purchase', new_callable=AsyncMock) as mock_create:
            mock_create.return_value = make_purchase()

            response = client.post("/purchase", json=PURCHASE_BODY)

            assert response.status_code == 201
            body = response.json()
            assert body["success"] is True
            assert body["data"]["status"] == "pending"
            assert body["data"]["buyerEmail"] == "b@x.com"

            data = mock_create.call_args.args[0]
            assert data["food_id"] == PURCHASE_BODY["foodId"]
            assert data["delivery_address"] == "12 Baker Street"
            assert "special_instructions" not in data

    @pytest.mark.parametrize("error, status_code, code", [
        (ValidationError("Missing required fields"), 400, "validation_error"),
        (NotFoundError("Food item not found"), 404, "not_found"),
        (ForbiddenError("You cannot purchase your own food listing"), 403, "forbidden"),
        (ConflictError("Stock changed", available=0), 409, "conflict"),
    ])
    def test_create_purchase_domain_errors(self, client, error, status_code, code):
        with patch('tastehub.api.v1.purchases.create_purchase', new_callable=AsyncMock) as mock_create:
            mock_create.side_effect = error

            response = client.post("/purchase", json=PURCHASE_BODY)

            assert response.status_code == status_code
            assert response.json()["success"] is False
            assert response.json()["error"]["code"] == code

    def test_insufficient_stock_reports_available(self, client):
        with patch('tastehub.api.v1.purchases.create_purchase', new_callable=AsyncMock) as mock_create:
            mock_create.side_effect = InsufficientStockError("Insufficient quantity. Only 1 Wrap available.", available=1)

            response = client.post("/purchase", json=PURCHASE_BODY)

            assert response.status_code == 400
            assert response.json()["error"]["details"] == {"available": 1}

    def test_store_failure_is_internal_error(self, client):
        with patch('tastehub.api.v1.purchases.create_purchase', new_callable=AsyncMock) as mock_create:
            mock_create.side_effect = RuntimeError("connection reset")

            response = client.post("/purchase", json=PURCHASE_BODY)

            assert response.status_code == 500
            assert response.json()["error"]["message"] == "Failed to create purchase: connection reset"

    def test_store_failure_details_can_be_hidden(self, client):
        with patch('tastehub.api.v1.purchases.create_purchase', new_callable=AsyncMock) as mock_create, \
                patch('tastehub.core.config.EXPOSE_ERROR_DETAILS', False):
            mock_create.side_effect = RuntimeError("connection reset")

            response = client.post("/purchase", json=PURCHASE_BODY)

            assert response.status_code == 500
            assert response.json()["error"]["message"] == "Failed to create purchase"

    def test_malformed_body_is_bad_request(self, client):
        response = client.post("/purchase", json={**PURCHASE_BODY, "quantity": "lots"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "validation_error"

    def test_list_purchases_requires_buyer(self, client):
        response = client.get("/purchase")
        assert response.status_code == 400

    def test_list_purchases_by_buyer(self, client):
        with patch('tastehub.api.v1.purchases.list_purchases', new_callable=AsyncMock) as mock_list:
            mock_list.return_value = [make_purchase(), make_purchase()]

            response = client.get("/purchase", params={"buyerEmail": "b@x.com"})

            assert response.status_code == 200
            assert len(response.json()) == 2
            mock_list.assert_awaited_once_with(buyer_email="b@x.com")

    def test_list_all_purchases(self, client):
        with patch('tastehub.api.v1.purchases.list_purchases', new_callable=AsyncMock) as mock_list:
            mock_list.return_value = [make_purchase()]

            response = client.get("/purchase/all")

            assert response.status_code == 200
            assert response.json()[0]["foodName"] == "Paneer Wrap"
            mock_list.assert_awaited_once_with()

    def test_update_status(self, client):
        purchase_id = str(uuid4())
        with patch('tastehub.api.v1.purchases.update_status', new_callable=AsyncMock) as mock_update:
            mock_update.return_value = make_purchase(status="confirmed")

            response = client.patch(f"/purchase/{purchase_id}", json={"status": "confirmed"})

            assert response.status_code == 200
            assert response.json()["data"]["status"] == "confirmed"
            mock_update.assert_awaited_once_with(purchase_id, "confirmed")

    def test_delete_missing_purchase(self, client):
        with patch('tastehub.api.v1.purchases.delete_purchase', new_callable=AsyncMock) as mock_delete:
            mock_delete.side_effect = NotFoundError("Purchase not found")

            response = client.delete(f"/purchase/{uuid4()}")

            assert response.status_code == 404
            assert response.json()["error"]["message"] == "Purchase not found"


class TestChatRoutes:
    def test_send_message(self, client):
        with patch('tastehub.api.v1.chat.send_message', new_callable=AsyncMock) as mock_send:
            mock_send.return_value = make_message()

            response = client.post("/api/chat/messages/send", json={
                "senderEmail": "cust@x.com", "senderName": "Customer", "text": "hi", "isAdmin": False,
            })

            assert response.status_code == 200
            assert response.json()["data"]["receiverEmail"] == "admin@x.com"
            kwargs = mock_send.call_args.kwargs
            assert kwargs["sender_email"] == "cust@x.com"
            assert kwargs["is_admin"] is False
            assert isinstance(kwargs["directory"], PoolDirectory)

    def test_send_message_null_admin_flag_means_customer(self, client):
        with patch('tastehub.api.v1.chat.send_message', new_callable=AsyncMock) as mock_send:
            mock_send.return_value = make_message()

            response = client.post("/api/chat/messages/send", json={
                "senderEmail": "cust@x.com", "text": "hi", "isAdmin": None,
            })

            assert response.status_code == 200
            assert mock_send.call_args.kwargs["is_admin"] is False

    def test_send_message_validation_error(self, client):
        with patch('tastehub.api.v1.chat.send_message', new_callable=AsyncMock) as mock_send:
            mock_send.side_effect = ValidationError("targetEmail is required when an admin sends a message")

            response = client.post("/api/chat/messages/send", json={
                "senderEmail": "admin@x.com", "text": "hello", "isAdmin": True,
            })

            assert response.status_code == 400

    def test_list_messages(self, client):
        with patch('tastehub.api.v1.chat.list_messages', new_callable=AsyncMock) as mock_list:
            mock_list.return_value = [make_message(), make_message(is_admin=True, sender_email="admin@x.com")]

            response = client.get("/api/chat/messages/cust@x.com")

            assert response.status_code == 200
            assert [m["isAdmin"] for m in response.json()] == [False, True]
            mock_list.assert_awaited_once_with("cust@x.com")

    def test_list_conversations(self, client):
        conversation = SimpleNamespace(
            customer_email="cust@x.com", customer_name="Customer", last_message="hi",
            last_message_time=NOW, admin_assigned="admin@x.com", unread_count=2, updated_at=NOW,
        )
        with patch('tastehub.api.v1.chat.list_conversations', new_callable=AsyncMock) as mock_list:
            mock_list.return_value = [conversation]

            response = client.get("/api/chat/admin/conversations")

            assert response.status_code == 200
            assert response.json()[0]["unreadCount"] == 2

    def test_mark_customer_read(self, client):
        with patch('tastehub.api.v1.chat.mark_customer_read', new_callable=AsyncMock) as mock_read:
            mock_read.return_value = 3

            response = client.put("/api/chat/messages/read/cust@x.com")

            assert response.status_code == 200
            assert response.json()["modifiedCount"] == 3

    def test_mark_admin_read(self, client):
        with patch('tastehub.api.v1.chat.mark_admin_read', new_callable=AsyncMock) as mock_read:
            mock_read.return_value = 0

            response = client.put("/api/chat/admin/messages/read/cust@x.com")

            assert response.status_code == 200
            assert response.json()["modifiedCount"] == 0
            assert mock_read.call_args.args[0] == "cust@x.com"

    def test_unread_counts(self, client):
        with patch('tastehub.api.v1.chat.unread_count', new_callable=AsyncMock) as mock_unread, \
                patch('tastehub.api.v1.chat.admin_total_unread', new_callable=AsyncMock) as mock_total:
            mock_unread.return_value = 1
            mock_total.return_value = 4

            assert client.get("/api/chat/unread-count/cust@x.com").json() == {"unreadCount": 1}
            assert client.get("/api/chat/admin/total-unread").json() == {"totalUnread": 4}


class TestStockRoutes:
    def test_get_stock(self, client):
        food = SimpleNamespace(id=uuid4(), food_name="Paneer Wrap", quantity=3, purchase_count=7, updated_at=NOW)
        with patch('tastehub.api.v1.inventory.get_stock', new_callable=AsyncMock) as mock_get:
            mock_get.return_value = food

            response = client.get(f"/foods/{food.id}/stock")

            assert response.status_code == 200
            assert response.json()["purchaseCount"] == 7

    def test_overwrite_negative_stock_is_rejected(self, client):
        with patch('tastehub.api.v1.inventory.overwrite_stock', new_callable=AsyncMock) as mock_overwrite:
            mock_overwrite.side_effect = ValidationError("Quantity cannot be negative")

            response = client.patch(f"/foods/{uuid4()}/quantity", json={"quantity": -1})

            assert response.status_code == 400
            mock_overwrite.assert_awaited_once()
