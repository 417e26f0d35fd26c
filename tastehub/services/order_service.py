import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from tortoise import timezone
from tortoise.transactions import in_transaction

from tastehub.core.exceptions import (
    ForbiddenError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from tastehub.models.food import FoodItem
from tastehub.models.purchase import Purchase
from tastehub.services.inventory_ledger import parse_id, reserve_stock

log = logging.getLogger(__name__)

REQUIRED_FIELDS = ("food_id", "buyer_email", "delivery_address", "contact_number")


def _validate_request(data: Dict[str, Any]) -> None:
    missing = [f for f in REQUIRED_FIELDS if not str(data.get(f) or "").strip()]
    if missing:
        raise ValidationError(
            "Missing required fields: foodId, buyerEmail, deliveryAddress, contactNumber",
            details={"missing": missing},
        )
    quantity = data.get("quantity")
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError("Quantity must be a positive integer")


async def create_purchase(data: Dict[str, Any]) -> Purchase:
    """
    Validates a purchase against the live listing and commits it.

    Checks run in order and the first failure wins: required fields, listing exists,
    buyer is not the listing owner, enough stock. The stock reservation and the
    purchase insert share one transaction; the reservation runs first as a
    conditional update so a concurrent buyer cannot oversell the listing.
    """
    data = {**data}
    if data.get("quantity") is None:
        data["quantity"] = 1
    _validate_request(data)
    food_id = parse_id(data["food_id"], "food ID")
    buyer_email = data["buyer_email"].strip()
    quantity = data["quantity"]

    food = await FoodItem.get_or_none(id=food_id)
    if not food:
        raise NotFoundError("Food item not found")

    if (food.added_by_email or "").strip().lower() == buyer_email.lower():
        raise ForbiddenError("You cannot purchase your own food listing")

    if food.quantity <= 0 or quantity > food.quantity:
        raise InsufficientStockError(
            f"Insufficient quantity. Only {food.quantity} {food.food_name} available.",
            available=food.quantity,
        )

    # Snapshot of the listing as validated; later edits must not leak into history
    price = Decimal(food.price)

    async with in_transaction() as conn:
        # 1. Reserve first: raises ConflictError if the stock moved since validation
        await reserve_stock(food.id, quantity, conn=conn)

        # 2. Persist the purchase; a failure here rolls the reservation back
        purchase = await Purchase.create(
            food_id=food.id,
            food_name=food.food_name,
            food_image=food.food_image,
            price=price,
            quantity=quantity,
            total_price=price * quantity,
            buyer_name=data.get("buyer_name"),
            buyer_email=buyer_email,
            buyer_photo=data.get("buyer_photo"),
            delivery_address=data["delivery_address"],
            contact_number=data["contact_number"],
            special_instructions=data.get("special_instructions") or "",
            payment_method=data.get("payment_method") or "card",
            status="pending",
            using_db=conn,
        )

    log.info(f"Purchase {purchase.id} created: {quantity} x {food.food_name} for {buyer_email}.")
    return purchase


async def list_purchases(buyer_email: Optional[str] = None) -> List[Purchase]:
    """Purchases of one buyer, or every purchase (admin view), newest first."""
    query = Purchase.all()
    if buyer_email is not None:
        query = query.filter(buyer_email=buyer_email)
    return await query.order_by("-created_at")


async def update_status(purchase_id: Any, new_status: Optional[str]) -> Purchase:
    """
    Sets an admin supplied status label. Any non-blank string is accepted;
    no transition rules are enforced.
    """
    pid = parse_id(purchase_id, "purchase ID")
    if not isinstance(new_status, str) or not new_status.strip():
        raise ValidationError("Status is required")

    updated = await Purchase.filter(id=pid).update(status=new_status.strip(), updated_at=timezone.now())
    if not updated:
        raise NotFoundError("Order not found")

    log.info(f"Purchase {pid} status set to '{new_status.strip()}'.")
    return await Purchase.get(id=pid)


async def delete_purchase(purchase_id: Any) -> None:
    """Deletes a purchase. Reserved stock is not returned to the listing."""
    pid = parse_id(purchase_id, "purchase ID")
    deleted = await Purchase.filter(id=pid).delete()
    if not deleted:
        raise NotFoundError("Purchase not found")
    log.info(f"Purchase {pid} deleted.")
