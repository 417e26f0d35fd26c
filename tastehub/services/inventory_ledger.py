import logging
from typing import Any, Optional
from uuid import UUID

from tortoise import timezone
from tortoise.expressions import F

from tastehub.core.exceptions import ConflictError, NotFoundError, ValidationError
from tastehub.models.food import FoodItem

log = logging.getLogger(__name__)


def parse_id(value: Any, label: str = "ID") -> UUID:
    """Converts an identifier coming from the API boundary, rejecting anything that is not a UUID."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {label}")


async def reserve_stock(food_id: UUID, quantity: int, conn: Any = None) -> None:
    """
    Atomically decrements `quantity` and increments `purchase_count` by the same amount,
    but only while the row still holds at least `quantity` units.

    The condition is part of the UPDATE itself, so two concurrent reservations can never
    both succeed on the same units. Pass `conn` to join the caller's transaction.
    """
    reserved = await FoodItem.filter(id=food_id, quantity__gte=quantity).using_db(conn).update(
        quantity=F("quantity") - quantity,
        purchase_count=F("purchase_count") + quantity,
        updated_at=timezone.now(),
    )
    if reserved:
        return

    food = await FoodItem.get_or_none(id=food_id).using_db(conn)
    available = food.quantity if food else 0
    log.warning(f"Reservation of {quantity} unit(s) for food {food_id} rejected, {available} available.")
    raise ConflictError(
        f"Stock changed while processing the purchase. Only {available} unit(s) available.",
        available=available,
    )


async def get_stock(food_id: Any) -> FoodItem:
    food = await FoodItem.get_or_none(id=parse_id(food_id, "food ID"))
    if not food:
        raise NotFoundError("Food item not found")
    return food


async def overwrite_stock(
    food_id: Any,
    quantity: Optional[int] = None,
    purchase_count: Optional[int] = None,
) -> FoodItem:
    """
    Admin edit path: overwrites the stock fields of a listing.
    Negative values are rejected and the purchase count may never go down.
    """
    fid = parse_id(food_id, "food ID")
    if quantity is None and purchase_count is None:
        raise ValidationError("Provide quantity or purchaseCount")
    if quantity is not None and quantity < 0:
        raise ValidationError("Quantity cannot be negative")
    if purchase_count is not None and purchase_count < 0:
        raise ValidationError("Purchase count cannot be negative")

    updates = {"updated_at": timezone.now()}
    if quantity is not None:
        updates["quantity"] = quantity

    query = FoodItem.filter(id=fid)
    if purchase_count is not None:
        updates["purchase_count"] = purchase_count
        # Conditional so a concurrent reservation cannot be erased by a stale value
        query = query.filter(purchase_count__lte=purchase_count)

    updated = await query.update(**updates)
    if not updated:
        food = await FoodItem.get_or_none(id=fid)
        if not food:
            raise NotFoundError("Food item not found")
        raise ValidationError(
            f"Purchase count cannot decrease (currently {food.purchase_count})."
        )

    log.info(f"Stock of food {fid} overwritten: {updates}")
    return await FoodItem.get(id=fid)
