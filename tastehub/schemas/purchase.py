import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from tastehub.schemas.response import CamelModel


class PurchaseRequest(CamelModel):
    """
    Schema for the purchase placement body. Presence checks happen in the
    order service so missing fields map to its error messages.
    Item name and price are taken from the stored listing, never from the client.
    """
    food_id: Optional[str] = None
    quantity: Optional[int] = Field(None, description="Units to buy, defaults to 1.")
    buyer_name: Optional[str] = None
    buyer_email: Optional[str] = None
    buyer_photo: Optional[str] = None
    delivery_address: Optional[str] = None
    contact_number: Optional[str] = None
    special_instructions: Optional[str] = None
    payment_method: Optional[str] = None


class PurchaseStatusUpdate(CamelModel):
    status: Optional[str] = None


class PurchaseResponse(CamelModel):
    id: uuid.UUID
    food_id: uuid.UUID
    food_name: str
    food_image: Optional[str] = None
    price: Decimal
    quantity: int
    total_price: Decimal
    buyer_name: Optional[str] = None
    buyer_email: str
    buyer_photo: Optional[str] = None
    delivery_address: str
    contact_number: str
    special_instructions: str
    payment_method: str
    status: str
    created_at: datetime
    updated_at: datetime
