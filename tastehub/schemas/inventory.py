import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from tastehub.schemas.response import CamelModel


class StockResponse(CamelModel):
    """Schema for fetching the stock fields of a food listing."""
    food_id: uuid.UUID
    food_name: str
    quantity: int
    purchase_count: int
    updated_at: datetime


class StockOverwriteRequest(CamelModel):
    quantity: Optional[int] = Field(None, description="New remaining stock (>= 0).")
    purchase_count: Optional[int] = Field(None, description="New cumulative sold count; cannot decrease.")
