import logging
from typing import List, Optional

from fastapi import APIRouter, Query, status

from tastehub.core.exceptions import DomainError, ValidationError, internal_error
from tastehub.schemas.purchase import PurchaseRequest, PurchaseResponse, PurchaseStatusUpdate
from tastehub.schemas.response import SuccessResponse
from tastehub.services.order_service import create_purchase, list_purchases, update_status, delete_purchase

router = APIRouter()
log = logging.getLogger(__name__)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_purchase_endpoint(request_data: PurchaseRequest):
    """
    Places a purchase: validates it against the live listing and reserves the stock.
    """
    try:
        log.info(f"Creating purchase for: {request_data.buyer_email}")
        purchase = await create_purchase(request_data.model_dump(exclude_none=True))
        data = PurchaseResponse.model_validate(purchase).model_dump(by_alias=True, mode="json")
        return SuccessResponse(message="Purchase created successfully", data=data)
    except DomainError as e:
        log.warning(f"Purchase rejected: {e.message}")
        raise
    except Exception as e:
        log.error(f"Create purchase error: {e}")
        raise internal_error("Failed to create purchase", e)


@router.get("/all", response_model=List[PurchaseResponse])
async def list_all_purchases_endpoint():
    """All purchases, newest first (admin view)."""
    try:
        purchases = await list_purchases()
        log.info(f"Found {len(purchases)} purchases")
        return [PurchaseResponse.model_validate(p) for p in purchases]
    except Exception as e:
        log.error(f"Get all purchases error: {e}")
        raise internal_error("Failed to fetch purchases", e)


@router.get("", response_model=List[PurchaseResponse])
async def list_buyer_purchases_endpoint(buyer_email: Optional[str] = Query(None, alias="buyerEmail")):
    """Purchases of one customer, newest first."""
    if not buyer_email:
        raise ValidationError("buyerEmail query parameter is required")
    try:
        purchases = await list_purchases(buyer_email=buyer_email)
        return [PurchaseResponse.model_validate(p) for p in purchases]
    except Exception as e:
        log.error(f"Get purchases error: {e}")
        raise internal_error("Failed to fetch purchases", e)


@router.patch("/{purchase_id}", response_model=SuccessResponse)
async def update_status_endpoint(purchase_id: str, payload: PurchaseStatusUpdate):
    """Sets the order status label (any non-empty string)."""
    try:
        purchase = await update_status(purchase_id, payload.status)
        data = PurchaseResponse.model_validate(purchase).model_dump(by_alias=True, mode="json")
        return SuccessResponse(message="Order status updated successfully", data=data)
    except DomainError:
        raise
    except Exception as e:
        log.error(f"Update purchase error: {e}")
        raise internal_error("Failed to update order status", e)


@router.delete("/{purchase_id}", response_model=SuccessResponse)
async def delete_purchase_endpoint(purchase_id: str):
    """Deletes a purchase. Stock reserved by it is not restored."""
    try:
        await delete_purchase(purchase_id)
        return SuccessResponse(message="Purchase deleted successfully")
    except DomainError:
        raise
    except Exception as e:
        log.error(f"Delete purchase error: {e}")
        raise internal_error("Failed to delete purchase", e)
