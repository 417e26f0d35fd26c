import logging
from fastapi import APIRouter

from tastehub.core.exceptions import DomainError, internal_error
from tastehub.schemas.inventory import StockOverwriteRequest, StockResponse
from tastehub.schemas.response import SuccessResponse
from tastehub.services.inventory_ledger import get_stock, overwrite_stock

log = logging.getLogger(__name__)

router = APIRouter()


def _stock(food) -> StockResponse:
    return StockResponse(
        food_id=food.id,
        food_name=food.food_name,
        quantity=food.quantity,
        purchase_count=food.purchase_count,
        updated_at=food.updated_at,
    )


@router.get("/{food_id}/stock", response_model=StockResponse)
async def get_stock_endpoint(food_id: str):
    """Fetches the remaining stock and sold count of a listing."""
    try:
        food = await get_stock(food_id)
        return _stock(food)
    except DomainError:
        raise
    except Exception as e:
        log.error(f"Error fetching stock: {e}")
        raise internal_error("Server failed to fetch stock", e)


@router.patch("/{food_id}/quantity", response_model=SuccessResponse)
async def overwrite_stock_endpoint(food_id: str, payload: StockOverwriteRequest):
    """
    Admin edit of the stock fields. Values are written as given,
    but negative stock and a decreasing sold count are refused.
    """
    try:
        food = await overwrite_stock(food_id, quantity=payload.quantity, purchase_count=payload.purchase_count)
        return SuccessResponse(
            message="Food quantity updated successfully",
            data=_stock(food).model_dump(by_alias=True, mode="json"),
        )
    except DomainError:
        raise
    except Exception as e:
        log.error(f"Update food quantity error: {e}")
        raise internal_error("Failed to update food quantity", e)
