"""Order API: submit (validated against the catalog), dry-run validate, list and read."""

from typing import Any, Optional

from fastapi import APIRouter, Query

from bookhub.db.repositories import order_repo
from bookhub.models.inputs import OrderInput

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", status_code=201)
async def submit_order(body: OrderInput) -> dict[str, Any]:
    """Persist the order if every line matches the catalog; otherwise 422 (409 when only prices changed)."""
    return order_repo.submit_order(body)


@router.post("/validate")
async def validate_order(body: OrderInput) -> dict[str, Any]:
    return order_repo.preview_order(body)


@router.get("")
async def list_orders(customer_id: Optional[int] = Query(None)) -> list[dict[str, Any]]:
    return order_repo.list_orders(customer_id)


@router.get("/{order_id}")
async def get_order(order_id: int) -> dict[str, Any]:
    return order_repo.get_order(order_id)
