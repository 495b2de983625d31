"""Set quantity API: bulk ledger updates mirrored onto existing sets."""

from typing import Any

from fastapi import APIRouter

from bookhub.db.repositories import set_quantity_repo
from bookhub.models.inputs import AllClassesQuantityInput, SetQuantitiesInput

router = APIRouter(prefix="/set-quantities", tags=["set-quantities"])


@router.put("/{customer_id}")
async def set_quantities(customer_id: int, body: SetQuantitiesInput) -> dict[str, Any]:
    """Upsert quantities for many classes; one invalid entry rejects the batch."""
    return set_quantity_repo.set_quantities(customer_id, body.class_quantities)


@router.post("/{customer_id}/all-classes")
async def set_quantity_for_all_classes(customer_id: int, body: AllClassesQuantityInput) -> dict[str, Any]:
    return set_quantity_repo.set_quantity_for_all_classes(customer_id, body.quantity)


@router.get("/{customer_id}")
async def list_quantities(customer_id: int) -> list[dict[str, Any]]:
    return set_quantity_repo.list_quantities(customer_id)
