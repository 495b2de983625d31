"""Set API: build, copy and edit per (customer, class) sets and move their lines through statuses."""

from typing import Any, Optional

from fastapi import APIRouter, Query, Response

from bookhub.db.repositories import set_repo
from bookhub.errors import NotFoundError
from bookhub.models.inputs import CopySetInput, ItemStatusInput, RemoveItemInput, SetInput, SetUpdate

router = APIRouter(prefix="/sets", tags=["sets"])


@router.post("", status_code=201)
async def create_set(body: SetInput) -> dict[str, Any]:
    return set_repo.create_set(body)


@router.get("")
async def get_set_by_filters(
    customer_id: int = Query(...),
    class_id: int = Query(...),
) -> dict[str, Any]:
    """The set for one (customer, class) pair."""
    book_set = set_repo.get_set_by_filters(customer_id, class_id)
    if book_set is None:
        raise NotFoundError("No set found for the given filters.")
    return book_set


@router.get("/all")
async def list_sets(customer_id: Optional[int] = Query(None)) -> list[dict[str, Any]]:
    return set_repo.list_sets(customer_id)


@router.post("/copy", status_code=201)
async def copy_set(body: CopySetInput) -> dict[str, Any]:
    """Copy lines onto another pair; per-class prices are re-resolved for the target class."""
    return set_repo.copy_set(body)


@router.get("/books-by-customer-class")
async def books_by_customer_class(
    customer_id: int = Query(...),
    class_id: int = Query(...),
) -> list[dict[str, Any]]:
    return set_repo.books_by_customer_and_class(customer_id, class_id)


@router.get("/books-by-school")
async def books_by_school(customer_id: int = Query(...)) -> list[dict[str, Any]]:
    return set_repo.books_by_school(customer_id)


@router.get("/{set_id}")
async def get_set(set_id: int) -> dict[str, Any]:
    return set_repo.get_set(set_id)


@router.patch("/{set_id}")
async def update_set(set_id: int, body: SetUpdate) -> dict[str, Any]:
    return set_repo.update_set(set_id, body)


@router.delete("/{set_id}", status_code=204)
async def delete_set(set_id: int) -> Response:
    set_repo.delete_set(set_id)
    return Response(status_code=204)


@router.patch("/{set_id}/item-status")
async def update_item_status(set_id: int, body: ItemStatusInput) -> dict[str, Any]:
    return set_repo.update_item_status(set_id, body)


@router.patch("/{set_id}/remove-item")
async def remove_item(set_id: int, body: RemoveItemInput) -> dict[str, Any]:
    return set_repo.remove_item_from_set(set_id, body)
