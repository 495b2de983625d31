"""Pending books API: per-school delivery status of every active catalog book."""

from typing import Any, Optional

from fastapi import APIRouter, Query, Response

from bookhub.config import DEFAULT_PAGE_LIMIT
from bookhub.db.repositories import pending_repo
from bookhub.models.inputs import PendingStatusInput

router = APIRouter(prefix="/pending-books", tags=["pending-books"])


@router.get("")
async def list_books_with_status(
    customer_id: int = Query(...),
    branch_id: Optional[int] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1),
) -> dict[str, Any]:
    """Paginated rows; books without a record report status not_set."""
    result = pending_repo.list_books_with_status(
        customer_id,
        branch_id=branch_id,
        search=search,
        page=page,
        limit=limit,
    )
    return result.model_dump()


@router.patch("/status")
async def set_status(body: PendingStatusInput) -> dict[str, Any]:
    return pending_repo.set_status(body.customer_id, body.book_id, body.status, branch_id=body.branch_id)


@router.delete("/{record_id}", status_code=204)
async def delete_pending(record_id: int) -> Response:
    pending_repo.delete_pending(record_id)
    return Response(status_code=204)
