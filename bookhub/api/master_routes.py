"""Master data API: minimal create/list/read for publications, classes, customers and the rest."""

from typing import Any, Optional

from fastapi import APIRouter, Query

from bookhub.db.repositories import master_repo

router = APIRouter(prefix="/masters", tags=["masters"])


@router.get("/{kind}")
async def list_master_rows(
    kind: str,
    publication_id: Optional[int] = Query(None, description="Subtitles only: narrow to one publication"),
) -> list[dict[str, Any]]:
    return master_repo.list_rows(kind, publication_id=publication_id)


@router.post("/{kind}", status_code=201)
async def create_master_row(kind: str, body: dict[str, Any]) -> dict[str, Any]:
    """Create one row; unknown fields are rejected."""
    return master_repo.create(kind, body)


@router.get("/{kind}/{row_id}")
async def get_master_row(kind: str, row_id: int) -> dict[str, Any]:
    return master_repo.get(kind, row_id)
