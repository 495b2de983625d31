"""Catalog API: create, list, read, update, delete book entries and resolve their price."""

from typing import Any, Optional

from fastapi import APIRouter, Query, Response

from bookhub.db.repositories import catalog_repo
from bookhub.models.inputs import CatalogEntryInput, CatalogEntryUpdate

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.post("", status_code=201)
async def create_catalog_entry(body: CatalogEntryInput) -> dict[str, Any]:
    return catalog_repo.create_entry(body)


@router.get("")
async def list_catalog_entries(
    publication_id: Optional[int] = Query(None),
    subtitle_id: Optional[int] = Query(None),
    status: Optional[str] = Query(None, description="active or inactive"),
    search: Optional[str] = Query(None, description="Case-insensitive match on book or subtitle name"),
) -> list[dict[str, Any]]:
    return catalog_repo.list_entries(
        publication_id=publication_id,
        subtitle_id=subtitle_id,
        status=status,
        search=search,
    )


@router.get("/{entry_id}")
async def get_catalog_entry(entry_id: int) -> dict[str, Any]:
    return catalog_repo.get_entry(entry_id)


@router.patch("/{entry_id}")
async def update_catalog_entry(entry_id: int, body: CatalogEntryUpdate) -> dict[str, Any]:
    """Partial update; a kind change must carry the new kind's price data."""
    return catalog_repo.update_entry(entry_id, body)


@router.delete("/{entry_id}", status_code=204)
async def delete_catalog_entry(entry_id: int) -> Response:
    catalog_repo.delete_entry(entry_id)
    return Response(status_code=204)


@router.get("/{entry_id}/price")
async def resolve_catalog_price(
    entry_id: int,
    class_name: Optional[str] = Query(None, description="Required for per-class books"),
) -> dict[str, Any]:
    """Price and ISBN the catalog gives for a class; null when unresolved."""
    return catalog_repo.resolve_entry_price(entry_id, class_name)
