"""Pydantic models for bookhub."""

from bookhub.models.inputs import (
    AllClassesQuantityInput,
    CatalogEntryInput,
    CatalogEntryUpdate,
    ClassQuantity,
    CopySetInput,
    ItemStatusInput,
    OrderInput,
    OrderItemInput,
    PendingStatusInput,
    RemoveItemInput,
    SetBookInput,
    SetInput,
    SetQuantitiesInput,
    SetStationeryInput,
    SetUpdate,
)
from bookhub.models.outputs import (
    BookStatusRow,
    LineRejection,
    PendingStatusPage,
    ValidatedLine,
    ValidatedOrder,
)
from bookhub.models.pricing import CommonPrice, PerClassPrice, PriceSpec, resolve_isbn, resolve_price

__all__ = [
    "CommonPrice",
    "PerClassPrice",
    "PriceSpec",
    "resolve_price",
    "resolve_isbn",
    "CatalogEntryInput",
    "CatalogEntryUpdate",
    "SetBookInput",
    "SetStationeryInput",
    "SetInput",
    "SetUpdate",
    "CopySetInput",
    "ItemStatusInput",
    "RemoveItemInput",
    "ClassQuantity",
    "SetQuantitiesInput",
    "AllClassesQuantityInput",
    "OrderItemInput",
    "OrderInput",
    "PendingStatusInput",
    "LineRejection",
    "ValidatedLine",
    "ValidatedOrder",
    "BookStatusRow",
    "PendingStatusPage",
]
