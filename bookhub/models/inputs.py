"""Request/input models for catalog, sets, set quantities, orders and pending status."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

PriceKind = Literal["common", "per_class"]
LineStatus = Literal["active", "pending", "clear"]
ItemType = Literal["book", "stationery"]
CustomerType = Literal["Dealer-Retail", "Dealer-Supply", "School-Retail", "School-Supply", "School-Both"]


class CatalogEntryInput(BaseModel):
    """Create payload for a catalog entry. Price fields are checked against ``kind`` later."""

    name: str = Field(..., min_length=1, max_length=200)
    publication_id: int
    subtitle_id: Optional[int] = None
    language_id: Optional[int] = None
    kind: PriceKind
    common_price: Optional[float] = None
    common_isbn: Optional[str] = None
    prices_by_class: Optional[dict[str, float]] = None
    isbn_by_class: Optional[dict[str, str]] = None
    discount_percent: float = Field(0, ge=0, le=100)
    gst_percent: float = Field(0, ge=0, le=100)
    status: Literal["active", "inactive"] = "active"


class CatalogEntryUpdate(BaseModel):
    """Partial update; omitted fields keep their current value."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    publication_id: Optional[int] = None
    subtitle_id: Optional[int] = None
    language_id: Optional[int] = None
    kind: Optional[PriceKind] = None
    common_price: Optional[float] = None
    common_isbn: Optional[str] = None
    prices_by_class: Optional[dict[str, float]] = None
    isbn_by_class: Optional[dict[str, str]] = None
    discount_percent: Optional[float] = Field(None, ge=0, le=100)
    gst_percent: Optional[float] = Field(None, ge=0, le=100)
    status: Optional[Literal["active", "inactive"]] = None


class SetBookInput(BaseModel):
    book_id: int
    quantity: int = Field(..., ge=1)
    price: float = Field(..., ge=0)


class SetStationeryInput(BaseModel):
    item_id: int
    quantity: int = Field(..., ge=1)
    price: float = Field(..., ge=0)


class SetInput(BaseModel):
    """Create payload for a set. Line prices are taken as given."""

    customer_id: int
    class_id: int
    books: list[SetBookInput] = []
    stationery_items: list[SetStationeryInput] = []
    quantity: Optional[int] = Field(None, ge=0)


class SetUpdate(BaseModel):
    customer_id: Optional[int] = None
    class_id: Optional[int] = None
    books: Optional[list[SetBookInput]] = None
    stationery_items: Optional[list[SetStationeryInput]] = None
    quantity: Optional[int] = Field(None, ge=0)


class CopySetInput(BaseModel):
    source_set_id: int
    target_customer_id: int
    target_class_id: int
    include_stationery: bool = False


class ItemStatusInput(BaseModel):
    item_id: int
    item_type: ItemType
    status: LineStatus


class RemoveItemInput(BaseModel):
    item_id: int
    item_type: ItemType


class ClassQuantity(BaseModel):
    class_id: int
    quantity: int


class SetQuantitiesInput(BaseModel):
    """Bulk quantities for one customer. Quantities are range-checked by the repository
    so one bad entry can reject the batch with a precise message."""

    class_quantities: list[ClassQuantity]


class AllClassesQuantityInput(BaseModel):
    quantity: int = Field(..., ge=0)


class OrderItemInput(BaseModel):
    book_id: int
    class_name: Optional[str] = None
    quantity: int = Field(..., ge=1)
    price: float = Field(..., ge=0)
    discount: float = Field(0, ge=0, le=100)


class OrderInput(BaseModel):
    """Order submission. Line prices are re-checked against the catalog."""

    customer_id: int
    publication_id: int
    subtitle_id: Optional[int] = None
    items: list[OrderItemInput]
    customer_type: Optional[CustomerType] = None
    sales_by: Optional[str] = None
    order_entry_by: Optional[str] = None
    order_date: Optional[datetime] = None
    order_by: Literal["Online", "Phone", "In-Person"] = "In-Person"
    shipped_to: Optional[str] = Field(None, max_length=200)
    remark: Optional[str] = Field(None, max_length=500)


class PendingStatusInput(BaseModel):
    customer_id: int
    book_id: int
    branch_id: Optional[int] = None
    status: Literal["pending", "clear"]
