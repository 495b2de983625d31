"""ORM models for customer orders, their line items, and the order number counter."""

from datetime import datetime

from sqlalchemy import CheckConstraint, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookhub.db.base import Base, TimestampMixin, utcnow
from bookhub.db.models.catalog import BookCatalog
from bookhub.db.models.master import Customer, Publication

ORDER_SOURCES = ("Online", "Phone", "In-Person")
ORDER_STATUSES = ("pending", "completed", "cancelled")


class Counter(Base):
    """Named monotonically increasing counter (order numbers)."""

    __tablename__ = "counters"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class CustomerOrder(Base, TimestampMixin):
    __tablename__ = "customer_orders"
    __table_args__ = (CheckConstraint("total >= 0", name="ck_order_total"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    order_number: Mapped[int] = mapped_column(Integer, unique=True, nullable=False, index=True)
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), nullable=False, index=True)
    # Snapshot of the customer's type at order time
    customer_type: Mapped[str] = mapped_column(String(32), nullable=False)
    publication_id: Mapped[int] = mapped_column(ForeignKey("publications.id"), nullable=False)
    subtitle_id: Mapped[int | None] = mapped_column(ForeignKey("publication_subtitles.id"), nullable=True)

    sales_by: Mapped[str | None] = mapped_column(String(128), nullable=True)
    order_entry_by: Mapped[str | None] = mapped_column(String(128), nullable=True)
    order_date: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    order_by: Mapped[str] = mapped_column(String(16), nullable=False)
    shipped_to: Mapped[str | None] = mapped_column(String(200), nullable=True)
    remark: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    total: Mapped[float] = mapped_column(Float, nullable=False)

    customer: Mapped["Customer"] = relationship("Customer")
    publication: Mapped["Publication"] = relationship("Publication")
    items: Mapped[list["CustomerOrderItem"]] = relationship(
        "CustomerOrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="CustomerOrderItem.position",
    )


class CustomerOrderItem(Base):
    __tablename__ = "customer_order_items"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_order_item_quantity"),
        CheckConstraint("price >= 0", name="ck_order_item_price"),
        CheckConstraint("discount >= 0 AND discount <= 100", name="ck_order_item_discount"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("customer_orders.id"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    book_id: Mapped[int] = mapped_column(ForeignKey("book_catalog.id"), nullable=False, index=True)
    class_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    discount: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    line_total: Mapped[float] = mapped_column(Float, nullable=False)

    order: Mapped["CustomerOrder"] = relationship("CustomerOrder", back_populates="items")
    book: Mapped["BookCatalog"] = relationship("BookCatalog")
