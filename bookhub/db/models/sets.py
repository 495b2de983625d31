"""ORM models for sets (per customer/class bundles), their lines, and the set quantity ledger."""

from datetime import datetime

from sqlalchemy import CheckConstraint, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookhub.db.base import Base, TimestampMixin
from bookhub.db.models.catalog import BookCatalog
from bookhub.db.models.master import Customer, SchoolClass, StationeryItem

LINE_STATUS_ACTIVE = "active"
LINE_STATUS_PENDING = "pending"
LINE_STATUS_CLEAR = "clear"
LINE_STATUSES = (LINE_STATUS_ACTIVE, LINE_STATUS_PENDING, LINE_STATUS_CLEAR)


class BookSet(Base, TimestampMixin):
    """Bundle of book and stationery lines for one (customer, class) pair."""

    __tablename__ = "sets"
    __table_args__ = (
        UniqueConstraint("customer_id", "class_id", name="uq_set_customer_class"),
        CheckConstraint("quantity >= 0", name="ck_set_quantity"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), nullable=False, index=True)
    class_id: Mapped[int] = mapped_column(ForeignKey("classes.id"), nullable=False)
    # Mirror of SetQuantity.quantity for the same pair
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    customer: Mapped["Customer"] = relationship("Customer")
    school_class: Mapped["SchoolClass"] = relationship("SchoolClass")
    books: Mapped[list["SetBookLine"]] = relationship(
        "SetBookLine",
        back_populates="book_set",
        cascade="all, delete-orphan",
        order_by="SetBookLine.id",
    )
    stationery_items: Mapped[list["SetStationeryLine"]] = relationship(
        "SetStationeryLine",
        back_populates="book_set",
        cascade="all, delete-orphan",
        order_by="SetStationeryLine.id",
    )


class SetBookLine(Base):
    """Book line of a set. price is NULL when a copy could not resolve it for the target class."""

    __tablename__ = "set_books"
    __table_args__ = (
        UniqueConstraint("set_id", "book_id", name="uq_set_book"),
        CheckConstraint("quantity >= 1", name="ck_set_book_quantity"),
        CheckConstraint("price IS NULL OR price >= 0", name="ck_set_book_price"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    set_id: Mapped[int] = mapped_column(ForeignKey("sets.id"), nullable=False, index=True)
    book_id: Mapped[int] = mapped_column(ForeignKey("book_catalog.id"), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[float | None] = mapped_column(Float, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=LINE_STATUS_ACTIVE)
    cleared_at: Mapped[datetime | None] = mapped_column(nullable=True)

    book_set: Mapped["BookSet"] = relationship("BookSet", back_populates="books")
    book: Mapped["BookCatalog"] = relationship("BookCatalog")


class SetStationeryLine(Base):
    __tablename__ = "set_stationery_items"
    __table_args__ = (
        UniqueConstraint("set_id", "item_id", name="uq_set_stationery_item"),
        CheckConstraint("quantity >= 1", name="ck_set_stationery_quantity"),
        CheckConstraint("price >= 0", name="ck_set_stationery_price"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    set_id: Mapped[int] = mapped_column(ForeignKey("sets.id"), nullable=False, index=True)
    item_id: Mapped[int] = mapped_column(ForeignKey("stationery_items.id"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=LINE_STATUS_ACTIVE)
    cleared_at: Mapped[datetime | None] = mapped_column(nullable=True)

    book_set: Mapped["BookSet"] = relationship("BookSet", back_populates="stationery_items")
    item: Mapped["StationeryItem"] = relationship("StationeryItem")


class SetQuantity(Base, TimestampMixin):
    """Desired bundle multiplier per (customer, class), edited independently of the set."""

    __tablename__ = "set_quantities"
    __table_args__ = (
        UniqueConstraint("customer_id", "class_id", name="uq_set_quantity_customer_class"),
        CheckConstraint("quantity >= 0", name="ck_set_quantity_quantity"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    customer_id: Mapped[int] = mapped_column(ForeignKey("customers.id"), nullable=False, index=True)
    class_id: Mapped[int] = mapped_column(ForeignKey("classes.id"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
