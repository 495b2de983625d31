"""ORM model for the book catalog (CatalogEntry) and its pricing columns."""

from sqlalchemy import JSON, CheckConstraint, Float, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookhub.db.base import Base, TimestampMixin
from bookhub.db.models.master import Language, Publication, PublicationSubtitle

PRICE_KIND_COMMON = "common"
PRICE_KIND_PER_CLASS = "per_class"


class BookCatalog(Base, TimestampMixin):
    """Sellable book. Exactly one pricing variant is populated, selected by price_kind.

    (name, publication_id, subtitle_id) is unique; the repository enforces it because a
    NULL subtitle would slip past a database UNIQUE constraint.
    """

    __tablename__ = "book_catalog"
    __table_args__ = (
        CheckConstraint(
            "(price_kind = 'common' AND common_price IS NOT NULL"
            " AND prices_by_class IS NULL AND isbn_by_class IS NULL)"
            " OR (price_kind = 'per_class' AND prices_by_class IS NOT NULL"
            " AND common_price IS NULL AND common_isbn IS NULL)",
            name="ck_book_catalog_price_kind",
        ),
        CheckConstraint("discount_percent >= 0 AND discount_percent <= 100", name="ck_book_catalog_discount"),
        CheckConstraint("gst_percent >= 0 AND gst_percent <= 100", name="ck_book_catalog_gst"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    publication_id: Mapped[int] = mapped_column(ForeignKey("publications.id"), nullable=False, index=True)
    subtitle_id: Mapped[int | None] = mapped_column(ForeignKey("publication_subtitles.id"), nullable=True)
    language_id: Mapped[int | None] = mapped_column(ForeignKey("languages.id"), nullable=True)

    price_kind: Mapped[str] = mapped_column(String(16), nullable=False)
    common_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    common_isbn: Mapped[str | None] = mapped_column(String(32), nullable=True)
    prices_by_class: Mapped[dict[str, float] | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    isbn_by_class: Mapped[dict[str, str] | None] = mapped_column(JSON(none_as_null=True), nullable=True)

    discount_percent: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    gst_percent: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active", index=True)

    publication: Mapped["Publication"] = relationship("Publication")
    subtitle: Mapped["PublicationSubtitle | None"] = relationship("PublicationSubtitle")
    language: Mapped["Language | None"] = relationship("Language")
