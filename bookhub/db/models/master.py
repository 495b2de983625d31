"""ORM models for master/reference data: publications, classes, customers, branches, stationery."""

from sqlalchemy import Float, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookhub.db.base import Base, TimestampMixin

CUSTOMER_TYPES = ("Dealer-Retail", "Dealer-Supply", "School-Retail", "School-Supply", "School-Both")


class Publication(Base, TimestampMixin):
    """Publisher whose titles are listed in the book catalog."""

    __tablename__ = "publications"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    discount: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active")

    subtitles: Mapped[list["PublicationSubtitle"]] = relationship(
        "PublicationSubtitle", back_populates="publication"
    )


class PublicationSubtitle(Base, TimestampMixin):
    """Series/subtitle belonging to one publication."""

    __tablename__ = "publication_subtitles"
    __table_args__ = (UniqueConstraint("name", "publication_id", name="uq_subtitle_publication"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    publication_id: Mapped[int] = mapped_column(ForeignKey("publications.id"), nullable=False)

    publication: Mapped["Publication"] = relationship("Publication", back_populates="subtitles")


class Language(Base, TimestampMixin):
    __tablename__ = "languages"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)


class SchoolClass(Base, TimestampMixin):
    """School class (grade). Its name keys per-class price tables."""

    __tablename__ = "classes"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active")


class Branch(Base, TimestampMixin):
    __tablename__ = "branches"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)


class Customer(Base, TimestampMixin):
    """School or dealer that receives sets and places orders."""

    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    customer_type: Mapped[str] = mapped_column(String(32), nullable=False)
    school_code: Mapped[str | None] = mapped_column(String(64), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    discount: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    branch_id: Mapped[int | None] = mapped_column(ForeignKey("branches.id"), nullable=True)

    branch: Mapped["Branch | None"] = relationship("Branch")


class StationeryItem(Base, TimestampMixin):
    __tablename__ = "stationery_items"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active")
