"""Re-export all ORM models so Base.metadata has all tables."""

from bookhub.db.models.catalog import BookCatalog
from bookhub.db.models.master import (
    Branch,
    Customer,
    Language,
    Publication,
    PublicationSubtitle,
    SchoolClass,
    StationeryItem,
)
from bookhub.db.models.orders import Counter, CustomerOrder, CustomerOrderItem
from bookhub.db.models.pending import PendingBook
from bookhub.db.models.sets import BookSet, SetBookLine, SetQuantity, SetStationeryLine

__all__ = [
    "Publication",
    "PublicationSubtitle",
    "Language",
    "SchoolClass",
    "Branch",
    "Customer",
    "StationeryItem",
    "BookCatalog",
    "BookSet",
    "SetBookLine",
    "SetStationeryLine",
    "SetQuantity",
    "Counter",
    "CustomerOrder",
    "CustomerOrderItem",
    "PendingBook",
]
