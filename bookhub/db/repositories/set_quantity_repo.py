"""Set quantity ledger: desired bundle multiplier per (customer, class), mirrored onto sets.

The ledger row and the set's cached ``quantity`` are written in the same session, so a
failure between the two rolls both back.
"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from bookhub.db import get_session
from bookhub.db.models.master import Customer, SchoolClass
from bookhub.db.models.sets import BookSet, SetQuantity
from bookhub.errors import NotFoundError, ValidationError
from bookhub.models.inputs import ClassQuantity
from bookhub.utils.logger import get_logger

logger = get_logger("bookhub.db.set_quantity_repo")


def upsert_quantity(session: Session, customer_id: int, class_id: int, quantity: int) -> SetQuantity:
    row = session.scalars(
        select(SetQuantity).where(SetQuantity.customer_id == customer_id, SetQuantity.class_id == class_id)
    ).first()
    if row is None:
        row = SetQuantity(customer_id=customer_id, class_id=class_id, quantity=quantity)
        session.add(row)
    else:
        row.quantity = quantity
    session.flush()
    return row


def mirror_onto_set(session: Session, customer_id: int, class_id: int, quantity: int) -> bool:
    """Copy the ledger quantity onto the pair's set. Returns False when no set exists."""
    book_set = session.scalars(
        select(BookSet).where(BookSet.customer_id == customer_id, BookSet.class_id == class_id)
    ).first()
    if book_set is None:
        return False
    book_set.quantity = quantity
    return True


def ledger_quantity(session: Session, customer_id: int, class_id: int) -> int:
    qty = session.scalars(
        select(SetQuantity.quantity).where(SetQuantity.customer_id == customer_id, SetQuantity.class_id == class_id)
    ).first()
    return qty if qty is not None else 0


def set_quantities(customer_id: int, class_quantities: list[ClassQuantity]) -> dict[str, Any]:
    """Upsert quantities for many classes of one customer, all or nothing.

    Every entry is checked before the first write. Sets that do not exist yet are skipped.
    """
    with get_session() as session:
        if session.get(Customer, customer_id) is None:
            raise NotFoundError(f"Customer not found: {customer_id}")
        if not class_quantities:
            raise ValidationError("At least one class quantity is required.")
        seen: set[int] = set()
        for cq in class_quantities:
            if cq.quantity is None or cq.quantity < 0:
                raise ValidationError(f"Quantity for class {cq.class_id} cannot be negative.")
            if cq.class_id in seen:
                raise ValidationError(f"Class {cq.class_id} appears more than once.")
            if session.get(SchoolClass, cq.class_id) is None:
                raise ValidationError(f"Class not found: {cq.class_id}")
            seen.add(cq.class_id)

        updated_sets: list[int] = []
        skipped: list[int] = []
        for cq in class_quantities:
            upsert_quantity(session, customer_id, cq.class_id, cq.quantity)
            if mirror_onto_set(session, customer_id, cq.class_id, cq.quantity):
                updated_sets.append(cq.class_id)
            else:
                skipped.append(cq.class_id)
        logger.info(
            "set_quantity_repo.set_quantities",
            customer_id=customer_id,
            classes=len(class_quantities),
            sets_updated=len(updated_sets),
            sets_missing=len(skipped),
        )
        return {
            "customer_id": customer_id,
            "quantities": [{"class_id": cq.class_id, "quantity": cq.quantity} for cq in class_quantities],
            "sets_updated": updated_sets,
            "sets_missing": skipped,
        }


def set_quantity_for_all_classes(customer_id: int, quantity: int) -> dict[str, Any]:
    """Apply one quantity to every class the customer has a set for."""
    if quantity is None or quantity < 0:
        raise ValidationError("Quantity cannot be negative.")
    with get_session() as session:
        if session.get(Customer, customer_id) is None:
            raise NotFoundError(f"Customer not found: {customer_id}")
        class_ids = list(session.scalars(select(BookSet.class_id).where(BookSet.customer_id == customer_id)).all())
    if not class_ids:
        return {"customer_id": customer_id, "quantities": [], "sets_updated": [], "sets_missing": []}
    return set_quantities(customer_id, [ClassQuantity(class_id=c, quantity=quantity) for c in class_ids])


def get_quantity(customer_id: int, class_id: int) -> int:
    """Ledger quantity for the pair, 0 when none was recorded."""
    with get_session() as session:
        return ledger_quantity(session, customer_id, class_id)


def list_quantities(customer_id: int) -> list[dict[str, Any]]:
    with get_session() as session:
        q = (
            select(SetQuantity, SchoolClass.name)
            .join(SchoolClass, SchoolClass.id == SetQuantity.class_id)
            .where(SetQuantity.customer_id == customer_id)
            .order_by(SchoolClass.name)
        )
        return [
            {"class_id": row.class_id, "class_name": class_name, "quantity": row.quantity}
            for row, class_name in session.execute(q).all()
        ]
