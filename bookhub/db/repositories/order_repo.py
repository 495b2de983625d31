"""Order repository: validate against the catalog, number, and persist customer orders."""

from typing import Any, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookhub.config import ORDER_NUMBER_MAX_RETRIES
from bookhub.db import get_session
from bookhub.db.base import utcnow
from bookhub.db.models.master import Customer, Publication
from bookhub.db.models.orders import Counter, CustomerOrder, CustomerOrderItem
from bookhub.db.repositories.catalog_repo import get_snapshots
from bookhub.engine.order_validator import validate_and_price
from bookhub.errors import ConflictError, NotFoundError, OrderRejectedError, ValidationError
from bookhub.models.inputs import OrderInput
from bookhub.models.outputs import ValidatedOrder
from bookhub.utils.logger import get_logger

logger = get_logger("bookhub.db.order_repo")

ORDER_COUNTER = "customer_order_number"


def _next_order_number(session: Session) -> int:
    """Increment the order counter in the current transaction and return the new value.

    The first order creates the counter row, starting after any existing order number.
    Two writers creating it at once collide on the primary key; the caller retries.
    """
    bumped = session.execute(
        update(Counter).where(Counter.name == ORDER_COUNTER).values(value=Counter.value + 1)
    )
    if bumped.rowcount:
        return session.scalar(select(Counter.value).where(Counter.name == ORDER_COUNTER))
    start = session.scalar(select(func.coalesce(func.max(CustomerOrder.order_number), 0)))
    session.add(Counter(name=ORDER_COUNTER, value=start + 1))
    session.flush()
    return start + 1


def order_to_dict(order: CustomerOrder) -> dict[str, Any]:
    return {
        "id": order.id,
        "order_number": order.order_number,
        "customer_id": order.customer_id,
        "customer_name": order.customer.name if order.customer else None,
        "customer_type": order.customer_type,
        "publication_id": order.publication_id,
        "subtitle_id": order.subtitle_id,
        "sales_by": order.sales_by,
        "order_entry_by": order.order_entry_by,
        "order_date": order.order_date,
        "order_by": order.order_by,
        "shipped_to": order.shipped_to,
        "remark": order.remark,
        "status": order.status,
        "total": order.total,
        "items": [
            {
                "book_id": item.book_id,
                "class_name": item.class_name,
                "quantity": item.quantity,
                "price": item.price,
                "discount": item.discount,
                "line_total": item.line_total,
            }
            for item in order.items
        ],
    }


def _validate(session: Session, data: OrderInput) -> tuple[Customer, ValidatedOrder]:
    if not data.items:
        raise ValidationError("Order must contain at least one item.")
    customer = session.get(Customer, data.customer_id)
    if customer is None:
        raise NotFoundError(f"Customer not found: {data.customer_id}")
    if session.get(Publication, data.publication_id) is None:
        raise NotFoundError(f"Publication not found: {data.publication_id}")
    snapshots = get_snapshots(session, [item.book_id for item in data.items])
    try:
        validated = validate_and_price(data, snapshots)
    except OrderRejectedError as e:
        logger.warning(
            "order_repo.rejected",
            customer_id=data.customer_id,
            code=e.code,
            reasons=[r.reason for r in e.rejections],
            book_ids=[r.book_id for r in e.rejections],
        )
        raise
    return customer, validated


def preview_order(data: OrderInput) -> dict[str, Any]:
    """Dry run: validate and price without persisting anything."""
    with get_session() as session:
        _, validated = _validate(session, data)
        return validated.model_dump()


def submit_order(data: OrderInput) -> dict[str, Any]:
    """Validate every line against the catalog and persist the order in one transaction.

    A rejected line rejects the whole order. A collision on the order number rolls the
    attempt back and retries up to ORDER_NUMBER_MAX_RETRIES times.
    """
    last_error: Optional[IntegrityError] = None
    for attempt in range(1, ORDER_NUMBER_MAX_RETRIES + 1):
        try:
            with get_session() as session:
                customer, validated = _validate(session, data)
                order = CustomerOrder(
                    order_number=_next_order_number(session),
                    customer_id=customer.id,
                    customer_type=customer.customer_type or data.customer_type,
                    publication_id=data.publication_id,
                    subtitle_id=data.subtitle_id,
                    sales_by=data.sales_by,
                    order_entry_by=data.order_entry_by,
                    order_date=data.order_date or utcnow(),
                    order_by=data.order_by,
                    shipped_to=data.shipped_to,
                    remark=data.remark,
                    total=validated.total,
                    items=[
                        CustomerOrderItem(
                            position=i,
                            book_id=line.book_id,
                            class_name=line.class_name,
                            quantity=line.quantity,
                            price=line.price,
                            discount=line.discount,
                            line_total=line.line_total,
                        )
                        for i, line in enumerate(validated.lines)
                    ],
                )
                session.add(order)
                session.flush()
                session.refresh(order)
                logger.info(
                    "order_repo.submit_order",
                    order_id=order.id,
                    order_number=order.order_number,
                    customer_id=order.customer_id,
                    lines=len(order.items),
                    total=order.total,
                )
                return order_to_dict(order)
        except IntegrityError as e:
            last_error = e
            logger.warning("order_repo.order_number_collision", attempt=attempt, customer_id=data.customer_id)
    raise ConflictError("Could not assign an order number; please retry.") from last_error


def get_order(order_id: int) -> dict[str, Any]:
    with get_session() as session:
        order = session.get(CustomerOrder, order_id)
        if order is None:
            raise NotFoundError(f"No order found with ID {order_id}.")
        return order_to_dict(order)


def list_orders(customer_id: Optional[int] = None) -> list[dict[str, Any]]:
    """Orders newest number first, optionally for one customer."""
    with get_session() as session:
        q = select(CustomerOrder).order_by(CustomerOrder.order_number.desc())
        if customer_id is not None:
            q = q.where(CustomerOrder.customer_id == customer_id)
        return [order_to_dict(o) for o in session.scalars(q).all()]
