"""Status machine for set lines: active -> pending -> clear, and clear -> pending."""

from datetime import datetime, timezone
from typing import Optional, Protocol

from bookhub.db.models.sets import (
    LINE_STATUS_ACTIVE,
    LINE_STATUS_CLEAR,
    LINE_STATUS_PENDING,
    LINE_STATUSES,
)
from bookhub.errors import ValidationError

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    LINE_STATUS_ACTIVE: frozenset({LINE_STATUS_PENDING}),
    LINE_STATUS_PENDING: frozenset({LINE_STATUS_CLEAR}),
    LINE_STATUS_CLEAR: frozenset({LINE_STATUS_PENDING}),
}


class StatusLine(Protocol):
    status: str
    cleared_at: Optional[datetime]


def can_transition(current: str, target: str) -> bool:
    return target == current or target in ALLOWED_TRANSITIONS.get(current, frozenset())


def apply_status(line: StatusLine, target: str, now: Optional[datetime] = None) -> bool:
    """Move ``line`` to ``target``. Returns False when it already had that status.

    Entering clear stamps cleared_at; any other status unsets it.
    """
    if target not in LINE_STATUSES:
        raise ValidationError(f"Invalid status {target!r}. Expected one of {', '.join(LINE_STATUSES)}.")
    current = line.status or LINE_STATUS_ACTIVE
    if target == current:
        return False
    if not can_transition(current, target):
        raise ValidationError(f"Cannot change status from {current!r} to {target!r}.")
    line.status = target
    if target == LINE_STATUS_CLEAR:
        line.cleared_at = now or datetime.now(timezone.utc)
    else:
        line.cleared_at = None
    return True
