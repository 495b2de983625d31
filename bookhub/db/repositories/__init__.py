"""DB repositories: sync functions, one unit of work each, returning plain dicts or pydantic models."""

from bookhub.db.repositories.catalog_repo import (
    create_entry as catalog_create_entry,
    delete_entry as catalog_delete_entry,
    get_entry as catalog_get_entry,
    list_entries as catalog_list_entries,
    update_entry as catalog_update_entry,
)
from bookhub.db.repositories.order_repo import (
    get_order as order_get,
    list_orders as order_list,
    submit_order as order_submit,
)
from bookhub.db.repositories.pending_repo import (
    list_books_with_status as pending_list_books_with_status,
    set_status as pending_set_status,
)
from bookhub.db.repositories.set_quantity_repo import set_quantities as set_quantity_bulk_update
from bookhub.db.repositories.set_repo import (
    copy_set as set_copy,
    create_set as set_create,
    update_item_status as set_update_item_status,
)

__all__ = [
    "catalog_create_entry",
    "catalog_get_entry",
    "catalog_list_entries",
    "catalog_update_entry",
    "catalog_delete_entry",
    "set_create",
    "set_copy",
    "set_update_item_status",
    "set_quantity_bulk_update",
    "order_submit",
    "order_get",
    "order_list",
    "pending_list_books_with_status",
    "pending_set_status",
]
