"""HTTP API for the catalog, sets, set quantities, orders and pending books."""

from bookhub.api.server import create_app

__all__ = ["create_app"]
