"""Catalog pricing, set assembly and order reconciliation for the bookhub back office."""
