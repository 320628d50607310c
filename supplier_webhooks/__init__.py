"""Supplier webhook ingestion and inventory reconciliation."""
