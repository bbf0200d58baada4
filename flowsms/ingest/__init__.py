"""Spreadsheet ingestion helpers (CSV splitting and positional cell parsing)."""
