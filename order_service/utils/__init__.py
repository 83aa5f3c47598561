"""Reusable helpers shared across features (retry policies)."""
