"""Explicit response schemas, one module per source."""
