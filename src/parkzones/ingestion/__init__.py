"""Ingestion layer.

This package turns raw feed payloads into normalized zone records:
address parsing, defensive scalar coercion and per-item validation.
"""

__all__: list[str] = []
