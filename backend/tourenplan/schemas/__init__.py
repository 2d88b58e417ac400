"""Pydantic request/response schemas (the HTTP contract)."""
