"""Observability helpers.

Request IDs + structlog contextvars for JSON access logs, plus an in-memory
metrics snapshot served from the diagnostics route.
"""
