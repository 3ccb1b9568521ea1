"""Versioned API routers (v1)."""
