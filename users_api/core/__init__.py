"""
Core utilities shared across the users API.

This package hosts:
- configuration helpers (env vars, data file path, seed endpoint, flags)
- cross-cutting services such as logging setup

Routers and services should depend on these primitives instead of reading
os.environ or configuring handlers themselves.
"""
