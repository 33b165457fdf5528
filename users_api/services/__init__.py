"""
High-level use cases for the users API.

Each service module orchestrates the document store to implement the
business rules (seed the document, list/get/create/replace/delete users).

Routers (FastAPI endpoints) call these services instead of manipulating
the JSON file directly.
"""
