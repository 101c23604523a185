"""
Per-domain repository modules for database access.

Repositories are plain functions taking a ``Session`` first; they own the
queries and commits, while services own the business rules.
"""
