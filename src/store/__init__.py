"""Table storage layer.

This module persists typed records as one JSON array file per table.
It powers table registration, CRUD, and metadata reload on startup.
"""
