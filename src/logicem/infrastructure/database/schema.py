"""SQLAlchemy Core table definitions for the logicem database.

A single ``documents`` table backs the key-document store: one row per
store key, the value kept as JSON text.
"""

from __future__ import annotations

from sqlalchemy import Column, MetaData, Table, Text

metadata = MetaData()

documents = Table(
    "documents",
    metadata,
    Column("key", Text, primary_key=True),
    Column("value", Text, nullable=False),  # JSON
    Column("modified", Text, nullable=False),
)
