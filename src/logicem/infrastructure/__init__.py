"""Infrastructure layer — document store, SQLite engine, ticker threads.

This layer depends on stdlib and third-party libs (SQLAlchemy).
It must never import from services, commands, or output.
"""
