"""SQLite persistence for the document store."""
