"""Back-office services: sessions, users, lookup lists, campaigns, calls, tasks.

Each public method checks the caller's role, works on whole store
collections, and returns a ServiceResult. Nothing here imports from
``commands`` or ``output``.
"""
