"""Pure rules of the back office: roles and menus, statuses, record shapes.

No I/O and no imports from services, infrastructure, commands, or config;
only the stdlib and pydantic.
"""
