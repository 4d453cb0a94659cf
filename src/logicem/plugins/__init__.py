"""Lifecycle plugins (sign-in, sign-out, expiry, user and task events).

A failing plugin costs a warning on the result that triggered it, never
the operation itself.
"""

from logicem.plugins.manager import PluginManager

__all__ = ["PluginManager"]
