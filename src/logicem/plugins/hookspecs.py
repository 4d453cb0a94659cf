"""Pluggy hook specifications for logicem lifecycle events.

Hooks fire synchronously after the state change they describe has been
persisted. Credentials never appear in any payload.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("logicem")
hookimpl = pluggy.HookimplMarker("logicem")


class LogicemHookSpec:
    """Hook specifications for the logicem plugin system."""

    @hookspec
    def post_sign_in(self, user_id: str, email: str, role: str) -> None:
        """Called after a successful sign-in."""

    @hookspec
    def post_sign_out(self, user_id: str, email: str) -> None:
        """Called after an explicit sign-out."""

    @hookspec
    def post_session_expired(self, user_id: str, email: str, idle_seconds: float) -> None:
        """Called once when a session is ended by inactivity."""

    @hookspec
    def post_password_change(self, user_id: str) -> None:
        """Called after a stored password was replaced."""

    @hookspec
    def post_user_create(self, user_id: str, email: str, role: str) -> None:
        """Called after an application user and its credential were created."""

    @hookspec
    def post_task_close(self, task_id: str, closed_by: str) -> None:
        """Called after a task was closed with observations."""


LIFECYCLE_HOOKS: frozenset[str] = frozenset(
    name for name in vars(LogicemHookSpec) if name.startswith("post_")
)
