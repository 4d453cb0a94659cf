"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy Workspace and SessionManager creation,
sign-in for one-shot commands, and centralized result emission
(stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

import click

from logicem.domain.listing import ListQuery, SortDirection
from logicem.infrastructure.store import StoreError
from logicem.output.formatters import OutputSettings, format_result
from logicem.services.base import NOT_AUTHENTICATED, store_failure
from logicem.services.result import fail

if TYPE_CHECKING:
    from logicem.config.settings import LogicemSettings
    from logicem.domain.records import Identity
    from logicem.infrastructure.activity import ActivityHub
    from logicem.infrastructure.ticker import Ticker
    from logicem.infrastructure.workspace import Workspace
    from logicem.services.base import BaseService
    from logicem.services.result import ServiceResult
    from logicem.services.session import ExpiryCallback, SessionManager

S = TypeVar("S", bound="BaseService")


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``. The workspace is
    lazily initialized on first use so ``--help`` and ``--version`` never
    trigger database access.

    In ``interactive`` mode (the shell) the session outlives single
    commands and is never re-established from the global credentials.
    """

    def __init__(self, settings: LogicemSettings) -> None:
        self.settings = settings
        self.interactive = False
        self._workspace: Workspace | None = None
        self._session: SessionManager | None = None

        from logicem.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def workspace(self) -> Workspace:
        """The workspace (created lazily on first access)."""
        if self._workspace is None:
            from logicem.infrastructure.workspace import Workspace

            try:
                self._workspace = Workspace(self.settings)
            except StoreError as exc:
                self.emit(store_failure("open_workspace", exc))
            if self.settings.plugins.enabled:
                self._workspace.init_plugins()
        return self._workspace

    @property
    def session(self) -> SessionManager:
        """The session manager (a plain, hand-ticked one unless replaced)."""
        if self._session is None:
            self._session = self.build_session()
        return self._session

    def build_session(
        self,
        *,
        ticker: Ticker | None = None,
        activity: ActivityHub | None = None,
        on_expired: ExpiryCallback | None = None,
    ) -> SessionManager:
        """Create a SessionManager over the workspace store and install it."""
        from logicem.services.session import SessionManager

        workspace = self.workspace
        self._session = SessionManager(
            workspace.store,
            timeout_seconds=self.settings.session.timeout_seconds,
            ticker=ticker,
            activity=activity,
            plugins=workspace.plugin_manager,
            on_expired=on_expired,
        )
        return self._session

    def authenticate(self) -> Identity:
        """Return the signed-in Identity, signing in from settings if needed.

        Emits an error (exit 1) when no session can be established.
        """
        identity = self.session.identity
        if identity is not None:
            return identity
        if self.interactive:
            self.emit(
                fail("authenticate", NOT_AUTHENTICATED, "No hay sesión activa. Usa 'login'.")
            )
        if not self.settings.has_credentials:
            self.emit(
                fail(
                    "authenticate",
                    NOT_AUTHENTICATED,
                    "Debes iniciar sesión: usa --email/--password "
                    "o LOGICEM_EMAIL/LOGICEM_PASSWORD.",
                )
            )
        result = self.session.sign_in(self.settings.email or "", self.settings.password or "")
        if not result.ok:
            self.emit(result)
        identity = self.session.identity
        if identity is None:
            self.emit(fail("authenticate", NOT_AUTHENTICATED, "La sesión terminó al iniciarse."))
        return identity

    def service(self, service_cls: type[S]) -> S:
        """Authenticate, then build *service_cls* over the workspace."""
        self.authenticate()
        return service_cls(self.workspace, self.session)

    def list_query(
        self,
        *,
        search: str,
        sort_field: str,
        asc: bool,
        page: int,
        page_size: int | None,
    ) -> ListQuery:
        """Build a :class:`ListQuery` from the shared list options."""
        return ListQuery(
            search=search,
            sort_field=sort_field,
            direction=SortDirection.ASC if asc else SortDirection.DESC,
            page=page,
            page_size=page_size or self.settings.listing.page_size,
        )

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def close(self, *_args: Any) -> None:
        """End the session and release the store (registered on the root context)."""
        if self._session is not None:
            self._session.sign_out()
        if self._workspace is not None:
            self._workspace.close()
