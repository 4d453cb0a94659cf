"""Command: data directory initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from logicem.commands._base import LogicemCommand
from logicem.config.discovery import CONFIG_FILENAME
from logicem.infrastructure.store import StoreError
from logicem.services.base import store_failure
from logicem.services.result import ServiceResult, fail

if TYPE_CHECKING:
    from logicem.commands._context import AppContext

_INIT_EXAMPLES = """\
  logicem init
  logicem init /srv/logicem --timeout 600
  logicem init . --no-demo"""

_CONFIG_TEMPLATE = """\
# logicem configuration. Only overrides belong here; defaults are built in.

[session]
timeout_seconds = {timeout}

[store]
seed_demo = {seed}
"""


@click.command("init", cls=LogicemCommand, examples=_INIT_EXAMPLES)
@click.argument("path", required=False, default=".")
@click.option(
    "--timeout",
    type=click.IntRange(min=1),
    default=None,
    help="Idle timeout in seconds (default 300).",
)
@click.option("--no-demo", is_flag=True, help="Do not seed the demo dataset.")
@click.pass_obj
def init_cmd(app: AppContext, path: str, timeout: int | None, no_demo: bool) -> None:
    """Create logicem.toml and the document store in PATH."""
    from logicem.config.models import StoreConfig
    from logicem.infrastructure.workspace import Workspace

    root = Path(path).resolve()
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        app.emit(fail("init", "INIT_FAILED", f"No se pudo crear {root}: {exc}"))

    config_file = root / CONFIG_FILENAME
    created_config = False
    if not config_file.exists():
        config_file.write_text(
            _CONFIG_TEMPLATE.format(
                timeout=timeout or app.settings.session.timeout_seconds,
                seed="false" if no_demo else "true",
            ),
            encoding="utf-8",
        )
        created_config = True

    settings = app.settings.model_copy(
        update={"data_dir": root, "store": StoreConfig(seed_demo=not no_demo)}
    )
    try:
        workspace = Workspace(settings)
    except StoreError as exc:
        app.emit(store_failure("init", exc))
    seeded = workspace.seeded
    workspace.close()

    app.emit(
        ServiceResult(
            ok=True,
            op="init",
            data={
                "path": str(root),
                "config": str(config_file),
                "config_created": created_config,
                "seeded": seeded,
            },
        )
    )
