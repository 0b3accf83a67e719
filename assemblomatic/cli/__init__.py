"""Expose the project-wide Click group for the ``assemblomatic-cli`` script.

The module:

* declares a single Click *group* called :pyfunc:`main`;
* wires the global verbosity and logfile flags;
* registers every sub-command located in sibling modules lazily.

Logging is configured by the sub-commands through :func:`configure_logging`
because the JSON log lives beside the archives they write.
"""

from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any, Dict

import click

from assemblomatic import __version__
from assemblomatic.utils.logging import setup_logging


class LazyGroup(click.Group):
    """Click group that imports sub-commands lazily."""

    def __init__(self, *args, **kwargs):
        self._lazy: dict[str, str] = {}
        super().__init__(*args, **kwargs)

    def set_lazy_command(self, name: str, target: str) -> None:
        """Register *name* to be imported from ``target`` on first use."""
        self._lazy[name] = target

    def list_commands(self, ctx):
        return sorted(set(super().list_commands(ctx)) | set(self._lazy))

    def get_command(self, ctx, cmd_name):  # noqa: D401 - Click signature
        """Resolve *cmd_name* from the eager map or import table."""
        cmd = super().get_command(ctx, cmd_name)
        if cmd is not None:
            return cmd
        target = self._lazy.get(cmd_name)
        if not target:
            return None
        module_name, attr = target.split(":", 1)
        module = importlib.import_module(module_name)
        cmd = getattr(module, attr)
        self.add_command(cmd, name=cmd_name)
        return cmd


def configure_logging(obj: dict[str, Any] | None, log_dir: Path | None) -> None:
    """Apply the group's verbosity flags with logs placed under *log_dir*."""
    obj = obj or {}
    setup_logging(
        log_dir=log_dir,
        verbose=obj.get("verbose", False),
        debug=obj.get("debug", False),
        extra_text_log=obj.get("save_logfile"),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Context settings shared by the entire Click hierarchy
# ─────────────────────────────────────────────────────────────────────────────
_CTX: Dict[str, Any] = dict(
    help_option_names=["-h", "--help"],
    show_default=True,
    max_content_width=120,
)


@click.group(
    cls=LazyGroup,
    context_settings=_CTX,
    help="""\b
assemblomatic-cli – assemble distribution archives from a multi-module build.

""",
)
@click.version_option(__version__)
@click.option("-v", "--verbose", is_flag=True, help="INFO-level console output.")
@click.option("--debug", is_flag=True, help="DEBUG console output and logfile.")
@click.option(
    "--save-logfile",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Mirror console output into this plain-text file.",
)
@click.pass_context
def main(  # noqa: D401 – Click requires the callback to be named “main”.
    ctx: click.Context,
    verbose: bool,
    debug: bool,
    save_logfile: Path | None,
) -> None:
    """Root command executed by *assemblomatic-cli*.

    Args:
        ctx: Click runtime context that carries objects across sub-commands.
        verbose: Emit INFO-level messages on the console.
        debug: Emit DEBUG-level messages.
        save_logfile: Optional path for a plain-text log mirroring the console.
    """
    ctx.obj = {
        "verbose": verbose,
        "debug": debug,
        "save_logfile": save_logfile,
    }


main.set_lazy_command("single", "assemblomatic.cli.single:cli")
main.set_lazy_command("modules", "assemblomatic.cli.modules:cli")

cli = main
__all__: list[str] = ["main", "configure_logging"]
