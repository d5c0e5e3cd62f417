"""``flask`` sub-commands shipped with userhub."""

from __future__ import annotations

from flask import Flask

from userhub.cli.seed import seed_cli

COMMANDS = (seed_cli,)


def init_app(app: Flask) -> None:
    """Attach :data:`COMMANDS` to ``app.cli``."""
    for command in COMMANDS:
        app.cli.add_command(command)
