"""Application factory."""

from __future__ import annotations

from collections.abc import Callable

from flask import Flask

from userhub.core.config import BaseConfig, get_config
from userhub.core.logger import configure_logging


def _initializers() -> list[Callable[[Flask], None]]:
    """Return the ``init_app`` hooks in wiring order.

    ProxyFix wraps the WSGI app first; error handlers are registered after
    the blueprints.
    """
    from userhub import cli
    from userhub.api import init_app as init_api
    from userhub.core import cors, errors, extensions, proxy
    from userhub.core.logger import init_app as init_request_logging

    return [
        proxy.init_app,
        extensions.init_app,
        init_request_logging,
        cors.init_app,
        init_api,
        errors.init_app,
        cli.init_app,
    ]


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config object, class or import string; defaults to the
        class selected by ``APP_ENV``.
    :param instance_relative_config: Also read ``instance_config_filename``
        from the instance folder when it exists.
    :param instance_config_filename: Instance file holding overrides.
    :returns: Ready-to-serve application.
    """
    app = Flask(__name__, instance_relative_config=instance_relative_config)
    app.config.from_object(config if config is not None else get_config())
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))
    for init_app in _initializers():
        init_app(app)
    return app
