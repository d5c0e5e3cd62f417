"""HTTP API: versioned blueprints plus the bare ``/health`` probe."""

from __future__ import annotations

from flask import Flask


def join_prefix(*segments: str) -> str:
    """Join URL segments into one absolute prefix, ignoring empty ones.

    >>> join_prefix("/api/", "v1", "")
    '/api/v1'
    """
    return "/" + "/".join(s.strip("/") for s in segments if s.strip("/"))


def init_app(app: Flask) -> None:
    """Mount each ``v1`` blueprint under ``{API_BASE_PREFIX}/v1``."""

    from userhub.api.v1 import API_VERSION, REGISTRY
    from userhub.api.v1.health import healthcheck

    version_prefix = join_prefix(app.config.get("API_BASE_PREFIX", "/api"), API_VERSION)
    for blueprint, relative in REGISTRY:
        app.register_blueprint(blueprint, url_prefix=join_prefix(version_prefix, relative))

    # Load balancers probe the bare path
    app.add_url_rule("/health", endpoint="root_health", view_func=healthcheck, methods=["GET"])


__all__ = ["init_app", "join_prefix"]
