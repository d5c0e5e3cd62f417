"""WSGI entry point: ``gunicorn -c gunicorn.conf.py wsgi:app``."""

from __future__ import annotations

from userhub import create_app

app = create_app()


if __name__ == "__main__":  # pragma: no cover - developer convenience
    app.run(host="0.0.0.0", port=int(app.config.get("SERVER_PORT", 8080)))
