"""Application factory for the threadboard API."""

from __future__ import annotations

import logging

from flask import Flask

from threadboard.core.config import BaseConfig, get_config
from threadboard.core.logger import configure_logging, init_app as init_logging

log = logging.getLogger(__name__)


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Create the Flask app with extensions, blueprints and error handlers.

    :param config: Config class, object or import path. Defaults to the class
        selected by ``APP_ENV``.
    :param instance_relative_config: Also read ``instance/<filename>`` when
        present, overriding the class values.
    """
    app = Flask(__name__, instance_relative_config=instance_relative_config)
    app.config.from_object(config if config is not None else get_config())
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from threadboard.api import init_app as init_api
    from threadboard.core import cors, errors, extensions, proxy

    proxy.init_app(app)
    extensions.init_app(app)
    init_logging(app)
    cors.init_app(app)
    init_api(app)
    errors.init_app(app)

    _register_shell_context(app)

    if not app.config.get("REFRESH_TOKEN_SECRET"):
        # Login and token reissue answer 500 until this is set
        log.warning("config.refresh_secret_missing")

    return app


def _register_shell_context(app: Flask) -> None:
    from threadboard import models
    from threadboard.core.extensions import db

    @app.shell_context_processor
    def _shell_context() -> dict[str, object]:
        return {
            "db": db,
            "User": models.User,
            "Post": models.Post,
            "PostStats": models.PostStats,
            "File": models.File,
            "Comment": models.Comment,
            "Like": models.Like,
        }
