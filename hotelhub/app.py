# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import importlib
from typing import Any, Protocol, cast

from flask import Flask

from hotelhub.infrastructure.container import container
from hotelhub.infrastructure.db import init_db
from hotelhub.infrastructure.super_admin_setup import setup_super_admin
from hotelhub.interfaces.http.controllers.misc_controller import MiscController
from hotelhub.shared.config import load_config
from hotelhub.shared.logging import logger, setup_logging
from hotelhub.shared.middleware.csrf import configure_csrf
from hotelhub.shared.middleware.error_handler import configure_error_handling
from hotelhub.shared.middleware.request_logger import configure_request_logging


class _CORSCallable(Protocol):
    def __call__(self, app: Flask, **kwargs: Any) -> Any: ...


_flask_cors = importlib.import_module("flask_cors")
CORS = cast(_CORSCallable, _flask_cors.CORS)


def create_app() -> Flask:
    config = load_config()
    setup_logging(debug_mode=config.debug_logging)
    init_db()

    setup_super_admin(container.user_repository)

    app = Flask(__name__)
    configure_error_handling(app)
    configure_csrf(app)

    configure_request_logging(app)

    app.config.update(SECRET_KEY=config.secret_key)
    app.json.sort_keys = False

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": config.security.allowed_origins}}
    }
    if any(o != "*" for o in config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)
    app.register_blueprint(MiscController().as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.hotels_controller.as_blueprint())
    app.register_blueprint(container.qr_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")

        resp.headers.setdefault("Referrer-Policy", "no-referrer")

        resp.headers.setdefault("X-Content-Type-Options", "nosniff")

        resp.headers.setdefault("Cross-Origin-Resource-Policy", "same-origin")
        resp.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")

        resp.headers.setdefault(
            "Permissions-Policy",
            "geolocation=(), microphone=(), camera=(), payment=(), usb=(), magnetometer=(), gyroscope=()",
        )

        resp.headers.setdefault("X-Permitted-Cross-Domain-Policies", "none")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        return resp

    logger.info("Flask app initialized")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
