from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from lottobridge.query import QueryService
from lottobridge.service import configure_logging

from .config import load_settings
from .routes.health import bp as health_bp
from .routes.results import QUERY_SERVICE_KEY
from .routes.results import bp as results_bp


def create_app(query_service: Optional[QueryService] = None) -> Flask:
    settings = load_settings()
    app = Flask(__name__)
    if query_service is not None:
        app.extensions[QUERY_SERVICE_KEY] = query_service

    app.register_blueprint(health_bp)
    app.register_blueprint(results_bp, url_prefix="/api/ny")

    @app.after_request
    def apply_cors(response):
        origins = settings.cors_origins
        if "*" in origins:
            response.headers["Access-Control-Allow-Origin"] = "*"
        else:
            origin = request.headers.get("Origin")
            if origin in origins:
                response.headers["Access-Control-Allow-Origin"] = origin
                response.headers.add("Vary", "Origin")
        return response

    @app.errorhandler(Exception)
    def handle_error(exc: Exception):
        if isinstance(exc, HTTPException):
            return exc
        app.logger.exception("Unhandled error: %s", exc)
        return jsonify({"error": str(exc)}), 500

    return app


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    app = create_app()
    logging.getLogger("lottobridge.server").info("lotto-bridge up on port %s", settings.port)
    app.run(host="0.0.0.0", port=settings.port, debug=settings.flask.debug)


if __name__ == "__main__":
    main()
