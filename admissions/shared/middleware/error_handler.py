# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask, jsonify, request
from werkzeug.exceptions import MethodNotAllowed, NotFound

from admissions.shared.errors import register_error_handler


def configure_error_handling(app: Flask) -> None:
    """AppError and unexpected errors as JSON; unknown API routes as JSON too."""

    register_error_handler(app)

    @app.errorhandler(NotFound)
    def _not_found(exc: NotFound):
        if not request.path.startswith("/api/"):
            return exc
        return jsonify({"error": "not_found", "message": "Resource not found"}), 404

    @app.errorhandler(MethodNotAllowed)
    def _method_not_allowed(exc: MethodNotAllowed):
        if not request.path.startswith("/api/"):
            return exc
        response = jsonify({"error": "method_not_allowed", "message": "Method not allowed"})
        response.headers["Allow"] = ", ".join(exc.valid_methods or ())
        return response, 405
