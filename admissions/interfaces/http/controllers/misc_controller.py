# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, jsonify

from admissions.infrastructure.health import database_status
from admissions.infrastructure.observability import render_metrics


class MiscController:
    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/api/health", view_func=self.health, methods=["GET"])
        bp.add_url_rule("/metrics", view_func=self.metrics, methods=["GET"])
        return bp

    def health(self) -> tuple[Response, HTTPStatus]:
        status = database_status()
        code = HTTPStatus.OK if status["ok"] else HTTPStatus.SERVICE_UNAVAILABLE
        return jsonify(status), code

    def metrics(self) -> Response:
        payload, content_type = render_metrics()
        return Response(payload, content_type=content_type)
