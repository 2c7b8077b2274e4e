# flask hosting for the handler: translate flask's request into an IncomingRequest
# and the OutgoingResponse back, everything else is the handler's job

from __future__ import annotations
import json
import logging
from typing import Optional
from flask import Flask, Response, jsonify, request
from .config import options_from_env
from .handler import handle, JSON_CONTENT_TYPE
from .models import HandlerOptions, IncomingRequest

logger = logging.getLogger(__name__)

ROUTE = "/api/TemperatureAverage"

def create_app(options: Optional[HandlerOptions] = None) -> Flask:
    app = Flask(__name__)
    # read once at startup, not per request
    app.config["HANDLER_OPTIONS"] = options or options_from_env()

    @app.route(ROUTE, methods=["GET", "POST"])
    def temperature_average():
        incoming = IncomingRequest(
            method=request.method,
            headers=dict(request.headers),
            body=request.get_data(cache=False),
        )
        try:
            outgoing = handle(incoming, app.config["HANDLER_OPTIONS"])
        except Exception:
            # stack trace goes to the log only, never to the caller
            logger.exception("unexpected failure handling %s %s", request.method, request.path)
            return Response(
                json.dumps({"error": "Internal server error"}),
                status=500,
                content_type=JSON_CONTENT_TYPE,
            )
        return Response(outgoing.body, status=outgoing.status_code, headers=outgoing.headers)

    @app.get("/health")
    def health():
        return jsonify({"status": "ok"})

    return app
