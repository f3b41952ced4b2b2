# src/server/http_server.py

"""Flask endpoint serving the action envelope protocol."""

import logging
from typing import Any

import simplejson
from flask import Flask, jsonify, request
from flask.json.provider import DefaultJSONProvider
from flask.typing import ResponseReturnValue

from src.config.settings import Settings
from src.errors import DealsError, InvalidRequestError
from src.models.action import ActionRequest, ActionResponse
from src.server.dispatcher import ActionDispatcher, build_dispatcher
from src.services.deals_service import DealsService

logger = logging.getLogger("daily_deals.http")


class DecimalJSONProvider(DefaultJSONProvider):
    """Flask JSON provider that writes ``Decimal`` values as exact numbers."""

    def dumps(self, obj: Any, **kwargs: Any) -> str:
        kwargs.setdefault("default", self.default)
        kwargs.setdefault("ensure_ascii", self.ensure_ascii)
        kwargs.setdefault("sort_keys", self.sort_keys)
        return simplejson.dumps(obj, use_decimal=True, **kwargs)


def create_app(dispatcher: ActionDispatcher | None = None) -> Flask:
    """Build the Flask app around *dispatcher* (daily deals by default)."""
    app = Flask(__name__)
    app.json = DecimalJSONProvider(app)
    actions = dispatcher or build_dispatcher(DealsService())

    @app.route("/mcp", methods=["POST"])
    def handle_action() -> ResponseReturnValue:
        payload = request.get_json(silent=True)
        try:
            action_request = ActionRequest.from_json(payload)
            response = actions.dispatch(action_request)
        except DealsError as exc:
            if isinstance(exc, InvalidRequestError):
                logger.warning("Rejected request: %s", exc)
            failure = ActionResponse.failure(str(exc), exc.request_id)
            return jsonify(failure.to_dict()), exc.status_code
        return jsonify(response.to_dict()), 200

    return app


def run_http_server() -> None:
    """Serve the action endpoint on the configured host and port."""
    app = create_app()
    logger.info(
        "Starting HTTP action server on %s:%d", Settings.HOST, Settings.PORT
    )
    app.run(host=Settings.HOST, port=Settings.PORT, threaded=True)
