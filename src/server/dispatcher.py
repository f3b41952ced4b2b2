# src/server/dispatcher.py

"""Action-name to handler routing for the JSON envelope endpoint."""

import logging
from collections.abc import Callable
from typing import Any

from src.errors import DealsError, UnknownActionError
from src.models.action import ActionRequest, ActionResponse
from src.services.deals_service import DealsService

logger = logging.getLogger("daily_deals.dispatcher")

ActionHandler = Callable[[dict[str, Any]], Any]


class ActionDispatcher:
    """Looks up a handler by action name and wraps its outcome."""

    def __init__(self) -> None:
        self._handlers: dict[str, ActionHandler] = {}

    def register(self, action: str, handler: ActionHandler) -> None:
        """Register *handler* under *action*, replacing any previous one."""
        self._handlers[action] = handler
        logger.debug("Registered action '%s'", action)

    @property
    def actions(self) -> list[str]:
        return sorted(self._handlers)

    def dispatch(self, request: ActionRequest) -> ActionResponse:
        """Run the handler for *request*.

        Raises:
            UnknownActionError: If no handler is registered.
            DealsError: Wrapping any exception raised by the handler.
        """
        handler = self._handlers.get(request.action)
        if handler is None:
            logger.warning("Unknown action '%s'", request.action)
            raise UnknownActionError(request.action, request.request_id)

        logger.info(
            "Dispatching action '%s' (request_id=%s)",
            request.action,
            request.request_id,
        )
        try:
            data = handler(request.parameters)
        except DealsError:
            raise
        except Exception as exc:
            logger.error(
                "Action '%s' failed: %s",
                request.action,
                exc,
                exc_info=True,
            )
            raise DealsError(str(exc), request.request_id) from exc
        return ActionResponse.success(data, request.request_id)


def build_dispatcher(service: DealsService) -> ActionDispatcher:
    """Register the daily deals actions against *service*."""
    dispatcher = ActionDispatcher()

    def get_daily_deals(parameters: dict[str, Any]) -> dict[str, Any]:
        return service.fetch_offers_sync().to_dict()

    def refresh_daily_deals(parameters: dict[str, Any]) -> dict[str, Any]:
        return service.fetch_offers_sync(force_refresh=True).to_dict()

    dispatcher.register("get_daily_deals", get_daily_deals)
    dispatcher.register("refresh_daily_deals", refresh_daily_deals)
    return dispatcher
