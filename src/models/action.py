# src/models/action.py

"""Request/response envelopes for the action-keyed HTTP endpoint."""

from dataclasses import dataclass, field
from typing import Any

from src.errors import InvalidRequestError


@dataclass
class ActionRequest:
    """Inbound ``{action, parameters, request_id}`` envelope."""

    action: str
    parameters: dict[str, Any] = field(
        default_factory=lambda: dict[str, Any]()
    )
    request_id: str = ""

    @classmethod
    def from_json(cls, payload: Any) -> "ActionRequest":
        """Validate a decoded JSON body.

        Raises:
            InvalidRequestError: On a non-object body, a missing action
                or non-object parameters.
        """
        if not isinstance(payload, dict):
            raise InvalidRequestError("request body must be a JSON object")
        request_id = str(payload.get("request_id") or "")
        action = payload.get("action")
        if not isinstance(action, str) or not action.strip():
            raise InvalidRequestError(
                "missing 'action' field", request_id=request_id
            )
        parameters = payload.get("parameters") or {}
        if not isinstance(parameters, dict):
            raise InvalidRequestError(
                "'parameters' must be a JSON object",
                request_id=request_id,
            )
        return cls(
            action=action.strip(),
            parameters=parameters,
            request_id=request_id,
        )


@dataclass
class ActionResponse:
    """Uniform ``{status, data|error, request_id}`` envelope."""

    status: str
    request_id: str = ""
    data: Any = None
    error: str = ""

    @classmethod
    def success(cls, data: Any, request_id: str = "") -> "ActionResponse":
        return cls(status="success", data=data, request_id=request_id)

    @classmethod
    def failure(cls, error: str, request_id: str = "") -> "ActionResponse":
        return cls(status="error", error=error, request_id=request_id)

    def to_dict(self) -> dict[str, Any]:
        """Serialise, omitting ``data`` and ``error`` when empty."""
        result: dict[str, Any] = {"status": self.status}
        if self.data is not None:
            result["data"] = self.data
        if self.error:
            result["error"] = self.error
        result["request_id"] = self.request_id
        return result
