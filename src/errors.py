# src/errors.py

"""Exceptions surfaced to callers of the action dispatcher."""


class DealsError(Exception):
    """Base class for errors reported in an error envelope."""

    status_code: int = 500

    def __init__(self, message: str, request_id: str = "") -> None:
        super().__init__(message)
        self.request_id = request_id


class InvalidRequestError(DealsError):
    """The request body is not a valid action envelope."""

    status_code = 400


class UnknownActionError(DealsError):
    """No handler is registered for the requested action."""

    status_code = 400

    def __init__(self, action: str, request_id: str = "") -> None:
        super().__init__(f"unknown action: {action}", request_id)
        self.action = action
