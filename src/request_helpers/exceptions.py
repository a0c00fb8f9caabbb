"""Custom exceptions for the request helpers.

This module defines the error conditions that request helpers surface to
callers. Each exception carries the HTTP status code it maps to, so framework
adapters can turn it into a response without a lookup table.

Malformed input that the helpers can recover from (an unparsable
``If-Modified-Since`` date, a body that is not valid JSON) never raises; it
is replaced by an absent value and logged.

Examples:
    Guarding a handler::

        from request_helpers.exceptions import MethodNotAllowedError
        from request_helpers.methods import assert_method

        try:
            assert_method(event.method, ["POST", "PUT"])
        except MethodNotAllowedError as e:
            return JSONResponse(status_code=e.status_code, content=e.to_dict())

    Reporting validation failures::

        from request_helpers.exceptions import ValidationFailedError

        try:
            body = read_validated_body(event, PaymentRequest)
        except ValidationFailedError as e:
            logger.warning("body.rejected", errors=e.errors)
            return JSONResponse(status_code=400, content=e.to_dict())
"""

from typing import Any

METHOD_NOT_ALLOWED_MESSAGE = "HTTP method is not allowed."
VALIDATION_FAILED_MESSAGE = "Validation Error"


class RequestHelperError(Exception):
    """Base exception for all request helper errors.

    Attributes:
        message: Human-readable error description.
        status_code: HTTP status code the error maps to.

    Examples:
        Catching all request helper errors::

            try:
                handle(event)
            except RequestHelperError as e:
                return Response(status_code=e.status_code)
    """

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize the exception with a message.

        Args:
            message: Human-readable error description.
            status_code: Overrides the class default HTTP status code.
        """
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable representation of the error."""
        return {"statusCode": self.status_code, "message": self.message}


class MethodNotAllowedError(RequestHelperError):
    """The request method is not one of the allowed methods.

    Raised by :func:`request_helpers.methods.assert_method`. Maps to
    HTTP 405 and always carries the same message.

    Attributes:
        method: The method the request actually used.
        allowed: The methods that would have been accepted.
    """

    status_code = 405

    def __init__(self, method: str, allowed: list[str] | None = None) -> None:
        """Initialize the error.

        Args:
            method: The rejected request method.
            allowed: Methods the guard accepts, upper-cased.
        """
        super().__init__(METHOD_NOT_ALLOWED_MESSAGE)
        self.method = method
        self.allowed = allowed or []


class ValidationFailedError(RequestHelperError):
    """Query, body or route parameters failed validation.

    Maps to HTTP 400. The offending fields are kept in ``errors`` as a list
    of ``{"loc": [...], "msg": "..."}`` dictionaries.

    Attributes:
        errors: Structured details of the failed fields.

    Examples:
        Inspecting the failed fields::

            try:
                run_validation({"amount": "x"}, PaymentRequest)
            except ValidationFailedError as e:
                e.errors
                # [{'loc': ['amount'], 'msg': 'Input should be a valid integer, ...'}]
    """

    status_code = 400

    def __init__(
        self,
        errors: list[dict[str, Any]] | None = None,
        message: str = VALIDATION_FAILED_MESSAGE,
    ) -> None:
        """Initialize the validation error.

        Args:
            errors: Structured details of the failed fields.
            message: Human-readable error description.
        """
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["data"] = self.errors
        return data
