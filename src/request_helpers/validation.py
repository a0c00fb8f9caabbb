"""Validation of query, body and route parameter data.

Accessors accept either a plain predicate function or a schema. Both are
adapted to the :class:`Validator` protocol, whose single ``validate`` method
returns a :class:`ValidationResult` instead of raising.

Examples:
    Validating with a pydantic model::

        class Pagination(BaseModel):
            page: int = 1
            per_page: int = 20

        result = as_validator(Pagination).validate({"page": "2"})
        result.ok          # True
        result.value.page  # 2

    Validating with a predicate::

        validator = as_validator(lambda data: "id" in data)
        validator.validate({}).ok  # False
"""

from collections.abc import Callable
from typing import Any, Protocol, get_origin, runtime_checkable

from pydantic import BaseModel, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from request_helpers.exceptions import ValidationFailedError

PREDICATE_FAILED_MESSAGE = "Validation failed"


class ValidationResult(BaseModel):
    """Outcome of a validation.

    Attributes:
        ok: Whether the input was accepted.
        value: The validated (possibly coerced) value when accepted.
        errors: Failed field details, ``{"loc": [...], "msg": "..."}``.
    """

    ok: bool = Field(..., description="Whether the input was accepted")
    value: Any = Field(default=None, description="Validated value")
    errors: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Details of the failed fields",
    )

    @classmethod
    def success(cls, value: Any) -> "ValidationResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, errors: list[dict[str, Any]]) -> "ValidationResult":
        return cls(ok=False, errors=errors)


@runtime_checkable
class Validator(Protocol):
    """Anything that can validate request data."""

    def validate(self, value: Any) -> ValidationResult:
        """Validate ``value`` without raising for invalid input."""
        ...


class PredicateValidator:
    """Adapt a predicate function to the Validator protocol.

    The function may return:
    - ``True`` or ``None``: accept the input unchanged
    - ``False``: reject the input
    - anything else: accept, replacing the input with the returned value

    ``ValueError``, ``TypeError``, ``LookupError`` and ``AssertionError``
    raised by the function reject the input with the exception message.
    """

    def __init__(self, fn: Callable[[Any], Any]) -> None:
        self.fn = fn

    def validate(self, value: Any) -> ValidationResult:
        try:
            result = self.fn(value)
        except (ValueError, TypeError, LookupError, AssertionError) as e:
            return ValidationResult.failure(
                [{"loc": [], "msg": str(e) or PREDICATE_FAILED_MESSAGE}]
            )

        if result is False:
            return ValidationResult.failure([{"loc": [], "msg": PREDICATE_FAILED_MESSAGE}])
        if result is True or result is None:
            return ValidationResult.success(value)
        return ValidationResult.success(result)


class SchemaValidator:
    """Adapt a pydantic model, or any type pydantic understands, to the Validator protocol."""

    def __init__(self, schema: Any) -> None:
        self.schema = schema
        self._adapter: TypeAdapter[Any] = TypeAdapter(schema)

    def validate(self, value: Any) -> ValidationResult:
        try:
            validated = self._adapter.validate_python(value)
        except PydanticValidationError as e:
            return ValidationResult.failure(
                [{"loc": list(error["loc"]), "msg": error["msg"]} for error in e.errors()]
            )
        return ValidationResult.success(validated)


def as_validator(obj: Any) -> Validator:
    """Coerce a schema, predicate or validator to the Validator protocol.

    Raises:
        TypeError: If ``obj`` is none of the supported kinds.
    """
    # Checked before the protocol: pydantic models carry a legacy
    # ``validate`` classmethod.
    if isinstance(obj, type) or get_origin(obj) is not None:
        return SchemaValidator(obj)
    if isinstance(obj, Validator):
        return obj
    if callable(obj):
        return PredicateValidator(obj)
    raise TypeError(f"Cannot use {type(obj).__name__} as a validator")


def run_validation(value: Any, validator: Any) -> Any:
    """Validate ``value`` and return the validated result.

    Args:
        value: Raw input (query mapping, parsed body, route parameters)
        validator: A Validator, pydantic model/type, or predicate function

    Returns:
        The validated value

    Raises:
        ValidationFailedError: The input was rejected (HTTP 400).
    """
    result = as_validator(validator).validate(value)
    if not result.ok:
        raise ValidationFailedError(errors=result.errors)
    return result.value
