"""Tests for the validator protocol and its adapters."""

from typing import Any

import pytest
from pydantic import BaseModel

from request_helpers.exceptions import ValidationFailedError
from request_helpers.validation import (
    PREDICATE_FAILED_MESSAGE,
    PredicateValidator,
    SchemaValidator,
    ValidationResult,
    Validator,
    as_validator,
    run_validation,
)


class Item(BaseModel):
    name: str
    quantity: int = 1


class UppercaseValidator:
    """A hand-written validator implementing the protocol."""

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, str):
            return ValidationResult.failure([{"loc": [], "msg": "not a string"}])
        return ValidationResult.success(value.upper())


class TestPredicateValidator:
    def test_true_accepts_unchanged(self) -> None:
        result = PredicateValidator(lambda v: True).validate({"a": 1})
        assert result.ok is True
        assert result.value == {"a": 1}

    def test_none_accepts_unchanged(self) -> None:
        assert PredicateValidator(lambda v: None).validate(5).value == 5

    def test_false_rejects(self) -> None:
        result = PredicateValidator(lambda v: False).validate(5)
        assert result.ok is False
        assert result.errors == [{"loc": [], "msg": PREDICATE_FAILED_MESSAGE}]

    def test_other_value_replaces_input(self) -> None:
        result = PredicateValidator(lambda v: int(v)).validate("7")
        assert result.ok is True
        assert result.value == 7

    def test_exception_rejects_with_message(self) -> None:
        result = PredicateValidator(lambda v: int(v)).validate("x")
        assert result.ok is False
        assert "invalid literal" in result.errors[0]["msg"]

    def test_key_error_rejects(self) -> None:
        result = PredicateValidator(lambda v: v["missing"]).validate({})
        assert result.ok is False

    def test_unexpected_exception_propagates(self) -> None:
        def broken(value: Any) -> bool:
            raise RuntimeError("bug")

        with pytest.raises(RuntimeError):
            PredicateValidator(broken).validate(1)


class TestSchemaValidator:
    def test_model_success(self) -> None:
        result = SchemaValidator(Item).validate({"name": "pen", "quantity": "3"})
        assert result.ok is True
        assert result.value == Item(name="pen", quantity=3)

    def test_model_failure_reports_loc(self) -> None:
        result = SchemaValidator(Item).validate({"quantity": "many"})
        assert result.ok is False
        assert sorted(tuple(e["loc"]) for e in result.errors) == [("name",), ("quantity",)]

    def test_plain_type(self) -> None:
        assert SchemaValidator(int).validate("12").value == 12

    def test_generic_alias(self) -> None:
        assert SchemaValidator(list[int]).validate(["1", "2"]).value == [1, 2]


class TestAsValidator:
    def test_model_becomes_schema_validator(self) -> None:
        assert isinstance(as_validator(Item), SchemaValidator)

    def test_generic_alias_becomes_schema_validator(self) -> None:
        assert isinstance(as_validator(dict[str, int]), SchemaValidator)

    def test_function_becomes_predicate_validator(self) -> None:
        assert isinstance(as_validator(lambda v: True), PredicateValidator)

    def test_validator_returned_as_is(self) -> None:
        validator = UppercaseValidator()
        assert as_validator(validator) is validator
        assert isinstance(validator, Validator)

    def test_unsupported_object(self) -> None:
        with pytest.raises(TypeError):
            as_validator(42)


class TestRunValidation:
    def test_returns_validated_value(self) -> None:
        assert run_validation("abc", UppercaseValidator()) == "ABC"

    def test_raises_validation_failed(self) -> None:
        with pytest.raises(ValidationFailedError) as exc_info:
            run_validation(1, UppercaseValidator())

        assert exc_info.value.status_code == 400
        assert exc_info.value.errors == [{"loc": [], "msg": "not a string"}]
