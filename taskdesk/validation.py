"""
Record validation and normalization.

Each ``validate_*`` function takes an untyped value (typically a parsed JSON
body) and returns a :class:`ValidationResult`: either the normalized record,
with ``status`` defaulted to ``"PENDING"`` when absent, or a
:class:`ValidationFailure` listing every field-level defect in field order.

The functions are pure and never raise for bad input.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Type

from pydantic import ValidationError

from taskdesk.models import (
    FieldError,
    RecordModel,
    SubTaskRecord,
    TaskRecord,
    TodoRecord,
    ValidationFailure,
)

log = logging.getLogger(__name__)

TYPE_MISMATCH = "TypeMismatch"
MISSING_REQUIRED = "MissingRequired"
TOO_SHORT = "TooShort"
INVALID_NULL = "InvalidNull"

# pydantic error type -> the type name reported to callers
_EXPECTED = {
    "int_type": "integer",
    "int_parsing": "integer",
    "int_from_float": "integer",
    "string_type": "string",
    "greater_than_equal": "64-bit integer",
    "less_than_equal": "64-bit integer",
}


@dataclass(frozen=True)
class ValidationResult:
    record: Optional[dict] = None
    failure: Optional[ValidationFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def _field_error(err: dict) -> FieldError:
    field = ".".join(str(part) for part in err["loc"]) or "body"
    kind = err["type"]

    if kind == "missing":
        return FieldError(field=field, code=MISSING_REQUIRED, message=f"{field}: required")
    if kind == "string_too_short":
        min_length = err.get("ctx", {}).get("min_length")
        return FieldError(
            field=field, code=TOO_SHORT, message=f"{field}: minimum length is {min_length}"
        )
    if err.get("input", ...) is None:
        return FieldError(field=field, code=INVALID_NULL, message=f"{field}: may not be null")

    expected = _EXPECTED.get(kind)
    if expected is None:
        return FieldError(field=field, code=TYPE_MISMATCH, message=f"{field}: {err['msg']}")
    return FieldError(field=field, code=TYPE_MISMATCH, message=f"{field}: expected {expected}")


def _validate(model: Type[RecordModel], data: Any) -> ValidationResult:
    if not isinstance(data, dict):
        error = FieldError(field="body", code=TYPE_MISMATCH, message="body: expected object")
        return ValidationResult(failure=ValidationFailure(errors=[error]))
    try:
        record = model.model_validate(data)
    except ValidationError as e:
        errors = [_field_error(err) for err in e.errors()]
        log.debug("%s rejected: %s", model.__name__, [err.message for err in errors])
        return ValidationResult(failure=ValidationFailure(errors=errors))
    return ValidationResult(record=record.normalized())


def validate_task(data: Any) -> ValidationResult:
    return _validate(TaskRecord, data)


def validate_sub_task(data: Any) -> ValidationResult:
    return _validate(SubTaskRecord, data)


def validate_todo(data: Any) -> ValidationResult:
    return _validate(TodoRecord, data)


VALIDATORS = {
    "task": validate_task,
    "sub_task": validate_sub_task,
    "todo": validate_todo,
}


def validate(kind: str, data: Any) -> ValidationResult:
    """Validate ``data`` as the named record kind (``task``, ``sub_task``, ``todo``)."""
    return VALIDATORS[kind](data)
