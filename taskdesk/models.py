# taskdesk/models.py
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr
from typing import Annotated, Optional

DEFAULT_STATUS = "PENDING"
TITLE_MIN_LENGTH = 2

# ids and owner references must fit a 64-bit database integer
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1
RecordInt = Annotated[StrictInt, Field(ge=INT64_MIN, le=INT64_MAX)]


# Strict types throughout: "1" is not an integer, True is not an integer.
# `id` and `status` default without being Optional, so an explicit null is
# rejected while an absent key is fine.

class RecordModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    def normalized(self) -> dict:
        """Fields the caller supplied, plus `status` (defaulted when absent)."""
        data = self.model_dump(exclude_unset=True)
        data["status"] = self.status
        return data


class TaskRecord(RecordModel):
    id: RecordInt = None
    user_id: Optional[RecordInt] = None
    team_id: Optional[RecordInt] = None
    title: StrictStr = Field(..., min_length=TITLE_MIN_LENGTH)
    description: Optional[StrictStr] = None
    status: StrictStr = DEFAULT_STATUS
    due_date: Optional[StrictStr] = None   # free-form, never parsed


class SubTaskRecord(RecordModel):
    id: RecordInt = None
    task_id: RecordInt
    title: StrictStr = Field(..., min_length=TITLE_MIN_LENGTH)
    description: Optional[StrictStr] = None
    status: StrictStr = DEFAULT_STATUS
    due_date: Optional[StrictStr] = None


class TodoRecord(RecordModel):
    id: RecordInt = None
    user_id: Optional[RecordInt] = None
    title: StrictStr = Field(..., min_length=TITLE_MIN_LENGTH)
    description: Optional[StrictStr] = None
    status: StrictStr = DEFAULT_STATUS


class FieldError(BaseModel):
    field: str
    code: str       # TypeMismatch | MissingRequired | TooShort | InvalidNull
    message: str


class ValidationFailure(BaseModel):
    errors: list[FieldError]

    @property
    def fields(self) -> list[str]:
        return [e.field for e in self.errors]

    def first_message(self) -> str:
        return self.errors[0].message
