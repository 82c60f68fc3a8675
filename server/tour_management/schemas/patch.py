"""JSON Patch (RFC 6902) document schemas."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator


class PatchOperationType(str, Enum):
    """Supported patch operations."""
    ADD = "add"
    REMOVE = "remove"
    REPLACE = "replace"
    MOVE = "move"
    COPY = "copy"
    TEST = "test"


VALUE_OPERATIONS = (PatchOperationType.ADD, PatchOperationType.REPLACE, PatchOperationType.TEST)


class PatchOperation(BaseModel):
    """A single operation of a patch document."""

    model_config = ConfigDict(populate_by_name=True)

    op: PatchOperationType = Field(..., description="Operation to perform")
    path: str = Field(..., description="JSON Pointer to the target field, e.g. /name")
    from_: str | None = Field(None, alias="from", description="Source pointer for move and copy")
    value: Any = Field(None, description="Value for add, replace and test")

    @model_validator(mode="after")
    def check_source(self) -> "PatchOperation":
        if self.op in (PatchOperationType.MOVE, PatchOperationType.COPY) and self.from_ is None:
            raise ValueError(f"'{self.op.value}' operations require 'from'")
        if self.op in VALUE_OPERATIONS and "value" not in self.model_fields_set:
            raise ValueError(f"'{self.op.value}' operations require 'value'")
        return self


# A patch document is an ordered JSON array of operations
PatchDocument = TypeAdapter(list[PatchOperation])
