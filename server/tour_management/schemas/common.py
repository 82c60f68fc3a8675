"""Common Pydantic schemas used to document error responses."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class Problem(BaseModel):
    """RFC 9457 Problem Details response."""

    type: Optional[str] = Field(None, description="Problem type URI")
    title: str = Field(..., description="Short human-readable summary")
    status: int = Field(..., description="HTTP status code")
    detail: Optional[str] = Field(None, description="Human-readable explanation")
    instance: Optional[str] = Field(None, description="URI reference for this occurrence")


class FieldError(BaseModel):
    """A validation failure for one field."""

    validator_key: str = Field("", description="Validator that failed; empty when unknown")
    message: str = Field(..., description="Human-readable message")


class ValidationProblem(Problem):
    """Problem Details carrying field-keyed validation errors."""

    errors: Dict[str, List[FieldError]] = Field(..., description="Errors keyed by field name")
