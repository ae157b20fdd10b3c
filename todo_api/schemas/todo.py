"""Todo request/response schemas - REST API contract."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, Field


def _strip(value):
    return value.strip() if isinstance(value, str) else value


Description = Annotated[str, BeforeValidator(_strip), Field(min_length=1)]


class TodoCreate(BaseModel):
    # Unknown keys (including any client-sent owner) are dropped
    model_config = {"extra": "ignore"}

    description: Description
    completed: bool = False


class TodoUpdate(BaseModel):
    model_config = {"extra": "forbid"}

    description: Description | None = None
    completed: bool | None = None


class TodoResponse(BaseModel):
    id: int
    description: str
    completed: bool
    owner_id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TodoQueryParams(BaseModel):
    """Raw, unvalidated list parameters exactly as they arrived on the query string."""

    completed: str | None = None
    sort_by: str | None = None
    limit: str | None = None
    skip: str | None = None
