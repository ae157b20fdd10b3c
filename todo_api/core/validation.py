"""Schema validation for service-layer input that did not come through a FastAPI body."""

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from todo_api.core.exceptions import ValidationError

SchemaType = TypeVar("SchemaType", bound=BaseModel)


def validate_input(schema: type[SchemaType], data: dict[str, Any]) -> SchemaType:
    """Run a schema and turn its failure into the domain ValidationError."""
    try:
        return schema.model_validate(data)
    except SchemaValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise ValidationError(f"{field}: {first['msg']}" if field else first["msg"]) from exc
