from typing import Type, TypeVar

from pydantic import BaseModel, ValidationError as SchemaError

from core.errors import ValidationError

T = TypeVar("T", bound=BaseModel)


def coerce_model(schema: Type[T], data, what: str) -> T:
    """Accept either a schema instance or a plain dict; report missing fields by name."""
    if isinstance(data, schema):
        return data
    if data is None:
        raise ValidationError(f"Missing {what} data")

    try:
        return schema.model_validate(data)
    except SchemaError as e:
        missing = [
            ".".join(str(part) for part in err["loc"])
            for err in e.errors()
            if err["type"] in ("missing", "string_too_short")
        ]
        if missing:
            raise ValidationError(f"Missing required {what} fields: {', '.join(missing)}") from e
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise ValidationError(f"Invalid {what} field '{field}': {first['msg']}") from e
