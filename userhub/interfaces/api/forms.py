"""Multipart form parsing into the per-operation schemas."""

from typing import Any, Dict, Optional, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

from userhub.core.exceptions import ValidationException

SchemaType = TypeVar("SchemaType", bound=BaseModel)


def parse_form(
    schema: Type[SchemaType],
    values: Dict[str, Any],
    required_message: Optional[str] = None,
) -> SchemaType:
    """Validate submitted form ``values`` against ``schema``.

    Fields the client did not send are dropped so they stay unset.
    A missing or blank required field is reported with ``required_message``.
    """
    submitted = {k: v for k, v in values.items() if v is not None}
    try:
        return schema.model_validate(submitted)
    except ValidationError as e:
        fields = []
        missing = False
        for err in e.errors():
            field = str(err["loc"][-1]) if err["loc"] else "body"
            message = err["msg"].removeprefix("Value error, ")
            missing = missing or err["type"] == "missing" or message == "Field required"
            fields.append({"field": field, "message": message})

        if missing and required_message:
            message = required_message
        else:
            message = "; ".join(f"{f['field']}: {f['message']}" for f in fields)
        raise ValidationException(message, details={"fields": fields}) from e


async def submitted_form(request: Request) -> Dict[str, str]:
    """Text fields exactly as the client sent them.

    ``Form(None)`` parameters turn an empty value into ``None``, which
    makes a blanked field look unsent. Reading the parsed form keeps the
    difference.
    """
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}
