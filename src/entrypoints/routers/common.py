from typing import Type, TypeVar

from fastapi.responses import JSONResponse
from pydantic import BaseModel

Schema = TypeVar("Schema", bound=BaseModel)


def failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def row_as(schema: Type[Schema], row) -> Schema:
    """Build a response schema from a `databases` record by column name."""
    return schema.model_validate({name: row[name] for name in schema.model_fields})
