# easybit/schemas/responses.py

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """snake_case attributes, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DataEnvelope(BaseModel, Generic[T]):
    data: T


class ApiErrorPayload(CamelModel):
    error_message: str
    error_code: int
