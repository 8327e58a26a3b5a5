from datetime import datetime, timezone
from typing import Annotated

from pydantic import BaseModel, Field, field_validator

INT64_MIN = -2**63
INT64_MAX = 2**63 - 1

# SQLite INTEGER range; anything wider cannot be stored.
Int64 = Annotated[int, Field(ge=INT64_MIN, le=INT64_MAX)]


class LogItemIn(BaseModel):
    """Request body for create and update.

    ``null`` in an optional field reads as its empty value.
    """

    id: Int64 = 0
    result_code: Int64
    machine_id: str = ''
    info: str = ''
    client_timestamp: Int64 = 0

    @field_validator('id', 'client_timestamp', mode='before')
    @classmethod
    def _null_as_zero(cls, value):
        return 0 if value is None else value

    @field_validator('machine_id', 'info', mode='before')
    @classmethod
    def _null_as_empty(cls, value):
        return '' if value is None else value


class LogItemOut(BaseModel):
    """Wire form of a stored record.

    Routes serialize it with ``response_model_exclude_defaults`` so every
    empty field except ``result_code`` is left out of the JSON body.
    """

    id: int = 0
    result_code: int
    machine_id: str = ''
    info: str = ''
    client_timestamp: int = 0
    inserted_datetime: datetime | None = None

    @field_validator('machine_id', 'info', mode='before')
    @classmethod
    def _none_as_empty(cls, value):
        return '' if value is None else value

    @field_validator('client_timestamp', mode='before')
    @classmethod
    def _none_as_zero(cls, value):
        return 0 if value is None else value

    @field_validator('inserted_datetime')
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        # SQLite hands back naive datetimes; they are written in UTC.
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @classmethod
    def from_item(cls, item) -> 'LogItemOut':
        return cls(
            id=item.id,
            result_code=item.result_code,
            machine_id=item.machine_id,
            info=item.info,
            client_timestamp=item.client_timestamp,
            inserted_datetime=item.inserted_at,
        )
