# codehire/schemas/user.py
import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for wire schemas.

    Python attributes are snake_case; JSON keys are camelCase
    (e.g. created_at <-> createdAt). Either spelling is accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserRead(CamelModel):
    """Public profile returned to clients. Never includes the password hash."""

    id: uuid.UUID
    email: str
    name: str
    created_at: datetime | None = None
