from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from Conta.models import User

# INTEGER columns are 32-bit signed on Postgres
MAX_INT = 2**31 - 1
DbId = Annotated[int, Field(gt=0, le=MAX_INT)]
Count = Annotated[int, Field(ge=0, le=MAX_INT)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Success(CamelModel):
    success: bool = True


class UserOut(CamelModel):
    id: int
    open_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    login_method: Optional[str] = None
    role: str
    created_at: datetime
    updated_at: datetime
    last_signed_in: datetime

    @classmethod
    def from_row(cls, user: User) -> "UserOut":
        return cls(
            id=user.id,
            open_id=user.open_id,
            name=user.name,
            email=user.email,
            login_method=user.login_method,
            role=user.role,
            created_at=user.created_at,
            updated_at=user.updated_at,
            last_signed_in=user.last_signed_in,
        )
