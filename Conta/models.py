# Conta/models.py
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _stamp():
    return Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    open_id: str = Field(index=True, unique=True, nullable=False, max_length=64)
    name: Optional[str] = None
    email: Optional[str] = Field(default=None, max_length=320)
    login_method: Optional[str] = Field(default=None, max_length=64)
    role: str = Field(default="user", index=True)   # 'user' | 'admin'
    created_at: datetime = _stamp()
    updated_at: datetime = _stamp()
    last_signed_in: datetime = _stamp()


class Sale(SQLModel, table=True):
    __tablename__ = "sales"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True, nullable=False)
    product_code: str = Field(max_length=100)
    client_name: str = Field(max_length=255)
    type: str = Field(max_length=100)               # Anel, Colar, Pulseira …
    value: Decimal = Field(max_digits=10, decimal_places=2)
    payment_method: str = Field(max_length=50)      # PIX, Boleto, Dinheiro …
    payment_date: date = Field(index=True)
    created_at: datetime = _stamp()
    updated_at: datetime = _stamp()


class Backup(SQLModel, table=True):
    """Metadata of an export; the workbook itself is never stored."""

    __tablename__ = "backups"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True, nullable=False)
    file_name: str = Field(max_length=255)
    file_size: Optional[int] = None
    sales_count: int
    created_at: datetime = _stamp()
