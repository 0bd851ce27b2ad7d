from datetime import datetime
from typing import Optional

from pydantic import field_validator

from Conta.models import Backup
from Conta.schemas import CamelModel, Count, DbId


class BackupIn(CamelModel):
    file_name: str
    file_size: Optional[Count] = None
    sales_count: Count

    @field_validator("file_name", mode="before")
    @classmethod
    def _file_name(cls, v):
        text = v.strip() if isinstance(v, str) else ""
        if not text:
            raise ValueError("Nome do arquivo é obrigatório")
        if len(text) > 255:
            raise ValueError("Máximo de 255 caracteres")
        return text


class BackupIdIn(CamelModel):
    id: DbId


class BackupOut(CamelModel):
    id: int
    user_id: int
    file_name: str
    file_size: Optional[int] = None
    sales_count: int
    created_at: datetime

    @classmethod
    def from_row(cls, backup: Backup) -> "BackupOut":
        return cls(
            id=backup.id,
            user_id=backup.user_id,
            file_name=backup.file_name,
            file_size=backup.file_size,
            sales_count=backup.sales_count,
            created_at=backup.created_at,
        )
