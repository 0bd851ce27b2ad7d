from typing import List

from sqlmodel import select

from Conta.database import Store
from Conta.models import Backup


def create_backup(store: Store, backup: Backup) -> Backup:
    with store.session("create backup") as s:
        s.add(backup)
        s.commit()
        s.refresh(backup)
        return backup


def list_backups_by_owner(store: Store, owner_id: int) -> List[Backup]:
    with store.session("list backups") as s:
        stmt = (
            select(Backup)
            .where(Backup.user_id == owner_id)
            .order_by(Backup.created_at.desc(), Backup.id.desc())
        )
        return list(s.exec(stmt).all())


def delete_backup(store: Store, backup_id: int, owner_id: int) -> bool:
    with store.session("delete backup") as s:
        backup = s.get(Backup, backup_id)
        if backup is None or backup.user_id != owner_id:
            return False
        s.delete(backup)
        s.commit()
        return True
