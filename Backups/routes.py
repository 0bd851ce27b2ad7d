# Backups/routes.py ──────────────────────────────────────────
import logging
from datetime import datetime
from typing import Annotated, List

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from Backups import crud
from Backups.exportar import XLSX_MEDIA_TYPE, backup_file_name, backup_summary, build_workbook
from Backups.schemas import BackupIdIn, BackupIn, BackupOut
from Conta.auth import get_current_user
from Conta.database import Store, get_store
from Conta.models import Backup, User
from Conta.schemas import Success
from Vendas.crud import list_sales_by_owner
from errors import InvalidArgument, NotFound

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/backups", tags=["backups"])

CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentStore = Annotated[Store, Depends(get_store)]


@router.post("/create", response_model=Success)
def create(body: BackupIn, user: CurrentUser, store: CurrentStore):
    """Record an export that was produced elsewhere (metadata only)."""
    crud.create_backup(store, Backup(
        user_id=user.id,
        file_name=body.file_name,
        file_size=body.file_size,
        sales_count=body.sales_count,
    ))
    return Success()


@router.get("/list", response_model=List[BackupOut])
def list_backups(user: CurrentUser, store: CurrentStore):
    return [BackupOut.from_row(b) for b in crud.list_backups_by_owner(store, user.id)]


@router.post("/delete", response_model=Success)
def delete(body: BackupIdIn, user: CurrentUser, store: CurrentStore):
    if not crud.delete_backup(store, body.id, user.id):
        raise NotFound("Backup não encontrado")
    return Success()


@router.post("/export")
def export(user: CurrentUser, store: CurrentStore):
    """Build the backup workbook, then record it and send it to the browser."""
    sales = list_sales_by_owner(store, user.id)
    if not sales:
        raise InvalidArgument("Nenhuma venda para fazer backup")

    now = datetime.now()
    buf = build_workbook(sales, backup_summary(len(sales), now))
    filename = backup_file_name(now)

    # 1️⃣  workbook exists → 2️⃣  metadata row → 3️⃣  download
    crud.create_backup(store, Backup(
        user_id=user.id,
        file_name=filename,
        file_size=len(buf.getvalue()),
        sales_count=len(sales),
    ))
    logger.info("Backup %s exported for user %s (%d sales)", filename, user.id, len(sales))

    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return StreamingResponse(buf, media_type=XLSX_MEDIA_TYPE, headers=headers)
