# Admin/routes.py ────────────────────────────────────────────
import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, Query

from Conta.auth import role_required
from Conta.database import Store, get_store
from Conta.models import User
from Conta.schemas import MAX_INT, Success, UserOut
from Conta.users import list_users
from Vendas import crud
from Vendas.routes import patch_from
from Vendas.schemas import SaleIdIn, SaleOut, SaleUpdateIn
from errors import NotFound

logger = logging.getLogger(__name__)

# every route below requires role == admin, checked before any store access
router = APIRouter(prefix="/admin", tags=["admin"])

Admin = Annotated[User, Depends(role_required("admin"))]
CurrentStore = Annotated[Store, Depends(get_store)]


@router.get("/users", response_model=List[UserOut])
def users(admin: Admin, store: CurrentStore):
    return [UserOut.from_row(u) for u in list_users(store)]


@router.get("/allSales", response_model=List[SaleOut])
def all_sales(admin: Admin, store: CurrentStore):
    return [SaleOut.from_row(s) for s in crud.list_all_sales(store)]


@router.get("/userSales", response_model=List[SaleOut])
def user_sales(
    admin: Admin,
    store: CurrentStore,
    user_id: Annotated[int, Query(alias="userId", gt=0, le=MAX_INT)],
):
    return [SaleOut.from_row(s) for s in crud.list_sales_for_user(store, user_id)]


@router.post("/updateSale", response_model=Success)
def update_sale(body: SaleUpdateIn, admin: Admin, store: CurrentStore):
    if crud.update_sale_admin(store, body.id, patch_from(body)) is None:
        raise NotFound("Venda não encontrada")
    logger.info("Sale %s updated by admin %s", body.id, admin.id)
    return Success()


@router.post("/deleteSale", response_model=Success)
def delete_sale(body: SaleIdIn, admin: Admin, store: CurrentStore):
    if not crud.delete_sale_admin(store, body.id):
        raise NotFound("Venda não encontrada")
    logger.info("Sale %s deleted by admin %s", body.id, admin.id)
    return Success()
