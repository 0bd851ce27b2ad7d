# Vendas/routes.py ───────────────────────────────────────────
import logging
from datetime import date, datetime
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from Backups.exportar import XLSX_MEDIA_TYPE, build_workbook, report_file_name, report_summary
from Conta.auth import get_current_user
from Conta.database import Store, get_store
from Conta.models import Sale, User
from Conta.schemas import Success
from Vendas import crud
from Vendas.relatorio import COMMISSION_RATE, SalesFilter, filter_sales, payment_methods, summarize
from Vendas.schemas import (
    OptionsOut, ReportOut, SaleIdIn, SaleIn, SaleOut, SaleUpdateIn, StatsOut,
)
from errors import InvalidArgument, NotFound

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sales", tags=["sales"])

CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentStore = Annotated[Store, Depends(get_store)]


def patch_from(body: SaleIn) -> crud.SalePatch:
    return crud.SalePatch(
        product_code=body.product_code,
        client_name=body.client_name,
        type=body.type,
        value=body.value,
        payment_method=body.payment_method,
        payment_date=body.payment_date,
    )


def stats_of(sales: List[Sale]) -> StatsOut:
    summary = summarize(sales)
    return StatsOut(
        total_gross=float(summary.total_gross),
        total_net=float(summary.total_net),
        total_commission=float(summary.total_commission),
        count=summary.count,
        by_payment_method={k: float(v) for k, v in summary.by_payment_method.items()},
    )


@router.post("/create", response_model=Success)
def create(body: SaleIn, user: CurrentUser, store: CurrentStore):
    sale = crud.create_sale(store, Sale(
        user_id=user.id,
        product_code=body.product_code,
        client_name=body.client_name,
        type=body.type,
        value=body.value,
        payment_method=body.payment_method,
        payment_date=body.payment_date,
    ))
    logger.info("Sale %s created by user %s", sale.id, user.id)
    return Success()


@router.get("/list", response_model=List[SaleOut])
def list_sales(user: CurrentUser, store: CurrentStore):
    return [SaleOut.from_row(s) for s in crud.list_sales_by_owner(store, user.id)]


@router.get("/stats", response_model=StatsOut)
def stats(user: CurrentUser, store: CurrentStore):
    return stats_of(crud.list_sales_by_owner(store, user.id))


@router.get("/options", response_model=OptionsOut)
def options(user: CurrentUser):
    return OptionsOut(commission_rate=float(COMMISSION_RATE))


@router.get("/report", response_model=ReportOut)
def report(
    user: CurrentUser,
    store: CurrentStore,
    payment_method: Annotated[Optional[str], Query(alias="paymentMethod")] = None,
    client_name: Annotated[Optional[str], Query(alias="clientName")] = None,
    start_date: Annotated[Optional[date], Query(alias="startDate")] = None,
    end_date: Annotated[Optional[date], Query(alias="endDate")] = None,
):
    """Own sales narrowed by the report filters, with their totals."""
    sales = crud.list_sales_by_owner(store, user.id)
    filtro = SalesFilter(
        payment_method=payment_method or None,
        client_name=(client_name or "").strip() or None,
        start_date=start_date,
        end_date=end_date,
    )
    selected = filter_sales(sales, filtro)
    summary = summarize(selected)
    return ReportOut(
        sales=[SaleOut.from_row(s) for s in selected],
        total_gross=float(summary.total_gross),
        total_commission=float(summary.total_commission),
        total_net=float(summary.total_net),
        count=summary.count,
        payment_methods=payment_methods(sales),
    )


@router.get("/export")
def export(user: CurrentUser, store: CurrentStore):
    sales = crud.list_sales_by_owner(store, user.id)
    if not sales:
        raise InvalidArgument("Nenhuma venda para exportar")

    buf = build_workbook(sales, report_summary(summarize(sales)))
    filename = report_file_name(datetime.now())
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return StreamingResponse(buf, media_type=XLSX_MEDIA_TYPE, headers=headers)


@router.post("/update", response_model=Success)
def update(body: SaleUpdateIn, user: CurrentUser, store: CurrentStore):
    if crud.update_sale(store, body.id, user.id, patch_from(body)) is None:
        raise NotFound("Venda não encontrada")
    logger.info("Sale %s updated by user %s", body.id, user.id)
    return Success()


@router.post("/delete", response_model=Success)
def delete(body: SaleIdIn, user: CurrentUser, store: CurrentStore):
    if not crud.delete_sale(store, body.id, user.id):
        raise NotFound("Venda não encontrada")
    logger.info("Sale %s deleted by user %s", body.id, user.id)
    return Success()
