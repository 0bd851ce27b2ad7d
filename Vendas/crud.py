from dataclasses import asdict, dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlmodel import Session, select

from Conta.database import Store
from Conta.models import Sale, utcnow


@dataclass(frozen=True)
class SalePatch:
    """The fields of a sale that may change after creation. ``None`` = keep."""

    product_code: Optional[str] = None
    client_name: Optional[str] = None
    type: Optional[str] = None
    value: Optional[Decimal] = None
    payment_method: Optional[str] = None
    payment_date: Optional[date] = None

    def changes(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


def _newest_first(stmt):
    return stmt.order_by(Sale.payment_date.desc(), Sale.id.desc())


def _apply(session: Session, sale: Sale, patch: SalePatch) -> Sale:
    for name, value in patch.changes().items():
        setattr(sale, name, value)
    sale.updated_at = utcnow()
    session.add(sale)
    session.commit()
    session.refresh(sale)
    return sale


def create_sale(store: Store, sale: Sale) -> Sale:
    with store.session("create sale") as s:
        s.add(sale)
        s.commit()
        s.refresh(sale)
        return sale


def list_sales_by_owner(store: Store, owner_id: int) -> List[Sale]:
    with store.session("list sales") as s:
        stmt = _newest_first(select(Sale).where(Sale.user_id == owner_id))
        return list(s.exec(stmt).all())


def update_sale(store: Store, sale_id: int, owner_id: int, patch: SalePatch) -> Optional[Sale]:
    """Returns the updated sale, or ``None`` when no sale of ``owner_id`` has that id."""
    with store.session("update sale") as s:
        sale = s.get(Sale, sale_id)
        if sale is None or sale.user_id != owner_id:
            return None
        return _apply(s, sale, patch)


def delete_sale(store: Store, sale_id: int, owner_id: int) -> bool:
    with store.session("delete sale") as s:
        sale = s.get(Sale, sale_id)
        if sale is None or sale.user_id != owner_id:
            return False
        s.delete(sale)
        s.commit()
        return True


# ─── admin: no owner scoping ──────────────────────────────────
def list_all_sales(store: Store) -> List[Sale]:
    with store.session("list all sales") as s:
        return list(s.exec(_newest_first(select(Sale))).all())


def list_sales_for_user(store: Store, user_id: int) -> List[Sale]:
    with store.session("list user sales") as s:
        stmt = _newest_first(select(Sale).where(Sale.user_id == user_id))
        return list(s.exec(stmt).all())


def update_sale_admin(store: Store, sale_id: int, patch: SalePatch) -> Optional[Sale]:
    with store.session("update sale (admin)") as s:
        sale = s.get(Sale, sale_id)
        if sale is None:
            return None
        return _apply(s, sale, patch)


def delete_sale_admin(store: Store, sale_id: int) -> bool:
    with store.session("delete sale (admin)") as s:
        sale = s.get(Sale, sale_id)
        if sale is None:
            return False
        s.delete(sale)
        s.commit()
        return True
