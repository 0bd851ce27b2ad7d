from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Dict, List

from pydantic import Field, field_validator

from Conta.models import Sale
from Conta.schemas import CamelModel, DbId

CENT = Decimal("0.01")
MAX_VALUE = Decimal("100000000")

PAYMENT_METHODS = ["PIX", "Cartão de Crédito", "Cartão de Débito", "Boleto", "Dinheiro", "Transferência"]
JEWELRY_TYPES = ["Anel", "Colar", "Pulseira", "Brinco", "Corrente", "Pingente", "Outros"]

_REQUIRED = {
    "product_code": ("Código do produto é obrigatório", 100),
    "client_name": ("Nome do cliente é obrigatório", 255),
    "type": ("Tipo é obrigatório", 100),
    "payment_method": ("Forma de pagamento é obrigatória", 50),
}


def parse_value(raw) -> Decimal:
    if isinstance(raw, bool):
        raise ValueError("Valor inválido")
    try:
        amount = Decimal(str(raw).strip())
    except InvalidOperation:
        raise ValueError("Valor inválido")
    if not amount.is_finite():
        raise ValueError("Valor inválido")
    # range checks run before quantize, which overflows on huge exponents
    if amount <= 0:
        raise ValueError("Valor deve ser positivo")
    if amount >= MAX_VALUE:
        raise ValueError("Valor muito alto")
    amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    if amount <= 0:
        raise ValueError("Valor deve ser positivo")
    return amount


def parse_payment_date(raw) -> date:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    text = str(raw or "").strip()
    try:
        if len(text) > 10:
            # full ISO timestamp, only its calendar date is kept
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    except ValueError:
        raise ValueError("Data do pagamento inválida")


class SaleIn(CamelModel):
    product_code: str
    client_name: str
    type: str
    value: Decimal
    payment_method: str
    payment_date: date

    @field_validator("product_code", "client_name", "type", "payment_method", mode="before")
    @classmethod
    def _required_text(cls, v, info):
        message, max_length = _REQUIRED[info.field_name]
        text = v.strip() if isinstance(v, str) else ""
        if not text:
            raise ValueError(message)
        if len(text) > max_length:
            raise ValueError(f"Máximo de {max_length} caracteres")
        return text

    @field_validator("value", mode="before")
    @classmethod
    def _value(cls, v):
        return parse_value(v)

    @field_validator("payment_date", mode="before")
    @classmethod
    def _payment_date(cls, v):
        return parse_payment_date(v)


class SaleUpdateIn(SaleIn):
    id: DbId


class SaleIdIn(CamelModel):
    id: DbId


class SaleOut(CamelModel):
    id: int
    user_id: int
    product_code: str
    client_name: str
    type: str
    value: float
    payment_method: str
    payment_date: date
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, sale: Sale) -> "SaleOut":
        return cls(
            id=sale.id,
            user_id=sale.user_id,
            product_code=sale.product_code,
            client_name=sale.client_name,
            type=sale.type,
            value=float(sale.value),
            payment_method=sale.payment_method,
            payment_date=sale.payment_date,
            created_at=sale.created_at,
            updated_at=sale.updated_at,
        )


class StatsOut(CamelModel):
    total_gross: float
    total_net: float
    total_commission: float
    count: int
    by_payment_method: Dict[str, float] = Field(default_factory=dict)


class ReportOut(CamelModel):
    sales: List[SaleOut]
    total_gross: float
    total_commission: float
    total_net: float
    count: int
    payment_methods: List[str]


class OptionsOut(CamelModel):
    payment_methods: List[str] = PAYMENT_METHODS
    jewelry_types: List[str] = JEWELRY_TYPES
    commission_rate: float

