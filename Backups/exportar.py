# Backups/exportar.py ────────────────────────────────────────
from datetime import datetime
from io import BytesIO
from typing import Iterable, List, Sequence, Tuple

import pandas as pd

from Conta.models import Sale
from Vendas.relatorio import Summary

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

VENDAS_COLUMNS = [
    "Código do Produto",
    "Cliente",
    "Tipo",
    "Valor",
    "Forma de Pagamento",
    "Data do Pagamento",
]


def backup_file_name(now: datetime) -> str:
    return f"backup_vendas_{now:%d-%m-%Y_%H-%M-%S}.xlsx"


def report_file_name(now: datetime) -> str:
    return f"relatorio_vendas_{now:%d-%m-%Y}.xlsx"


def vendas_frame(sales: Iterable[Sale]) -> pd.DataFrame:
    rows = [
        {
            "Código do Produto": s.product_code,
            "Cliente": s.client_name,
            "Tipo": s.type,
            "Valor": float(s.value),
            "Forma de Pagamento": s.payment_method,
            "Data do Pagamento": s.payment_date.strftime("%d/%m/%Y"),
        }
        for s in sales
    ]
    return pd.DataFrame(rows, columns=VENDAS_COLUMNS)


def backup_summary(sales_count: int, now: datetime) -> List[Tuple[str, object]]:
    return [
        ("Total de Vendas", sales_count),
        ("Data do Backup", now.strftime("%d/%m/%Y %H:%M:%S")),
    ]


def report_summary(summary: Summary) -> List[Tuple[str, object]]:
    return [
        ("Total Bruto", float(summary.total_gross)),
        ("Comissão (30%)", float(summary.total_commission)),
        ("Quantidade de Vendas", summary.count),
    ]


def build_workbook(sales: Sequence[Sale], resumo: List[Tuple[str, object]]) -> BytesIO:
    """Two sheets: ``Vendas`` (one row per sale) and ``Resumo`` (metric/value)."""
    buf = BytesIO()
    resumo_df = pd.DataFrame(resumo, columns=["Métrica", "Valor"])
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        vendas_frame(sales).to_excel(writer, sheet_name="Vendas", index=False)
        resumo_df.to_excel(writer, sheet_name="Resumo", index=False)
    buf.seek(0)
    return buf
