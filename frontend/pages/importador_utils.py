"""Utilitários da grade de edição do importador."""
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, List

import pandas as pd

from backend.models.document import LineEdit
from backend.session import Session
from backend.tools.edit_overlay import displayed_unit_value

# Configuração do logger
logger = logging.getLogger(__name__)

UNIDADES = ['UN', 'KG', 'CX', 'PCT', 'FD', 'DZ', 'SC', 'PÇ']

ORIGINAL_COLUMNS = [
    'Código do produto',
    'Descrição',
    'Unidade',
    'Quantidade',
    'Valor unitário',
    'Valor total',
    'EAN',
]
EDIT_COLUMNS = {
    'Código Interno': 'code',
    'Descrição Interna': 'description',
    'Unidade Interna': 'unit',
    'Quantidade Interna': 'quantity',
    'Código EAN': 'gtin',
}


def build_edit_frame(session: Session) -> pd.DataFrame:
    """Monta a grade: colunas do documento (somente leitura) e colunas de edição."""
    rows = []
    for item, edit in zip(session.invoice.items, session.edits):
        rows.append({
            'Código do produto': item.internal_code,
            'Descrição': item.description,
            'Unidade': item.unit,
            'Quantidade': float(item.quantity),
            'Valor unitário': float(displayed_unit_value(item, edit)),
            'Valor total': float(item.total_value),
            'EAN': item.gtin,
            'Código Interno': edit.code,
            'Descrição Interna': edit.description,
            'Unidade Interna': edit.unit or None,
            'Quantidade Interna': float(edit.quantity) if edit.quantity > 0 else None,
            'Código EAN': edit.gtin,
        })
    return pd.DataFrame(rows, columns=ORIGINAL_COLUMNS + list(EDIT_COLUMNS))


def _cell_text(value: Any) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ''
    return str(value).strip()


def _cell_quantity(value: Any) -> Decimal:
    if value is None or pd.isna(value):
        return Decimal('0')
    try:
        quantity = Decimal(str(value))
    except InvalidOperation:
        logger.debug(f"Quantidade inválida na grade: {value}")
        return Decimal('0')
    return quantity if quantity > 0 else Decimal('0')


def edits_from_frame(frame: pd.DataFrame) -> List[LineEdit]:
    """Converte a grade editada em uma ``LineEdit`` por linha, na mesma ordem."""
    edits = []
    for _, row in frame.iterrows():
        edits.append(LineEdit(
            code=_cell_text(row.get('Código Interno')),
            description=_cell_text(row.get('Descrição Interna')),
            unit=_cell_text(row.get('Unidade Interna')),
            quantity=_cell_quantity(row.get('Quantidade Interna')),
            gtin=_cell_text(row.get('Código EAN')),
        ))
    return edits
