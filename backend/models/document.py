from datetime import date
from decimal import Decimal
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field

# Sentinel used by the NFe layout when a product has no barcode
NO_GTIN = 'SEM GTIN'


class LineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    internal_code: str = ''
    description: str = ''
    unit: str = ''
    quantity: Decimal = Decimal('0')
    unit_value: Decimal = Decimal('0')
    # sourced from vProd, never recomputed from quantity * unit_value
    total_value: Decimal = Decimal('0')
    gtin: str = NO_GTIN
    ncm: str = ''


class Invoice(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: str = Field(..., min_length=1, description='nNF')
    series: str = ''
    issue_date: date
    total_value: Decimal = Decimal('0')
    purpose: int = 1
    access_key: str = ''
    issuer_name: str = ''
    issuer_tax_id: str = ''
    recipient_name: str
    recipient_tax_id: str = Field(..., min_length=1)
    items: Tuple[LineItem, ...] = ()


class EffectiveInvoice(Invoice):
    """Invoice with the user's line-item edits applied."""


class LineEdit(BaseModel):
    """Valores digitados pelo usuário para um item; vazio mantém o original."""
    model_config = ConfigDict(frozen=True)

    code: str = ''
    description: str = ''
    unit: str = ''
    quantity: Decimal = Decimal('0')
    gtin: str = ''

    def is_blank(self) -> bool:
        return not (
            self.code.strip()
            or self.description.strip()
            or self.unit.strip()
            or self.gtin.strip()
            or self.quantity > 0
        )
