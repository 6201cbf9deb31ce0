"""Construction of the JSON documents expected by the WMS integration.

Every business value is sent as a string, including quantities and totals.
"""
from datetime import date
from typing import Any, Dict, Optional

from backend.models.document import EffectiveInvoice, NO_GTIN
from .field_coercion import number_to_string

PRODUCT_ROOT = 'CORPEM_ERP_MERC'
NF_ENTRY_ROOT = 'CORPEM_ERP_DOC_ENT'

# Fixed values agreed with the WMS for inbound purchase invoices
PACKAGING_FACTOR = '1'
DESTINATION_TYPE = '2'
NOT_A_RETURN = '0'


def build_product_registration(client_id: str, invoice: EffectiveInvoice) -> Dict[str, Any]:
    """Cadastro de produtos: uma entrada por item com uma única embalagem."""
    produtos = [
        {
            'CODPROD': item.internal_code,
            'NOMEPROD': item.description,
            'EMBALAGENS': [
                {
                    'CODUNID': item.unit,
                    'FATOR': PACKAGING_FACTOR,
                    'CODBARRA': item.gtin.strip() or NO_GTIN,
                }
            ],
        }
        for item in invoice.items
    ]
    return {
        PRODUCT_ROOT: {
            'CGCCLIWMS': client_id,
            'PRODUTOS': produtos,
        }
    }


def order_reference(invoice: EffectiveInvoice, today: Optional[date] = None) -> str:
    """Invoice number followed by the submission date as DDMMYYYY."""
    today = today or date.today()
    return f"{invoice.number}{today.strftime('%d%m%Y')}"


def build_nf_entry(
    client_id: str,
    invoice: EffectiveInvoice,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Entrada da NF no WMS, com os itens numerados a partir de 1."""
    itens = [
        {
            'NUMSEQ': str(seq),
            'CODPROD': item.internal_code,
            'QTPROD': number_to_string(item.quantity),
            'VLTOTPROD': number_to_string(item.total_value),
        }
        for seq, item in enumerate(invoice.items, start=1)
    ]
    return {
        NF_ENTRY_ROOT: {
            'CGCCLIWMS': client_id,
            'CGCREM': invoice.issuer_tax_id,
            'NOMEREM': invoice.issuer_name,
            'TPDESTNF': DESTINATION_TYPE,
            'DEV': NOT_A_RETURN,
            'NUMNF': invoice.number,
            'SERIENF': invoice.series,
            'DTEMINF': invoice.issue_date.strftime('%d/%m/%Y'),
            'VLTOTALNF': number_to_string(invoice.total_value),
            'NUMEPEDCLI': order_reference(invoice, today),
            'CHAVENF': invoice.access_key,
            'ITENS': itens,
        }
    }
