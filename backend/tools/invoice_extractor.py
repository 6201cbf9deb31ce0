"""Extraction of a normalized ``Invoice`` from the NFe attributed tree."""
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional, Union

from backend.models.document import Invoice, LineItem, NO_GTIN
from .field_coercion import as_number, as_string
from .xml_parser import ATTRIBUTE_PREFIX, normalize_list, parse_document

logger = logging.getLogger(__name__)


class MissingFieldError(ValueError):
    """Raised when a field required to identify the invoice is absent."""

    def __init__(self, field: str):
        super().__init__(f'Campo obrigatório ausente no XML: {field}')
        self.field = field


def _get(node: Any, *path: str) -> Any:
    """Walk ``path`` through nested dicts; ``None`` when any step is missing."""
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
        if isinstance(node, list):
            # repeated group where a single one is expected: take the first
            node = node[0] if node else None
    return node


def _find_inf_nfe(tree: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    for path in (('nfeProc', 'NFe', 'infNFe'), ('NFe', 'infNFe'), ('infNFe',)):
        node = _get(tree, *path)
        if isinstance(node, dict):
            return node
    return None


def _access_key(tree: Dict[str, Any], inf_nfe: Dict[str, Any]) -> str:
    key = as_string(_get(tree, 'nfeProc', 'protNFe', 'infProt', 'chNFe'))
    if key:
        return key
    # Id="NFe3519..." no próprio infNFe
    key = as_string(inf_nfe.get(f'{ATTRIBUTE_PREFIX}Id'))
    return key[3:] if key.startswith('NFe') else key


def _parse_issue_date(value: Any) -> date:
    text = as_string(value)
    try:
        # dhEmi: 2024-03-05T10:00:00-03:00, dEmi: 2024-03-05
        return date.fromisoformat(text[:10])
    except ValueError:
        logger.debug(f"Data de emissão ausente ou inválida '{text}', usando a data atual")
        return date.today()


def _parse_purpose(value: Any) -> int:
    number = as_number(value, Decimal('1'))
    if number != number.to_integral_value():
        logger.debug(f"finNFe inválido '{value}', usando 1")
        return 1
    return int(number)


def _tax_id(node: Any) -> str:
    return as_string(_get(node, 'CNPJ')) or as_string(_get(node, 'CPF'))


def _extract_item(det: Any) -> LineItem:
    prod = _get(det, 'prod') or {}
    return LineItem(
        internal_code=as_string(_get(prod, 'cProd')),
        description=as_string(_get(prod, 'xProd')),
        unit=as_string(_get(prod, 'uCom')),
        quantity=as_number(_get(prod, 'qCom')),
        unit_value=as_number(_get(prod, 'vUnCom')),
        total_value=as_number(_get(prod, 'vProd')),
        gtin=as_string(_get(prod, 'cEAN')) or NO_GTIN,
        ncm=as_string(_get(prod, 'NCM')),
    )


def extract(tree: Dict[str, Any]) -> Invoice:
    """Build an ``Invoice`` from the tree returned by ``parse_document``.

    Raises:
        MissingFieldError: if infNFe, ide/nNF, dest/xNome or the recipient
            tax id are absent or blank.
    """
    inf_nfe = _find_inf_nfe(tree)
    if inf_nfe is None:
        raise MissingFieldError('infNFe')

    ide = inf_nfe.get('ide')
    emit = inf_nfe.get('emit')
    dest = inf_nfe.get('dest')

    number = as_string(_get(ide, 'nNF'))
    if not number:
        raise MissingFieldError('ide/nNF')

    recipient_name = as_string(_get(dest, 'xNome'))
    if not recipient_name:
        raise MissingFieldError('dest/xNome')

    recipient_tax_id = _tax_id(dest)
    if not recipient_tax_id:
        raise MissingFieldError('dest/CNPJ')

    items = tuple(_extract_item(det) for det in normalize_list(inf_nfe.get('det')))
    logger.info(f'NFe {number} extraída com {len(items)} item(ns)')

    return Invoice(
        number=number,
        series=as_string(_get(ide, 'serie')),
        issue_date=_parse_issue_date(_get(ide, 'dhEmi') or _get(ide, 'dEmi')),
        total_value=as_number(_get(inf_nfe, 'total', 'ICMSTot', 'vNF')),
        purpose=_parse_purpose(_get(ide, 'finNFe')),
        access_key=_access_key(tree, inf_nfe),
        issuer_name=as_string(_get(emit, 'xNome')),
        issuer_tax_id=_tax_id(emit),
        recipient_name=recipient_name,
        recipient_tax_id=recipient_tax_id,
        items=items,
    )


def extract_from_xml(xml: Union[str, bytes]) -> Invoice:
    """Parse raw XML and extract the invoice in one step."""
    return extract(parse_document(xml))
