"""Type-safe coercion of NFe leaf values.

Values coming out of the XML tree may be strings, ``Decimal`` (leaves of the
known quantity/value tags) or ``None`` when the tag is absent. The helpers here never raise:
absent or unparsable optional values fall back to a default.
"""
import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

logger = logging.getLogger(__name__)

# Tags that carry codes and document identifiers. They must never be parsed
# as numbers, otherwise leading zeros and long digit strings get mangled.
IDENTIFIER_FIELDS = frozenset({
    'nNF',
    'serie',
    'cNF',
    'cProd',
    'NCM',
    'CEST',
    'CFOP',
    'cEAN',
    'cEANTrib',
    'chNFe',
    'Id',
    'CNPJ',
    'CPF',
    'IE',
})

# Quantity and monetary tags. Only these become Decimal while the tree is
# built; free text such as xProd or infCpl keeps its exact characters.
NUMERIC_FIELDS = frozenset({
    'qCom',
    'vUnCom',
    'vProd',
    'qTrib',
    'vUnTrib',
    'vFrete',
    'vSeg',
    'vDesc',
    'vOutro',
    'vBC',
    'vBCST',
    'vST',
    'vICMS',
    'vICMSDeson',
    'vFCP',
    'vFCPST',
    'vII',
    'vIPI',
    'vIPIDevol',
    'vPIS',
    'vCOFINS',
    'vTotTrib',
    'vNF',
    'vPag',
    'vTroco',
    'vOrig',
    'vLiq',
    'vDup',
    'pICMS',
    'pIPI',
    'pPIS',
    'pCOFINS',
    'qVol',
    'pesoL',
    'pesoB',
})

# Plain decimal number without leading zeros ("0.5" is fine, "0700" is not)
_PLAIN_NUMBER = re.compile(r'^-?(?:0|[1-9]\d*)(?:\.\d+)?$')


def number_to_string(value: Decimal) -> str:
    """Render a Decimal in positional notation without trailing zeros.

    ``Decimal('50.00')`` -> ``'50'``, ``Decimal('2.50')`` -> ``'2.5'``.
    """
    # format() is exact; quantize/normalize round at the context precision
    text = format(value, 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    if text == '-0':
        return '0'
    return text


def as_string(value: Any, default: str = '') -> str:
    """Devolve o conteúdo textual de ``value`` ou ``default`` se ausente."""
    if value is None:
        return default
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, Decimal):
        return number_to_string(value) if value.is_finite() else default
    if isinstance(value, (int, float)):
        try:
            return number_to_string(Decimal(str(value)))
        except InvalidOperation:
            return default
    if isinstance(value, dict):
        # element with attributes: the text lives under '#text'
        return as_string(value.get('#text'), default)
    return str(value).strip()


def as_number(value: Any, default: Optional[Decimal] = None) -> Decimal:
    """Converte ``value`` para Decimal; retorna ``default`` quando não for possível."""
    if default is None:
        default = Decimal('0')

    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, dict):
        value = value.get('#text')
        if value is None:
            return default

    try:
        if isinstance(value, Decimal):
            number = value
        elif isinstance(value, (int, float)):
            number = Decimal(str(value))
        else:
            text = str(value).strip().replace(' ', '')
            if not text:
                return default
            if ',' in text and '.' in text:
                # formato brasileiro: 1.234,56
                text = text.replace('.', '').replace(',', '.')
            elif ',' in text:
                text = text.replace(',', '.')
            number = Decimal(text)
    except (InvalidOperation, ValueError) as e:
        logger.debug(f"Valor numérico inválido '{value}', usando padrão {default}: {e}")
        return default

    if not number.is_finite():
        logger.debug(f"Valor numérico não finito '{value}', usando padrão {default}")
        return default
    return number


def coerce_leaf(tag: str, text: Optional[str]) -> Any:
    """Leaf rule applied while the XML tree is being built.

    Plain numbers inside ``NUMERIC_FIELDS`` become ``Decimal``. Identifiers
    and every other tag are returned as stripped text.
    """
    if text is None:
        return ''
    text = text.strip()
    if tag in IDENTIFIER_FIELDS or tag not in NUMERIC_FIELDS:
        return text
    if _PLAIN_NUMBER.match(text):
        return Decimal(text)
    return text
