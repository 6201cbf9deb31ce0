"""Reescrita do XML original com as edições do usuário (download)."""
import logging
import re
from typing import Sequence, Union

from lxml import etree

from backend.models.document import Invoice, LineEdit
from .edit_overlay import EditMismatchError
from .field_coercion import number_to_string
from .xml_parser import parse_xml_string

logger = logging.getLogger(__name__)


def _child(parent, name: str):
    found = parent.xpath(f'./*[local-name()="{name}"]')
    return found[0] if found else None


def _set_text(prod, name: str, value: str) -> None:
    node = _child(prod, name)
    if node is None:
        # cria no mesmo namespace do <prod>
        namespace = etree.QName(prod).namespace
        node = etree.SubElement(prod, etree.QName(namespace, name) if namespace else name)
    node.text = value


def render_modified_xml(raw_xml: Union[str, bytes], edits: Sequence[LineEdit]) -> bytes:
    """Return the document with each det/prod rewritten by its positional edit.

    Only non-blank edit values are written; vProd is never touched.
    """
    root = parse_xml_string(raw_xml)
    prods = root.xpath('.//*[local-name()="det"]/*[local-name()="prod"]')
    if len(prods) != len(edits):
        raise EditMismatchError(len(prods), len(edits))

    for prod, edit in zip(prods, edits):
        if edit.code.strip():
            _set_text(prod, 'cProd', edit.code.strip())
        if edit.description.strip():
            _set_text(prod, 'xProd', edit.description.strip())
        if edit.unit.strip():
            _set_text(prod, 'uCom', edit.unit.strip())
        if edit.quantity > 0:
            _set_text(prod, 'qCom', number_to_string(edit.quantity))
        if edit.gtin.strip():
            _set_text(prod, 'cEAN', edit.gtin.strip())

    return etree.tostring(root, xml_declaration=True, encoding='UTF-8', pretty_print=True)


def download_filename(invoice: Invoice) -> str:
    destinatario = re.sub(r'[^a-zA-Z0-9]', '', invoice.recipient_name[:10])
    return f'NF{invoice.number}_{destinatario}.xml'
