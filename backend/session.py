"""Estado de uma sessão de edição: um único documento carregado por vez.

A ``Session`` é imutável; a interface substitui o valor inteiro a cada
alteração, e recarregar a página descarta tudo.
"""
import logging
from typing import Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from backend.models.document import EffectiveInvoice, Invoice, LineEdit
from backend.tools.edit_overlay import EditMismatchError, apply_edits, blank_edits
from backend.tools.invoice_extractor import extract_from_xml

logger = logging.getLogger(__name__)


class Session(BaseModel):
    model_config = ConfigDict(frozen=True)

    filename: str
    raw_xml: bytes
    invoice: Invoice
    edits: Tuple[LineEdit, ...]
    client_id: str = ''

    def with_edit(self, index: int, edit: LineEdit) -> 'Session':
        if not 0 <= index < len(self.edits):
            raise IndexError(f'Item {index} inexistente na NF {self.invoice.number}')
        edits = list(self.edits)
        edits[index] = edit
        return self.model_copy(update={'edits': tuple(edits)})

    def with_edits(self, edits: Sequence[LineEdit]) -> 'Session':
        if len(edits) != len(self.invoice.items):
            raise EditMismatchError(len(self.invoice.items), len(edits))
        return self.model_copy(update={'edits': tuple(edits)})

    def with_client_id(self, client_id: str) -> 'Session':
        return self.model_copy(update={'client_id': client_id})

    def effective(self) -> EffectiveInvoice:
        return apply_edits(self.invoice, self.edits)

    @property
    def has_edits(self) -> bool:
        return any(not edit.is_blank() for edit in self.edits)


def load_session(raw_xml: bytes, filename: str, default_client_id: str = '') -> Session:
    """Parse and extract ``raw_xml``; errors propagate and nothing is kept.

    The client identifier defaults to ``default_client_id`` when configured,
    otherwise to the recipient's tax id.
    """
    invoice = extract_from_xml(raw_xml)
    logger.info(f"Arquivo '{filename}' carregado: NF {invoice.number} para {invoice.recipient_name}")
    return Session(
        filename=filename,
        raw_xml=raw_xml,
        invoice=invoice,
        edits=blank_edits(invoice),
        client_id=default_client_id or invoice.recipient_tax_id,
    )
