"""Merge of the user's line-item edits onto an extracted invoice."""
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence, Tuple

from backend.models.document import EffectiveInvoice, Invoice, LineEdit, LineItem


class EditMismatchError(ValueError):
    """Raised when the edits do not line up one-to-one with the line items."""

    def __init__(self, expected: int, received: int):
        super().__init__(f'Esperadas {expected} edições (uma por item), recebidas {received}')
        self.expected = expected
        self.received = received


def _pick(edited: str, original: str) -> str:
    return edited.strip() or original


def _apply_item(item: LineItem, edit: LineEdit) -> LineItem:
    return item.model_copy(update={
        'internal_code': _pick(edit.code, item.internal_code),
        'description': _pick(edit.description, item.description),
        'unit': _pick(edit.unit, item.unit),
        'quantity': edit.quantity if edit.quantity > 0 else item.quantity,
        'gtin': _pick(edit.gtin, item.gtin),
    })


def blank_edits(invoice: Invoice) -> Tuple[LineEdit, ...]:
    return tuple(LineEdit() for _ in invoice.items)


def apply_edits(invoice: Invoice, edits: Sequence[LineEdit]) -> EffectiveInvoice:
    """Return the invoice as it should be submitted.

    Edits are matched to items by position. Blank strings and quantities that
    are not positive keep the document value; ``unit_value`` and
    ``total_value`` always come from the document.

    Raises:
        EditMismatchError: if ``len(edits) != len(invoice.items)``.
    """
    if len(edits) != len(invoice.items):
        raise EditMismatchError(len(invoice.items), len(edits))

    items = tuple(_apply_item(item, edit) for item, edit in zip(invoice.items, edits))
    data = invoice.model_dump()
    data['items'] = items
    return EffectiveInvoice(**data)


def displayed_unit_value(item: LineItem, edit: LineEdit) -> Decimal:
    """Unit value shown in the grid: document total spread over the edited quantity."""
    if edit.quantity > 0:
        return (item.total_value / edit.quantity).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    return item.unit_value
