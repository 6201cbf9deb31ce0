import streamlit as st

from backend.models.document import Invoice


def _brl(value) -> str:
    texto = f'{value:,.2f}'
    return 'R$ ' + texto.replace(',', 'X').replace('.', ',').replace('X', '.')


def render_invoice_header(invoice: Invoice):
    col1, col2, col3 = st.columns(3)
    col1.metric('NF', f'{invoice.number}-{invoice.series}' if invoice.series else invoice.number)
    col2.metric('Emissão', invoice.issue_date.strftime('%d/%m/%Y'))
    col3.metric('Valor total', _brl(invoice.total_value))

    st.markdown(f'**Emitente:** {invoice.issuer_name or "-"} ({invoice.issuer_tax_id or "-"})')
    st.markdown(f'**Destinatário:** {invoice.recipient_name} ({invoice.recipient_tax_id})')
    if invoice.access_key:
        st.caption(f'Chave de acesso: {invoice.access_key}')


def render_submission_badge(status: str, message: str = ''):
    if status == 'success':
        st.success(f'Envio: ✅ {message}')
    else:
        st.error(f'Envio: ❌ {message}')
