"""Importador page: upload of one NFe XML, line-item edits and submission."""
import logging

import streamlit as st
from pydantic import ValidationError

import config
from backend.services.wms_client import RelayClient, SubmissionError, WMSClient, submit_invoice
from backend.session import Session, load_session
from backend.tools.edit_overlay import EditMismatchError
from backend.tools.invoice_extractor import MissingFieldError
from backend.tools.tax_id import tax_id_warnings
from backend.tools.xml_parser import ParseError
from backend.tools.xml_writer import download_filename, render_modified_xml
from frontend.components.document_renderer import render_invoice_header, render_submission_badge
from .importador_utils import EDIT_COLUMNS, ORIGINAL_COLUMNS, UNIDADES, build_edit_frame, edits_from_frame

# Configuração do logger
logger = logging.getLogger(__name__)

SESSION_KEY = 'nfe_session'


def _current_session():
    return st.session_state.get(SESSION_KEY)


def _store_session(session):
    st.session_state[SESSION_KEY] = session


def _reset():
    st.session_state.pop(SESSION_KEY, None)
    st.session_state.pop('edit_grid', None)
    st.session_state.pop('submission_status', None)


def _render_upload():
    uploaded_file = st.file_uploader(
        'Arraste e solte um arquivo XML aqui, ou clique para selecionar',
        type=['xml'],
        accept_multiple_files=False,
        help='Apenas arquivos XML são aceitos',
    )
    if uploaded_file is None:
        return

    try:
        session = load_session(uploaded_file.getvalue(), uploaded_file.name, config.DEFAULT_CLIENT_ID)
    except ParseError as e:
        logger.error(f"XML inválido em {uploaded_file.name}: {e}")
        st.error(f'Arquivo XML inválido: {e}')
        return
    except (MissingFieldError, ValidationError) as e:
        logger.error(f"NFe incompleta em {uploaded_file.name}: {e}")
        st.error(f'Não foi possível ler a nota fiscal: {e}')
        return

    _store_session(session)
    st.rerun()


def _render_grid(session: Session) -> Session:
    st.subheader('📦 Produtos')
    column_config = {
        name: st.column_config.Column(disabled=True) for name in ORIGINAL_COLUMNS
    }
    column_config['Valor unitário'] = st.column_config.NumberColumn(format='R$ %.2f', disabled=True)
    column_config['Valor total'] = st.column_config.NumberColumn(format='R$ %.2f', disabled=True)
    column_config['Unidade Interna'] = st.column_config.SelectboxColumn(options=UNIDADES)
    column_config['Quantidade Interna'] = st.column_config.NumberColumn(min_value=0)

    edited = st.data_editor(
        build_edit_frame(session),
        column_config=column_config,
        column_order=ORIGINAL_COLUMNS + list(EDIT_COLUMNS),
        hide_index=True,
        num_rows='fixed',
        use_container_width=True,
        key='edit_grid',
    )

    try:
        session = session.with_edits(edits_from_frame(edited))
    except EditMismatchError as e:
        st.error(str(e))
        return session

    _store_session(session)
    st.caption('Campos internos em branco mantêm a informação original da nota.')
    return session


def _render_client_id(session: Session) -> Session:
    client_id = st.text_input('CNPJ/CPF do cliente no WMS', value=session.client_id)
    if client_id != session.client_id:
        session = session.with_client_id(client_id)
        _store_session(session)

    for aviso in tax_id_warnings(session.client_id):
        st.warning(aviso)
    return session


def _submit_wms(session: Session):
    try:
        client = WMSClient.from_config()
    except ValueError as e:
        st.error(str(e))
        return

    with st.spinner('Enviando ao WMS...'):
        try:
            result = submit_invoice(client, session.client_id, session.effective())
        except SubmissionError as e:
            logger.error(f"Envio da NF {session.invoice.number} falhou: {e} | {e.detail[:500]}")
            st.session_state.submission_status = ('error', f'{e}: {e.detail}')
            return

    st.session_state.submission_status = (
        'success', f'NF {session.invoice.number} enviada (pedido {result.order_reference})'
    )


def _submit_relay(session: Session):
    try:
        client = RelayClient.from_config()
    except ValueError as e:
        st.error(str(e))
        return

    with st.spinner('Enviando XML...'):
        try:
            client.upload_xml(session.filename, session.raw_xml)
        except SubmissionError as e:
            st.session_state.submission_status = ('error', f'{e}: {e.detail}')
            return

    st.session_state.submission_status = ('success', f'Arquivo {session.filename} enviado')


def render():
    st.header('Editor de XML')

    session = _current_session()
    if session is None:
        _render_upload()
        return

    if st.button('Carregar Novo Arquivo', type='secondary'):
        _reset()
        st.rerun()

    render_invoice_header(session.invoice)
    session = _render_grid(session)

    st.download_button(
        'Baixar XML Modificado',
        data=render_modified_xml(session.raw_xml, session.edits),
        file_name=download_filename(session.invoice),
        mime='text/xml',
    )

    st.markdown('---')
    if config.SUBMISSION_MODE == 'relay':
        if session.has_edits:
            st.warning('No modo relay o XML original é enviado sem as edições da grade.')
        if st.button('Enviar XML', type='primary'):
            _submit_relay(session)
    else:
        session = _render_client_id(session)
        if st.button('Enviar ao WMS', type='primary'):
            _submit_wms(session)

    status = st.session_state.get('submission_status')
    if status:
        render_submission_badge(*status)
