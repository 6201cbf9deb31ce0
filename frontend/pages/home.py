"""Home page: how to use the XML editor."""
import streamlit as st

import config


def render():
    """Render the help page."""
    st.title('Editor de XML')
    st.markdown('### Como usar o Editor de XML')

    st.markdown('---')
    st.markdown("""
    - Faça upload de um arquivo XML de Nota Fiscal arrastando-o para a área indicada ou clicando para selecionar.
    - Os produtos da nota serão exibidos em uma tabela, com campos para edição de informações internas.
    - Preencha os campos desejados para cada produto.
    - Clique em "Baixar XML Modificado" para baixar o XML com as alterações, ou envie a nota ao WMS.
    - Para carregar outro arquivo, clique em "Carregar Novo Arquivo".
    - O nome do arquivo baixado será composto pelo número da nota e os primeiros caracteres do destinatário.
    """)
    st.info('**Atenção:** qualquer campo não preenchido manterá a informação original da nota.')

    if config.SUBMISSION_MODE == 'relay':
        st.caption('Modo de envio: relay (XML original)')
    else:
        st.caption('Modo de envio: WMS (cadastro de produtos + entrada de NF)')
