import sys
import os
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import logging

import streamlit as st

# Page configuration must be the first Streamlit command
st.set_page_config(
    page_title="Editor de XML - NFe",
    page_icon="🧾",
    layout="wide"
)

import config

logging.basicConfig(
    level=getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)

menu = st.sidebar.selectbox('Navegação', ['Importador', 'Como usar?'])

# Import and render the selected page
if menu == 'Importador':
    from frontend.pages import importador
    importador.render()
elif menu == 'Como usar?':
    from frontend.pages import home
    home.render()
