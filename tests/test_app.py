"""Smoke tests for the Streamlit shell."""
from streamlit.testing.v1 import AppTest


def test_app_renders_upload_page():
    at = AppTest.from_file('../app.py', default_timeout=30)
    at.run()

    assert not at.exception
    assert at.header[0].value == 'Editor de XML'


def test_help_page():
    at = AppTest.from_file('../app.py', default_timeout=30)
    at.run()
    at.sidebar.selectbox[0].select('Como usar?').run()

    assert not at.exception
    assert at.title[0].value == 'Editor de XML'
