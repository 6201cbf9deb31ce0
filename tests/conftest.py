import os
import pathlib
import sys

import pytest

# Adiciona o diretório raiz ao path para importar os módulos
sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1]))

from backend.tools.invoice_extractor import extract_from_xml

# Caminho para o diretório de fixtures
FIXTURES_DIR = os.path.join(os.path.dirname(__file__), 'fixtures', 'xml')


def load_xml_fixture(filename):
    """Carrega um arquivo XML de fixture como bytes."""
    with open(os.path.join(FIXTURES_DIR, filename), 'rb') as f:
        return f.read()


@pytest.fixture
def nfe_xml():
    return load_xml_fixture('nfe_exemplo.xml')


@pytest.fixture
def single_item_xml():
    return load_xml_fixture('nfe_um_item.xml')


@pytest.fixture
def nfe_invoice(nfe_xml):
    return extract_from_xml(nfe_xml)


@pytest.fixture
def single_item_invoice(single_item_xml):
    return extract_from_xml(single_item_xml)
