"""Testes do envio ao WMS e ao relay."""
import json
from datetime import date
from unittest.mock import MagicMock, patch

import pytest
import requests

from backend.services.wms_client import (
    JSON_CONTENT_TYPE,
    RelayClient,
    ResponseFormatError,
    SubmissionError,
    TransportError,
    WMSClient,
    submit_invoice,
)
from backend.tools.edit_overlay import apply_edits, blank_edits

WMS_URL = 'https://wms.example.com/api'


def make_response(status_code=200, body=None, text=None):
    r = requests.Response()
    r.status_code = status_code
    r.encoding = 'utf-8'
    r.url = WMS_URL
    if text is None:
        text = json.dumps(body if body is not None else {}, ensure_ascii=False)
    r._content = text.encode('utf-8')
    return r


@pytest.fixture
def client():
    return WMSClient(WMS_URL, token='segredo', auth_header='TOKEN_CP', success_field='CORPEM_WS_OK')


@pytest.fixture
def effective(single_item_invoice):
    return apply_edits(single_item_invoice, blank_edits(single_item_invoice))


class TestPostJson:

    @patch('backend.services.wms_client.requests.post')
    def test_envia_json_com_headers(self, mock_post, client):
        mock_post.return_value = make_response(body={'CORPEM_WS_OK': 'OK'})

        result = client.post_json({'NOME': 'Açúcar'})

        assert result == {'CORPEM_WS_OK': 'OK'}
        args, kwargs = mock_post.call_args
        assert args == (WMS_URL,)
        assert kwargs['headers'] == {'Content-Type': JSON_CONTENT_TYPE, 'TOKEN_CP': 'segredo'}
        assert json.loads(kwargs['data'].decode('utf-8')) == {'NOME': 'Açúcar'}
        assert 'Açúcar'.encode('utf-8') in kwargs['data']

    @patch('backend.services.wms_client.requests.post')
    def test_token_vazio(self, mock_post):
        mock_post.return_value = make_response(body={'CORPEM_WS_OK': 'OK'})
        WMSClient(WMS_URL).post_json({})
        assert mock_post.call_args.kwargs['headers']['TOKEN_CP'] == ''

    @patch('backend.services.wms_client.requests.post')
    def test_sem_sentinela_ok(self, mock_post, client):
        mock_post.return_value = make_response(body={'CORPEM_WS_ERRO': 'Produto inválido'})

        with pytest.raises(TransportError) as excinfo:
            client.post_json({})
        assert 'Produto inválido' in excinfo.value.detail

    @patch('backend.services.wms_client.requests.post')
    def test_status_http_de_erro(self, mock_post, client):
        mock_post.return_value = make_response(status_code=500, text='Internal Server Error')

        with pytest.raises(TransportError) as excinfo:
            client.post_json({})
        assert excinfo.value.status_code == 500
        assert excinfo.value.detail == 'Internal Server Error'

    @patch('backend.services.wms_client.requests.post')
    def test_corpo_nao_json(self, mock_post, client):
        mock_post.return_value = make_response(text='<html>ok</html>')

        with pytest.raises(ResponseFormatError) as excinfo:
            client.post_json({})
        assert excinfo.value.detail == '<html>ok</html>'

    @patch('backend.services.wms_client.requests.post')
    def test_corpo_json_nao_objeto(self, mock_post, client):
        mock_post.return_value = make_response(text='["OK"]')

        with pytest.raises(ResponseFormatError):
            client.post_json({})

    @patch('backend.services.wms_client.requests.post')
    def test_falha_de_rede(self, mock_post, client):
        mock_post.side_effect = requests.exceptions.ConnectionError('connection refused')

        with pytest.raises(TransportError) as excinfo:
            client.post_json({})
        assert 'connection refused' in excinfo.value.detail


def test_url_obrigatoria():
    with pytest.raises(ValueError):
        WMSClient('')


class TestSubmitInvoice:

    def test_envia_produtos_e_depois_nf(self, effective):
        client = MagicMock(spec=WMSClient)
        client.post_json.return_value = {'CORPEM_WS_OK': 'OK'}

        result = submit_invoice(client, '12.345.678/0001-99', effective, date(2024, 3, 7))

        assert client.post_json.call_count == 2
        first, second = [c.args[0] for c in client.post_json.call_args_list]
        assert 'CORPEM_ERP_MERC' in first
        assert first['CORPEM_ERP_MERC']['CGCCLIWMS'] == '12345678000199'
        assert 'CORPEM_ERP_DOC_ENT' in second
        assert result.client_id == '12345678000199'
        assert result.order_reference == '123407032024'

    def test_falha_no_cadastro_interrompe_envio(self, effective):
        client = MagicMock(spec=WMSClient)
        client.post_json.side_effect = TransportError('WMS recusou o envio', detail='{}')

        with patch('backend.services.wms_client.build_nf_entry') as mock_nf_entry:
            with pytest.raises(SubmissionError):
                submit_invoice(client, '12345678000199', effective)

        assert client.post_json.call_count == 1
        mock_nf_entry.assert_not_called()

    @patch('backend.services.wms_client.requests.post')
    def test_resposta_sem_ok_nao_chama_entrada(self, mock_post, client, effective):
        mock_post.return_value = make_response(body={'CORPEM_WS_OK': 'NOK'})

        with pytest.raises(TransportError):
            submit_invoice(client, '12345678000199', effective)

        assert mock_post.call_count == 1


class TestRelayClient:

    @patch('backend.services.wms_client.requests.post')
    def test_upload_multipart(self, mock_post, single_item_xml):
        mock_post.return_value = make_response(status_code=201, text='')

        RelayClient('https://relay.example.com/upload').upload_xml('nota.xml', single_item_xml)

        kwargs = mock_post.call_args.kwargs
        assert kwargs['files'] == {'file': ('nota.xml', single_item_xml, 'text/xml')}

    @patch('backend.services.wms_client.requests.post')
    def test_status_nao_2xx(self, mock_post, single_item_xml):
        mock_post.return_value = make_response(status_code=404, text='not found')

        with pytest.raises(TransportError) as excinfo:
            RelayClient('https://relay.example.com/upload').upload_xml('nota.xml', single_item_xml)
        assert excinfo.value.detail == 'not found'

    def test_url_obrigatoria(self):
        with pytest.raises(ValueError):
            RelayClient('')
