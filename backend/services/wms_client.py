"""Envio dos payloads ao WMS e do XML bruto ao serviço de relay."""
import json
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

import requests

import config
from backend.models.document import EffectiveInvoice
from backend.tools.payload_builder import build_nf_entry, build_product_registration
from backend.tools.tax_id import format_tax_id

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = 'application/json; charset=utf-8'
SUCCESS_VALUE = 'OK'


class SubmissionError(Exception):
    """Base error for a failed submission; ``detail`` holds the raw server text."""

    def __init__(self, message: str, detail: str = '', status_code: Optional[int] = None):
        super().__init__(message)
        self.detail = detail
        self.status_code = status_code


class TransportError(SubmissionError):
    """Network failure, non-2xx status or a response without the OK sentinel."""


class ResponseFormatError(SubmissionError):
    """Response body could not be parsed as the expected JSON object."""


@dataclass(frozen=True)
class SubmissionResult:
    client_id: str
    product_response: Dict[str, Any]
    nf_entry_response: Dict[str, Any]
    order_reference: str


class WMSClient:
    """Cliente HTTP do endpoint de integração do WMS."""

    def __init__(
        self,
        url: str,
        token: str = '',
        auth_header: str = 'TOKEN_CP',
        success_field: str = 'CORPEM_WS_OK',
        timeout: Optional[float] = 60,
    ):
        if not url:
            raise ValueError('URL do WMS não configurada (WMS_URL)')
        self.url = url
        self.token = token or ''
        self.auth_header = auth_header
        self.success_field = success_field
        self.timeout = timeout

    @classmethod
    def from_config(cls) -> 'WMSClient':
        return cls(
            url=config.WMS_URL,
            token=config.WMS_TOKEN,
            auth_header=config.WMS_AUTH_HEADER,
            success_field=config.WMS_SUCCESS_FIELD,
            timeout=config.WMS_TIMEOUT,
        )

    def _headers(self) -> Dict[str, str]:
        return {
            'Content-Type': JSON_CONTENT_TYPE,
            self.auth_header: self.token,
        }

    def _handle_response(self, r: requests.Response) -> Dict[str, Any]:
        """Valida a resposta do WMS e devolve o corpo JSON.

        Raises:
            TransportError: status não 2xx ou corpo sem o sentinela de sucesso
            ResponseFormatError: corpo que não é um objeto JSON
        """
        logger.debug(f"WMS response: {r.status_code} - {r.text[:200]}")

        try:
            r.raise_for_status()
        except requests.exceptions.HTTPError as http_err:
            logger.error(f"WMS retornou HTTP {r.status_code}: {r.text[:500]}")
            raise TransportError(
                f'Erro HTTP {r.status_code}', detail=r.text, status_code=r.status_code
            ) from http_err

        try:
            body = r.json()
        except ValueError as json_err:
            logger.error(f"Resposta do WMS não é JSON: {r.text[:500]}")
            raise ResponseFormatError(
                'Resposta do WMS não é JSON', detail=r.text, status_code=r.status_code
            ) from json_err

        if not isinstance(body, dict):
            raise ResponseFormatError(
                'Resposta do WMS em formato inesperado', detail=r.text, status_code=r.status_code
            )

        if body.get(self.success_field) != SUCCESS_VALUE:
            logger.error(f"WMS recusou o envio: {r.text[:500]}")
            raise TransportError('WMS recusou o envio', detail=r.text, status_code=r.status_code)

        return body

    def post_json(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        data = json.dumps(payload, ensure_ascii=False).encode('utf-8')
        try:
            r = requests.post(self.url, data=data, headers=self._headers(), timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Falha de comunicação com o WMS: {e}")
            raise TransportError('Falha de comunicação com o WMS', detail=str(e)) from e
        return self._handle_response(r)


class RelayClient:
    """Modo legado: envia o XML original, sem alterações, como arquivo."""

    def __init__(self, url: str, timeout: Optional[float] = 60):
        if not url:
            raise ValueError('URL do relay não configurada (RELAY_URL)')
        self.url = url
        self.timeout = timeout

    @classmethod
    def from_config(cls) -> 'RelayClient':
        return cls(url=config.RELAY_URL, timeout=config.WMS_TIMEOUT)

    def upload_xml(self, filename: str, raw_xml: bytes) -> requests.Response:
        files = {'file': (filename, raw_xml, 'text/xml')}
        try:
            r = requests.post(self.url, files=files, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Falha de comunicação com o relay: {e}")
            raise TransportError('Falha de comunicação com o relay', detail=str(e)) from e

        if not r.ok:
            logger.error(f"Relay retornou HTTP {r.status_code}: {r.text[:500]}")
            raise TransportError(f'Erro HTTP {r.status_code}', detail=r.text, status_code=r.status_code)

        logger.info(f"XML '{filename}' enviado ao relay (HTTP {r.status_code})")
        return r


def submit_invoice(
    client: WMSClient,
    client_id: str,
    invoice: EffectiveInvoice,
    today: Optional[date] = None,
) -> SubmissionResult:
    """Cadastra os produtos e, somente se aceito, dá entrada na NF.

    A failure in the first call aborts the second; nothing is retried or
    rolled back.
    """
    today = today or date.today()
    formatted_id = format_tax_id(client_id)

    product_payload = build_product_registration(formatted_id, invoice)
    logger.info(f"Enviando cadastro de {len(invoice.items)} produto(s) da NF {invoice.number}")
    product_response = client.post_json(product_payload)

    nf_payload = build_nf_entry(formatted_id, invoice, today)
    logger.info(f"Enviando entrada da NF {invoice.number}")
    nf_response = client.post_json(nf_payload)

    return SubmissionResult(
        client_id=formatted_id,
        product_response=product_response,
        nf_entry_response=nf_response,
        order_reference=nf_payload['CORPEM_ERP_DOC_ENT']['NUMEPEDCLI'],
    )
