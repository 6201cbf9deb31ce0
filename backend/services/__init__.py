# Services package
from .wms_client import (
    RelayClient,
    ResponseFormatError,
    SubmissionError,
    SubmissionResult,
    TransportError,
    WMSClient,
    submit_invoice,
)

__all__ = [
    'RelayClient',
    'ResponseFormatError',
    'SubmissionError',
    'SubmissionResult',
    'TransportError',
    'WMSClient',
    'submit_invoice',
]
