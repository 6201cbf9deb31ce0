"""
Project configuration loader.

Loads values from environment variables first. If not present, tries to read
Streamlit secrets via `streamlit.secrets` (when available). As a final fallback
it will try to parse `.streamlit/secrets.toml` in the project root.

Exports the WMS/relay integration settings so `app.py` and the backend can
import a single source of truth.
"""
from pathlib import Path
import os
from typing import Dict, Optional


def _read_secrets_file(path: Path) -> Dict[str, str]:
    """Parse a very small TOML-like KEY=VALUE secrets file used by Streamlit.
    This is intentionally permissive and only supports simple KEY=VALUE lines.
    """
    if not path.exists():
        return {}
    out = {}
    for raw in path.read_text(encoding='utf-8').splitlines():
        line = raw.strip()
        if not line or line.startswith('#') or line.startswith('['):
            continue
        if '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip()
        v = v.strip().strip('"').strip("'")
        out[k] = v
    return out


def _read_streamlit_secrets() -> Dict[str, str]:
    try:
        import streamlit as _st
        # st.secrets raises (and renders an error) when no secrets.toml exists
        if not _st.secrets.load_if_toml_exists():
            return {}
        return {k: v for k, v in _st.secrets.items() if isinstance(v, str)}
    except Exception:
        return {}


_streamlit_secrets = _read_streamlit_secrets()

# read file fallback
_project_root = Path(__file__).resolve().parent
_secrets_file = _project_root / '.streamlit' / 'secrets.toml'
_file_secrets = _read_secrets_file(_secrets_file)


# Compose final secrets: env vars override Streamlit secrets override file secrets
def _get(key: str, default=None):
    return os.getenv(key) or _streamlit_secrets.get(key) or _file_secrets.get(key) or default


def _get_timeout(key: str, default: float) -> Optional[float]:
    value = _get(key)
    if value is None:
        return default
    if str(value).strip().lower() in ('', '0', 'none'):
        return None
    try:
        return float(value)
    except ValueError:
        return default


# Endpoint de integração do WMS (cadastro de produtos e entrada de NF)
WMS_URL = _get('WMS_URL', '')
# Token opaco enviado no header de autenticação; pode ser vazio
WMS_TOKEN = _get('WMS_TOKEN', '')
WMS_AUTH_HEADER = _get('WMS_AUTH_HEADER', 'TOKEN_CP')
WMS_SUCCESS_FIELD = _get('WMS_SUCCESS_FIELD', 'CORPEM_WS_OK')
WMS_TIMEOUT = _get_timeout('WMS_TIMEOUT', 60.0)

# Serviço de relay (modo legado, envia o XML original como arquivo)
RELAY_URL = _get('RELAY_URL', '')

# 'wms' (payloads JSON) ou 'relay' (upload do XML)
SUBMISSION_MODE = (_get('SUBMISSION_MODE', 'wms') or 'wms').strip().lower()

DEFAULT_CLIENT_ID = _get('DEFAULT_CLIENT_ID', '')

LOG_LEVEL = _get('LOG_LEVEL', 'INFO')

# Expose a dict if callers prefer
ALL = {
    'WMS_URL': WMS_URL,
    'WMS_TOKEN': WMS_TOKEN,
    'WMS_AUTH_HEADER': WMS_AUTH_HEADER,
    'WMS_SUCCESS_FIELD': WMS_SUCCESS_FIELD,
    'WMS_TIMEOUT': WMS_TIMEOUT,
    'RELAY_URL': RELAY_URL,
    'SUBMISSION_MODE': SUBMISSION_MODE,
    'DEFAULT_CLIENT_ID': DEFAULT_CLIENT_ID,
    'LOG_LEVEL': LOG_LEVEL,
}
