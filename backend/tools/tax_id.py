"""Normalização de CNPJ/CPF para o formato aceito pelo WMS."""
import logging
import re
from typing import List

logger = logging.getLogger(__name__)

CPF_LENGTH = 11
CNPJ_LENGTH = 14


def _only_digits(s: str) -> str:
    """Remove todos os caracteres não numéricos de uma string."""
    if s is None:
        return ""
    return re.sub(r"\D", "", str(s))


def format_tax_id(raw: str) -> str:
    """Return the canonical digit string for a CNPJ or CPF.

    Empty and 11-digit (CPF) values pass through; anything shorter than 14
    digits is left-padded with zeros, anything longer is truncated. Check
    digits are not validated here.
    """
    digits = _only_digits(raw)
    length = len(digits)

    if length == 0 or length == CPF_LENGTH:
        return digits

    if length < CNPJ_LENGTH:
        logger.warning(f"Identificador com {length} dígitos completado com zeros: '{raw}'")
        return digits.zfill(CNPJ_LENGTH)

    if length > CNPJ_LENGTH:
        logger.warning(f"Identificador com {length} dígitos truncado para {CNPJ_LENGTH}: '{raw}'")
        return digits[:CNPJ_LENGTH]

    return digits


def _check_digit(digits: str, weights: List[int]) -> str:
    soma = sum(int(d) * w for d, w in zip(digits, weights))
    resto = soma % 11
    return '0' if resto < 2 else str(11 - resto)


def validate_cnpj(cnpj: str) -> bool:
    """Valida um CNPJ usando o algoritmo módulo 11."""
    cnpj_limpo = _only_digits(cnpj)
    if len(cnpj_limpo) != CNPJ_LENGTH or len(set(cnpj_limpo)) == 1:
        return False

    peso = [6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2]
    dv1 = _check_digit(cnpj_limpo[:12], peso[1:])
    dv2 = _check_digit(cnpj_limpo[:12] + dv1, peso)
    return cnpj_limpo[12:] == dv1 + dv2


def validate_cpf(cpf: str) -> bool:
    """Valida um CPF usando o algoritmo módulo 11."""
    cpf_limpo = _only_digits(cpf)
    if len(cpf_limpo) != CPF_LENGTH or len(set(cpf_limpo)) == 1:
        return False

    dv1 = _check_digit(cpf_limpo[:9], list(range(10, 1, -1)))
    dv2 = _check_digit(cpf_limpo[:9] + dv1, list(range(11, 1, -1)))
    return cpf_limpo[9:] == dv1 + dv2


def tax_id_warnings(raw: str) -> List[str]:
    """Non-blocking warnings shown next to the client identifier field."""
    digits = _only_digits(raw)
    formatted = format_tax_id(raw)
    avisos = []

    if not digits:
        avisos.append('Identificador do cliente não informado')
        return avisos

    if formatted != digits:
        avisos.append(
            f'Identificador com {len(digits)} dígitos será enviado como {formatted}'
        )

    if len(formatted) == CPF_LENGTH:
        if not validate_cpf(formatted):
            avisos.append('Dígitos verificadores do CPF não conferem')
    elif not validate_cnpj(formatted):
        avisos.append('Dígitos verificadores do CNPJ não conferem')

    return avisos
