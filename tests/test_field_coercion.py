"""Tests for leaf value coercion."""
from decimal import Decimal

from backend.tools.field_coercion import (
    IDENTIFIER_FIELDS,
    NUMERIC_FIELDS,
    as_number,
    as_string,
    coerce_leaf,
    number_to_string,
)


class TestAsString:

    def test_leading_zero_preserved(self):
        assert as_string('0700') == '0700'
        assert as_string(coerce_leaf('cProd', '0700')) == '0700'

    def test_numbers_without_scientific_notation(self):
        assert as_string(Decimal('1E+2')) == '100'
        assert as_string(Decimal('0.00001')) == '0.00001'
        assert as_string(10) == '10'
        assert as_string(2.5) == '2.5'

    def test_bool_and_default(self):
        assert as_string(True) == 'true'
        assert as_string(None) == ''
        assert as_string(None, 'x') == 'x'

    def test_attributed_node_uses_text(self):
        assert as_string({'@_a': '1', '#text': 'abc'}) == 'abc'


class TestAsNumber:

    def test_parses_text_and_numbers(self):
        assert as_number('10') == Decimal('10')
        assert as_number('5.00') == Decimal('5.00')
        assert as_number('1.234,56') == Decimal('1234.56')
        assert as_number('12,5') == Decimal('12.5')
        assert as_number(Decimal('3.3')) == Decimal('3.3')
        assert as_number(7) == Decimal('7')

    def test_defaults_never_raise(self):
        assert as_number(None) == Decimal('0')
        assert as_number('') == Decimal('0')
        assert as_number('abc') == Decimal('0')
        assert as_number('NaN') == Decimal('0')
        assert as_number('abc', Decimal('1')) == Decimal('1')
        assert as_number(True) == Decimal('0')


def test_coerce_leaf_rules():
    assert coerce_leaf('qCom', '10.5000') == Decimal('10.5000')
    assert coerce_leaf('vNF', '100.00') == Decimal('100.00')
    assert coerce_leaf('xProd', '0700') == '0700'
    assert coerce_leaf('xProd', '2.50') == '2.50'
    assert coerce_leaf('infCpl', '10') == '10'
    assert coerce_leaf('uCom', '1') == '1'
    assert coerce_leaf('xProd', 'Widget') == 'Widget'
    assert coerce_leaf('nNF', '123') == '123'
    assert coerce_leaf('chNFe', '35201006117473000150550010000000061000000060') == \
        '35201006117473000150550010000000061000000060'
    assert coerce_leaf('xProd', None) == ''


def test_identifier_fields_cover_document_codes():
    for tag in ('nNF', 'serie', 'cProd', 'NCM', 'cEAN', 'chNFe', 'CNPJ', 'CPF'):
        assert tag in IDENTIFIER_FIELDS
        assert tag not in NUMERIC_FIELDS


def test_numeric_fields_cover_item_and_total_values():
    for tag in ('qCom', 'vUnCom', 'vProd', 'vNF'):
        assert tag in NUMERIC_FIELDS
    assert 'xProd' not in NUMERIC_FIELDS


def test_number_to_string():
    assert number_to_string(Decimal('50.00')) == '50'
    assert number_to_string(Decimal('10')) == '10'
    assert number_to_string(Decimal('2.50')) == '2.5'
    assert number_to_string(Decimal('0.125')) == '0.125'
    assert number_to_string(Decimal('1E+2')) == '100'
    assert number_to_string(Decimal('-0.00')) == '0'


def test_number_to_string_beyond_context_precision():
    digits = '1234567890123456789012345678901234'
    assert number_to_string(Decimal(digits)) == digits
    assert number_to_string(Decimal(digits + '.500')) == digits + '.5'
    assert number_to_string(Decimal('1E+30')) == '1' + '0' * 30
