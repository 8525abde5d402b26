import pytest

from service_orders.config import IdCleanupMode, build_config, default_config
from service_orders.headers import reconcile_headers
from service_orders.rows import canonicalize_row, clean_national_id
from service_orders.rules import CANONICAL_COLUMNS


@pytest.fixture
def config():
    return default_config()


class TestCleanNationalId:
    def test_formula_quoted_cpf(self):
        assert clean_national_id('="12345678900"') == "12345678900"

    def test_formula_without_quotes(self):
        assert clean_national_id("=12345678900") == "12345678900"

    def test_formatted_cnpj_to_digits(self):
        assert clean_national_id("12.345.678/0001-90") == "12345678000190"

    def test_strip_mode_keeps_formatting(self):
        assert clean_national_id('="123.456.789-00"', IdCleanupMode.STRIP) == "123.456.789-00"

    def test_leading_zeros_kept(self):
        assert clean_national_id('="00123456789"') == "00123456789"

    def test_already_clean_value_unchanged(self):
        assert clean_national_id("12345678900") == "12345678900"


class TestCanonicalizeRow:
    def test_all_columns_present_in_order(self, config):
        mapping = reconcile_headers(["Chamado"], config)
        record = canonicalize_row({"Chamado": "42"}, mapping, config)
        assert list(record) == list(CANONICAL_COLUMNS)
        assert record["Chamado"] == "42"
        assert all(record[c] == "" for c in CANONICAL_COLUMNS if c != "Chamado")

    def test_values_are_trimmed(self, config):
        mapping = reconcile_headers(["Cidade"], config)
        record = canonicalize_row({"Cidade": "  Porto Alegre "}, mapping, config)
        assert record["Cidade"] == "Porto Alegre"

    def test_none_value_becomes_empty_string(self, config):
        mapping = reconcile_headers(["Cidade"], config)
        record = canonicalize_row({"Cidade": None}, mapping, config)
        assert record["Cidade"] == ""

    def test_missing_source_key(self, config):
        mapping = reconcile_headers(["Cidade"], config)
        record = canonicalize_row({}, mapping, config)
        assert record["Cidade"] == ""

    def test_national_id_from_alias(self, config):
        mapping = reconcile_headers(["CPF/CNPJ"], config)
        record = canonicalize_row({"CPF/CNPJ": ' ="12345678900" '}, mapping, config)
        assert record["CNPJ / CPF"] == "12345678900"

    def test_national_id_strip_mode(self):
        config = build_config(id_mode=IdCleanupMode.STRIP)
        mapping = reconcile_headers(["CNPJ / CPF"], config)
        record = canonicalize_row({"CNPJ / CPF": '="12.345.678/0001-90"'}, mapping, config)
        assert record["CNPJ / CPF"] == "12.345.678/0001-90"

    def test_idempotent_on_canonical_rows(self, config):
        row = {c: "" for c in CANONICAL_COLUMNS}
        row.update({"Chamado": "7", "Cliente": "JOÃO SILVA", "CNPJ / CPF": "12345678900"})
        mapping = reconcile_headers(list(row), config)
        once = canonicalize_row(row, mapping, config)
        assert once == row
        assert canonicalize_row(once, mapping, config) == once
