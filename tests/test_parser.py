import pytest

from service_orders.parser import detect_delimiter, parse_rows


class TestDetectDelimiter:
    def test_semicolon(self):
        assert detect_delimiter("Chamado;Status;Cidade") == ";"

    def test_comma(self):
        assert detect_delimiter("Chamado,Status,Cidade") == ","

    def test_quoted_header_with_other_delimiter(self):
        # two fields on ';' but the comma only appears inside quotes
        assert detect_delimiter('"Cidade, UF";Status') == ";"

    def test_single_column_defaults_to_comma(self):
        assert detect_delimiter("Chamado") == ","


class TestParseRows:
    def test_header_and_rows(self):
        table = parse_rows("Chamado;Status\n1;ABERTO\n2;FECHADO\n")
        assert table.delimiter == ";"
        assert table.headers == ["Chamado", "Status"]
        assert table.rows == [
            {"Chamado": "1", "Status": "ABERTO"},
            {"Chamado": "2", "Status": "FECHADO"},
        ]

    def test_explicit_delimiter(self):
        table = parse_rows("a;b,c\n1;2,3\n", delimiter=",")
        assert table.headers == ["a;b", "c"]
        assert table.rows == [{"a;b": "1;2", "c": "3"}]

    def test_quoted_field_with_delimiter_newline_and_quotes(self):
        text = 'Chamado,Justificativa\n1,"Cliente ausente, ""reagendado""\nsegunda linha"\n'
        table = parse_rows(text)
        assert table.rows[0]["Justificativa"] == 'Cliente ausente, "reagendado"\nsegunda linha'

    def test_blank_lines_are_skipped(self):
        table = parse_rows("\n\nChamado;Status\n\n1;ABERTO\n;\n\r\n2;FECHADO\n")
        assert table.headers == ["Chamado", "Status"]
        assert [r["Chamado"] for r in table.rows] == ["1", "2"]

    def test_crlf_line_endings(self):
        table = parse_rows("Chamado;Status\r\n1;ABERTO\r\n")
        assert table.rows == [{"Chamado": "1", "Status": "ABERTO"}]

    def test_short_row_padded_with_empty_strings(self):
        table = parse_rows("Chamado;Status;Cidade\n1;ABERTO\n")
        assert table.rows == [{"Chamado": "1", "Status": "ABERTO", "Cidade": ""}]

    def test_long_row_extra_fields_dropped(self):
        table = parse_rows("Chamado;Status\n1;ABERTO;extra\n")
        assert table.rows == [{"Chamado": "1", "Status": "ABERTO"}]

    def test_headers_are_trimmed(self):
        table = parse_rows(" Chamado ; Status \n1;2\n")
        assert table.headers == ["Chamado", "Status"]

    def test_duplicate_header_first_column_wins(self):
        table = parse_rows("Status;Status\nA;B\n")
        assert table.rows == [{"Status": "A"}]

    @pytest.mark.parametrize("text", ["", "\n\n", "   \n"])
    def test_no_header(self, text):
        table = parse_rows(text)
        assert table.headers == []
        assert table.rows == []
        assert not table.has_header

    def test_header_only(self):
        table = parse_rows("Chamado;Status\n")
        assert table.has_header
        assert table.rows == []
