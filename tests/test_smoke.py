from fastapi.testclient import TestClient
from service_orders.main import app
from service_orders.rules import CANONICAL_COLUMNS

client = TestClient(app)

def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}

def test_columns_lists_canonical_schema():
    r = client.get("/columns")
    assert r.status_code == 200
    assert r.json() == {"columns": list(CANONICAL_COLUMNS)}

def test_upload_semicolon_utf8():
    raw = (
        "Chamado;Numero Referencia;Nome Cliente;Serviço;Status\n"
        "123;REF1;JOÃO SILVA;MANUTENCAO;ABERTO\n"
    ).encode("utf-8")

    files = {"csvFile": ("chamados.csv", raw, "text/csv")}
    r = client.post("/upload", files=files)
    assert r.status_code == 200

    data = r.json()
    assert len(data) == 1
    assert list(data[0].keys()) == list(CANONICAL_COLUMNS)
    assert data[0]["Cliente"] == "JOÃO SILVA"
    assert data[0]["Serviço"] == "MANUTENCAO"

def test_upload_latin1_export():
    # Include Latin-1 characters to force the encoding fallback
    raw = "Chamado;Técnico;Cidade\n9;José;São Paulo\n".encode("latin-1")

    files = {"csvFile": ("chamados.csv", raw, "text/csv")}
    r = client.post("/upload", files=files)
    assert r.status_code == 200
    assert r.json()[0]["Técnico"] == "José"
    assert r.json()[0]["Cidade"] == "São Paulo"

def test_upload_without_file():
    r = client.post("/upload")
    assert r.status_code == 400
    assert r.json() == {"error": "no file provided"}

def test_upload_empty_file():
    files = {"csvFile": ("vazio.csv", b"", "text/csv")}
    r = client.post("/upload", files=files)
    assert r.status_code == 400
    assert "error" in r.json()

def test_upload_header_only():
    files = {"csvFile": ("chamados.csv", b"Chamado;Status\n", "text/csv")}
    r = client.post("/upload", files=files)
    assert r.status_code == 400
    assert r.json()["error"]

def test_upload_rows_without_known_columns():
    files = {"csvFile": ("chamados.csv", b"Foo;Bar\n1;2\n", "text/csv")}
    r = client.post("/upload", files=files)
    assert r.status_code == 200
    assert r.json() == [{c: "" for c in CANONICAL_COLUMNS}]
