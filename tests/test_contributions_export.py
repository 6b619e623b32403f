"""
연도별 헌금 기록 CSV / XLSX export 테스트.
- CSV 헤더/데이터 행, Content-Disposition(attachment), BOM(utf-8-sig),
  XLSX 시트 내용 및 잘못된 연도(400) 처리 확인.
"""

import csv
import io

from openpyxl import load_workbook

from tests.helpers import record, register_member

HEADER = ["year", "contribution_id", "member_id", "member_name", "payment_date", "period", "amount"]


def _parse_csv_text(text: str) -> list[list[str]]:
    text = text.lstrip("\ufeff")
    return list(csv.reader(io.StringIO(text)))


def test_export_csv_ok(client):
    m = register_member(client, full_name="Hélène Rasoa", card_number="C-001")
    c = record(client, m["id"], "2024-03-01", "20.50", period="2024-Q1")
    record(client, m["id"], "2023-03-01", "99", period="2023-Q1")

    res = client.get("/contributions/export?year=2024")
    assert res.status_code == 200, res.text
    assert res.headers.get("content-type", "").startswith("text/csv")
    cd = res.headers.get("content-disposition", "")
    assert "attachment" in cd
    assert "2024" in cd

    rows = _parse_csv_text(res.text)
    assert rows[0] == HEADER
    assert rows[1:] == [["2024", str(c["id"]), str(m["id"]), "Hélène Rasoa", "2024-03-01", "2024-Q1", "20.50"]]


def test_export_csv_empty_year_has_header_only(client):
    res = client.get("/contributions/export?year=2010")
    assert res.status_code == 200
    assert _parse_csv_text(res.text) == [HEADER]


def test_export_csv_invalid_year_400(client):
    res = client.get("/contributions/export?year=0")
    assert res.status_code == 400
    assert res.json()["detail"] == "invalid year: 0"


def test_export_xlsx_ok(client):
    m = register_member(client, full_name="Jean", card_number="C-001")
    record(client, m["id"], "2024-03-01", "20.00")
    record(client, m["id"], "2024-06-01", "30.00")

    res = client.get("/contributions/export.xlsx?year=2024")
    assert res.status_code == 200, res.text
    assert res.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )

    wb = load_workbook(io.BytesIO(res.content))
    ws = wb.active
    values = list(ws.iter_rows(values_only=True))
    assert list(values[0]) == HEADER
    assert [row[6] for row in values[1:]] == ["20.00", "30.00"]
