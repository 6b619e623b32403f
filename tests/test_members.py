"""
회원 명부 API 테스트.
- 등록/조회 필드 일치, card_number 중복 방지, 필수값 검증,
  수정 시 card_number 충돌, 삭제 시 헌금 cascade,
  구분 필터/검색, 회원 구분 일괄 변경까지 확인한다.
"""

from tests.helpers import count_contributions, count_members, record, register_member


def test_register_then_get_returns_same_fields(client):
    created = register_member(
        client,
        full_name="Jean Dupont",
        card_number="C-001",
        address="Lot II A 12",
        phone="+261 34 00 000 00",
        job="Farmer",
        gender="M",
        member_type="Communicant",
    )
    assert isinstance(created["id"], int)
    assert created["created_at"]

    r = client.get(f"/members/{created['id']}")
    assert r.status_code == 200, r.text
    assert r.json() == created


def test_register_defaults_gender_and_type(client):
    created = register_member(client, full_name="Marie", card_number="C-002")
    assert created["gender"] == "M"
    assert created["member_type"] == "Communicant"
    assert created["address"] is None


def test_register_duplicate_card_number_rejected(client, db):
    register_member(client, full_name="Jean", card_number="C-001")

    r = client.post("/members", json={"full_name": "Pierre", "card_number": "C-001"})
    assert r.status_code == 409, r.text
    assert r.json()["detail"] == "card number already registered: C-001"
    assert count_members(db) == 1


def test_register_blank_required_fields_rejected(client, db):
    r = client.post("/members", json={"full_name": "   ", "card_number": "C-001"})
    assert r.status_code == 400, r.text
    assert r.json()["detail"] == "full_name is required"

    r = client.post("/members", json={"full_name": "Jean", "card_number": ""})
    assert r.status_code == 400, r.text
    assert r.json()["detail"] == "card_number is required"

    assert count_members(db) == 0


def test_register_invalid_gender_rejected(client):
    r = client.post("/members", json={"full_name": "Jean", "card_number": "C-001", "gender": "X"})
    assert r.status_code == 422, r.text


def test_get_unknown_member_404(client):
    r = client.get("/members/9999")
    assert r.status_code == 404
    assert r.json()["detail"] == "member not found: 9999"


def test_update_member_fields(client):
    m = register_member(client, full_name="Alice", card_number="C-001")

    r = client.patch(f"/members/{m['id']}", json={"full_name": "Alice Martin", "card_number": "C-001-U", "phone": "0340000000"})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["full_name"] == "Alice Martin"
    assert body["card_number"] == "C-001-U"
    assert body["phone"] == "0340000000"
    assert body["created_at"] == m["created_at"]


def test_update_member_card_collision_rejected(client):
    register_member(client, full_name="Alice", card_number="C-001")
    bob = register_member(client, full_name="Bob", card_number="C-002")

    r = client.patch(f"/members/{bob['id']}", json={"card_number": "C-001"})
    assert r.status_code == 409, r.text

    # 자기 자신의 카드번호로 다시 저장하는 것은 허용
    r = client.patch(f"/members/{bob['id']}", json={"card_number": "C-002"})
    assert r.status_code == 200, r.text


def test_update_unknown_member_404(client):
    r = client.patch("/members/9999", json={"full_name": "Ghost"})
    assert r.status_code == 404


def test_delete_member_cascades_contributions(client, db):
    m = register_member(client, full_name="Alice", card_number="C-001")
    other = register_member(client, full_name="Bob", card_number="C-002")
    for d in ["2024-01-01", "2024-02-01", "2025-03-01"]:
        record(client, m["id"], d, "1000")
    record(client, other["id"], "2024-01-05", "500")

    assert count_contributions(db, m["id"]) == 3

    r = client.delete(f"/members/{m['id']}")
    assert r.status_code == 204, r.text

    # 행 자체가 삭제되었는지 DB에서 직접 확인
    assert count_contributions(db, m["id"]) == 0
    assert count_contributions(db) == 1
    assert client.get(f"/members/{m['id']}").status_code == 404
    assert client.get(f"/members/{m['id']}/contributions").status_code == 404


def test_delete_unknown_member_404(client):
    r = client.delete("/members/9999")
    assert r.status_code == 404


def test_list_members_filter_and_search(client):
    register_member(client, full_name="Alice Rakoto", card_number="C-001", member_type="Communicant")
    register_member(client, full_name="Bob", card_number="K-002", member_type="Catechumen")
    register_member(client, full_name="Carol", card_number="C-003", member_type="Communicant")

    r = client.get("/members")
    assert [m["full_name"] for m in r.json()] == ["Alice Rakoto", "Bob", "Carol"]

    r = client.get("/members?member_type=Catechumen")
    assert [m["full_name"] for m in r.json()] == ["Bob"]

    r = client.get("/members?q=rakoto")
    assert [m["card_number"] for m in r.json()] == ["C-001"]


def test_members_with_totals_exact(client):
    alice = register_member(client, full_name="Alice", card_number="C-001")
    register_member(client, full_name="Bob", card_number="C-002")
    record(client, alice["id"], "2024-01-15", "10000")
    record(client, alice["id"], "2024-06-01", "5000.50")

    r = client.get("/members/with-totals")
    assert r.status_code == 200, r.text
    totals = {m["full_name"]: m["total_contributions"] for m in r.json()}
    assert totals == {"Alice": "15000.50", "Bob": "0"}


def test_transfer_members(client):
    a = register_member(client, full_name="Alice", card_number="K-001", member_type="Catechumen")
    b = register_member(client, full_name="Bob", card_number="K-002", member_type="Catechumen")
    record(client, a["id"], "2024-01-15", "100")

    r = client.post("/members/transfer", json={"member_ids": [a["id"], b["id"]], "member_type": "Communicant"})
    assert r.status_code == 200, r.text
    assert r.json()["transferred"] == 2

    assert client.get("/members?member_type=Catechumen").json() == []
    assert len(client.get("/members?member_type=Communicant").json()) == 2
    # 헌금 기록은 회원 id에 그대로 연결
    assert len(client.get(f"/members/{a['id']}/contributions").json()) == 1


def test_transfer_empty_and_unknown_ids(client):
    a = register_member(client, full_name="Alice", card_number="K-001", member_type="Catechumen")

    r = client.post("/members/transfer", json={"member_ids": [], "member_type": "Communicant"})
    assert r.status_code == 200
    assert r.json()["transferred"] == 0

    r = client.post("/members/transfer", json={"member_ids": [a["id"], 9999], "member_type": "Communicant"})
    assert r.status_code == 404, r.text
    assert client.get(f"/members/{a['id']}").json()["member_type"] == "Catechumen"


def test_update_null_gender_or_type_rejected(client):
    m = register_member(client, full_name="Marie", card_number="K-001", gender="F", member_type="Catechumen")

    for body in ({"gender": None}, {"member_type": None}, {"gender": None, "member_type": None}):
        r = client.patch(f"/members/{m['id']}", json=body)
        assert r.status_code == 400, (body, r.text)

    current = client.get(f"/members/{m['id']}").json()
    assert current["gender"] == "F"
    assert current["member_type"] == "Catechumen"


def test_list_members_search_treats_wildcards_literally(client):
    register_member(client, full_name="Alice", card_number="C_001")
    register_member(client, full_name="Bob", card_number="CX001")
    register_member(client, full_name="Carol 100%", card_number="C-003")

    r = client.get("/members", params={"q": "C_0"})
    assert [m["full_name"] for m in r.json()] == ["Alice"]

    r = client.get("/members", params={"q": "%"})
    assert [m["full_name"] for m in r.json()] == ["Carol 100%"]
