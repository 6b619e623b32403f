# tests/helpers.py
import uuid

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from church_ledger.models import Contribution, Member


def register_member(client, *, full_name: str = "Jean Dupont", card_number: str | None = None, **extra) -> dict:
    body = {
        "full_name": full_name,
        "card_number": card_number or f"C-{uuid.uuid4().hex[:6]}",
        **extra,
    }
    r = client.post("/members", json=body)
    assert r.status_code == 201, r.text
    return r.json()


def record(client, member_id: int, payment_date: str, amount: str, period: str = "2024-Q1") -> dict:
    r = client.post(
        "/contributions",
        json={"member_id": member_id, "payment_date": payment_date, "period": period, "amount": amount},
    )
    assert r.status_code == 201, r.text
    return r.json()


def count_members(db: Session) -> int:
    return db.scalar(select(func.count()).select_from(Member)) or 0


def count_contributions(db: Session, member_id: int | None = None) -> int:
    stmt = select(func.count()).select_from(Contribution)
    if member_id is not None:
        stmt = stmt.where(Contribution.member_id == member_id)
    return db.scalar(stmt) or 0
