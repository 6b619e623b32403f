"""
errors.py

장부(ledger) 도메인의 타입 기반 예외 모음.

서비스 계층은 실패를 문자열이 아닌 예외 타입으로 구분하여 발생시키고,
라우터는 타입에 따라 HTTP 상태 코드로 변환한다.
사용자에게 보여줄 문구는 프레젠테이션 계층의 책임이며,
여기의 메시지는 개발/로그용이다.

예외 계층:

    LedgerError
    ├── ValidationError
    │   └── InvalidAmount
    ├── DuplicateCardNumber
    ├── UnknownMember
    ├── NotFound
    ├── AlreadyClosed
    └── NotClosed

"""


class LedgerError(Exception):
    """장부 도메인 예외의 공통 부모. code는 기계 판독용 식별자."""

    code = "LEDGER_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    code = "VALIDATION_ERROR"


class InvalidAmount(ValidationError):
    code = "INVALID_AMOUNT"

    def __init__(self, amount):
        super().__init__(f"invalid amount: {amount!r} (expected a non-negative decimal string)")
        self.amount = amount


class DuplicateCardNumber(LedgerError):
    code = "DUPLICATE_CARD_NUMBER"

    def __init__(self, card_number: str):
        super().__init__(f"card number already registered: {card_number}")
        self.card_number = card_number


class UnknownMember(LedgerError):
    code = "UNKNOWN_MEMBER"

    def __init__(self, member_id: int):
        super().__init__(f"member not found: {member_id}")
        self.member_id = member_id


class NotFound(LedgerError):
    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class AlreadyClosed(LedgerError):
    code = "ALREADY_CLOSED"

    def __init__(self, year: int):
        super().__init__(f"year {year} is already closed")
        self.year = year


class NotClosed(LedgerError):
    code = "NOT_CLOSED"

    def __init__(self, year: int):
        super().__init__(f"year {year} is not closed")
        self.year = year
