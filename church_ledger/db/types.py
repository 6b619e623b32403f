"""
types.py

금액(money) 컬럼 타입 및 변환 유틸리티.

금액은 DB에 항상 10진수 문자열(TEXT)로 저장하고,
파이썬에서는 decimal.Decimal로만 다룬다.
float는 어떤 경로로도 허용하지 않는다 (합산 시 반올림 오차 누적 방지).

"""

from decimal import Decimal, InvalidOperation, localcontext

from sqlalchemy import String
from sqlalchemy.types import TypeDecorator

from church_ledger.core.errors import InvalidAmount


class DecimalString(TypeDecorator):
    """Decimal <-> TEXT 변환 컬럼 타입.

    - process_bind_param  : Decimal -> str (INSERT/UPDATE)
    - process_result_value: str -> Decimal (SELECT)
    """

    impl = String(40)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, float):
            raise TypeError("float amounts are not allowed; use Decimal or str")
        return to_plain(Decimal(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)


ZERO = Decimal("0")

# 정수부 20자리 + 소수부 8자리 (String(40) 안에 항상 들어감)
MAX_INTEGER_DIGITS = 20
MAX_FRACTION_DIGITS = 8

# 합산 전용 정밀도. 상한 내 금액은 이 정밀도에서 반올림 없이 더해진다
SUM_PRECISION = 60


def to_plain(amount: Decimal) -> str:
    """지수 표기 없이 고정소수점 문자열로 변환 ("1E+3" -> "1000")."""
    return format(amount, "f")


def parse_amount(value) -> Decimal:
    """입력 금액을 음수가 아닌 유한한 Decimal로 변환. 실패 시 InvalidAmount."""
    if isinstance(value, (float, bool)) or value is None:
        raise InvalidAmount(value)
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidAmount(value)

    if not amount.is_finite() or amount < 0:
        raise InvalidAmount(value)

    # "-0" 같은 부호 있는 0을 "0"으로 정규화
    plain = to_plain(amount.copy_abs())
    integer_part, _, fraction_part = plain.partition(".")
    if len(integer_part.lstrip("0")) > MAX_INTEGER_DIGITS or len(fraction_part) > MAX_FRACTION_DIGITS:
        raise InvalidAmount(value)

    return Decimal(plain)


def sum_amounts(amounts) -> Decimal:
    """Decimal 합계. 기본 컨텍스트(28자리)의 반올림 없이 정확히 계산."""
    with localcontext() as ctx:
        ctx.prec = SUM_PRECISION
        return sum(amounts, ZERO)
