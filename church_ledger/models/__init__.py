# Base.metadata에 모든 테이블이 등록되도록 모델을 한 곳에서 import
from church_ledger.models.member import Member, Gender, MemberType  # noqa: F401
from church_ledger.models.contribution import Contribution  # noqa: F401
from church_ledger.models.year_summary import YearSummary, YearAuditLog, YearAction  # noqa: F401
