"""

직전 연도 헌금 합계 마감 스크립트.

- 매년 초(또는 cron)에 한 번 실행하는 용도
- .env에 정의된 DATABASE_URL 기준으로 접속
- 전년도가 아직 마감되지 않았다면 합계를 고정하고 메모를 남긴다
- 이미 마감되어 있으면 아무것도 하지 않고 종료한다

사용 방법
- 가상환경 접속
- (.venv) ~$ python -m scripts.close_previous_year

"""

from dotenv import load_dotenv
load_dotenv()

import logging

from church_ledger.core.config import settings
from church_ledger.core.logging_config import configure_logging
from church_ledger.db.session import SessionLocal
from church_ledger.services.years import close_previous_year

logger = logging.getLogger("scripts.close_previous_year")


def main():
    configure_logging(settings.LOG_LEVEL)
    db = SessionLocal()
    try:
        summary = close_previous_year(db)
        db.commit()

        if summary is None:
            logger.info("previous year already closed. Skip.")
        else:
            logger.info("closed year=%s total=%s", summary.year, summary.total)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
