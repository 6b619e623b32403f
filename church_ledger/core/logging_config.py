"""
logging_config.py

표준 logging 설정.

- 앱 시작(lifespan)과 스크립트 진입점에서 한 번만 호출
- 각 모듈은 logging.getLogger(__name__) 으로 로거를 얻어 사용

"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    # 재호출 시 핸들러가 중복 등록되지 않도록 한 번만 붙인다
    if not any(getattr(h, "_church_ledger", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._church_ledger = True
        root.addHandler(handler)
    root.setLevel(level.upper())
