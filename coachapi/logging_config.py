import logging
import logging.config
import sys
from typing import Any, Dict


class MaxLevelFilter(logging.Filter):
    """지정 레벨 미만의 레코드만 통과 (stdout/stderr 중복 출력 방지)"""

    def __init__(self, max_level: str = "WARNING"):
        super().__init__()
        self.max_level = logging.getLevelName(max_level)

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.max_level


def _logger(handlers, level: str) -> Dict[str, Any]:
    return {"handlers": handlers, "level": level, "propagate": False}


def build_logging_config(log_level: str = "INFO", sql_log_level: str = "WARNING") -> Dict[str, Any]:
    """dictConfig용 설정 생성

    - INFO 이하: stdout, 한 줄 포맷
    - WARNING 이상: stderr, 위치 정보 포함 포맷
    """
    log_level = log_level.upper()
    both = ["console", "error_console"]

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "below_warning": {"()": MaxLevelFilter, "max_level": "WARNING"},
        },
        "formatters": {
            "simple": {
                "format": "%(asctime)s | %(levelname)-8s | %(name)-32s | %(message)s",
            },
            "detailed": {
                "format": "%(asctime)s | %(levelname)-8s | %(name)s | %(pathname)s:%(lineno)d\n%(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "simple",
                "filters": ["below_warning"],
                "stream": sys.stdout,
            },
            "error_console": {
                "class": "logging.StreamHandler",
                "formatter": "detailed",
                "level": "WARNING",
                "stream": sys.stderr,
            },
        },
        "loggers": {
            "": {"handlers": both, "level": log_level},
            "coachapi": _logger(both, log_level),
            "uvicorn.error": _logger(both, log_level),
            "uvicorn.access": _logger(["console"], log_level),
            # 쿼리 로그는 DEBUG 설정과 별개로 제어
            "sqlalchemy.engine": _logger(both, sql_log_level.upper()),
        },
    }


def setup_logging(log_level: str = "INFO"):
    logging.config.dictConfig(build_logging_config(log_level))
