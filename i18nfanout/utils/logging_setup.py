"""빌드 로깅 설정: 콘솔 + 로테이팅 파일, 텍스트 또는 JSON 포맷."""

from __future__ import annotations

import json as json_mod
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from i18nfanout.utils.config import Config

LOG_FORMAT  = "%(asctime)s [%(levelname)-8s] %(name)-22s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# setup_logging이 붙인 핸들러 표식. 재호출 시 이 핸들러만 교체한다.
_HANDLER_TAG = "_i18nfanout_handler"


class JSONFormatter(logging.Formatter):
    """빌드 로그를 한 줄짜리 JSON으로 출력한다.

    로거 이름의 ``i18nfanout.`` 접두사는 ``component``로 떼어 기록한다.
    """

    def format(self, record: logging.LogRecord) -> str:
        component = record.name.partition("i18nfanout.")[2] or record.name
        log_obj = {
            "ts": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "component": component,
            "msg": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0] is not None:
            log_obj["exception"] = self.formatException(record.exc_info)
        return json_mod.dumps(log_obj, ensure_ascii=False)


def _resolve_level(value: str | int | None, default: int = logging.INFO) -> int:
    if isinstance(value, int):
        return value
    if not value:
        return default
    level = logging.getLevelName(str(value).upper())
    return level if isinstance(level, int) else default


def setup_logging(config: Config, level: str | int | None = None) -> logging.Logger:
    """i18nfanout 로거에 콘솔(stderr)과 로테이팅 파일 핸들러를 설치한다.

    level이 주어지면 logging.level 설정보다 우선한다 (CLI --log-level).
    logging.directory가 비어 있으면 파일 핸들러는 만들지 않는다. 같은
    프로세스에서 여러 번 호출해도 핸들러가 중복되지 않는다.
    """
    log_dir      = config.get("logging.directory", "data/logs")
    filename     = config.get("logging.filename", "i18nfanout.log")
    max_bytes    = config.get("logging.max_bytes", 10_485_760)
    backup_count = config.get("logging.backup_count", 5)

    root = logging.getLogger("i18nfanout")
    root.setLevel(_resolve_level(level if level is not None else config.get("logging.level")))

    for handler in [h for h in root.handlers if getattr(h, _HANDLER_TAG, False)]:
        root.removeHandler(handler)
        handler.close()

    if config.get("logging.format", "text") == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            log_path / filename,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        ))

    for handler in handlers:
        setattr(handler, _HANDLER_TAG, True)
        handler.setFormatter(formatter)
        root.addHandler(handler)
    return root
