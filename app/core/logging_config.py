"""
Logging setup shared by the API process and the Celery email worker.

JSON lines (python-json-logger) when JSON_LOGS is set, plain text otherwise.
Every record carries the process role ("api" or "worker") so the two
streams can be told apart once they are shipped to the same place.
"""

import logging
import sys
from typing import Any, Dict
from datetime import datetime, timezone
from pythonjsonlogger import jsonlogger

# Third-party loggers that flood INFO/DEBUG with per-request or per-page noise
QUIET_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "openai": logging.WARNING,
    "botocore": logging.WARNING,
    "boto3": logging.WARNING,
    "pdfminer": logging.ERROR,
    "multipart": logging.WARNING,
}


class ProcessRoleFilter(logging.Filter):
    def __init__(self, role: str):
        super().__init__()
        self.role = role

    def filter(self, record: logging.LogRecord) -> bool:
        record.role = self.role
        return True


class PlatformJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['role'] = getattr(record, 'role', 'api')

        if record.levelno >= logging.WARNING:
            log_record['location'] = f"{record.pathname}:{record.lineno} ({record.funcName})"


def setup_logging(log_level: str = "INFO", json_logs: bool = False, role: str = "api") -> None:
    """
    Replace the root handlers with a single stdout handler.

    Args:
        log_level: Root level name (DEBUG, INFO, ...); unknown names fall back to INFO
        json_logs: Emit JSON lines instead of plain text
        role: "api" or "worker", stamped on every record
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(ProcessRoleFilter(role))

    if json_logs:
        handler.setFormatter(PlatformJsonFormatter('%(timestamp)s %(level)s %(logger)s %(message)s'))
    else:
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(role)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root_logger.addHandler(handler)

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)
