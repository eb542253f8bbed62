"""
Structured JSON logging.

One JSON object per line with timestamp, level, message and call site, plus
any ``extra_data`` dict passed through ``logger.<level>(..., extra=...)``.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

SERVICE_NAME = "customer-crm"


class JSONFormatter(logging.Formatter):
    """
    Formatter that dumps records as JSON.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "func": record.funcName,
            "line": record.lineno,
            "service": SERVICE_NAME,
        }

        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(level: str = "INFO"):
    """
    Configures the root logger to use JSON formatting.
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)

    # Silence noisy libraries
    logging.getLogger("botocore").setLevel("WARNING")
    logging.getLogger("boto3").setLevel("WARNING")
    logging.getLogger("httpx").setLevel("WARNING")
