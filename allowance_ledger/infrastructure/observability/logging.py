"""Structured JSON logging"""

import logging
import sys
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from allowance_ledger.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_recalculation(
    request_id: str,
    mode: str,
    auto_deposit_count: int,
    duration_ms: float,
    pivot_date: Optional[date] = None,
) -> None:
    """Log a completed ledger recalculation"""
    logging.info(
        "Recalculation completed",
        extra={
            "request_id": request_id,
            "step": "recalculation_complete",
            "mode": mode,
            "pivot_date": pivot_date.isoformat() if pivot_date else None,
            "auto_deposit_count": auto_deposit_count,
            "duration_ms": duration_ms,
        },
    )
