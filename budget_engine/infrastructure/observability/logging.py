"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger
from budget_engine.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str | None = None) -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level or settings.log_level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_summary(
    period_id: str,
    spent_cents: int,
    savings_rate: float,
    category_count: int,
    duration_ms: float,
) -> None:
    """Log structured summary outcome"""
    logging.getLogger("budget_engine.summary").info(
        "Budget summary computed",
        extra={
            "period_id": period_id,
            "step": "summary_complete",
            "spent_cents": spent_cents,
            "savings_rate": savings_rate,
            "category_count": category_count,
            "duration_ms": duration_ms,
        },
    )


def log_anomalies(period_id: str, alert_count: int, warning_count: int) -> None:
    """Log how many anomalies a period check raised"""
    logging.getLogger("budget_engine.anomalies").info(
        "Anomaly detection completed",
        extra={
            "period_id": period_id,
            "step": "anomalies_complete",
            "alert_count": alert_count,
            "warning_count": warning_count,
        },
    )
