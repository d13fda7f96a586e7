"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from applehub_checkout.config import settings


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

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_order_created(
    request_id: str,
    order_number: str,
    payment_type: str,
    total: float,
    discount: float,
    duration_ms: float,
) -> None:
    """Log structured order outcome for analysis"""
    logging.info(
        "Order created",
        extra={
            "request_id": request_id,
            "order_number": order_number,
            "step": "order_created",
            "payment_type": payment_type,
            "total": round(total, 2),
            "discount": round(discount, 2),
            "duration_ms": duration_ms,
        },
    )


def log_credit_decision(
    request_id: str,
    order_id: str,
    requested_amount: float,
    approved_amount: float,
    approved_percentage: float,
) -> None:
    """Log structured credit approval outcome"""
    logging.info(
        "Credit analysis completed",
        extra={
            "request_id": request_id,
            "order_id": order_id,
            "step": "credit_decision",
            "requested_amount": round(requested_amount, 2),
            "approved_amount": round(approved_amount, 2),
            "approved_percentage": approved_percentage,
        },
    )
