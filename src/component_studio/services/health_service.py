"""Liveness report for the /health endpoints."""

import logging
import time
from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..utils.time import utc_now

logger = logging.getLogger(__name__)

_PROCESS_STARTED = time.monotonic()


def uptime_seconds() -> float:
    return round(time.monotonic() - _PROCESS_STARTED, 3)


def database_status() -> str:
    try:
        db.session.execute(text('SELECT 1'))
        return 'connected'
    except SQLAlchemyError as e:
        logger.warning(f"Health check database probe failed: {e}")
        db.session.rollback()
        return 'unavailable'


def health_report(environment: str) -> Dict[str, Any]:
    return {
        'status': 'OK',
        'timestamp': utc_now().isoformat(),
        'uptime': uptime_seconds(),
        'environment': environment,
        'database': database_status(),
    }
