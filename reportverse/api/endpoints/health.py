"""
Health Check Endpoint

GET /api/health always answers 200 while the process is alive. Database
trouble shows up as ``status: degraded`` in the body rather than as an
HTTP error, so a monitor can tell "process down" apart from "dependency down".
Only an unexpected failure inside the check itself returns 500 / ``down``.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from datetime import datetime
from typing import Any, Dict, Optional
import os
import platform
import time

from reportverse.core.config import settings
from reportverse.core.database import get_connection_manager
from reportverse.core.logging_config import logger


router = APIRouter(tags=["Health Checks"])

PROCESS_STARTED_AT = time.time()


async def check_database() -> Dict[str, Any]:
    """Ping the database through the connection manager"""
    manager = get_connection_manager()
    latency = await manager.ping()
    return {
        "state": manager.state.value,
        "connected": manager.is_connected,
        "host": manager.host,
        "name": manager.database_name,
        "responsive": latency is not None,
        "latencyMs": latency,
    }


def memory_info() -> Optional[Dict[str, Any]]:
    """Physical memory from sysconf; None where the platform does not expose it"""
    try:
        page_size = os.sysconf("SC_PAGE_SIZE")
        total = os.sysconf("SC_PHYS_PAGES") * page_size
        free = os.sysconf("SC_AVPHYS_PAGES") * page_size
    except (ValueError, OSError, AttributeError):
        return None
    return {
        "free": free,
        "total": total,
        "usedPercent": round((1 - free / total) * 100, 2) if total else None,
    }


def load_average() -> Optional[list]:
    try:
        return [round(value, 2) for value in os.getloadavg()]
    except (OSError, AttributeError):
        return None


def system_info() -> Dict[str, Any]:
    return {
        "uptime": round(time.time() - PROCESS_STARTED_AT, 2),
        "platform": platform.system(),
        "python": platform.python_version(),
        "memory": memory_info(),
        "cpu": {
            "count": os.cpu_count(),
            "loadAverage": load_average(),
        },
    }


@router.get("/health")
async def health():
    try:
        database = await check_database()
        return {
            "status": "up" if database["responsive"] else "degraded",
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT,
            "database": database,
            "system": system_info(),
        }
    except Exception as e:
        logger.log_error_with_context(e, "health check")
        body = {
            "status": "down",
            "timestamp": datetime.utcnow().isoformat() + "Z",
        }
        if not settings.is_production():
            body["error"] = str(e)
        return JSONResponse(status_code=500, content=body)
