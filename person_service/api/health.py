"""
Health and readiness API endpoints
"""

import asyncio
import time
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from person_service.core.config import config
from person_service.core.logger import logger
from person_service.db.mongodb import db
from person_service.messaging.broker import connection

router = APIRouter()

# Track service start time
start_time = time.time()


@router.get("/health")
def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "service": config.service_name,
        "timestamp": datetime.now().isoformat(),
        "version": config.service_version,
    }


@router.get("/health/live")
def liveness_check():
    """Liveness check - the app is running"""
    return {
        "status": "alive",
        "service": config.service_name,
        "timestamp": datetime.now().isoformat(),
        "uptime": time.time() - start_time,
    }


@router.get("/health/ready")
async def readiness_check(request: Request):
    """Readiness check - database, broker and in-process consumer are usable"""
    checks = await perform_health_checks(getattr(request.app.state, "consumer_task", None))
    failed_checks = [check for check in checks if check["status"] != "healthy"]

    if not failed_checks:
        return {
            "status": "ready",
            "service": config.service_name,
            "timestamp": datetime.now().isoformat(),
            "checks": checks,
        }

    logger.warning(
        f"Readiness check failed - {len(failed_checks)} checks failed",
        metadata={
            "failed_checks": [check["name"] for check in failed_checks],
            "event": "readiness_check_failed"
        }
    )
    return JSONResponse(
        status_code=503,
        content={
            "status": "not ready",
            "service": config.service_name,
            "timestamp": datetime.now().isoformat(),
            "checks": checks,
            "errors": [f"{check['name']}: {check.get('error', 'Unknown error')}" for check in failed_checks],
        },
    )


async def perform_health_checks(consumer_task: Optional[asyncio.Task] = None) -> List[Dict[str, Any]]:
    """Run all dependency checks concurrently"""
    pending = [check_database_health(), check_message_broker_health()]
    if consumer_task is not None:
        pending.append(check_consumer_health(consumer_task))
    results = await asyncio.gather(*pending, return_exceptions=True)

    checks = []
    for result in results:
        if isinstance(result, Exception):
            checks.append({
                "name": "unknown_check",
                "status": "unhealthy",
                "error": str(result),
            })
        else:
            checks.append(result)
    return checks


async def check_database_health() -> Dict[str, Any]:
    """Ping MongoDB"""
    if db.client is None:
        return {"name": "database", "status": "unhealthy", "error": "Not connected"}

    started = time.time()
    try:
        await asyncio.wait_for(db.client.admin.command("ping"), timeout=2.0)
    except Exception as e:
        return {"name": "database", "status": "unhealthy", "error": str(e)}

    return {
        "name": "database",
        "status": "healthy",
        "response_time_ms": round((time.time() - started) * 1000, 2),
    }


async def check_message_broker_health() -> Dict[str, Any]:
    """Check the broker connection"""
    broker = connection.broker
    if broker is None or not broker.is_healthy():
        return {"name": "message_broker", "status": "unhealthy", "error": "Not connected"}

    return {
        "name": "message_broker",
        "status": "healthy",
        "stats": await broker.get_stats(),
    }


async def check_consumer_health(task: asyncio.Task) -> Dict[str, Any]:
    """The in-process consumer must still be running"""
    if task.done():
        return {"name": "consumer", "status": "unhealthy", "error": "Consumer stopped"}
    return {"name": "consumer", "status": "healthy"}
