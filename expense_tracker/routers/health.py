"""Operational endpoints for the hosting platform.

Endpoints:
    - GET /api/ping             -> liveness: static pong + uptime
    - GET /api/health/detailed  -> component checks plus process metrics;
                                   200 healthy, 207 degraded, 503 unhealthy
    - GET|POST /api/test        -> request echo used by deployment smoke checks

None of these touch the ledger beyond reading it.
"""

from __future__ import annotations

import asyncio
import logging
import os
import platform
import sys
import tempfile
import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from expense_tracker.services.currency import convert_currency

router = APIRouter(prefix="/api", tags=["health"])
logger = logging.getLogger("expense_tracker.health")

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _uptime(request: Request) -> float:
    started = getattr(request.app.state, "started_at", None)
    if started is None:
        return 0.0
    return round(time.monotonic() - started, 3)


# Component checks ---------------------------------------------------
async def check_ledger(request: Request) -> Dict[str, Any]:
    start = time.perf_counter()
    try:
        state = request.app.state.ledger.state
        return {
            "status": "healthy",
            "responseTime": round((time.perf_counter() - start) * 1000, 3),
            "details": f"{len(state.expenses)} expense(s), {len(state.wallets)} wallet(s) in memory",
        }
    except Exception as e:
        logger.exception("ledger check failed")
        return {
            "status": "unhealthy",
            "responseTime": round((time.perf_counter() - start) * 1000, 3),
            "details": str(e) or "ledger unavailable",
        }


async def check_currency_table() -> Dict[str, Any]:
    try:
        round_trip = convert_currency(convert_currency(100.0, "USD", "KHR"), "KHR", "USD")
        if abs(round_trip - 100.0) > 1e-9:
            return {"status": "unhealthy", "details": "currency round trip drifted"}
        return {"status": "healthy", "details": "currency table consistent"}
    except Exception as e:
        logger.exception("currency table check failed")
        return {"status": "unhealthy", "details": str(e)}


async def check_file_system() -> Dict[str, Any]:
    path = tempfile.gettempdir()
    if os.access(path, os.R_OK | os.W_OK):
        return {"status": "healthy", "details": "File system accessible"}
    return {"status": "unhealthy", "details": f"{path} is not writable"}


def _memory() -> Dict[str, Any]:
    if sys.platform == "win32":
        return {"maxRssMb": None}
    import resource

    rss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # Linux reports KiB, macOS bytes
    divisor = 1024 * 1024 if sys.platform == "darwin" else 1024
    return {"maxRssMb": round(rss / divisor, 2)}


def _system() -> Dict[str, Any]:
    load = os.getloadavg() if hasattr(os, "getloadavg") else (0.0, 0.0, 0.0)
    return {
        "memory": _memory(),
        "cpu": {
            "loadAverage": list(load),
            "platform": sys.platform,
            "arch": platform.machine(),
        },
        "python": {"version": platform.python_version(), "pid": os.getpid()},
    }


# Routes -------------------------------------------------------------
@router.get("/ping", summary="Liveness probe")
async def ping(request: Request):
    return JSONResponse(
        {"message": "pong", "timestamp": _now_iso(), "uptime": _uptime(request)},
        headers={"Cache-Control": NO_CACHE_HEADERS["Cache-Control"]},
    )


@router.get("/health/detailed", summary="Component checks and process metrics")
async def detailed_health(request: Request):
    settings = request.app.state.settings
    try:
        start = time.perf_counter()
        ledger_check, currency_check, fs_check = await asyncio.gather(
            check_ledger(request), check_currency_table(), check_file_system()
        )
        checks = {
            "ledger": ledger_check,
            "currencyTable": currency_check,
            "fileSystem": fs_check,
        }
        overall = (
            "healthy"
            if all(c["status"] == "healthy" for c in checks.values())
            else "degraded"
        )
        payload = {
            "status": overall,
            "timestamp": _now_iso(),
            "responseTime": round((time.perf_counter() - start) * 1000, 3),
            "uptime": _uptime(request),
            "environment": settings.environment,
            "version": settings.version,
            "checks": checks,
            "system": _system(),
            "deployment": {
                "region": settings.deployment_region,
                "deploymentId": settings.deployment_id,
                "gitCommit": settings.git_commit or "unknown",
            },
        }
        # 207 Multi-Status signals a degraded but serving instance
        status_code = 200 if overall == "healthy" else 207
        return JSONResponse(payload, status_code=status_code, headers=NO_CACHE_HEADERS)
    except Exception as e:
        logger.exception("detailed health check failed")
        return JSONResponse(
            {
                "status": "unhealthy",
                "timestamp": _now_iso(),
                "error": str(e) or "Unknown error",
                "uptime": _uptime(request),
            },
            status_code=503,
            headers=NO_CACHE_HEADERS,
        )


@router.get("/test", summary="API smoke check")
async def api_test_get():
    return {
        "message": "API is working correctly",
        "timestamp": _now_iso(),
        "method": "GET",
        "status": "success",
    }


@router.post("/test", summary="Echo a JSON body")
async def api_test_post(request: Request):
    try:
        body = await request.json()
    except ValueError as e:
        return JSONResponse(
            {
                "message": "Failed to parse request body",
                "timestamp": _now_iso(),
                "method": "POST",
                "error": str(e),
                "status": "error",
            },
            status_code=400,
        )
    return {
        "message": "POST request received successfully",
        "timestamp": _now_iso(),
        "method": "POST",
        "receivedData": body,
        "status": "success",
    }
