"""
Structured JSON-lines logging.

Every line carries: ts, level, message, request_id, event, module.
Lines go to stdout so they can be captured by uvicorn log redirection.
"""
from __future__ import annotations

import datetime
import json
import logging
import os
from typing import Any, Dict, Optional

_log = logging.getLogger("temple_api")
if not _log.handlers:
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))

_LEVELS = {"debug": 10, "info": 20, "audit": 20, "warning": 30, "error": 40}


def _now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def _enabled(level: str) -> bool:
    threshold = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
    if not isinstance(threshold, int):
        threshold = logging.INFO
    return _LEVELS.get(level.lower(), logging.INFO) >= threshold


def emit(level: str, event: str, message: str, request_id: Optional[str], module: str, **extra: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "ts": _now_iso(),
        "level": level.lower(),
        "message": message,
        "request_id": request_id,
        "event": event,
        "module": module,
    }
    payload.update(extra)
    if _enabled(level):
        print(json.dumps(payload, ensure_ascii=False, default=str), flush=True)
    return payload
