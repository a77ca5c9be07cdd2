"""Telemetry helpers that record user activity as structured log records."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Sequence

from utils.network import mask_ip, request_client_ip

ACTIVITY_LOGGER_NAME = "geopicture.activity"

_LOGGER = logging.getLogger(ACTIVITY_LOGGER_NAME)


def _normalize_string(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _normalize_result(result: str) -> str:
    normalized = _normalize_string(result).lower()
    if normalized in {"success", "fail"}:
        return normalized
    return "success" if normalized not in {"", "failure", "error"} else "fail"


def emit_log_event(
    *,
    type: str,
    action: str,
    result: str,
    params: Sequence[str | None] | None = None,
    client_ip: str | None = None,
    user_name: str | None = None,
) -> dict[str, Any]:
    """Log one activity event and return the recorded payload.

    ``params`` is padded or cut to five positional values. The client IP is
    taken from the Streamlit request headers when not given and is masked
    before it is logged.
    """

    values = list(params or [])[:5]
    values.extend([None] * (5 - len(values)))
    if client_ip is None:
        client_ip = request_client_ip()

    payload: dict[str, Any] = {
        "type": _normalize_string(type) or "unknown",
        "action": _normalize_string(action) or "unknown",
        "result": _normalize_result(result),
        "user_name": _normalize_string(user_name) or None,
        "client_ip": mask_ip(client_ip),
        "timestamp_iso": datetime.now(timezone.utc).isoformat(),
    }
    for index, value in enumerate(values, start=1):
        payload[f"param{index}"] = _normalize_string(value) or None

    level = logging.INFO if payload["result"] == "success" else logging.WARNING
    _LOGGER.log(level, "%s %s %s", payload["type"], payload["action"], payload["result"], extra={"activity": payload})
    return payload


__all__ = ["ACTIVITY_LOGGER_NAME", "emit_log_event"]
