"""Client address of the current Streamlit request, reduced for activity logs."""
from __future__ import annotations

import ipaddress
import logging

import streamlit as st

logger = logging.getLogger(__name__)

# Checked before the socket address; the first hop of a proxy chain wins.
_FORWARDING_HEADERS = ("X-Forwarded-For", "X-Real-IP", "CF-Connecting-IP")


def request_client_ip() -> str | None:
    """Return the visitor address of the running script, if any."""

    headers = st.context.headers
    for name in _FORWARDING_HEADERS:
        value = headers.get(name)
        if value:
            return value.split(",")[0].strip()
    return st.context.ip_address


def mask_ip(address: str | None) -> str | None:
    """Keep the network part of ``address``: two IPv4 octets or three IPv6 groups."""

    text = (address or "").strip().split("%", 1)[0]
    if not text:
        return None
    try:
        ip = ipaddress.ip_address(text)
    except ValueError:
        logger.debug("Unparseable client address %r", address)
        return "unknown"
    if ip.version == 4:
        return ".".join(str(ip).split(".")[:2]) + ".*.*"
    groups = [group.lstrip("0") or "0" for group in ip.exploded.split(":")[:3]]
    return ":".join(groups) + ":*:*"


__all__ = ["mask_ip", "request_client_ip"]
