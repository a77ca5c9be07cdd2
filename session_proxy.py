"""Session proxy for wrapping Streamlit's session state mapping."""
from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any

from app_constants import PAGE_HOME, PAGES


class GeoPictureSessionProxy:
    """Lightweight view over a Streamlit ``session_state`` mapping."""

    def __init__(self, backing: MutableMapping[str, Any]):
        self._backing = backing

    # Basic mapping compatibility -------------------------------------------------
    def __getitem__(self, key: str) -> Any:
        return self._backing[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._backing[key] = value

    def __contains__(self, key: object) -> bool:  # pragma: no cover - mapping helper
        return key in self._backing

    def get(self, key: str, default: Any = None) -> Any:
        return self._backing.get(key, default)

    def setdefault(self, key: str, default: Any) -> Any:
        return self._backing.setdefault(key, default)

    def pop(self, key: str, default: Any | None = None) -> Any:
        return self._backing.pop(key, default)

    # Convenience accessors -------------------------------------------------------
    @property
    def page(self) -> str:
        page = self._backing.get("page")
        return page if page in PAGES else PAGE_HOME

    @page.setter
    def page(self, value: str) -> None:
        if value not in PAGES:
            raise ValueError(f"Unknown page: {value}")
        self._backing["page"] = value

    @property
    def alerts(self) -> list[dict[str, Any]]:
        queue = self._backing.get("pending_alerts")
        if not isinstance(queue, list):
            queue = []
            self._backing["pending_alerts"] = queue
        return queue

    def push_alert(self, alert: dict[str, Any]) -> None:
        self.alerts.append(alert)

    def pop_alert(self) -> dict[str, Any] | None:
        queue = self.alerts
        return queue.pop(0) if queue else None


__all__ = ["GeoPictureSessionProxy"]
