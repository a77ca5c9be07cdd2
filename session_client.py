"""Login state for the single Drupal session used by the app."""
from __future__ import annotations

import logging

from app_constants import EVENT_LOGIN, EVENT_LOGOUT
from capabilities import Notifier
from drupal_client import ANONYMOUS_USER, DrupalApiError, DrupalClient, DrupalSession, DrupalUser
from events import EventDispatcher

logger = logging.getLogger(__name__)


class SessionClient:
    """Track connect/login/logout and raise session events.

    ``drupal_login`` handlers receive the ``DrupalUser``; ``drupal_logout``
    handlers receive no arguments.
    """

    def __init__(self, client: DrupalClient, events: EventDispatcher, notifier: Notifier) -> None:
        self.client = client
        self.events = events
        self.notifier = notifier
        self.session: DrupalSession | None = None
        self.last_error: str | None = None

    @property
    def current_user(self) -> DrupalUser:
        return self.session.user if self.session else ANONYMOUS_USER

    def is_authenticated(self) -> bool:
        return self.current_user.uid != 0

    def initialize(self, base_url: str | None = None) -> DrupalSession | None:
        """Connect anonymously (or resume) against ``base_url``.

        ``None`` keeps the current endpoint; an empty string clears it. The
        session held for the previous endpoint is dropped before connecting.
        """

        if base_url is not None:
            self.client.base_url = base_url
        self.reset()
        try:
            session = self.client.connect()
        except DrupalApiError as exc:
            self.last_error = str(exc)
            logger.warning("Drupal connect failed: %s", exc)
            return None
        self.last_error = None
        self.session = session
        if session.is_authenticated:
            logger.info("Resumed Drupal session for %s", session.user.name)
            self.events.emit(EVENT_LOGIN, session.user)
        return session

    def reset(self) -> None:
        """Forget the current session without contacting the backend."""

        user = self.current_user
        self.session = None
        self.client.session = None
        if user.uid != 0:
            logger.info("Dropped Drupal session for %s", user.name)
            self.events.emit(EVENT_LOGOUT)

    def login(self, name: str, password: str) -> DrupalSession | None:
        try:
            session = self.client.login(name, password)
        except DrupalApiError as exc:
            self.last_error = str(exc)
            self.notifier.alert(str(exc), "Drupal")
            return None
        self.last_error = None
        self.session = session
        logger.info("Logged in to Drupal as %s (uid %s)", session.user.name, session.user.uid)
        self.events.emit(EVENT_LOGIN, session.user)
        return session

    def logout(self) -> None:
        """Log out; local state is cleared whatever the backend answers."""

        try:
            self.client.logout()
        except DrupalApiError as exc:
            logger.warning("Drupal logout failed: %s", exc)
        self.session = None
        try:
            self.session = self.client.connect()
        except DrupalApiError as exc:
            logger.warning("Drupal reconnect after logout failed: %s", exc)
        self.events.emit(EVENT_LOGOUT)


__all__ = ["SessionClient"]
