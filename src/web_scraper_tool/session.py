"""Acquisition and guaranteed release of per-request browser sessions."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Union

from .browser.base import BrowserSession
from .errors import EngineUnavailable
from .models import EngineKind

LOGGER = logging.getLogger(__name__)

SessionFactory = Callable[[EngineKind], BrowserSession]


class SessionManager:
    """Open one browser session per request and always close it again.

    Sessions are never pooled or shared: every :meth:`acquire` launches a new
    browser through ``factory`` and the caller owns it until :meth:`release`.
    """

    def __init__(
        self,
        factory: SessionFactory,
        *,
        default_engine: EngineKind = EngineKind.CHROMIUM,
    ) -> None:
        self._factory = factory
        self._default_engine = default_engine
        self._lock = threading.Lock()
        self._live: set[BrowserSession] = set()

    @property
    def active_sessions(self) -> int:
        with self._lock:
            return len(self._live)

    def resolve_engine(self, engine: Union[str, EngineKind, None]) -> EngineKind:
        return EngineKind.parse(engine, self._default_engine)

    def acquire(self, engine: Union[str, EngineKind, None] = None) -> BrowserSession:
        kind = self.resolve_engine(engine)
        session = self._factory(kind)
        try:
            session.start()
        except EngineUnavailable:
            raise
        except Exception as exc:
            # Whatever was partially started must not leak.
            self._stop_quietly(session)
            raise EngineUnavailable(f"Could not start {kind.value} browser: {exc}") from exc
        with self._lock:
            self._live.add(session)
        LOGGER.debug("Acquired %s session (%d active)", kind.value, self.active_sessions)
        return session

    def release(self, session: BrowserSession) -> None:
        """Stop ``session``; repeated calls and faulted sessions are tolerated."""

        with self._lock:
            if session not in self._live:
                return
            self._live.discard(session)
        self._stop_quietly(session)
        LOGGER.debug("Released %s session (%d active)", session.engine.value, self.active_sessions)

    @contextmanager
    def session(self, engine: Union[str, EngineKind, None] = None) -> Iterator[BrowserSession]:
        session = self.acquire(engine)
        try:
            yield session
        finally:
            self.release(session)

    @staticmethod
    def _stop_quietly(session: BrowserSession) -> None:
        try:
            session.stop()
        except Exception:
            LOGGER.exception("Failed to stop %s browser session", session.engine.value)

