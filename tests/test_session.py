import pytest

from web_scraper_tool.errors import EngineUnavailable
from web_scraper_tool.models import EngineKind
from web_scraper_tool.session import SessionManager

from conftest import FakePage, SessionLedger


@pytest.fixture
def manager(ledger: SessionLedger, session_factory) -> SessionManager:
    return SessionManager(session_factory(FakePage()), default_engine=EngineKind.CHROMIUM)


def test_scope_releases_session_exactly_once(manager: SessionManager, ledger: SessionLedger):
    with manager.session("webkit") as session:
        assert session.engine is EngineKind.WEBKIT
        assert manager.active_sessions == 1

    assert manager.active_sessions == 0
    assert ledger.started == 1
    assert ledger.stopped == 1


def test_scope_releases_session_when_body_raises(manager: SessionManager, ledger: SessionLedger):
    with pytest.raises(ZeroDivisionError):
        with manager.session():
            1 / 0

    assert ledger.live == 0
    assert manager.active_sessions == 0


def test_release_is_idempotent(manager: SessionManager, ledger: SessionLedger):
    session = manager.acquire()
    manager.release(session)
    manager.release(session)

    assert ledger.stopped == 1


def test_release_failure_is_logged_not_raised(
    manager: SessionManager,
    ledger: SessionLedger,
    caplog: pytest.LogCaptureFixture,
):
    ledger.fail_stop = True
    with manager.session():
        pass

    assert manager.active_sessions == 0
    assert "Failed to stop chromium browser session" in caplog.text


def test_default_engine_applies_when_unspecified(manager: SessionManager, ledger: SessionLedger):
    with manager.session(None):
        pass

    assert ledger.engines == [EngineKind.CHROMIUM]


def test_unknown_engine_never_creates_a_session(manager: SessionManager, ledger: SessionLedger):
    with pytest.raises(EngineUnavailable):
        manager.acquire("opera")

    assert ledger.created == 0


def test_start_failure_becomes_engine_unavailable(manager: SessionManager, ledger: SessionLedger):
    ledger.fail_start = True

    with pytest.raises(EngineUnavailable, match="browser executable missing"):
        manager.acquire("firefox")

    assert manager.active_sessions == 0
    assert ledger.stopped == 1
