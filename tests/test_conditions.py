import pytest

from web_scraper_tool.conditions import resolve
from web_scraper_tool.errors import ElementNotFound
from web_scraper_tool.models import DurationWait, LocatorWait

from conftest import FakeElement, FakePage


def test_duration_wait_ignores_page_contents():
    page = FakePage()

    elapsed = resolve(page, DurationWait(milliseconds=2000), timeout_ms=10)

    assert page.waited == [2000]
    assert elapsed >= 0
    assert not any(call[0] == "wait_for_selector" for call in page.calls)


def test_locator_wait_uses_requested_deadline():
    page = FakePage({"#ready": FakeElement(text="ok")})

    resolve(page, LocatorWait(selector="#ready"), timeout_ms=1500)

    assert ("wait_for_selector", "#ready", 1500) in page.calls


def test_locator_wait_times_out_as_element_not_found():
    page = FakePage()

    with pytest.raises(ElementNotFound) as exc_info:
        resolve(page, LocatorWait(selector="#never"), timeout_ms=250)

    error = exc_info.value
    assert error.selector == "#never"
    assert error.timeout_ms == 250
    assert error.elapsed_ms is not None
    assert "#never" in str(error)
