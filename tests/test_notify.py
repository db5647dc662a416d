import asyncio

from tabclip.config import load_config
from tabclip.notify import DesktopNotificationCenter, Notifier, ResultReporter, _applescript_escape
from tests.fakes import FakeNotificationCenter


def _notify(center, **kwargs):
    kwargs.setdefault("title", "Copied")
    kwargs.setdefault("message", "hello")
    kwargs.setdefault("timeout", 0.01)
    return asyncio.run(Notifier(center).notify(**kwargs))


def test_timeout_clears_notification_and_removes_listeners():
    center = FakeNotificationCenter()
    assert _notify(center) is False
    assert center.created == [("Copied", "hello")]
    assert center.cleared == ["n1"]
    assert center.opened == []
    assert center.clicked_listeners == []
    assert center.closed_listeners == []


def test_click_opens_url():
    center = FakeNotificationCenter(click=True)
    assert _notify(center, url="https://example.com", timeout=10) is True
    assert center.cleared == ["n1"]
    assert center.opened == ["https://example.com"]


def test_click_without_url_opens_nothing():
    center = FakeNotificationCenter(click=True)
    assert _notify(center, timeout=10) is True
    assert center.opened == []


def test_close_resolves_without_click():
    center = FakeNotificationCenter(close=True)
    assert _notify(center, url="https://example.com", timeout=10) is False
    assert center.opened == []
    assert center.cleared == ["n1"]


def test_negative_timeout_clears_immediately():
    center = FakeNotificationCenter()
    assert _notify(center, timeout=-1) is False
    assert center.cleared == ["n1"]


def test_reporter_uses_multiple_message_for_several_tabs():
    center = FakeNotificationCenter()
    reporter = ResultReporter(Notifier(center), load_config({"notificationTimeout": 0}))
    asyncio.run(reporter.copied(3, "a\nb\nc\n"))
    assert center.created == [("Copied 3 tabs", "3 tabs copied:\na\nb\nc\n")]


def test_reporter_failure_message():
    center = FakeNotificationCenter()
    reporter = ResultReporter(Notifier(center), load_config({"notificationTimeout": 0}))
    asyncio.run(reporter.failed(RuntimeError("denied")))
    assert center.created == [("Failed to copy", "Could not write to the clipboard: denied")]


def test_reporter_without_notifier_is_disabled():
    reporter = ResultReporter(None, load_config())
    assert reporter.enabled is False
    assert asyncio.run(reporter.copied(1, "x")) is False


def test_applescript_escape():
    assert _applescript_escape('say "hi" \\ bye') == 'say \\"hi\\" \\\\ bye'


def test_desktop_center_is_quiet_under_pytest(monkeypatch):
    center = DesktopNotificationCenter()

    def forbidden(*_args, **_kwargs):
        raise AssertionError("notification displayed during tests")

    monkeypatch.setattr(center, "_display", forbidden)
    first = asyncio.run(center.create("t", "m"))
    second = asyncio.run(center.create("t", "m"))
    assert first != second
