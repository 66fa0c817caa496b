import pytest

from niri_launcher.discovery import Aggregator
from niri_launcher.entry import Entry, OpenType
from niri_launcher.errors import IPCConnectionError, LauncherError, StorageError

from tests.conftest import FakeClient

APPS = [Entry("Firefox", "firefox", "firefox"), Entry("htop", "htop", "htop", OpenType.TERMINAL)]


class StubCache:
    def __init__(self, entries=None, error=None):
        self.entries = entries or []
        self.error = error

    def get_desktop_entries(self):
        if self.error:
            raise self.error
        return list(self.entries)


def test_desktop_entries_come_first():
    client = FakeClient(windows=[{"id": 9, "title": "Mail", "app_id": "thunderbird"}])
    entries = Aggregator(StubCache(APPS), client).get_entries()
    assert entries[:2] == APPS
    assert entries[2].open_type is OpenType.WINDOW
    assert entries[2].exec == "9"


def test_window_failure_keeps_desktop_entries():
    aggregator = Aggregator(StubCache(APPS), FakeClient(error=IPCConnectionError("no niri")))
    assert aggregator.get_entries() == APPS
    assert len(aggregator.errors) == 1
    assert isinstance(aggregator.errors[0], IPCConnectionError)


def test_desktop_failure_keeps_windows():
    client = FakeClient(windows=[{"id": 9, "title": "Mail", "app_id": "thunderbird"}])
    aggregator = Aggregator(StubCache(error=StorageError("disk on fire")), client)
    assert [e.name for e in aggregator.get_entries()] == ["Mail"]
    assert isinstance(aggregator.errors[0], StorageError)


def test_both_sources_failing_raises():
    aggregator = Aggregator(StubCache(error=StorageError("a")), FakeClient(error=IPCConnectionError("b")))
    with pytest.raises(LauncherError):
        aggregator.get_entries()


def test_errors_reset_between_calls():
    client = FakeClient(error=IPCConnectionError("no niri"))
    aggregator = Aggregator(StubCache(APPS), client)
    aggregator.get_entries()
    client.error = None
    aggregator.get_entries()
    assert aggregator.errors == []
